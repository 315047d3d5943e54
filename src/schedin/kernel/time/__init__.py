"""Kernel time – Clock port + implementations."""
from schedin.kernel.time.clock import DEFAULT_CLOCK, Clock, FrozenClock, SystemClock

__all__ = ["DEFAULT_CLOCK", "Clock", "FrozenClock", "SystemClock"]
