"""Adapters – storage implementations of the application ports."""
