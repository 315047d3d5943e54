"""Application layer – scheduling use cases."""
