"""Errors raised across the application boundary."""


class StoreError(RuntimeError):
    """The contact store failed to read or write. Not retried here."""
