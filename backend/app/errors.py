class StoreError(Exception):
    """The backing log store rejected or failed a call."""


class ValidationError(ValueError):
    """Input rejected before reaching the store."""
