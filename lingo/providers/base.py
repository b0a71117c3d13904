"""
Provider base - Shared error type for external collaborators.
"""


class ProviderError(Exception):
    """An external service (image lookup, search, storage) failed."""
