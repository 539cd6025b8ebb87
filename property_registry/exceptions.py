"""Exception hierarchy for failures that are not business-rule results.

NotFound and Conflict outcomes are returned as ``ApiResponse`` failures by the
services; the exceptions here propagate to the web boundary instead.
"""


class PropertyRegistryError(Exception):
    """Base exception for all registry errors."""


class TransientStoreError(PropertyRegistryError):
    """The database was unreachable or timed out; the operation was rolled back.

    Safe to retry.
    """


class ImmutableTraceError(PropertyRegistryError):
    """Raised when a flush would update or delete a property trace row."""
