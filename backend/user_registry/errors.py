"""
Error taxonomy for the user registry.

Two tiers:
- Storage errors are raised by the persistence gateway and describe what went
  wrong in the store (constraint conflict, any other fault).
- Service errors are what front ends see: bad input, a missing record, or an
  opaque failed operation that wraps the storage error for diagnostics.
"""

from typing import Optional


class StorageError(Exception):
    """Base class for failures raised by the persistence gateway"""

    pass


class ConstraintViolation(StorageError):
    """The store rejected a write because of a constraint (e.g. duplicate email)"""

    pass


class StorageFault(StorageError):
    """Any other storage failure; the unit of work was rolled back"""

    pass


class RowNotFound(StorageFault):
    """The row targeted by an update or delete was not present when loaded"""

    def __init__(self, message: str, user_id: Optional[int] = None):
        super().__init__(message)
        self.user_id = user_id


class ServiceError(Exception):
    """Base class for errors raised by the application service"""

    pass


class InvalidInput(ServiceError):
    """Input failed validation; nothing reached the store"""

    pass


class RecordNotFound(ServiceError):
    """The requested record does not exist. An expected outcome, not a fault."""

    pass


class OperationFailed(ServiceError):
    """A storage-layer failure, normalised for callers"""

    def __init__(self, message: str, cause: Optional[StorageError] = None):
        super().__init__(message)
        self.cause = cause
