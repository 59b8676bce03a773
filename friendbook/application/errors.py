"""Errors raised by use cases and translated into HTTP responses by the API."""


class NotFoundError(ValueError):
    """The requested resource does not exist."""


class PermissionDeniedError(ValueError):
    """The caller is not allowed to act on the resource."""


class ConflictError(ValueError):
    """The action conflicts with the current state of the resource."""


__all__ = ["ConflictError", "NotFoundError", "PermissionDeniedError"]
