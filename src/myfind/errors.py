from __future__ import annotations


class FindError(Exception):
    """Base class for every error that ends a scan."""


class ArgumentError(FindError, ValueError):
    pass


class AccessDenied(FindError):
    """Raised for permission failures; the scanner reports these and moves on."""

    def __init__(self, operation: str, path: str) -> None:
        self.operation = operation
        self.path = path
        super().__init__(f'{operation}("{path}") failed: permission denied')


class OtherIOError(FindError):
    def __init__(self, operation: str, path: str, errno: int | None, strerror: str | None) -> None:
        self.operation = operation
        self.path = path
        self.errno = errno
        self.strerror = strerror
        super().__init__(f"{operation}(\"{path}\") failed: {strerror or 'unknown error'}")


class IdentityResolutionError(FindError):
    pass


class PathLengthExceeded(FindError):
    def __init__(self, path: str, limit: int) -> None:
        self.path = path
        self.limit = limit
        super().__init__(f"Maximum path length exceeded ({limit}): {path[:64]}...")
