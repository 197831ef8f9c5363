"""
Error taxonomy for aioessentials.

Every failure of an operation is surfaced through the awaitable it returned.
The original exception is always kept as ``__cause__`` (and as ``error``) so
callers can inspect what actually went wrong. Nothing here is ever retried
or swallowed.
"""

from typing import Any, Optional


class EssentialsError(Exception):
    """Base class of all errors raised by aioessentials."""


class UnsupportedContainerKind(EssentialsError, TypeError):
    """Raised when a value matches none of the supported container shapes.

    This is raised synchronously by the operation call itself, before any
    callback has been invoked.
    """

    def __init__(self, container: Any):
        self.container_type = type(container)
        super().__init__(
            f"non-iterable collection rejected: {self.container_type.__name__}"
        )


class _WrappedFailure(EssentialsError):
    """Failure wrapping another error raised while processing one element."""

    description = "operation failed"

    def __init__(self, error: Any, key: Any = None):
        self.error = error
        self.key = key
        super().__init__(f"{self.description} at {key!r}: {error!r}")


class ElementResolutionFailure(_WrappedFailure):
    """A pending element of the container failed to resolve."""

    description = "pending element failed to resolve"


class CallbackFailure(_WrappedFailure):
    """The user callback raised or its returned awaitable failed."""

    description = "callback failed"


class SourceFailure(EssentialsError):
    """A push source signalled an error while being processed."""

    def __init__(self, error: Any, index: Optional[int] = None):
        self.error = error
        self.index = index
        super().__init__(f"source failed after {index} unit(s): {error!r}")


class AdaptedCallFailure(EssentialsError):
    """A promisified function reported an error through its callback.

    The reported error may be any truthy value, not only an exception.
    """

    def __init__(self, error: Any):
        self.error = error
        super().__init__(f"adapted call failed: {error!r}")


def chain(failure: EssentialsError, error: Any) -> EssentialsError:
    """Attach ``error`` as the cause of ``failure`` when it is an exception.

    Used where the failure is handed to a future instead of being raised,
    so ``raise ... from ...`` is not available.

    Args:
        failure: The taxonomy error to decorate
        error: The original error value

    Returns:
        The decorated failure
    """
    if isinstance(error, BaseException):
        failure.__cause__ = error
    return failure
