"""Custom exceptions for the observed-collections library.

This module defines the error types raised by the library itself, so that
callers can tell them apart from errors raised by the wrapped container or by
their own handlers and listeners.

Errors raised by the wrapped container (for example a `TypeError` when adding
an unhashable element to a `set`) are never wrapped or translated: they reach
the caller unchanged.
"""

from typing import Any, Optional


class ObservedError(Exception):
    """Base class for all errors explicitly raised by the observed-collections library.

    Catching this exception is a way to handle any error raised by the library
    itself, distinguishing it from general Python errors or errors raised by
    the wrapped container.
    """
    pass


class InvalidArgumentError(ObservedError, ValueError):
    """Raised when a required argument is missing, most commonly the container.

    Example:
        >>> import observed
        >>> observed.wrap(None)
        Traceback (most recent call last):
        ...
        observed.exceptions.InvalidArgumentError: Collection must not be None
    """
    pass


class UnsupportedListenerError(ObservedError, ValueError):
    """Raised when no resolution strategy accepts the listener given to `wrap()`.

    The listener passed to `observed.wrap(container, listener)` is resolved to
    a handler by a `HandlerRegistry`. If the listener is not a
    `ModificationHandler` and none of the registered strategies recognise its
    shape, this error is raised and no observed collection is created.

    Attributes:
        listener (Any): The listener value that could not be resolved.
    """
    def __init__(self, listener: Any, message: Optional[str] = None):
        self.listener = listener
        if message is None:
            message = (
                f"No handler could be resolved for listener of type "
                f"'{type(listener).__name__}': {listener!r}"
            )
        super().__init__(message)


class IllegalStateError(ObservedError, RuntimeError):
    """Raised when an operation is called at a point where it is not allowed.

    Two situations produce this error:

    *   `remove()` is called on an iterator before `next()` has produced an
        element, or twice in a row without an intervening `next()`.
    *   A handler that is already bound to one observed collection is bound
        to a different one.
    """
    pass


class ModificationVetoedError(ObservedError):
    """Raised by a pre-modification listener to veto a change.

    A `StandardHandler` catches this error when it is raised from a listener's
    `modifying(event)` method, logs it, and reports the veto to the observed
    collection. The operation then returns `False` and the container is left
    untouched. The error never reaches the caller of the collection method.

    Attributes:
        event (Optional[ModificationEvent]): The event describing the vetoed change.
        reason (Optional[str]): A short human-readable reason for the veto.

    Example:
        >>> class NoNegatives:
        ...     def modifying(self, event):
        ...         if event.obj is not None and event.obj < 0:
        ...             raise ModificationVetoedError(event, "negative values are not allowed")
    """
    def __init__(self, event: Any = None, reason: Optional[str] = None):
        self.event = event
        self.reason = reason
        message = "Modification vetoed"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    def __str__(self) -> str:
        """Provide a more informative string representation."""
        parts = [super().__str__()]
        if self.event is not None:
            parts.append(f"Event: {self.event!r}")
        return ". ".join(parts)
