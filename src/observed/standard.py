"""Provides the StandardHandler, the default handler for observed collections.

`StandardHandler` turns each hook call into an event object and passes it to
the listeners registered with it:

*   **Pre-modification listeners** are called before the change with a
    `PreModificationEvent`. Any of them can veto the change by raising
    `ModificationVetoedError`.
*   **Post-modification listeners** are called after the change with a
    `PostModificationEvent` describing the outcome.

A listener is either an object with `modifying(event)` and/or
`modified(event)` methods (see `ModificationListener`), or a plain callable
that takes the event. Each listener is registered with a `ModificationType`
mask and only hears about the types in its mask.

With no listeners registered, a `StandardHandler` allows every change and
does nothing else. This is the handler used by `observed.wrap(container)`.
"""

from typing import Any, Iterable, List, Optional, Tuple

from . import logger
from .config import HandlerConfig, get_handler_config
from .events import ModificationType, PostModificationEvent, PreModificationEvent
from .exceptions import ModificationVetoedError
from .handler import ModificationHandler


class ModificationListener:
    """Convenience base class for listeners that want both kinds of events.

    Subclass it and override one or both methods. Listeners do not have to
    inherit from this class: any object with a `modifying` and/or `modified`
    method is accepted (duck typing).

    Example:
        >>> class MaxSize(ModificationListener):
        ...     def __init__(self, limit):
        ...         self.limit = limit
        ...     def modifying(self, event):
        ...         if event.type is ModificationType.ADD and event.pre_size >= self.limit:
        ...             raise ModificationVetoedError(event, f"at most {self.limit} elements")
        >>> small = observed.wrap([], MaxSize(2))
    """

    def modifying(self, event: PreModificationEvent) -> None:
        """Called before a change. Raise `ModificationVetoedError` to veto it."""
        pass

    def modified(self, event: PostModificationEvent) -> None:
        """Called after a change has been made."""
        pass


def _has_method(listener: Any, name: str) -> bool:
    return callable(getattr(listener, name, None))


def is_listener(listener: Any) -> bool:
    """Checks whether `listener` has a shape a `StandardHandler` can register.

    Returns:
        bool: True for objects with a `modifying` or `modified` method and for
            plain callables.
    """
    return (
        _has_method(listener, "modifying")
        or _has_method(listener, "modified")
        or callable(listener)
    )


class StandardHandler(ModificationHandler):
    """Handler that fans each modification out to registered listeners.

    Args:
        listener (Optional[Any]): A listener to register straight away (see
            `add_listener()`). If `None`, the handler starts with no listeners.
        config (Optional[HandlerConfig]): Settings for this handler. If `None`,
            the process-wide default from `observed.get_handler_config()` is used.

    Example:
        >>> handler = StandardHandler()
        >>> numbers = observed.wrap([], handler)
        >>> handler.add_post_listener(print, ModificationType.ADD)
        >>> numbers.add(1)   # prints the PostModificationEvent
        True
    """

    def __init__(self, listener: Optional[Any] = None, config: Optional[HandlerConfig] = None):
        self._config: HandlerConfig = config if config is not None else get_handler_config()
        # (listener, mask) pairs, in registration order.
        self._pre_listeners: List[Tuple[Any, ModificationType]] = []
        self._post_listeners: List[Tuple[Any, ModificationType]] = []
        # Size recorded by the most recent pre hook, reported in the matching post event.
        self._pre_size = 0
        if listener is not None:
            self.add_listener(listener)

    @property
    def config(self) -> HandlerConfig:
        return self._config

    # --- Listener Management ---

    def add_listener(self, listener: Any, mask: ModificationType = ModificationType.ALL) -> None:
        """Registers a listener according to its shape.

        *   An object with a `modifying` method is registered as a
            pre-modification listener.
        *   An object with a `modified` method is registered as a
            post-modification listener.
        *   An object with both is registered as both.
        *   Any other callable is registered as a post-modification listener.

        Args:
            listener: The listener to register.
            mask (ModificationType): The modification types to be told about.

        Raises:
            TypeError: If the listener has none of the shapes above.
        """
        has_pre = _has_method(listener, "modifying")
        has_post = _has_method(listener, "modified")
        if has_pre:
            self.add_pre_listener(listener, mask)
        if has_post:
            self.add_post_listener(listener, mask)
        if has_pre or has_post:
            return
        if callable(listener):
            self.add_post_listener(listener, mask)
            return
        raise TypeError(
            f"Listener of type '{type(listener).__name__}' must be callable or define "
            f"a 'modifying' or 'modified' method."
        )

    def add_pre_listener(self, listener: Any, mask: ModificationType = ModificationType.ALL) -> None:
        """Registers a listener to be called before each matching modification.

        Args:
            listener: An object with a `modifying(event)` method, or a callable
                taking the event.
            mask (ModificationType): The modification types to be told about.
        """
        if not (_has_method(listener, "modifying") or callable(listener)):
            raise TypeError("Pre-modification listener must be callable or define 'modifying(event)'.")
        self._pre_listeners.append((listener, mask))
        logger.debug(f"Added pre-modification listener {listener!r} (mask: {mask}) to handler (id: {id(self)})")

    def add_post_listener(self, listener: Any, mask: ModificationType = ModificationType.ALL) -> None:
        """Registers a listener to be called after each matching modification.

        Args:
            listener: An object with a `modified(event)` method, or a callable
                taking the event.
            mask (ModificationType): The modification types to be told about.
        """
        if not (_has_method(listener, "modified") or callable(listener)):
            raise TypeError("Post-modification listener must be callable or define 'modified(event)'.")
        self._post_listeners.append((listener, mask))
        logger.debug(f"Added post-modification listener {listener!r} (mask: {mask}) to handler (id: {id(self)})")

    def remove_pre_listener(self, listener: Any) -> None:
        """Removes every registration of `listener` as a pre-modification listener.

        Does nothing if it is not registered.
        """
        self._pre_listeners = [(registered, mask) for registered, mask in self._pre_listeners if registered != listener]

    def remove_post_listener(self, listener: Any) -> None:
        """Removes every registration of `listener` as a post-modification listener.

        Does nothing if it is not registered.
        """
        self._post_listeners = [(registered, mask) for registered, mask in self._post_listeners if registered != listener]

    @property
    def pre_listeners(self) -> List[Any]:
        """A snapshot of the registered pre-modification listeners."""
        return [listener for listener, _ in self._pre_listeners]

    @property
    def post_listeners(self) -> List[Any]:
        """A snapshot of the registered post-modification listeners."""
        return [listener for listener, _ in self._post_listeners]

    # --- Event dispatch ---

    def _size(self) -> int:
        observed = self.observed
        return len(observed) if observed is not None else 0

    def _pre_event(self, type: ModificationType, obj: Any) -> bool:
        """Notifies matching pre-listeners and reports whether the change may proceed."""
        self._pre_size = self._size()
        # Iterate over a snapshot so listeners may (un)register during dispatch.
        listeners = [listener for listener, mask in self._pre_listeners if mask & type]
        if not listeners:
            return True

        event = PreModificationEvent(
            type=type,
            handler=self,
            observed=self.observed,
            obj=obj,
            pre_size=self._pre_size,
        )
        for listener in listeners:
            try:
                if _has_method(listener, "modifying"):
                    listener.modifying(event)
                else:
                    listener(event)
            except ModificationVetoedError as e:
                if self._config.log_vetoes:
                    logger.debug(f"{type.name} vetoed by listener {listener!r}: {e}")
                return False
            except Exception as e:
                if not self._config.suppress_listener_errors:
                    raise
                logger.exception(f"Error occurred inside pre-modification listener {listener!r}: {e}")
        return True

    def _post_event(self, type: ModificationType, obj: Any, result: Optional[bool]) -> None:
        """Notifies matching post-listeners of a completed change."""
        listeners = [listener for listener, mask in self._post_listeners if mask & type]
        if not listeners:
            return

        event = PostModificationEvent(
            type=type,
            handler=self,
            observed=self.observed,
            obj=obj,
            pre_size=self._pre_size,
            result=result,
            post_size=self._size(),
        )
        for listener in listeners:
            try:
                if _has_method(listener, "modified"):
                    listener.modified(event)
                else:
                    listener(event)
            except Exception as e:
                if not self._config.suppress_listener_errors:
                    raise
                logger.exception(f"Error occurred inside post-modification listener {listener!r}: {e}")

    # --- Hooks ---

    def pre_add(self, obj: Any) -> bool:
        return self._pre_event(ModificationType.ADD, obj)

    def post_add(self, obj: Any, result: bool) -> None:
        self._post_event(ModificationType.ADD, obj, result)

    def pre_add_all(self, coll: Iterable[Any]) -> bool:
        return self._pre_event(ModificationType.ADD_ALL, coll)

    def post_add_all(self, coll: Iterable[Any], result: bool) -> None:
        self._post_event(ModificationType.ADD_ALL, coll, result)

    def pre_remove(self, obj: Any) -> bool:
        return self._pre_event(ModificationType.REMOVE, obj)

    def post_remove(self, obj: Any, result: bool) -> None:
        self._post_event(ModificationType.REMOVE, obj, result)

    def pre_remove_all(self, coll: Iterable[Any]) -> bool:
        return self._pre_event(ModificationType.REMOVE_ALL, coll)

    def post_remove_all(self, coll: Iterable[Any], result: bool) -> None:
        self._post_event(ModificationType.REMOVE_ALL, coll, result)

    def pre_retain_all(self, coll: Iterable[Any]) -> bool:
        return self._pre_event(ModificationType.RETAIN_ALL, coll)

    def post_retain_all(self, coll: Iterable[Any], result: bool) -> None:
        self._post_event(ModificationType.RETAIN_ALL, coll, result)

    def pre_clear(self) -> bool:
        return self._pre_event(ModificationType.CLEAR, None)

    def post_clear(self) -> None:
        self._post_event(ModificationType.CLEAR, None, None)

    def __repr__(self) -> str:
        return (
            f"StandardHandler(pre_listeners={len(self._pre_listeners)}, "
            f"post_listeners={len(self._post_listeners)})"
        )
