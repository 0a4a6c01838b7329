"""Resolution of listener values into modification handlers.

`observed.wrap(container, listener)` accepts almost anything as `listener`:
a ready-made `ModificationHandler`, a listener object, a plain function, or
`None`. A `HandlerRegistry` decides which handler to build for it.

A registry holds an ordered list of *resolution strategies*, each a pair of:

*   a **predicate** `predicate(listener) -> bool` saying whether the strategy
    accepts this kind of listener, and
*   a **factory** `factory(container, listener) -> ModificationHandler`
    building a handler for it.

Strategies are consulted newest first, so a strategy registered later can
take over listener shapes that an earlier one also accepts. Every registry
starts with one default strategy that handles `None`, listener objects, and
plain callables by creating a `StandardHandler`.

The process-wide registry used by `observed.wrap()` is created on first use.
Pass `registry=` to `wrap()` to use a registry of your own instead.
"""

import threading
from typing import Any, Callable, List, Optional, Tuple

from . import logger
from .exceptions import UnsupportedListenerError
from .handler import ModificationHandler
from .standard import StandardHandler, is_listener

ListenerPredicate = Callable[[Any], bool]
HandlerFactory = Callable[[Any, Any], ModificationHandler]


def _accepts_standard_listener(listener: Any) -> bool:
    return listener is None or is_listener(listener)


def _create_standard_handler(container: Any, listener: Any) -> ModificationHandler:
    return StandardHandler(listener)


class HandlerRegistry:
    """An ordered set of strategies for turning listener values into handlers.

    Example:
        >>> registry = HandlerRegistry()
        >>> registry.register(
        ...     lambda listener: isinstance(listener, int),
        ...     lambda container, limit: CapacityHandler(limit),
        ... )
        >>> bounded = observed.wrap([], 10, registry=registry)
    """

    def __init__(self):
        # (predicate, factory) pairs in registration order, seeded with the default.
        self._strategies: List[Tuple[ListenerPredicate, HandlerFactory]] = [
            (_accepts_standard_listener, _create_standard_handler),
        ]

    def register(self, predicate: ListenerPredicate, factory: HandlerFactory) -> None:
        """Adds a resolution strategy, taking priority over all earlier ones.

        Args:
            predicate: Called with the listener value; returns `True` if this
                strategy should build the handler.
            factory: Called with `(container, listener)`; returns the
                `ModificationHandler` to use.

        Raises:
            TypeError: If `predicate` or `factory` is not callable.
        """
        if not callable(predicate) or not callable(factory):
            raise TypeError("Both predicate and factory passed to HandlerRegistry.register must be callable")
        self._strategies.append((predicate, factory))
        logger.debug(f"Registered handler resolution strategy {factory!r} (total: {len(self._strategies)})")

    def create_handler(self, container: Any, listener: Any = None) -> ModificationHandler:
        """Resolves `listener` to a handler for `container`.

        The returned handler is not yet bound; the `ObservedCollection` it is
        given to binds it.

        Args:
            container: The container about to be observed.
            listener: A `ModificationHandler` (returned as is), `None`, or any
                value accepted by a registered strategy.

        Returns:
            ModificationHandler: The handler to use.

        Raises:
            UnsupportedListenerError: If no strategy accepts `listener`.
            TypeError: If the accepting strategy's factory does not return a
                `ModificationHandler`.
        """
        if isinstance(listener, ModificationHandler):
            return listener

        for predicate, factory in reversed(self._strategies):
            if not predicate(listener):
                continue
            handler = factory(container, listener)
            if not isinstance(handler, ModificationHandler):
                raise TypeError(
                    f"Handler factory {factory!r} returned {type(handler).__name__}, "
                    f"expected a ModificationHandler."
                )
            logger.debug(f"Resolved listener of type {type(listener).__name__} to {type(handler).__name__}")
            return handler

        raise UnsupportedListenerError(listener)

    def __len__(self) -> int:
        return len(self._strategies)


# --- Default registry (Singleton) ---
_default_registry: Optional[HandlerRegistry] = None
_default_registry_lock = threading.Lock() # Ensures thread-safe singleton creation


def get_default_registry() -> HandlerRegistry:
    """Gets the process-wide `HandlerRegistry` used by `observed.wrap()`.

    The registry is created, with its default strategy, the first time this
    function is called. Subsequent calls return the same instance.

    Returns:
        HandlerRegistry: The process-wide registry.
    """
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                logger.info("Creating default HandlerRegistry singleton instance.")
                _default_registry = HandlerRegistry()
    return _default_registry


def register_resolution_strategy(predicate: ListenerPredicate, factory: HandlerFactory) -> None:
    """Registers a resolution strategy on the process-wide registry.

    Strategies registered this way remain in effect until the process ends.
    See `HandlerRegistry.register()` for the arguments.
    """
    get_default_registry().register(predicate, factory)
