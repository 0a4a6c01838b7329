"""Provides the ObservedCollection class and the `wrap()` entry point.

An `ObservedCollection` decorates a mutable container. Every mutating call
made through it follows the same protocol:

1.  The handler's pre hook is asked whether the change may go ahead.
2.  If it says no (a *veto*), nothing happens: the container is not touched,
    no post hook is called, and the method returns `False`.
3.  Otherwise the change is made on the wrapped container.
4.  The handler's post hook is told the outcome.

Read-only operations (`len()`, `in`, `contains_all()`) go straight to the
container. Iteration returns an `ObservedIterator`, whose `remove()` goes
through the same pre/post protocol as `ObservedCollection.remove()`.

Note on Limitations:

*   Only changes made *through* the wrapper are observed. Changes made to the
    raw container (for example via the `collection` property) bypass the
    handler entirely.
*   If the container raises while making a change, the error reaches the
    caller and the post hook is not called.
*   If a post hook raises, the change has already been made and is not
    rolled back.
*   There is no locking. Sharing an observed collection between threads is
    exactly as safe as sharing the container itself.
"""

import collections.abc
from typing import Any, Iterable, Optional

from . import logger
from .containers import ContainerAdapter, RemovableIterator, adapt
from .exceptions import InvalidArgumentError
from .handler import ModificationHandler
from .registry import HandlerRegistry, get_default_registry
from .standard import StandardHandler


def wrap(container: Any, listener: Any = None, *, registry: Optional[HandlerRegistry] = None) -> "ObservedCollection":
    """Wraps a container so that its modifications are observed.

    The handler is chosen from the `listener` argument:

    *   `None` (or omitted): a `StandardHandler` with no listeners, which
        allows every change. Listeners can be added later through the
        collection's `handler` property.
    *   A `ModificationHandler`: used as is.
    *   Anything else: resolved by `registry` (the process-wide registry by
        default). Out of the box, listener objects with `modifying`/`modified`
        methods and plain callables are accepted and registered on a new
        `StandardHandler`.

    Args:
        container: The container to observe (a list, deque, set, Counter, or
            a `ContainerAdapter`). It is wrapped, not copied.
        listener: A handler, a listener, or `None`.
        registry (Optional[HandlerRegistry]): The registry used to resolve
            `listener`. Defaults to `observed.get_default_registry()`.

    Returns:
        ObservedCollection: The observed collection, with its handler bound.

    Raises:
        InvalidArgumentError: If `container` is `None`.
        TypeError: If `container` is of an unsupported type.
        UnsupportedListenerError: If no strategy can resolve `listener`.

    Example:
        >>> events = []
        >>> tags = observed.wrap({"a"}, events.append)
        >>> tags.add("b")
        True
        >>> tags.add("b")
        False
        >>> [(e.type.name, e.obj, e.result) for e in events]
        [('ADD', 'b', True), ('ADD', 'b', False)]
    """
    if container is None:
        raise InvalidArgumentError("Collection must not be None")
    adapter = adapt(container)
    if registry is None:
        registry = get_default_registry()
    handler = registry.create_handler(adapter.unwrap(), listener)
    return ObservedCollection(adapter, handler)


class ObservedCollection(collections.abc.Collection):
    """Decorates a container so every modification goes through a handler.

    Most code should create instances with `observed.wrap()`, which also
    resolves listeners. The constructor takes a handler directly.

    Args:
        container: The container to decorate, or a `ContainerAdapter`.
        handler (Optional[ModificationHandler]): The handler to bind. If
            `None`, a new `StandardHandler` with no listeners is created.

    Raises:
        InvalidArgumentError: If `container` is `None`.
        TypeError: If `container` is of an unsupported type or `handler` is
            not a `ModificationHandler`.
        IllegalStateError: If `handler` is already bound to another
            observed collection.
    """

    def __init__(self, container: Any, handler: Optional[ModificationHandler] = None):
        self._adapter: ContainerAdapter = adapt(container)
        if handler is None:
            handler = StandardHandler()
        elif not isinstance(handler, ModificationHandler):
            raise TypeError(
                f"handler must be a ModificationHandler, got {type(handler).__name__}. "
                f"Use observed.wrap() to resolve listeners."
            )
        self._handler: ModificationHandler = handler
        self._handler.bind(self)
        logger.debug(
            f"Created ObservedCollection (id: {id(self)}) over {type(self._adapter.unwrap()).__name__} "
            f"with {type(handler).__name__}"
        )

    # --- Handler and container access ---

    @property
    def handler(self) -> ModificationHandler:
        """The handler observing this collection. Never `None`.

        Use it to register listeners after construction, e.g.
        `obs.handler.add_post_listener(callback)` for a `StandardHandler`.
        """
        return self._handler

    @property
    def collection(self) -> Any:
        """The wrapped container itself.

        Be cautious: modifying the container obtained here directly will
        **not** go through the handler.
        """
        return self._adapter.unwrap()

    # --- Intercepted modifications ---

    def add(self, obj: Any) -> bool:
        """Adds `obj`. Returns `True` if the container changed."""
        result = False
        if self._handler.pre_add(obj):
            result = self._adapter.add(obj)
            self._handler.post_add(obj, result)
        return result

    def add_all(self, coll: Iterable[Any]) -> bool:
        """Adds every element of `coll`. Returns `True` if the container changed.

        The handler's hooks receive `coll` itself, not a copy.
        """
        result = False
        if self._handler.pre_add_all(coll):
            result = self._adapter.add_all(coll)
            self._handler.post_add_all(coll, result)
        return result

    def remove(self, obj: Any) -> bool:
        """Removes one occurrence of `obj`. Returns `True` if it was present.

        Unlike `list.remove`, a missing element is not an error.
        """
        result = False
        if self._handler.pre_remove(obj):
            result = self._adapter.remove(obj)
            self._handler.post_remove(obj, result)
        return result

    def remove_all(self, coll: Iterable[Any]) -> bool:
        """Removes every element that is also in `coll`. Returns `True` if the container changed."""
        result = False
        if self._handler.pre_remove_all(coll):
            result = self._adapter.remove_all(coll)
            self._handler.post_remove_all(coll, result)
        return result

    def retain_all(self, coll: Iterable[Any]) -> bool:
        """Removes every element that is not in `coll`. Returns `True` if the container changed."""
        result = False
        if self._handler.pre_retain_all(coll):
            result = self._adapter.retain_all(coll)
            self._handler.post_retain_all(coll, result)
        return result

    def clear(self) -> None:
        """Removes every element, unless the handler vetoes it."""
        if self._handler.pre_clear():
            self._adapter.clear()
            self._handler.post_clear()

    # --- Read-only operations (direct delegation) ---

    def __len__(self) -> int:
        return len(self._adapter)

    def size(self) -> int:
        return len(self._adapter)

    def is_empty(self) -> bool:
        return len(self._adapter) == 0

    def __contains__(self, obj: Any) -> bool:
        return self._adapter.contains(obj)

    def contains(self, obj: Any) -> bool:
        return self._adapter.contains(obj)

    def contains_all(self, coll: Iterable[Any]) -> bool:
        return self._adapter.contains_all(coll)

    def __iter__(self) -> "ObservedIterator":
        return ObservedIterator(self._adapter.iterator(), self._handler, self)

    def iterator(self) -> "ObservedIterator":
        return self.__iter__()

    def __eq__(self, other: Any) -> bool:
        """Compares the *wrapped* containers for equality."""
        if isinstance(other, ObservedCollection):
            return self.collection == other.collection
        return self.collection == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ObservedCollection({self.collection!r})"

    def __str__(self) -> str:
        return str(self.collection)


class ObservedIterator:
    """Iterator over an `ObservedCollection` whose `remove()` is observed.

    Advancing is delegated to the container's own removable iterator; the
    element produced is remembered as `last`. `remove()` asks the handler's
    `pre_remove(last)` first and, if allowed, removes the element through the
    wrapped iterator and calls `post_remove(last, True)`. From the handler's
    point of view this is the same as calling `observed.remove(last)`.

    Calling `remove()` before `next()`, or twice without a `next()` in
    between, raises `IllegalStateError` from the wrapped iterator.

    Example:
        >>> it = iter(obs)
        >>> for element in it:
        ...     if element < 0:
        ...         it.remove()
    """

    def __init__(self, iterator: RemovableIterator, handler: ModificationHandler, observed: ObservedCollection):
        self._iterator = iterator
        self._handler = handler
        self._observed = observed
        self.last: Any = None

    def __iter__(self) -> "ObservedIterator":
        return self

    def __next__(self) -> Any:
        self.last = next(self._iterator)
        return self.last

    def remove(self) -> bool:
        """Removes the last element produced, unless the handler vetoes it.

        Returns:
            bool: `True` if the element was removed, `False` if vetoed.

        Raises:
            IllegalStateError: If removal is out of sequence.
        """
        if self._handler.pre_remove(self.last):
            self._iterator.remove()
            self._handler.post_remove(self.last, True)
            return True
        return False

    @property
    def observed(self) -> ObservedCollection:
        return self._observed
