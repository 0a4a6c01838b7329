"""Defines the base class for modification handlers.

A `ModificationHandler` is the object an `ObservedCollection` consults around
every mutating operation. For each operation there is a pair of hooks:

*   `pre_<operation>(...)` is called **before** the container is touched and
    returns whether the operation may proceed. Returning `False` is a veto:
    the container is not modified and the matching post hook is not called.
    Pre hooks must not modify the observed collection themselves.
*   `post_<operation>(..., result)` is called **after** the container has
    been modified, with the result the container reported (whether its
    contents actually changed). `post_clear()` takes no arguments.

The base class allows everything and ignores every outcome, so subclasses
only override the hooks they care about. Fanning events out to listeners is
the job of concrete handlers such as `StandardHandler`.

A handler is bound to exactly one observed collection, once, when that
collection is created.
"""

from typing import Any, Iterable, Optional

from . import logger
from .exceptions import IllegalStateError


class ModificationHandler:
    """Base class for the pre/post hooks around an observed collection's mutations.

    Example:
        >>> class NoTwos(ModificationHandler):
        ...     def pre_add(self, obj):
        ...         return obj != 2
        >>> numbers = observed.wrap([], NoTwos())
        >>> numbers.add(2)
        False
        >>> numbers.add(3)
        True
    """

    # The observed collection this handler guards, set once by bind().
    # Declared on the class so subclasses need not call super().__init__().
    _observed: Optional[Any] = None

    # --- Lifecycle ---

    def bind(self, observed: Any) -> None:
        """Binds this handler to the observed collection it guards. (Internal).

        Called exactly once by the `ObservedCollection` constructor. After
        binding, hooks can inspect the collection (e.g., its current size)
        through the `observed` property.

        Args:
            observed: The `ObservedCollection` that now owns this handler.

        Raises:
            IllegalStateError: If the handler is already bound to a different
                observed collection. Handlers are never rebound.
        """
        if self._observed is not None:
            if self._observed is observed:
                return
            raise IllegalStateError(
                f"{type(self).__name__} is already bound to another observed collection "
                f"and cannot be rebound."
            )
        self._observed = observed
        logger.debug(f"Bound {type(self).__name__} (id: {id(self)}) to observed collection (id: {id(observed)})")

    @property
    def observed(self) -> Optional[Any]:
        """The observed collection this handler is bound to, or `None` before binding."""
        return self._observed

    # --- Add ---

    def pre_add(self, obj: Any) -> bool:
        return True

    def post_add(self, obj: Any, result: bool) -> None:
        pass

    def pre_add_all(self, coll: Iterable[Any]) -> bool:
        return True

    def post_add_all(self, coll: Iterable[Any], result: bool) -> None:
        pass

    # --- Remove ---

    def pre_remove(self, obj: Any) -> bool:
        return True

    def post_remove(self, obj: Any, result: bool) -> None:
        pass

    def pre_remove_all(self, coll: Iterable[Any]) -> bool:
        return True

    def post_remove_all(self, coll: Iterable[Any], result: bool) -> None:
        pass

    # --- Retain ---

    def pre_retain_all(self, coll: Iterable[Any]) -> bool:
        return True

    def post_retain_all(self, coll: Iterable[Any], result: bool) -> None:
        pass

    # --- Clear ---

    def pre_clear(self) -> bool:
        return True

    def post_clear(self) -> None:
        pass
