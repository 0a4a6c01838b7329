"""Adapters that give Python containers a uniform mutation protocol.

An `ObservedCollection` needs every container it wraps to answer the same
questions: did this `add` change the contents? Did this `remove` find the
element? Can the element just produced by an iterator be removed? Python's
built-in containers answer those questions in different ways (`list.remove`
raises `ValueError`, `set.add` silently ignores duplicates, iterators have no
`remove` at all), so each supported kind of container gets a small adapter.

Adapters wrap the container; they never copy it. Every mutation goes straight
to the container object you passed in, and errors it raises (for example a
`TypeError` for an unhashable element) propagate unchanged.

Supported containers:

*   `list`, `collections.deque` and other mutable sequences (`SequenceAdapter`)
*   `set` and other mutable sets (`SetAdapter`)
*   `collections.Counter`, treated as a bag/multiset (`BagAdapter`)

You can also subclass `ContainerAdapter` yourself and pass an instance of it
to `observed.wrap()` to observe any other kind of container.
"""

import collections
import collections.abc
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List

from . import logger
from .exceptions import IllegalStateError, InvalidArgumentError


def _as_lookup(coll: Iterable[Any]) -> Any:
    """Returns something supporting `in` checks for the elements of `coll`.

    Containers are used as they are. One-shot iterables (generators, iterators)
    are materialised so that they can be tested against more than once. A
    `Counter` only counts as containing the elements with a positive count.
    """
    if isinstance(coll, collections.Counter):
        return {element for element, count in coll.items() if count > 0}
    if isinstance(coll, collections.abc.Container) and isinstance(coll, collections.abc.Iterable):
        return coll
    return list(coll)


def _contains(lookup: Any, obj: Any) -> bool:
    """`obj in lookup`, falling back to equality when `obj` cannot be hashed.

    An unhashable element can never be in a set, but a set may still hold an
    element equal to it, so the fallback compares against each one.
    """
    try:
        return obj in lookup
    except TypeError:
        return any(obj == element for element in lookup)


# --- Removable iterators ---

class RemovableIterator(ABC):
    """An iterator that can also remove the element it last produced.

    `remove()` may only be called once per `__next__()`. Calling it before the
    first element has been produced, or twice in a row, raises
    `IllegalStateError`.
    """

    def __iter__(self) -> "RemovableIterator":
        return self

    @abstractmethod
    def __next__(self) -> Any:
        pass

    @abstractmethod
    def remove(self) -> None:
        """Removes the element last returned by `__next__()` from the container.

        Raises:
            IllegalStateError: If `__next__()` has not been called yet, or
                `remove()` has already been called since the last `__next__()`.
        """
        pass


class SequenceIterator(RemovableIterator):
    """Walks a mutable sequence by index, adjusting its cursor on removal."""

    def __init__(self, sequence: collections.abc.MutableSequence):
        self._sequence = sequence
        self._next_index = 0
        self._last_index = -1

    def __next__(self) -> Any:
        if self._next_index >= len(self._sequence):
            raise StopIteration
        item = self._sequence[self._next_index]
        self._last_index = self._next_index
        self._next_index += 1
        return item

    def remove(self) -> None:
        if self._last_index < 0:
            raise IllegalStateError("remove() called before next() or twice after the same next().")
        del self._sequence[self._last_index]
        # The element after the removed one has shifted into its slot.
        self._next_index = self._last_index
        self._last_index = -1


class SnapshotIterator(RemovableIterator):
    """Walks a snapshot of an unordered container and removes from the live one.

    Sets and bags cannot be modified while Python iterates over them, so the
    elements are copied up front and `remove()` calls back into the adapter.
    """

    def __init__(self, elements: List[Any], remove_element: Callable[[Any], bool]):
        self._elements = iter(elements)
        self._remove_element = remove_element
        self._last: Any = None
        self._can_remove = False

    def __next__(self) -> Any:
        self._last = next(self._elements)
        self._can_remove = True
        return self._last

    def remove(self) -> None:
        if not self._can_remove:
            raise IllegalStateError("remove() called before next() or twice after the same next().")
        self._can_remove = False
        if not self._remove_element(self._last):
            raise IllegalStateError(
                f"Element {self._last!r} is no longer in the container; "
                f"it was removed after the iterator produced it."
            )


# --- Adapters ---

class ContainerAdapter(ABC):
    """Abstract base class for the mutation protocol used by `ObservedCollection`.

    Every mutating method returns `True` if the container's contents changed
    as a result of the call and `False` otherwise (`clear()` returns nothing).
    Subclasses implement the mutations and `iterator()`; size and membership
    fall back to `len()` and `in` on the wrapped container.

    Args:
        container: The container to adapt. It is wrapped, never copied.
    """

    def __init__(self, container: Any):
        self._container = container

    def unwrap(self) -> Any:
        """Returns the wrapped container itself."""
        return self._container

    def __len__(self) -> int:
        return len(self._container)

    def contains(self, obj: Any) -> bool:
        return obj in self._container

    def contains_all(self, coll: Iterable[Any]) -> bool:
        return all(self.contains(obj) for obj in coll)

    @abstractmethod
    def iterator(self) -> RemovableIterator:
        pass

    @abstractmethod
    def add(self, obj: Any) -> bool:
        pass

    @abstractmethod
    def add_all(self, coll: Iterable[Any]) -> bool:
        pass

    @abstractmethod
    def remove(self, obj: Any) -> bool:
        pass

    @abstractmethod
    def remove_all(self, coll: Iterable[Any]) -> bool:
        pass

    @abstractmethod
    def retain_all(self, coll: Iterable[Any]) -> bool:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._container!r})"


class SequenceAdapter(ContainerAdapter):
    """Adapter for `list`, `collections.deque` and other mutable sequences.

    *   `add` appends, so it always changes the sequence.
    *   `remove` removes the first equal element, if any.
    *   `remove_all` removes every element equal to one in the batch;
        `retain_all` removes every element not equal to one in the batch.
    """

    def iterator(self) -> RemovableIterator:
        return SequenceIterator(self._container)

    def add(self, obj: Any) -> bool:
        self._container.append(obj)
        return True

    def add_all(self, coll: Iterable[Any]) -> bool:
        before = len(self._container)
        self._container.extend(coll)
        return len(self._container) != before

    def remove(self, obj: Any) -> bool:
        # Find the index ourselves: a ValueError from list.remove could also
        # come from an element's __eq__, which must reach the caller.
        for index, element in enumerate(self._container):
            if element is obj or element == obj:
                del self._container[index]
                return True
        return False

    def remove_all(self, coll: Iterable[Any]) -> bool:
        return self._delete_where(_as_lookup(coll), keep_matches=False)

    def retain_all(self, coll: Iterable[Any]) -> bool:
        return self._delete_where(_as_lookup(coll), keep_matches=True)

    def clear(self) -> None:
        self._container.clear()

    def _delete_where(self, lookup: Any, keep_matches: bool) -> bool:
        # Decide for every element before deleting any, so an error raised by
        # a comparison leaves the sequence untouched.
        doomed = [
            index for index, element in enumerate(self._container)
            if _contains(lookup, element) != keep_matches
        ]
        # Delete backwards so earlier deletions do not shift later indexes.
        for index in reversed(doomed):
            del self._container[index]
        return bool(doomed)


class SetAdapter(ContainerAdapter):
    """Adapter for `set` and other mutable sets.

    `add` reports `False` for an element that is already present and `remove`
    reports `False` for an element that is absent.
    """

    def iterator(self) -> RemovableIterator:
        return SnapshotIterator(list(self._container), self.remove)

    def add(self, obj: Any) -> bool:
        if obj in self._container:
            return False
        self._container.add(obj)
        return True

    def add_all(self, coll: Iterable[Any]) -> bool:
        before = len(self._container)
        for obj in list(coll):
            self._container.add(obj)
        return len(self._container) != before

    def remove(self, obj: Any) -> bool:
        if obj not in self._container:
            return False
        self._container.discard(obj)
        return True

    def remove_all(self, coll: Iterable[Any]) -> bool:
        doomed = [obj for obj in list(_as_lookup(coll)) if _contains(self._container, obj)]
        for obj in doomed:
            self._container.discard(obj)
        return bool(doomed)

    def retain_all(self, coll: Iterable[Any]) -> bool:
        lookup = _as_lookup(coll)
        doomed = [obj for obj in self._container if not _contains(lookup, obj)]
        for obj in doomed:
            self._container.discard(obj)
        return bool(doomed)

    def clear(self) -> None:
        self._container.clear()


class BagAdapter(ContainerAdapter):
    """Adapter for `collections.Counter` used as a bag (multiset).

    The Counter maps each element to the number of copies held. Only positive
    counts are treated as present.

    *   `add` adds one copy; `add_all` adds one copy per element of the batch
        (a Counter batch contributes each element as many times as it counts).
    *   `remove` removes **one** copy.
    *   `remove_all` removes **every** copy of each element in the batch;
        `retain_all` removes every copy of each element not in the batch.
    *   Iteration yields each element once per copy.
    """

    def __len__(self) -> int:
        return sum(count for count in self._container.values() if count > 0)

    def contains(self, obj: Any) -> bool:
        return self._container[obj] > 0

    def iterator(self) -> RemovableIterator:
        return SnapshotIterator(list(self._container.elements()), self.remove)

    def add(self, obj: Any) -> bool:
        self._container[obj] += 1
        return True

    def add_all(self, coll: Iterable[Any]) -> bool:
        if isinstance(coll, collections.Counter):
            elements = list(coll.elements())
        else:
            elements = list(coll)
        for obj in elements:
            self._container[obj] += 1
        return bool(elements)

    def remove(self, obj: Any) -> bool:
        if self._container[obj] <= 0:
            return False
        self._container[obj] -= 1
        if self._container[obj] <= 0:
            del self._container[obj]
        return True

    def remove_all(self, coll: Iterable[Any]) -> bool:
        return self._delete_keys(_as_lookup(coll), keep_matches=False)

    def retain_all(self, coll: Iterable[Any]) -> bool:
        return self._delete_keys(_as_lookup(coll), keep_matches=True)

    def clear(self) -> None:
        self._container.clear()

    def _delete_keys(self, lookup: Any, keep_matches: bool) -> bool:
        changed = False
        for obj in list(self._container):
            if (obj in lookup) != keep_matches:
                if self._container[obj] > 0:
                    changed = True
                del self._container[obj]
        return changed


def adapt(container: Any) -> ContainerAdapter:
    """Returns the `ContainerAdapter` to use for `container`.

    Args:
        container: A `ContainerAdapter` (used as is), a `collections.Counter`,
            a mutable set, or a mutable sequence.

    Returns:
        ContainerAdapter: An adapter wrapping (not copying) `container`.

    Raises:
        InvalidArgumentError: If `container` is `None`.
        TypeError: If `container` is not one of the supported kinds.
    """
    if container is None:
        raise InvalidArgumentError("Collection must not be None")
    if isinstance(container, ContainerAdapter):
        return container
    # Counter is checked first: it is a mapping, but is observed as a bag.
    if isinstance(container, collections.Counter):
        adapter: ContainerAdapter = BagAdapter(container)
    elif isinstance(container, collections.abc.MutableSet):
        adapter = SetAdapter(container)
    elif isinstance(container, collections.abc.MutableSequence):
        adapter = SequenceAdapter(container)
    else:
        raise TypeError(
            f"Cannot observe a container of type '{type(container).__name__}'. "
            f"Expected a mutable sequence (e.g., list), a mutable set, a collections.Counter, "
            f"or a ContainerAdapter."
        )
    logger.debug(f"Adapted container of type {type(container).__name__} with {type(adapter).__name__}")
    return adapter
