"""Defines the structured event objects passed to modification listeners.

This module uses Python's `dataclasses` to describe a change to an observed
collection. A `StandardHandler` creates a `PreModificationEvent` before the
change (and passes it to each listener's `modifying(event)` method, which may
veto it) and a `PostModificationEvent` after the change (passed to each
listener's `modified(event)` method, or to a plain callable listener).

`ModificationType` is a flag enum, so a listener can subscribe to a
combination of change types with a single mask:

    >>> mask = ModificationType.ADD | ModificationType.ADD_ALL
    >>> handler.add_post_listener(on_added, mask)
"""

from dataclasses import dataclass
from enum import Flag
from typing import Any, Optional


class ModificationType(Flag):
    """The kinds of modification an observed collection can report."""
    ADD = 1
    ADD_ALL = 2
    REMOVE = 4
    REMOVE_ALL = 8
    RETAIN_ALL = 16
    CLEAR = 32

    ALL = ADD | ADD_ALL | REMOVE | REMOVE_ALL | RETAIN_ALL | CLEAR


# --- Base Event Class ---

@dataclass
class ModificationEvent:
    """
    Base class for all modification events.

    Attributes:
        type (ModificationType): The kind of modification (e.g., `ADD`, `CLEAR`).
        handler (ModificationHandler): The handler that created the event.
        observed (ObservedCollection): The observed collection being modified.
        obj (Any): The element (for `ADD`/`REMOVE`) or the batch collection
            (for `ADD_ALL`/`REMOVE_ALL`/`RETAIN_ALL`) passed by the caller.
            This is the caller's own object, not a copy. `None` for `CLEAR`.
        pre_size (int): The size of the collection before the modification.
    """
    type: ModificationType
    handler: Any
    observed: Any
    obj: Any
    pre_size: int


@dataclass
class PreModificationEvent(ModificationEvent):
    """
    Event sent to pre-modification listeners before the change is made.

    A listener receiving this event may veto the change by raising
    `ModificationVetoedError`.
    """
    pass


@dataclass
class PostModificationEvent(ModificationEvent):
    """
    Event sent to post-modification listeners after the change has been made.

    Only sent when the change was allowed and the container call completed
    without raising.

    Attributes:
        result (Optional[bool]): What the container reported: `True` if its
            contents changed, `False` otherwise. `None` for `CLEAR`, which
            reports no result.
        post_size (int): The size of the collection after the modification.
    """
    result: Optional[bool] = None
    post_size: int = 0

    @property
    def size_change(self) -> int:
        """The number of elements added (positive) or removed (negative)."""
        return self.post_size - self.pre_size
