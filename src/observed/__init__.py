"""Observed Collections (`observed-collections`).

This library lets you wrap an ordinary mutable Python container (a `list`,
`set`, `collections.deque`, or a `collections.Counter` used as a bag) so that
every change made *through the wrapper* is seen by a handler before it
happens and reported to it afterwards.

The handler can:

*   **Veto** a change before it touches the container (the operation then
    simply reports that nothing changed).
*   **Observe** the outcome after the change has been made, for example to
    notify listeners, keep an audit trail, or refresh a display.

Getting Started:

    1.  **Install:** `pip install observed-collections`.
    2.  **Wrap a container:**

        >>> import observed
        >>> items = observed.wrap([1, 2])

    3.  **Listen for changes:** pass a listener when wrapping, or register one
        afterwards on the handler.

        >>> def on_change(event):
        ...     print(event.type, event.obj, event.result)
        >>> items = observed.wrap([1, 2], on_change)
        >>> items.add(3)
        ModificationType.ADD 3 True
        True

    4.  **Veto changes:** a listener with a `modifying(event)` method can raise
        `observed.ModificationVetoedError` to stop a change from happening.

Modify the data through the wrapper's methods (`add`, `add_all`, `remove`,
`remove_all`, `retain_all`, `clear`, or `remove()` on an iterator obtained from
the wrapper). Changes made directly to the raw container are not observed.
"""

import logging

# --- Version ---
from ._version import __version__

# --- Logging Setup ---
# Configure a logger for the 'observed' package.
# By default, it uses a NullHandler, so applications using this library
# must configure their own logging if they wish to see its logs.
# Example application setup:
# import logging
# logging.basicConfig(level=logging.DEBUG)
# logging.getLogger("observed").setLevel(logging.DEBUG)
logger = logging.getLogger("observed")
if not logger.hasHandlers():
    logger.addHandler(logging.NullHandler())

# --- Exception classes ---
from .exceptions import (
    ObservedError,             # Base class for all errors raised by this library.
    InvalidArgumentError,      # A required argument (the container) was missing.
    UnsupportedListenerError,  # No resolution strategy could turn a listener into a handler.
    IllegalStateError,         # Iterator removal out of sequence, or handler rebinding.
    ModificationVetoedError,   # Raised by listeners to veto a modification.
)

# --- Configuration ---
from .config import HandlerConfig, get_handler_config, set_handler_config

# --- Events passed to listeners ---
from .events import (
    ModificationType,
    ModificationEvent,
    PreModificationEvent,
    PostModificationEvent,
)

# --- Handlers ---
from .handler import ModificationHandler
from .standard import StandardHandler, ModificationListener

# --- Container adapters ---
from .containers import (
    ContainerAdapter,
    RemovableIterator,
    SequenceAdapter,
    SetAdapter,
    BagAdapter,
    adapt,
)

# --- Handler resolution ---
from .registry import (
    HandlerRegistry,
    get_default_registry,
    register_resolution_strategy,
)

# --- The observed collection itself ---
from .collection import ObservedCollection, ObservedIterator, wrap


__all__ = [
    # Version
    '__version__',

    # Logger (for users who might want to configure it)
    'logger',

    # Entry points
    'wrap',
    'ObservedCollection',
    'ObservedIterator',

    # Handlers and listeners
    'ModificationHandler',
    'StandardHandler',
    'ModificationListener',

    # Handler resolution
    'HandlerRegistry',
    'get_default_registry',
    'register_resolution_strategy',

    # Events
    'ModificationType',
    'ModificationEvent',
    'PreModificationEvent',
    'PostModificationEvent',

    # Container adapters
    'ContainerAdapter',
    'RemovableIterator',
    'SequenceAdapter',
    'SetAdapter',
    'BagAdapter',
    'adapt',

    # Configuration
    'HandlerConfig',
    'get_handler_config',
    'set_handler_config',

    # Error Classes
    'ObservedError',
    'InvalidArgumentError',
    'UnsupportedListenerError',
    'IllegalStateError',
    'ModificationVetoedError',
]
