"""Configuration for the standard handler.

This module defines the settings that control how a `StandardHandler` treats
its listeners, and keeps the process-wide default used when a handler is
created without explicit settings (which is what happens when a handler is
resolved by `observed.wrap()`).

The primary components are:

- `HandlerConfig`: A data class holding the settings for a handler.
- Functions to read and replace the process-wide default `HandlerConfig`.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class HandlerConfig:
    """Settings that control how a `StandardHandler` calls its listeners.

    Attributes:
        suppress_listener_errors (bool): If `False` (the default), an exception
            raised by a listener (other than a veto) propagates to the caller
            of the collection method. If a post-listener raises, the change
            has already been made and is not rolled back. If `True`, the error
            is logged with its traceback and the remaining listeners are still
            called.
        log_vetoes (bool): If `True` (the default), each veto is logged at
            debug level on the `observed` logger.
    """
    suppress_listener_errors: bool = False
    log_vetoes: bool = True


DEFAULT_HANDLER_CONFIG = HandlerConfig()

# --- Process-wide configuration ---

# Stores the configuration picked up by handlers created without an explicit
# `config` argument. Replaced via set_handler_config().
_handler_config: HandlerConfig = DEFAULT_HANDLER_CONFIG


def get_handler_config() -> HandlerConfig:
    """Retrieves the process-wide default handler configuration.

    Returns:
        HandlerConfig: The configuration new `StandardHandler` instances use
            when none is passed to them.
    """
    return _handler_config


def set_handler_config(config: Optional[HandlerConfig] = None) -> None:
    """Sets or resets the process-wide default handler configuration.

    Only handlers created after the call are affected; existing handlers keep
    the configuration they were created with.

    Args:
        config (Optional[HandlerConfig]): The new default configuration. If
            `None`, the built-in defaults are restored.

    Raises:
        TypeError: If `config` is neither `None` nor a `HandlerConfig`.
    """
    global _handler_config
    if config is None:
        config = DEFAULT_HANDLER_CONFIG
    if not isinstance(config, HandlerConfig):
        raise TypeError(
            f"set_handler_config() expects a HandlerConfig instance, got {type(config).__name__}."
        )
    _handler_config = config
