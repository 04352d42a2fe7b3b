"""Message bus implementation for handling commands."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods

CommandHandler = Callable[[Command], Awaitable[Any]]


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """A simple message bus for handling commands.

    The message bus routes each command to its handler and awaits it. It also
    manages logging and error handling during the dispatch process.

    Args:
        command_handlers: A mapping of command types to their handlers.
            Handlers are coroutine functions that accept a single command
            argument. Additional dependencies (stores, services) should be
            injected via closures or other means.

    Note:
        Commands are handled one at a time; callers await `handle` before
        issuing the next command.
    """

    def __init__(self, command_handlers: dict[type[Command], CommandHandler]) -> None:
        self._command_handlers = command_handlers

    async def handle(self, cmd: Command) -> Any:
        """Handle a command by dispatching it to the appropriate handler.

        Args:
            cmd: The command to handle.

        Returns:
            Whatever the handler returns.

        Raises:
            NoHandlerForCommand: If no handler is found for the command type.
            Exception: If the handler raises an exception.
        """

        if handler := self._command_handlers.get(type(cmd)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling command %s with handler %s", cmd, handler_name)
            try:
                return await handler(cmd)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise
        logger.error("No handler found for command %s", type(cmd).__name__)
        raise NoHandlerForCommand(cmd)

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
