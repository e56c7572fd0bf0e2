"""Editor command surface mirroring the service operations."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .service import SpellDiagnostics

logger = logging.getLogger(__name__)

CMD_ENABLE = "SpellEnable"
CMD_DISABLE = "SpellDisable"
CMD_TOGGLE = "SpellToggle"
CMD_REFRESH = "SpellRefresh"


class CommandTable:
    """Named commands a host editor can bind to keys or a command line."""

    def __init__(self) -> None:
        self._commands: dict[str, Callable[..., Any]] = {}

    def register(self, name: str, handler: Callable[..., Any], *, replace: bool = False) -> None:
        if not name:
            raise ValueError("Command must define a non-empty name")
        if not replace and name in self._commands:
            raise ValueError(f"Command '{name}' already registered")
        self._commands[name] = handler

    def unregister(self, name: str) -> None:
        self._commands.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._commands)

    def run(self, name: str, *args: Any) -> bool:
        """Run a command; unknown names and handler errors are logged, not raised."""

        handler = self._commands.get(name)
        if handler is None:
            logger.warning("Unknown command '%s'", name)
            return False
        try:
            handler(*args)
        except Exception:
            logger.exception("Command '%s' failed", name)
            return False
        return True


def register_commands(service: SpellDiagnostics, table: CommandTable | None = None) -> CommandTable:
    table = table or CommandTable()
    table.register(CMD_ENABLE, service.enable, replace=True)
    table.register(CMD_DISABLE, service.disable, replace=True)
    table.register(CMD_TOGGLE, service.toggle, replace=True)
    table.register(CMD_REFRESH, service.refresh, replace=True)
    return table


__all__ = [
    "CMD_DISABLE",
    "CMD_ENABLE",
    "CMD_REFRESH",
    "CMD_TOGGLE",
    "CommandTable",
    "register_commands",
]
