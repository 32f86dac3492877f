"""Intent to command mapping and ordered command delivery."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from ikettle_skill import skill_logger
from ikettle_skill.errors import UnknownIntentError
from ikettle_skill.messages import Command

if TYPE_CHECKING:
    from ikettle_skill.command_sink import CommandSink

# AIDEV-NOTE: Commands are sent in tuple order
INTENT_COMMANDS: MappingProxyType[str, tuple[Command, ...]] = MappingProxyType(
    {
        "BoilIntent": (Command.BOIL,),
        "BoilAndKeepWarmIntent": (Command.BOIL, Command.KEEP_WARM),
        "KeepWarmIntent": (Command.KEEP_WARM,),
        "OffIntent": (Command.OFF,),
    }
)


def resolve_commands(intent_name: str) -> tuple[Command, ...]:
    """Look up the commands for an intent.

    Raises:
        UnknownIntentError: If the intent is not in INTENT_COMMANDS
    """
    try:
        return INTENT_COMMANDS[intent_name]
    except KeyError:
        raise UnknownIntentError(intent_name) from None


class CommandDispatcher:
    """Resolve an intent and hand its commands to a sink, one at a time."""

    def __init__(self, sink: CommandSink, logger: logging.Logger | None = None) -> None:
        self.sink = sink
        self.logger = logger or skill_logger.SkillLogger.get_logger(__name__)

    async def dispatch(self, intent_name: str) -> tuple[Command, ...]:
        """Send every command for ``intent_name`` in order and return them.

        The first delivery failure stops the remaining sends and propagates.
        Commands already delivered are not rolled back.

        Raises:
            UnknownIntentError: Before any send, if the intent is unknown
            CommandDeliveryError: If the sink fails to deliver a command
        """
        commands = resolve_commands(intent_name)
        self.logger.info("%s received.", intent_name)

        for command in commands:
            await self.sink.send(command)

        return commands
