"""Voice skill backend that turns kettle intents into queued commands."""

from .command_sink import CommandSink, MqttCommandSink
from .dispatcher import INTENT_COMMANDS, CommandDispatcher, resolve_commands
from .errors import (
    AuthorizationError,
    CommandDeliveryError,
    MalformedRequestError,
    SkillError,
    UnknownIntentError,
    UnrecognizedRequestKindError,
)
from .handler import SkillHandler, SkillResult, handle_event, lambda_handler, parse_envelope
from .messages import Command, CommandMessage, RequestEnvelope, RequestKind, ResponseEnvelope, SpeechletResponse
from .metrics import MetricsCollector
from .responses import build_empty_response, build_response_envelope, build_speechlet_response
from .router import RequestRouter
from .skill_config import SkillConfig, load_config
from .skill_logger import LoggerConfig, SkillLogger

__all__ = [
    "INTENT_COMMANDS",
    "AuthorizationError",
    "Command",
    "CommandDeliveryError",
    "CommandDispatcher",
    "CommandMessage",
    "CommandSink",
    "LoggerConfig",
    "MalformedRequestError",
    "MetricsCollector",
    "MqttCommandSink",
    "RequestEnvelope",
    "RequestKind",
    "RequestRouter",
    "ResponseEnvelope",
    "SkillConfig",
    "SkillError",
    "SkillHandler",
    "SkillLogger",
    "SkillResult",
    "SpeechletResponse",
    "UnknownIntentError",
    "UnrecognizedRequestKindError",
    "build_empty_response",
    "build_response_envelope",
    "build_speechlet_response",
    "handle_event",
    "lambda_handler",
    "load_config",
    "resolve_commands",
]
