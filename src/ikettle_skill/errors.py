"""Exception types raised while handling a skill request.

Every error is terminal for the request that raised it. Nothing is retried
internally; the boundary adapter turns the error into a failed result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic import ValidationError

    from ikettle_skill.messages import Command, Session


class SkillError(Exception):
    """Base exception for the iKettle skill."""


class AuthorizationError(SkillError):
    """Raised when the calling application id does not match the configured one."""

    def __init__(self, application_id: str) -> None:
        self.application_id = application_id
        super().__init__(f"Invalid Application ID: {application_id}")


class UnrecognizedRequestKindError(SkillError):
    """Raised when the request type is outside the known request kinds."""

    def __init__(self, request_kind: object, session: Session | None = None) -> None:
        self.request_kind = request_kind
        self.session = session
        super().__init__(f"Unrecognized request type: {request_kind!r}")


class UnknownIntentError(SkillError):
    """Raised when an intent name has no entry in the dispatch table."""

    def __init__(self, intent_name: str) -> None:
        self.intent_name = intent_name
        super().__init__(f"Invalid intent: {intent_name}")


class CommandDeliveryError(SkillError):
    """Raised when the command sink fails to deliver a command.

    ``str(error)`` is the sink's reason, passed through verbatim.
    """

    def __init__(self, command: Command, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(reason)


class MalformedRequestError(SkillError):
    """Raised when an inbound event does not match the request envelope schema."""

    def __init__(self, validation_error: ValidationError) -> None:
        self.validation_error = validation_error
        super().__init__(f"Malformed request envelope: {validation_error.error_count()} validation error(s)")
