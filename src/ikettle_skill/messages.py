"""Message models exchanged with the voice platform and the command queue.

Inbound requests and outbound responses follow the voice platform's JSON
schema, which uses camelCase field names. The models expose snake_case
attributes and serialize back to the wire names through ``to_payload()``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PROTOCOL_VERSION = "1.0"


class Command(str, Enum):
    """Commands understood by the downstream kettle controller."""

    BOIL = "boil"
    KEEP_WARM = "keepwarm"
    OFF = "off"


class RequestKind(str, Enum):
    """Request types the skill knows how to route."""

    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


class WireModel(BaseModel):
    """Immutable model that reads and writes the platform's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, Any]:
        # None values stay in the payload, the reprompt shape depends on it
        return self.model_dump(mode="json", by_alias=True)


# AIDEV-NOTE: Inbound envelope, parsed once at the boundary
class Application(WireModel):
    application_id: str


class Session(WireModel):
    """Session block of an inbound request.

    Attributes:
        session_id: Opaque platform session identifier
        is_new: True on the first request of a session (wire name ``new``)
        application: Identifies the skill configuration that sent the request
        attributes: Session attributes echoed back by the platform, never set by this skill
    """

    session_id: str
    is_new: bool = Field(alias="new")
    application: Application
    attributes: dict[str, Any] = Field(default_factory=dict)


class Slot(WireModel):
    name: str
    value: str | None = None


class Intent(WireModel):
    name: str
    slots: dict[str, Slot] = Field(default_factory=dict)


class BaseRequest(WireModel):
    request_id: str
    timestamp: datetime | None = None
    locale: str | None = None


class LaunchRequest(BaseRequest):
    type: Literal["LaunchRequest"]


class IntentRequest(BaseRequest):
    type: Literal["IntentRequest"]
    intent: Intent


class SessionEndedRequest(BaseRequest):
    type: Literal["SessionEndedRequest"]
    reason: str | None = None


SkillRequest = Annotated[LaunchRequest | IntentRequest | SessionEndedRequest, Field(discriminator="type")]


class RequestEnvelope(WireModel):
    """Full inbound request: session plus one request of a known kind."""

    version: str = PROTOCOL_VERSION
    session: Session
    request: SkillRequest

    @property
    def kind(self) -> RequestKind:
        return RequestKind(self.request.type)


# AIDEV-NOTE: Outbound response shape, every field is always serialized
class OutputSpeech(WireModel):
    type: Literal["PlainText"] = "PlainText"
    text: str | None


class Card(WireModel):
    type: Literal["Simple"] = "Simple"
    title: str
    content: str


class Reprompt(WireModel):
    output_speech: OutputSpeech


class SpeechletResponse(WireModel):
    """Spoken output, card and reprompt returned to the voice platform."""

    output_speech: OutputSpeech
    card: Card
    reprompt: Reprompt
    should_end_session: bool


class ResponseEnvelope(WireModel):
    version: str = PROTOCOL_VERSION
    session_attributes: dict[str, Any] = Field(default_factory=dict)
    response: SpeechletResponse


class CommandMessage(BaseModel):
    """Queue message consumed by the kettle controller: ``{"command": "boil"}``."""

    model_config = ConfigDict(frozen=True)

    command: Command
