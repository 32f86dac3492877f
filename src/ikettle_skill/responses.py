"""Builders for the responses returned to the voice platform."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ikettle_skill.messages import Card, OutputSpeech, Reprompt, ResponseEnvelope, SpeechletResponse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

CARD_PREFIX = "SessionSpeechlet - "

WELCOME_TITLE = "Welcome"
WELCOME_SPEECH = "Welcome to iKettle.  You can say things like, boil, keep warm, or turn off."
WELCOME_REPROMPT = "You can say things like, boil, keep warm, or turn off."


def build_speechlet_response(
    title: str,
    output: str,
    reprompt_text: str | None,
    should_end_session: bool,
) -> SpeechletResponse:
    """Build a plain-text speechlet response with a simple card.

    Args:
        title: Card title, shown after the fixed card prefix
        output: Text spoken to the user, also used as card content
        reprompt_text: Text spoken if the user does not answer; None keeps the
            reprompt block with a null text
        should_end_session: Whether the platform closes the session after speaking

    Returns:
        SpeechletResponse with every field populated
    """
    return SpeechletResponse(
        output_speech=OutputSpeech(text=output),
        card=Card(title=f"{CARD_PREFIX}{title}", content=f"{CARD_PREFIX}{output}"),
        reprompt=Reprompt(output_speech=OutputSpeech(text=reprompt_text)),
        should_end_session=should_end_session,
    )


def build_empty_response(title: str) -> SpeechletResponse:
    """Silent response that ends the session."""
    return build_speechlet_response(title, "", None, True)


def build_response_envelope(
    session_attributes: Mapping[str, Any],
    speechlet_response: SpeechletResponse,
) -> ResponseEnvelope:
    return ResponseEnvelope(session_attributes=dict(session_attributes), response=speechlet_response)


def build_welcome_response() -> ResponseEnvelope:
    """Response to a launch without an intent: list the supported commands and keep listening."""
    speechlet = build_speechlet_response(WELCOME_TITLE, WELCOME_SPEECH, WELCOME_REPROMPT, False)
    return build_response_envelope({}, speechlet)
