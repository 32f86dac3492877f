from typing import Any

import pytest

from ikettle_skill import SkillConfig

APPLICATION_ID = "amzn1.echo-sdk-ams.app.1870cd87-679b-427b-841d-010f98cc6198"


@pytest.fixture
def skill_config() -> SkillConfig:
    return SkillConfig(
        application_id=APPLICATION_ID,
        command_topic="test/kettle/commands",
        mqtt_server_host="localhost",
        mqtt_server_port=1883,
        client_id="test_ikettle",
    )


@pytest.fixture
def make_event():
    """Factory for raw platform events in the published request schema."""

    def _make_event(
        request_type: str = "IntentRequest",
        intent_name: str | None = "BoilIntent",
        application_id: str = APPLICATION_ID,
        new: bool = False,
    ) -> dict[str, Any]:
        request: dict[str, Any] = {"type": request_type, "requestId": "EdwRequestId.1234"}
        if request_type == "IntentRequest" and intent_name is not None:
            request["intent"] = {"name": intent_name, "slots": {}}
        if request_type == "SessionEndedRequest":
            request["reason"] = "USER_INITIATED"
        return {
            "version": "1.0",
            "session": {
                "new": new,
                "sessionId": "SessionId.5678",
                "application": {"applicationId": application_id},
                "attributes": {},
            },
            "request": request,
        }

    return _make_event
