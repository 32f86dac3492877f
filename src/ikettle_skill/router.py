"""Request routing: authorization, session events and dispatch by request kind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ikettle_skill import responses, skill_logger
from ikettle_skill.errors import AuthorizationError, SkillError, UnrecognizedRequestKindError
from ikettle_skill.messages import IntentRequest, LaunchRequest, SessionEndedRequest

if TYPE_CHECKING:
    from ikettle_skill.dispatcher import CommandDispatcher
    from ikettle_skill.messages import RequestEnvelope, ResponseEnvelope, Session
    from ikettle_skill.metrics import MetricsCollector
    from ikettle_skill.skill_config import SkillConfig


class RequestRouter:
    """Route one parsed request envelope to a response.

    Args:
        config_obj: Skill configuration holding the expected application id
        dispatcher: Dispatcher used for intent requests
        metrics: Optional collector for per-request counters
        logger: Optional custom logger, defaults to the module logger
    """

    def __init__(
        self,
        config_obj: SkillConfig,
        dispatcher: CommandDispatcher,
        metrics: MetricsCollector | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config_obj = config_obj
        self.dispatcher = dispatcher
        self.metrics = metrics
        self.logger = logger or skill_logger.SkillLogger.get_logger(__name__)

    async def route(self, envelope: RequestEnvelope) -> ResponseEnvelope | None:
        """Handle one request.

        Returns:
            The response envelope, or None for a session-ended acknowledgement

        Raises:
            AuthorizationError: If the application id does not match, before any dispatch
            UnknownIntentError: If an intent request names an unknown intent
            CommandDeliveryError: If a command for the intent could not be delivered
            UnrecognizedRequestKindError: If the request is of no known kind
        """
        kind = envelope.request.type
        try:
            response = await self._route(envelope)
        except SkillError as err:
            if self.metrics:
                self.metrics.record_request(kind, success=False, error=err)
            raise

        if self.metrics:
            self.metrics.record_request(kind, success=True)
        return response

    async def _route(self, envelope: RequestEnvelope) -> ResponseEnvelope | None:
        session = envelope.session
        request = envelope.request

        self.authorize(session)

        if session.is_new:
            self.logger.info("onSessionStarted requestId=%s, sessionId=%s", request.request_id, session.session_id)

        if isinstance(request, LaunchRequest):
            self.logger.info("onLaunch requestId=%s, sessionId=%s", request.request_id, session.session_id)
            return responses.build_welcome_response()

        if isinstance(request, IntentRequest):
            self.logger.info("onIntent requestId=%s, sessionId=%s", request.request_id, session.session_id)
            intent_name = request.intent.name
            await self.dispatcher.dispatch(intent_name)
            return responses.build_response_envelope({}, responses.build_empty_response(intent_name))

        if isinstance(request, SessionEndedRequest):
            self.logger.info(
                "onSessionEnded requestId=%s, sessionId=%s, reason=%s",
                request.request_id,
                session.session_id,
                request.reason,
            )
            return None

        raise UnrecognizedRequestKindError(getattr(request, "type", None))

    def authorize(self, session: Session) -> None:
        """Reject requests from any application other than the configured one."""
        application_id = session.application.application_id
        self.logger.debug("session.application.applicationId=%s", application_id)
        if application_id != self.config_obj.application_id:
            self.logger.warning("Rejected request from unexpected application id %s", application_id)
            raise AuthorizationError(application_id)
