"""Boundary adapter between the voice platform host and the request router.

The host calls ``lambda_handler`` with the raw request event. Configuration is
read once per process; a fresh sink connection is used for each event.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ikettle_skill import skill_logger
from ikettle_skill.command_sink import CommandSink, MqttCommandSink
from ikettle_skill.dispatcher import CommandDispatcher
from ikettle_skill.errors import MalformedRequestError, SkillError, UnrecognizedRequestKindError
from ikettle_skill.messages import RequestEnvelope, RequestKind, ResponseEnvelope, Session
from ikettle_skill.metrics import MetricsCollector
from ikettle_skill.router import RequestRouter
from ikettle_skill.skill_config import SkillConfig, load_config

KNOWN_REQUEST_KINDS = frozenset(kind.value for kind in RequestKind)
CONFIG_PATH_ENV = "IKETTLE_CONFIG_PATH"
REQUEST_TYPE = TypeAdapter(str)


def parse_envelope(event: Any) -> RequestEnvelope:
    """Validate a raw platform event into a RequestEnvelope.

    An unknown request kind is only reported once the session block is valid,
    and the parsed session travels on the error so the caller can authorize it.

    Raises:
        UnrecognizedRequestKindError: If ``request.type`` is a string naming no known kind
        MalformedRequestError: For any other schema violation
    """
    request = event.get("request") if isinstance(event, Mapping) else None
    request_type = request.get("type") if isinstance(request, Mapping) else None

    try:
        if request_type is not None and REQUEST_TYPE.validate_python(request_type) not in KNOWN_REQUEST_KINDS:
            session = Session.model_validate(event.get("session"))
            raise UnrecognizedRequestKindError(request_type, session=session)
        return RequestEnvelope.model_validate(event)
    except ValidationError as err:
        raise MalformedRequestError(err) from err


@dataclass(frozen=True)
class SkillResult:
    """Outcome of one handled event: a response (possibly None) or an error."""

    response: ResponseEnvelope | None = None
    error: SkillError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any] | None:
        if self.error is not None:
            return {"error": type(self.error).__name__, "message": str(self.error)}
        if self.response is None:
            return None
        return self.response.to_payload()


class SkillHandler:
    """Parse, route and wrap the outcome of one event."""

    def __init__(
        self,
        config_obj: SkillConfig,
        sink: CommandSink,
        metrics: MetricsCollector | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or skill_logger.SkillLogger.get_logger(__name__)
        self.router = RequestRouter(
            config_obj,
            CommandDispatcher(sink, logger=self.logger),
            metrics=metrics,
            logger=self.logger,
        )

    async def handle(self, event: Mapping[str, Any]) -> SkillResult:
        try:
            envelope = self._parse(event)
            response = await self.router.route(envelope)
        except SkillError as err:
            self.logger.error("Request failed with %s: %s", type(err).__name__, err)
            return SkillResult(error=err)
        return SkillResult(response=response)

    def _parse(self, event: Mapping[str, Any]) -> RequestEnvelope:
        try:
            return parse_envelope(event)
        except UnrecognizedRequestKindError as err:
            # Application id is checked before the request kind
            if err.session is not None:
                self.router.authorize(err.session)
            raise


async def handle_event(
    event: Mapping[str, Any],
    config_obj: SkillConfig,
    metrics: MetricsCollector | None = None,
    logger: logging.Logger | None = None,
) -> SkillResult:
    """Handle one event with an MQTT sink that is closed once the event is done."""
    async with MqttCommandSink(config_obj, metrics=metrics, logger=logger) as sink:
        return await SkillHandler(config_obj, sink, metrics=metrics, logger=logger).handle(event)


@cache
def get_config() -> SkillConfig:
    """Process-wide configuration.

    Reads YAML from the file or directory named by IKETTLE_CONFIG_PATH when it
    is set, otherwise from IKETTLE_* environment variables.
    """
    config_path = os.getenv(CONFIG_PATH_ENV)
    if config_path:
        return load_config(config_path, SkillConfig)
    return SkillConfig()


@cache
def get_metrics() -> MetricsCollector:
    return MetricsCollector(skill_name=get_config().client_id)


def lambda_handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any] | None:  # noqa: ARG001
    """Synchronous host entry point.

    Returns the response payload, or None for a session-ended acknowledgement.
    Raises the SkillError of a failed request so the host reports the failure.
    """
    result = asyncio.run(handle_event(event, get_config(), metrics=get_metrics()))
    if result.error is not None:
        raise result.error
    return result.to_payload()
