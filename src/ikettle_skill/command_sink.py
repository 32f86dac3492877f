"""Outbound command delivery to the kettle controller's MQTT queue."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Protocol

import aiomqtt

from ikettle_skill import skill_logger
from ikettle_skill.errors import CommandDeliveryError
from ikettle_skill.messages import Command, CommandMessage

if TYPE_CHECKING:
    from types import TracebackType

    from ikettle_skill.metrics import MetricsCollector
    from ikettle_skill.skill_config import SkillConfig


class CommandSink(Protocol):
    """Accepts one command and delivers it, raising CommandDeliveryError on failure."""

    async def send(self, command: Command) -> None: ...


# AIDEV-NOTE: Single-shot publish, retries are left to the caller's host
class MqttCommandSink:
    """Publish commands as ``{"command": "<name>"}`` to the configured MQTT topic.

    The broker connection is opened on the first ``send`` so requests that never
    dispatch a command (launch, session end) do not touch the broker. Use the
    sink as an async context manager to close the connection afterwards.
    """

    def __init__(
        self,
        config_obj: SkillConfig,
        metrics: MetricsCollector | None = None,
        logger: logging.Logger | None = None,
        mqtt_client: aiomqtt.Client | None = None,
    ) -> None:
        self.config_obj = config_obj
        self.metrics = metrics
        self.logger = logger or skill_logger.SkillLogger.get_logger(__name__)
        self._mqtt_client = mqtt_client
        self._connected_client: aiomqtt.Client | None = None
        self._exit_stack = AsyncExitStack()

    async def __aenter__(self) -> MqttCommandSink:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _connect(self) -> aiomqtt.Client:
        if self._connected_client is None:
            if self._mqtt_client is None:
                self._mqtt_client = aiomqtt.Client(
                    self.config_obj.mqtt_server_host,
                    port=self.config_obj.mqtt_server_port,
                    identifier=self.config_obj.client_id,
                    logger=self.logger,
                )
            self._connected_client = await self._exit_stack.enter_async_context(self._mqtt_client)
            self.logger.info(
                "Connected to MQTT broker %s:%d", self.config_obj.mqtt_server_host, self.config_obj.mqtt_server_port
            )
        return self._connected_client

    async def send(self, command: Command) -> None:
        """Publish one command, raising CommandDeliveryError if it cannot be delivered.

        Args:
            command: Command to place on the queue

        Raises:
            CommandDeliveryError: On connection failure, MQTT error or publish timeout
        """
        topic = self.config_obj.command_topic
        payload = CommandMessage(command=command).model_dump_json()
        timer_id = self.metrics.start_timer("mqtt_publish") if self.metrics else None

        try:
            client = await self._connect()
            await asyncio.wait_for(
                client.publish(topic=topic, payload=payload, qos=1, retain=False),
                timeout=self.config_obj.publish_timeout,
            )
        except TimeoutError as err:
            self._record(command, timer_id, success=False)
            reason = f"Timed out after {self.config_obj.publish_timeout:.1f}s publishing '{command.value}' to '{topic}'"
            self.logger.error("%s", reason)
            raise CommandDeliveryError(command, reason) from err
        except aiomqtt.MqttError as err:
            self._record(command, timer_id, success=False)
            reason = f"MQTT error publishing '{command.value}' to '{topic}': {err}"
            self.logger.error("%s", reason)
            raise CommandDeliveryError(command, reason) from err

        self._record(command, timer_id, success=True)
        self.logger.info("Published command '%s' to topic '%s'", command.value, topic)

    def _record(self, command: Command, timer_id: str | None, success: bool) -> None:
        if self.metrics is None or timer_id is None:
            return
        duration = self.metrics.end_timer(timer_id)
        self.metrics.record_delivery(command.value, success=success, duration=duration)

    async def aclose(self) -> None:
        """Disconnect from the broker if a connection was opened."""
        self._connected_client = None
        try:
            await self._exit_stack.aclose()
        except aiomqtt.MqttError as err:
            # Commands already published stay delivered
            self.logger.warning("Error while disconnecting from MQTT broker: %s", err)
        self._exit_stack = AsyncExitStack()
