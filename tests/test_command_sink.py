import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import aiomqtt
import pytest

from ikettle_skill import Command, CommandDeliveryError, MetricsCollector, MqttCommandSink


@pytest.fixture
def mqtt_client():
    client = AsyncMock()
    client.__aenter__.return_value = client
    return client


@pytest.fixture
def metrics():
    return MetricsCollector(skill_name="test_sink")


@pytest.fixture
def sink(skill_config, mqtt_client, metrics):
    return MqttCommandSink(skill_config, metrics=metrics, logger=Mock(logging.Logger), mqtt_client=mqtt_client)


class TestMqttCommandSink:
    async def test_publishes_command_message(self, sink, mqtt_client, skill_config, metrics):
        await sink.send(Command.BOIL)

        mqtt_client.publish.assert_awaited_once_with(
            topic=skill_config.command_topic,
            payload='{"command":"boil"}',
            qos=1,
            retain=False,
        )
        assert metrics.get_summary()["commands_delivered"] == {"boil": 1}

    async def test_connects_once_for_several_commands(self, sink, mqtt_client):
        await sink.send(Command.BOIL)
        await sink.send(Command.KEEP_WARM)

        mqtt_client.__aenter__.assert_awaited_once()
        assert mqtt_client.publish.await_count == 2  # noqa: PLR2004

    async def test_no_connection_without_send(self, skill_config, mqtt_client):
        async with MqttCommandSink(skill_config, logger=Mock(logging.Logger), mqtt_client=mqtt_client):
            pass

        mqtt_client.__aenter__.assert_not_called()

    async def test_context_manager_disconnects(self, skill_config, mqtt_client):
        async with MqttCommandSink(skill_config, logger=Mock(logging.Logger), mqtt_client=mqtt_client) as sink:
            await sink.send(Command.OFF)

        mqtt_client.__aexit__.assert_awaited_once()

    async def test_mqtt_error_becomes_delivery_error(self, sink, mqtt_client, metrics):
        mqtt_client.publish.side_effect = aiomqtt.MqttError("not authorised")

        with pytest.raises(CommandDeliveryError) as exc_info:
            await sink.send(Command.KEEP_WARM)

        assert exc_info.value.command is Command.KEEP_WARM
        assert "not authorised" in exc_info.value.reason
        assert str(exc_info.value) == exc_info.value.reason
        assert metrics.get_summary()["commands_failed"] == {"keepwarm": 1}

    async def test_connection_failure_becomes_delivery_error(self, sink, mqtt_client):
        mqtt_client.__aenter__.side_effect = aiomqtt.MqttError("connection refused")

        with pytest.raises(CommandDeliveryError, match="connection refused"):
            await sink.send(Command.BOIL)

        mqtt_client.publish.assert_not_called()

    async def test_timeout_becomes_delivery_error(self, skill_config, mqtt_client):
        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        mqtt_client.publish.side_effect = hang
        config = skill_config.model_copy(update={"publish_timeout": 0.01})
        sink = MqttCommandSink(config, logger=Mock(logging.Logger), mqtt_client=mqtt_client)

        with pytest.raises(CommandDeliveryError, match="Timed out"):
            await sink.send(Command.OFF)

        mqtt_client.publish.assert_called_once()

    async def test_disconnect_error_is_logged(self, skill_config, mqtt_client):
        mqtt_client.__aexit__.side_effect = aiomqtt.MqttError("already closed")
        logger = Mock(logging.Logger)
        sink = MqttCommandSink(skill_config, logger=logger, mqtt_client=mqtt_client)

        await sink.send(Command.BOIL)
        await sink.aclose()

        logger.warning.assert_called_once()

