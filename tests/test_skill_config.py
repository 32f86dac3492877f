import pytest
from pydantic import ValidationError

from ikettle_skill.skill_config import SkillConfig

DEFAULT_MQTT_PORT = 1883
ENV_MQTT_PORT = 8883
DEFAULT_PUBLISH_TIMEOUT = 5.0

REQUIRED_ENV = ("IKETTLE_APPLICATION_ID", "IKETTLE_COMMAND_TOPIC", "IKETTLE_MQTT_SERVER_HOST")


@pytest.fixture
def clean_env(monkeypatch):
    for name in (*REQUIRED_ENV, "IKETTLE_MQTT_SERVER_PORT", "IKETTLE_CLIENT_ID", "IKETTLE_PUBLISH_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env(clean_env):
    clean_env.setenv("IKETTLE_APPLICATION_ID", "amzn1.ask.skill.env")
    clean_env.setenv("IKETTLE_COMMAND_TOPIC", "env/commands")
    clean_env.setenv("IKETTLE_MQTT_SERVER_HOST", "env_host")
    clean_env.setenv("IKETTLE_MQTT_SERVER_PORT", str(ENV_MQTT_PORT))

    config = SkillConfig()
    assert config.application_id == "amzn1.ask.skill.env"
    assert config.command_topic == "env/commands"
    assert config.mqtt_server_host == "env_host"
    assert config.mqtt_server_port == ENV_MQTT_PORT


def test_defaults(clean_env):
    config = SkillConfig(application_id="app", command_topic="topic", mqtt_server_host="host")
    assert config.mqtt_server_port == DEFAULT_MQTT_PORT
    assert config.client_id == "ikettle_skill"
    assert config.publish_timeout == DEFAULT_PUBLISH_TIMEOUT


@pytest.mark.parametrize("missing", REQUIRED_ENV)
def test_missing_required_env_is_fatal(clean_env, missing):
    for name in REQUIRED_ENV:
        if name != missing:
            clean_env.setenv(name, "value")

    with pytest.raises(ValidationError):
        SkillConfig()


def test_invalid_publish_timeout(clean_env):
    with pytest.raises(ValidationError):
        SkillConfig(application_id="app", command_topic="topic", mqtt_server_host="host", publish_timeout=0)


def test_config_is_immutable(clean_env):
    config = SkillConfig(application_id="app", command_topic="topic", mqtt_server_host="host")
    with pytest.raises(ValidationError):
        config.application_id = "other"
