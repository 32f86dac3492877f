import logging
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class SkillConfig(BaseSettings):
    """Process-wide skill configuration, read once at startup.

    Loads from environment variables with the IKETTLE_ prefix:
    - IKETTLE_APPLICATION_ID (required)
    - IKETTLE_COMMAND_TOPIC (required)
    - IKETTLE_MQTT_SERVER_HOST (required)
    - IKETTLE_MQTT_SERVER_PORT (default: 1883)
    - IKETTLE_CLIENT_ID (default: ikettle_skill)
    - IKETTLE_PUBLISH_TIMEOUT (default: 5.0)

    Missing required values raise a ValidationError, which is fatal at startup.

    Example:
        >>> config = SkillConfig()
        >>> config = SkillConfig(application_id="amzn1.ask.skill.1234", command_topic="kettle/commands",
        ...                      mqtt_server_host="broker.local")
    """

    model_config = SettingsConfigDict(env_prefix="IKETTLE_", frozen=True)

    application_id: str = Field(description="Application id the voice platform must send")
    command_topic: str = Field(description="Queue destination for kettle commands")
    mqtt_server_host: str = Field(description="Queue transport endpoint")
    mqtt_server_port: int = Field(default=1883, description="Queue transport port")
    client_id: str = Field(default="ikettle_skill", description="Name used for the MQTT client and metrics")
    publish_timeout: float = Field(default=5.0, gt=0, description="Seconds to wait for one command publish")


def combine_yaml_files(file_paths: list[Path]) -> dict:
    """Merge YAML mappings in order; keys from later files win."""
    combined_data: dict = {}
    for file_path in file_paths:
        with file_path.open("r") as file:
            combined_data.update(yaml.safe_load(file) or {})
    return combined_data


def load_config(config_path: str | Path, config_class: type[T]) -> T:
    """Build a config model from one YAML file or every ``*.yaml`` in a directory.

    Values come only from the YAML files; environment variables are not consulted.

    Args:
        config_path: YAML file, or directory whose YAML files are merged in name order
        config_class: Pydantic model class to validate the merged mapping against

    Raises:
        FileNotFoundError: If the file is missing or the directory holds no YAML files
        ValidationError: If the merged mapping is not a valid ``config_class``
    """
    config_path = Path(config_path)
    yaml_files = sorted(config_path.glob("*.yaml")) if config_path.is_dir() else [config_path]
    if not yaml_files:
        raise FileNotFoundError(f"No YAML files found in the directory: {config_path}")

    try:
        return config_class.model_validate(combine_yaml_files(yaml_files))
    except FileNotFoundError:
        logger.error("Config file not found: %s", config_path)
        raise
    except ValidationError as err:
        logger.error("Invalid configuration in %s: %s", config_path, err)
        raise
