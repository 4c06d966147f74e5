import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, TypeAdapter, ValidationError
from pydantic_settings import SettingsConfigDict, BaseSettings

DEFAULT_CONFIG_PATH = "/etc/ecowitt2mqtt.conf"

# Keys of the legacy daemon config file that differ from the field names.
LEGACY_KEYS = {
    "host": "weather_host",
    "port": "weather_port",
    "broker": "broker_host",
    "clientid": "client_id",
}


class GatewaySettings(BaseSettings):
    weather_host: str = Field("127.0.0.1", validation_alias="WEATHER_HOST")
    weather_port: int = Field(45000, validation_alias="WEATHER_PORT")
    interval: float = Field(30.0, validation_alias="INTERVAL")
    recv_timeout: float = Field(10.0, validation_alias="RECV_TIMEOUT")
    recv_buffer_size: int = Field(1024, validation_alias="RECV_BUFFER_SIZE")
    staleness_seconds: float = Field(60.0, validation_alias="STALENESS_SECONDS")

    broker_host: str = Field("localhost", validation_alias="BROKER_HOST")
    broker_port: int = Field(1883, validation_alias="BROKER_PORT")
    broker_keepalive: int = Field(10, validation_alias="BROKER_KEEPALIVE")
    broker_username: Optional[str] = Field(None, validation_alias="BROKER_USERNAME")
    broker_password: Optional[str] = Field(None, validation_alias="BROKER_PASSWORD")
    client_id: str = Field("ecowitt2mqtt", validation_alias="CLIENT_ID")
    base_topic: str = Field("ecowitt", validation_alias="BASE_TOPIC")

    log_ring_size: int = Field(200, validation_alias="LOG_RING_SIZE")

    enable_status_api: bool = Field(False, validation_alias="ENABLE_STATUS_API")
    status_api_host: str = Field("127.0.0.1", validation_alias="STATUS_API_HOST")
    status_api_port: int = Field(10280, validation_alias="STATUS_API_PORT")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")


def read_config_file(path: str | Path) -> Dict[str, str]:
    """Read ``key = value`` lines; blank lines and ``#`` comments are skipped."""
    values: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.split("#", 1)[0].strip()
            if not line or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip().lower()] = value.strip().strip('"').strip("'")
    return values


def _coerce(values: Dict[str, str], logger: logging.Logger) -> Dict[str, Any]:
    fields = GatewaySettings.model_fields
    coerced: Dict[str, Any] = {}
    for key, raw in values.items():
        name = LEGACY_KEYS.get(key, key)
        field = fields.get(name)
        if field is None:
            logger.warning("config_key_unknown", extra={"details": {"key": key}})
            continue
        try:
            coerced[name] = TypeAdapter(field.annotation).validate_python(raw)
        except ValidationError as exc:
            logger.warning("config_value_invalid", extra={"details": {"key": key, "error": str(exc)}})
    return coerced


def load_settings(path: str | Path | None = DEFAULT_CONFIG_PATH, logger: Optional[logging.Logger] = None) -> GatewaySettings:
    """
    Build settings from defaults, the environment and an optional config file.

    File values win over the environment. A missing file, an unknown key or an
    invalid value is logged and leaves the default in effect.
    """
    logger = logger or logging.getLogger(__name__)
    overrides: Dict[str, Any] = {}
    if path is not None:
        try:
            overrides = _coerce(read_config_file(path), logger)
        except FileNotFoundError:
            logger.info("config_file_missing", extra={"details": {"path": str(path)}})
        except OSError as exc:
            logger.warning("config_file_unreadable", extra={"details": {"path": str(path), "error": str(exc)}})
    return GatewaySettings(**overrides)
