"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GATEWAY_URL = "https://rt.ntppool.org/REST/1.0/NoAuth/mail-gateway"


class Settings(BaseSettings):
    """Bridge settings loaded from environment variables.

    All settings have defaults suitable for running next to the routing
    config file in the working directory.

    Environment Variables:
        ROUTING_CONFIG_PATH: JSON file mapping addresses to RT queues
        LISTEN: Listen address in host:port form (default :8002)
        RT_GATEWAY_URL: RT mail-gateway endpoint messages are posted to
        GATEWAY_TIMEOUT_SECONDS: Timeout for each outbound gateway call
        MAX_PAYLOAD_BYTES: Maximum accepted webhook body size (default 50 MiB)
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default true)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Routing
    ROUTING_CONFIG_PATH: str = "mandrill-rt.json"

    # Server
    LISTEN: str = ":8002"
    MAX_PAYLOAD_BYTES: int = 50 * 1024 * 1024

    # RT gateway
    RT_GATEWAY_URL: str = DEFAULT_GATEWAY_URL
    GATEWAY_TIMEOUT_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()


def parse_listen_address(listen: str) -> tuple[str, int]:
    """Split a host:port listen address.

    An empty host means all interfaces, so ":8002" binds 0.0.0.0:8002.

    Raises:
        ValueError: If the port is missing or not a valid TCP port
    """
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must be host:port, got '{listen}'")

    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in listen address '{listen}'") from None

    if not 0 < port_number < 65536:
        raise ValueError(f"Port out of range in listen address '{listen}'")

    host = host.strip("[]") or "0.0.0.0"
    return host, port_number
