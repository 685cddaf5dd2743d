"""
Configuration management for the Company Registry API.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv


class Settings:
    """API server configuration, read from the environment (and .env)."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent.parent
    ENV_FILE: str = str(BASE_DIR / ".env")

    # Server
    API_TITLE: str = "Company Registry API"
    API_DESCRIPTION: str = "CRUD REST service for company records"
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    DEFAULT_LISTEN_ADDRESS: str = ":8080"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_METHODS: List[str] = ["GET", "POST", "PATCH", "DELETE"]
    CORS_HEADERS: List[str] = [
        "Origin",
        "Content-Type",
        "Content-Length",
        "Accept-Encoding",
        "X-CSRF-Token",
        "Authorization",
        "ResponseType",
        "accept",
        "origin",
        "Cache-Control",
        "X-Requested-With",
    ]
    CORS_EXPOSE_HEADERS: List[str] = ["Content-Length"]

    REQUIRED_ENV: List[str] = ["DB_DSN", "KAFKA_HOST", "KAFKA_TOPIC", "JWT_KEY"]

    def __init__(self, env_file: str = None):
        load_dotenv(env_file or self.ENV_FILE)

        self.LISTEN_ADDRESS: str = os.getenv("LISTEN_ADDRESS", "") or self.DEFAULT_LISTEN_ADDRESS
        self.HOST, self.PORT = parse_listen_address(self.LISTEN_ADDRESS)

        self.DB_DSN: str = os.getenv("DB_DSN", "")
        self.KAFKA_HOST: str = os.getenv("KAFKA_HOST", "")
        self.KAFKA_TOPIC: str = os.getenv("KAFKA_TOPIC", "")
        self.JWT_KEY: str = os.getenv("JWT_KEY", "")
        self.LOG_FILE: str = os.getenv("LOG_FILE", "")

    def validate(self) -> None:
        """Raise ValueError naming every required variable that is empty."""
        missing = [name for name in self.REQUIRED_ENV if not getattr(self, name)]
        if missing:
            raise ValueError(
                f"Missing env values: {', '.join(missing)} "
                "(see .env.example for configuration description)"
            )


def parse_listen_address(address: str) -> tuple[str, int]:
    """
    Split 'host:port' into its parts. An empty host means all interfaces.

    >>> parse_listen_address(":8080")
    ('0.0.0.0', 8080)
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid LISTEN_ADDRESS: {address!r}")
    return host or "0.0.0.0", int(port)
