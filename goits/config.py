"""Application configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


class ConfigError(Exception):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class DatabaseConfig:
    host: str
    port: str
    user: str
    password: str
    dbname: str
    sslmode: str
    timezone: str


@dataclass(frozen=True)
class ServerConfig:
    port: str


@dataclass(frozen=True)
class Config:
    database: DatabaseConfig
    server: ServerConfig


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the configuration from ``environ`` (the process environment by default)."""
    env = os.environ if environ is None else environ

    database = DatabaseConfig(
        host=env.get("DB_HOST", "postgres"),
        port=env.get("DB_PORT", "5432"),
        user=env.get("DB_USER", ""),
        password=env.get("DB_PASSWORD", ""),
        dbname=env.get("DB_DBNAME", ""),
        sslmode=env.get("DB_SSLMODE", "disable"),
        timezone=env.get("DB_TIMEZONE", "UTC"),
    )

    required = (
        ("DB_USER", database.user),
        ("DB_PASSWORD", database.password),
        ("DB_DBNAME", database.dbname),
    )
    for name, value in required:
        if not value:
            raise ConfigError(
                f"invalid configuration: {name} environment variable is required"
            )

    port = env.get("SERVER_PORT", "8080")
    if not port.startswith(":"):
        port = ":" + port

    return Config(database=database, server=ServerConfig(port=port))