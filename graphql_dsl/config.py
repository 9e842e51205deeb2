"""
Configuration models for graphql_dsl.

This module defines the client and logging configuration with validation and
defaults, plus loading of client settings from environment variables.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


def _headers_from_json(text: str) -> Dict[str, str]:
    if not text.strip():
        return {}
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"headers must be a JSON object: {e}") from e
    if not isinstance(value, dict):
        raise ValueError("headers must be a JSON object")
    return {str(key): str(item) for key, item in value.items()}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_sensitive_data: bool = Field(
        default=True, description="Mask tokens and credentials in log output"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class ClientConfig(BaseModel):
    """Configuration for the GraphQL client."""

    ENV_PREFIX: ClassVar[str] = "GRAPHQL_DSL_"

    endpoint: HttpUrl = Field(description="GraphQL endpoint URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers for requests")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    user_agent: str = Field(default="graphql-dsl/1.0", description="User-Agent header value")
    raise_on_errors: bool = Field(
        default=False,
        description="Raise GraphQLExecutionError even when partial data was returned",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("headers", mode="before")
    @classmethod
    def parse_headers(cls, value: Any) -> Any:
        """Accept headers as a JSON object string."""
        if isinstance(value, str):
            return _headers_from_json(value)
        return value

    @property
    def url(self) -> str:
        return str(self.endpoint)

    def request_headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        headers.update(self.headers)
        return headers

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "ClientConfig":
        """
        Load client configuration from environment variables.

        Recognized variables: ``GRAPHQL_DSL_ENDPOINT``, ``GRAPHQL_DSL_TIMEOUT``,
        ``GRAPHQL_DSL_HEADERS`` (JSON object), ``GRAPHQL_DSL_TOKEN`` (sent as a
        bearer Authorization header) and ``GRAPHQL_DSL_RAISE_ON_ERRORS``.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Explicit values taking precedence over the environment

        Returns:
            Validated ClientConfig
        """
        env = os.environ if environ is None else environ
        prefix = cls.ENV_PREFIX
        data: Dict[str, Any] = {}

        if f"{prefix}ENDPOINT" in env:
            data["endpoint"] = env[f"{prefix}ENDPOINT"]
        if f"{prefix}TIMEOUT" in env:
            data["timeout"] = env[f"{prefix}TIMEOUT"]
        if f"{prefix}RAISE_ON_ERRORS" in env:
            data["raise_on_errors"] = env[f"{prefix}RAISE_ON_ERRORS"].lower() in ("true", "1", "yes", "on")

        headers = _headers_from_json(env.get(f"{prefix}HEADERS", ""))
        token = env.get(f"{prefix}TOKEN")
        if token:
            headers = {**headers, "Authorization": f"Bearer {token}"}
        if headers:
            data["headers"] = headers

        data.update(overrides)
        return cls(**data)
