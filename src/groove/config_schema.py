"""Pydantic configuration schema for the Groove CLI.

Mirrors the structure of config.yaml:

    api_token: "..."
    api_endpoint: "https://api.groovehq.com/v2/graphql"
    defaults:
      format: table
      limit: 25
      folder: Inbox

Usage:
    from groove.config_schema import GrooveConfig

    config = GrooveConfig(**yaml_data)
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

OutputFormat = Literal["table", "json", "compact"]

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json", "compact")


class DefaultSettings(BaseModel):
    """Defaults applied when the matching CLI flag is not given."""

    format: OutputFormat | None = Field(
        default=None,
        description="Output format: table, json or compact",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Page size for conversation listings",
    )
    folder: str | None = Field(
        default=None,
        description="Folder name or ID used to filter conversation listings",
    )


class GrooveConfig(BaseModel):
    """Root configuration model."""

    api_token: str | None = Field(
        default=None,
        description="Groove API token (env GROOVEHQ_API_TOKEN and --token take precedence)",
    )
    api_endpoint: str | None = Field(
        default=None,
        description="GraphQL endpoint override",
    )
    defaults: DefaultSettings = Field(default_factory=DefaultSettings)

    @field_validator("api_endpoint")
    @classmethod
    def validate_api_endpoint(cls, v: str | None) -> str | None:
        """Require an http(s) URL when an endpoint is configured."""
        if v is None:
            return v
        if not v.startswith(("https://", "http://")):
            raise ValueError("API endpoint must be an http:// or https:// URL")
        return v
