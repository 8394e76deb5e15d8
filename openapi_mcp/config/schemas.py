"""
Configuration Schemas for openapi-mcp-server.

Security:
    Sensitive fields use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr

from openapi_mcp.dispatch.auth import DEFAULT_SKEW_SECONDS, AuthConfig


class ServerSettings(BaseModel):
    """
    Server settings model.

    Built from CLI flags and environment variables by `load_settings`.
    """

    # Wrapped API
    api_base_url: str = Field(..., description="Base URL for the API")
    openapi_spec: str = Field(..., description="Path or URL to OpenAPI specification")
    headers: dict[str, str] = Field(default_factory=dict, description="Static API headers")
    timeout: float = Field(30.0, gt=0, description="Outbound request timeout in seconds")

    # Server identity
    name: str = "mcp-openapi-server"
    version: str = "1.0.0"

    # Credential exchange (optional)
    username: str | None = None
    password: SecretStr | None = None
    client_id: str = ""
    skew_seconds: float = Field(DEFAULT_SKEW_SECONDS, ge=0)

    # Logging
    log_level: str = "INFO"

    class Config:
        extra = "forbid"

    @property
    def auth_enabled(self) -> bool:
        """True when both username and password are configured."""
        return bool(self.username) and self.password is not None and bool(
            self.password.get_secret_value()
        )

    def auth_config(self) -> AuthConfig | None:
        """Credential exchange config, or None when auth is not configured."""
        if not self.auth_enabled:
            return None
        return AuthConfig(
            username=self.username,
            password=self.password.get_secret_value(),
            client_id=self.client_id,
            skew_seconds=self.skew_seconds,
        )
