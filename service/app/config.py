"""Application settings loaded from environment variables.

Uses Pydantic BaseSettings so values can come from env vars, .env files,
or defaults. All settings are validated at startup — fail fast if
something critical is missing.

No env prefix: the variable names (SFDC_TOKEN_URL, MCP_API_KEY, ...) are
the ones existing deployments already set.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Gateway configuration."""

    model_config = {"env_file": ".env", "extra": "ignore"}

    # OAuth2 client-credentials exchange
    sfdc_token_url: str
    sfdc_client_id: str
    sfdc_client_secret: SecretStr

    # Salesforce REST API
    sfdc_api_version: str = "60.0"
    sfdc_http_timeout_seconds: float = 30.0
    sfdc_query_max_records: int = 2000

    # Shared secret checked by the API-key middleware
    mcp_api_key: SecretStr
    mcp_protected_paths: str = "/mcp"

    log_level: str = "INFO"

    @model_validator(mode="after")
    def _validate(self) -> "Settings":
        if not self.mcp_api_key.get_secret_value().strip():
            raise ValueError(
                "mcp_api_key must not be empty. Every request to the MCP "
                "endpoint is checked against it."
            )

        if not self.sfdc_token_url.startswith(("https://", "http://")):
            raise ValueError("sfdc_token_url must be an http(s) URL.")

        if self.sfdc_http_timeout_seconds <= 0:
            raise ValueError("sfdc_http_timeout_seconds must be greater than 0.")

        if self.sfdc_query_max_records <= 0:
            raise ValueError("sfdc_query_max_records must be greater than 0.")

        return self

    def get_protected_paths_set(self) -> frozenset[str]:
        """Parse mcp_protected_paths into a frozenset of exact paths."""
        return frozenset(
            p.strip() for p in self.mcp_protected_paths.split(",") if p.strip()
        )
