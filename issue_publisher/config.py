"""
Configuration module for the pull request issue publisher.

Loads environment variables and provides centralized settings.
All secrets and configuration are managed through environment variables.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when settings are missing or inconsistent."""
    pass


class Settings(BaseSettings):
    """
    Publisher settings loaded from environment variables.

    Secrets are loaded from environment or .env file.
    Never commit secrets to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    ENVIRONMENT: str = Field(default="development")

    # Pull request under review
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    GITHUB_REPOSITORY: str = Field(default="")
    GITHUB_PULL_REQUEST: int = Field(default=0, ge=0)
    GITHUB_TIMEOUT_SECONDS: int = Field(default=30, gt=0)

    # Credentials: either a token, or a GitHub App installation
    GITHUB_OAUTH_TOKEN: str = Field(default="")
    GITHUB_APP_ID: str = Field(default="")
    GITHUB_PRIVATE_KEY: str = Field(default="")
    GITHUB_INSTALLATION_ID: int = Field(default=0, ge=0)

    # Login owning the comments we publish. Resolved from the API when empty.
    GITHUB_LOGIN: str = Field(default="")

    # Reporting behaviour
    TRY_REPORT_ISSUES_INLINE: bool = Field(default=True)
    DELETE_OLD_COMMENTS: bool = Field(default=False)
    MAX_GLOBAL_ISSUES: int = Field(default=10, ge=0)
    ANALYZER_NAME: str = Field(default="SonarQube")
    STATUS_CONTEXT: str = Field(default="sonarqube")

    # Markdown links
    SERVER_BASE_URL: str = Field(default="http://localhost:9000/")
    BADGE_BASE_URL: str = Field(default="https://sonarsource.github.io/sonar-github")

    # Observability
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")

    @field_validator("GITHUB_REPOSITORY")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Repository must look like owner/name."""
        v = v.strip()
        if v and (v.count("/") != 1 or v.startswith("/") or v.endswith("/")):
            raise ValueError(
                f"GITHUB_REPOSITORY must be of the form owner/name, got {v!r}"
            )
        return v

    @field_validator("GITHUB_PRIVATE_KEY", mode="before")
    @classmethod
    def parse_private_key(cls, v):
        """
        Parse GitHub private key.
        Support keys whose newlines were escaped to fit in one variable.
        """
        if v and isinstance(v, str) and "\\n" in v:
            return v.replace("\\n", "\n")
        return v

    @field_validator("SERVER_BASE_URL")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Rule links are appended to the base URL."""
        return v if v.endswith("/") else v + "/"

    @property
    def repository_owner(self) -> str:
        return self.GITHUB_REPOSITORY.split("/")[0]

    @property
    def repository_name(self) -> str:
        return self.GITHUB_REPOSITORY.split("/")[1]

    @property
    def uses_app_auth(self) -> bool:
        return bool(self.GITHUB_APP_ID and self.GITHUB_PRIVATE_KEY)

    def check_publish_ready(self) -> None:
        """
        Verify that a pull request can be reviewed with these settings.

        Raises:
            ConfigurationError: If the repository, pull request or
                credentials are missing
        """
        if not self.GITHUB_REPOSITORY:
            raise ConfigurationError("GITHUB_REPOSITORY is not configured")
        if self.GITHUB_PULL_REQUEST <= 0:
            raise ConfigurationError("GITHUB_PULL_REQUEST is not configured")
        if self.uses_app_auth:
            if not self.GITHUB_INSTALLATION_ID:
                raise ConfigurationError(
                    "GITHUB_INSTALLATION_ID is required with GitHub App credentials"
                )
        elif not self.GITHUB_OAUTH_TOKEN:
            raise ConfigurationError(
                "Either GITHUB_OAUTH_TOKEN or GITHUB_APP_ID/GITHUB_PRIVATE_KEY must be configured"
            )


# Global settings instance
settings = Settings()
