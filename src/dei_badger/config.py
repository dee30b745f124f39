from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field
from functools import lru_cache
from typing import Optional

class ProviderConfig(BaseModel):
    """Credentials and endpoints handed to a provider adapter at construction."""
    name: str
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    api_token: Optional[str] = None
    api_url: str
    oauth_url: str
    timeout: float = 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id)

class Settings(BaseSettings):
    # GitHub OAuth app
    GITHUB_APP_CLIENT_ID: Optional[str] = Field(None, description="GitHub OAuth App client id")
    GITHUB_APP_CLIENT_SECRET: Optional[str] = Field(None, description="GitHub OAuth App client secret")
    GITHUB_APP_REDIRECT_URI: Optional[str] = None
    GITHUB_API_TOKEN: Optional[str] = Field(None, description="Optional token for unauthenticated fetches (rate limits)")
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_OAUTH_URL: str = "https://github.com"

    # GitLab OAuth app
    GITLAB_APP_CLIENT_ID: Optional[str] = Field(None, description="GitLab application id")
    GITLAB_APP_CLIENT_SECRET: Optional[str] = Field(None, description="GitLab application secret")
    GITLAB_APP_REDIRECT_URI: Optional[str] = None
    GITLAB_API_TOKEN: Optional[str] = None
    GITLAB_BASE_URL: str = "https://gitlab.com"

    HTTP_TIMEOUT: float = 15.0
    DB_PATH: str = Field("./badges.sqlite", description="Path to SQLite database")
    TRACKED_FILE: str = "DEI.md"
    BADGE_TIER: str = "Bronze"
    BRONZE_BADGE_URL: str = "https://img.shields.io/badge/DEI-Bronze-cd7f32"

    # Mail
    SMTP_HOST: Optional[str] = Field(None, description="SMTP server; mail is disabled when unset")
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM: str = "badges@dei-badger.local"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def provider_config(self, name: str) -> ProviderConfig:
        name = name.strip().lower()
        if name == "github":
            return ProviderConfig(
                name="github",
                client_id=self.GITHUB_APP_CLIENT_ID,
                client_secret=self.GITHUB_APP_CLIENT_SECRET,
                redirect_uri=self.GITHUB_APP_REDIRECT_URI,
                api_token=self.GITHUB_API_TOKEN,
                api_url=self.GITHUB_API_URL.rstrip("/"),
                oauth_url=self.GITHUB_OAUTH_URL.rstrip("/"),
                timeout=self.HTTP_TIMEOUT,
            )
        if name == "gitlab":
            base_url = self.GITLAB_BASE_URL.rstrip("/")
            return ProviderConfig(
                name="gitlab",
                client_id=self.GITLAB_APP_CLIENT_ID,
                client_secret=self.GITLAB_APP_CLIENT_SECRET,
                redirect_uri=self.GITLAB_APP_REDIRECT_URI,
                api_token=self.GITLAB_API_TOKEN,
                api_url=f"{base_url}/api/v4",
                oauth_url=base_url,
                timeout=self.HTTP_TIMEOUT,
            )
        raise ValueError(f"Unsupported provider: {name}")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
