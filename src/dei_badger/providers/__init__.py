"""Source-hosting provider adapters.

Provides a protocol shared by the GitHub and GitLab adapters and a router
that builds the right one from settings.
"""

from typing import List, Optional, Protocol, Union
from ..config import Settings, get_settings
from ..schemas.provider import (
    ProviderResult, UserInfo, RepositorySummary, RepositoryInfo, FileSnapshot
)
from .base import ProviderNotConfigured

class ProviderAdapter(Protocol):
    name: str
    display_name: str

    def build_authorization_redirect(self, state: Optional[str] = None) -> str:
        ...

    def exchange_code_for_token(self, code: str) -> ProviderResult[str]:
        ...

    def fetch_authenticated_user(self, credential: str) -> ProviderResult[UserInfo]:
        ...

    def fetch_user_repositories(self, credential: str) -> ProviderResult[List[RepositorySummary]]:
        ...

    def fetch_repository_info(self, identifier: Union[int, str]) -> ProviderResult[RepositoryInfo]:
        ...

    def fetch_file_snapshot(self, identifier: Union[int, str], path: str, branch: Optional[str] = None) -> ProviderResult[FileSnapshot]:
        ...

def get_provider(name: str, settings: Optional[Settings] = None) -> ProviderAdapter:
    # Simple router; raises ValueError for unknown names
    settings = settings or get_settings()
    config = settings.provider_config(name)
    if config.name == "github":
        from .github import GithubProvider
        return GithubProvider(config)
    from .gitlab import GitlabProvider
    return GitlabProvider(config)

__all__ = ["ProviderAdapter", "ProviderNotConfigured", "get_provider"]
