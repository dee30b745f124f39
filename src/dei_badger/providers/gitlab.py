from typing import Optional, List, Union
from urllib.parse import urlencode, quote

from .base import BaseProvider, decode_content, logger
from ..schemas.provider import (
    ProviderResult, UserInfo, RepositorySummary, RepositoryInfo, FileSnapshot
)

SCOPES = ["read_api"]

class GitlabProvider(BaseProvider):
    name = "gitlab"
    display_name = "GitLab"

    def build_authorization_redirect(self, state: Optional[str] = None) -> str:
        """
        URL of the GitLab OAuth consent page.
        Raises ProviderNotConfigured when no client id is set.
        """
        self._require_client_id()
        params = {
            "client_id": self.config.client_id,
            "response_type": "code",
            "scope": " ".join(SCOPES),
        }
        if self.config.redirect_uri:
            params["redirect_uri"] = self.config.redirect_uri
        if state:
            params["state"] = state
        return f"{self.config.oauth_url}/oauth/authorize?{urlencode(params)}"

    def exchange_code_for_token(self, code: str) -> ProviderResult[str]:
        payload = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.config.redirect_uri,
        }
        try:
            data = self._post_json(f"{self.config.oauth_url}/oauth/token", payload)
            access_token = data.get("access_token")
        except Exception as e:
            logger.warning(f"GitLab token exchange failed: {e}")
            return ProviderResult(errors=[str(e)])

        if not access_token:
            message = data.get("error_description") or data.get("error") or "No access token returned"
            return ProviderResult(errors=[message])
        return ProviderResult[str](result=access_token)

    def fetch_authenticated_user(self, credential: str) -> ProviderResult[UserInfo]:
        try:
            data = self._get_json(f"{self.config.api_url}/user", token=credential)
            user = UserInfo(
                login=data["username"],
                name=data.get("name"),
                email=data.get("email"),
                id=data["id"],
            )
            return ProviderResult[UserInfo](result=user)
        except Exception as e:
            logger.warning(f"GitLab user lookup failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_user_repositories(self, credential: str) -> ProviderResult[List[RepositorySummary]]:
        """Public projects owned by the authenticated user, all pages."""
        try:
            items = self._get_all_pages(
                f"{self.config.api_url}/projects",
                token=credential,
                params={"owned": "true", "visibility": "public"},
            )
            repos = [RepositorySummary(id=item["id"], full_name=item["name_with_namespace"]) for item in items]
            return ProviderResult[List[RepositorySummary]](result=repos)
        except Exception as e:
            logger.warning(f"GitLab project listing failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_repository_info(self, identifier: Union[int, str]) -> ProviderResult[RepositoryInfo]:
        try:
            data = self._get_json(f"{self.config.api_url}/projects/{quote(str(identifier), safe='')}")
            info = RepositoryInfo(
                id=data.get("id", identifier),
                url=data["web_url"],
                full_name=data.get("path_with_namespace"),
                default_branch=data.get("default_branch"),
                locator=data.get("id", identifier),
            )
            return ProviderResult[RepositoryInfo](result=info)
        except Exception as e:
            logger.warning(f"GitLab project {identifier} lookup failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_file_snapshot(self, identifier: Union[int, str], path: str, branch: Optional[str] = None) -> ProviderResult[FileSnapshot]:
        """
        Content and last commit id of `path` in project `identifier`.
        Without a branch the project HEAD is read.
        """
        try:
            data = self._get_json(
                f"{self.config.api_url}/projects/{quote(str(identifier), safe='')}/repository/files/{quote(path, safe='')}",
                params={"ref": branch or "HEAD"},
            )
            snapshot = FileSnapshot(revision=data["last_commit_id"], content=decode_content(data["content"]))
            return ProviderResult[FileSnapshot](result=snapshot)
        except Exception as e:
            logger.info(f"GitLab file {identifier}/{path} not available: {e}")
            return ProviderResult(errors=[str(e)])
