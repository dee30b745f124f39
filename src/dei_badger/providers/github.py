from typing import Optional, List, Union
from urllib.parse import urlencode, quote

from .base import BaseProvider, decode_content, logger
from ..schemas.provider import (
    ProviderResult, UserInfo, RepositorySummary, RepositoryInfo, FileSnapshot
)

SCOPES = ["user", "repo"]

class GithubProvider(BaseProvider):
    name = "github"
    display_name = "GitHub"

    def build_authorization_redirect(self, state: Optional[str] = None) -> str:
        """
        URL of the GitHub OAuth consent page.
        Raises ProviderNotConfigured when no client id is set.
        """
        self._require_client_id()
        params = {"client_id": self.config.client_id, "scope": ",".join(SCOPES)}
        if self.config.redirect_uri:
            params["redirect_uri"] = self.config.redirect_uri
        if state:
            params["state"] = state
        return f"{self.config.oauth_url}/login/oauth/authorize?{urlencode(params)}"

    def exchange_code_for_token(self, code: str) -> ProviderResult[str]:
        payload = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
        }
        if self.config.redirect_uri:
            payload["redirect_uri"] = self.config.redirect_uri
        try:
            data = self._post_json(f"{self.config.oauth_url}/login/oauth/access_token", payload)
            access_token = data.get("access_token")
        except Exception as e:
            logger.warning(f"GitHub token exchange failed: {e}")
            return ProviderResult(errors=[str(e)])

        # GitHub answers 200 with an error body for bad or expired codes
        if not access_token:
            message = data.get("error_description") or data.get("error") or "No access token returned"
            return ProviderResult(errors=[message])
        return ProviderResult[str](result=access_token)

    def fetch_authenticated_user(self, credential: str) -> ProviderResult[UserInfo]:
        try:
            data = self._get_json(f"{self.config.api_url}/user", token=credential)
            user = UserInfo(
                login=data["login"],
                name=data.get("name"),
                email=data.get("email"),
                id=data["id"],
            )
            return ProviderResult[UserInfo](result=user)
        except Exception as e:
            logger.warning(f"GitHub user lookup failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_user_repositories(self, credential: str) -> ProviderResult[List[RepositorySummary]]:
        """Public repositories of the authenticated user, all pages."""
        try:
            items = self._get_all_pages(
                f"{self.config.api_url}/user/repos",
                token=credential,
                params={"visibility": "public"},
            )
            repos = [RepositorySummary(id=item["id"], full_name=item["full_name"]) for item in items]
            return ProviderResult[List[RepositorySummary]](result=repos)
        except Exception as e:
            logger.warning(f"GitHub repository listing failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_repository_info(self, identifier: Union[int, str]) -> ProviderResult[RepositoryInfo]:
        try:
            data = self._get_json(f"{self.config.api_url}/repositories/{identifier}")
            info = RepositoryInfo(
                id=data["id"],
                url=data["html_url"],
                full_name=data["full_name"],
                default_branch=data.get("default_branch"),
                locator=data["full_name"],
            )
            return ProviderResult[RepositoryInfo](result=info)
        except Exception as e:
            logger.warning(f"GitHub repository {identifier} lookup failed: {e}")
            return ProviderResult(errors=[str(e)])

    def fetch_file_snapshot(self, identifier: Union[int, str], path: str, branch: Optional[str] = None) -> ProviderResult[FileSnapshot]:
        """
        Content and blob SHA of `path` in the `owner/name` repository.
        """
        owner, _, repo = str(identifier).partition("/")
        if not owner or not repo:
            return ProviderResult(errors=[f"Expected an owner/name repository, got {identifier!r}"])

        params = {"ref": branch} if branch else None
        try:
            data = self._get_json(
                f"{self.config.api_url}/repos/{owner}/{repo}/contents/{quote(path)}",
                params=params,
            )
            if not isinstance(data, dict) or "content" not in data:
                return ProviderResult(errors=[f"{path} is not a file"])
            snapshot = FileSnapshot(revision=data["sha"], content=decode_content(data["content"]))
            return ProviderResult[FileSnapshot](result=snapshot)
        except Exception as e:
            logger.info(f"GitHub file {identifier}/{path} not available: {e}")
            return ProviderResult(errors=[str(e)])
