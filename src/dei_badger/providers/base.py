"""Shared HTTP plumbing for provider adapters.

Every public adapter call goes through httpx and returns a ProviderResult;
failures are captured as error strings instead of being raised.
"""

import base64
from typing import Any, Dict, List, Optional

import httpx

from ..config import ProviderConfig
from ..log import get_logger

logger = get_logger("providers")

USER_AGENT = "DEIBadger/1.0"
PAGE_SIZE = 100

class ProviderNotConfigured(Exception):
    """Raised when an OAuth step needs credentials that are not set."""

class BaseProvider:
    name = "provider"
    display_name = "Provider"

    def __init__(self, config: ProviderConfig):
        self.config = config

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = token or self.config.api_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _require_client_id(self):
        if not self.config.is_configured:
            raise ProviderNotConfigured(f"{self.display_name} provider is not configured")

    def _get_json(self, url: str, token: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        with self._client() as client:
            resp = client.get(url, params=params, headers=self._headers(token))
            resp.raise_for_status()
            return resp.json()

    def _post_json(self, url: str, payload: Dict[str, Any]) -> Any:
        with self._client() as client:
            resp = client.post(url, json=payload, headers={"Accept": "application/json"})
            resp.raise_for_status()
            return resp.json()

    def _get_all_pages(self, url: str, token: Optional[str], params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Fetch fixed-size pages starting at 1 until the provider returns an empty page.
        """
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            data = self._get_json(url, token=token, params={**params, "per_page": PAGE_SIZE, "page": page})
            if not isinstance(data, list):
                raise ValueError(f"{self.display_name} API returned an invalid repository page")
            if not data:
                break
            items.extend(data)
            page += 1
        return items

def decode_content(encoded: str) -> str:
    # Provider payloads wrap base64 at 60 chars; b64decode drops the newlines
    # Invalid UTF-8 bytes become U+FFFD instead of failing the whole fetch
    return base64.b64decode(encoded).decode("utf-8", errors="replace")
