"""
REST HTTP client for the chat backend (`{base_url}/api`).
"""

from pathlib import Path
from typing import Any, Optional, Union

import httpx

from peerchat.errors import PeerChatError

DEFAULT_BASE_URL = "https://chat-backend-b5cl.onrender.com"

FileArg = Union[str, Path]


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api",
            headers={"User-Agent": "peerchat/0.1.0", "Accept": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _auth_headers(self, authenticated: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if authenticated and self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _check(resp: httpx.Response) -> Any:
        if resp.status_code >= 400:
            # The backend reports failures as {"msg": "..."}
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("msg"):
                raise PeerChatError("http_error", str(body["msg"]), {"status": resp.status_code})
            raise PeerChatError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}", {"status": resp.status_code})
        return resp.json()

    async def get(self, path: str, authenticated: bool = True) -> Any:
        resp = await self._client.get(path, headers=self._auth_headers(authenticated))
        return self._check(resp)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        resp = await self._client.post(path, json=body, headers=self._auth_headers(authenticated))
        return self._check(resp)

    async def post_multipart(
        self,
        path: str,
        fields: Optional[dict[str, str]] = None,
        files: Optional[dict[str, FileArg]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Multipart form post. `files` maps form field name to a local file path."""
        handles = {}
        try:
            for field, file_path in (files or {}).items():
                p = Path(file_path)
                handles[field] = (p.name, p.open("rb"))
            resp = await self._client.post(
                path, data=fields or {}, files=handles or None,
                headers=self._auth_headers(authenticated),
            )
        finally:
            for _, fh in handles.values():
                fh.close()
        return self._check(resp)

    async def close(self) -> None:
        await self._client.aclose()
