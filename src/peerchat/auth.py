"""
Auth module: email/password login, registration, profile photo.

The core only needs the resulting token and user; how they were obtained
is this module's business.
"""

from pathlib import Path
from typing import Optional, Union

from peerchat.errors import AuthError
from peerchat.models.user import AuthState
from peerchat.transport.http import HttpClient


class Auth:
    def __init__(self, http: HttpClient):
        self._http = http

    async def login(self, email: str, password: str) -> AuthState:
        try:
            result = await self._http.post("/auth/login", {"email": email, "password": password}, authenticated=False)
            state = AuthState.model_validate(result)
        except Exception as e:
            raise AuthError(f"Login failed: {e}")
        self._http.set_token(state.token)
        return state

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        photo: Optional[Union[str, Path]] = None,
    ) -> AuthState:
        """Multipart registration; `photo` is an optional local image path."""
        try:
            result = await self._http.post_multipart(
                "/auth/register",
                fields={"username": username, "email": email, "password": password},
                files={"photo": photo} if photo else None,
                authenticated=False,
            )
            state = AuthState.model_validate(result)
        except Exception as e:
            raise AuthError(f"Registration failed: {e}")
        self._http.set_token(state.token)
        return state

    async def update_profile_photo(self, photo: Union[str, Path]) -> Optional[str]:
        """Upload a new avatar. Returns the new profile photo reference."""
        try:
            result = await self._http.post_multipart("/auth/profile-photo", files={"photo": photo})
        except Exception as e:
            raise AuthError(f"Failed to update profile photo: {e}")
        return result.get("profilePhoto") if isinstance(result, dict) else None

    def logout(self) -> None:
        self._http.set_token(None)
