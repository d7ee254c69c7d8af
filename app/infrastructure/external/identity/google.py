"""Google identity verifier: exchanges an access token for a verified identity."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.dtos.client import VerifiedIdentity
from app.domain.exceptions import AuthenticationException
from app.infrastructure.exceptions import IdentityProviderError

logger = logging.getLogger(__name__)

DEFAULT_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class GoogleIdentityVerifier:
    """Calls Google's OpenID Connect userinfo endpoint with the caller's access token.

    Only identities with a subject and a verified email are accepted.
    """

    PROVIDER_NAME = "google"

    def __init__(
        self,
        userinfo_url: str = DEFAULT_USERINFO_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._userinfo_url = userinfo_url
        self._http = http_client
        self._timeout = timeout

    async def _fetch_userinfo(self, access_token: str) -> httpx.Response:
        headers = {"Authorization": f"Bearer {access_token}"}
        if self._http is not None:
            return await self._http.get(self._userinfo_url, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(self._userinfo_url, headers=headers)

    async def verify(self, credentials: str) -> VerifiedIdentity:
        """Return the identity behind a Google access token.

        Raises:
            AuthenticationException: If the token is rejected or the identity
                lacks a subject or a verified email.
            IdentityProviderError: If Google cannot be reached or answers
                with a server error.
        """
        if not credentials:
            raise AuthenticationException("Missing identity provider token")
        try:
            response = await self._fetch_userinfo(credentials)
        except httpx.HTTPError as e:
            logger.error("%s userinfo request failed: %s", self.PROVIDER_NAME, e)
            raise IdentityProviderError(self.PROVIDER_NAME, str(e)) from e
        if response.status_code >= 500:
            logger.error(
                "%s userinfo failed: status=%d",
                self.PROVIDER_NAME,
                response.status_code,
            )
            raise IdentityProviderError(
                self.PROVIDER_NAME, f"status {response.status_code}"
            )
        if response.status_code != 200:
            logger.info(
                "%s rejected token: status=%d",
                self.PROVIDER_NAME,
                response.status_code,
            )
            raise AuthenticationException("Identity provider rejected the token")
        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise IdentityProviderError(self.PROVIDER_NAME, "invalid JSON") from e
        return self._to_identity(data)

    def _to_identity(self, data: dict[str, Any]) -> VerifiedIdentity:
        sub = data.get("sub")
        email = data.get("email")
        if not sub or not email:
            raise AuthenticationException("Identity is missing subject or email")
        if data.get("email_verified") is False:
            raise AuthenticationException("Identity email is not verified")
        return VerifiedIdentity(
            social_id=str(sub),
            email=str(email),
            first_name=data.get("given_name") or "",
            last_name=data.get("family_name") or "",
            picture_url=data.get("picture"),
        )
