"""Read-only client for the business card table behind the Supabase REST (PostgREST) API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from app.config import GatewayConfig
from app.models.profile import ProfileRecord


logger = logging.getLogger(__name__)

PROFILE_TABLE = "business_cards"
PROFILE_COLUMNS = "name,title,company_name,avatar_url,custom_fields"

_store: Optional["ProfileStore"] = None


class ProfileStoreError(RuntimeError):
    """Raised for any failed store read: transport, status, payload or cardinality."""


class ProfileStore:
    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        *,
        timeout: float = 3.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_config(cls, config: GatewayConfig, client: Optional[httpx.AsyncClient] = None) -> "ProfileStore":
        return cls(config.store_url, config.store_key, timeout=config.store_timeout, client=client)

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _ensure_configured(self):
        if not self.configured:
            raise ProfileStoreError(
                "Profile store credentials are missing.\n"
                "Set SUPABASE_URL (or SUPABASE_PROJECT_ID) and SUPABASE_ANON_KEY in the environment "
                "or in a .env file at the project root."
            )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def fetch_profile(self, user_code: str) -> Optional[ProfileRecord]:
        """Fetch the single card for user_code.

        Returns None when no row matches. Raises ProfileStoreError when the store is
        unreachable, answers with an error, returns something other than a list of rows,
        or matches more than one row.
        """
        self._ensure_configured()
        params = {
            "select": PROFILE_COLUMNS,
            "user_code": f"eq.{user_code}",
            # two rows are enough to detect an ambiguous match
            "limit": "2",
        }
        try:
            url = httpx.URL(f"{self.base_url}/rest/v1/{PROFILE_TABLE}")
            r = await self._get_client().get(url, params=params, headers=self._headers())
            r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProfileStoreError(
                f"Profile store answered {exc.response.status_code} for user_code={user_code!r}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProfileStoreError(f"Profile store request failed: {exc!r}") from exc
        except (httpx.InvalidURL, ValueError) as exc:
            raise ProfileStoreError(f"Invalid profile store URL {self.base_url!r}: {exc}") from exc
        try:
            rows: Any = r.json()
        except ValueError as exc:
            raise ProfileStoreError("Profile store returned a non-JSON body") from exc

        if not isinstance(rows, list):
            raise ProfileStoreError(f"Profile store returned {type(rows).__name__}, expected a list of rows")
        if not rows:
            return None
        if len(rows) > 1:
            raise ProfileStoreError(f"Multiple cards matched user_code={user_code!r}")
        try:
            return ProfileRecord.model_validate(rows[0])
        except ValidationError as exc:
            raise ProfileStoreError(f"Malformed card row for user_code={user_code!r}: {exc}") from exc

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def get_store(config: GatewayConfig) -> ProfileStore:
    """Return the process-wide store client, creating it on first use."""
    global _store
    if _store is None:
        _store = ProfileStore.from_config(config)
        if not _store.configured:
            logger.warning("Profile store credentials missing; crawlers will get fallback previews")
    return _store


async def close_store():
    global _store
    if _store is not None:
        await _store.aclose()
        _store = None
