"""Profile metadata resolution for link previews.

resolve() returns normalized ProfileMetadata or None ("not found"). It never raises for
store failures, timeouts or malformed data; those outcomes are logged and mapped to None.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from app.config import GatewayConfig
from app.db.profile_store import ProfileStoreError
from app.models.profile import ProfileMetadata, ProfileRecord
from app.services.avatar_decoder import decode_avatar


logger = logging.getLogger(__name__)


class ProfileSource(Protocol):
    async def fetch_profile(self, user_code: str) -> Optional[ProfileRecord]: ...


def normalize_record(record: ProfileRecord) -> ProfileMetadata:
    """Map a raw card row to preview metadata.

    The avatar_url column wins when populated; otherwise the custom_fields payload is decoded.
    """
    avatar_url = record.avatar_url
    if not avatar_url:
        payload = decode_avatar(record.profile_image_payload())
        if payload.kind == "unparseable":
            logger.debug("Ignoring unparseable profile image payload")
        avatar_url = payload.url
    return ProfileMetadata(
        name=record.name,
        title=record.title,
        company_name=record.company_name,
        avatar_url=avatar_url,
    )


class ProfileResolver:
    def __init__(self, config: GatewayConfig, store: ProfileSource) -> None:
        self.config = config
        self.store = store
        self._reserved = {r.lower() for r in config.reserved_ids}

    def is_reserved(self, identifier: str) -> bool:
        return identifier.lower() in self._reserved

    async def resolve(self, identifier: Optional[str]) -> Optional[ProfileMetadata]:
        if not identifier or self.is_reserved(identifier):
            return None
        try:
            record = await asyncio.wait_for(
                self.store.fetch_profile(identifier), timeout=self.config.store_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Profile store timed out after %.1fs for %s", self.config.store_timeout, identifier
            )
            return None
        except ProfileStoreError as exc:
            logger.warning("Profile lookup failed for %s: %s", identifier, exc)
            return None

        if record is None:
            logger.info("No card found for %s", identifier)
            return None
        meta = normalize_record(record)
        logger.info(
            "Resolved preview metadata for %s (has_name=%s, has_avatar=%s)",
            identifier,
            meta.name is not None,
            meta.avatar_url is not None,
        )
        return meta
