"""Decoder for the polymorphic profile image payload.

The payload stored under custom_fields.profileImage comes in three shapes:
- JSON text of an object: {"imageUrl": "...", "position": {...}, ...}
- a bare URL or data URI (legacy cards)
- nothing

decode_avatar() never raises; every input maps to exactly one AvatarPayload kind.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Optional


AvatarKind = Literal["json", "url", "absent", "unparseable"]

IMAGE_URL_KEYS = ("imageUrl", "image_url", "url")
IMAGE_REFERENCE_PREFIXES = ("data:image", "http")


@dataclass(frozen=True)
class AvatarPayload:
    kind: AvatarKind
    url: Optional[str] = None


ABSENT = AvatarPayload("absent")
UNPARSEABLE = AvatarPayload("unparseable")


def _is_image_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(IMAGE_REFERENCE_PREFIXES)


def _url_from_object(obj: Any) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    for key in IMAGE_URL_KEYS:
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _try_json(raw: str) -> Optional[Any]:
    if not raw.startswith(("{", "[", '"')):
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None


def decode_avatar(raw: Any) -> AvatarPayload:
    if raw is None:
        return ABSENT
    if isinstance(raw, dict):
        # jsonb column already decoded by the store
        url = _url_from_object(raw)
        return AvatarPayload("json", url) if url else UNPARSEABLE
    if not isinstance(raw, str):
        return UNPARSEABLE

    s = raw.strip()
    if not s:
        return ABSENT
    parsed = _try_json(s)
    if parsed is not None:
        url = _url_from_object(parsed)
        if url:
            return AvatarPayload("json", url)
        if _is_image_reference(parsed):
            return AvatarPayload("url", parsed)
        return UNPARSEABLE
    if _is_image_reference(s):
        return AvatarPayload("url", s)
    return UNPARSEABLE
