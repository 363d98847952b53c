from __future__ import annotations

from typing import Optional


def extract_profile_identifier(path: Optional[str]) -> Optional[str]:
    """Return the first non-empty path segment, or None.

    /abc123 -> abc123
    /abc123/contact -> abc123
    /abc123/group123/ -> abc123
    """
    parts = [p for p in (path or "").split("/") if p]
    return parts[0] if parts else None
