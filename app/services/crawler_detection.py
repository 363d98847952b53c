"""Link-preview crawler detection by User-Agent allow-list."""
from __future__ import annotations

from typing import Iterable, Optional, Tuple


# 'Zalo' alone is not listed: the Zalo in-app browser carries it and must get the live app.
DEFAULT_CRAWLER_SIGNATURES: Tuple[str, ...] = (
    "facebookexternalhit",
    "Facebot",
    "Twitterbot",
    "LinkedInBot",
    "WhatsApp",
    "TelegramBot",
    "Slackbot",
    "Pinterest",
    "Discordbot",
    "SkypeUriPreview",
    "ZaloBot",
    "ZaloPreviewBot",
    "Applebot",
    "Googlebot",
    "Bingbot",
)


def is_crawler(user_agent: Optional[str], signatures: Iterable[str] = DEFAULT_CRAWLER_SIGNATURES) -> bool:
    """Return True when the User-Agent contains any known preview-crawler signature."""
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(sig.lower() in ua for sig in signatures if sig)
