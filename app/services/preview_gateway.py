"""Crawler-aware request pipeline.

Crawlers: identifier -> metadata -> preview document (200, publicly cacheable).
Everyone else, and any crawler request that fails unexpectedly: 302 to the same path and query.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from app.config import GatewayConfig
from app.services.crawler_detection import is_crawler
from app.services.preview_document import render_preview_document
from app.services.profile_identifier import extract_profile_identifier
from app.services.profile_resolver import ProfileResolver, ProfileSource


logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass
class GatewayResponse:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


def passthrough(target: str) -> GatewayResponse:
    return GatewayResponse(302, {"Location": target})


def request_target(path: str, query: Optional[str]) -> str:
    return f"{path}?{query}" if query else path


class PreviewGateway:
    def __init__(self, config: GatewayConfig, store: ProfileSource) -> None:
        self.config = config
        self.resolver = ProfileResolver(config, store)

    def is_crawler(self, user_agent: Optional[str]) -> bool:
        return is_crawler(user_agent, self.config.crawler_signatures)

    async def handle(
        self,
        *,
        path: str,
        query: Optional[str],
        user_agent: Optional[str],
        public_url: str,
    ) -> GatewayResponse:
        """Answer one request.

        path and query are the raw request target; public_url is the absolute URL the
        preview page points crawlers and browsers back to.
        """
        target = request_target(path, query)
        if not self.is_crawler(user_agent):
            return passthrough(target)

        logger.info("Crawler detected: %s", user_agent)
        try:
            return await self._render(path, public_url)
        except Exception:
            logger.exception("Preview rendering failed for %s; passing through", target)
            return passthrough(target)

    async def _render(self, path: str, public_url: str) -> GatewayResponse:
        identifier = extract_profile_identifier(path)
        meta = await self.resolver.resolve(identifier)
        body = render_preview_document(
            public_url,
            meta,
            product_name=self.config.product_name,
            fallback_description=self.config.fallback_description,
        )
        max_age = self.config.cache_max_age if meta is not None else self.config.fallback_cache_max_age
        return GatewayResponse(
            200,
            {"Content-Type": HTML_CONTENT_TYPE, "Cache-Control": f"public, max-age={max_age}"},
            body,
        )
