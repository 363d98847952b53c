"""Static HTML for link-preview crawlers.

The page carries Open Graph / Twitter card tags and immediately sends any client that
renders it on to the live application at the same URL.
"""
from __future__ import annotations

import html
import json
from typing import Optional

from app.config import DEFAULT_PRODUCT_NAME
from app.models.profile import ProfileMetadata


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _js_string(value: str) -> str:
    # JSON string literal that cannot close the surrounding <script> element
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def page_title(meta: Optional[ProfileMetadata], product_name: str = DEFAULT_PRODUCT_NAME) -> str:
    if meta is not None and meta.name:
        return f"{meta.name} | {product_name}"
    return product_name


def page_description(meta: Optional[ProfileMetadata], fallback: str = DEFAULT_PRODUCT_NAME) -> str:
    company = meta.company_name if meta is not None else None
    title = meta.title if meta is not None else None
    if company and title:
        return f"{company} - {title}"
    return company or title or fallback


def render_preview_document(
    url: str,
    meta: Optional[ProfileMetadata],
    *,
    product_name: str = DEFAULT_PRODUCT_NAME,
    fallback_description: Optional[str] = None,
) -> str:
    """Render the preview page for url.

    Image tags are emitted only when the profile has an avatar; there is no placeholder image.
    """
    title = _attr(page_title(meta, product_name))
    description = _attr(page_description(meta, fallback_description or product_name))
    site_name = _attr(product_name)
    safe_url = _attr(url)

    image_tags = ""
    if meta is not None and meta.avatar_url:
        image = _attr(meta.avatar_url)
        image_tags = (
            f'\n  <meta property="og:image" content="{image}">'
            f'\n  <meta name="twitter:image" content="{image}">'
        )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">

  <title>{title}</title>
  <meta name="title" content="{title}">
  <meta name="description" content="{description}">

  <meta property="og:type" content="website">
  <meta property="og:url" content="{safe_url}">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta property="og:site_name" content="{site_name}">{image_tags}

  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:url" content="{safe_url}">
  <meta name="twitter:title" content="{title}">
  <meta name="twitter:description" content="{description}">

  <meta http-equiv="refresh" content="0;url={safe_url}">
</head>
<body>
  <p>Redirecting to {site_name}...</p>
  <script>window.location.href = {_js_string(url)};</script>
</body>
</html>"""
