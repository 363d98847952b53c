from typing import Optional

from fastapi import APIRouter, Request, Response

from app.config import GatewayConfig
from app.services.preview_gateway import PreviewGateway, request_target


router = APIRouter(tags=["preview"])


def _raw_path(request: Request) -> str:
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1")
    return request.url.path


def _raw_query(request: Request) -> Optional[str]:
    raw = request.scope.get("query_string") or b""
    return raw.decode("latin-1") or None


def public_url(request: Request, config: GatewayConfig, target: str) -> str:
    """Absolute URL of the request as the visitor saw it (behind a proxy when forwarded)."""
    if config.public_base_url:
        return f"{config.public_base_url}{target}"
    proto = (request.headers.get("x-forwarded-proto") or "https").split(",")[0].strip()
    host = (
        request.headers.get("x-forwarded-host") or request.headers.get("host") or "localhost"
    ).split(",")[0].strip()
    return f"{proto}://{host}{target}"


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def preview_or_passthrough(full_path: str, request: Request) -> Response:
    gateway: PreviewGateway = request.app.state.gateway
    path = _raw_path(request)
    query = _raw_query(request)
    target = request_target(path, query)
    result = await gateway.handle(
        path=path,
        query=query,
        user_agent=request.headers.get("user-agent"),
        public_url=public_url(request, gateway.config, target),
    )
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)
