from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["core"])


@router.api_route("/health", methods=["GET", "HEAD"], response_class=PlainTextResponse)
def health():
    """Liveness probe for the container platform."""
    return "healthy\n"
