"""
Rewrite Service Endpoint

The browser-callable rewrite function:

    POST /functions/v1/humanize-text
    {text, readability?, purpose?, strength?}
      → 200 {humanizedText, success: true}
      → 400 {error, success: false}   malformed request
      → 500 {error, success: false}   every strategy failed

No user session is required here. Credits are enforced by the
orchestrator (/api/humanize), not by this endpoint.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..logging import get_logger
from ..services.input_validator import InputValidationError
from ..services.options import normalize_options
from ..services.rewrite_adapter import RewriteAdapter
from .deps import get_adapter


logger = get_logger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Rewrite Service"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "success": False},
        headers=CORS_HEADERS
    )


@router.options("/humanize-text")
async def humanize_text_preflight():
    """CORS pre-flight for browsers calling the function directly."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.post("/humanize-text")
async def humanize_text(
    request: Request,
    adapter: RewriteAdapter = Depends(get_adapter)
):
    """
    Humanize text through the strategy chain.

    The body is read raw so that malformed input gets the
    {error, success: false} shape instead of a framework 422.
    """
    try:
        body = await request.json()
    except ValueError:
        return _error("Request body must be valid JSON", status.HTTP_400_BAD_REQUEST)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", status.HTTP_400_BAD_REQUEST)

    try:
        text = adapter.validator.validate(body.get("text"))
    except InputValidationError as e:
        return _error(e.message, status.HTTP_400_BAD_REQUEST)

    options = normalize_options(
        body.get("readability"),
        body.get("purpose"),
        body.get("strength")
    )
    result = await adapter.run(text, options)

    if not result.success:
        logger.error("Rewrite chain exhausted without output")
        return _error(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info("Humanized %d chars via %s", len(text), result.strategy)
    return JSONResponse(content=result.to_wire(), headers=CORS_HEADERS)
