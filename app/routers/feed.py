import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings
from app.models.request import FeedRequest
from app.services.encoder import MEDIA_TYPE, encode_feed
from app.services.errors import (
    AssemblyError,
    DocumentParseError,
    EncodeError,
    FetchError,
    FetchTimeoutError,
    LinkError,
)
from app.services.pipeline import FeedPipeline

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


def _rate_limit() -> str:
    return get_settings().rate_limit


def get_pipeline() -> FeedPipeline:
    return FeedPipeline(get_settings().pipeline_config())


@router.get(
    "/feed",
    summary="Build a podcast feed for a channel",
    response_class=Response,
    responses={200: {"content": {"application/rss+xml": {}}}},
)
@limiter.limit(_rate_limit)
async def feed(
    request: Request,
    params: Annotated[FeedRequest, Query()],
    pipeline: FeedPipeline = Depends(get_pipeline),
) -> Response:
    """Scrape the channel page behind ``link`` and return it as RSS.

    Passing any of ``title``, ``description``, ``publish_time`` or
    ``updated_time`` makes the request authoritative for the feed identity.
    """
    return await _render(pipeline, params)


@router.post(
    "/feed",
    summary="Build a podcast feed with a caller-supplied identity",
    response_class=Response,
    responses={200: {"content": {"application/rss+xml": {}}}},
)
@limiter.limit(_rate_limit)
async def feed_from_body(
    request: Request,
    body: FeedRequest,
    pipeline: FeedPipeline = Depends(get_pipeline),
) -> Response:
    return await _render(pipeline, body)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

async def _render(pipeline: FeedPipeline, body: FeedRequest) -> Response:
    """Run the pipeline and encode the result, mapping failures to HTTP errors."""
    logger.info("Feed request received", extra={"link": body.link})
    try:
        model = await pipeline.run(body.link, identity=body.identity())
        content = encode_feed(model)
    except LinkError as exc:
        logger.warning("Rejected link %r – %s", body.link, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except FetchTimeoutError as exc:
        raise HTTPException(status_code=504, detail=str(exc))
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    except DocumentParseError as exc:
        logger.error("Could not parse page for %r: %s", body.link, exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except (AssemblyError, EncodeError) as exc:
        logger.error("Could not build feed for %r: %s", body.link, exc)
        raise HTTPException(status_code=500, detail=str(exc))

    return Response(content=content, media_type=MEDIA_TYPE)
