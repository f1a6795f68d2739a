import structlog
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from starlette.requests import Request

from earbug_gchat.domains.summary.pipeline import run_summary


router = APIRouter()
logger = structlog.get_logger()


async def post_summary(request: Request) -> PlainTextResponse:
    services = getattr(request.app.state, "services", None)

    if not services:
        logger.error("services_unavailable")
        return PlainTextResponse("service unavailable", status_code=503)

    outcome = await run_summary(services, request.method, request.body)
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


# A plain route with no method list matches every verb, so the pipeline
# answers non-POST requests with its own plain-text 405.
router.add_route("/summary", post_summary)
