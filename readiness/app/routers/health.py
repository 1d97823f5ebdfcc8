from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from readiness.app.core import SERVICE_NAME

health_router = APIRouter(tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description=(
        "Returns 200 only when the startup database check passed. Reports the one-shot "
        "startup result; the database is not probed again."
    ),
    responses={
        200: {"description": "Startup database check passed."},
        503: {"description": "Startup database check has not passed."},
    },
)
async def ready(request: Request) -> Response:
    result = getattr(request.app.state, "readiness", None)
    if result is None:
        _log("readiness_not_checked")
        return Response(status_code=503, content="Not ready")
    if not result.ready:
        _log("readiness_not_passed", state=result.state.value)
        return Response(status_code=503, content="Database not ready")
    return Response(status_code=200, content="OK")
