from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from loguru import logger
from pydantic import ValidationError

from readiness.app.composition import AppDependencies, create_app_dependencies
from readiness.app.config.settings import Settings
from readiness.app.constants import ExitCode
from readiness.app.core import SERVICE_NAME
from readiness.app.domain.errors import ConfigurationError
from readiness.app.infrastructure.process.signals import cancel_on_shutdown_signals
from readiness.app.infrastructure.process.terminator import HardExitTerminator
from readiness.app.ports.process_terminator import ProcessTerminator
from readiness.app.routers.health import health_router


def _build_dependencies(terminator: ProcessTerminator) -> AppDependencies:
    try:
        return create_app_dependencies(terminator=terminator)
    except (ConfigurationError, ValidationError) as exc:
        logger.bind(service_name=SERVICE_NAME, event="readiness_rejected").error(
            "Invalid readiness configuration: {}", exc
        )
        logger.complete()
        terminator.terminate(ExitCode.FAILURE)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.bind(service_name=SERVICE_NAME, event="app_starting").info("")
    terminator: ProcessTerminator = getattr(app.state, "terminator", None) or HardExitTerminator()
    dependencies: AppDependencies = getattr(app.state, "dependencies", None) or _build_dependencies(terminator)
    app.state.dependencies = dependencies
    app.state.readiness = None
    try:
        # Blocks startup until the database answers; refusal ends the process inside enforce().
        with cancel_on_shutdown_signals(dependencies.waiter):
            app.state.readiness = dependencies.check_readiness()
        yield
    finally:
        logger.bind(service_name=SERVICE_NAME, event="app_stopping").info("")
        dependencies.waiter.cancel()
        dependencies.close()


def create_app(
    dependencies: AppDependencies | None = None,
    *,
    terminator: ProcessTerminator | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Database Readiness Gate",
        version="0.1.0",
        lifespan=lifespan,
    )
    if dependencies is not None:
        app.state.dependencies = dependencies
    if terminator is not None:
        app.state.terminator = terminator
    app.include_router(health_router)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn; the startup check runs in the lifespan before the port opens."""
    settings = Settings()
    uvicorn.run("readiness.app.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
