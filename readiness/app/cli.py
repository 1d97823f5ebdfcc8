"""Standalone readiness check: verify the database once and exit 0, or exit non-zero.

Meant for container pre-start / init steps that must block until the
database accepts pooled connections.
"""
from typing import Any

from loguru import logger

from readiness.app.composition import create_app_dependencies
from readiness.app.core import SERVICE_NAME
from readiness.app.infrastructure.process.signals import cancel_on_shutdown_signals
from readiness.app.infrastructure.process.terminator import SystemExitTerminator


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def run_check() -> None:
    dependencies = create_app_dependencies(terminator=SystemExitTerminator())
    try:
        with cancel_on_shutdown_signals(dependencies.waiter):
            dependencies.check_readiness()
    finally:
        dependencies.close()
    _log("readiness_check_passed")


def main() -> None:
    try:
        run_check()
    except Exception as e:
        logger.exception("readiness check failed: {}", e)
        raise


if __name__ == "__main__":
    main()
