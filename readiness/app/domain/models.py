"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from readiness.app.constants import ExitCode, ReadinessState
from readiness.app.domain.errors import ReadinessError


@dataclass(frozen=True)
class AttemptState:
    """Position inside the verification loop; used for logging only."""

    attempt_number: int
    max_attempts: int

    @property
    def exhausted(self) -> bool:
        return self.attempt_number >= self.max_attempts


@dataclass(frozen=True)
class Success:
    """The connection source handed out a valid connection."""

    attempts: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Verification ended without a valid connection (exhausted or cancelled)."""

    error: ReadinessError
    attempts: int

    @property
    def ok(self) -> bool:
        return False

    @property
    def last_error(self) -> BaseException:
        """The last condition seen before giving up."""
        return getattr(self.error, "last_error", None) or self.error.__cause__ or self.error


VerificationOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class GateResult:
    """Decision of the lifecycle gate. exit_code is None when startup may continue."""

    state: ReadinessState
    exit_code: int | None = None
    error: ReadinessError | None = None
    attempts: int = 0

    @property
    def ready(self) -> bool:
        return self.state == ReadinessState.READY

    @staticmethod
    def passed(attempts: int) -> "GateResult":
        return GateResult(state=ReadinessState.READY, attempts=attempts)

    @staticmethod
    def rejected(error: ReadinessError, exit_code: int = ExitCode.FAILURE) -> "GateResult":
        return GateResult(state=ReadinessState.REJECTED, exit_code=exit_code, error=error)

    @staticmethod
    def failed(outcome: Failure, exit_code: int = ExitCode.FAILURE) -> "GateResult":
        return GateResult(
            state=ReadinessState.FAILED,
            exit_code=exit_code,
            error=outcome.error,
            attempts=outcome.attempts,
        )
