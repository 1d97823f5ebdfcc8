"""Readiness-level constants shared across modules."""
from __future__ import annotations

from enum import Enum


class ReadinessState(str, Enum):
    READY = "READY"
    FAILED = "FAILED"
    REJECTED = "REJECTED"


class ExitCode:
    FAILURE = 1
