"""Backoff policies.

A policy maps the number of failed attempts so far to the delay (in seconds)
before the next attempt. Policies are frozen value objects: stateless,
deterministic and safe to share.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class BackoffPolicy(Protocol):
    def __call__(self, attempt: int) -> float: ...


@dataclass(frozen=True)
class LinearBackoff:
    """Delay grows in proportion to the attempt number: attempt * base_seconds."""

    base_seconds: float = 2.0

    def __post_init__(self) -> None:
        if self.base_seconds < 0:
            raise ValueError("base_seconds must be >= 0")

    def __call__(self, attempt: int) -> float:
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return attempt * self.base_seconds


@dataclass(frozen=True)
class ExponentialBackoff:
    """initial_seconds * multiplier ** (attempt - 1), capped at max_seconds."""

    initial_seconds: float
    max_seconds: float
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.initial_seconds < 0 or self.max_seconds < 0:
            raise ValueError("backoff delays must be >= 0")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")

    def __call__(self, attempt: int) -> float:
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return min(self.initial_seconds * self.multiplier ** (attempt - 1), self.max_seconds)
