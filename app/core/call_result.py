from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallState(str, Enum):
    """States of a single capability call.

    Idle -> Invoking -> {Success, Failed}
    Success -> Normalizing -> {Normalized, NormalizeFailed}
    Failed | NormalizeFailed -> FallbackServed
    """

    IDLE = "idle"
    INVOKING = "invoking"
    SUCCESS = "success"
    FAILED = "failed"
    NORMALIZING = "normalizing"
    NORMALIZED = "normalized"
    NORMALIZE_FAILED = "normalize_failed"
    FALLBACK_SERVED = "fallback_served"


_TRANSITIONS = {
    CallState.IDLE: {CallState.INVOKING},
    CallState.INVOKING: {CallState.SUCCESS, CallState.FAILED},
    CallState.SUCCESS: {CallState.NORMALIZING},
    CallState.NORMALIZING: {CallState.NORMALIZED, CallState.NORMALIZE_FAILED},
    CallState.FAILED: {CallState.FALLBACK_SERVED},
    CallState.NORMALIZE_FAILED: {CallState.FALLBACK_SERVED},
    CallState.NORMALIZED: set(),
    CallState.FALLBACK_SERVED: set(),
}


@dataclass
class CallResult(Generic[T]):
    state: CallState = CallState.IDLE
    value: Optional[T] = None
    error: Optional[Exception] = None
    capability: str = ""

    def advance(self, state: CallState) -> "CallResult[T]":
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid transition {self.state.value} -> {state.value} for {self.capability}"
            )
        logger.debug("%s: %s -> %s", self.capability, self.state.value, state.value)
        self.state = state
        return self

    def fail(self, error: Exception) -> "CallResult[T]":
        self.error = error
        if self.state == CallState.NORMALIZING:
            return self.advance(CallState.NORMALIZE_FAILED)
        return self.advance(CallState.FAILED)

    def complete(self, value: T) -> "CallResult[T]":
        self.value = value
        return self.advance(CallState.NORMALIZED)

    @classmethod
    def normalized(cls, value: T, capability: str = "") -> "CallResult[T]":
        return cls(state=CallState.NORMALIZED, value=value, capability=capability)

    @classmethod
    def failed(cls, error: Exception, capability: str = "") -> "CallResult[T]":
        return cls(state=CallState.FAILED, error=error, capability=capability)

    @classmethod
    def normalize_failed(cls, error: Exception, capability: str = "") -> "CallResult[T]":
        return cls(state=CallState.NORMALIZE_FAILED, error=error, capability=capability)

    @property
    def ok(self) -> bool:
        return self.state == CallState.NORMALIZED

    def unwrap(self) -> T:
        if self.ok:
            return self.value
        if self.error is not None:
            raise self.error
        raise RuntimeError(f"Call in state {self.state.value} has no value")

    def or_else(self, fallback: Callable[[], T]) -> T:
        if self.ok:
            return self.value
        logger.warning(
            "Serving fallback for %s after %s: %s",
            self.capability or "capability",
            self.state.value,
            self.error,
        )
        if self.state != CallState.FALLBACK_SERVED:
            self.advance(CallState.FALLBACK_SERVED)
        return fallback()
