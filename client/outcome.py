"""
Outcome of a client-side fetch.

Controllers keep their last outcome next to the state the view reads,
so a test (or a future view) can tell "no cart yet" from "the request
failed" even though both render as an empty cart.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class OutcomeState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """
    Loading, Loaded(data) or Failed(reason).

    `reason` is the exception that caused the failure.
    """
    state: OutcomeState
    data: Any = None
    reason: Optional[BaseException] = None

    @classmethod
    def idle(cls) -> "Outcome":
        return cls(OutcomeState.IDLE)

    @classmethod
    def loading(cls) -> "Outcome":
        return cls(OutcomeState.LOADING)

    @classmethod
    def loaded(cls, data: Any) -> "Outcome":
        return cls(OutcomeState.LOADED, data=data)

    @classmethod
    def failed(cls, reason: BaseException) -> "Outcome":
        return cls(OutcomeState.FAILED, reason=reason)

    @property
    def is_loading(self) -> bool:
        return self.state == OutcomeState.LOADING

    @property
    def is_loaded(self) -> bool:
        return self.state == OutcomeState.LOADED

    @property
    def is_failed(self) -> bool:
        return self.state == OutcomeState.FAILED

    def __str__(self) -> str:
        if self.is_failed:
            return f"Failed({type(self.reason).__name__}: {self.reason})"
        return self.state.value.capitalize()
