"""Explicit state of one result-producing form."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class Action(str, Enum):
    QUERY = "query"
    MARKET_ANALYSIS = "market_analysis"
    POST_HARVEST = "post_harvest"


class ResultPolicy(str, Enum):
    # whichever response resolves last is shown
    LAST_WRITE_WINS = "last_write_wins"
    # only the most recently issued request may write its response
    LATEST_REQUEST = "latest_request"


@dataclass(frozen=True)
class Idle:
    status = "idle"


@dataclass(frozen=True)
class Submitting:
    action: Action
    ticket: int
    status = "submitting"


@dataclass(frozen=True)
class Succeeded:
    action: Action
    ticket: int
    result: Any
    status = "success"


@dataclass(frozen=True)
class Failed:
    action: Action
    ticket: int
    message: str
    status = "error"


FormState = Union[Idle, Submitting, Succeeded, Failed]


def describe_state(state: FormState) -> Dict[str, Any]:
    described: Dict[str, Any] = {"status": state.status}
    if isinstance(state, (Submitting, Succeeded, Failed)):
        described["action"] = state.action.value
        described["ticket"] = state.ticket
    if isinstance(state, Failed):
        described["message"] = state.message
    return described
