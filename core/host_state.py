from enum import Enum
from typing import Any, Dict, List, Optional


class HostState(Enum):
    START = "start"
    RESOLVE = "resolve"
    PROBE = "probe"
    CONNECT = "connect"
    NAVIGATE = "navigate"
    EXECUTE = "execute"
    PROJECT = "project"
    RELEASE = "release"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


TRANSITIONS: Dict['HostState', Dict[str, 'HostState']] = {
    HostState.START: {
        "resolve": HostState.RESOLVE,
    },
    HostState.RESOLVE: {
        "probe": HostState.PROBE,
        "connect": HostState.CONNECT,
        "skip": HostState.SKIPPED,
        "fail": HostState.FAILED,
    },
    HostState.PROBE: {
        "connect": HostState.CONNECT,
        "skip": HostState.SKIPPED,
        "fail": HostState.FAILED,
    },
    HostState.CONNECT: {
        "navigate": HostState.NAVIGATE,
        "fail": HostState.FAILED,
    },
    HostState.NAVIGATE: {
        "execute": HostState.EXECUTE,
        # missing key answered without executing (test operations)
        "project": HostState.PROJECT,
        "fail": HostState.FAILED,
    },
    HostState.EXECUTE: {
        "project": HostState.PROJECT,
        "fail": HostState.FAILED,
    },
    HostState.PROJECT: {
        "release": HostState.RELEASE,
    },
    HostState.RELEASE: {
        "done": HostState.DONE,
    },
    HostState.DONE: {},
    HostState.SKIPPED: {},
    HostState.FAILED: {},
}

TERMINAL_STATES = {HostState.DONE, HostState.SKIPPED, HostState.FAILED}


def can_transition(state: HostState, action: str) -> bool:
    return action in TRANSITIONS.get(state, {})


class InvalidTransition(RuntimeError):
    pass


class HostStateMachine:
    """In-memory walk of one host through the pipeline stages."""

    def __init__(self, host: str) -> None:
        self.host = host
        self.current_state = HostState.START
        self.history: List[HostState] = [HostState.START]
        self.failed_stage: Optional[HostState] = None

    def transition(self, action: str) -> HostState:
        valid_actions = TRANSITIONS.get(self.current_state, {})
        if action not in valid_actions:
            raise InvalidTransition(
                f"INVALID TRANSITION: {self.current_state.value} --[{action}]--> ? "
                f"Valid: {list(valid_actions.keys())}"
            )

        next_state = valid_actions[action]
        if next_state is HostState.FAILED:
            self.failed_stage = self.current_state

        self.current_state = next_state
        self.history.append(next_state)
        return next_state

    @property
    def finished(self) -> bool:
        return self.current_state in TERMINAL_STATES


class OutcomeStatus(Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


class HostOutcome:

    def __init__(
        self,
        host: str,
        status: OutcomeStatus,
        result: Any = None,
        reason: str = "",
        error: Optional[BaseException] = None,
        stage: Optional[HostState] = None,
    ) -> None:
        self.host = host
        self.status = status
        self.result = result
        self.reason = reason
        self.error = error
        self.stage = stage

    @classmethod
    def ok(cls, host: str, result: Any) -> "HostOutcome":
        return cls(host, OutcomeStatus.OK, result=result)

    @classmethod
    def skipped(cls, host: str, reason: str) -> "HostOutcome":
        return cls(host, OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, host: str, stage: HostState, error: BaseException) -> "HostOutcome":
        return cls(host, OutcomeStatus.FAILED, reason=str(error), error=error, stage=stage)

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"host": self.host, "status": self.status.value}
        if self.status is OutcomeStatus.OK:
            out["result"] = self.result
        else:
            out["reason"] = self.reason
        if self.stage is not None:
            out["stage"] = self.stage.value
        if self.error is not None:
            out["error"] = type(self.error).__name__
        return out

    def __repr__(self) -> str:
        return f"HostOutcome({self.host}, {self.status.value}, {self.result if self.succeeded else self.reason!r})"
