import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .actions.base import Operation
from .connection import KeyNavigator, StoreConnection
from .executor import Executor
from .host import DEFAULT_PING_TIMEOUT, HostResolver
from .host_state import HostOutcome, HostStateMachine, OutcomeStatus, can_transition
from .projector import ResultProjector
from .registry import HiveRoot, parse_hive
from .transport import RegistryTransport

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def _hook(event: str, ctx: Dict[str, Any]) -> None:
    pass


class BatchOptions:

    def __init__(
        self,
        hosts: Optional[Sequence[str]] = None,
        hive: Union[str, HiveRoot] = HiveRoot.LOCAL_MACHINE,
        probe: bool = False,
        detailed: bool = False,
        force: bool = False,
        workers: int = 1,
        check_service: bool = False,
        ping_timeout: float = DEFAULT_PING_TIMEOUT,
    ) -> None:
        self.hosts: List[str] = list(hosts) if hosts else [""]
        self.hive = parse_hive(hive)
        self.probe = probe
        self.detailed = detailed
        self.force = force
        self.workers = workers
        self.check_service = check_service
        self.ping_timeout = ping_timeout


class BatchOrchestrator:
    """
    Runs one operation against every host of a batch.

    Each host walks resolve -> probe -> connect -> navigate -> execute ->
    project -> release on its own; a failure is recorded in that host's
    outcome and the batch moves on. Outcomes come back in input order.
    """

    def __init__(
        self,
        transport: RegistryTransport,
        resolver: Optional[HostResolver] = None,
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.transport = transport
        self.resolver = resolver
        self.confirm = confirm
        # One prompt at a time, also when hosts run on a thread pool.
        self._confirm_lock = threading.Lock()

    def run(self, operation: Operation, options: Optional[BatchOptions] = None) -> List[HostOutcome]:
        options = options or BatchOptions()
        resolver = self.resolver or HostResolver(
            ping_timeout=options.ping_timeout,
            check_service=options.check_service,
        )
        projector = ResultProjector(options.detailed)

        orchestrator = self

        class HostStep:
            def __init__(self, raw_host):
                self.raw_host = raw_host

            def execute(self):
                return orchestrator._run_host(self.raw_host, operation, options, resolver, projector)

        executor = Executor(max_workers=options.workers)
        outcomes = executor.run_steps([HostStep(h) for h in options.hosts])

        _hook("batch", {
            "command": operation.operation_type,
            "hive": options.hive.long_name,
            "key": operation.key,
            "hosts": len(outcomes),
            "succeeded": sum(1 for o in outcomes if o.status is OutcomeStatus.OK),
            "skipped": sum(1 for o in outcomes if o.status is OutcomeStatus.SKIPPED),
            "failed": sum(1 for o in outcomes if o.status is OutcomeStatus.FAILED),
            "result": "failure" if any(o.status is OutcomeStatus.FAILED for o in outcomes) else "success",
        })
        return outcomes

    def _confirm_host(self, operation: Operation, host_name: str, options: BatchOptions) -> str:
        """Returns the skip reason, or an empty string when the host may be mutated."""
        if self.confirm is None:
            return "confirmation required"

        description = f"{operation.get_description()} on {host_name}\\{options.hive.long_name}"
        with self._confirm_lock:
            confirmed = self.confirm(description)
        return "" if confirmed else "declined"

    def _run_host(
        self,
        raw_host: str,
        operation: Operation,
        options: BatchOptions,
        resolver: HostResolver,
        projector: ResultProjector,
    ) -> HostOutcome:
        sm = HostStateMachine(raw_host)
        host_name = raw_host

        ctx: Dict[str, Any] = {
            "command": operation.operation_type,
            "host": raw_host,
            "hive": options.hive.long_name,
            "key": operation.key,
        }

        try:
            sm.transition("resolve")
            host = resolver.resolve(raw_host)
            host_name = ctx["host"] = host.name

            if options.probe:
                sm.transition("probe")
                reachable, reason = resolver.probe(host)
                if not reachable:
                    sm.transition("skip")
                    ctx["result"] = "skipped"
                    ctx["reason"] = reason
                    return HostOutcome.skipped(host_name, reason)

            if operation.mutating and not options.force:
                reason = self._confirm_host(operation, host_name, options)
                if reason:
                    sm.transition("skip")
                    ctx["result"] = "skipped"
                    ctx["reason"] = reason
                    return HostOutcome.skipped(host_name, reason)

            sm.transition("connect")
            with StoreConnection(self.transport, host, options.hive) as conn:
                sm.transition("navigate")
                key = KeyNavigator(conn).open(operation.target(), operation.writable)

                if key is None:
                    result = operation.on_missing_key()
                else:
                    with key:
                        sm.transition("execute")
                        result = operation.execute(key)

                sm.transition("project")
                projected = projector.project(operation, result)
                sm.transition("release")

            sm.transition("done")
            ctx["result"] = "success"
            return HostOutcome.ok(host_name, projected)

        except Exception as e:
            stage = sm.current_state
            if can_transition(stage, "fail"):
                sm.transition("fail")
            logger.debug("%s failed at %s", host_name, stage.value, exc_info=True)

            ctx["result"] = "failure"
            ctx["stage"] = stage.value
            ctx["error"] = e
            return HostOutcome.failed(host_name, stage, e)

        finally:
            _hook("host", dict(ctx))
