import sys
import json
import argparse
from typing import Any, Dict, List

from infra.telemetry.dispatcher import manager as telemetry_manager
from infra.telemetry.logger import LoggerSink
import core.orchestrator as orchestrator
from core.actions import create_operation, get_available_operation_types
from core.host_state import HostOutcome, OutcomeStatus
from core.host import DEFAULT_PING_TIMEOUT
from core.registry import MULTI_STRING_SEPARATOR

MUTATING = {"new-key", "remove-key", "set-value", "remove-value"}


def setup_telemetry(log_file=None):
    sink = LoggerSink(log_file)
    telemetry_manager.register_sink(sink)

    def hooked_handler(event, ctx):
        telemetry_manager.dispatch(event, ctx)

    orchestrator._hook = hooked_handler


def make_transport():
    from core.winreg_transport import WinRegTransport
    return WinRegTransport()


def prompt_confirm(description: str) -> bool:
    try:
        answer = input(f"{description}? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def render(result: Any) -> Any:
    if isinstance(result, list):
        return [render(r) for r in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return " ".join(f"{b:02x}" for b in obj)
    return str(obj)


def report(outcomes: List[HostOutcome]) -> int:
    failed = 0
    for outcome in outcomes:
        if outcome.status is OutcomeStatus.OK:
            print(json.dumps(render(outcome.result), default=_json_default, ensure_ascii=False))
        elif outcome.status is OutcomeStatus.SKIPPED:
            print(f"[WARNING] {outcome.host}: {outcome.reason}", file=sys.stderr)
        else:
            failed += 1
            print(f"[ERROR] {outcome.host} ({outcome.stage.value}): {outcome.reason}", file=sys.stderr)
    return 1 if failed else 0


def build_definition(args) -> Dict[str, Any]:
    definition: Dict[str, Any] = {"type": args.command, "key": args.key}
    for field in ("value", "data", "value_type", "name", "recursive", "separator"):
        if getattr(args, field, None) is not None:
            definition[field] = getattr(args, field)
    return definition


def cmd_run(args, transport=None, confirm=prompt_confirm) -> int:
    try:
        operation = create_operation(build_definition(args))
        options = orchestrator.BatchOptions(
            hosts=args.hosts,
            hive=args.hive,
            probe=args.ping,
            detailed=args.detailed,
            force=getattr(args, "force", False),
            workers=args.workers,
            check_service=args.check_service,
            ping_timeout=args.ping_timeout,
        )
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if transport is None:
        try:
            transport = make_transport()
        except ImportError as e:
            print(f"ERROR: no registry transport available on this platform ({e})", file=sys.stderr)
            return 1

    runner = orchestrator.BatchOrchestrator(transport, confirm=confirm)
    return report(runner.run(operation, options))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--computer", dest="hosts", action="append", default=None,
                        help="target host (repeatable, default: local host)")
    common.add_argument("--hive", default="LocalMachine")
    common.add_argument("-k", "--key", required=True)
    common.add_argument("--ping", action="store_true", help="skip hosts that do not answer a ping")
    common.add_argument("--check-service", action="store_true",
                        help="with --ping, also require the RemoteRegistry service to be running")
    common.add_argument("--ping-timeout", type=float, default=DEFAULT_PING_TIMEOUT)
    common.add_argument("--detailed", action="store_true", help="emit records instead of True/False")
    common.add_argument("--workers", type=int, default=1)

    parser = argparse.ArgumentParser(prog="remotereg")
    parser.add_argument("--log-file", type=str, default=None)
    sub = parser.add_subparsers(dest="command")

    def add(name, **kw):
        p = sub.add_parser(name, parents=[common], **kw)
        if name in MUTATING:
            p.add_argument("-f", "--force", action="store_true", help="do not ask for confirmation")
        return p

    add("test-key")

    p = add("get-key")
    p.add_argument("--name", help="wildcard filter on subkey names")
    p.add_argument("--recurse", dest="recursive", action="store_true")

    p = add("new-key")
    p.add_argument("--name", help="subkey to create under --key")

    p = add("remove-key")
    p.add_argument("--recurse", dest="recursive", action="store_true")

    p = add("test-value")
    p.add_argument("--value", required=True)
    p.add_argument("--data", help="also require the stored data to equal this")
    p.add_argument("--separator", default=None)

    p = add("get-value")
    p.add_argument("--value", help="value to read; omit to list values")
    p.add_argument("--name", help="wildcard filter on value names when listing")
    p.add_argument("--type", dest="value_type", help="type filter when listing")

    p = add("set-value")
    p.add_argument("--value", required=True)
    p.add_argument("--data", required=True)
    p.add_argument("--type", dest="value_type", default="String")
    p.add_argument("--separator", default=None,
                   help=f"MultiString separator (default {MULTI_STRING_SEPARATOR!r})")

    p = add("remove-value")
    p.add_argument("--value", required=True)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in get_available_operation_types():
        parser.print_help()
        sys.exit(1)

    setup_telemetry(log_file=args.log_file)
    sys.exit(cmd_run(args))


if __name__ == "__main__":
    main()
