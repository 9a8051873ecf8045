import io
import json

import pytest

import cli.main as cli
from core.registry import HiveRoot, ValueType
from infra.telemetry.dispatcher import TelemetryManager
from infra.telemetry.logger import LoggerSink

HKLM = HiveRoot.LOCAL_MACHINE


def invoke(transport, argv, confirm=None):
    args = cli.build_parser().parse_args(argv)
    return cli.cmd_run(args, transport=transport, confirm=confirm)


class TestCommands:

    def test_set_then_get_value(self, transport, capsys):
        transport.seed("SRV1", HKLM, "SOFTWARE\\MyCompany")

        code = invoke(transport, [
            "set-value", "-c", "SRV1", "-k", "SOFTWARE\\MyCompany",
            "--value", "Port", "--data", "8080", "--type", "DWord", "--force",
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "true"

        code = invoke(transport, ["get-value", "-c", "SRV1", "-k", "SOFTWARE\\MyCompany", "--value", "Port"])
        assert code == 0
        record = json.loads(capsys.readouterr().out)
        assert record["data"] == 8080
        assert record["type"] == "DWord"
        assert record["hive"] == "LocalMachine"

    def test_one_line_per_host(self, transport, capsys):
        transport.seed("SRV2", HKLM, "SOFTWARE")
        code = invoke(transport, ["test-key", "-c", "SRV1", "-c", "SRV2", "-k", "SOFTWARE"])
        assert code == 0
        assert capsys.readouterr().out.split() == ["false", "true"]

    def test_failure_sets_exit_code(self, transport, capsys):
        code = invoke(transport, ["test-key", "-c", "OFFLINE", "-c", "SRV1", "-k", "SOFTWARE"])
        captured = capsys.readouterr()
        assert code == 1
        assert captured.out.strip() == "false"
        assert "[ERROR] OFFLINE (connect)" in captured.err

    def test_skip_is_warning_not_failure(self, transport, capsys):
        transport.seed("SRV1", HKLM, "SOFTWARE\\MyCompany")
        code = invoke(
            transport,
            ["remove-key", "-c", "SRV1", "-k", "SOFTWARE\\MyCompany"],
            confirm=lambda description: False,
        )
        assert code == 0
        assert "[WARNING] SRV1" in capsys.readouterr().err
        assert transport.node("SRV1", HKLM, "SOFTWARE\\MyCompany") is not None

    def test_binary_rendered_as_hex(self, transport, capsys):
        transport.seed("SRV1", HKLM, "SOFTWARE\\MyCompany", {"Blob": (b"\x01\xff", ValueType.BINARY)})
        invoke(transport, ["get-value", "-c", "SRV1", "-k", "SOFTWARE\\MyCompany", "--value", "Blob"])
        assert json.loads(capsys.readouterr().out)["data"] == "01 ff"

    def test_bad_hive_is_usage_error(self, transport, capsys):
        code = invoke(transport, ["test-key", "--hive", "HKEY_NOWHERE", "-k", "SOFTWARE"])
        assert code == 2
        assert "Invalid hive" in capsys.readouterr().err

    def test_key_listing(self, transport, capsys):
        transport.seed("SRV1", HKLM, "SOFTWARE\\MyCompany\\App")
        invoke(transport, ["get-key", "-c", "SRV1", "-k", "SOFTWARE\\MyCompany"])
        listing = json.loads(capsys.readouterr().out)
        assert [k["name"] for k in listing] == ["App"]

    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 1


class TestTelemetry:

    def test_logger_sink_levels(self):
        stream = io.StringIO()
        sink = LoggerSink(stream=stream)
        sink.emit("host", {"host": "SRV1", "result": "success"})
        sink.emit("host", {"host": "SRV2", "result": "failure", "error": ValueError("x")})

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert lines[0] == {"event": "host", "host": "SRV1", "result": "success"}
        assert lines[1]["error"] == "x"

    def test_debug_events_filtered(self):
        stream = io.StringIO()
        sink = LoggerSink(stream=stream)
        sink.emit("host", {"result": "noop"})
        assert stream.getvalue() == ""

    def test_broken_sink_isolated(self):
        class Broken:
            def emit(self, event, payload):
                raise RuntimeError("sink down")

        received = []

        class Recorder:
            def emit(self, event, payload):
                received.append(event)

        telemetry = TelemetryManager()
        telemetry.register_sink(Broken())
        telemetry.register_sink(Recorder())
        telemetry.dispatch("batch", {})
        assert received == ["batch"]
