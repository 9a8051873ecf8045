import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import core.host as host_mod
import core.orchestrator as orch_mod
from core.connection import KeyNavigator, StoreConnection
from core.host import HostIdentity
from core.registry import HiveRoot
from fake_transport import FakeTransport, LOCAL

LOCAL_NAME = "WORKSTATION"


@pytest.fixture(autouse=True)
def fixed_local_host(monkeypatch):
    monkeypatch.setattr(host_mod, "_local_name", LOCAL_NAME)
    yield


@pytest.fixture(autouse=True)
def silent_hook(monkeypatch):
    monkeypatch.setattr(orch_mod, "_hook", lambda event, ctx: None)
    yield


@pytest.fixture
def transport():
    return FakeTransport(hosts=[LOCAL, "SRV1", "SRV2", "SRV3"])


@pytest.fixture
def connection(transport):
    conn = StoreConnection(transport, HostIdentity("SRV1"), HiveRoot.LOCAL_MACHINE)
    conn.open()
    yield conn
    conn.close()


@pytest.fixture
def company_key(transport, connection):
    transport.seed("SRV1", HiveRoot.LOCAL_MACHINE, "SOFTWARE\\MyCompany")
    key = KeyNavigator(connection).open("SOFTWARE\\MyCompany", writable=True)
    yield key
    key.close()
