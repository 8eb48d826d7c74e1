"""Shared fixtures. The data root points at a temporary directory before
any project module is imported."""

import os
import tempfile

os.environ["AZCONF_DATA_ROOT"] = tempfile.mkdtemp(prefix="azconf-tests-")

import pytest

import storage
from mock_gateway import MockGateway
from models import HostedApp, Subscription
from reconciliation import ReconciliationEngine
from selection import SelectionController
from state import SelectionState

SUB_ID = "sub-1"
WEB = HostedApp("myweb", "rg-web", SUB_ID)
API = HostedApp("api", "rg-api", SUB_ID)


@pytest.fixture(autouse=True)
def data_root(tmp_path, monkeypatch):
    """Give every test its own empty data root."""
    monkeypatch.setattr(storage, "DATA_ROOT", tmp_path)
    return tmp_path


@pytest.fixture
def gateway():
    return MockGateway(
        subscriptions=[
            Subscription(subscription_id=SUB_ID, display_name="Sub One", state="Active"),
            Subscription(subscription_id="sub-2", display_name="Sub Two", state="Disabled"),
        ],
        apps={SUB_ID: [WEB, API], "sub-2": []},
        settings={
            (SUB_ID, "rg-web", "myweb"): {"A": "1"},
            (SUB_ID, "rg-api", "api"): {"DATABASE_URL": "postgres://db"},
        },
        expected_names=lambda: ["A", "B"],
    )


@pytest.fixture
def state():
    return SelectionState()


@pytest.fixture
def engine(gateway, state):
    return ReconciliationEngine(gateway, state)


@pytest.fixture
def controller(gateway, state, engine):
    return SelectionController(gateway, state, engine)
