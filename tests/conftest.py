from __future__ import annotations

import pytest

from notifyy.app.bootstrap import Runtime, build_runtime
from notifyy.telemetry import InMemoryTelemetry
from tests.fakes import FakeClock, FakeGateway, FakeStore, make_settings


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def runtime(store: FakeStore, gateway: FakeGateway, clock: FakeClock) -> Runtime:
    return build_runtime(
        make_settings(),
        store=store,
        gateway=gateway,
        telemetry=InMemoryTelemetry(),
        clock=clock,
    )
