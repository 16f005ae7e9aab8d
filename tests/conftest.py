from __future__ import annotations

import pytest
from _fakes import FakeTransport, ManualClock, RecordingSleep

from pyfuel.config import FuelConfig


@pytest.fixture
def config() -> FuelConfig:
    return FuelConfig(
        supabase_url="https://demo.supabase.co",
        supabase_key="anon-key",
        osrm_base_url="https://router.example.org",
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
