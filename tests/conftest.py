"""Shared fixtures."""

import pytest

from factories import FakeActivities, FakeEvents, FakeReader, FakeResolver
from pokvault.estimation import EstimationService
from pokvault.service import MarketIndexService


@pytest.fixture
def fake_reader():
    return FakeReader(early_exit=500, split=40, assets=1000, reserved=300)


@pytest.fixture
def make_service(fake_reader):
    """Factory: make_service(added=[...], paused=[...], removed=[...], resolved={...}, activities=[...])."""

    def _make(added=(), paused=(), removed=(), resolved=None, fail=None, activities=()):
        events = FakeEvents(added, paused, removed, fail=fail)
        resolver = FakeResolver(resolved)
        feed = FakeActivities(activities)
        return MarketIndexService(events, resolver, EstimationService(fake_reader), activities=feed)

    return _make
