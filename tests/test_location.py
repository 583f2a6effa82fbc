"""Tests for location providers."""

from location import AuthorizationStatus, ManualLocationProvider, status_string
from ranking import Coordinate


class TestStatusString:
    def test_none_is_unknown(self):
        assert status_string(None) == "unknown"

    def test_known_statuses(self):
        assert status_string(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE) == "authorizedWhenInUse"
        assert status_string(AuthorizationStatus.DENIED) == "denied"


class TestManualLocationProvider:
    def test_initial_location(self):
        provider = ManualLocationProvider(Coordinate(64.0, -22.0))
        assert provider.current_location() == Coordinate(64.0, -22.0)
        assert provider.authorization_status is None

    def test_update_keeps_only_latest(self):
        provider = ManualLocationProvider()
        provider.update(Coordinate(64.0, -22.0))
        provider.update(Coordinate(65.0, -18.0))
        assert provider.current_location() == Coordinate(65.0, -18.0)

    def test_subscribers_are_notified(self):
        provider = ManualLocationProvider()
        seen = []
        provider.subscribe(seen.append)
        provider.update(Coordinate(64.0, -22.0))
        assert seen == [Coordinate(64.0, -22.0)]

    def test_unsubscribe(self):
        provider = ManualLocationProvider()
        seen = []
        unsubscribe = provider.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        provider.update(Coordinate(64.0, -22.0))
        assert seen == []

    def test_authorization_change_notifies(self):
        provider = ManualLocationProvider(Coordinate(64.0, -22.0))
        seen = []
        provider.subscribe(seen.append)
        provider.update_authorization(AuthorizationStatus.AUTHORIZED_ALWAYS)
        assert provider.authorization_status is AuthorizationStatus.AUTHORIZED_ALWAYS
        assert seen == [Coordinate(64.0, -22.0)]
