"""Unit tests for profile and job registration."""

from datetime import datetime, timedelta, timezone

import pytest

from apihub.core import registry
from apihub.core.errors import ConfigurationError
from apihub.infrastructure.catalog import Catalog

CATALOG = Catalog(
    entries=[
        {
            "id": "weather",
            "name": "Weather",
            "base_url": "https://weather.example.com/v1/",
            "auth_type": "apikey",
            "auth_param": "appid",
            "auth_in": "query",
            "color": "#eb6e4b",
            "capabilities": [{"id": "current", "method": "GET", "endpoint": "/current"}],
        }
    ]
)

NOW = datetime(2025, 10, 30, 12, 0, tzinfo=timezone.utc)


class TestBuildProfile:
    """Test connection profile creation."""

    def test_from_catalog_personalises_only_auth_value(self):
        """Test catalog fields are copied and caller fields other than auth_value ignored."""
        profile = registry.build_profile(
            {"catalog_id": "weather", "auth_value": "k", "name": "Ignored"}, CATALOG, now=NOW
        )

        assert profile.name == "Weather"
        assert profile.base_url == "https://weather.example.com/v1"
        assert profile.auth_in == "query"
        assert profile.auth_value == "k"
        assert profile.catalog_id == "weather"
        assert profile.icon == "W"
        assert profile.capabilities[0].id == "current"
        assert profile.created == NOW
        assert profile.request_count == 0

    def test_unknown_catalog_id_rejected(self):
        """Test unknown catalog ids raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not found"):
            registry.build_profile({"catalog_id": "nope"}, CATALOG)

    def test_custom_profile_defaults(self):
        """Test a custom profile strips trailing slashes and fills defaults."""
        profile = registry.build_profile(
            {"name": "internal", "base_url": "https://x.example.com///", "headers": {"X-A": "1"}},
            CATALOG,
        )

        assert profile.base_url == "https://x.example.com"
        assert profile.auth_type == "none"
        assert profile.icon == "I"
        assert profile.category == "Custom"
        assert profile.headers == {"X-A": "1"}
        assert profile.capabilities == []

    @pytest.mark.parametrize("data", [{"name": "x"}, {"base_url": "https://x"}, {}])
    def test_custom_profile_requires_name_and_base_url(self, data):
        """Test missing required fields raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="name and base_url required"):
            registry.build_profile(data, CATALOG)

    def test_ids_are_unique(self):
        """Test every profile gets a fresh id."""
        ids = {registry.build_profile({"name": "a", "base_url": "https://a"}, CATALOG).id for _ in range(5)}
        assert len(ids) == 5


class TestUpdateProfile:
    """Test partial profile updates."""

    def test_id_and_counters_are_immutable(self, profile_factory):
        """Test updates never change id, created or request_count."""
        profile = profile_factory(request_count=3, created=NOW)

        updated = registry.update_profile(
            profile, {"id": "other", "request_count": 0, "name": "Renamed", "base_url": "https://n/"}
        )

        assert updated.id == "conn-1"
        assert updated.request_count == 3
        assert updated.created == NOW
        assert updated.name == "Renamed"
        assert updated.base_url == "https://n"
        assert profile.name == "Example"

    def test_capabilities_converted(self, profile_factory):
        """Test capability dicts become Capability records."""
        updated = registry.update_profile(
            profile_factory(), {"capabilities": [{"id": "c", "endpoint": "/c", "method": "POST"}]}
        )
        assert updated.find_capability("c").method == "POST"

    def test_invalid_auth_type_rejected(self, profile_factory):
        """Test unknown auth types raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            registry.update_profile(profile_factory(), {"auth_type": "oauth9"})


class TestBuildSchedule:
    """Test scheduled job creation."""

    def test_first_run_one_interval_after_creation(self):
        """Test next_run starts one interval after creation."""
        job = registry.build_schedule(
            {"connection_id": "c", "capability_id": "k", "interval_min": 10}, now=NOW
        )

        assert job.next_run == NOW + timedelta(minutes=10)
        assert job.name == "Scheduled job"
        assert job.enabled is True
        assert job.run_count == 0
        assert job.last_run is None

    def test_interval_clamped_to_one_minute(self):
        """Test intervals below one minute become one minute."""
        job = registry.build_schedule(
            {"connection_id": "c", "capability_id": "k", "interval_min": -4}, now=NOW
        )

        assert job.interval_min == 1
        assert job.next_run == NOW + timedelta(minutes=1)

    def test_missing_fields_rejected(self):
        """Test required fields raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            registry.build_schedule({"connection_id": "c", "interval_min": 5})

    def test_update_reclamps_interval(self):
        """Test updates re-clamp interval_min and keep the id."""
        job = registry.build_schedule(
            {"connection_id": "c", "capability_id": "k", "interval_min": 5}, now=NOW
        )

        updated = registry.update_schedule(job, {"interval_min": 0, "id": "x", "enabled": False})

        assert updated.interval_min == 1
        assert updated.id == job.id
        assert updated.enabled is False
