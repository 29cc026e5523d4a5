"""
Tests for the file-backed config provider and booking repository.
"""

import json
import logging
from datetime import date

import pendulum
import pytest

from bookable.adapters.json_booking_repository import JsonBookingRepository
from bookable.adapters.yaml_config_provider import YamlConfigProvider
from bookable.domain.exceptions import MissingBusinessConfig
from bookable.domain.models import BookedInterval

TZ = "America/New_York"


def _write_bookings(path, entries):
    path.write_text(json.dumps(entries), encoding="utf-8")


class TestJsonBookingRepository:
    """Tests for JsonBookingRepository."""

    def test_missing_file_means_no_bookings(self, tmp_path):
        """Test that a fresh install has no bookings."""
        repository = JsonBookingRepository(tmp_path / "bookings.json", TZ)
        assert repository.get_booked_intervals(date(2024, 11, 25)) == []

    def test_filters_by_local_day(self, tmp_path):
        """Test that only bookings intersecting the local day are returned."""
        path = tmp_path / "bookings.json"
        _write_bookings(
            path,
            [
                # 14:00-14:30 New York on the 25th
                {"start": "2024-11-25T19:00:00Z", "end": "2024-11-25T19:30:00Z", "label": "a"},
                # 23:00-23:30 New York on the 25th, already the 26th in UTC
                {"start": "2024-11-26T04:00:00Z", "end": "2024-11-26T04:30:00Z", "label": "b"},
                # 00:00-00:30 New York on the 26th
                {"start": "2024-11-26T05:00:00Z", "end": "2024-11-26T05:30:00Z", "label": "c"},
                # Ends exactly at local midnight of the 25th
                {"start": "2024-11-25T04:00:00Z", "end": "2024-11-25T05:00:00Z", "label": "d"},
            ],
        )

        repository = JsonBookingRepository(path, TZ)
        labels = [b.label for b in repository.get_booked_intervals(date(2024, 11, 25))]

        assert labels == ["a", "b"]

    def test_skips_invalid_entries(self, tmp_path, caplog):
        """Test that unparseable entries are skipped with a warning."""
        path = tmp_path / "bookings.json"
        _write_bookings(
            path,
            [
                {"start": "2024-11-25T19:00:00Z", "end": "2024-11-25T19:30:00Z"},
                {"start": "not a date", "end": "2024-11-25T19:30:00Z"},
                {"end": "2024-11-25T19:30:00Z"},
                {"start": "2024-11-25T20:00:00Z", "end": "2024-11-25T19:00:00Z"},
                {"start": "P1D", "end": "P2D"},
            ],
        )

        repository = JsonBookingRepository(path, TZ)
        with caplog.at_level(logging.WARNING):
            bookings = repository.get_booked_intervals(date(2024, 11, 25))

        assert len(bookings) == 1
        assert caplog.text.count("Skipping invalid booking") == 4

    def test_invalid_json(self, tmp_path):
        """Test that a corrupt file is reported."""
        path = tmp_path / "bookings.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            JsonBookingRepository(path, TZ).get_booked_intervals(date(2024, 11, 25))

    def test_add_booking_persists(self, tmp_path):
        """Test that added bookings are written as UTC ISO-8601."""
        path = tmp_path / "data" / "bookings.json"
        repository = JsonBookingRepository(path, TZ)

        repository.add_booking(
            BookedInterval(
                start=pendulum.parse("2024-11-25 14:00", tz=TZ),
                end=pendulum.parse("2024-11-25 14:30", tz=TZ),
                label="Ana",
            )
        )

        stored = json.loads(path.read_text(encoding="utf-8"))
        assert stored == [
            {"start": "2024-11-25T19:00:00Z", "end": "2024-11-25T19:30:00Z", "label": "Ana"}
        ]

        reloaded = JsonBookingRepository(path, TZ).get_booked_intervals(date(2024, 11, 25))
        assert reloaded[0].start == pendulum.parse("2024-11-25 14:00", tz=TZ)


class TestYamlConfigProvider:
    """Tests for YamlConfigProvider."""

    def test_loads_calendar_config(self, tmp_path):
        """Test building the domain config from YAML."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "timezone: Europe/Berlin\n"
            "business:\n"
            "  work_start: \"08:30\"\n"
            "  work_end: \"16:00\"\n"
            "  closed_weekdays: [5, 6]\n",
            encoding="utf-8",
        )

        config = YamlConfigProvider(path).get_business_calendar_config()

        assert config.timezone == "Europe/Berlin"
        assert (config.work_start.hour, config.work_start.minute) == (8, 30)
        assert not config.has_lunch
        assert config.closed_weekdays == (5, 6)

    def test_missing_file(self, tmp_path):
        """Test that a missing file means no business config."""
        with pytest.raises(MissingBusinessConfig):
            YamlConfigProvider(tmp_path / "absent.yaml").get_business_calendar_config()

    def test_missing_business_section(self, tmp_path):
        """Test that a config without business hours is missing config."""
        path = tmp_path / "config.yaml"
        path.write_text("timezone: UTC\n", encoding="utf-8")

        with pytest.raises(MissingBusinessConfig, match="business"):
            YamlConfigProvider(path).get_business_calendar_config()
