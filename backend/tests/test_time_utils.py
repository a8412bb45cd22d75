from datetime import date, datetime, timedelta, timezone

import pytest

from purchasing import create_app
from purchasing.config import Config
from purchasing.time_utils import (
    DEFAULT_TIMEZONE,
    TimezoneNormalizer,
    get_timezone,
    parse_api_datetime,
    to_utc_z,
)


JAKARTA = TimezoneNormalizer.from_name("Asia/Jakarta")
NEW_YORK = TimezoneNormalizer.from_name("America/New_York")


class TestConversions:
    def test_to_utc_interprets_wall_clock_in_zone(self):
        assert JAKARTA.to_utc(datetime(2025, 1, 15, 10, 30)) == datetime(2025, 1, 15, 3, 30)

    def test_to_local_from_naive_utc(self):
        assert JAKARTA.to_local(datetime(2025, 1, 15, 3, 30)) == datetime(2025, 1, 15, 10, 30)

    def test_to_local_crosses_date_boundary(self):
        assert JAKARTA.to_local(datetime(2025, 1, 14, 20, 0)) == datetime(2025, 1, 15, 3, 0)

    def test_none_in_none_out(self):
        assert JAKARTA.to_local(None) is None
        assert JAKARTA.to_utc(None) is None
        assert JAKARTA.format(None) is None
        assert JAKARTA.format_for_api_local(None) is None

    def test_aware_input_keeps_its_own_offset(self):
        aware = datetime(2025, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        assert JAKARTA.to_utc(aware) == datetime(2025, 1, 15, 8, 30)
        assert JAKARTA.to_local(aware) == datetime(2025, 1, 15, 15, 30)

    def test_results_are_naive(self):
        assert JAKARTA.to_utc(datetime(2025, 1, 15, 10, 30)).tzinfo is None
        assert JAKARTA.to_local(datetime(2025, 1, 15, 10, 30)).tzinfo is None

    @pytest.mark.parametrize("tz", [JAKARTA, NEW_YORK, TimezoneNormalizer.from_name("UTC")])
    def test_round_trip_over_a_year(self, tz):
        start = datetime(2025, 1, 1, 0, 15)
        for hours in range(0, 24 * 365, 7):
            local = start + timedelta(hours=hours)
            if tz is NEW_YORK and local.date() == date(2025, 3, 9) and local.hour == 2:
                continue  # DST gap: wall time does not exist
            assert tz.to_local(tz.to_utc(local)) == local

    def test_dst_ambiguous_time_resolves_to_earlier_instant(self):
        # 01:30 happens twice on 2025-11-02; the first one is EDT (UTC-4)
        assert NEW_YORK.to_utc(datetime(2025, 11, 2, 1, 30)) == datetime(2025, 11, 2, 5, 30)

    def test_dst_gap_time_is_shifted_forward(self):
        utc = NEW_YORK.to_utc(datetime(2025, 3, 9, 2, 30))
        assert NEW_YORK.to_local(utc) == datetime(2025, 3, 9, 3, 30)


class TestFormattingAndParsing:
    def test_format_for_api_local_pattern(self):
        assert JAKARTA.format_for_api_local(datetime(2025, 1, 15, 3, 30, 5, 123456)) == "2025-01-15T10:30:05"

    def test_display_format(self):
        assert JAKARTA.format(datetime(2025, 1, 15, 3, 30)) == "2025-01-15 10:30:00"

    def test_parse_local(self):
        assert JAKARTA.parse_local("2025-01-15T10:30:00") == datetime(2025, 1, 15, 10, 30)
        assert JAKARTA.parse_local("  ") is None

    @pytest.mark.parametrize("value", ["2025-01-15", "2025-01-15 10:30:00", "15/01/2025T10:30:00", "2025-01-15T10:30"])
    def test_parse_local_rejects_other_shapes(self, value):
        with pytest.raises(ValueError):
            JAKARTA.parse_local(value)

    def test_parse_local_rejects_offsets(self):
        with pytest.raises(ValueError):
            JAKARTA.parse_local("2025-01-15T10:30:00+07:00")

    def test_parse_from_api_bare_is_local(self):
        assert JAKARTA.parse_from_api("2025-01-15T10:30:00") == datetime(2025, 1, 15, 3, 30)

    def test_parse_from_api_with_z(self):
        assert JAKARTA.parse_from_api("2025-01-15T10:30:00Z") == datetime(2025, 1, 15, 10, 30)

    def test_parse_from_api_with_offset(self):
        assert JAKARTA.parse_from_api("2025-01-15T10:30:00-03:00") == datetime(2025, 1, 15, 13, 30)

    def test_parse_api_datetime_keeps_zone_decision_for_later(self):
        assert parse_api_datetime("2025-01-15T10:30:00").tzinfo is None
        assert parse_api_datetime("2025-01-15T10:30:00Z").tzinfo is not None
        assert parse_api_datetime(None) is None

    def test_to_utc_z(self):
        assert to_utc_z(datetime(2025, 1, 15, 3, 30, 0, 999)) == "2025-01-15T03:30:00Z"
        assert to_utc_z(None) is None


class TestZoneInfo:
    def test_unknown_zone_is_rejected(self):
        with pytest.raises(ValueError):
            TimezoneNormalizer.from_name("Mars/Olympus_Mons")

    def test_blank_zone_is_rejected(self):
        with pytest.raises(ValueError):
            TimezoneNormalizer.from_name("")

    def test_offset_strings(self):
        assert JAKARTA.zone_offset() == "+07:00"
        assert TimezoneNormalizer.from_name("UTC").zone_offset() == "Z"
        assert TimezoneNormalizer.from_name("Asia/Kolkata").zone_offset() == "+05:30"

    def test_display_name_mentions_zone(self):
        assert JAKARTA.display_name().startswith("Asia/Jakarta")

    def test_day_bounds_in_utc(self):
        assert JAKARTA.start_of_day(date(2025, 1, 15)) == datetime(2025, 1, 14, 17, 0)
        assert JAKARTA.end_of_day(date(2025, 1, 15)) == datetime(2025, 1, 15, 16, 59, 59, 999999)
        assert JAKARTA.start_of_day(None) is None

    def test_is_today(self):
        assert JAKARTA.is_today(JAKARTA.now())
        assert not JAKARTA.is_today(JAKARTA.now() - timedelta(days=2))
        assert not JAKARTA.is_today(None)

    def test_normalizer_is_immutable(self):
        with pytest.raises(Exception):
            JAKARTA.zone = NEW_YORK.zone


class TestAppConfiguration:
    def test_app_pins_configured_zone(self):
        app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:", "APP_TIMEZONE": "Europe/Berlin"})
        with app.app_context():
            assert get_timezone().name == "Europe/Berlin"

    def test_zone_comes_from_config_when_not_overridden(self):
        app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
        with app.app_context():
            assert get_timezone().name == Config.APP_TIMEZONE

    def test_default_zone_name(self):
        assert DEFAULT_TIMEZONE == "Asia/Jakarta"

    def test_unknown_zone_fails_app_creation(self):
        with pytest.raises(ValueError):
            create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:", "APP_TIMEZONE": "Nowhere/Land"})
