"""
Tests for the YAML-backed holiday and launch range stores.
"""

import asyncio

import pendulum
import pytest
import yaml

from launchplanner.adapters.holiday_store import HolidayStore
from launchplanner.adapters.range_store import RangeStore
from launchplanner.domain.exceptions import HolidayStoreError, NotFoundError, RangeStoreError


class TestHolidayStore:
    """Tests for HolidayStore."""

    def test_missing_file_is_empty(self, tmp_path):
        store = HolidayStore(tmp_path / "holidays.yaml")

        assert store.all() == []

    def test_load_sorted(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        path.write_text(
            "- id: b\n  name: Epiphany\n  date: 2025-01-06\n"
            "- id: a\n  name: New Year\n  date: 2025-01-01\n",
            encoding="utf-8",
        )

        store = HolidayStore(path)

        assert [h.id for h in store.all()] == ["a", "b"]
        assert store.get_by_date("2025-01-06").name == "Epiphany"
        assert store.is_holiday(pendulum.date(2025, 1, 1))
        assert not store.is_holiday(pendulum.date(2025, 1, 2))

    def test_create_persists(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        store = HolidayStore(path)

        holiday = store.create("Christmas", "2025-12-25")

        reloaded = HolidayStore(path)
        assert reloaded.get_by_id(holiday.id) == holiday
        assert yaml.safe_load(path.read_text(encoding="utf-8"))[0]["date"] == "2025-12-25"

    def test_create_leaves_no_temp_file(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        store = HolidayStore(path)

        store.create("Christmas", "2025-12-25")
        store.create("Boxing Day", "2025-12-26")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["holidays.yaml"]
        assert len(yaml.safe_load(path.read_text(encoding="utf-8"))) == 2

    def test_failed_save_keeps_memory_unchanged(self, tmp_path):
        """A create that cannot be written is not visible afterwards."""
        (tmp_path / "afile").write_text("", encoding="utf-8")
        store = HolidayStore(tmp_path / "afile" / "holidays.yaml")

        with pytest.raises(HolidayStoreError, match="Could not save"):
            store.create("Christmas", "2025-12-25")

        assert store.all() == []
        assert not store.is_holiday("2025-12-25")

    def test_failed_delete_keeps_holiday(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        store = HolidayStore(path)
        holiday = store.create("Christmas", "2025-12-25")
        (tmp_path / ".holidays.yaml.tmp").mkdir()

        with pytest.raises(HolidayStoreError):
            store.delete(holiday.id)

        assert store.get_by_id(holiday.id) == holiday
        assert HolidayStore(path).get_by_id(holiday.id) == holiday

    def test_blank_name_is_rejected(self, tmp_path):
        store = HolidayStore(tmp_path / "holidays.yaml")

        with pytest.raises(HolidayStoreError, match="Invalid holiday"):
            store.create("   ", "2025-12-25")

    def test_queries(self, tmp_path):
        store = HolidayStore(tmp_path / "holidays.yaml")
        store.bulk_create([
            ("New Year", "2025-01-01"),
            ("Epiphany", "2025-01-06"),
            ("New Year", "2026-01-01"),
        ])

        assert [h.name for h in store.get_by_date_range("2025-01-01", "2025-01-06")] == ["New Year", "Epiphany"]
        assert len(store.get_by_year(2026)) == 1

    def test_update_and_delete(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        store = HolidayStore(path)
        holiday = store.create("Holiday", "2025-05-01")

        updated = store.update(holiday.id, name="Labour Day")
        assert updated.name == "Labour Day"
        assert updated.date == pendulum.date(2025, 5, 1)

        store.delete(holiday.id)
        assert HolidayStore(path).all() == []

    def test_unknown_id(self, tmp_path):
        store = HolidayStore(tmp_path / "holidays.yaml")

        with pytest.raises(NotFoundError):
            store.delete("nope")
        with pytest.raises(NotFoundError):
            store.update("nope", name="x")

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        path.write_text("name: not a list\n", encoding="utf-8")

        with pytest.raises(HolidayStoreError, match="must contain a list"):
            HolidayStore(path)

    def test_missing_date(self, tmp_path):
        path = tmp_path / "holidays.yaml"
        path.write_text("- name: Undated\n", encoding="utf-8")

        with pytest.raises(HolidayStoreError, match="Invalid holiday #1"):
            HolidayStore(path)


@pytest.fixture
def ranges_file(tmp_path):
    path = tmp_path / "launches.yaml"
    path.write_text(
        "- id: checkout-v2\n"
        "  name: Checkout v2\n"
        "  start_date: 2025-01-06\n"
        "  end_date: 2025-01-10\n",
        encoding="utf-8",
    )
    return path


class TestRangeStore:
    """Tests for RangeStore."""

    def test_get_range(self, ranges_file):
        store = RangeStore(ranges_file)

        launch_range = store.get_range("checkout-v2")

        assert launch_range.start_date == pendulum.date(2025, 1, 6)
        assert launch_range.business_days() == 5
        assert store.get_range("missing") is None
        assert store.get("checkout-v2").display_name() == "Checkout v2"

    def test_update_range_persists(self, ranges_file):
        store = RangeStore(ranges_file)

        asyncio.run(store.update_range("checkout-v2", pendulum.date(2025, 1, 8), pendulum.date(2025, 1, 14)))

        reloaded = RangeStore(ranges_file)
        assert reloaded.get_range("checkout-v2").end_date == pendulum.date(2025, 1, 14)
        assert reloaded.get("checkout-v2").name == "Checkout v2"

    def test_update_unknown(self, ranges_file):
        store = RangeStore(ranges_file)

        with pytest.raises(NotFoundError):
            asyncio.run(store.update_range("missing", pendulum.date(2025, 1, 8), pendulum.date(2025, 1, 9)))

    def test_reversed_dates_rejected(self, ranges_file):
        store = RangeStore(ranges_file)

        with pytest.raises(RangeStoreError):
            asyncio.run(store.update_range("checkout-v2", pendulum.date(2025, 1, 9), pendulum.date(2025, 1, 8)))

        assert store.get_range("checkout-v2").end_date == pendulum.date(2025, 1, 10)

    def test_failed_save_keeps_old_range(self, ranges_file):
        store = RangeStore(ranges_file)
        (ranges_file.parent / ".launches.yaml.tmp").mkdir()

        with pytest.raises(RangeStoreError, match="Could not save"):
            asyncio.run(store.update_range("checkout-v2", pendulum.date(2025, 1, 8), pendulum.date(2025, 1, 14)))

        assert store.get_range("checkout-v2").end_date == pendulum.date(2025, 1, 10)
        assert RangeStore(ranges_file).get_range("checkout-v2").end_date == pendulum.date(2025, 1, 10)

    def test_display_name_falls_back_to_id(self, tmp_path):
        path = tmp_path / "launches.yaml"
        path.write_text("- {id: a, start_date: 2025-01-06, end_date: 2025-01-07}\n", encoding="utf-8")
        store = RangeStore(path)

        assert store.display_name("a") == "a"
        assert store.display_name("missing") == "missing"

    def test_duplicate_ids(self, tmp_path):
        path = tmp_path / "launches.yaml"
        path.write_text(
            "- {id: a, start_date: 2025-01-06, end_date: 2025-01-07}\n"
            "- {id: a, start_date: 2025-01-08, end_date: 2025-01-09}\n",
            encoding="utf-8",
        )

        with pytest.raises(RangeStoreError, match="Duplicate"):
            RangeStore(path)
