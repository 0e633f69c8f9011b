"""
Test classification of target files into provenance tiers and destinations.
"""

from datetime import datetime
from pathlib import Path

import pytest

from datesort.constants import DATE_TAKEN, MEDIA_CREATED, SENTINEL_EPOCH
from datesort.core import DateSorter, FileRecord, destination_for
from datesort.errors import DirectoryNotFoundError, MetadataReadError
from datesort.timestamps import DateParser, Provenance


class TestDestination:
    """Test destination path layout."""

    def test_month_is_zero_padded(self):
        dest = destination_for(Path("/photos"), "img.jpg", datetime(2023, 4, 9))
        assert dest == Path("/photos/2023/04/img.jpg")

    def test_two_digit_month_unchanged(self):
        dest = destination_for(Path("/photos"), "clip.mov", datetime(2021, 11, 30, 23, 59))
        assert dest.parts[-3:] == ("2021", "11", "clip.mov")


class TestFileRecord:
    """Test FileRecord invariants."""

    def test_dated_record_requires_destination(self):
        with pytest.raises(ValueError):
            FileRecord(Path("/t/a.jpg"), Provenance.DATE_TAKEN, datetime(2023, 1, 1))

    def test_undated_record_rejects_date(self):
        with pytest.raises(ValueError):
            FileRecord(Path("/t/a.jpg"), Provenance.NONE_FOUND, datetime(2023, 1, 1),
                       Path("/t/2023/01/a.jpg"))

    def test_error_record_has_no_destination(self):
        record = FileRecord(Path("/t/a.jpg"), Provenance.ERROR, error="locked")
        assert record.resolved_date is None
        assert record.destination_path is None

    def test_records_are_immutable(self):
        record = FileRecord(Path("/t/a.jpg"), Provenance.NONE_FOUND)
        with pytest.raises(AttributeError):
            record.provenance = Provenance.DATE_TAKEN


class TestDateSorter:
    """Test plan building over a target directory."""

    def test_scenarios(self, create_test_files, static_provider):
        target = create_test_files([
            {"name": "christmas.jpg", "mtime": datetime(2024, 5, 1, 12, 0, 0)},
            {"name": "summer.mp4", "mtime": datetime(2024, 5, 1, 12, 0, 0)},
            {"name": "plain.png", "mtime": datetime(2020, 1, 1, 0, 0, 0)},
            {"name": "epoch.jpg", "mtime": SENTINEL_EPOCH},
        ])
        provider = static_provider({
            "christmas.jpg": {DATE_TAKEN: "2023-12-25 10:00:00", MEDIA_CREATED: "2001-01-01"},
            "summer.mp4": {MEDIA_CREATED: "15/06/2021"},
        })

        sorter = DateSorter(target, provider=provider)
        plan = {record.name: record for record in sorter.build_plan()}
        root = target.resolve()

        assert plan["christmas.jpg"].provenance is Provenance.DATE_TAKEN
        assert plan["christmas.jpg"].destination_path == root / "2023" / "12" / "christmas.jpg"

        assert plan["summer.mp4"].provenance is Provenance.MEDIA_CREATED
        assert plan["summer.mp4"].destination_path == root / "2021" / "06" / "summer.mp4"

        assert plan["plain.png"].provenance is Provenance.DATE_MODIFIED
        assert plan["plain.png"].resolved_date == datetime(2020, 1, 1, 0, 0, 0)
        assert plan["plain.png"].destination_path == root / "2020" / "01" / "plain.png"

        assert plan["epoch.jpg"].provenance is Provenance.NONE_FOUND
        assert plan["epoch.jpg"].resolved_date is None
        assert plan["epoch.jpg"].destination_path is None

    def test_non_printable_marks_are_stripped(self, create_test_files, static_provider):
        target = create_test_files([{"name": "phone.jpg"}])
        provider = static_provider({"phone.jpg": {DATE_TAKEN: "‎12/‎25/‎2023 ‏‎10:00 AM"}})

        record = DateSorter(target, provider=provider).build_plan()[0]

        assert record.provenance is Provenance.DATE_TAKEN
        assert record.resolved_date == datetime(2023, 12, 25, 10, 0)

    def test_one_record_per_file_in_listing_order(self, create_test_files, static_provider):
        names = ["b.jpg", "a.jpg", "c.mov", "d.txt"]
        target = create_test_files([{"name": name} for name in names])
        (target / "subfolder").mkdir()
        (target / "subfolder" / "nested.jpg").write_bytes(b"nested")

        plan = DateSorter(target, provider=static_provider()).build_plan()

        assert [record.name for record in plan] == sorted(names)
        assert len({record.source_path for record in plan}) == len(names)

    def test_nuisance_files_skipped(self, create_test_files, static_provider):
        target = create_test_files([{"name": ".DS_Store"}, {"name": "Thumbs.db"},
                                     {"name": "desktop.ini"}, {"name": "a.jpg"}])

        plan = DateSorter(target, provider=static_provider()).build_plan()

        assert [record.name for record in plan] == ["a.jpg"]

    def test_metadata_error_isolated_to_file(self, create_test_files, static_provider):
        target = create_test_files([
            {"name": "a.jpg", "mtime": datetime(2022, 2, 2)},
            {"name": "locked.jpg", "mtime": datetime(2022, 2, 2)},
            {"name": "z.jpg", "mtime": datetime(2022, 2, 2)},
        ])
        provider = static_provider({
            "locked.jpg": {DATE_TAKEN: MetadataReadError("Permission denied: locked.jpg")},
        })

        plan = DateSorter(target, provider=provider).build_plan()

        assert [record.provenance for record in plan] == [
            Provenance.DATE_MODIFIED, Provenance.ERROR, Provenance.DATE_MODIFIED]
        assert plan[1].destination_path is None
        assert "Permission denied" in plan[1].error

    def test_unexpected_error_becomes_error_record(self, create_test_files):
        target = create_test_files([{"name": "a.jpg"}])

        class BrokenProvider:
            def read_dates(self, path):
                raise RuntimeError("shell exploded")

        record = DateSorter(target, provider=BrokenProvider()).build_plan()[0]

        assert record.provenance is Provenance.ERROR
        assert record.error == "shell exploded"

    def test_vanished_file_becomes_error_record(self, tmp_path, static_provider):
        sorter = DateSorter(tmp_path, provider=static_provider())
        record = sorter.classify_file(tmp_path / "gone.jpg")
        assert record.provenance is Provenance.ERROR

    def test_classification_is_idempotent(self, create_test_files, static_provider):
        target = create_test_files([
            {"name": "a.jpg", "mtime": datetime(2019, 9, 9)},
            {"name": "b.jpg", "mtime": SENTINEL_EPOCH},
        ])
        provider = static_provider({"a.jpg": {MEDIA_CREATED: "2018-08-08"}})
        sorter = DateSorter(target, provider=provider)

        assert sorter.build_plan() == sorter.build_plan()

    def test_parser_date_order_applies(self, create_test_files, static_provider):
        target = create_test_files([{"name": "a.jpg"}])
        provider = static_provider({"a.jpg": {DATE_TAKEN: "03/04/2022"}})

        record = DateSorter(target, provider=provider, parser=DateParser("MDY")).build_plan()[0]

        assert record.destination_path.parts[-3:] == ("2022", "03", "a.jpg")

    def test_missing_target(self, tmp_path, static_provider):
        sorter = DateSorter(tmp_path / "missing", provider=static_provider())
        with pytest.raises(DirectoryNotFoundError):
            sorter.find_target_files()
