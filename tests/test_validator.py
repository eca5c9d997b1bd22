"""Tests for archive validation and metadata preview."""

import zipfile

from site_snapshot.archive.codec import Archive
from site_snapshot.archive.models import ExportMetadata
from site_snapshot.validator import (
    MISSING_DATABASE_FILES,
    MISSING_FILE,
    MISSING_METADATA,
    archive_metadata,
    validate_archive,
)


def _valid_archive(path):
    with Archive.create(path) as archive:
        archive.write_table("technologies", [{"id": 1, "name": "Python"}])
        archive.write_metadata(
            ExportMetadata(
                export_date="2026-01-15T10:00:00+00:00",
                engine_version="0.1.0",
                database_name="site",
                tables_exported=["technologies"],
                files_count=0,
            )
        )
    return path


class TestValidateArchive:
    def test_valid_archive(self, tmp_path):
        report = validate_archive(_valid_archive(tmp_path / "export.zip"))

        assert report.valid is True
        assert report.errors == []
        assert report.metadata.database_name == "site"
        assert report.metadata.tables_exported == ["technologies"]

    def test_missing_file(self, tmp_path):
        report = validate_archive(tmp_path / "missing.zip")

        assert report.valid is False
        assert report.errors == [MISSING_FILE]
        assert report.metadata is None

    def test_not_an_archive(self, tmp_path):
        path = tmp_path / "export.zip"
        path.write_text("plain text")

        report = validate_archive(path)

        assert report.valid is False
        assert len(report.errors) == 1
        assert report.errors[0].startswith("Cannot open archive")

    def test_missing_metadata(self, tmp_path):
        path = tmp_path / "export.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("database/technologies.json", "[]")

        report = validate_archive(path)

        assert report.valid is False
        assert report.errors == [MISSING_METADATA]

    def test_structural_errors_accumulate(self, tmp_path):
        path = tmp_path / "export.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("files/uploads/a.jpg", b"x")

        report = validate_archive(path)

        assert report.errors == [MISSING_METADATA, MISSING_DATABASE_FILES]

    def test_table_contents_not_inspected(self, tmp_path):
        path = _valid_archive(tmp_path / "export.zip")
        with zipfile.ZipFile(path, "a") as zf:
            zf.writestr("database/tags.json", "not json")

        assert validate_archive(path).valid is True

    def test_unreadable_metadata(self, tmp_path):
        path = tmp_path / "export.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("export-metadata.json", "[1, 2")
            zf.writestr("database/technologies.json", "[]")

        report = validate_archive(path)

        assert report.valid is False
        assert "unreadable metadata" in report.errors[0]


class TestArchiveMetadata:
    def test_returns_metadata(self, tmp_path):
        metadata = archive_metadata(_valid_archive(tmp_path / "export.zip"))
        assert metadata.engine_version == "0.1.0"

    def test_missing_file_returns_none(self, tmp_path):
        assert archive_metadata(tmp_path / "missing.zip") is None

    def test_corrupt_file_returns_none(self, tmp_path):
        path = tmp_path / "export.zip"
        path.write_bytes(b"PK\x03\x04garbage")
        assert archive_metadata(path) is None

    def test_no_metadata_returns_none(self, tmp_path):
        path = tmp_path / "export.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("database/technologies.json", "[]")
        assert archive_metadata(path) is None
