"""Tests for package discovery under an app's directory."""

import os
import plistlib
import zipfile
from pathlib import Path

import pytest

from altsource.storage.bundle_info import BundleInfo, BundleVersion, read_bundle_info
from altsource.storage.discovery import scan_app_directory
from conftest import write_package


def write_ipa(path: Path, info: dict, plist_name: str = "Payload/Demo.app/Info.plist") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(plist_name, plistlib.dumps(info))
    return path


class TestScanAppDirectory:
    def test_lists_packages_with_sizes(self, apps_dir):
        files = scan_app_directory(apps_dir, "Demo")

        assert [(f.filename, f.size) for f in files] == [
            ("Demo_1.0.0.ipa", 1000),
            ("Demo_1.1.0.ipa", 2000),
        ]
        assert all(f.app_name == "Demo" for f in files)
        assert all(f.path.is_absolute() for f in files)

    def test_missing_app_directory_is_empty(self, apps_dir):
        assert scan_app_directory(apps_dir, "Unknown") == []

    def test_missing_apps_directory_is_empty(self, tmp_path):
        assert scan_app_directory(tmp_path / "nope", "Demo") == []

    def test_sorted_by_file_name(self, tmp_path):
        app_dir = tmp_path / "Demo"
        for name in ["Demo_3.0.ipa", "Demo_1.0.ipa", "Demo_2.0.ipa"]:
            write_package(app_dir, name, 10)

        files = scan_app_directory(tmp_path, "Demo")

        assert [f.filename for f in files] == ["Demo_1.0.ipa", "Demo_2.0.ipa", "Demo_3.0.ipa"]

    def test_skips_other_extensions_and_hidden_files(self, tmp_path):
        app_dir = tmp_path / "Demo"
        write_package(app_dir, "Demo_1.0.ipa", 10)
        write_package(app_dir, "notes.txt", 10)
        write_package(app_dir, ".Demo_2.0.ipa", 10)

        files = scan_app_directory(tmp_path, "Demo")

        assert [f.filename for f in files] == ["Demo_1.0.ipa"]

    def test_accepts_upper_case_suffix(self, tmp_path):
        write_package(tmp_path / "Demo", "Demo_1.0.IPA", 10)

        assert [f.filename for f in scan_app_directory(tmp_path, "Demo")] == ["Demo_1.0.IPA"]

    def test_nested_directories_are_ignored(self, tmp_path):
        app_dir = tmp_path / "Demo"
        write_package(app_dir, "Demo_1.0.ipa", 10)
        write_package(app_dir / "old", "Demo_0.9.ipa", 10)
        (app_dir / "Demo_0.8.ipa").mkdir()

        assert [f.filename for f in scan_app_directory(tmp_path, "Demo")] == ["Demo_1.0.ipa"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_broken_symlink_is_skipped(self, tmp_path):
        app_dir = tmp_path / "Demo"
        write_package(app_dir, "Demo_1.0.ipa", 10)
        os.symlink(tmp_path / "missing.ipa", app_dir / "Demo_2.0.ipa")

        assert [f.filename for f in scan_app_directory(tmp_path, "Demo")] == ["Demo_1.0.ipa"]

    def test_reads_bundle_metadata(self, tmp_path):
        write_ipa(
            tmp_path / "Demo" / "Demo_1.0.ipa",
            {"CFBundleIdentifier": "com.example.demo", "CFBundleVersion": "42", "CFBundleShortVersionString": "1.0"},
        )

        (file,) = scan_app_directory(tmp_path, "Demo")

        assert file.bundle_info == BundleInfo(
            bundle_identifier="com.example.demo",
            bundle_version="42",
            bundle_short_version="1.0",
        )

    def test_bundle_metadata_can_be_skipped(self, tmp_path):
        write_ipa(
            tmp_path / "Demo" / "Demo_1.0.ipa",
            {"CFBundleIdentifier": "com.example.demo", "CFBundleVersion": "42"},
        )

        (file,) = scan_app_directory(tmp_path, "Demo", read_bundles=False)

        assert file.bundle_info is None


class TestReadBundleInfo:
    def test_not_an_archive(self, tmp_path):
        path = write_package(tmp_path, "Demo_1.0.ipa", 100)
        assert read_bundle_info(path) is None

    def test_archive_without_info_plist(self, tmp_path):
        path = tmp_path / "Demo_1.0.ipa"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("Payload/Demo.app/Demo", b"binary")
        assert read_bundle_info(path) is None

    def test_nested_bundle_plist_is_ignored(self, tmp_path):
        path = write_ipa(
            tmp_path / "Demo_1.0.ipa",
            {"CFBundleIdentifier": "com.example.watch", "CFBundleVersion": "1"},
            plist_name="Payload/Demo.app/Watch/DemoWatch.app/Info.plist",
        )
        assert read_bundle_info(path) is None

    def test_missing_required_keys(self, tmp_path):
        path = write_ipa(tmp_path / "Demo_1.0.ipa", {"CFBundleIdentifier": "com.example.demo"})
        assert read_bundle_info(path) is None

    def test_display_name_preferred(self, tmp_path):
        path = write_ipa(
            tmp_path / "Demo_1.0.ipa",
            {
                "CFBundleIdentifier": "com.example.demo",
                "CFBundleVersion": "7",
                "CFBundleName": "demo",
                "CFBundleDisplayName": "Demo",
            },
        )
        assert read_bundle_info(path).bundle_name == "Demo"


class TestBundleVersion:
    def test_short_version_with_distinct_build(self):
        parsed = BundleVersion.from_bundle_info(
            BundleInfo(bundle_identifier="x", bundle_version="42", bundle_short_version="1.0")
        )
        assert parsed.version == "1.0"
        assert parsed.description == "Version 1.0 (build 42)"

    def test_falls_back_to_build_version(self):
        parsed = BundleVersion.from_bundle_info(BundleInfo(bundle_identifier="x", bundle_version="3.1"))
        assert parsed.version == "3.1"
        assert parsed.description == "Version 3.1"


def test_malformed_info_plist_is_ignored(tmp_path):
    path = tmp_path / "Demo_1.0.ipa"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(
            "Payload/Demo.app/Info.plist",
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b"<plist version=\"1.0\"><dict><key>CFBundleIdentifier</key><string>x</string>"
            b"<key>Built</key><date>not-a-date</date></dict></plist>",
        )

    assert read_bundle_info(path) is None
