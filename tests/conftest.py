"""Shared pytest fixtures for the repository server tests."""

import json
from pathlib import Path

import pytest

from altsource.domain.models import RepositoryConfig

BASE_URL = "https://apps.example.com"

DEMO_CONFIG = {
    "name": "Demo Source",
    "identifier": "com.example.source",
    "sourceURL": "https://apps.example.com/repository.json",
    "tintColor": "#5C7AEA",
    "news": [
        {
            "appID": "com.example.demo",
            "title": "Demo 1.1 is out",
            "caption": "New features",
            "date": "2024-02-01",
            "notify": False,
            "tintColor": "#5C7AEA",
            "identifier": "demo-1.1",
        }
    ],
    "apps": [
        {
            "name": "Demo",
            "bundleIdentifier": "com.example.demo",
            "developerName": "Example Developer",
            "localizedDescription": "A demo app.",
            "iconURL": "https://apps.example.com/icons/demo.png",
            "tintColor": "#5C7AEA",
            "category": "utilities",
            "screenshotURLs": [],
            "appPermissions": {"entitlements": [], "privacy": {}},
            "versions": [
                {
                    "version": "1.0.0",
                    "localizedDescription": "Initial",
                    "date": "2024-01-01",
                },
                {
                    "version": "2.0.0",
                    "localizedDescription": "Announced, never uploaded",
                    "date": "2024-03-01",
                },
            ],
        }
    ],
}


def write_package(directory: Path, filename: str, size: int) -> Path:
    """Create a package file of `size` bytes (not a real archive)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(b"\0" * size)
    return path


@pytest.fixture
def demo_config() -> RepositoryConfig:
    return RepositoryConfig.model_validate(DEMO_CONFIG)


@pytest.fixture
def apps_dir(tmp_path: Path) -> Path:
    """apps/Demo with 1.0.0 (1000 bytes, authored) and 1.1.0 (2000 bytes, not authored)."""
    root = tmp_path / "apps"
    write_package(root / "Demo", "Demo_1.0.0.ipa", 1000)
    write_package(root / "Demo", "Demo_1.1.0.ipa", 2000)
    return root


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(DEMO_CONFIG), encoding="utf-8")
    return path
