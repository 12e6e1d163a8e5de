"""
Pytest configuration and shared fixtures for addt tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from addt.adapters.fs import FileSystemAdapter
from addt.domain.firewall import FirewallMode, PolicySnapshot, RuleLayer
from addt.domain.settings import OtelConfig, ResourceAttrs


# --- Markers ---

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "cli: marks tests that drive the Typer application"
    )


# --- Fixtures: Environment ---

@pytest.fixture(autouse=True)
def clean_addt_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ADDT_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ADDT_"):
            monkeypatch.delenv(key, raising=False)


# --- Fixtures: Snapshots ---

@pytest.fixture
def empty_snapshot() -> PolicySnapshot:
    """A snapshot with only the built-in defaults."""
    return PolicySnapshot()


@pytest.fixture
def layered_snapshot() -> PolicySnapshot:
    """A snapshot where every user layer has rules."""
    return PolicySnapshot(
        project_rules=RuleLayer(allowed=["registry.npmjs.org"], denied=["tracker.example.com"]),
        global_rules=RuleLayer(
            allowed=["custom.api.com", "tracker.example.com"],
            denied=["registry.npmjs.org", "api.openai.com"],
        ),
        extension_rules=RuleLayer(allowed=["api.openai.com", "ext.api.com"]),
        mode=FirewallMode.STRICT,
        extension_name="codex",
    )


# --- Fixtures: Telemetry ---

@pytest.fixture
def enabled_otel_config() -> OtelConfig:
    """Telemetry enabled with the default service name."""
    return OtelConfig(enabled=True, endpoint="http://otel:4318", protocol="http/json")


@pytest.fixture
def full_attrs() -> ResourceAttrs:
    """Resource attributes with every field set."""
    return ResourceAttrs(
        extension="claude",
        provider="podman",
        version="0.0.9",
        project="myproject",
    )


# --- Fixtures: Files ---

@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Temporary project directory."""
    project = tmp_path / "myproject"
    project.mkdir()
    return project


@pytest.fixture
def fs(home_dir: Path, project_dir: Path) -> FileSystemAdapter:
    """Filesystem adapter rooted in temporary directories."""
    return FileSystemAdapter(home=home_dir, project_dir=project_dir)


@pytest.fixture
def global_config_dict() -> dict[str, Any]:
    """Sample global config file as dict."""
    return {
        "firewall": True,
        "firewall_mode": "strict",
        "firewall_allowed": ["custom.api.com"],
        "firewall_denied": ["registry.npmjs.org"],
        "node_version": "22",
        "otel": {
            "enabled": False,
            "endpoint": "http://global:4318",
        },
        "extensions": {
            "claude": {
                "version": "stable",
                "firewall_allowed": ["statsig.anthropic.com"],
            },
        },
    }


@pytest.fixture
def project_config_dict() -> dict[str, Any]:
    """Sample project config file as dict."""
    return {
        "firewall_allowed": ["registry.npmjs.org"],
        "otel": {
            "enabled": True,
            "endpoint": "http://project:4318",
        },
    }


def write_yaml(path: Path, data: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


@pytest.fixture
def global_config_file(fs: FileSystemAdapter, global_config_dict: dict[str, Any]) -> Path:
    """Write the sample global config to the temporary home."""
    return write_yaml(fs.global_config_path, global_config_dict)


@pytest.fixture
def project_config_file(fs: FileSystemAdapter, project_config_dict: dict[str, Any]) -> Path:
    """Write the sample project config to the temporary project."""
    return write_yaml(fs.project_config_path, project_config_dict)
