"""
Unit tests for settings cells and the settings merger.
"""

from __future__ import annotations

import pytest

from addt.domain.settings import (
    DEFAULT_OTEL_CONFIG,
    FirewallConfig,
    FirewallSettings,
    OtelConfig,
    OtelSettings,
    SettingValue,
)
from addt.engine.settings_merger import (
    FIREWALL_ENV_OVERRIDES,
    OTEL_ENV_OVERRIDES,
    apply_env,
    load_firewall_config,
    load_otel_config,
    merge,
    parse_env_value,
)


class TestSettingValue:
    """Tests for the three-state config cell."""

    def test_absent(self) -> None:
        cell = SettingValue.absent()

        assert not cell.is_present
        assert cell.get("fallback") == "fallback"
        with pytest.raises(ValueError):
            _ = cell.value

    def test_present_false_is_not_absent(self) -> None:
        """An explicit false must stay distinguishable from unset."""
        assert SettingValue.of(False) != SettingValue.absent()
        assert SettingValue.of(False).get(True) is False

    def test_equality(self) -> None:
        assert SettingValue.of("x") == SettingValue.of("x")
        assert SettingValue.of("x") != SettingValue.of("y")
        assert SettingValue.absent() == SettingValue.absent()

    def test_validates_from_raw_yaml(self) -> None:
        """Records should accept plain values and treat None as unset."""
        settings = OtelSettings.model_validate(
            {"enabled": True, "endpoint": None, "headers": ""}
        )

        assert settings.enabled == SettingValue.of(True)
        assert not settings.endpoint.is_present
        assert settings.headers == SettingValue.of("")
        assert not settings.protocol.is_present

    def test_rejects_wrong_type(self) -> None:
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            OtelSettings.model_validate({"enabled": {"nested": "map"}})

    def test_dump_uses_plain_values(self) -> None:
        settings = OtelSettings.model_validate({"enabled": True})

        dumped = settings.model_dump()

        assert dumped["enabled"] is True
        assert dumped["endpoint"] is None

    def test_present_values(self) -> None:
        settings = OtelSettings.model_validate({"enabled": False, "protocol": "grpc"})

        assert settings.present_values() == {"enabled": False, "protocol": "grpc"}

    def test_with_and_without_value(self) -> None:
        settings = OtelSettings()

        updated = settings.with_value("endpoint", "http://x:4318")
        cleared = updated.without_value("endpoint")

        assert updated.endpoint == SettingValue.of("http://x:4318")
        assert not cleared.endpoint.is_present
        assert not settings.endpoint.is_present


class TestMerge:
    """Tests for merge() precedence."""

    def test_no_layers_returns_defaults(self) -> None:
        assert merge(DEFAULT_OTEL_CONFIG, []) == DEFAULT_OTEL_CONFIG

    def test_none_layers_are_skipped(self) -> None:
        assert merge(DEFAULT_OTEL_CONFIG, [None, None]) == DEFAULT_OTEL_CONFIG

    def test_later_layer_wins(self) -> None:
        global_settings = OtelSettings.model_validate(
            {"endpoint": "http://global:4318", "protocol": "grpc"}
        )
        project_settings = OtelSettings.model_validate({"endpoint": "http://project:4318"})

        config = merge(DEFAULT_OTEL_CONFIG, [global_settings, project_settings])

        assert config.endpoint == "http://project:4318"
        assert config.protocol == "grpc"
        assert config.service_name == "addt"

    def test_project_reenables_over_global_false(self) -> None:
        """A present true must override an explicit false below it."""
        global_settings = OtelSettings.model_validate({"enabled": False})
        project_settings = OtelSettings.model_validate({"enabled": True})

        config = merge(DEFAULT_OTEL_CONFIG, [global_settings, project_settings])

        assert config.enabled is True

    def test_explicit_false_overrides_true(self) -> None:
        global_settings = OtelSettings.model_validate({"enabled": True})
        project_settings = OtelSettings.model_validate({"enabled": False})

        config = merge(DEFAULT_OTEL_CONFIG, [global_settings, project_settings])

        assert config.enabled is False

    def test_explicit_empty_string_overrides(self) -> None:
        global_settings = OtelSettings.model_validate({"headers": "a=b"})
        project_settings = OtelSettings.model_validate({"headers": ""})

        config = merge(DEFAULT_OTEL_CONFIG, [global_settings, project_settings])

        assert config.headers == ""

    def test_defaults_untouched(self) -> None:
        merge(DEFAULT_OTEL_CONFIG, [OtelSettings.model_validate({"enabled": True})])

        assert DEFAULT_OTEL_CONFIG.enabled is False


class TestParseEnvValue:
    """Tests for typed environment parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", SettingValue.of(True)),
            ("false", SettingValue.of(False)),
            ("yes", SettingValue.absent()),
            ("TRUE", SettingValue.absent()),
            ("1", SettingValue.absent()),
        ],
    )
    def test_bool(self, raw: str, expected: SettingValue[bool]) -> None:
        assert parse_env_value(raw, bool) == expected

    def test_str(self) -> None:
        assert parse_env_value("grpc", str) == SettingValue.of("grpc")


class TestApplyEnv:
    """Tests for environment overlays."""

    def test_overrides_fields(self) -> None:
        env = {
            "ADDT_OTEL_ENABLED": "true",
            "ADDT_OTEL_ENDPOINT": "http://collector:4317",
            "ADDT_OTEL_PROTOCOL": "grpc",
        }

        config = apply_env(DEFAULT_OTEL_CONFIG, env, OTEL_ENV_OVERRIDES)

        assert config == OtelConfig(
            enabled=True,
            endpoint="http://collector:4317",
            protocol="grpc",
        )

    def test_empty_value_is_ignored(self) -> None:
        config = OtelConfig(service_name="custom")

        result = apply_env(config, {"ADDT_OTEL_SERVICE_NAME": ""}, OTEL_ENV_OVERRIDES)

        assert result.service_name == "custom"

    def test_invalid_bool_leaves_field(self) -> None:
        config = OtelConfig(enabled=True)

        result = apply_env(config, {"ADDT_OTEL_ENABLED": "yes"}, OTEL_ENV_OVERRIDES)

        assert result.enabled is True

    def test_false_disables(self) -> None:
        config = OtelConfig(enabled=True)

        result = apply_env(config, {"ADDT_OTEL_ENABLED": "false"}, OTEL_ENV_OVERRIDES)

        assert result.enabled is False

    def test_unrelated_variables_ignored(self) -> None:
        env = {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://elsewhere", "HOME": "/root"}

        assert apply_env(DEFAULT_OTEL_CONFIG, env, OTEL_ENV_OVERRIDES) == DEFAULT_OTEL_CONFIG

    def test_firewall_overrides(self) -> None:
        env = {"ADDT_FIREWALL": "true", "ADDT_FIREWALL_MODE": "permissive"}

        config = apply_env(FirewallConfig(), env, FIREWALL_ENV_OVERRIDES)

        assert config == FirewallConfig(enabled=True, mode="permissive")


class TestLoadConfigs:
    """Tests for the full defaults < global < project < env chain."""

    def test_load_otel_config(self) -> None:
        global_settings = OtelSettings.model_validate(
            {"enabled": True, "endpoint": "http://global:4318", "headers": "a=b"}
        )
        project_settings = OtelSettings.model_validate({"endpoint": "http://project:4318"})
        env = {"ADDT_OTEL_ENDPOINT": "http://env:4318"}

        config = load_otel_config(global_settings, project_settings, env)

        assert config.enabled is True
        assert config.endpoint == "http://env:4318"
        assert config.headers == "a=b"
        assert config.protocol == "http/json"

    def test_load_otel_config_all_missing(self) -> None:
        assert load_otel_config(None, None, {}) == DEFAULT_OTEL_CONFIG

    def test_load_firewall_config(self) -> None:
        global_settings = FirewallSettings.model_validate({"enabled": True, "mode": "strict"})
        project_settings = FirewallSettings.model_validate({"mode": "permissive"})

        config = load_firewall_config(global_settings, project_settings, {})

        assert config == FirewallConfig(enabled=True, mode="permissive")

    def test_env_disables_firewall(self) -> None:
        global_settings = FirewallSettings.model_validate({"enabled": True})

        config = load_firewall_config(global_settings, None, {"ADDT_FIREWALL": "false"})

        assert config.enabled is False
