"""
Unit tests for the telemetry environment composer.
"""

from __future__ import annotations

from addt.domain.settings import OtelConfig, ResourceAttrs
from addt.engine.otel_env import compose, encode_resource_attributes, service_name_for


class TestCompose:
    """Tests for compose()."""

    def test_disabled_returns_empty(self, full_attrs: ResourceAttrs) -> None:
        """Disabled telemetry should produce no variables at all."""
        config = OtelConfig(enabled=False, headers="a=b")

        assert compose(config, full_attrs) == {}

    def test_full_composition(
        self, enabled_otel_config: OtelConfig, full_attrs: ResourceAttrs
    ) -> None:
        env = compose(enabled_otel_config, full_attrs)

        assert env["OTEL_SERVICE_NAME"] == "addt-claude"
        assert env["OTEL_EXPORTER_OTLP_ENDPOINT"] == "http://otel:4318"
        assert env["OTEL_EXPORTER_OTLP_PROTOCOL"] == "http/json"
        assert env["OTEL_METRICS_EXPORTER"] == "otlp"
        assert env["OTEL_LOGS_EXPORTER"] == "otlp"
        assert env["CLAUDE_CODE_ENABLE_TELEMETRY"] == "1"

        resource_attributes = env["OTEL_RESOURCE_ATTRIBUTES"]
        for pair in (
            "addt.extension=claude",
            "addt.provider=podman",
            "addt.version=0.0.9",
            "addt.project=myproject",
        ):
            assert pair in resource_attributes

    def test_headers_omitted_when_empty(
        self, enabled_otel_config: OtelConfig, full_attrs: ResourceAttrs
    ) -> None:
        assert "OTEL_EXPORTER_OTLP_HEADERS" not in compose(enabled_otel_config, full_attrs)

    def test_headers_included(self, full_attrs: ResourceAttrs) -> None:
        config = OtelConfig(enabled=True, headers="authorization=Bearer abc")

        env = compose(config, full_attrs)

        assert env["OTEL_EXPORTER_OTLP_HEADERS"] == "authorization=Bearer abc"

    def test_resource_attributes_omitted_when_empty(
        self, enabled_otel_config: OtelConfig
    ) -> None:
        env = compose(enabled_otel_config, ResourceAttrs())

        assert "OTEL_RESOURCE_ATTRIBUTES" not in env
        assert env["OTEL_SERVICE_NAME"] == "addt"

    def test_does_not_mutate_inputs(
        self, enabled_otel_config: OtelConfig, full_attrs: ResourceAttrs
    ) -> None:
        before = (enabled_otel_config.model_dump(), full_attrs.model_dump())

        compose(enabled_otel_config, full_attrs)

        assert (enabled_otel_config.model_dump(), full_attrs.model_dump()) == before


class TestServiceName:
    """Tests for service name selection."""

    def test_default_gets_extension_suffix(self) -> None:
        attrs = ResourceAttrs(extension="codex")

        assert service_name_for(OtelConfig(), attrs) == "addt-codex"

    def test_custom_name_used_verbatim(self) -> None:
        config = OtelConfig(service_name="my-team")

        assert service_name_for(config, ResourceAttrs(extension="claude")) == "my-team"

    def test_default_without_extension(self) -> None:
        assert service_name_for(OtelConfig(), ResourceAttrs()) == "addt"


class TestResourceAttributes:
    """Tests for resource attribute encoding."""

    def test_order_and_skipping(self) -> None:
        attrs = ResourceAttrs(extension="claude", project="demo")

        assert encode_resource_attributes(attrs) == "addt.extension=claude,addt.project=demo"

    def test_empty(self) -> None:
        assert encode_resource_attributes(ResourceAttrs()) == ""
