"""
Telemetry environment composer.

Turns a resolved OtelConfig into the OTEL_* variables handed to the
container so the assistant inside exports to the configured collector.
"""

from __future__ import annotations

from addt.domain.settings import DEFAULT_SERVICE_NAME, OtelConfig, ResourceAttrs

RESOURCE_ATTRIBUTE_PREFIX = "addt"


def service_name_for(config: OtelConfig, attrs: ResourceAttrs) -> str:
    """
    Service name to report.

    Only the unmodified default gets the extension appended
    ("addt" -> "addt-claude"); a custom name is used verbatim.
    """
    if config.service_name == DEFAULT_SERVICE_NAME and attrs.extension:
        return f"{DEFAULT_SERVICE_NAME}-{attrs.extension}"
    return config.service_name


def encode_resource_attributes(attrs: ResourceAttrs) -> str:
    """
    Encode resource attributes as "addt.extension=claude,addt.provider=podman".

    Order is extension, provider, version, project. Empty fields are
    skipped; the result is empty when every field is.
    """
    pairs = [
        ("extension", attrs.extension),
        ("provider", attrs.provider),
        ("version", attrs.version),
        ("project", attrs.project),
    ]
    return ",".join(
        f"{RESOURCE_ATTRIBUTE_PREFIX}.{key}={value}" for key, value in pairs if value
    )


def compose(config: OtelConfig, attrs: ResourceAttrs) -> dict[str, str]:
    """
    Build the telemetry environment for a container.

    Args:
        config: Resolved telemetry config.
        attrs: Runtime context for resource attributes.

    Returns:
        Environment variables, or an empty dict when telemetry is disabled.
    """
    if not config.enabled:
        return {}

    env = {
        "OTEL_EXPORTER_OTLP_ENDPOINT": config.endpoint,
        "OTEL_EXPORTER_OTLP_PROTOCOL": config.protocol,
        "OTEL_SERVICE_NAME": service_name_for(config, attrs),
        "OTEL_METRICS_EXPORTER": "otlp",
        "OTEL_LOGS_EXPORTER": "otlp",
        "CLAUDE_CODE_ENABLE_TELEMETRY": "1",
    }

    if config.headers:
        env["OTEL_EXPORTER_OTLP_HEADERS"] = config.headers

    resource_attributes = encode_resource_attributes(attrs)
    if resource_attributes:
        env["OTEL_RESOURCE_ATTRIBUTES"] = resource_attributes

    return env
