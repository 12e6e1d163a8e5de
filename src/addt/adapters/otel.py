"""
OpenTelemetry adapter for addt.

Traces firewall checks as OTel spans using the resolved telemetry config.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator

from addt.engine.otel_env import RESOURCE_ATTRIBUTE_PREFIX, service_name_for

if TYPE_CHECKING:
    from opentelemetry.trace import Span

    from addt.domain.firewall import CheckOutcome, FirewallMode
    from addt.domain.settings import OtelConfig, ResourceAttrs


class OtelAdapter:
    """
    Adapter for OpenTelemetry tracing.

    Spans carry the same service name and addt.* resource attributes
    that containers receive through their OTEL_* environment.
    """

    def __init__(self, config: OtelConfig, attrs: ResourceAttrs) -> None:
        """
        Initialize the OTel adapter.

        Args:
            config: Resolved telemetry config; nothing is traced when disabled.
            attrs: Runtime context recorded as resource attributes.
        """
        self.service_name = service_name_for(config, attrs)
        self.enabled = config.enabled
        self._attrs = attrs
        self._tracer = None

        if self.enabled:
            self._init_tracer()

    def _init_tracer(self) -> None:
        """Initialize the OpenTelemetry tracer."""
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider

        attributes = {"service.name": self.service_name}
        for key, value in self._attrs.model_dump().items():
            if value:
                attributes[f"{RESOURCE_ATTRIBUTE_PREFIX}.{key}"] = value

        provider = TracerProvider(resource=Resource.create(attributes))
        self._tracer = provider.get_tracer(__name__)

    @contextmanager
    def firewall_check_span(
        self,
        domain: str,
    ) -> Generator[Span | None, None, None]:
        """
        Create a span for a firewall check.

        Args:
            domain: Domain being checked.

        Yields:
            The span, or None if tracing is disabled.
        """
        if not self.enabled or not self._tracer:
            yield None
            return

        with self._tracer.start_as_current_span(
            "addt.firewall.check",
            attributes={"addt.firewall.domain": domain},
        ) as span:
            yield span

    def record_decision(
        self,
        span: Span | None,
        outcome: CheckOutcome,
        mode: FirewallMode,
    ) -> None:
        """
        Record a firewall decision as span attributes.

        Args:
            span: The current span.
            outcome: Result of the check.
            mode: Firewall mode that was applied.
        """
        if span is None:
            return

        span.set_attributes(
            {
                "addt.firewall.allowed": outcome.allowed,
                "addt.firewall.layer": outcome.layer.value,
                "addt.firewall.mode": mode.value,
            }
        )
