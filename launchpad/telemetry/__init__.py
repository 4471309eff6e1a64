"""Logging and tracing for Launchpad.

Usage:
    from launchpad.telemetry import init_telemetry

    # Initialize once at startup
    init_telemetry()

Environment Variables:
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    OTEL_EXPORTER_OTLP_ENDPOINT: OTLP collector endpoint - default: http://localhost:4317
    OTEL_SERVICE_NAME: Service name for traces - default: launchpad
    OTEL_TRACES_EXPORTER: Exporter type (otlp, console, none) - default: none
    OTEL_SDK_DISABLED: Disable tracing - default: false
"""

from .config import (
    TelemetryConfig,
    init_telemetry,
    is_telemetry_enabled,
    shutdown_telemetry,
)
from .spans import (
    generation_span,
    get_tracer,
    record_error,
    workflow_operation_span,
)

__all__ = [
    # Configuration
    "TelemetryConfig",
    "init_telemetry",
    "shutdown_telemetry",
    "is_telemetry_enabled",
    # Spans
    "get_tracer",
    "workflow_operation_span",
    "generation_span",
    "record_error",
]
