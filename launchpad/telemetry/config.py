"""Logging and tracing setup for processes that drive the project generator.

``init_telemetry`` loads ``.env``, installs a console log handler on the
root logger and, unless ``OTEL_SDK_DISABLED`` is set, a tracer provider
shared with the Strands agents so generation spans nest under workflow
spans.
"""

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Raised to WARNING unless LOG_LEVEL is DEBUG.
CHATTY_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "anthropic", "openai")

_telemetry_initialized = False
_strands_telemetry = None
_tracer_provider = None


class ExporterType(Enum):
    OTLP = "otlp"
    CONSOLE = "console"
    NONE = "none"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


@dataclass
class TelemetryConfig:
    """Logging and tracing settings, normally read with ``from_env``."""

    log_level: str = "INFO"
    service_name: str = "launchpad"
    otlp_endpoint: str = "http://localhost:4317"
    traces_exporter: ExporterType = ExporterType.NONE
    otel_disabled: bool = False

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        exporter_name = os.getenv("OTEL_TRACES_EXPORTER", ExporterType.NONE.value).lower()
        exporters = {exporter.value: exporter for exporter in ExporterType}
        if exporter_name not in exporters:
            logger.warning("Ignoring unknown OTEL_TRACES_EXPORTER '%s'", exporter_name)

        return cls(
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            service_name=os.getenv("OTEL_SERVICE_NAME", cls.service_name),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", cls.otlp_endpoint),
            traces_exporter=exporters.get(exporter_name, ExporterType.NONE),
            otel_disabled=_env_flag("OTEL_SDK_DISABLED"),
        )


def _setup_logging(config: TelemetryConfig) -> None:
    level = logging.getLevelNamesMapping().get(config.log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("launchpad", "strands"):
        logging.getLogger(name).setLevel(level)
    if level > logging.DEBUG:
        for name in CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Spans entered on the event loop and exited in to_thread workers log detach errors.
    logging.getLogger("opentelemetry.context").setLevel(logging.CRITICAL)

    logger.info("Logging at %s", config.log_level)


def _setup_tracing(config: TelemetryConfig) -> Any:
    """Return the StrandsTelemetry instance, or None when tracing is off."""
    global _tracer_provider

    if config.otel_disabled:
        logger.info("Tracing disabled by OTEL_SDK_DISABLED")
        return None

    from opentelemetry import trace
    from opentelemetry.sdk.resources import SERVICE_NAME, Resource
    from opentelemetry.sdk.trace import TracerProvider
    from strands.telemetry import StrandsTelemetry

    _tracer_provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: config.service_name})
    )
    trace.set_tracer_provider(_tracer_provider)
    telemetry = StrandsTelemetry(tracer_provider=_tracer_provider)

    if config.traces_exporter is ExporterType.OTLP:
        telemetry.setup_otlp_exporter(endpoint=config.otlp_endpoint)
    elif config.traces_exporter is ExporterType.CONSOLE:
        telemetry.setup_console_exporter()
    logger.info("Tracing spans to %s exporter", config.traces_exporter.value)
    return telemetry


def init_telemetry(config: TelemetryConfig | None = None, load_env: bool = True) -> None:
    """Configure logging and tracing once per process.

    Args:
        config: Settings to apply. Read from the environment when omitted.
        load_env: Load ``.env`` from the working directory before reading
            the environment.
    """
    global _telemetry_initialized, _strands_telemetry

    if _telemetry_initialized:
        return

    if load_env:
        load_dotenv()
    config = config or TelemetryConfig.from_env()

    _setup_logging(config)
    _strands_telemetry = _setup_tracing(config)
    _telemetry_initialized = True
    logger.info("Telemetry ready for service %s", config.service_name)


def shutdown_telemetry() -> None:
    """Flush buffered spans and forget the installed provider."""
    global _telemetry_initialized, _strands_telemetry, _tracer_provider

    if not _telemetry_initialized:
        return
    if _tracer_provider is not None:
        _tracer_provider.force_flush()

    _telemetry_initialized = False
    _strands_telemetry = None
    _tracer_provider = None


def is_telemetry_enabled() -> bool:
    return _telemetry_initialized and _strands_telemetry is not None
