"""Custom spans for workflow operations and plan generation.

Span Hierarchy:
    workflow_operation_span (one per ProjectGenerator call)
    └── generation_span (plan creator call, when the operation generates)
        └── agent/LLM spans (created by Strands, AgentPlanCreator only)
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

logger = logging.getLogger(__name__)

TRACER_NAME = "launchpad.workflow"


def get_tracer() -> trace.Tracer:
    """Get the tracer for custom spans.

    Uses the globally configured tracer provider, which is a no-op until
    ``init_telemetry`` installs an SDK provider.
    """
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def _traced(name: str, attributes: dict[str, Any]) -> Generator[Span, None, None]:
    with get_tracer().start_as_current_span(
        name=name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except BaseException as e:
            record_error(span, e)
            raise
        span.set_status(StatusCode.OK)


@contextmanager
def workflow_operation_span(
    operation: str,
    session_id: str | None = None,
    phase: str | None = None,
    **attributes: Any,
) -> Generator[Span, None, None]:
    """Create a span around one workflow operation.

    Args:
        operation: Operation name (e.g., "generate_requirements")
        session_id: Session the operation acts on, if any
        phase: Phase the session was in when the operation started
        **attributes: Additional span attributes

    Example:
        with workflow_operation_span("select_stack", session_id) as span:
            span.set_attribute("stack.id", stack.id)
    """
    span_attributes: dict[str, Any] = {"workflow.operation": operation}
    if session_id:
        span_attributes["session.id"] = session_id
    if phase:
        span_attributes["workflow.phase"] = phase
    span_attributes.update(attributes)

    with _traced(f"workflow:{operation}", span_attributes) as span:
        yield span


@contextmanager
def generation_span(
    document: str,
    session_id: str | None = None,
    **attributes: Any,
) -> Generator[Span, None, None]:
    """Create a span around a plan creator call."""
    span_attributes: dict[str, Any] = {"generation.document": document}
    if session_id:
        span_attributes["session.id"] = session_id
    span_attributes.update(attributes)

    with _traced(f"generate:{document}", span_attributes) as span:
        yield span


def record_error(span: Span, error: BaseException) -> None:
    """Record an exception on a span and mark it failed."""
    span.record_exception(error)
    span.set_status(StatusCode.ERROR, str(error))
    span.set_attribute("error.type", type(error).__name__)
