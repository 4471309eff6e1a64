"""Project generation workflow.

Usage:
    from launchpad.workflow import build_project_generator

    generator = build_project_generator(base_dir=".")
    session_id = await generator.start_new_project()
"""

import logging

from launchpad.config import GenerationConfig
from launchpad.planning import AgentPlanCreator, PlanCreator
from launchpad.session import ContextManager, FileSessionStore
from launchpad.workflow.locks import SessionLocks
from launchpad.workflow.phases import (
    INITIAL_PHASE,
    PHASE_TRANSITIONS,
    TERMINAL_PHASE,
    is_valid_transition,
    next_phase,
    reachable_phases,
)
from launchpad.workflow.project_generator import ProjectGenerator

logger = logging.getLogger(__name__)


def build_project_generator(
    base_dir: str = ".",
    plan_creator: PlanCreator | None = None,
    config: GenerationConfig | None = None,
) -> ProjectGenerator:
    """Wire a file-backed ProjectGenerator.

    Args:
        base_dir: Directory holding ``project-sessions/``
        plan_creator: Document producer (default: ``AgentPlanCreator``)
        config: Generation settings (default: read from the environment)
    """
    config = config or GenerationConfig.from_env()
    context_manager = ContextManager(
        FileSessionStore(base_dir), default_context_messages=config.context_messages
    )
    if plan_creator is None:
        plan_creator = AgentPlanCreator()
    logger.info(
        f"Project generator ready: base_dir={base_dir}, "
        f"plan_creator={type(plan_creator).__name__}, timeout={config.timeout_seconds}"
    )
    return ProjectGenerator(context_manager, plan_creator, config)


__all__ = [
    "INITIAL_PHASE",
    "PHASE_TRANSITIONS",
    "TERMINAL_PHASE",
    "ProjectGenerator",
    "SessionLocks",
    "build_project_generator",
    "is_valid_transition",
    "next_phase",
    "reachable_phases",
]
