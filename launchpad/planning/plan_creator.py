"""Plan creator interface used by the workflow."""

from typing import Protocol

from launchpad.project.models import ColorTheme, DesignDoc, RequirementsDoc, TaskList, TechStack


class PlanCreator(Protocol):
    """Produces plan documents for the requirements, design and tasks phases.

    Implementations may be slow (LLM calls); the workflow awaits them under a
    timeout. Failures are reported as ``GenerationError``.
    """

    async def create_requirements(
        self,
        description: str,
        stack: TechStack,
        theme: ColorTheme,
        context: list[str] | None = None,
    ) -> RequirementsDoc: ...

    async def create_design(
        self,
        requirements: RequirementsDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> DesignDoc: ...

    async def create_tasks(
        self,
        design: DesignDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> TaskList: ...
