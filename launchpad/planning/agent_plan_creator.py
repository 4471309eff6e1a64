"""Plan creator backed by a Strands agent.

The agent is prompted for a markdown document, which is parsed section by
section. Any section that cannot be parsed is filled in from the template
generators, so a partially malformed reply still yields a complete document.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from launchpad.agents.factory import create_planning_agent
from launchpad.exceptions import GenerationError
from launchpad.planning import parsing, templates
from launchpad.planning.prompts import (
    SYSTEM_PROMPT,
    build_design_prompt,
    build_requirements_prompt,
    build_tasks_prompt,
)
from launchpad.project.models import ColorTheme, DesignDoc, RequirementsDoc, TaskList, TechStack

logger = logging.getLogger(__name__)

AgentFactory = Callable[[], Callable[[str], Any]]


def _default_agent_factory() -> Callable[[str], Any]:
    return create_planning_agent(SYSTEM_PROMPT)


class AgentPlanCreator:
    """Generate plan documents with an LLM agent.

    Args:
        agent_factory: Returns a callable agent (``agent(prompt) -> result``,
            where ``str(result)`` is the reply). Called once per document.
    """

    def __init__(self, agent_factory: AgentFactory | None = None):
        self.agent_factory = agent_factory or _default_agent_factory

    async def _ask(self, prompt: str, document: str) -> str:
        """Run one agent call in a worker thread and return the reply text.

        Raises:
            GenerationError: If the agent fails or replies with nothing
        """

        def invoke() -> str:
            agent = self.agent_factory()
            return str(agent(prompt))

        try:
            reply = await asyncio.to_thread(invoke)
        except Exception as e:
            raise GenerationError(f"Agent failed while generating {document}: {e}") from e

        reply = reply.strip()
        if not reply:
            raise GenerationError(f"Agent returned an empty {document} document")
        logger.debug(f"Agent reply for {document}: {len(reply)} chars")
        return reply

    async def create_requirements(
        self,
        description: str,
        stack: TechStack,
        theme: ColorTheme,
        context: list[str] | None = None,
    ) -> RequirementsDoc:
        reply = await self._ask(
            build_requirements_prompt(description, stack, theme, context), "requirements"
        )

        introduction = parsing.extract_section(reply, "Introduction")
        glossary = parsing.parse_glossary(reply)
        requirements = parsing.parse_requirements(reply)
        _log_fallbacks(
            "requirements",
            introduction=introduction,
            glossary=glossary,
            requirements=requirements,
        )

        return RequirementsDoc(
            introduction=introduction
            or templates.generate_introduction(description, stack, theme),
            glossary=glossary or templates.generate_glossary(stack, theme),
            requirements=requirements
            or templates.generate_requirements(description, stack, theme),
        )

    async def create_design(
        self,
        requirements: RequirementsDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> DesignDoc:
        reply = await self._ask(build_design_prompt(requirements, stack, theme), "design")

        sections = {
            "overview": parsing.extract_section(reply, "Overview"),
            "architecture": parsing.extract_section(reply, "Architecture"),
            "components": parsing.parse_components(reply),
            "data_models": parsing.parse_data_models(reply),
            "error_handling": parsing.extract_section(reply, "Error Handling"),
            "testing_strategy": parsing.extract_section(reply, "Testing Strategy"),
        }
        _log_fallbacks("design", **sections)

        return DesignDoc(
            overview=sections["overview"] or templates.generate_design_overview(stack, theme),
            architecture=sections["architecture"] or templates.generate_architecture(stack),
            components=sections["components"] or templates.generate_components(stack, theme),
            data_models=sections["data_models"] or templates.generate_data_models(),
            error_handling=sections["error_handling"] or templates.generate_error_handling(),
            testing_strategy=sections["testing_strategy"]
            or templates.generate_testing_strategy(),
        )

    async def create_tasks(
        self,
        design: DesignDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> TaskList:
        reply = await self._ask(build_tasks_prompt(design, stack, theme), "tasks")

        tasks = parsing.parse_tasks(reply)
        _log_fallbacks("tasks", tasks=tasks)
        tasks = tasks or templates.generate_tasks(stack, theme)
        return TaskList(tasks=tasks, checkpoints=templates.identify_checkpoints(tasks))


def _log_fallbacks(document: str, **sections: Any) -> None:
    missing = [name for name, value in sections.items() if not value]
    if missing:
        logger.warning(
            f"Could not parse {', '.join(missing)} from {document} reply; using templates"
        )
