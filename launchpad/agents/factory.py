"""Agent factory for the planning agent."""

import logging

from strands import Agent

from launchpad.agents.model_provider import create_model

logger = logging.getLogger(__name__)


def create_planning_agent(
    system_prompt: str,
    model_id: str | None = None,
    max_tokens: int | None = None,
) -> Agent:
    """Create a fresh, tool-less agent for one plan document.

    A new agent is created per document so no conversation state leaks
    between generations.
    """
    agent = Agent(
        name="launchpad_planner",
        system_prompt=system_prompt,
        model=create_model(model_id=model_id, max_tokens=max_tokens),
        tools=[],
        callback_handler=None,
    )
    logger.info("Created planning agent")
    return agent
