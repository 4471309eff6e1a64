"""LLM agent construction for plan generation."""

from launchpad.agents.factory import create_planning_agent
from launchpad.agents.model_provider import LLMProvider, create_model, get_active_provider

__all__ = ["LLMProvider", "create_model", "create_planning_agent", "get_active_provider"]
