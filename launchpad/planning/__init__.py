"""Plan document generation for Launchpad.

``PlanCreator`` is the interface the workflow depends on;
``TemplatePlanCreator`` builds documents offline and ``AgentPlanCreator``
asks an LLM agent and parses its markdown reply.
"""

from launchpad.planning.agent_plan_creator import AgentPlanCreator
from launchpad.planning.plan_creator import PlanCreator
from launchpad.planning.templates import TemplatePlanCreator

__all__ = ["AgentPlanCreator", "PlanCreator", "TemplatePlanCreator"]
