"""Project module for Launchpad.

Session data models plus the stack and theme catalogues users choose from.
"""

from launchpad.project.models import (
    ChatMessage,
    ColorTheme,
    DesignDoc,
    GeneratedImage,
    ProjectPlan,
    ProjectSession,
    RequirementsDoc,
    SessionSummary,
    TaskList,
    TechStack,
)
from launchpad.project.stacks import STACK_TEMPLATES, get_stack, get_stacks_for_level
from launchpad.project.themes import THEME_TEMPLATES, get_theme

__all__ = [
    "ChatMessage",
    "ColorTheme",
    "DesignDoc",
    "GeneratedImage",
    "ProjectPlan",
    "ProjectSession",
    "RequirementsDoc",
    "STACK_TEMPLATES",
    "SessionSummary",
    "THEME_TEMPLATES",
    "TaskList",
    "TechStack",
    "get_stack",
    "get_stacks_for_level",
    "get_theme",
]
