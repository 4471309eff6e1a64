"""Shared markdown formatting for plan documents.

Pure functions rendering requirements, design and task documents as
markdown. Used both for chat messages and for the ``requirements.md``,
``design.md`` and ``tasks.md`` files written next to each session. Output is
deterministic: identical documents always render to identical text.
"""

from __future__ import annotations

from launchpad.config import TaskStatus
from launchpad.project.models import DesignDoc, RequirementsDoc, TaskList


def format_requirements_for_display(requirements: RequirementsDoc) -> str:
    """Format a requirements document as markdown.

    Args:
        requirements: Document with introduction, glossary and numbered
            requirements.
    """
    content = "# Requirements Document\n\n"
    content += f"## Introduction\n\n{requirements.introduction}\n\n"

    content += "## Glossary\n\n"
    for term, definition in requirements.glossary.items():
        content += f"- **{term}**: {definition}\n"
    content += "\n"

    content += "## Requirements\n\n"
    for requirement in requirements.requirements:
        content += f"### Requirement {requirement.number}\n\n"
        content += f"**User Story:** {requirement.user_story}\n\n"
        content += "#### Acceptance Criteria\n\n"
        for i, criterion in enumerate(requirement.acceptance_criteria, 1):
            content += f"{i}. {criterion}\n"
        content += "\n"

    return content


def format_design_for_display(design: DesignDoc) -> str:
    """Format a design document as markdown."""
    content = "# Design Document\n\n"
    content += f"## Overview\n\n{design.overview}\n\n"
    content += f"## Architecture\n\n{design.architecture}\n\n"

    content += "## Components\n\n"
    for component in design.components:
        content += f"### {component.name}\n\n{component.description}\n\n"
        if component.responsibilities:
            content += "**Responsibilities:**\n"
            for responsibility in component.responsibilities:
                content += f"- {responsibility}\n"
            content += "\n"
        if component.interface:
            content += f"**Interface:**\n```\n{component.interface}\n```\n\n"

    content += "## Data Models\n\n"
    for model in design.data_models:
        content += f"### {model.name}\n\n{model.description}\n\n"
        if model.fields:
            content += "**Fields:**\n"
            for field_name, field_type in model.fields.items():
                content += f"- {field_name}: {field_type}\n"
            content += "\n"

    content += f"## Error Handling\n\n{design.error_handling}\n\n"
    content += f"## Testing Strategy\n\n{design.testing_strategy}\n\n"

    return content


def format_tasks_for_display(task_list: TaskList) -> str:
    """Format a task list as a markdown checklist.

    Finished tasks (completed or skipped) are rendered checked.
    """
    content = "# Implementation Tasks\n\n"

    for task in task_list.tasks:
        checkbox = "[x]" if task.status in TaskStatus.finished() else "[ ]"
        content += f"- {checkbox} {task.number}. {task.description}\n"
        for detail in task.details:
            content += f"  - {detail}\n"
        if task.requirements:
            content += f"  - _Requirements: {', '.join(task.requirements)}_\n"
        content += "\n"

    return content
