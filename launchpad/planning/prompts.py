"""Prompt builders for the agent-backed plan creator.

Each prompt embeds the stack and theme details and asks for markdown laid out
the way ``launchpad.planning.parsing`` reads it.
"""

from launchpad.project.models import ColorTheme, DesignDoc, RequirementsDoc, TechStack

SYSTEM_PROMPT = """You are a senior software architect helping a user plan a new \
application. You write precise, implementation-ready planning documents in \
Markdown. Follow the requested structure exactly and do not add commentary \
before or after the document."""

_PACKAGE_MANAGER_EXAMPLES = {
    "npm": "- Install: `npm install <package>`\n- Install dev: `npm install -D <package>`\n- Run script: `npm run <script>`",
    "yarn": "- Install: `yarn add <package>`\n- Install dev: `yarn add -D <package>`\n- Run script: `yarn <script>`",
    "pnpm": "- Install: `pnpm add <package>`\n- Install dev: `pnpm add -D <package>`\n- Run script: `pnpm <script>`",
    "pip": "- Install: `pip install <package>`\n- Install from requirements: `pip install -r requirements.txt`\n- Run script: `python <script>.py`",
}


def format_stack(stack: TechStack) -> str:
    lines = [
        f"- Name: {stack.name}",
        f"- Level: {stack.level} (Level {stack.level_number})",
        f"- Frontend: {stack.frontend}",
    ]
    if stack.backend:
        lines.append(f"- Backend: {stack.backend}")
    lines.append(f"- Database: {stack.database}")
    if stack.mobile:
        lines.append(f"- Mobile: {stack.mobile}")
    lines.append(f"- Package Manager: {stack.package_manager}")
    return "\n".join(lines)


def format_theme(theme: ColorTheme) -> str:
    return "\n".join(
        [
            f"- Name: {theme.name}",
            f"- Primary: {theme.primary}",
            f"- Secondary: {theme.secondary}",
            f"- Accent: {theme.accent}",
            f"- Background: {theme.background}",
            f"- Text: {theme.text}",
            f"- Description: {theme.description}",
        ]
    )


def summarize_requirements(requirements: RequirementsDoc) -> str:
    summary = f"{requirements.introduction}\n\n"
    for requirement in requirements.requirements:
        summary += f"- Requirement {requirement.number}: {requirement.user_story}\n"
    return summary


def summarize_design(design: DesignDoc) -> str:
    summary = f"{design.overview}\n\n**Architecture:** {design.architecture}\n\n"
    if design.components:
        summary += "**Components:**\n"
        for component in design.components:
            summary += f"- {component.name}: {component.description}\n"
    return summary


def stack_guidance(stack: TechStack) -> str:
    """Stack-specific hints shared by all three prompts."""
    guidance = []
    if "React" in stack.frontend:
        guidance.append("- Use React component composition and hooks for state")
    if "Next.js" in stack.frontend:
        guidance.append("- Cover server-side rendering, routing and API routes")
    if stack.backend and "Express" in stack.backend:
        guidance.append("- Define REST endpoints, middleware and error handling")
    if stack.backend and "NestJS" in stack.backend:
        guidance.append("- Follow the NestJS module, controller and service structure")
    if stack.backend and "FastAPI" in stack.backend:
        guidance.append("- Use async endpoints with Pydantic validation")
    if "Supabase" in stack.database:
        guidance.append("- Cover authentication, row-level security and real-time subscriptions")
    if stack.mobile and "Expo" in stack.mobile:
        guidance.append("- Cover mobile-specific features and cross-platform compatibility")
    return "\n".join(guidance) or "- Follow general web application best practices"


def build_requirements_prompt(
    description: str,
    stack: TechStack,
    theme: ColorTheme,
    context: list[str] | None = None,
) -> str:
    prompt = f"""# Requirements Generation Task

Generate a requirements document following the EARS (Easy Approach to
Requirements Syntax) patterns.

## Project Context

**Description:** {description}

**Technology Stack:**
{format_stack(stack)}

**Color Theme:**
{format_theme(theme)}

## Stack-Specific Considerations

{stack_guidance(stack)}

## Output Format

Use exactly these headings:

# Introduction
<project purpose, stack and theme>

## Glossary
- **Term**: definition

## Requirements

### Requirement 1

**User Story:** As a <role>, I want <feature>, so that <benefit>

#### Acceptance Criteria

1. WHEN <trigger> THEN THE <system> SHALL <response>

Write 2-5 acceptance criteria per requirement. Include requirements for UI
components using the {theme.name} theme colors.
"""
    if context:
        prompt += "\n## Previous Conversation\n\n" + "\n\n".join(context) + "\n"
    return prompt


def build_design_prompt(requirements: RequirementsDoc, stack: TechStack, theme: ColorTheme) -> str:
    return f"""# Design Document Generation Task

Generate a design document for the requirements below.

## Requirements Summary

{summarize_requirements(requirements)}
## Technology Stack

{format_stack(stack)}

## Color Theme

{format_theme(theme)}

## Stack-Specific Design Guidance

{stack_guidance(stack)}

## Output Format

Use exactly these headings:

## Overview
## Architecture
## Components
### <Component Name>
<one paragraph description>
- <responsibility>
## Data Models
### <Model Name>
<one paragraph description>
- fieldName: type
## Error Handling
## Testing Strategy

Primary color {theme.primary} is used for main actions, secondary
{theme.secondary} for supporting elements and accent {theme.accent} for
highlights.
"""


def build_tasks_prompt(design: DesignDoc, stack: TechStack, theme: ColorTheme) -> str:
    package_manager = _PACKAGE_MANAGER_EXAMPLES.get(
        stack.package_manager, _PACKAGE_MANAGER_EXAMPLES["npm"]
    )
    return f"""# Task List Generation Task

Generate an actionable implementation task list.

## Design Summary

{summarize_design(design)}
## Technology Stack

{format_stack(stack)}

## Color Theme

- Name: {theme.name}
- Colors: Primary {theme.primary}, Secondary {theme.secondary}, Accent {theme.accent}

## Stack-Specific Commands

{package_manager}

## Task Guidance

{stack_guidance(stack)}

## Output Format

Number tasks 1, 2, 3 with at most one level of sub-tasks (1.1, 1.2). Start
with project setup, then core components, backend, database ({stack.database}),
theme application, error handling and tests.

- [ ] 1. Task description
  - Detail
  - _Requirements: 1.1_
"""
