"""Shared test fixtures and helpers.

Sessions are stored under pytest's ``tmp_path``; plan generation goes through
``FakePlanCreator``, which delegates to the template generators but can be
slowed down or made to fail.
"""

import asyncio

import pytest

from launchpad.config import GenerationConfig, Phase
from launchpad.planning.templates import TemplatePlanCreator
from launchpad.project.stacks import get_stack
from launchpad.project.themes import get_theme
from launchpad.session import ContextManager, FileSessionStore
from launchpad.workflow import ProjectGenerator


class FakePlanCreator:
    """Template-backed plan creator recording its calls.

    Attributes:
        delay: Seconds each call sleeps before answering
        error: Exception raised by every call when set
        result: Returned instead of the template document when set
        calls: ``(document, first_argument, context)`` per call
        max_active: Highest number of calls that were in flight at once
    """

    def __init__(self):
        self.delay = 0.0
        self.error: Exception | None = None
        self.result = None
        self.calls: list[tuple[str, object, object]] = []
        self.active = 0
        self.max_active = 0
        self._templates = TemplatePlanCreator()

    async def _enter(self, document, first, context=None):
        self.calls.append((document, first, context))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
        finally:
            self.active -= 1

    async def create_requirements(self, description, stack, theme, context=None):
        await self._enter("requirements", description, context)
        if self.result is not None:
            return self.result
        return await self._templates.create_requirements(description, stack, theme, context)

    async def create_design(self, requirements, stack, theme):
        await self._enter("design", requirements)
        if self.result is not None:
            return self.result
        return await self._templates.create_design(requirements, stack, theme)

    async def create_tasks(self, design, stack, theme):
        await self._enter("tasks", design)
        if self.result is not None:
            return self.result
        return await self._templates.create_tasks(design, stack, theme)


@pytest.fixture
def stack():
    return get_stack("react-express-supabase")


@pytest.fixture
def theme():
    return get_theme("modern-blue")


@pytest.fixture
def store(tmp_path):
    return FileSessionStore(tmp_path)


@pytest.fixture
def context_manager(store):
    return ContextManager(store)


@pytest.fixture
def plan_creator():
    return FakePlanCreator()


@pytest.fixture
def generation_config():
    return GenerationConfig(timeout_seconds=2.0, context_messages=20)


@pytest.fixture
def generator(context_manager, plan_creator, generation_config):
    return ProjectGenerator(context_manager, plan_creator, generation_config)


@pytest.fixture
def drive(generator, stack, theme):
    """Return a coroutine function advancing a new session to a phase.

    Plan documents are generated for every phase passed on the way.
    """

    async def _drive(target: Phase, description: str = "Build a todo app for teams") -> str:
        session_id = await generator.start_new_project()
        steps = [
            (Phase.THEME_SELECTION, lambda: generator.select_stack(session_id, stack)),
            (Phase.DESCRIPTION, lambda: generator.select_theme(session_id, theme)),
            (
                Phase.REQUIREMENTS,
                lambda: generator.submit_description(session_id, description),
            ),
            (Phase.DESIGN, lambda: _generate_and_approve("requirements")),
            (Phase.TASKS, lambda: _generate_and_approve("design")),
            (Phase.IMAGE_GENERATION, lambda: _generate_and_approve("tasks")),
            (Phase.EXECUTION, lambda: generator.skip_image_generation(session_id)),
            (Phase.COMPLETE, lambda: generator.complete_project(session_id)),
        ]

        async def _generate_and_approve(document: str) -> None:
            await getattr(generator, f"generate_{document}")(session_id)
            await getattr(generator, f"approve_{document}")(session_id)

        if target == Phase.STACK_SELECTION:
            return session_id
        for reached, step in steps:
            await step()
            if reached == target:
                break
        return session_id

    return _drive


# ---------------------------------------------------------------------------
# Model replies laid out the way the planning prompts request
# ---------------------------------------------------------------------------

REQUIREMENTS_REPLY = """\
# Requirements Document

## Introduction

A shared todo list for small teams.

## Glossary

- **Board**: A shared list of tasks
- **Member**: A user invited to a board

## Requirements

### Requirement 1

**User Story:** As a member, I want to add tasks, so that the team sees them

#### Acceptance Criteria

1. WHEN a member submits a task THEN THE System SHALL add it to the board
2. WHEN the task title is empty THEN THE System SHALL reject it

### Requirement 2

**User Story:** As a member, I want to complete tasks, so that progress is visible

#### Acceptance Criteria

1. WHEN a member checks a task THEN THE System SHALL mark it complete
"""

DESIGN_REPLY = """\
# Design Document

## 1. Overview

A React frontend talking to an Express API.

## 2. Architecture

Client-server with a REST API.

### Deployment

Containers behind a load balancer.

## Components

### TaskBoard

Renders the tasks of a board.

- Display tasks
- Toggle completion

### TaskService

Express service persisting tasks.

- Validate input

## Data Models

### Task

A unit of work on a board.

- id: uuid
- title: string
- **done**: boolean

## Error Handling

Validation errors return 400.

## Testing Strategy

Unit tests with Vitest.
"""

TASKS_REPLY = """\
# Implementation Tasks

- [ ] 1. Set up the project
  - Initialize Vite
  - _Requirements: 1.1_

- [x] 2. Build the task board
  - Render tasks
  - _Requirements: 1.1, 2.1_
- [ ] 2.1 Add completion toggle
  - Persist done flag
"""


@pytest.fixture
def requirements_reply():
    return REQUIREMENTS_REPLY


@pytest.fixture
def design_reply():
    return DESIGN_REPLY


@pytest.fixture
def tasks_reply():
    return TASKS_REPLY
