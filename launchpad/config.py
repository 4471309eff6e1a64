"""Centralized configuration for Launchpad.

Single source of truth for workflow enums, storage layout constants and
generation settings.

Design Principles:
- Phase names, message roles and document types as enums
- Storage file names in one place
- Timeouts read from the environment with sensible defaults
"""

import os
from dataclasses import dataclass
from enum import Enum

# =============================================================================
# Enums for Type Safety
# =============================================================================


class Phase(str, Enum):
    """Workflow phases of a project generation session."""

    STACK_SELECTION = "stack-selection"
    THEME_SELECTION = "theme-selection"
    DESCRIPTION = "description"
    REQUIREMENTS = "requirements"
    DESIGN = "design"
    TASKS = "tasks"
    IMAGE_GENERATION = "image-generation"
    EXECUTION = "execution"
    COMPLETE = "complete"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid phase values as strings."""
        return [phase.value for phase in cls]


class MessageRole(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageType(str, Enum):
    """Tag of the metadata variant attached to a message."""

    STACK_SELECTION = "stack-selection"
    THEME_SELECTION = "theme-selection"
    PLAN = "plan"
    APPROVAL = "approval"
    IMAGE = "image"
    SYSTEM = "system"


class DocumentType(str, Enum):
    """Plan documents produced during the workflow."""

    REQUIREMENTS = "requirements"
    DESIGN = "design"
    TASKS = "tasks"


class TaskStatus(str, Enum):
    """Valid status values for implementation tasks."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def finished(cls) -> set["TaskStatus"]:
        """Statuses that count towards task progress."""
        return {cls.COMPLETED, cls.SKIPPED}


# =============================================================================
# Session Storage Configuration
# =============================================================================

# Directory (relative to the store root) holding one sub-directory per session
SESSION_STORAGE_DIR = "project-sessions"

SESSION_METADATA_FILE = "session.json"
CONVERSATION_FILE = "conversation.json"
REQUIREMENTS_FILE = "requirements.md"
DESIGN_FILE = "design.md"
TASKS_FILE = "tasks.md"

# Number of trailing messages handed to the plan creator as context
DEFAULT_CONTEXT_MESSAGES = 20

# Words of the description used as the project name
PROJECT_NAME_WORDS = 3
DEFAULT_PROJECT_NAME = "Untitled Project"


# =============================================================================
# Plan Generation Configuration
# =============================================================================

# A checkpoint is placed after every CHECKPOINT_INTERVAL tasks, starting at index 3
CHECKPOINT_INTERVAL = 4
FIRST_CHECKPOINT_INDEX = 3

DEFAULT_GENERATION_TIMEOUT = 300.0


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for plan creator calls.

    Attributes:
        timeout_seconds: Upper bound for a single plan creator call. ``None``
            disables the timeout.
        context_messages: Trailing conversation messages passed as context.
    """

    timeout_seconds: float | None = DEFAULT_GENERATION_TIMEOUT
    context_messages: int = DEFAULT_CONTEXT_MESSAGES

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Create config from environment variables.

        ``LAUNCHPAD_GENERATION_TIMEOUT`` of ``0`` or ``none`` disables the timeout.
        """
        raw_timeout = os.getenv("LAUNCHPAD_GENERATION_TIMEOUT", str(DEFAULT_GENERATION_TIMEOUT))
        timeout: float | None
        if raw_timeout.strip().lower() in ("", "0", "none"):
            timeout = None
        else:
            timeout = float(raw_timeout)

        return cls(
            timeout_seconds=timeout,
            context_messages=int(
                os.getenv("LAUNCHPAD_CONTEXT_MESSAGES", str(DEFAULT_CONTEXT_MESSAGES))
            ),
        )
