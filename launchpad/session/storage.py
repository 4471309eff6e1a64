"""Session storage layout and (de)serialization helpers.

Pure functions shared by the context manager: id generation, the per-session
path layout under ``project-sessions/`` and JSON round-tripping of sessions
and conversations.
"""

import random
import re
import string
import time

from pydantic import TypeAdapter

from launchpad.config import (
    CONVERSATION_FILE,
    DEFAULT_PROJECT_NAME,
    DESIGN_FILE,
    PROJECT_NAME_WORDS,
    REQUIREMENTS_FILE,
    SESSION_METADATA_FILE,
    SESSION_STORAGE_DIR,
    TASKS_FILE,
    TaskStatus,
)
from launchpad.project.models import ChatMessage, ProjectSession, SessionSummary

_BASE36 = string.digits + string.ascii_lowercase
_SESSION_ID_PATTERN = re.compile(rf"(?:^|/){re.escape(SESSION_STORAGE_DIR)}/([^/]+)")

_conversation_adapter = TypeAdapter(list[ChatMessage])


def _random_base36(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def generate_session_id() -> str:
    """Generate a session id of the form ``session-<epoch ms>-<7 base36 chars>``."""
    return f"session-{_epoch_millis()}-{_random_base36(7)}"


def generate_message_id() -> str:
    """Generate a message id of the form ``msg-<epoch ms>-<9 base36 chars>``."""
    return f"msg-{_epoch_millis()}-{_random_base36(9)}"


# ========== Path Layout ==========


def get_session_directory(session_id: str) -> str:
    return f"{SESSION_STORAGE_DIR}/{session_id}"


def get_session_metadata_path(session_id: str) -> str:
    return f"{get_session_directory(session_id)}/{SESSION_METADATA_FILE}"


def get_conversation_path(session_id: str) -> str:
    return f"{get_session_directory(session_id)}/{CONVERSATION_FILE}"


def get_requirements_path(session_id: str) -> str:
    return f"{get_session_directory(session_id)}/{REQUIREMENTS_FILE}"


def get_design_path(session_id: str) -> str:
    return f"{get_session_directory(session_id)}/{DESIGN_FILE}"


def get_tasks_path(session_id: str) -> str:
    return f"{get_session_directory(session_id)}/{TASKS_FILE}"


def parse_session_id_from_path(path: str) -> str | None:
    """Extract the session id from a path inside the storage directory.

    Returns:
        The session id, or None when the path is not under ``project-sessions/``
    """
    match = _SESSION_ID_PATTERN.search(path.replace("\\", "/"))
    return match.group(1) if match else None


# ========== Serialization ==========


def serialize_session(session: ProjectSession) -> str:
    """Serialize the whole session, conversation history included."""
    return session.model_dump_json(by_alias=True, indent=2)


def serialize_session_metadata(session: ProjectSession) -> str:
    """Serialize everything but the conversation history.

    This is the ``session.json`` document. The history lives in its own file
    so that appending a message does not rewrite the plan documents.
    """
    return session.model_dump_json(
        by_alias=True,
        exclude={"conversation_history"},
        indent=2,
    )


def deserialize_session(content: str) -> ProjectSession:
    """Parse a document written by ``serialize_session``.

    Metadata written by ``serialize_session_metadata`` parses too, with an
    empty conversation history.

    Raises:
        pydantic.ValidationError: If the document is malformed
    """
    return ProjectSession.model_validate_json(content)


def serialize_conversation(messages: list[ChatMessage]) -> str:
    return _conversation_adapter.dump_json(messages, by_alias=True, indent=2).decode()


def deserialize_conversation(content: str) -> list[ChatMessage]:
    return _conversation_adapter.validate_json(content)


# ========== Summaries ==========


def extract_project_name(description: str) -> str:
    """Derive a project name from the first words of a description."""
    words = description.split()[:PROJECT_NAME_WORDS]
    return " ".join(words) or DEFAULT_PROJECT_NAME


def create_session_summary(session: ProjectSession) -> SessionSummary:
    """Build the list-view summary of a session."""
    task_progress = "0/0 tasks"
    if session.plan.tasks is not None:
        tasks = session.plan.tasks.tasks
        finished = sum(1 for task in tasks if task.status in TaskStatus.finished())
        task_progress = f"{finished}/{len(tasks)} tasks complete"

    return SessionSummary(
        id=session.id,
        project_name=session.plan.project_name,
        phase=session.phase,
        last_updated=session.updated_at,
        task_progress=task_progress,
        selected_stack=session.selected_stack,
        selected_theme=session.selected_theme,
    )
