"""Session lifecycle management for project generation.

The ``ContextManager`` is the only component that writes to the session
store. Every mutator follows the same load, mutate, persist cycle and bumps
``updated_at``. Store calls are blocking, so each cycle runs in a worker
thread via ``asyncio.to_thread``.

Directory Structure:
    project-sessions/
    └── session-1700000000000-k3j9x2a/
        ├── session.json          # Session metadata (no conversation)
        ├── conversation.json     # ChatMessage[]
        ├── requirements.md       # Rendered plan documents, when present
        ├── design.md
        └── tasks.md
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from launchpad.config import DEFAULT_CONTEXT_MESSAGES, SESSION_STORAGE_DIR, Phase
from launchpad.exceptions import ProjectGeneratorError, SessionNotFoundError
from launchpad.project.models import (
    ChatMessage,
    ColorTheme,
    GeneratedImage,
    ProjectPlan,
    ProjectSession,
    SessionSummary,
    TechStack,
    utc_now,
)
from launchpad.session.formatting import (
    format_design_for_display,
    format_requirements_for_display,
    format_tasks_for_display,
)
from launchpad.session.storage import (
    create_session_summary,
    deserialize_conversation,
    deserialize_session,
    extract_project_name,
    generate_session_id,
    get_conversation_path,
    get_design_path,
    get_requirements_path,
    get_session_directory,
    get_session_metadata_path,
    get_tasks_path,
    serialize_conversation,
    serialize_session_metadata,
)
from launchpad.session.store import SessionStore

logger = logging.getLogger(__name__)

# Fields that update_session may not replace
_PROTECTED_FIELDS = frozenset({"id", "conversation_history"})


def _require_valid_id(session_id: str) -> None:
    # Ids name a single directory below the storage root
    if not session_id or "/" in session_id or session_id in (".", ".."):
        raise SessionNotFoundError(session_id)


class ContextManager:
    """Creates, persists, loads and enumerates project sessions."""

    def __init__(
        self,
        store: SessionStore,
        default_context_messages: int = DEFAULT_CONTEXT_MESSAGES,
    ):
        """Initialize the ContextManager.

        Args:
            store: Storage backend the sessions are persisted to
            default_context_messages: Messages returned by ``get_context``
                when no explicit limit is given
        """
        self.store = store
        self.default_context_messages = default_context_messages

    # ========== Lifecycle ==========

    async def create_session(
        self,
        description: str,
        selected_stack: TechStack,
        selected_theme: ColorTheme,
        phase: Phase = Phase.DESCRIPTION,
    ) -> str:
        """Create and persist a new session, in the description phase by default.

        Returns:
            The new session id
        """
        session_id = generate_session_id()
        now = utc_now()
        session = ProjectSession(
            id=session_id,
            phase=phase,
            selected_stack=selected_stack,
            selected_theme=selected_theme,
            description=description,
            plan=ProjectPlan(project_name=extract_project_name(description)),
            created_at=now,
            updated_at=now,
        )
        await asyncio.to_thread(self._write_session, session_id, session)
        logger.info(f"Created session {session_id}")
        return session_id

    async def save_session(self, session_id: str, session: ProjectSession) -> None:
        """Persist the full session, including rendered plan documents."""
        await asyncio.to_thread(self._write_session, session_id, session)

    async def load_session(self, session_id: str) -> ProjectSession:
        """Load a session with its conversation history.

        Raises:
            SessionNotFoundError: If the session has no metadata file
        """
        return await asyncio.to_thread(self._read_session, session_id)

    async def get_session(self, session_id: str) -> ProjectSession:
        return await self.load_session(session_id)

    async def list_sessions(self) -> list[SessionSummary]:
        """Summarize every readable session, most recently updated first.

        Sessions that fail to load (missing metadata, corrupt or partially
        written JSON) are logged and skipped.
        """
        return await asyncio.to_thread(self._list_summaries)

    async def delete_session(self, session_id: str) -> None:
        """Remove every file of a session and its directory.

        Raises:
            SessionNotFoundError: If the session directory does not exist
        """
        await asyncio.to_thread(self._remove_session, session_id)
        logger.info(f"Deleted session {session_id}")

    # ========== Mutators ==========

    async def add_message(self, session_id: str, message: ChatMessage) -> None:
        """Append a message to the conversation history."""

        def append(session: ProjectSession) -> None:
            session.conversation_history.append(message)

        await self._mutate(session_id, append)

    async def update_phase(self, session_id: str, phase: Phase) -> None:
        def set_phase(session: ProjectSession) -> None:
            session.phase = phase

        await self._mutate(session_id, set_phase)

    async def update_session(self, session_id: str, **changes: Any) -> None:
        """Replace top-level session fields.

        Args:
            session_id: Session to update
            **changes: Field names (snake_case) mapped to new values

        Raises:
            ValueError: If a field is unknown or may not be replaced
        """
        unknown = set(changes) - set(ProjectSession.model_fields)
        if unknown:
            raise ValueError(f"Unknown session fields: {', '.join(sorted(unknown))}")
        protected = set(changes) & _PROTECTED_FIELDS
        if protected:
            raise ValueError(f"Session fields cannot be replaced: {', '.join(sorted(protected))}")

        def apply(session: ProjectSession) -> None:
            for field, value in changes.items():
                setattr(session, field, value)

        await self._mutate(session_id, apply)

    async def store_images(self, session_id: str, images: list[GeneratedImage]) -> None:
        """Append generated images to the session."""

        def extend(session: ProjectSession) -> None:
            session.generated_images = [*session.generated_images, *images]

        await self._mutate(session_id, extend)

    # ========== Queries ==========

    async def get_context(self, session_id: str, max_messages: int | None = None) -> str:
        """Render the trailing conversation as ``role: content`` blocks.

        Args:
            session_id: Session to read
            max_messages: Number of trailing messages (default from config)
        """
        limit = self.default_context_messages if max_messages is None else max_messages
        session = await self.load_session(session_id)
        recent = session.conversation_history[-limit:] if limit > 0 else []
        return "\n\n".join(f"{message.role.value}: {message.content}" for message in recent)

    # ========== Store Access (worker thread) ==========

    async def _mutate(self, session_id: str, mutate: Callable[[ProjectSession], None]) -> None:
        def cycle() -> None:
            session = self._read_session(session_id)
            mutate(session)
            session.updated_at = utc_now()
            self._write_session(session_id, session)

        await asyncio.to_thread(cycle)

    def _write_file(self, path: str, content: str) -> None:
        if self.store.exists(path):
            self.store.update_file(path, content)
        else:
            self.store.create_file(path, content)

    def _write_session(self, session_id: str, session: ProjectSession) -> None:
        self.store.create_directory(get_session_directory(session_id))
        self._write_file(
            get_session_metadata_path(session_id),
            serialize_session_metadata(session),
        )
        self._write_file(
            get_conversation_path(session_id),
            serialize_conversation(session.conversation_history),
        )

        plan = session.plan
        if plan.requirements is not None:
            self._write_file(
                get_requirements_path(session_id),
                format_requirements_for_display(plan.requirements),
            )
        if plan.design is not None:
            self._write_file(get_design_path(session_id), format_design_for_display(plan.design))
        if plan.tasks is not None:
            self._write_file(get_tasks_path(session_id), format_tasks_for_display(plan.tasks))

    def _read_session(self, session_id: str) -> ProjectSession:
        _require_valid_id(session_id)
        metadata_path = get_session_metadata_path(session_id)
        if not self.store.exists(metadata_path):
            raise SessionNotFoundError(session_id)

        session = deserialize_session(self.store.read_file(metadata_path))

        conversation_path = get_conversation_path(session_id)
        if self.store.exists(conversation_path):
            session.conversation_history = deserialize_conversation(
                self.store.read_file(conversation_path)
            )
        return session

    def _list_summaries(self) -> list[SessionSummary]:
        if not self.store.exists(SESSION_STORAGE_DIR):
            return []

        summaries = []
        for entry in self.store.list_directory(SESSION_STORAGE_DIR):
            if not self.store.is_directory(f"{SESSION_STORAGE_DIR}/{entry}"):
                continue
            try:
                session = self._read_session(entry)
            except (ProjectGeneratorError, ValueError) as e:
                logger.warning(f"Skipping session {entry}: {e}")
                continue
            summaries.append(create_session_summary(session))

        summaries.sort(key=lambda summary: summary.last_updated, reverse=True)
        return summaries

    def _remove_session(self, session_id: str) -> None:
        _require_valid_id(session_id)
        session_dir = get_session_directory(session_id)
        if not self.store.exists(session_dir):
            raise SessionNotFoundError(session_id)

        for entry in self.store.list_directory(session_dir):
            self.store.delete(f"{session_dir}/{entry}")
        self.store.delete(session_dir)
