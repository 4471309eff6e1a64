"""Project generation workflow.

``ProjectGenerator`` drives a session through the phase chain

    stack-selection -> theme-selection -> description -> requirements ->
    design -> tasks -> image-generation -> execution -> complete

Every public operation:

1. takes the session's lock, so operations on one session never interleave
2. loads the session and checks the phase (and required plan documents)
   before touching anything, so a rejected call leaves the session unchanged
3. calls the plan creator under a timeout when the operation generates
4. stores the result, logs a conversation message, then advances the phase
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TypeVar

from launchpad.config import DocumentType, GenerationConfig, MessageRole, Phase
from launchpad.exceptions import (
    GenerationError,
    GenerationTimeoutError,
    InvalidTransitionError,
    MissingDocumentError,
    ProjectGeneratorError,
    WrongPhaseError,
)
from launchpad.planning.plan_creator import PlanCreator
from launchpad.project.models import (
    ApprovalMetadata,
    ChatMessage,
    ColorTheme,
    DesignDoc,
    GeneratedImage,
    ImageMetadata,
    MessageMetadata,
    PlanMetadata,
    ProjectSession,
    RequirementsDoc,
    SessionSummary,
    StackSelectionMetadata,
    SystemMetadata,
    TaskList,
    TechStack,
    ThemeSelectionMetadata,
)
from launchpad.project.stacks import PLACEHOLDER_STACK
from launchpad.project.themes import PLACEHOLDER_THEME
from launchpad.session.context_manager import ContextManager
from launchpad.session.formatting import (
    format_design_for_display,
    format_requirements_for_display,
    format_tasks_for_display,
)
from launchpad.session.storage import extract_project_name, generate_message_id
from launchpad.telemetry.spans import generation_span, workflow_operation_span
from launchpad.workflow.locks import SessionLocks
from launchpad.workflow.phases import INITIAL_PHASE, is_valid_transition

logger = logging.getLogger(__name__)

T = TypeVar("T", RequirementsDoc, DesignDoc, TaskList)

IMAGE_OFFER_MESSAGE = (
    "Would you like me to generate images for your project (logo, hero image, icons)?"
)


class ProjectGenerator:
    """Phase state machine over sessions owned by a ``ContextManager``."""

    def __init__(
        self,
        context_manager: ContextManager,
        plan_creator: PlanCreator,
        config: GenerationConfig | None = None,
    ):
        """Initialize the ProjectGenerator.

        Args:
            context_manager: Session persistence
            plan_creator: Produces requirements, design and task documents
            config: Generation timeout and context window (default: built-in defaults)
        """
        self.context_manager = context_manager
        self.plan_creator = plan_creator
        self.config = config or GenerationConfig()
        self._locks = SessionLocks()

    # ========== Session Lifecycle ==========

    async def start_new_project(self) -> str:
        """Create a session with placeholder stack and theme.

        Returns:
            The new session id, in phase ``stack-selection``
        """
        with workflow_operation_span("start_new_project") as span:
            session_id = await self.context_manager.create_session(
                "", PLACEHOLDER_STACK, PLACEHOLDER_THEME, phase=INITIAL_PHASE
            )
            span.set_attribute("session.id", session_id)
        logger.info(f"Started project {session_id}")
        return session_id

    async def get_session_state(self, session_id: str) -> ProjectSession:
        return await self.context_manager.get_session(session_id)

    async def get_current_phase(self, session_id: str) -> Phase:
        session = await self.context_manager.get_session(session_id)
        return session.phase

    async def list_sessions(self) -> list[SessionSummary]:
        return await self.context_manager.list_sessions()

    async def delete_session(self, session_id: str) -> None:
        with workflow_operation_span("delete_session", session_id):
            async with self._locks.hold(session_id):
                await self.context_manager.delete_session(session_id)

    # ========== Configuration Phases ==========

    async def select_stack(self, session_id: str, stack: TechStack) -> None:
        async with self._operation("select_stack", session_id) as session:
            self._require_phase(session, "select stack", Phase.STACK_SELECTION)

            await self.context_manager.update_session(session_id, selected_stack=stack)
            await self._log(
                session_id,
                MessageRole.SYSTEM,
                f"Stack selected: {stack.name}",
                StackSelectionMetadata(stack=stack),
            )
            await self._transition_phase(session_id, Phase.THEME_SELECTION)

    async def select_theme(self, session_id: str, theme: ColorTheme) -> None:
        async with self._operation("select_theme", session_id) as session:
            self._require_phase(session, "select theme", Phase.THEME_SELECTION)

            await self.context_manager.update_session(session_id, selected_theme=theme)
            await self._log(
                session_id,
                MessageRole.SYSTEM,
                f"Theme selected: {theme.name}",
                ThemeSelectionMetadata(theme=theme),
            )
            await self._transition_phase(session_id, Phase.DESCRIPTION)

    async def submit_description(self, session_id: str, description: str) -> None:
        async with self._operation("submit_description", session_id) as session:
            self._require_phase(session, "submit description", Phase.DESCRIPTION)

            plan = session.plan.model_copy(
                update={"project_name": extract_project_name(description)}
            )
            await self.context_manager.update_session(
                session_id, description=description, plan=plan
            )
            await self._log(session_id, MessageRole.USER, description)
            await self._transition_phase(session_id, Phase.REQUIREMENTS)

    # ========== Requirements ==========

    async def generate_requirements(self, session_id: str) -> RequirementsDoc:
        async with self._operation("generate_requirements", session_id) as session:
            self._require_phase(session, "generate requirements", Phase.REQUIREMENTS)
            return await self._create_requirements(session, session.description)

    async def update_requirements(self, session_id: str, feedback: str) -> RequirementsDoc:
        """Regenerate requirements with the feedback appended to the description."""
        async with self._operation("update_requirements", session_id) as session:
            self._require_phase(session, "update requirements", Phase.REQUIREMENTS)
            self._require_document("update requirements", DocumentType.REQUIREMENTS, session)

            await self._log(session_id, MessageRole.USER, feedback)
            return await self._create_requirements(
                session, f"{session.description}\n\nFeedback: {feedback}"
            )

    async def approve_requirements(self, session_id: str) -> None:
        async with self._operation("approve_requirements", session_id) as session:
            self._require_phase(session, "approve requirements", Phase.REQUIREMENTS)
            self._require_document("approve requirements", DocumentType.REQUIREMENTS, session)

            await self._approve(session_id, DocumentType.REQUIREMENTS, Phase.DESIGN)

    # ========== Design ==========

    async def generate_design(self, session_id: str) -> DesignDoc:
        async with self._operation("generate_design", session_id) as session:
            self._require_phase(session, "generate design", Phase.DESIGN)
            self._require_document("generate design", DocumentType.REQUIREMENTS, session)
            return await self._create_design(session)

    async def update_design(self, session_id: str, feedback: str) -> DesignDoc:
        """Log the feedback and regenerate the design from the requirements."""
        async with self._operation("update_design", session_id) as session:
            self._require_phase(session, "update design", Phase.DESIGN)
            self._require_document("update design", DocumentType.DESIGN, session)
            self._require_document("update design", DocumentType.REQUIREMENTS, session)

            await self._log(session_id, MessageRole.USER, feedback)
            return await self._create_design(session)

    async def approve_design(self, session_id: str) -> None:
        async with self._operation("approve_design", session_id) as session:
            self._require_phase(session, "approve design", Phase.DESIGN)
            self._require_document("approve design", DocumentType.DESIGN, session)

            await self._approve(session_id, DocumentType.DESIGN, Phase.TASKS)

    # ========== Tasks ==========

    async def generate_tasks(self, session_id: str) -> TaskList:
        async with self._operation("generate_tasks", session_id) as session:
            self._require_phase(session, "generate tasks", Phase.TASKS)
            self._require_document("generate tasks", DocumentType.DESIGN, session)
            return await self._create_tasks(session)

    async def update_tasks(self, session_id: str, feedback: str) -> TaskList:
        """Log the feedback and regenerate the task list from the design."""
        async with self._operation("update_tasks", session_id) as session:
            self._require_phase(session, "update tasks", Phase.TASKS)
            self._require_document("update tasks", DocumentType.TASKS, session)
            self._require_document("update tasks", DocumentType.DESIGN, session)

            await self._log(session_id, MessageRole.USER, feedback)
            return await self._create_tasks(session)

    async def approve_tasks(self, session_id: str) -> None:
        async with self._operation("approve_tasks", session_id) as session:
            self._require_phase(session, "approve tasks", Phase.TASKS)
            self._require_document("approve tasks", DocumentType.TASKS, session)

            await self._approve(session_id, DocumentType.TASKS, Phase.IMAGE_GENERATION)

    # ========== Images and Execution ==========

    async def offer_image_generation(self, session_id: str) -> None:
        async with self._operation("offer_image_generation", session_id) as session:
            self._require_phase(session, "offer image generation", Phase.IMAGE_GENERATION)
            await self._log(
                session_id, MessageRole.ASSISTANT, IMAGE_OFFER_MESSAGE, ImageMetadata()
            )

    async def skip_image_generation(self, session_id: str) -> None:
        async with self._operation("skip_image_generation", session_id) as session:
            self._require_phase(session, "skip image generation", Phase.IMAGE_GENERATION)
            await self._log(
                session_id, MessageRole.SYSTEM, "Image generation skipped", SystemMetadata()
            )
            await self._transition_phase(session_id, Phase.EXECUTION)

    async def accept_image_generation(self, session_id: str) -> None:
        """Record acceptance and move to execution.

        Generating the images is up to the caller, which reports them through
        ``store_generated_images`` before accepting.
        """
        async with self._operation("accept_image_generation", session_id) as session:
            self._require_phase(session, "accept image generation", Phase.IMAGE_GENERATION)
            await self._log(
                session_id,
                MessageRole.SYSTEM,
                "Image generation accepted. Images will be generated.",
                SystemMetadata(),
            )
            await self._transition_phase(session_id, Phase.EXECUTION)

    async def store_generated_images(
        self, session_id: str, images: list[GeneratedImage]
    ) -> None:
        async with self._operation("store_generated_images", session_id) as session:
            self._require_phase(session, "store generated images", Phase.IMAGE_GENERATION)

            await self.context_manager.store_images(session_id, images)
            await self._log(
                session_id,
                MessageRole.ASSISTANT,
                f"Generated {len(images)} image(s): "
                + ", ".join(image.type for image in images),
                ImageMetadata(images=images),
            )

    async def complete_project(self, session_id: str) -> None:
        async with self._operation("complete_project", session_id) as session:
            self._require_phase(session, "complete project", Phase.EXECUTION)
            await self._log(session_id, MessageRole.SYSTEM, "Project complete", SystemMetadata())
            await self._transition_phase(session_id, Phase.COMPLETE)

    # ========== Internals ==========

    @asynccontextmanager
    async def _operation(
        self, operation: str, session_id: str
    ) -> AsyncIterator[ProjectSession]:
        """Serialize on the session, load it and trace the operation."""
        with workflow_operation_span(operation, session_id) as span:
            async with self._locks.hold(session_id):
                session = await self.context_manager.get_session(session_id)
                span.set_attribute("workflow.phase", session.phase.value)
                yield session

    @staticmethod
    def _require_phase(session: ProjectSession, operation: str, required: Phase) -> None:
        if session.phase != required:
            raise WrongPhaseError(operation, required.value, session.phase.value)

    @staticmethod
    def _require_document(
        operation: str, document: DocumentType, session: ProjectSession
    ) -> None:
        if getattr(session.plan, document.value) is None:
            raise MissingDocumentError(operation, document.value)

    async def _transition_phase(self, session_id: str, target: Phase) -> None:
        """Advance the session along one edge of the phase graph.

        Raises:
            InvalidTransitionError: If ``target`` is not the successor of the
                current phase
        """
        session = await self.context_manager.get_session(session_id)
        if not is_valid_transition(session.phase, target):
            raise InvalidTransitionError(session.phase.value, target.value)
        await self.context_manager.update_phase(session_id, target)
        logger.info(f"Session {session_id}: {session.phase.value} -> {target.value}")

    async def _log(
        self,
        session_id: str,
        role: MessageRole,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> None:
        message = ChatMessage(
            id=generate_message_id(), role=role, content=content, metadata=metadata
        )
        await self.context_manager.add_message(session_id, message)

    async def _approve(self, session_id: str, document: DocumentType, target: Phase) -> None:
        await self._log(
            session_id,
            MessageRole.SYSTEM,
            f"{document.value.capitalize()} approved",
            ApprovalMetadata(approval_type=document),
        )
        await self._transition_phase(session_id, target)

    async def _generate(
        self,
        document: DocumentType,
        session_id: str,
        call: Awaitable[T],
        expected: type[T],
    ) -> T:
        """Await a plan creator call under the configured timeout.

        Raises:
            GenerationTimeoutError: If the call exceeds ``timeout_seconds``
            GenerationError: If the call fails or returns the wrong document type
        """
        timeout = self.config.timeout_seconds
        with generation_span(document.value, session_id) as span:
            try:
                result = await asyncio.wait_for(call, timeout)
            except TimeoutError as e:
                raise GenerationTimeoutError(document.value, timeout or 0.0) from e
            except ProjectGeneratorError:
                raise
            except Exception as e:
                raise GenerationError(f"Failed to generate {document.value}: {e}") from e

            if not isinstance(result, expected):
                raise GenerationError(
                    f"Plan creator returned {type(result).__name__} for {document.value}"
                )
            span.set_attribute("generation.result_type", expected.__name__)
            return result

    async def _store_document(
        self,
        session: ProjectSession,
        document: DocumentType,
        value: RequirementsDoc | DesignDoc | TaskList,
        content: str,
    ) -> None:
        plan = session.plan.model_copy(update={document.value: value})
        await self.context_manager.update_session(session.id, plan=plan)
        await self._log(
            session.id,
            MessageRole.ASSISTANT,
            content,
            PlanMetadata(document_type=document, document=value),
        )

    async def _create_requirements(
        self, session: ProjectSession, description: str
    ) -> RequirementsDoc:
        context = await self.context_manager.get_context(
            session.id, self.config.context_messages
        )
        requirements = await self._generate(
            DocumentType.REQUIREMENTS,
            session.id,
            self.plan_creator.create_requirements(
                description,
                session.selected_stack,
                session.selected_theme,
                [context] if context else [],
            ),
            RequirementsDoc,
        )
        await self._store_document(
            session,
            DocumentType.REQUIREMENTS,
            requirements,
            format_requirements_for_display(requirements),
        )
        return requirements

    async def _create_design(self, session: ProjectSession) -> DesignDoc:
        design = await self._generate(
            DocumentType.DESIGN,
            session.id,
            self.plan_creator.create_design(
                session.plan.requirements, session.selected_stack, session.selected_theme
            ),
            DesignDoc,
        )
        await self._store_document(
            session, DocumentType.DESIGN, design, format_design_for_display(design)
        )
        return design

    async def _create_tasks(self, session: ProjectSession) -> TaskList:
        tasks = await self._generate(
            DocumentType.TASKS,
            session.id,
            self.plan_creator.create_tasks(
                session.plan.design, session.selected_stack, session.selected_theme
            ),
            TaskList,
        )
        await self._store_document(
            session, DocumentType.TASKS, tasks, format_tasks_for_display(tasks)
        )
        return tasks
