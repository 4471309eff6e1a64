"""Tests for ProjectGenerator - the phase-driven project workflow.

Tests cover:
- Configuration phases (stack, theme, description)
- Requirements, design and task generation with feedback and approval
- Phase guards leave the session untouched
- Generation timeouts and failures
- Image generation, execution and completion
- Per-session serialization of concurrent operations
"""

import asyncio
import json

import pytest

from launchpad.config import DocumentType, GenerationConfig, MessageRole, Phase
from launchpad.exceptions import (
    GenerationError,
    GenerationTimeoutError,
    MissingDocumentError,
    SessionNotFoundError,
    WrongPhaseError,
)
from launchpad.planning import TemplatePlanCreator
from launchpad.project.models import (
    ApprovalMetadata,
    DesignDoc,
    GeneratedImage,
    ImageMetadata,
    PlanMetadata,
    RequirementsDoc,
    StackSelectionMetadata,
    SystemMetadata,
    TaskList,
    ThemeSelectionMetadata,
)
from launchpad.project.stacks import PLACEHOLDER_STACK
from launchpad.project.themes import PLACEHOLDER_THEME
from launchpad.session.storage import get_conversation_path, get_session_metadata_path
from launchpad.workflow import ProjectGenerator, build_project_generator


def _image(kind="logo"):
    return GeneratedImage(
        id=f"img-{kind}", type=kind, url=f"https://example.com/{kind}.png", width=512, height=512
    )


class TestStartNewProject:
    @pytest.mark.asyncio
    async def test_new_session_awaits_stack_selection(self, generator):
        session_id = await generator.start_new_project()

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.STACK_SELECTION
        assert session.selected_stack == PLACEHOLDER_STACK
        assert session.selected_theme == PLACEHOLDER_THEME
        assert session.conversation_history == []

    @pytest.mark.asyncio
    async def test_session_is_persisted(self, generator, store):
        session_id = await generator.start_new_project()
        assert store.exists(get_session_metadata_path(session_id))

    @pytest.mark.asyncio
    async def test_first_write_is_in_stack_selection(self, generator, store):
        session_id = await generator.start_new_project()

        metadata = json.loads(store.read_file(get_session_metadata_path(session_id)))
        assert metadata["phase"] == Phase.STACK_SELECTION.value
        assert metadata["createdAt"] == metadata["updatedAt"]

    @pytest.mark.asyncio
    async def test_unknown_session_raises(self, generator):
        with pytest.raises(SessionNotFoundError):
            await generator.get_session_state("session-0-missing")


class TestConfigurationPhases:
    @pytest.mark.asyncio
    async def test_select_stack(self, generator, stack):
        session_id = await generator.start_new_project()

        await generator.select_stack(session_id, stack)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.THEME_SELECTION
        assert session.selected_stack == stack
        message = session.conversation_history[-1]
        assert message.role == MessageRole.SYSTEM
        assert message.content == f"Stack selected: {stack.name}"
        assert isinstance(message.metadata, StackSelectionMetadata)
        assert message.metadata.stack.id == stack.id

    @pytest.mark.asyncio
    async def test_select_theme(self, generator, drive, theme):
        session_id = await drive(Phase.THEME_SELECTION)

        await generator.select_theme(session_id, theme)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.DESCRIPTION
        assert session.selected_theme == theme
        assert session.conversation_history[-1].content == f"Theme selected: {theme.name}"
        assert isinstance(session.conversation_history[-1].metadata, ThemeSelectionMetadata)

    @pytest.mark.asyncio
    async def test_submit_description_names_project(self, generator, drive):
        session_id = await drive(Phase.DESCRIPTION)

        await generator.submit_description(session_id, "Build a todo app for teams")

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.REQUIREMENTS
        assert session.description == "Build a todo app for teams"
        assert session.plan.project_name == "Build a todo"
        message = session.conversation_history[-1]
        assert message.role == MessageRole.USER
        assert message.content == "Build a todo app for teams"
        assert message.metadata is None


class TestPhaseGuards:
    @pytest.mark.asyncio
    async def test_select_theme_before_stack(self, generator, theme):
        session_id = await generator.start_new_project()

        with pytest.raises(WrongPhaseError) as exc_info:
            await generator.select_theme(session_id, theme)

        assert exc_info.value.required == Phase.THEME_SELECTION.value
        assert exc_info.value.actual == Phase.STACK_SELECTION.value

    @pytest.mark.parametrize(
        "operation,required,start",
        [
            pytest.param(
                lambda g, sid, stack, theme: g.select_stack(sid, stack),
                Phase.STACK_SELECTION,
                Phase.DESCRIPTION,
                id="select_stack",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.select_theme(sid, theme),
                Phase.THEME_SELECTION,
                Phase.STACK_SELECTION,
                id="select_theme",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.submit_description(sid, "A chess club site"),
                Phase.DESCRIPTION,
                Phase.THEME_SELECTION,
                id="submit_description",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.generate_requirements(sid),
                Phase.REQUIREMENTS,
                Phase.DESCRIPTION,
                id="generate_requirements",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.update_requirements(sid, "More detail"),
                Phase.REQUIREMENTS,
                Phase.DESIGN,
                id="update_requirements",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.approve_requirements(sid),
                Phase.REQUIREMENTS,
                Phase.TASKS,
                id="approve_requirements",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.generate_design(sid),
                Phase.DESIGN,
                Phase.REQUIREMENTS,
                id="generate_design",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.update_design(sid, "Use GraphQL"),
                Phase.DESIGN,
                Phase.TASKS,
                id="update_design",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.approve_design(sid),
                Phase.DESIGN,
                Phase.IMAGE_GENERATION,
                id="approve_design",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.generate_tasks(sid),
                Phase.TASKS,
                Phase.DESIGN,
                id="generate_tasks",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.update_tasks(sid, "Smaller steps"),
                Phase.TASKS,
                Phase.EXECUTION,
                id="update_tasks",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.approve_tasks(sid),
                Phase.TASKS,
                Phase.COMPLETE,
                id="approve_tasks",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.offer_image_generation(sid),
                Phase.IMAGE_GENERATION,
                Phase.TASKS,
                id="offer_image_generation",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.skip_image_generation(sid),
                Phase.IMAGE_GENERATION,
                Phase.EXECUTION,
                id="skip_image_generation",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.accept_image_generation(sid),
                Phase.IMAGE_GENERATION,
                Phase.COMPLETE,
                id="accept_image_generation",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.store_generated_images(sid, [_image()]),
                Phase.IMAGE_GENERATION,
                Phase.REQUIREMENTS,
                id="store_generated_images",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.complete_project(sid),
                Phase.EXECUTION,
                Phase.IMAGE_GENERATION,
                id="complete_project",
            ),
            pytest.param(
                lambda g, sid, stack, theme: g.complete_project(sid),
                Phase.EXECUTION,
                Phase.COMPLETE,
                id="complete_project_twice",
            ),
        ],
    )
    @pytest.mark.asyncio
    async def test_rejected_call_leaves_session_unchanged(
        self, generator, drive, store, plan_creator, stack, theme, operation, required, start
    ):
        session_id = await drive(start)
        plan_creator.calls.clear()
        paths = [get_session_metadata_path(session_id), get_conversation_path(session_id)]
        before = [store.read_file(path) for path in paths]

        with pytest.raises(WrongPhaseError) as exc_info:
            await operation(generator, session_id, stack, theme)

        assert exc_info.value.required == required.value
        assert exc_info.value.actual == start.value
        assert [store.read_file(path) for path in paths] == before
        assert plan_creator.calls == []

    @pytest.mark.asyncio
    async def test_approve_without_document(self, generator, drive):
        session_id = await drive(Phase.REQUIREMENTS)

        with pytest.raises(MissingDocumentError):
            await generator.approve_requirements(session_id)

        assert await generator.get_current_phase(session_id) == Phase.REQUIREMENTS

    @pytest.mark.asyncio
    async def test_update_without_document(self, generator, drive):
        session_id = await drive(Phase.REQUIREMENTS)

        with pytest.raises(MissingDocumentError):
            await generator.update_requirements(session_id, "More detail")


class TestRequirements:
    @pytest.mark.asyncio
    async def test_generate_requirements(self, generator, drive, store):
        session_id = await drive(Phase.REQUIREMENTS)

        requirements = await generator.generate_requirements(session_id)

        session = await generator.get_session_state(session_id)
        assert isinstance(requirements, RequirementsDoc)
        assert session.plan.requirements == requirements
        assert session.phase == Phase.REQUIREMENTS
        message = session.conversation_history[-1]
        assert message.role == MessageRole.ASSISTANT
        assert message.content.startswith("# Requirements Document")
        assert isinstance(message.metadata, PlanMetadata)
        assert message.metadata.document_type == DocumentType.REQUIREMENTS
        assert store.exists(f"project-sessions/{session_id}/requirements.md")

    @pytest.mark.asyncio
    async def test_conversation_is_passed_as_context(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)

        await generator.generate_requirements(session_id)

        document, description, context = plan_creator.calls[-1]
        assert document == "requirements"
        assert description == "Build a todo app for teams"
        assert len(context) == 1
        assert "user: Build a todo app for teams" in context[0]

    @pytest.mark.asyncio
    async def test_update_requirements_appends_feedback(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)
        await generator.generate_requirements(session_id)

        await generator.update_requirements(session_id, "Add offline support")

        _, description, _ = plan_creator.calls[-1]
        assert description == "Build a todo app for teams\n\nFeedback: Add offline support"
        session = await generator.get_session_state(session_id)
        feedback, regenerated = session.conversation_history[-2:]
        assert feedback.role == MessageRole.USER
        assert feedback.content == "Add offline support"
        assert isinstance(regenerated.metadata, PlanMetadata)
        assert session.phase == Phase.REQUIREMENTS

    @pytest.mark.asyncio
    async def test_approve_requirements(self, generator, drive):
        session_id = await drive(Phase.REQUIREMENTS)
        await generator.generate_requirements(session_id)

        await generator.approve_requirements(session_id)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.DESIGN
        message = session.conversation_history[-1]
        assert message.content == "Requirements approved"
        assert isinstance(message.metadata, ApprovalMetadata)
        assert message.metadata.approval_type == DocumentType.REQUIREMENTS
        assert message.metadata.approved is True


class TestDesignAndTasks:
    @pytest.mark.asyncio
    async def test_generate_design_uses_requirements(self, generator, drive, plan_creator):
        session_id = await drive(Phase.DESIGN)
        session = await generator.get_session_state(session_id)

        design = await generator.generate_design(session_id)

        assert isinstance(design, DesignDoc)
        document, requirements, _ = plan_creator.calls[-1]
        assert document == "design"
        assert requirements == session.plan.requirements

    @pytest.mark.asyncio
    async def test_update_design_logs_feedback(self, generator, drive):
        session_id = await drive(Phase.DESIGN)
        await generator.generate_design(session_id)

        await generator.update_design(session_id, "Use GraphQL")

        session = await generator.get_session_state(session_id)
        assert session.conversation_history[-2].content == "Use GraphQL"
        assert session.conversation_history[-1].content.startswith("# Design Document")

    @pytest.mark.asyncio
    async def test_generate_tasks(self, generator, drive, store):
        session_id = await drive(Phase.TASKS)

        tasks = await generator.generate_tasks(session_id)

        assert isinstance(tasks, TaskList)
        assert [task.id for task in tasks.tasks][:2] == ["task-1", "task-2"]
        assert store.exists(f"project-sessions/{session_id}/tasks.md")

    @pytest.mark.asyncio
    async def test_approve_tasks_moves_to_image_generation(self, generator, drive):
        session_id = await drive(Phase.IMAGE_GENERATION)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.IMAGE_GENERATION
        assert session.conversation_history[-1].content == "Tasks approved"
        assert session.plan.requirements is not None
        assert session.plan.design is not None
        assert session.plan.tasks is not None


class TestGenerationFailures:
    @pytest.mark.asyncio
    async def test_timeout(self, context_manager, plan_creator, drive):
        session_id = await drive(Phase.REQUIREMENTS)
        generator = ProjectGenerator(
            context_manager, plan_creator, GenerationConfig(timeout_seconds=0.05)
        )
        plan_creator.delay = 1.0

        with pytest.raises(GenerationTimeoutError) as exc_info:
            await generator.generate_requirements(session_id)

        assert exc_info.value.document == "requirements"
        session = await generator.get_session_state(session_id)
        assert session.plan.requirements is None
        assert session.phase == Phase.REQUIREMENTS

    @pytest.mark.asyncio
    async def test_plan_creator_error(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)
        plan_creator.error = RuntimeError("model unavailable")

        with pytest.raises(GenerationError, match="model unavailable") as exc_info:
            await generator.generate_requirements(session_id)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        session = await generator.get_session_state(session_id)
        assert session.plan.requirements is None
        assert session.conversation_history[-1].role == MessageRole.USER

    @pytest.mark.asyncio
    async def test_plan_creator_generation_error_propagates(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)
        plan_creator.error = GenerationError("empty reply")

        with pytest.raises(GenerationError, match="^empty reply$"):
            await generator.generate_requirements(session_id)

    @pytest.mark.asyncio
    async def test_wrong_document_type(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)
        plan_creator.result = TaskList(tasks=[])

        with pytest.raises(GenerationError, match="TaskList"):
            await generator.generate_requirements(session_id)


class TestImagesAndCompletion:
    @pytest.mark.asyncio
    async def test_offer_image_generation(self, generator, drive):
        session_id = await drive(Phase.IMAGE_GENERATION)

        await generator.offer_image_generation(session_id)

        session = await generator.get_session_state(session_id)
        message = session.conversation_history[-1]
        assert message.role == MessageRole.ASSISTANT
        assert "generate images" in message.content
        assert isinstance(message.metadata, ImageMetadata)
        assert message.metadata.images == []
        assert session.phase == Phase.IMAGE_GENERATION

    @pytest.mark.asyncio
    async def test_skip_image_generation(self, generator, drive):
        session_id = await drive(Phase.IMAGE_GENERATION)

        await generator.skip_image_generation(session_id)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.EXECUTION
        assert session.conversation_history[-1].content == "Image generation skipped"
        assert isinstance(session.conversation_history[-1].metadata, SystemMetadata)

    @pytest.mark.asyncio
    async def test_store_then_accept_images(self, generator, drive):
        session_id = await drive(Phase.IMAGE_GENERATION)

        await generator.store_generated_images(session_id, [_image("logo"), _image("hero")])
        await generator.accept_image_generation(session_id)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.EXECUTION
        assert [image.type for image in session.generated_images] == ["logo", "hero"]
        images_message = session.conversation_history[-2]
        assert images_message.content == "Generated 2 image(s): logo, hero"
        assert len(images_message.metadata.images) == 2

    @pytest.mark.asyncio
    async def test_complete_project(self, generator, drive):
        session_id = await drive(Phase.EXECUTION)

        await generator.complete_project(session_id)

        assert await generator.get_current_phase(session_id) == Phase.COMPLETE


class TestFullWorkflow:
    @pytest.mark.asyncio
    async def test_every_phase_in_order(self, generator, drive):
        session_id = await drive(Phase.COMPLETE)

        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.COMPLETE
        contents = [message.content for message in session.conversation_history]
        assert contents[0].startswith("Stack selected")
        assert "Requirements approved" in contents
        assert "Design approved" in contents
        assert "Tasks approved" in contents
        assert contents[-1] == "Project complete"

    @pytest.mark.asyncio
    async def test_list_and_delete(self, generator, drive):
        first = await drive(Phase.COMPLETE)
        second = await generator.start_new_project()

        summaries = await generator.list_sessions()
        assert [summary.id for summary in summaries] == [second, first]
        assert summaries[1].project_name == "Build a todo"

        await generator.delete_session(first)
        assert [summary.id for summary in await generator.list_sessions()] == [second]

    @pytest.mark.asyncio
    async def test_build_project_generator(self, tmp_path, stack):
        generator = build_project_generator(
            base_dir=str(tmp_path),
            plan_creator=TemplatePlanCreator(),
            config=GenerationConfig(timeout_seconds=5.0),
        )
        session_id = await generator.start_new_project()
        await generator.select_stack(session_id, stack)

        assert (tmp_path / "project-sessions" / session_id / "session.json").exists()


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_same_session_operations_are_serialized(self, generator, drive, plan_creator):
        session_id = await drive(Phase.REQUIREMENTS)
        plan_creator.delay = 0.05

        results = await asyncio.gather(
            generator.generate_requirements(session_id),
            generator.generate_requirements(session_id),
        )

        assert plan_creator.max_active == 1
        assert all(isinstance(result, RequirementsDoc) for result in results)
        session = await generator.get_session_state(session_id)
        plan_messages = [
            m for m in session.conversation_history if isinstance(m.metadata, PlanMetadata)
        ]
        assert len(plan_messages) == 2

    @pytest.mark.asyncio
    async def test_different_sessions_run_in_parallel(self, generator, drive, plan_creator):
        first = await drive(Phase.REQUIREMENTS)
        second = await drive(Phase.REQUIREMENTS)
        plan_creator.delay = 0.1

        await asyncio.gather(
            generator.generate_requirements(first),
            generator.generate_requirements(second),
        )

        assert plan_creator.max_active == 2


class TestScenarios:
    @pytest.mark.asyncio
    async def test_approve_before_generating(self, generator, stack, theme):
        session_id = await generator.start_new_project()

        await generator.select_stack(session_id, stack)
        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.THEME_SELECTION
        assert [m.role for m in session.conversation_history] == [MessageRole.SYSTEM]

        await generator.select_theme(session_id, theme)
        assert await generator.get_current_phase(session_id) == Phase.DESCRIPTION

        await generator.submit_description(session_id, "A todo app")
        session = await generator.get_session_state(session_id)
        assert session.phase == Phase.REQUIREMENTS
        user_messages = [m for m in session.conversation_history if m.role == MessageRole.USER]
        assert [m.content for m in user_messages] == ["A todo app"]

        with pytest.raises(MissingDocumentError) as exc_info:
            await generator.approve_requirements(session_id)
        assert exc_info.value.document == "requirements"

    @pytest.mark.asyncio
    async def test_design_before_requirements_approved(self, generator, drive):
        session_id = await drive(Phase.REQUIREMENTS)
        await generator.generate_requirements(session_id)

        with pytest.raises(WrongPhaseError) as exc_info:
            await generator.generate_design(session_id)

        assert exc_info.value.required == "design"
        assert exc_info.value.actual == "requirements"

    @pytest.mark.asyncio
    async def test_conversation_is_append_only(self, generator, drive):
        session_id = await drive(Phase.REQUIREMENTS)
        before = (await generator.get_session_state(session_id)).conversation_history

        await generator.generate_requirements(session_id)
        await generator.update_requirements(session_id, "Add tags")

        after = (await generator.get_session_state(session_id)).conversation_history
        assert after[: len(before)] == before
        assert len(after) == len(before) + 3
