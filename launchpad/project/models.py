"""Pydantic models for project generation sessions.

All session state is persisted as JSON under the session directory. Python
attributes are snake_case; the persisted documents use camelCase keys
(``createdAt``, ``selectedStack``, ...) through field aliases.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from launchpad.config import DocumentType, MessageRole, MessageType, Phase, TaskStatus


def utc_now() -> datetime:
    """Timezone-aware current time used for every session timestamp."""
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


# ========== Configuration Snapshots ==========


class TechStack(CamelModel):
    """Technology stack the generated project is built on."""

    id: str
    name: str
    level: Literal["beginner", "intermediate", "advanced", "mobile", "ultimate"]
    level_number: int = Field(ge=1, le=5)
    frontend: str
    backend: str | None = None
    database: str
    mobile: str | None = None
    benefits: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    package_manager: Literal["npm", "yarn", "pnpm", "pip", "cargo"] = "npm"


class ColorTheme(CamelModel):
    """Color scheme applied to the generated project's UI."""

    id: str
    name: str
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    description: str = ""


class GeneratedImage(CamelModel):
    """Image produced for the project (logo, hero image or icon)."""

    id: str
    type: Literal["logo", "hero", "icon"]
    url: str
    data_url: str = ""
    width: int
    height: int
    format: Literal["png", "svg", "jpg"] = "png"
    prompt: str = ""


# ========== Plan Documents ==========


class Requirement(CamelModel):
    """A numbered user story with EARS acceptance criteria."""

    number: int
    user_story: str
    acceptance_criteria: list[str] = Field(default_factory=list)


class RequirementsDoc(CamelModel):
    introduction: str
    glossary: dict[str, str] = Field(default_factory=dict)
    requirements: list[Requirement] = Field(default_factory=list)


class Component(CamelModel):
    name: str
    description: str
    responsibilities: list[str] = Field(default_factory=list)
    interface: str | None = None


class DataModel(CamelModel):
    name: str
    description: str
    fields: dict[str, str] = Field(default_factory=dict)


class DesignDoc(CamelModel):
    overview: str
    architecture: str
    components: list[Component] = Field(default_factory=list)
    data_models: list[DataModel] = Field(default_factory=list)
    error_handling: str = ""
    testing_strategy: str = ""


class Task(CamelModel):
    """Implementation task.

    ``number`` is the outline number shown to the user ("1", "2.3"), while
    ``requirements`` references requirement numbers ("1.1").
    """

    id: str
    number: str
    description: str
    details: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING


class TaskList(CamelModel):
    tasks: list[Task]
    checkpoints: list[int] = Field(default_factory=list)  # task indices


class ProjectPlan(CamelModel):
    """Plan documents accumulated as the workflow advances."""

    project_name: str
    requirements: RequirementsDoc | None = None
    design: DesignDoc | None = None
    tasks: TaskList | None = None


PlanDocument = RequirementsDoc | DesignDoc | TaskList


# ========== Conversation ==========


class StackSelectionMetadata(CamelModel):
    type: Literal[MessageType.STACK_SELECTION] = MessageType.STACK_SELECTION
    stack: TechStack


class ThemeSelectionMetadata(CamelModel):
    type: Literal[MessageType.THEME_SELECTION] = MessageType.THEME_SELECTION
    theme: ColorTheme


class PlanMetadata(CamelModel):
    """A generated plan document attached to an assistant message."""

    type: Literal[MessageType.PLAN] = MessageType.PLAN
    document_type: DocumentType
    document: RequirementsDoc | DesignDoc | TaskList


class ApprovalMetadata(CamelModel):
    type: Literal[MessageType.APPROVAL] = MessageType.APPROVAL
    approval_type: DocumentType
    approved: bool = True


class ImageMetadata(CamelModel):
    """Image offer (no images yet) or a batch of generated images."""

    type: Literal[MessageType.IMAGE] = MessageType.IMAGE
    images: list[GeneratedImage] = Field(default_factory=list)


class SystemMetadata(CamelModel):
    type: Literal[MessageType.SYSTEM] = MessageType.SYSTEM


MessageMetadata = Annotated[
    StackSelectionMetadata
    | ThemeSelectionMetadata
    | PlanMetadata
    | ApprovalMetadata
    | ImageMetadata
    | SystemMetadata,
    Field(discriminator="type"),
]


class ChatMessage(CamelModel):
    id: str
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    metadata: MessageMetadata | None = None


# ========== Session Aggregate ==========


class ProjectSession(CamelModel):
    """Durable aggregate tracking one project generation run end to end."""

    id: str
    phase: Phase
    selected_stack: TechStack
    selected_theme: ColorTheme
    description: str = ""
    plan: ProjectPlan
    generated_images: list[GeneratedImage] = Field(default_factory=list)
    conversation_history: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SessionSummary(CamelModel):
    """Lightweight view of a session for list displays."""

    id: str
    project_name: str
    phase: Phase
    last_updated: datetime
    task_progress: str
    selected_stack: TechStack | None = None
    selected_theme: ColorTheme | None = None
