"""Deterministic plan documents derived from the project inputs.

These generators need no model access. ``TemplatePlanCreator`` uses them to
build complete documents offline, and ``AgentPlanCreator`` uses them to fill
in any section it cannot parse from a model reply.
"""

from launchpad.config import CHECKPOINT_INTERVAL, FIRST_CHECKPOINT_INDEX
from launchpad.project.models import (
    ColorTheme,
    Component,
    DataModel,
    DesignDoc,
    Requirement,
    RequirementsDoc,
    Task,
    TaskList,
    TechStack,
)


def identify_checkpoints(tasks: list[Task]) -> list[int]:
    """Place a review checkpoint after every few tasks.

    Returns:
        Task indices 3, 7, 11, ... that exist in ``tasks``
    """
    return list(range(FIRST_CHECKPOINT_INDEX, len(tasks), CHECKPOINT_INTERVAL))


# ========== Requirements ==========


def generate_introduction(description: str, stack: TechStack, theme: ColorTheme) -> str:
    backend = f" with {stack.backend}" if stack.backend else ""
    return (
        f"This project aims to {description}. It will be built using {stack.name} "
        f"({stack.frontend}{backend} and {stack.database}) with a {theme.name} color scheme."
    )


def generate_glossary(stack: TechStack, theme: ColorTheme) -> dict[str, str]:
    glossary = {
        "System": "The application being developed",
        "User": "A person who interacts with the system",
    }
    if "React" in stack.frontend:
        glossary["Component"] = "A reusable React UI element"
    if "Supabase" in stack.database:
        glossary["Database"] = "Supabase PostgreSQL database"
    glossary["Theme"] = f"The {theme.name} color scheme applied throughout the UI"
    return glossary


def generate_requirements(
    description: str, stack: TechStack, theme: ColorTheme
) -> list[Requirement]:
    """Baseline requirements: core usage, plus backend and storage when the stack has them."""
    requirements = [
        Requirement(
            number=1,
            user_story=f"As a user, I want to use the application, so that I can {description}",
            acceptance_criteria=[
                "WHEN a user accesses the application THEN the System SHALL display the main interface",
                "WHEN the user interacts with the interface THEN the System SHALL respond appropriately",
                f"WHEN displaying UI elements THEN the System SHALL use the {theme.name} color scheme",
            ],
        )
    ]

    if stack.backend:
        requirements.append(
            Requirement(
                number=len(requirements) + 1,
                user_story=(
                    "As a user, I want the application to communicate with a backend, "
                    "so that data is persisted and processed"
                ),
                acceptance_criteria=[
                    "WHEN the user performs an action THEN the System SHALL send requests to the backend API",
                    "WHEN the backend responds THEN the System SHALL update the UI accordingly",
                    "WHEN network errors occur THEN the System SHALL display appropriate error messages",
                ],
            )
        )

    if "Supabase" in stack.database:
        requirements.append(
            Requirement(
                number=len(requirements) + 1,
                user_story="As a user, I want my data to be stored securely, so that I can access it later",
                acceptance_criteria=[
                    "WHEN data is created THEN the System SHALL store it in the Database",
                    "WHEN data is requested THEN the System SHALL retrieve it from the Database",
                    "WHEN data is updated THEN the System SHALL persist changes to the Database",
                ],
            )
        )

    return requirements


# ========== Design ==========


def generate_design_overview(stack: TechStack, theme: ColorTheme) -> str:
    backend = f", the backend uses {stack.backend}" if stack.backend else ""
    return (
        f"This application is built using {stack.name}. The frontend uses {stack.frontend}"
        f"{backend}, and data is stored in {stack.database}. The UI follows the "
        f"{theme.name} color scheme with primary color {theme.primary}."
    )


def generate_architecture(stack: TechStack) -> str:
    if stack.backend:
        lines = [
            "This is a client-server architecture with:",
            f"- Frontend: {stack.frontend}",
            f"- Backend: {stack.backend}",
            f"- Database: {stack.database}",
        ]
    else:
        lines = [
            "This is a frontend-focused architecture with:",
            f"- Frontend: {stack.frontend}",
            f"- Database: {stack.database}",
        ]
    if stack.mobile:
        lines.append(f"- Mobile: {stack.mobile}")
    return "\n".join(lines)


def generate_components(stack: TechStack, theme: ColorTheme) -> list[Component]:
    components = [
        Component(
            name="App",
            description="Main application component",
            responsibilities=[
                "Render the main UI",
                f"Apply {theme.name} theme colors",
                "Handle routing and navigation",
            ],
            interface=f"{stack.frontend} component",
        )
    ]
    if stack.backend:
        components.append(
            Component(
                name="API Server",
                description=f"{stack.backend} server",
                responsibilities=[
                    "Handle HTTP requests",
                    "Process business logic",
                    "Interact with database",
                ],
                interface="REST API",
            )
        )
    return components


def generate_data_models() -> list[DataModel]:
    return [
        DataModel(
            name="User",
            description="Represents a user of the system",
            fields={"id": "string (UUID)", "email": "string", "createdAt": "timestamp"},
        )
    ]


def generate_error_handling() -> str:
    return (
        "Error handling will use try-catch blocks and display user-friendly error messages. "
        "Network errors will be caught and retried with exponential backoff."
    )


def generate_testing_strategy() -> str:
    return (
        "Testing will include:\n"
        "- Unit tests for individual functions\n"
        "- Integration tests for API endpoints\n"
        "- Property-based tests\n"
        "- End-to-end tests for critical user flows"
    )


# ========== Tasks ==========


def generate_tasks(stack: TechStack, theme: ColorTheme) -> list[Task]:
    """Baseline implementation tasks for the stack, numbered from 1."""
    specs: list[tuple[str, list[str], list[str]]] = [
        (
            "Set up project structure and dependencies",
            [
                f"Initialize {stack.frontend} project",
                f"Install dependencies using {stack.package_manager}",
                "Configure build tools",
                f"Set up {theme.name} theme colors in configuration",
            ],
            ["1.1"],
        ),
        (
            "Create main UI components",
            [
                "Create App component",
                f"Apply {theme.name} theme colors ({theme.primary}, {theme.secondary})",
                "Set up routing",
            ],
            ["1.1"],
        ),
    ]

    if stack.mobile:
        specs.append(
            (
                f"Set up {stack.mobile} mobile app",
                [
                    f"Initialize {stack.mobile} project",
                    "Share theme colors with the web app",
                    "Configure navigation",
                ],
                ["1.1"],
            )
        )

    if stack.backend:
        specs.append(
            (
                f"Set up {stack.backend} server",
                [
                    f"Initialize {stack.backend} project",
                    "Configure server and middleware",
                    "Set up database connection",
                ],
                ["2.1"],
            )
        )
        specs.append(
            (
                "Create API endpoints",
                ["Define API routes", "Implement request handlers", "Add error handling"],
                ["2.1", "2.2"],
            )
        )

    if "Supabase" in stack.database:
        specs.append(
            (
                "Set up Supabase database",
                ["Create Supabase project", "Define database schema", "Configure authentication"],
                ["3.1"],
            )
        )

    return [
        Task(
            id=f"task-{number}",
            number=str(number),
            description=description,
            details=details,
            requirements=requirements,
        )
        for number, (description, details, requirements) in enumerate(specs, 1)
    ]


class TemplatePlanCreator:
    """Plan creator that builds documents from templates without a model."""

    async def create_requirements(
        self,
        description: str,
        stack: TechStack,
        theme: ColorTheme,
        context: list[str] | None = None,
    ) -> RequirementsDoc:
        return RequirementsDoc(
            introduction=generate_introduction(description, stack, theme),
            glossary=generate_glossary(stack, theme),
            requirements=generate_requirements(description, stack, theme),
        )

    async def create_design(
        self,
        requirements: RequirementsDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> DesignDoc:
        return DesignDoc(
            overview=generate_design_overview(stack, theme),
            architecture=generate_architecture(stack),
            components=generate_components(stack, theme),
            data_models=generate_data_models(),
            error_handling=generate_error_handling(),
            testing_strategy=generate_testing_strategy(),
        )

    async def create_tasks(
        self,
        design: DesignDoc,
        stack: TechStack,
        theme: ColorTheme,
    ) -> TaskList:
        tasks = generate_tasks(stack, theme)
        return TaskList(tasks=tasks, checkpoints=identify_checkpoints(tasks))
