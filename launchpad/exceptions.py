"""Exception hierarchy for the project generation workflow.

Every error raised by the workflow core derives from ``ProjectGeneratorError``
so callers can surface them to the user with a single handler.
"""


class ProjectGeneratorError(Exception):
    """Base class for workflow errors."""


class SessionNotFoundError(ProjectGeneratorError):
    """Raised when a session id has no persisted metadata."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class WrongPhaseError(ProjectGeneratorError):
    """Raised when an operation is invoked outside the phase that permits it."""

    def __init__(self, operation: str, required: str, actual: str):
        super().__init__(
            f"Cannot {operation} in phase '{actual}' (requires phase '{required}')"
        )
        self.operation = operation
        self.required = required
        self.actual = actual


class MissingDocumentError(ProjectGeneratorError):
    """Raised when an operation needs a plan document that has not been generated."""

    def __init__(self, operation: str, document: str):
        super().__init__(f"Cannot {operation}: no {document} document in session")
        self.operation = operation
        self.document = document


class InvalidTransitionError(ProjectGeneratorError):
    """Raised when a phase transition is not an edge of the phase graph."""

    def __init__(self, from_phase: str, to_phase: str):
        super().__init__(f"Invalid phase transition: {from_phase} -> {to_phase}")
        self.from_phase = from_phase
        self.to_phase = to_phase


class GenerationError(ProjectGeneratorError):
    """Raised when the plan creator fails or returns an unusable result."""


class GenerationTimeoutError(GenerationError):
    """Raised when a plan creator call exceeds its timeout."""

    def __init__(self, document: str, timeout: float):
        super().__init__(f"Generating {document} timed out after {timeout:.1f}s")
        self.document = document
        self.timeout = timeout


class PersistenceError(ProjectGeneratorError):
    """Raised by a session store when the underlying I/O fails."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
