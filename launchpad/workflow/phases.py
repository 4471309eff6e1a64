"""Phase graph of the project generation workflow.

The workflow is a single chain; every phase except ``complete`` has exactly
one successor and there are no backward edges.
"""

from launchpad.config import Phase

INITIAL_PHASE = Phase.STACK_SELECTION
TERMINAL_PHASE = Phase.COMPLETE

PHASE_TRANSITIONS: dict[Phase, Phase] = {
    Phase.STACK_SELECTION: Phase.THEME_SELECTION,
    Phase.THEME_SELECTION: Phase.DESCRIPTION,
    Phase.DESCRIPTION: Phase.REQUIREMENTS,
    Phase.REQUIREMENTS: Phase.DESIGN,
    Phase.DESIGN: Phase.TASKS,
    Phase.TASKS: Phase.IMAGE_GENERATION,
    Phase.IMAGE_GENERATION: Phase.EXECUTION,
    Phase.EXECUTION: Phase.COMPLETE,
}


def is_valid_transition(from_phase: Phase, to_phase: Phase) -> bool:
    return PHASE_TRANSITIONS.get(from_phase) == to_phase


def next_phase(phase: Phase) -> Phase | None:
    """Return the successor of ``phase``, or None for the terminal phase."""
    return PHASE_TRANSITIONS.get(phase)


def reachable_phases(phase: Phase) -> list[Phase]:
    """Phases still ahead of ``phase``, in order."""
    ahead = []
    current = next_phase(phase)
    while current is not None:
        ahead.append(current)
        current = next_phase(current)
    return ahead
