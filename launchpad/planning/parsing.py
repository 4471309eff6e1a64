"""Parse model replies (markdown) into structured plan documents.

Each parser returns ``None`` for a section it cannot recover, so the caller
can substitute a template-generated section instead of failing the whole
document.
"""

import re

from launchpad.project.models import Component, DataModel, Requirement, Task

_HEADING = r"^#{{1,3}}\s+(?:\d+\.\s*)?{name}\b[^\n]*\n"
# A section ends at the next level-1 or level-2 heading
_SECTION_END = r"(?=^#{1,2}\s|\Z)"

_GLOSSARY_LINE = re.compile(r"^\s*[-*]\s*\*\*(.+?)\*\*\s*:?\s*(.+)$")
_REQUIREMENT_SPLIT = re.compile(r"^#{2,4}\s+Requirement\s+(\d+)[^\n]*$", re.MULTILINE | re.IGNORECASE)
_USER_STORY = re.compile(r"\*\*User Story:?\*\*:?\s*(.+)", re.IGNORECASE)
_CRITERIA = re.compile(
    r"^(?:#{3,5}\s*|\*\*)Acceptance Criteria[^\n]*\n(.*)", re.MULTILINE | re.IGNORECASE | re.DOTALL
)
_NUMBERED_LINE = re.compile(r"^\s*\d+\.\s*(.+)$")
_SUBSECTION_SPLIT = re.compile(r"^###\s+", re.MULTILINE)
_BULLET = re.compile(r"^\s*[-*]\s+(.+)$")
_FIELD_BULLET = re.compile(r"^\s*[-*]\s+(?:\*\*|`)?([\w.]+)(?:\*\*|`)?\s*:\s*(.+)$")
_TASK_LINE = re.compile(r"^\s*[-*]\s*\[[ xX]?\]\s*(\d+(?:\.\d+)*)\.?\s+(.+)$")
_DETAIL_LINE = re.compile(r"^\s*[-*]\s+(.+)$")
_REQUIREMENT_REFS = re.compile(r"_Requirements?:\s*(.+?)_\s*$", re.IGNORECASE)


def extract_section(text: str, name: str) -> str | None:
    """Return the body under a ``#``/``##``/``###`` heading named ``name``.

    Headings may carry an outline number (``## 2. Architecture``). The body
    runs until the next level-1 or level-2 heading; deeper headings stay
    inside it.
    """
    pattern = _HEADING.format(name=re.escape(name)) + r"(.*?)" + _SECTION_END
    # A document title such as "# Requirements Document" has an empty body
    for match in re.finditer(pattern, text, re.MULTILINE | re.IGNORECASE | re.DOTALL):
        body = match.group(1).strip()
        if body:
            return body
    return None


# ========== Requirements ==========


def parse_glossary(text: str) -> dict[str, str] | None:
    section = extract_section(text, "Glossary")
    if section is None:
        return None
    glossary = {}
    for line in section.splitlines():
        match = _GLOSSARY_LINE.match(line)
        if match:
            glossary[match.group(1).strip().rstrip(":")] = match.group(2).strip()
    return glossary or None


def parse_requirements(text: str) -> list[Requirement] | None:
    """Parse ``### Requirement N`` blocks with a user story and numbered criteria.

    Blocks missing either part are dropped.
    """
    section = extract_section(text, "Requirements")
    if section is None:
        return None

    parts = _REQUIREMENT_SPLIT.split(section)
    requirements = []
    # parts = [preamble, number, body, number, body, ...]
    for number, body in zip(parts[1::2], parts[2::2], strict=True):
        story = _USER_STORY.search(body)
        criteria_block = _CRITERIA.search(body)
        if story is None or criteria_block is None:
            continue
        criteria = [
            match.group(1).strip()
            for line in criteria_block.group(1).splitlines()
            if (match := _NUMBERED_LINE.match(line))
        ]
        if criteria:
            requirements.append(
                Requirement(
                    number=int(number),
                    user_story=story.group(1).strip(),
                    acceptance_criteria=criteria,
                )
            )
    return requirements or None


# ========== Design ==========


def _split_subsections(section: str) -> list[tuple[str, list[str]]]:
    blocks = []
    for block in _SUBSECTION_SPLIT.split(section)[1:]:
        lines = block.strip().splitlines()
        if lines and lines[0].strip():
            blocks.append((lines[0].strip(), lines[1:]))
    return blocks


def _prose(lines: list[str]) -> str:
    """Join the plain text lines of a block, skipping bullets, labels and code fences."""
    kept = []
    in_fence = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence or not stripped or _BULLET.match(line) or stripped.startswith(("**", "#")):
            continue
        kept.append(stripped)
    return " ".join(kept)


def parse_components(text: str) -> list[Component] | None:
    section = extract_section(text, "Components")
    if section is None:
        return None

    components = []
    for name, lines in _split_subsections(section):
        responsibilities = [m.group(1).strip() for line in lines if (m := _BULLET.match(line))]
        components.append(
            Component(
                name=name,
                description=_prose(lines) or f"Component for {name}",
                responsibilities=responsibilities,
            )
        )
    return components or None


def parse_data_models(text: str) -> list[DataModel] | None:
    section = extract_section(text, "Data Models")
    if section is None:
        return None

    models = []
    for name, lines in _split_subsections(section):
        fields = {
            m.group(1): m.group(2).strip() for line in lines if (m := _FIELD_BULLET.match(line))
        }
        models.append(
            DataModel(
                name=name,
                description=_prose(lines) or f"Data model for {name}",
                fields=fields,
            )
        )
    return models or None


# ========== Tasks ==========


def parse_tasks(text: str) -> list[Task] | None:
    """Parse a markdown checklist into tasks.

    Recognizes ``- [ ] 2.1 Description`` task lines, indented ``- detail``
    lines and ``_Requirements: 1.1, 2.3_`` references.
    """
    tasks: list[Task] = []
    current: Task | None = None

    for line in text.splitlines():
        task_match = _TASK_LINE.match(line)
        if task_match:
            current = Task(
                id=f"task-{len(tasks) + 1}",
                number=task_match.group(1),
                description=task_match.group(2).strip(),
            )
            tasks.append(current)
            continue

        if current is None:
            continue
        detail_match = _DETAIL_LINE.match(line)
        if detail_match is None:
            continue
        detail = detail_match.group(1).strip()
        refs = _REQUIREMENT_REFS.search(detail)
        if refs:
            current.requirements = [ref.strip() for ref in refs.group(1).split(",") if ref.strip()]
        else:
            current.details.append(detail)

    return tasks or None
