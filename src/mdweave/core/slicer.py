"""Slicing engine for extracting heading sections of a resource."""

from .model import Range, Resource, Section


def section_ranges(headings: list[tuple[int, str, int]], length: int) -> list[Section]:
    """
    Build sections from ``(level, title, start)`` heading tuples.

    Each section runs from its heading to the next heading of same/higher
    level (or EOF).
    """
    sections = []
    for i, (level, title, start) in enumerate(headings):
        end = length
        for next_level, _title, next_start in headings[i + 1 :]:
            if next_level <= level:
                end = next_start
                break
        sections.append(Section(level=level, title=title, range=Range(start, end)))
    return sections


def find_section(resource: Resource, title: str) -> Section | None:
    """Find the first section whose title matches exactly (case-sensitive)."""
    wanted = title.strip()
    for section in resource.sections:
        if section.title == wanted:
            return section
    return None


def extract_section(
    resource: Resource, title: str, text: str | None = None
) -> str | None:
    """
    Get the text of a heading section, heading line included.

    ``text`` overrides ``resource.text`` when the body was loaded elsewhere.
    Returns None if the resource has no such heading.
    """
    section = find_section(resource, title)
    if section is None:
        return None
    body = resource.text if text is None else text
    return (body or "")[section.range.start : section.range.end]
