"""Decide where sections start; numbering is left to LaTeX counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .models import CodeEntry, Entry, TextEntry


@dataclass(frozen=True)
class SectionStep:
    """One entry in render order, with the section it opens (if any)."""

    entry: Entry
    opens_section: str | None = None


def plan_sections(entries: Sequence[Entry], auto_sections: bool) -> list[SectionStep]:
    """Pair every entry, in stored order, with the section it opens.

    With *auto_sections*, a code entry whose title differs from the previous
    section title opens a new section.  Text and figure entries never open a
    section on their own; a text entry with an explicit ``section`` always
    does, and its title then counts as the previous one.
    """
    steps: list[SectionStep] = []
    previous: str | None = None

    for entry in entries:
        opens: str | None = None
        if isinstance(entry, TextEntry) and entry.section:
            opens = entry.section
        elif auto_sections and isinstance(entry, CodeEntry) and entry.title != previous:
            opens = entry.title

        if opens is not None:
            previous = opens
        steps.append(SectionStep(entry=entry, opens_section=opens))

    return steps


def section_titles(entries: Sequence[Entry], auto_sections: bool) -> list[str]:
    """Titles of the sections :func:`plan_sections` opens, in order."""
    return [s.opens_section for s in plan_sections(entries, auto_sections) if s.opens_section]
