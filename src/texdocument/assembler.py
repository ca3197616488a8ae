"""LaTeX source assembly: preamble, metadata, and the ordered entry body.

Rendering is deterministic and performs no I/O.  Description text, section
titles, captions and metadata are emitted exactly as given: the author is
responsible for escaping LaTeX control characters.  Code is placed in the
mode's listing environment unmodified.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .models import CaptionPosition, CodeEntry, DocumentMode, FigureEntry, FigureType, TextEntry
from .sectioning import plan_sections

if TYPE_CHECKING:
    from .document import TeXDocument

# Commands whose output depends on the .aux file of a previous run
_XREF_RE = re.compile(
    r"\\(?:label|ref|eqref|pageref|autoref|cref|Cref|nameref|cite\w*|footnote|tableofcontents)\b"
)


# ---------------------------------------------------------------------------
# Preamble
# ---------------------------------------------------------------------------


def collect_packages(document: TeXDocument) -> list[str]:
    """Return the packages to load, first occurrence wins.

    Order: the document's own packages, ``hyperref`` when an email is set
    (the address is a ``\\href`` link), the mode's packages, then the
    packages required by each figure's plot in entry order.
    """
    names: list[str] = list(document.packages)
    if document.email:
        names.append("hyperref")
    names.extend(document.mode.policy.packages)
    for entry in document.entries:
        if isinstance(entry, FigureEntry):
            names.extend(getattr(entry.plot, "packages", ()))
            if resolve_figtype(entry, document.mode) is FigureType.INLINE and entry.caption:
                names.append("caption")

    seen: set[str] = set()
    unique: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            unique.append(name)
    return unique


def generate_preamble(document: TeXDocument) -> str:
    """Document class, packages and title metadata; ends before ``\\begin{document}``."""
    policy = document.mode.policy
    opts = f"[{policy.class_options}]" if policy.class_options else ""
    parts: list[str] = [f"\\documentclass{opts}{{{policy.document_class}}}"]

    packages = collect_packages(document)
    for name in packages:
        parts.append(f"\\usepackage{{{name}}}")
    if "pgfplots" in packages:
        parts.append("\\pgfplotsset{compat=newest}")
    if policy.preamble:
        parts.append(policy.preamble)

    parts.append("")
    parts.extend(_metadata_lines(document))
    return "\n".join(parts).rstrip("\n")


def _metadata_lines(document: TeXDocument) -> list[str]:
    lines: list[str] = []
    if document.title:
        lines.append(f"\\title{{{document.title}}}")

    author_parts = [p for p in (document.author, document.address) if p]
    if document.email:
        author_parts.append(f"\\href{{mailto:{document.email}}}{{\\texttt{{{document.email}}}}}")
    if author_parts:
        joined = " \\\\ ".join(author_parts)
        lines.append(f"\\author{{{joined}}}")

    if document.date:
        lines.append(f"\\date{{{document.date}}}")
    return lines


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def _listing(document: TeXDocument, source: str) -> list[str]:
    policy = document.mode.policy
    return [policy.listing_begin, source, policy.listing_end]


def resolve_figtype(entry: FigureEntry, mode: DocumentMode) -> FigureType:
    """The entry's figure type, or the mode's default when none was given.

    Raises ``ValueError`` for a margin figure outside tufte mode.
    """
    kind = entry.figtype or mode.policy.default_figtype
    if kind is FigureType.MARGIN and mode is not DocumentMode.TUFTE:
        raise ValueError("marginfigure is only available in tufte mode")
    return kind


def _render_figure(entry: FigureEntry, kind: FigureType, number: int) -> list[str]:
    label = f"\\label{{{entry.label or f'fig:{number}'}}}"
    body = entry.plot.to_tex()

    if kind is FigureType.INLINE:
        caption = [f"\\captionof{{figure}}{{{entry.caption}}}", label] if entry.caption else [label]
        begin, end = "\\begin{center}", "\\end{center}"
    else:
        caption = [f"\\caption{{{entry.caption}}}", label] if entry.caption else [label]
        env = kind.value
        if entry.position:
            opt = f"[{entry.position}]"
        elif kind is FigureType.MARGIN:
            opt = ""
        else:
            opt = "[htbp]"
        begin, end = f"\\begin{{{env}}}{opt}", f"\\end{{{env}}}"

    lines = [begin]
    if kind in (FigureType.FLOAT, FigureType.WIDE):
        lines.append("\\centering")
    if entry.caption and entry.caption_pos is CaptionPosition.BEFORE:
        lines.extend(caption)
        lines.append(body)
    else:
        lines.append(body)
        lines.extend(caption)
    lines.append(end)
    return lines


def render_body(document: TeXDocument) -> str:
    """Render the entries in stored order, with section headings where planned."""
    parts: list[str] = []
    figure_number = 0

    for step in plan_sections(document.entries, document.auto_sections):
        entry = step.entry
        if step.opens_section:
            parts.append(f"\\section{{{step.opens_section}}}")
            if isinstance(entry, CodeEntry):
                parts.append(f"\\label{{sec:{entry.name}}}")

        if isinstance(entry, CodeEntry):
            if entry.description:
                parts.append(entry.description)
            parts.extend(_listing(document, entry.source))
        elif isinstance(entry, TextEntry):
            parts.append(entry.text)
            if entry.source is not None:
                parts.extend(_listing(document, entry.source))
        else:
            figure_number += 1
            parts.extend(_render_figure(entry, resolve_figtype(entry, document.mode), figure_number))
        parts.append("")

    return "\n".join(parts).rstrip("\n")


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def render(document: TeXDocument) -> str:
    """Assemble the complete LaTeX source for *document*."""
    parts: list[str] = [generate_preamble(document), "", "\\begin{document}"]

    if document.title:
        parts.append("\\maketitle")
    if document.toc:
        parts.append("\\tableofcontents")
    parts.append("")

    body = render_body(document)
    if body:
        parts.append(body)
        parts.append("")

    parts.append("\\end{document}")
    return "\n".join(parts) + "\n"


def needs_second_pass(document: TeXDocument, markup: str | None = None) -> bool:
    """Whether the markup carries cross-references that resolve on a second run."""
    if document.toc or document.figures:
        return True
    if markup is None:
        markup = render(document)
    return _XREF_RE.search(markup) is not None
