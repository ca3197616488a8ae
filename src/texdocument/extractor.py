"""Build entries from descriptions and definition source text.

This module never looks at live objects: it receives the definition's
source as an ordinary string (sliced by the authoring layer or read from a
file) and returns the verbatim text of the definition plus a title derived
from its declared name.
"""

from __future__ import annotations

import ast
import logging
import re
from typing import TYPE_CHECKING

from .exceptions import AnnotationError
from .models import CodeEntry, TextEntry

if TYPE_CHECKING:
    from .document import TeXDocument

logger = logging.getLogger(__name__)

_DEFINITION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)

# Camel-case boundaries: "zeroOne" -> "zero|One", "HTTPServer" -> "HTTP|Server"
_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Declared name as spelled in the source, before identifier normalisation
_RAW_NAME_RE = re.compile(r"^\s*(?:async\s+)?(?:def|class)\s+([^\s(:\[]+)")


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


def split_words(name: str) -> list[str]:
    """Split an identifier on underscores and camel-case boundaries."""
    words: list[str] = []
    for chunk in name.split("_"):
        words.extend(w for w in _BOUNDARY_RE.split(chunk) if w)
    return words


def derive_title(name: str) -> str:
    """Return a human-readable title for a declared name.

    ``loss_function`` becomes ``Loss Function`` and ``zeroOneLoss`` becomes
    ``Zero One Loss``.  Only the first character of each word is
    upper-cased, so acronyms survive (``HTTPServer`` becomes ``HTTP
    Server``).  An all-caps snake-case name is read as ordinary words:
    ``HINGE_LOSS`` becomes ``Hinge Loss``.  A name without boundaries is a
    single word.
    """
    words = split_words(name)
    if not words:
        return name
    if len(words) > 1 and "_" in name and name.isupper():
        words = [w.lower() for w in words]
    return " ".join(w[:1].upper() + w[1:] for w in words)


# ---------------------------------------------------------------------------
# Definition slicing
# ---------------------------------------------------------------------------


def _split_lines(source: str) -> list[str]:
    """Split on line terminators only; form feeds and U+2028 stay inside their line."""
    return source.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _strip_common_indent(lines: list[str]) -> list[str]:
    """Remove the first non-blank line's indentation from every line that has it.

    Unlike ``textwrap.dedent`` this leaves whitespace-only lines untouched.
    """
    indent = ""
    for line in lines:
        if line.strip():
            indent = line[: len(line) - len(line.lstrip())]
            break
    if not indent:
        return lines
    return [line[len(indent):] if line.startswith(indent) else line for line in lines]


def slice_definition(source: str) -> tuple[str, str]:
    """Return ``(name, text)`` for the single definition held in *source*.

    *source* may start with decorator lines and may be indented (a method
    or a nested function); decorators are dropped and the common indentation
    removed.  Everything between the ``def``/``class`` line and the last
    line of the body is returned exactly as written.
    """
    lines = _strip_common_indent(_split_lines(source))
    text = "\n".join(lines)
    try:
        tree = ast.parse(text)
    except SyntaxError as exc:
        raise AnnotationError(f"Cannot parse definition source: {exc.msg} (line {exc.lineno})") from exc

    definitions = [node for node in tree.body if isinstance(node, _DEFINITION_NODES)]
    if len(definitions) != 1:
        raise AnnotationError(
            f"Expected exactly one function or class definition, found {len(definitions)}"
        )

    node = definitions[0]
    assert node.end_lineno is not None
    body_lines = lines[node.lineno - 1:node.end_lineno]

    m = _RAW_NAME_RE.match(body_lines[0])
    name = m.group(1) if m else node.name
    return name, "\n".join(body_lines)


# ---------------------------------------------------------------------------
# Entry construction
# ---------------------------------------------------------------------------


def make_code_entry(description: str, source: str, name: str | None = None) -> CodeEntry:
    """Build a CodeEntry; *description* is stored as given, never escaped."""
    declared, text = slice_definition(source)
    name = name or declared
    return CodeEntry(description=description, source=text, title=derive_title(name), name=name)


def make_text_entry(text: str, *, section: str | None = None, source: str | None = None) -> TextEntry:
    """Build a TextEntry, keeping the literal block text when one is given."""
    if source is not None:
        source = "\n".join(_strip_common_indent(_split_lines(source))).rstrip("\n")
    return TextEntry(text=text, section=section, source=source)


def annotate(document: TeXDocument, description: str, source: str, name: str | None = None) -> CodeEntry:
    """Attach *description* to the definition in *source* and append it to *document*."""
    entry = make_code_entry(description, source, name)
    document.append(entry)
    logger.debug("Annotated %s (%s) in %s", entry.name, entry.title, document.jobname)
    return entry
