"""Author-facing helpers built on a default document session.

This is the only module that keeps a process-wide session and the only one
that reads live source code.  Usage::

    from texdocument import new_document, tex

    doc = new_document("losses", title="Loss Functions")

    @tex(r"The \\emph{hinge loss} penalises margins below one.")
    def hinge_loss(y, score):
        return max(0.0, 1.0 - y * score)

    doc.generate()
"""

from __future__ import annotations

import ast
import inspect
import linecache
import sys
from pathlib import Path
from typing import Any, Callable, TypeVar

from .document import DocumentSession, TeXDocument
from .exceptions import AnnotationError
from .extractor import annotate
from .models import CompilationResult, CompilerConfig, FigureEntry, TextEntry

T = TypeVar("T")

_session = DocumentSession()


def default_session() -> DocumentSession:
    return _session


def new_document(jobname: str = "document", **kwargs: Any) -> TeXDocument:
    """Create a document and make it the current one."""
    return _session.create(jobname, **kwargs)


def current_document() -> TeXDocument:
    """Return the current document; raises NoCurrentDocumentError if there is none."""
    return _session.current


# ---------------------------------------------------------------------------
# Source capture
# ---------------------------------------------------------------------------


def definition_source(obj: Any) -> str:
    """Return the source lines of a function or class, decorators included."""
    target = inspect.unwrap(obj)
    try:
        lines, _ = inspect.getsourcelines(target)
    except (OSError, TypeError) as exc:
        raise AnnotationError(f"No source available for {obj!r}") from exc
    return "".join(lines)


def _first_line(node: ast.stmt) -> int:
    decorators = getattr(node, "decorator_list", [])
    return min([node.lineno] + [d.lineno for d in decorators])


def block_source(filename: str, lineno: int) -> str:
    """Return the literal body of the ``with`` statement whose header covers *lineno*."""
    lines = linecache.getlines(filename)
    if not lines:
        raise AnnotationError(f"No source available for {filename}")

    tree = ast.parse("".join(lines), filename=filename)
    candidates = [
        node for node in ast.walk(tree)
        if isinstance(node, (ast.With, ast.AsyncWith))
        and node.lineno <= lineno < _first_line(node.body[0])
    ]
    if not candidates:
        raise AnnotationError(f"No with-block found at {filename}:{lineno}")

    node = max(candidates, key=lambda n: n.lineno)
    end = node.body[-1].end_lineno or node.body[-1].lineno
    return "".join(lines[_first_line(node.body[0]) - 1:end]).rstrip("\n")


# ---------------------------------------------------------------------------
# Annotation constructs
# ---------------------------------------------------------------------------


def tex(description: str, *, document: TeXDocument | None = None) -> Callable[[T], T]:
    """Decorator attaching *description* to the decorated function or class.

    The entry is appended when the definition is evaluated; the decorated
    object is returned unchanged.
    """

    def decorator(obj: T) -> T:
        target = _session.resolve(document)
        annotate(target, description, definition_source(obj))
        return obj

    return decorator


def tex_text(text: str, *, section: str | None = None, document: TeXDocument | None = None) -> TextEntry:
    """Append pre-escaped text to the current (or given) document."""
    return _session.resolve(document).add_text(text, section=section)


def tex_figure(plot: Any, *, document: TeXDocument | None = None, **placement: Any) -> FigureEntry:
    """Append *plot* as a figure entry of the current (or given) document."""
    return _session.resolve(document).add_figure(plot, **placement)


class TeXBlock:
    """Context manager appending a description plus the literal text of its body.

    The entry is appended on entry, before the body runs, so entries created
    inside the body follow it.
    """

    def __init__(self, description: str, *, section: str | None = None, document: TeXDocument | None = None):
        self.description = description
        self.section = section
        self.document = _session.resolve(document)
        self.entry: TextEntry | None = None

    def __enter__(self) -> TeXDocument:
        frame = sys._getframe(1)
        source = block_source(frame.f_code.co_filename, frame.f_lineno)
        self.entry = self.document.add_text(self.description, section=self.section, source=source)
        return self.document

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        return False


def tex_block(description: str, *, section: str | None = None, document: TeXDocument | None = None) -> TeXBlock:
    return TeXBlock(description, section=section, document=document)


def generate(
    document: TeXDocument | None = None,
    output_dir: str | Path = ".",
    config: CompilerConfig | None = None,
) -> CompilationResult:
    """Compile the current (or given) document."""
    return _session.resolve(document).generate(output_dir, config)
