"""The document model and the session that tracks the current document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import NoCurrentDocumentError
from .extractor import annotate, make_text_entry
from .figures import make_figure_entry
from .models import (
    CodeEntry,
    CompilationResult,
    CompilerConfig,
    DocumentMode,
    Entry,
    FigureEntry,
    TextEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_PACKAGES = ("amsmath", "amssymb", "hyperref")


def _dedupe(names: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class TeXDocument(BaseModel):
    """An ordered collection of text, code and figure entries plus metadata.

    Attribute assignment is validated, so ``doc.mode = "tufte"`` works.
    Entries are kept in the order they were appended; that order is the
    render order.
    """

    model_config = ConfigDict(validate_assignment=True)

    jobname: str = Field(default="document", description="Output file stem")
    title: str = Field(default="")
    author: str = Field(default="")
    address: str = Field(default="")
    email: str = Field(default="")
    date: str = Field(default="")
    packages: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGES))
    mode: DocumentMode = Field(default=DocumentMode.STANDARD)
    auto_sections: bool = Field(default=True, description="Each code entry opens a section")
    toc: bool = Field(default=False, description="Emit a table of contents")
    entries: list[Entry] = Field(default_factory=list)

    def __init__(self, jobname: str = "document", *, tufte: bool | None = None, **data: Any) -> None:
        if tufte is not None:
            data.setdefault("mode", DocumentMode.TUFTE if tufte else DocumentMode.STANDARD)
        super().__init__(jobname=jobname, **data)

    @field_validator("packages")
    @classmethod
    def _unique_packages(cls, value: list[str]) -> list[str]:
        return _dedupe(value)

    @property
    def tufte(self) -> bool:
        return self.mode is DocumentMode.TUFTE

    @tufte.setter
    def tufte(self, value: bool) -> None:
        self.mode = DocumentMode.TUFTE if value else DocumentMode.STANDARD

    @property
    def figures(self) -> list[FigureEntry]:
        return [e for e in self.entries if isinstance(e, FigureEntry)]

    # -- mutation ----------------------------------------------------------

    def append(self, entry: Entry) -> Entry:
        self.entries.append(entry)
        logger.debug("%s: appended %s entry #%d", self.jobname, entry.kind, len(self.entries))
        return entry

    def add_package(self, name: str) -> None:
        """Declare a package; declaring it again is a no-op."""
        if name not in self.packages:
            self.packages.append(name)

    def add_text(self, text: str, *, section: str | None = None, source: str | None = None) -> TextEntry:
        entry = make_text_entry(text, section=section, source=source)
        self.append(entry)
        return entry

    def add_code(self, description: str, source: str, name: str | None = None) -> CodeEntry:
        return annotate(self, description, source, name)

    def add_figure(self, plot: Any, **placement: Any) -> FigureEntry:
        entry = make_figure_entry(plot, **placement)
        self.append(entry)
        return entry

    # -- output ------------------------------------------------------------

    def render(self) -> str:
        from .assembler import render

        return render(self)

    def generate(self, output_dir: str | Path = ".", config: CompilerConfig | None = None) -> CompilationResult:
        from .compiler import generate

        return generate(self, output_dir, config)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class DocumentSession:
    """Tracks the document that annotations without an explicit target use.

    ``create`` always makes the new document current, replacing any previous
    one.  A session is not thread-safe; use one session per build.
    """

    def __init__(self) -> None:
        self._current: TeXDocument | None = None

    @property
    def current(self) -> TeXDocument:
        if self._current is None:
            raise NoCurrentDocumentError()
        return self._current

    @property
    def has_current(self) -> bool:
        return self._current is not None

    def create(self, jobname: str = "document", **kwargs: Any) -> TeXDocument:
        document = TeXDocument(jobname, **kwargs)
        self._current = document
        logger.debug("Current document is now %s", jobname)
        return document

    def activate(self, document: TeXDocument) -> TeXDocument:
        self._current = document
        return document

    def get_or_create(self, jobname: str = "document", **kwargs: Any) -> TeXDocument:
        if self._current is None:
            return self.create(jobname, **kwargs)
        return self._current

    def resolve(self, document: TeXDocument | None = None) -> TeXDocument:
        """Return *document* when given, else the current document."""
        if document is not None:
            return document
        return self.current

    def reset(self) -> None:
        self._current = None
