"""Pydantic models for the document engine."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class FigureType(str, Enum):
    MARGIN = "marginfigure"
    FLOAT = "figure"
    WIDE = "figure*"
    INLINE = "inline"


class CaptionPosition(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class DocumentMode(str, Enum):
    """Document style, selected once when the document is created."""
    STANDARD = "standard"
    TUFTE = "tufte"

    @property
    def policy(self) -> ModePolicy:
        return MODE_POLICIES[self]


# ---------------------------------------------------------------------------
# Mode policies
# ---------------------------------------------------------------------------

class ModePolicy(BaseModel, frozen=True):
    """Everything that differs between the standard and tufte styles."""
    document_class: str = Field(..., description="LaTeX document class")
    class_options: str = Field(default="", description="Options for \\documentclass")
    engine: str = Field(..., description="Default LaTeX engine binary")
    preprocessor: str | None = Field(default=None, description="Tool run between the two engine passes")
    packages: tuple[str, ...] = Field(default=(), description="Packages implied by the mode")
    preamble: str = Field(default="", description="Extra preamble lines after the packages")
    listing_begin: str = Field(..., description="Opening line of the code-listing environment")
    listing_end: str = Field(..., description="Closing line of the code-listing environment")
    default_figtype: FigureType = Field(default=FigureType.FLOAT)
    always_two_passes: bool = Field(default=False, description="Run the second engine pass unconditionally")


MODE_POLICIES: dict[DocumentMode, ModePolicy] = {
    DocumentMode.STANDARD: ModePolicy(
        document_class="article",
        class_options="11pt",
        engine="pdflatex",
        packages=("listings", "xcolor", "graphicx"),
        preamble=(
            "\\lstset{language=Python, basicstyle=\\ttfamily\\small, "
            "columns=fullflexible, keepspaces=true, frame=single}"
        ),
        listing_begin="\\begin{lstlisting}",
        listing_end="\\end{lstlisting}",
        default_figtype=FigureType.FLOAT,
    ),
    DocumentMode.TUFTE: ModePolicy(
        document_class="tufte-handout",
        engine="lualatex",
        preprocessor="pythontex",
        packages=("pythontex", "fancyvrb", "graphicx"),
        listing_begin="\\begin{pygments}{python}",
        listing_end="\\end{pygments}",
        default_figtype=FigureType.MARGIN,
        always_two_passes=True,
    ),
}


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

class TextEntry(BaseModel):
    """Pre-escaped prose, optionally followed by the literal text of a block."""
    kind: Literal["text"] = "text"
    text: str = Field(..., description="Pre-escaped LaTeX markup")
    section: str | None = Field(default=None, description="Section title opened before the text")
    source: str | None = Field(default=None, description="Literal text of an attached block")


class CodeEntry(BaseModel):
    """A description attached to one callable definition."""
    kind: Literal["code"] = "code"
    description: str = Field(..., description="Pre-escaped LaTeX markup")
    source: str = Field(..., description="Verbatim definition text")
    title: str = Field(..., description="Title derived from the declared name")
    name: str = Field(..., description="Declared name of the callable")


class FigureEntry(BaseModel):
    """A plot produced by the plotting collaborator, with placement metadata."""
    kind: Literal["figure"] = "figure"
    plot: Any = Field(..., description="Object implementing PlotRenderable")
    position: str | None = Field(default=None, description="Optional argument of the figure environment")
    figtype: FigureType | None = Field(default=None, description="Environment; None uses the mode's default at render time")
    caption: str = Field(default="")
    caption_pos: CaptionPosition = Field(default=CaptionPosition.AFTER)
    label: str | None = Field(default=None, description="Explicit label; defaults to fig:<n>")


Entry = Annotated[Union[TextEntry, CodeEntry, FigureEntry], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------

class CompilationWarning(BaseModel):
    """A single warning or error from the LaTeX log."""
    line: int | None = Field(default=None, description="Line number")
    message: str = Field(..., description="Warning/error message")
    severity: Severity = Field(default=Severity.WARNING)


class CompilationResult(BaseModel):
    """Result of a successful run of the compile protocol."""
    success: bool = Field(..., description="Whether every pass exited with status 0")
    tex_path: str = Field(..., description="Path to the written .tex file")
    pdf_path: str | None = Field(default=None, description="Expected path of the PDF")
    passes: list[list[str]] = Field(default_factory=list, description="Commands run, in order")
    errors: list[CompilationWarning] = Field(default_factory=list)
    warnings: list[CompilationWarning] = Field(default_factory=list)
    unresolved_refs: list[str] = Field(default_factory=list, description="Unresolved references")


# ---------------------------------------------------------------------------
# Configuration (loaded from YAML or the CLI)
# ---------------------------------------------------------------------------

class CompilerConfig(BaseModel):
    """Overrides for the external tools; ``None`` keeps the mode's default."""
    standard_engine: str | None = Field(default=None, description="Engine for standard documents")
    tufte_engine: str | None = Field(default=None, description="Engine for tufte documents")
    preprocessor: str | None = Field(default=None, description="Preprocessor for tufte documents")
    extra_args: list[str] = Field(default_factory=list, description="Extra engine arguments")

    def engine_for(self, mode: DocumentMode) -> str:
        override = self.tufte_engine if mode is DocumentMode.TUFTE else self.standard_engine
        return override or mode.policy.engine

    def preprocessor_for(self, mode: DocumentMode) -> str | None:
        default = mode.policy.preprocessor
        if default is None:
            return None
        return self.preprocessor or default


class DocumentDefaults(BaseModel):
    """Initial settings applied to documents created by the CLI."""
    tufte: bool = Field(default=False)
    auto_sections: bool = Field(default=True)
    toc: bool = Field(default=False)
    packages: list[str] = Field(default_factory=list)


class ProjectConfig(BaseModel):
    """Full configuration loaded from config.yaml."""
    output_dir: str = Field(default=".", description="Where .tex and .pdf files are written")
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    document: DocumentDefaults = Field(default_factory=DocumentDefaults)
