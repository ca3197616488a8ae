"""Interleave prose, code listings and plots into a compiled LaTeX document."""

from .authoring import (
    current_document,
    default_session,
    generate,
    new_document,
    tex,
    tex_block,
    tex_figure,
    tex_text,
)
from .document import DocumentSession, TeXDocument
from .exceptions import (
    AnnotationError,
    CompilationError,
    MissingToolchainError,
    NoCurrentDocumentError,
    TeXDocumentError,
)
from .figures import Axis, MatplotlibFigure, Plot, PlotRenderable, add_plot
from .models import (
    CaptionPosition,
    CodeEntry,
    DocumentMode,
    FigureEntry,
    FigureType,
    TextEntry,
)

__all__ = [
    "AnnotationError",
    "Axis",
    "CaptionPosition",
    "CodeEntry",
    "CompilationError",
    "DocumentMode",
    "DocumentSession",
    "FigureEntry",
    "FigureType",
    "MatplotlibFigure",
    "MissingToolchainError",
    "NoCurrentDocumentError",
    "Plot",
    "PlotRenderable",
    "TeXDocument",
    "TeXDocumentError",
    "TextEntry",
    "add_plot",
    "current_document",
    "default_session",
    "generate",
    "new_document",
    "tex",
    "tex_block",
    "tex_figure",
    "tex_text",
]
