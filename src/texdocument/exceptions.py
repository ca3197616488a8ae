"""Exception hierarchy for texdocument.

Catching ``TeXDocumentError`` catches every error raised by the package.
Duplicate package declarations are not an error: they are deduplicated.
"""

from __future__ import annotations


class TeXDocumentError(Exception):
    """Base exception for all texdocument errors."""


class NoCurrentDocumentError(TeXDocumentError):
    """Raised when an annotation has no explicit document and none is current."""

    def __init__(self, message: str = "No current document; create one with new_document() first"):
        super().__init__(message)


class AnnotationError(TeXDocumentError):
    """Raised when an annotated object has no recoverable definition source."""


class MissingToolchainError(TeXDocumentError):
    """Raised when a required external binary is not on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} not found on PATH")


class CompilationError(TeXDocumentError):
    """Raised when the LaTeX engine or the preprocessor exits non-zero.

    The generated ``.tex`` file is left on disk for inspection.
    """

    def __init__(self, exit_code: int, stderr_tail: str, command: list[str] | None = None):
        self.exit_code = exit_code
        self.stderr_tail = stderr_tail
        self.command = command or []
        tool = self.command[0] if self.command else "compiler"
        message = f"{tool} exited with status {exit_code}"
        if stderr_tail:
            message += f"\n{stderr_tail}"
        super().__init__(message)
