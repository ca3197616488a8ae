"""LaTeX compilation with a fixed pass protocol and log parsing.

Standard documents run the engine (``pdflatex`` by default) once, or twice
when the markup carries cross-references.  Tufte documents always run
``lualatex``, then the ``pythontex`` preprocessor, then ``lualatex`` again.

A non-zero exit on any pass raises :class:`CompilationError` with the tail
of the tool's output; nothing is retried and the ``.tex`` file stays on disk.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from .assembler import needs_second_pass, render
from .exceptions import CompilationError, MissingToolchainError
from .models import CompilationResult, CompilationWarning, CompilerConfig, DocumentMode, Severity

if TYPE_CHECKING:
    from .document import TeXDocument

logger = logging.getLogger(__name__)

_OUTPUT_TAIL = 2000

# ---------------------------------------------------------------------------
# Tool availability
# ---------------------------------------------------------------------------


def _find_tool(name: str) -> str | None:
    """Find an executable, checking both Unix and Windows (.exe) names."""
    path = shutil.which(name)
    if path:
        return path
    # WSL interop: Windows .exe may be on PATH but shutil.which misses it
    return shutil.which(f"{name}.exe")


def resolve_toolchain(mode: DocumentMode, config: CompilerConfig | None = None) -> tuple[str, str | None]:
    """Return ``(engine, preprocessor)`` paths for *mode*.

    Raises :class:`MissingToolchainError` when a required binary is missing.
    """
    config = config or CompilerConfig()
    engine = config.engine_for(mode)
    engine_cmd = _find_tool(engine)
    if not engine_cmd:
        raise MissingToolchainError(engine)

    preprocessor = config.preprocessor_for(mode)
    preprocessor_cmd = None
    if preprocessor:
        preprocessor_cmd = _find_tool(preprocessor)
        if not preprocessor_cmd:
            raise MissingToolchainError(preprocessor)
    return engine_cmd, preprocessor_cmd


# ---------------------------------------------------------------------------
# Log parsing
# ---------------------------------------------------------------------------

_ERROR_RE = re.compile(r"^!\s*(.*)", re.MULTILINE)
_LINE_RE = re.compile(r"^l\.(\d+)\s*(.*)", re.MULTILINE)
_WARNING_RE = re.compile(
    r"(?:LaTeX|Package|Class)\s+(?:\w+\s+)?Warning[:\s]*(.*?)(?:\n(?!\s)|$)",
    re.MULTILINE | re.DOTALL,
)
_UNDEF_REF_RE = re.compile(r"LaTeX Warning: Reference `([^']+)' on page", re.MULTILINE)
_UNDEF_CIT_RE = re.compile(r"LaTeX Warning: Citation `([^']+)' on page", re.MULTILINE)


def parse_log(log_path: str | Path) -> tuple[list[CompilationWarning], list[CompilationWarning], list[str]]:
    """Parse a LaTeX .log file for errors, warnings, and unresolved refs.

    Returns (errors, warnings, unresolved_refs).
    """
    log = Path(log_path)
    if not log.exists():
        return [], [], []

    log_text = log.read_text(encoding="utf-8", errors="replace")
    errors: list[CompilationWarning] = []
    warnings: list[CompilationWarning] = []
    unresolved: set[str] = set()

    # LaTeX errors look like:
    #   ! Error message
    #   l.42 some code
    for em in _ERROR_RE.finditer(log_text):
        line_match = _LINE_RE.search(log_text[em.end():em.end() + 500])
        errors.append(CompilationWarning(
            line=int(line_match.group(1)) if line_match else None,
            message=em.group(1).strip(),
            severity=Severity.ERROR,
        ))

    for wm in _WARNING_RE.finditer(log_text):
        msg = wm.group(1).strip().replace("\n", " ")
        if msg:
            warnings.append(CompilationWarning(message=msg, severity=Severity.WARNING))

    for m in _UNDEF_REF_RE.finditer(log_text):
        unresolved.add(f"ref:{m.group(1)}")
    for m in _UNDEF_CIT_RE.finditer(log_text):
        unresolved.add(f"cite:{m.group(1)}")

    return errors, warnings, sorted(unresolved)


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


def plan_passes(
    engine_cmd: str,
    preprocessor_cmd: str | None,
    jobname: str,
    *,
    two_passes: bool,
    extra_args: list[str] | None = None,
) -> list[list[str]]:
    """Return the commands to run, in order.

    A preprocessor always sits between two engine passes.
    """
    engine_args = [
        engine_cmd,
        "-interaction=nonstopmode",
        f"-jobname={jobname}",
        *(extra_args or []),
        f"{jobname}.tex",
    ]
    passes = [engine_args]
    if preprocessor_cmd:
        passes.append([preprocessor_cmd, jobname])
    if two_passes or preprocessor_cmd:
        passes.append(engine_args)
    return passes


def _output_tail(proc: subprocess.CompletedProcess) -> str:
    # TeX engines report errors on stdout; keep both streams
    combined = (proc.stdout or "") + (proc.stderr or "")
    return combined[-_OUTPUT_TAIL:]


def run_passes(passes: list[list[str]], cwd: str | Path) -> None:
    """Run every pass in *cwd*; stop at the first non-zero exit."""
    for pass_num, cmd in enumerate(passes, 1):
        logger.info("Compile pass %d/%d: %s (in %s)", pass_num, len(passes), " ".join(cmd), cwd)
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            errors="replace",
        )
        if proc.returncode != 0:
            tail = _output_tail(proc)
            logger.info("%s output (last %d chars):\n%s", cmd[0], _OUTPUT_TAIL, tail)
            raise CompilationError(proc.returncode, tail, cmd)


def _build_result(out: Path, jobname: str, passes: list[list[str]]) -> CompilationResult:
    errors, warnings, unresolved = parse_log(out / f"{jobname}.log")
    if unresolved:
        logger.warning("Unresolved references after %d passes: %s", len(passes), ", ".join(unresolved))
    return CompilationResult(
        success=True,
        tex_path=str(out / f"{jobname}.tex"),
        pdf_path=str(out / f"{jobname}.pdf"),
        passes=passes,
        errors=errors,
        warnings=warnings,
        unresolved_refs=unresolved,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def write_tex(content: str, output_dir: str | Path, jobname: str) -> Path:
    """Write ``<jobname>.tex`` to the output directory, replacing any previous file."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    tex_path = out / f"{jobname}.tex"
    tex_path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", tex_path)
    return tex_path


def generate(
    document: TeXDocument,
    output_dir: str | Path = ".",
    config: CompilerConfig | None = None,
) -> CompilationResult:
    """Render *document*, write ``<jobname>.tex`` and compile it to PDF.

    Parameters
    ----------
    document : TeXDocument
        The document to build.
    output_dir : str | Path
        Directory for the ``.tex`` file and every compiler artifact.
    config : CompilerConfig | None
        Engine and preprocessor overrides.
    """
    config = config or CompilerConfig()
    engine_cmd, preprocessor_cmd = resolve_toolchain(document.mode, config)

    markup = render(document)
    out = Path(output_dir)
    write_tex(markup, out, document.jobname)

    two_passes = document.mode.policy.always_two_passes or needs_second_pass(document, markup)
    passes = plan_passes(
        engine_cmd,
        preprocessor_cmd,
        document.jobname,
        two_passes=two_passes,
        extra_args=config.extra_args,
    )
    run_passes(passes, out)
    return _build_result(out, document.jobname, passes)


def compile_tex(
    tex_path: str | Path,
    mode: DocumentMode = DocumentMode.STANDARD,
    config: CompilerConfig | None = None,
) -> CompilationResult:
    """Run the pass protocol on an existing ``.tex`` file.

    The content is opaque here, so standard mode always runs two passes.
    """
    tex = Path(tex_path)
    if not tex.exists():
        raise FileNotFoundError(f"{tex} not found")

    config = config or CompilerConfig()
    engine_cmd, preprocessor_cmd = resolve_toolchain(mode, config)
    passes = plan_passes(
        engine_cmd,
        preprocessor_cmd,
        tex.stem,
        two_passes=True,
        extra_args=config.extra_args,
    )
    run_passes(passes, tex.parent)
    return _build_result(tex.parent, tex.stem, passes)
