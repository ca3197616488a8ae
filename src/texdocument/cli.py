"""CLI entry point using Hydra.

Usage examples:
  texdoc mode=build script=examples/losses.py
  texdoc mode=build script=paper.py document.tufte=true output_dir=build/
  texdoc mode=render script=paper.py output=paper.tex
  texdoc mode=compile tex_file=build/paper.tex document.tufte=true

Scripts run with ``__name__ == "__texdoc__"``; a document named after
``jobname`` is current before the script starts, so scripts may use
``@tex`` without creating one.
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import Any

import hydra
from omegaconf import DictConfig, OmegaConf
from rich.markup import escape

from ._hydra_conf import CLI_ONLY_KEYS, register_configs
from .authoring import default_session
from .config import document_kwargs
from .document import TeXDocument
from .exceptions import TeXDocumentError
from .logging_config import console, report_result, setup_logging
from .models import DocumentMode, ProjectConfig

register_configs()

SCRIPT_RUN_NAME = "__texdoc__"

# ---------------------------------------------------------------------------
# Hydra DictConfig → Pydantic ProjectConfig bridge
# ---------------------------------------------------------------------------


def _to_project_config(cfg: DictConfig) -> ProjectConfig:
    """Convert a Hydra *DictConfig* to a Pydantic ``ProjectConfig``.

    CLI-only keys (``mode``, ``script``, etc.) are stripped before validation.
    """
    container: dict[str, Any] = OmegaConf.to_container(cfg, resolve=True)  # type: ignore[assignment]
    for key in CLI_ONLY_KEYS:
        container.pop(key, None)
    return ProjectConfig.model_validate(container)


def _run_script(cfg: DictConfig, config: ProjectConfig) -> TeXDocument:
    """Execute the authoring script and return the document it left current."""
    script = cfg.get("script")
    if not script:
        console.print("[red]script is required for this mode[/]")
        sys.exit(1)
    path = Path(script)
    if not path.exists():
        console.print(f"[red]Script not found: {path}[/]")
        sys.exit(1)

    session = default_session()
    session.create(cfg.get("jobname", "document"), **document_kwargs(config))
    runpy.run_path(str(path), run_name=SCRIPT_RUN_NAME)
    document = session.current
    console.print(f"[dim]{document.jobname}:[/] {len(document.entries)} entries")
    return document


# ---------------------------------------------------------------------------
# Mode handlers
# ---------------------------------------------------------------------------


def _build_mode(cfg: DictConfig) -> None:
    config = _to_project_config(cfg)
    document = _run_script(cfg, config)

    console.print(f"[bold]Compiling {document.jobname} ({document.mode.value})...[/]")
    result = document.generate(config.output_dir, config.compiler)
    report_result(result)


def _render_mode(cfg: DictConfig) -> None:
    config = _to_project_config(cfg)
    document = _run_script(cfg, config)
    markup = document.render()

    output = cfg.get("output")
    if output:
        Path(output).write_text(markup, encoding="utf-8")
        console.print(f"[green]Written to {output}[/]")
    else:
        console.print(markup, markup=False, highlight=False, soft_wrap=True)


def _compile_mode(cfg: DictConfig) -> None:
    from .compiler import compile_tex

    config = _to_project_config(cfg)
    tex_file = cfg.get("tex_file")
    if not tex_file:
        console.print("[red]tex_file is required for compile mode[/]")
        sys.exit(1)

    mode = DocumentMode.TUFTE if config.document.tufte else DocumentMode.STANDARD
    result = compile_tex(tex_file, mode, config.compiler)
    report_result(result)


_MODE_DISPATCH: dict[str, Any] = {
    "build": _build_mode,
    "render": _render_mode,
    "compile": _compile_mode,
}


# ---------------------------------------------------------------------------
# Hydra entry point
# ---------------------------------------------------------------------------


@hydra.main(config_path="conf", config_name="config", version_base=None)
def hydra_entry(cfg: DictConfig) -> None:
    """Hydra-managed CLI entry point."""
    setup_logging(verbose=cfg.get("verbose", False), quiet=cfg.get("quiet", False))

    mode = cfg.get("mode", "build")
    handler = _MODE_DISPATCH.get(mode)
    if handler is None:
        console.print(f"[red]Unknown mode: {mode!r}. Choose from: {', '.join(_MODE_DISPATCH)}[/]")
        sys.exit(1)

    try:
        handler(cfg)
    except TeXDocumentError as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/] {escape(str(exc))}")
        sys.exit(1)


def main() -> None:
    """Package entry point (``[project.scripts]`` target)."""
    hydra_entry()  # pylint: disable=no-value-for-parameter
