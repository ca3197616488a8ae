"""Hydra structured config dataclasses.

These mirror the Pydantic ``ProjectConfig`` for Hydra schema validation.
At runtime the Hydra DictConfig is converted to ``ProjectConfig`` via
``cli._to_project_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hydra.core.config_store import ConfigStore


@dataclass
class CompilerConf:
    standard_engine: str | None = None
    tufte_engine: str | None = None
    preprocessor: str | None = None
    extra_args: list[str] = field(default_factory=list)


@dataclass
class DocumentConf:
    tufte: bool = False
    auto_sections: bool = True
    toc: bool = False
    packages: list[str] = field(default_factory=list)


@dataclass
class TexDocConf:
    # --- Dispatch + CLI-only fields ---
    mode: str = "build"
    verbose: bool = False
    quiet: bool = False
    script: str | None = None
    jobname: str = "document"
    tex_file: str | None = None
    output: str | None = None

    # --- ProjectConfig fields (1:1 mapping) ---
    output_dir: str = "."
    compiler: CompilerConf = field(default_factory=CompilerConf)
    document: DocumentConf = field(default_factory=DocumentConf)


# Keys present in TexDocConf that are NOT part of ProjectConfig.
CLI_ONLY_KEYS = frozenset({
    "mode", "verbose", "quiet", "script", "jobname", "tex_file", "output",
})


def register_configs() -> None:
    """Register the structured config schema with Hydra's ConfigStore."""
    cs = ConfigStore.instance()
    cs.store(name="texdoc_schema", node=TexDocConf)
