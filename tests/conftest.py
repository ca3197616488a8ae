"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from texdocument.authoring import default_session
from texdocument.document import TeXDocument
from texdocument.figures import Axis, Plot

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def fresh_session():
    """Every test starts without a current document."""
    default_session().reset()
    yield default_session()
    default_session().reset()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def hinge_source() -> str:
    return (
        '@tex(r"The hinge loss.")\n'
        "def hinge_loss(y, s):\n"
        "    # convex surrogate\n"
        "    return max(0.0, 1.0 - y * s)\n"
    )


@pytest.fixture
def zero_one_source() -> str:
    return (
        "def zero_one_loss(y, s):\n"
        "    return 1.0 if y * s <= 0 else 0.0\n"
    )


@pytest.fixture
def sample_axis() -> Axis:
    return Axis(
        plots=[Plot(coordinates=[(0, 1), (1, 0)], legend="hinge")],
        options="xlabel={$ys$}",
    )


@pytest.fixture
def sample_document(zero_one_source: str, hinge_source: str) -> TeXDocument:
    """A standard document with text, two code entries and no figures."""
    doc = TeXDocument("losses", title="Losses", author="A. Author")
    doc.add_text(r"Labels are $y \in \{-1, +1\}$.", section="Introduction")
    doc.add_code(r"The \emph{zero-one loss}.", zero_one_source)
    doc.add_code(r"The \emph{hinge loss}.", hinge_source)
    return doc


@pytest.fixture
def error_log_text() -> str:
    return (FIXTURES_DIR / "error.log").read_text(encoding="utf-8")
