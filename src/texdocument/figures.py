"""Plot integration: the plot capability, a pgfplots aggregate, a matplotlib adapter.

The engine only asks a plot for two things: the markup to embed and the
packages that markup needs.  Plot internals are never inspected.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, Sequence, runtime_checkable

from matplotlib.figure import Figure

from .models import CaptionPosition, FigureEntry, FigureType

if TYPE_CHECKING:
    from .document import TeXDocument

logger = logging.getLogger(__name__)


@runtime_checkable
class PlotRenderable(Protocol):
    """Anything that can be embedded in a figure environment."""

    packages: tuple[str, ...]

    def to_tex(self) -> str: ...


# ---------------------------------------------------------------------------
# pgfplots
# ---------------------------------------------------------------------------


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class Plot:
    """A single ``\\addplot``, from coordinates or from a pgfplots expression."""

    coordinates: Sequence[tuple[float, float]] = ()
    expression: str | None = None
    options: str = ""
    legend: str | None = None

    packages: ClassVar[tuple[str, ...]] = ("pgfplots",)

    def to_tex(self) -> str:
        opts = f"[{self.options}]" if self.options else ""
        if self.expression is not None:
            line = f"\\addplot{opts} {{{self.expression}}};"
        else:
            coords = " ".join(f"({_fmt(x)},{_fmt(y)})" for x, y in self.coordinates)
            line = f"\\addplot{opts} coordinates {{{coords}}};"
        if self.legend:
            line += f"\n\\addlegendentry{{{self.legend}}}"
        return line


@dataclass
class Axis:
    """An axis that plots are accumulated into before it becomes a figure."""

    plots: list[Any] = field(default_factory=list)
    options: str = ""
    environment: str = "axis"

    packages: ClassVar[tuple[str, ...]] = ("pgfplots",)

    def push(self, plot: Any) -> Axis:
        self.plots.append(plot)
        return self

    def to_tex(self) -> str:
        opts = f"[{self.options}]" if self.options else ""
        parts = ["\\begin{tikzpicture}", f"\\begin{{{self.environment}}}{opts}"]
        parts.extend(p.to_tex() for p in self.plots)
        parts.append(f"\\end{{{self.environment}}}")
        parts.append("\\end{tikzpicture}")
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# matplotlib
# ---------------------------------------------------------------------------


class MatplotlibFigure:
    """Adapter embedding a matplotlib figure through the pgf backend.

    Text in the figure is typeset by LaTeX, so saving a figure with labels
    needs a working LaTeX installation.
    """

    packages: tuple[str, ...] = ("pgf",)

    def __init__(self, figure: Figure) -> None:
        self.figure = figure

    @classmethod
    def current(cls) -> MatplotlibFigure:
        """Wrap pyplot's current figure."""
        import matplotlib.pyplot as plt

        return cls(plt.gcf())

    def to_tex(self) -> str:
        buf = io.StringIO()
        self.figure.savefig(buf, format="pgf")
        return buf.getvalue().rstrip("\n")


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


def make_figure_entry(
    plot: Any,
    *,
    position: str | None = None,
    figtype: FigureType | str | None = None,
    caption: str = "",
    caption_pos: CaptionPosition | str = CaptionPosition.AFTER,
    label: str | None = None,
) -> FigureEntry:
    """Wrap *plot* in a FigureEntry.

    Without *figtype* the entry follows the document's mode when rendered,
    so switching a document to tufte turns its default figures into margin
    figures.
    """
    if isinstance(plot, Figure):
        plot = MatplotlibFigure(plot)

    kind = FigureType(figtype) if figtype is not None else None
    return FigureEntry(
        plot=plot,
        position=position,
        figtype=kind,
        caption=caption,
        caption_pos=CaptionPosition(caption_pos),
        label=label,
    )


def add_plot(target: TeXDocument | Axis, plot: Any, **placement: Any) -> FigureEntry | Axis:
    """Attach *plot* to an axis, or emit it as a figure entry of a document.

    With an :class:`Axis` the plot is accumulated and no document is touched.
    Otherwise *target* is a document and a FigureEntry carrying *placement*
    is appended to it immediately.
    """
    if isinstance(target, Axis):
        if placement:
            raise TypeError("placement metadata only applies when adding to a document")
        return target.push(plot)
    return target.add_figure(plot, **placement)
