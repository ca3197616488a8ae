"""Tests for figures.py — pgfplots aggregates, the matplotlib adapter, add_plot."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from matplotlib.figure import Figure

from texdocument.document import TeXDocument
from texdocument.figures import (
    Axis,
    MatplotlibFigure,
    Plot,
    PlotRenderable,
    add_plot,
    make_figure_entry,
)
from texdocument.models import CaptionPosition, FigureType


class TestPlot:
    def test_coordinates(self):
        plot = Plot(coordinates=[(0, 1), (0.5, 0.25)], options="blue")
        assert plot.to_tex() == "\\addplot[blue] coordinates {(0,1) (0.5,0.25)};"

    def test_expression_with_legend(self):
        plot = Plot(expression="max(0, 1 - x)", legend="hinge")
        assert plot.to_tex() == "\\addplot {max(0, 1 - x)};\n\\addlegendentry{hinge}"

    def test_packages(self):
        assert Plot().packages == ("pgfplots",)

    def test_is_renderable(self):
        assert isinstance(Plot(), PlotRenderable)


class TestAxis:
    def test_wraps_plots(self, sample_axis):
        markup = sample_axis.to_tex()
        lines = markup.splitlines()
        assert lines[0] == "\\begin{tikzpicture}"
        assert lines[1] == "\\begin{axis}[xlabel={$ys$}]"
        assert lines[-2] == "\\end{axis}"
        assert lines[-1] == "\\end{tikzpicture}"
        assert "\\addlegendentry{hinge}" in markup

    def test_custom_environment(self):
        axis = Axis(environment="semilogyaxis")
        assert "\\begin{semilogyaxis}" in axis.to_tex()

    def test_push_returns_axis(self):
        axis = Axis()
        assert axis.push(Plot()) is axis
        assert len(axis.plots) == 1


class TestMatplotlibFigure:
    def test_to_tex_uses_pgf_backend(self):
        figure = MagicMock()
        figure.savefig.side_effect = lambda buf, format: buf.write("\\begin{pgfpicture}\n\\end{pgfpicture}\n\n")
        adapter = MatplotlibFigure(figure)

        assert adapter.to_tex() == "\\begin{pgfpicture}\n\\end{pgfpicture}"
        assert figure.savefig.call_args.kwargs["format"] == "pgf"

    def test_packages(self):
        assert MatplotlibFigure(MagicMock()).packages == ("pgf",)

    def test_raw_figure_is_wrapped(self):
        entry = make_figure_entry(Figure())
        assert isinstance(entry.plot, MatplotlibFigure)


class TestMakeFigureEntry:
    def test_default_left_to_mode(self):
        assert make_figure_entry(Plot()).figtype is None

    def test_string_placement(self):
        entry = make_figure_entry(
            Plot(), figtype="figure*", caption_pos="before", position="t"
        )
        assert entry.figtype is FigureType.WIDE
        assert entry.caption_pos is CaptionPosition.BEFORE
        assert entry.position == "t"

    def test_margin_accepted_before_mode_is_known(self):
        assert make_figure_entry(Plot(), figtype=FigureType.MARGIN).figtype is FigureType.MARGIN

    def test_unknown_figtype(self):
        with pytest.raises(ValueError):
            make_figure_entry(Plot(), figtype="sidewaysfigure")


class TestAddPlot:
    def test_to_axis_accumulates(self):
        doc = TeXDocument("x")
        axis = Axis()
        result = add_plot(axis, Plot(expression="x"))
        add_plot(axis, Plot(expression="x^2"))
        assert result is axis
        assert len(axis.plots) == 2
        assert doc.entries == []

    def test_to_axis_rejects_placement(self):
        with pytest.raises(TypeError):
            add_plot(Axis(), Plot(), caption="nope")

    def test_to_document_appends_immediately(self, sample_axis):
        doc = TeXDocument("x")
        entry = add_plot(doc, sample_axis, caption="Losses.", label="fig:losses")
        assert doc.entries == [entry]
        assert entry.caption == "Losses."
        assert entry.label == "fig:losses"

    def test_later_axis_changes_are_rendered(self):
        doc = TeXDocument("x")
        axis = Axis()
        add_plot(doc, axis)
        add_plot(axis, Plot(expression="x^3"))
        assert "\\addplot {x^3};" in doc.render()
