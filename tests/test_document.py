"""Tests for document.py — the document model and the session."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from texdocument.document import DEFAULT_PACKAGES, DocumentSession, TeXDocument
from texdocument.exceptions import NoCurrentDocumentError
from texdocument.models import CodeEntry, DocumentMode, FigureEntry, FigureType, TextEntry


class TestTeXDocument:
    def test_defaults(self):
        doc = TeXDocument()
        assert doc.jobname == "document"
        assert doc.title == ""
        assert doc.packages == list(DEFAULT_PACKAGES)
        assert doc.mode is DocumentMode.STANDARD
        assert doc.auto_sections is True
        assert doc.toc is False
        assert doc.entries == []

    def test_jobname_positional(self):
        assert TeXDocument("losses").jobname == "losses"

    def test_tufte_flag(self):
        doc = TeXDocument("x", tufte=True)
        assert doc.mode is DocumentMode.TUFTE
        assert doc.tufte is True

    def test_tufte_false_is_standard(self):
        assert TeXDocument("x", tufte=False).tufte is False

    def test_mode_assignment_validated(self):
        doc = TeXDocument("x")
        doc.mode = "tufte"
        assert doc.mode is DocumentMode.TUFTE

    def test_tufte_assignment(self):
        doc = TeXDocument("x")
        doc.tufte = True
        assert doc.mode is DocumentMode.TUFTE
        doc.tufte = False
        assert doc.mode is DocumentMode.STANDARD

    def test_invalid_mode_rejected(self):
        doc = TeXDocument("x")
        with pytest.raises(ValidationError):
            doc.mode = "beamer"

    def test_constructor_packages_deduplicated(self):
        doc = TeXDocument("x", packages=["url", "amsmath", "url"])
        assert doc.packages == ["url", "amsmath"]

    def test_add_package_idempotent(self):
        doc = TeXDocument("x")
        doc.add_package("booktabs")
        doc.add_package("booktabs")
        doc.add_package("amsmath")
        assert doc.packages == [*DEFAULT_PACKAGES, "booktabs"]

    def test_entries_keep_append_order(self, zero_one_source, sample_axis):
        doc = TeXDocument("x")
        doc.add_text("first")
        doc.add_code("second", zero_one_source)
        doc.add_figure(sample_axis)
        assert [type(e) for e in doc.entries] == [TextEntry, CodeEntry, FigureEntry]

    def test_figures_property(self, sample_axis):
        doc = TeXDocument("x")
        doc.add_text("t")
        fig = doc.add_figure(sample_axis)
        assert doc.figures == [fig]

    def test_add_figure_leaves_type_to_mode(self, sample_axis):
        assert TeXDocument("x").add_figure(sample_axis).figtype is None
        assert TeXDocument("y").add_figure(sample_axis, figtype="figure*").figtype is FigureType.WIDE

    def test_figure_plot_kept_as_is(self, sample_axis):
        fig = TeXDocument("x").add_figure(sample_axis)
        assert fig.plot is sample_axis

    def test_render_delegates(self, sample_document):
        markup = sample_document.render()
        assert markup.startswith("\\documentclass")


class TestDocumentSession:
    def test_empty_session_has_no_current(self):
        session = DocumentSession()
        assert session.has_current is False
        with pytest.raises(NoCurrentDocumentError):
            _ = session.current

    def test_create_sets_current(self):
        session = DocumentSession()
        doc = session.create("a", title="A")
        assert session.current is doc
        assert doc.title == "A"

    def test_create_replaces_current(self):
        session = DocumentSession()
        first = session.create("a")
        second = session.create("b")
        assert session.current is second
        assert session.current is not first

    def test_get_or_create_keeps_existing(self):
        session = DocumentSession()
        first = session.get_or_create("a")
        assert session.get_or_create("b") is first

    def test_activate(self):
        session = DocumentSession()
        session.create("a")
        other = TeXDocument("b")
        session.activate(other)
        assert session.current is other

    def test_resolve_prefers_explicit(self):
        session = DocumentSession()
        session.create("a")
        explicit = TeXDocument("b")
        assert session.resolve(explicit) is explicit

    def test_resolve_without_current(self):
        with pytest.raises(NoCurrentDocumentError):
            DocumentSession().resolve()

    def test_reset(self):
        session = DocumentSession()
        session.create("a")
        session.reset()
        assert session.has_current is False

    def test_sessions_are_independent(self):
        one, two = DocumentSession(), DocumentSession()
        one.create("a")
        assert two.has_current is False
