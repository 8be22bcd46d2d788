"""
Tests for the Streamlit app helpers.

Streamlit itself is replaced by a MagicMock so the helpers can run
without a script context.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

import pytest

import app
from config.settings import get_settings


@pytest.fixture
def st():
    fake = MagicMock()
    fake.session_state = SimpleNamespace(rag_pipeline=None, indexed_docs=[], chat_history=[])
    # number_input hands back whatever value it was given, as a float
    fake.number_input.side_effect = lambda label, **kwargs: float(kwargs["value"])
    with patch.object(app, "st", fake):
        yield fake


def chunk_size_call(st):
    return next(c for c in st.number_input.call_args_list if c.args[0].startswith("Chunk size"))


class TestPipelineControls:
    """Tests for the sidebar controls."""

    def test_returns_ints_from_settings(self, st):
        values = app.pipeline_controls(get_settings())

        assert values == (300, 3, 0)
        assert all(type(v) is int for v in values)

    def test_chunk_size_editable_before_indexing(self, st):
        app.pipeline_controls(get_settings())

        assert chunk_size_call(st).kwargs["disabled"] is False

    def test_chunk_size_locked_once_indexed(self, st):
        """Fragments already stored were cut with the old size."""
        st.session_state.indexed_docs = ["egg.txt"]

        app.pipeline_controls(get_settings())

        assert chunk_size_call(st).kwargs["disabled"] is True


class TestCreatePipeline:
    """Tests for create_pipeline."""

    def test_builds_with_controls(self, st):
        with patch.object(app, "RAGPipeline") as pipeline_cls:
            rag = app.create_pipeline(120, 5)

        pipeline_cls.assert_called_once_with(max_len=120, top_k=5)
        assert st.session_state.rag_pipeline is rag

    def test_reuses_pipeline_with_fragments(self, st):
        existing = Mock(index=[object()], chunker=SimpleNamespace(max_len=300))
        st.session_state.rag_pipeline = existing

        with patch.object(app, "RAGPipeline") as pipeline_cls:
            rag = app.create_pipeline(120, 5)

        pipeline_cls.assert_not_called()
        assert rag is existing

    def test_rebuilds_empty_pipeline_for_new_chunk_size(self, st):
        st.session_state.rag_pipeline = Mock(index=[], chunker=SimpleNamespace(max_len=300))

        with patch.object(app, "RAGPipeline") as pipeline_cls:
            app.create_pipeline(120, 5)

        pipeline_cls.assert_called_once_with(max_len=120, top_k=5)


class TestAsk:
    """Tests for ask."""

    def test_passes_current_top_k(self, st):
        rag = Mock()
        st.session_state.rag_pipeline = rag

        result = app.ask("What is the egg?", 5)

        rag.query.assert_called_once_with("What is the egg?", top_k=5)
        assert result is rag.query.return_value
        assert st.session_state.chat_history == [result]
