"""
Unit tests for the RAG pipeline.

The OpenAI client is a mock whose embeddings count a few keywords, so
retrieval results are predictable.
"""

from unittest.mock import patch

import pytest

from rag_lookup.embeddings import EmbeddingClient
from rag_lookup.generator import Generator
from rag_lookup.rag_pipeline import NO_CONTEXT_ANSWER, PREVIEW_CHARS, RAGPipeline

STORY = "The egg is a universe. Life is short. God spoke to you. Every life is an egg."


@pytest.fixture
def pipeline(mock_openai_client):
    return RAGPipeline(
        embedding_client=EmbeddingClient(model="embed", client=mock_openai_client),
        generator=Generator(model="chat", client=mock_openai_client),
        max_len=25,
        top_k=2,
    )


class TestIndexing:
    """Tests for indexing text and documents."""

    def test_index_text(self, pipeline):
        result = pipeline.index_text(STORY, source="egg.txt")

        assert result.source == "egg.txt"
        assert result.chunks_created == 4
        assert result.tokens_used > 0
        assert [f.text for f in pipeline.index] == [
            "The egg is a universe.",
            "Life is short. God spoke",
            "to you. Every life is an",
            "egg.",
        ]

    def test_index_text_reports_extracted_text(self, pipeline):
        """The result carries the character count and a whitespace-collapsed preview."""
        result = pipeline.index_text("The egg\n\n  is   a universe.")

        assert result.characters == 27
        assert result.preview == "The egg is a universe."

    def test_preview_is_capped(self, pipeline):
        result = pipeline.index_text("egg " * 100)

        assert result.characters == 400
        assert len(result.preview) == PREVIEW_CHARS

    def test_index_empty_text(self, pipeline, mock_openai_client):
        result = pipeline.index_text("   ")

        assert result.chunks_created == 0
        assert len(pipeline.index) == 0
        mock_openai_client.embeddings.create.assert_not_called()

    def test_index_document(self, pipeline, tmp_path):
        path = tmp_path / "egg.txt"
        path.write_text(STORY, encoding="utf-8")

        result = pipeline.index_document(str(path))

        assert result.chunks_created == 4
        assert pipeline.get_stats() == {
            "indexed_documents": 1,
            "total_chunks": 4,
            "documents": [str(path)],
        }

    def test_index_document_uses_configured_shift(self, pipeline, monkeypatch):
        monkeypatch.setenv("RAG_CAESAR_SHIFT", "3")

        with patch("rag_lookup.rag_pipeline.DocumentLoader.load",
                   return_value=("The egg", {"source": "egg.pdf", "format": "pdf"})) as load:
            pipeline.index_document("egg.pdf")

        load.assert_called_once_with("egg.pdf", caesar_shift=3)

    def test_index_missing_document(self, pipeline, tmp_path):
        with pytest.raises(FileNotFoundError):
            pipeline.index_document(str(tmp_path / "nope.txt"))


class TestQuery:
    """Tests for retrieval and answering."""

    def test_retrieve_ranks_by_similarity(self, pipeline):
        pipeline.index_text(STORY)

        results = pipeline.retrieve("What is the egg?")

        assert [r.fragment.text for r in results] == ["egg.", "The egg is a universe."]
        assert results[0].score == pytest.approx(1.0)

    def test_retrieve_top_k_override(self, pipeline):
        pipeline.index_text(STORY)

        assert len(pipeline.retrieve("egg", top_k=3)) == 3
        assert pipeline.retrieve("egg", top_k=0) == []

    def test_query_sends_retrieved_context(self, pipeline, mock_openai_client):
        pipeline.index_text(STORY)

        result = pipeline.query("What is the egg?")

        assert result.answer == "An answer."
        assert len(result.retrieved) == 2
        assert "total_ms" in result.timing

        prompt = mock_openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "Context:\negg.\nThe egg is a universe.\n" in prompt
        assert prompt.endswith("Question: What is the egg?")

    def test_query_empty_index_skips_generation(self, pipeline, mock_openai_client):
        result = pipeline.query("Anything?")

        assert result.answer == NO_CONTEXT_ANSWER
        assert result.retrieved == []
        assert result.generation_result is None
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_defaults_from_settings(self, mock_openai_client, monkeypatch):
        monkeypatch.setenv("RAG_CHUNK_SIZE", "120")
        monkeypatch.setenv("RAG_TOP_K", "4")

        rag = RAGPipeline(
            embedding_client=EmbeddingClient(model="e", client=mock_openai_client),
            generator=Generator(model="c", client=mock_openai_client),
        )

        assert rag.chunker.max_len == 120
        assert rag.top_k == 4
