"""
Tests for the command-line demo.
"""

from unittest.mock import patch

import demo
from rag_lookup.embeddings import EmbeddingClient
from rag_lookup.generator import Generator
from rag_lookup.rag_pipeline import RAGPipeline
from tests.fakes import make_openai_client


def fake_pipeline_factory(**kwargs):
    client = make_openai_client(answer="It is about an egg.")
    return RAGPipeline(
        embedding_client=EmbeddingClient(model="e", client=client),
        generator=Generator(model="c", client=client),
        **kwargs
    )


class TestDemo:
    """Tests for demo.main."""

    def test_parse_args_defaults(self):
        args = demo.parse_args(["story.pdf"])

        assert args.document == "story.pdf"
        assert args.question == demo.DEFAULT_QUESTION
        assert args.top_k is None
        assert args.caesar_shift is None

    def test_missing_api_key(self, monkeypatch, capsys):
        monkeypatch.delenv("OPENAI_API_KEY")

        assert demo.main(["story.txt"]) == 1
        assert "OPENAI_API_KEY" in capsys.readouterr().err

    def test_bad_log_level(self, monkeypatch, capsys):
        """A bad RAG_LOG_LEVEL is reported like any other configuration error."""
        monkeypatch.setenv("RAG_LOG_LEVEL", "FOO")

        with patch.object(demo, "RAGPipeline") as pipeline_cls:
            code = demo.main(["story.txt"])

        assert code == 1
        err = capsys.readouterr().err
        assert "Configuration error" in err
        assert "RAG_LOG_LEVEL" in err
        pipeline_cls.assert_not_called()

    def test_missing_document(self, tmp_path, capsys):
        with patch.object(demo, "RAGPipeline", side_effect=fake_pipeline_factory), \
                patch.object(demo, "configure_logging"):
            code = demo.main([str(tmp_path / "missing.txt")])

        assert code == 1
        assert "File not found" in capsys.readouterr().err

    def test_answers_question(self, tmp_path, capsys):
        path = tmp_path / "egg.txt"
        path.write_text("The egg is a universe. Life is short.", encoding="utf-8")

        with patch.object(demo, "RAGPipeline", side_effect=fake_pipeline_factory), \
                patch.object(demo, "configure_logging"):
            code = demo.main([str(path), "--question", "What is the egg?", "--top-k", "1",
                              "--chunk-size", "25"])

        out = capsys.readouterr().out
        assert code == 0
        assert f"Extracted 37 characters from {path}" in out
        assert "Preview: The egg is a universe. Life is short." in out
        assert out.index("Preview:") < out.index("Created 2 chunks")
        assert "Created 2 chunks" in out
        assert "Chunk 1 (score 0.707): The egg is a universe." in out
        assert "Answer: It is about an egg." in out
