"""
RAG Pipeline - The Complete System

This module wires the pieces into a working question-answering flow:
1. Document → Chunking → Embedding → VectorIndex
2. Question → Embedding → Top-K retrieval → Generation → Answer

INDEXING PHASE (once per document):
┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
│ Document │───▶│ Chunking │───▶│Embedding │───▶│  Vector  │
│(PDF/TXT) │    │ (words)  │    │ (OpenAI) │    │  Index   │
└──────────┘    └──────────┘    └──────────┘    └──────────┘

QUERY PHASE (per question):
┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
│ Question │───▶│Embedding │───▶│  Top K   │───▶│   Chat   │───▶ Answer
└──────────┘    └──────────┘    └──────────┘    └──────────┘

WHY NO BUILT-IN DOCUMENT:
The pipeline never loads a fixed corpus on its own. Callers hand it text or
a path, so tests can index a few sentences and never touch the disk.
"""

import logging
import time
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from config.settings import get_settings
from rag_lookup.chunking import WordChunker
from rag_lookup.embeddings import EmbeddingClient
from rag_lookup.generator import Generator, GenerationResult
from rag_lookup.loaders import DocumentLoader
from rag_lookup.vector_store import Fragment, ScoredFragment, VectorIndex

logger = logging.getLogger(__name__)

NO_CONTEXT_ANSWER = "I couldn't find any relevant information to answer your question."
PREVIEW_CHARS = 200


@dataclass
class IndexingResult:
    """
    Result of indexing a document.

    WHY TRACK ALL THIS:
    - Debugging: Know what happened during indexing
    - Monitoring: Track performance and costs
    - characters/preview: What the loader actually extracted
    """
    source: str
    chunks_created: int
    tokens_used: int
    time_seconds: float
    characters: int = 0
    preview: str = ""


@dataclass
class QueryResult:
    """
    Result of a RAG query.

    - answer: What we tell the user
    - retrieved: The fragments used as context, with scores
    - timing: Milliseconds per step
    """
    question: str
    answer: str
    retrieved: List[ScoredFragment]
    generation_result: Optional[GenerationResult]
    timing: Dict[str, float] = field(default_factory=dict)


class RAGPipeline:
    """
    Complete RAG system that handles both indexing and querying.

    USAGE:
        rag = RAGPipeline()
        rag.index_document("the-egg.pdf", caesar_shift=3)
        result = rag.query("What is the story about?")
        print(result.answer)

    COMPONENTS:
    - WordChunker: Splits text into fragments
    - EmbeddingClient: Converts text to vectors
    - VectorIndex: Stores and searches vectors
    - Generator: Creates answers from context
    """

    def __init__(
        self,
        embedding_client: Optional[EmbeddingClient] = None,
        generator: Optional[Generator] = None,
        max_len: Optional[int] = None,
        top_k: Optional[int] = None
    ):
        """
        Initialize the RAG pipeline.

        Args:
            embedding_client: Defaults to an EmbeddingClient built from settings
            generator: Defaults to a Generator built from settings
            max_len: Max characters per fragment (defaults to settings)
            top_k: Number of fragments to retrieve (defaults to settings)
        """
        if max_len is None or top_k is None:
            settings = get_settings()
            max_len = settings.chunking.max_len if max_len is None else max_len
            top_k = settings.retrieval.top_k if top_k is None else top_k

        self.embedding_client = embedding_client or EmbeddingClient()
        self.generator = generator or Generator()
        self.chunker = WordChunker(max_len=max_len)
        self.index = VectorIndex()
        self.top_k = top_k

        self.indexed_documents: List[str] = []

    def index_text(self, text: str, source: str = "manual_input") -> IndexingResult:
        """
        Index raw text.

        Every fragment produced by the chunker is embedded and added to the
        index in document order.
        """
        start_time = time.time()

        chunks = self.chunker.chunk_document(text, source=source)
        logger.info(f"Created {len(chunks)} chunks from {source}")

        embedding_results = self.embedding_client.embed_batch([chunk.text for chunk in chunks])
        for i, result in enumerate(embedding_results, 1):
            logger.debug(f"Processing chunk {i}/{len(embedding_results)}")
            self.index.add(Fragment(text=result.text, embedding=result.embedding))

        total_tokens = sum(result.token_count for result in embedding_results)
        self.indexed_documents.append(source)

        elapsed_time = time.time() - start_time
        logger.info(f"Indexed {source} in {elapsed_time:.2f} seconds ({total_tokens} tokens)")

        return IndexingResult(
            source=source,
            chunks_created=len(chunks),
            tokens_used=total_tokens,
            time_seconds=elapsed_time,
            characters=len(text),
            preview=" ".join(text.split())[:PREVIEW_CHARS]
        )

    def index_document(self, file_path: str, caesar_shift: Optional[int] = None) -> IndexingResult:
        """
        Load a document from disk and index it.

        Args:
            file_path: Path to a .pdf, .txt or .md file
            caesar_shift: Caesar shift to undo on PDF text (defaults to settings)
        """
        if caesar_shift is None:
            caesar_shift = get_settings().loader.caesar_shift

        logger.info(f"Loading document: {file_path}")
        text, metadata = DocumentLoader.load(file_path, caesar_shift=caesar_shift)
        logger.debug(f"Extracted {len(text)} characters ({metadata['format']})")

        return self.index_text(text, source=metadata["source"])

    def retrieve(self, question: str, top_k: Optional[int] = None) -> List[ScoredFragment]:
        """Embed the question and return the best fragments with scores."""
        question_embedding = self.embedding_client.embed(question)
        return self.index.search(
            question_embedding.embedding,
            self.top_k if top_k is None else top_k
        )

    def query(self, question: str, top_k: Optional[int] = None) -> QueryResult:
        """
        Ask a question and get an answer based on indexed documents.

        WHAT HAPPENS:
        1. Convert question to embedding
        2. Retrieve the top K fragments
        3. Generate answer from retrieved context

        If nothing is retrieved the model is not called.
        """
        timing = {}

        start = time.time()
        results = self.retrieve(question, top_k)
        timing["retrieval_ms"] = (time.time() - start) * 1000

        for i, result in enumerate(results, 1):
            logger.debug(f"Retrieved chunk {i} (score={result.score:.4f}): {result.fragment.text[:80]}")

        if not results:
            logger.warning("No fragments retrieved; skipping generation")
            timing["total_ms"] = timing["retrieval_ms"]
            return QueryResult(
                question=question,
                answer=NO_CONTEXT_ANSWER,
                retrieved=[],
                generation_result=None,
                timing=timing
            )

        start = time.time()
        generation_result = self.generator.generate(
            question=question,
            fragments=[result.fragment for result in results]
        )
        timing["generation_ms"] = (time.time() - start) * 1000
        timing["total_ms"] = sum(timing.values())

        return QueryResult(
            question=question,
            answer=generation_result.answer,
            retrieved=results,
            generation_result=generation_result,
            timing=timing
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the RAG system."""
        return {
            "indexed_documents": len(self.indexed_documents),
            "total_chunks": len(self.index),
            "documents": list(self.indexed_documents)
        }
