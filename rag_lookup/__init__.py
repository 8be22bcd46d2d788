# Source package
from .chunking import chunk_text, Chunk, WordChunker
from .embeddings import EmbeddingClient, EmbeddingResult, cosine_similarity
from .loaders import DocumentLoader, DocumentLoadError, decode_caesar, extract_text_from_pdf
from .vector_store import Fragment, ScoredFragment, VectorIndex
from .generator import Generator, GenerationResult, build_prompt
from .rag_pipeline import RAGPipeline, IndexingResult, QueryResult
