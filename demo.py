"""
Fragment RAG - Demo Script

This script runs the whole RAG flow against one document:
1. Extract text from the document
2. Chunk it and embed every chunk
3. Retrieve the top chunks for a question
4. Ask the chat model to answer from those chunks

BEFORE RUNNING:
1. Create a .env file with OPENAI_API_KEY=your-api-key
2. Have a .pdf, .txt or .md document to ask about

RUN:
    python demo.py the-egg.pdf --caesar-shift 3
    python demo.py notes.txt --question "What are the action items?" --top-k 5
"""

import argparse
import sys

from openai import OpenAIError

from config.settings import configure_logging, get_settings
from rag_lookup.loaders import DocumentLoadError
from rag_lookup.rag_pipeline import RAGPipeline

DEFAULT_QUESTION = "What is the story about?"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Ask a question about a document.")
    parser.add_argument("document", help="Path to a .pdf, .txt or .md file")
    parser.add_argument("--question", "-q", default=DEFAULT_QUESTION)
    parser.add_argument("--top-k", "-k", type=int, default=None,
                        help="Chunks to retrieve (default: RAG_TOP_K or 3)")
    parser.add_argument("--chunk-size", type=int, default=None,
                        help="Max characters per chunk (default: RAG_CHUNK_SIZE or 300)")
    parser.add_argument("--caesar-shift", type=int, default=None,
                        help="Caesar shift to undo on PDF text (default: RAG_CAESAR_SHIFT or 0)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(settings.log_level)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    rag = RAGPipeline(max_len=args.chunk_size, top_k=args.top_k)

    try:
        result = rag.index_document(args.document, caesar_shift=args.caesar_shift)
        print(f"Extracted {result.characters} characters from {args.document}")
        print(f"Preview: {result.preview}")
        print(f"Created {result.chunks_created} chunks")

        answer = rag.query(args.question)
    except (FileNotFoundError, ValueError, DocumentLoadError, OpenAIError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=== RETRIEVED CHUNKS ===")
    for i, scored in enumerate(answer.retrieved, 1):
        print(f"Chunk {i} (score {scored.score:.3f}): {scored.fragment.text}")
        print("---")
    print("=== END CHUNKS ===")
    print()

    print("Answer:", answer.answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
