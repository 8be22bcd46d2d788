"""
Generator Module

WHAT THIS DOES:
Takes a user question + retrieved fragments and asks a chat model for an
answer. This is the "G" in RAG - the Generation part.

THE PROMPT:
One user message, context first, question last:

    Use the context below to answer the question.

    Context:
    <fragment 1>
    <fragment 2>
    ...

    Question: <question>

WHY CONTEXT FIRST:
- The model reads sequentially
- Seeing context before the question helps it stay on the retrieved text
"""

import logging
from typing import List, Optional, Sequence
from dataclasses import dataclass

from config.settings import get_settings
from rag_lookup.embeddings import create_openai_client
from rag_lookup.vector_store import Fragment

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = "Use the context below to answer the question.\n\nContext:\n{context}\n\nQuestion: {question}"


@dataclass
class GenerationResult:
    """
    Result of generating an answer.

    - answer: What we show the user
    - model: Debugging and cost tracking
    - usage: Token consumption for cost monitoring
    - prompt: Debugging - see what was sent to the model
    """
    answer: str
    model: str
    usage: dict
    prompt: Optional[str] = None


def build_context(fragments: Sequence[Fragment]) -> str:
    """Concatenate fragment texts, one per line, in retrieval order."""
    return "".join(f"{fragment.text}\n" for fragment in fragments)


def build_prompt(question: str, fragments: Sequence[Fragment]) -> str:
    """Render the user message sent to the chat model."""
    return PROMPT_TEMPLATE.format(context=build_context(fragments), question=question)


class Generator:
    """
    Generate answers with an OpenAI chat model.

    RESPONSIBILITIES:
    1. Construct the prompt
    2. Call the chat completions API
    3. Track usage for cost monitoring
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client=None
    ):
        """
        Initialize the generator.

        Args:
            api_key: API key (defaults to settings)
            model: Chat model or Azure deployment name (defaults to settings)
            client: Pre-built SDK client (tests pass a mock together with model)
        """
        if client is not None and model is not None:
            self.client = client
            self.model = model
            return

        settings = get_settings()
        self.model = model or settings.openai.chat_model
        self.client = client or create_openai_client(api_key)

    def generate(
        self,
        question: str,
        fragments: List[Fragment],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        include_prompt_in_result: bool = False
    ) -> GenerationResult:
        """
        Generate an answer based on retrieved fragments.

        Args:
            question: The user's question
            fragments: Retrieved fragments, best first
            max_tokens: Maximum tokens in the response (API default if None)
            temperature: Sampling temperature (API default if None)
            include_prompt_in_result: Whether to include the prompt for debugging

        Returns:
            GenerationResult with the answer and metadata
        """
        prompt = build_prompt(question, fragments)

        options = {}
        if max_tokens is not None:
            options["max_tokens"] = max_tokens
        if temperature is not None:
            options["temperature"] = temperature

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            **options
        )

        usage = {
            "prompt_tokens": response.usage.prompt_tokens,
            "completion_tokens": response.usage.completion_tokens,
            "total_tokens": response.usage.total_tokens
        }
        logger.info(f"Generated answer with {self.model} ({usage['total_tokens']} tokens)")

        return GenerationResult(
            answer=response.choices[0].message.content,
            model=self.model,
            usage=usage,
            prompt=prompt if include_prompt_in_result else None
        )
