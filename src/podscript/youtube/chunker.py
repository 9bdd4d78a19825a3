"""
Transcript Chunking Module
Word-bounded splitting sized to a model's output token budget.
"""

from typing import List, Optional

from ..llm.models import max_output_tokens

# Approximate words per token
WORDS_PER_TOKEN = 0.75


def words_from_tokens(tokens: int) -> int:
    """
    Approximate word count for a token count (0.75 words per token).

    This is a heuristic, not a tokenizer.
    """
    return int(tokens * WORDS_PER_TOKEN)


def split_text(
    text: str,
    model: Optional[str] = None,
    max_words: Optional[int] = None,
) -> List[str]:
    """
    Split text into whitespace-normalized chunks of at most ``max_words`` words.

    The word budget comes from the model's output token limit unless
    ``max_words`` is given. Every chunk except possibly the last has exactly
    ``max_words`` words.

    Args:
        text: Raw transcript text
        model: Model identifier used to look up the budget
        max_words: Explicit word budget, overrides ``model``

    Returns:
        Ordered list of chunk strings (empty for empty input)
    """
    if max_words is None:
        if model is None:
            raise ValueError("split_text needs a model or max_words")
        max_words = words_from_tokens(max_output_tokens(model))
    if max_words < 1:
        raise ValueError(f"max_words must be positive, got {max_words}")

    words = text.split()
    return [
        " ".join(words[start:start + max_words])
        for start in range(0, len(words), max_words)
    ]
