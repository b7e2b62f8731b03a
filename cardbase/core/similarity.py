"""
Similarity and content rules.

Pure functions deciding whether a similarity score marks new content as a
duplicate, and whether content is long enough to become a card. No I/O,
no configuration lookups; every input is explicit.

Dependencies: None
System role: Threshold policy shared by both dedup stages
"""

LEXICAL_BASE_THRESHOLD = 0.90
SEMANTIC_BASE_THRESHOLD = 0.95
SHORT_CONTENT_CHARS = 200
SHORT_CONTENT_DISCOUNT = 0.05


def effective_threshold(
    content_length: int,
    base_threshold: float,
    short_content_chars: int = SHORT_CONTENT_CHARS,
    discount: float = SHORT_CONTENT_DISCOUNT,
) -> float:
    """
    Threshold after the short-content discount.

    Short submissions share proportionally more of their tokens with any
    near match, so they are judged against a slightly lower bar.

    Args:
        content_length: Length of the submitted content in characters
        base_threshold: Stage threshold before discount
        short_content_chars: Lengths strictly below this are discounted
        discount: Amount subtracted for short content

    Returns:
        float: Threshold to compare the score against
    """
    if content_length < short_content_chars:
        return base_threshold - discount
    return base_threshold


def similarity_passes(
    score: float,
    content_length: int,
    base_threshold: float,
    short_content_chars: int = SHORT_CONTENT_CHARS,
    discount: float = SHORT_CONTENT_DISCOUNT,
) -> bool:
    """
    Return True when ``score`` marks the content as a duplicate.

    The comparison is inclusive: a score equal to the threshold is a duplicate.

    Args:
        score: Lexical rank score or cosine similarity of the best match
        content_length: Length of the submitted content in characters
        base_threshold: Stage threshold before discount
        short_content_chars: Lengths strictly below this are discounted
        discount: Amount subtracted for short content

    Returns:
        bool: True if the score reaches the effective threshold
    """
    threshold = effective_threshold(
        content_length, base_threshold, short_content_chars, discount
    )
    return score >= threshold


def count_words(content: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(content.split())


def has_minimum_words(content: str, min_words: int) -> bool:
    """Return True when ``content`` has at least ``min_words`` tokens."""
    return count_words(content) >= min_words
