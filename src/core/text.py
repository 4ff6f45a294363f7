"""Text helpers shared by prompts and tools."""


def truncate_text(text: str | None, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters.

    Character-level and marker-free, so truncating twice to the same limit
    returns the same string.
    """
    if not text:
        return ""
    if limit <= 0:
        return ""
    return text[:limit]
