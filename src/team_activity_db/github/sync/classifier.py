"""Heuristic classification of PR comments.

A comment is "substantive" when it likely carries review content rather
than a bare acknowledgement. This is a fixed heuristic, not a judgement of
quality; keep it stable so historical facts stay comparable.
"""

MIN_LENGTH = 10
LONG_COMMENT_LENGTH = 50

ACKNOWLEDGEMENTS = frozenset(
    {
        "👍",
        ":+1:",
        "수고하셨습니다.",
        "수고하셨습니다!",
    }
)


def is_substantive(body: str | None) -> bool:
    """Decide whether a comment body is substantive.

    Rules, applied to the trimmed, lower-cased body:
        1. shorter than 10 characters -> False
        2. exact match of a known acknowledgement -> False
        3. contains a code fence, a link ("http") or is over 50 characters -> True
        4. otherwise True iff longer than 10 characters

    Args:
        body: Raw comment text (None is treated as empty)

    Returns:
        True if the comment counts as substantive
    """
    clean = (body or "").strip().lower()

    if len(clean) < MIN_LENGTH:
        return False

    if clean in ACKNOWLEDGEMENTS:
        return False

    if "```" in clean or "http" in clean or len(clean) > LONG_COMMENT_LENGTH:
        return True

    return len(clean) > MIN_LENGTH
