"""Shared text utilities: sketch normalization and code-fence extraction."""

import re

FENCE = "```"

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"//[^\n]*")
_WHITESPACE = re.compile(r"\s+")
_LANGUAGE_TAG = re.compile(r"^(?:javascript|js)[ \t]*\n")


class FenceParseError(ValueError):
    """Raised when a model reply has unbalanced code fences."""

    def __init__(self, marker_count: int):
        super().__init__(f"Unbalanced code fences: found {marker_count} ``` markers")
        self.marker_count = marker_count


def normalize_code(source: str) -> str:
    """
    Strip comments and collapse whitespace so cosmetic edits compare equal.
    Used only as a change-detection key, never shown to the user.
    """
    text = source
    while True:
        # Removing one comment can splice "/" and "*" into a new one.
        stripped = _LINE_COMMENT.sub("", _BLOCK_COMMENT.sub("", text))
        if stripped == text:
            break
        text = stripped
    return _WHITESPACE.sub(" ", text).strip()


def extract_code(text: str) -> str:
    """
    Pull the code out of a model reply.

    Replies without fences are returned trimmed. Otherwise the fenced bodies
    are joined with newlines, each minus a leading language tag line.
    Raises FenceParseError on an odd number of ``` markers.
    """
    if FENCE not in text:
        return text.strip()
    parts = text.split(FENCE)
    markers = len(parts) - 1
    if markers % 2:
        raise FenceParseError(markers)
    bodies = [_LANGUAGE_TAG.sub("", block, count=1) for block in parts[1::2]]
    return "\n".join(bodies).strip()
