# /teacherboard/services/tool_helpers/text_utils.py

"""Text clean-up for AI output: Markdown to plain text and lenient JSON recovery."""

import json
import re

_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*$", re.MULTILINE)
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE)
_BULLET_RE = re.compile(r"^(\s*)[*+-]\s+", re.MULTILINE)
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\(([^)]*)\)")
_BOLD_RE = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC_RE = re.compile(r"(?<![\w*])([*_])(?!\s)(.+?)(?<!\s)\1(?![\w*])")
_INLINE_CODE_RE = re.compile(r"`([^`]*)`")
_BLOCKQUOTE_RE = re.compile(r"^\s*>\s?", re.MULTILINE)
_HRULE_RE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$", re.MULTILINE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
}


def markdown_to_plain_text(markdown: str) -> str:
    """
    Renders Markdown as plain text for pasting into word processors that do
    not understand it. List bullets are normalised to "- ".
    """
    text = markdown.replace("\r\n", "\n")
    text = _FENCE_RE.sub("", text)
    text = _HRULE_RE.sub("", text)
    text = _HEADING_RE.sub("", text)
    text = _BLOCKQUOTE_RE.sub("", text)
    text = _BULLET_RE.sub(r"\1- ", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _BOLD_RE.sub(r"\2", text)
    text = _ITALIC_RE.sub(r"\2", text)
    text = _INLINE_CODE_RE.sub(r"\1", text)
    # Collapse the blank-line runs left behind by removed blocks.
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def repair_json_text(raw: str) -> str:
    """
    Recovers a JSON document from model output. Strips code fences, cuts to the
    outermost object or array, drops trailing commas and straightens smart
    quotes. Raises ValueError when nothing parseable remains.
    """
    if raw is None:
        raise ValueError("No JSON content to repair.")
    text = _FENCE_RE.sub("", raw).strip()
    for smart, plain in _SMART_QUOTES.items():
        text = text.replace(smart, plain)

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise ValueError("AI response did not contain a JSON object.")
    start = min(starts)
    closing = "}" if text[start] == "{" else "]"
    end = text.rfind(closing)
    if end <= start:
        raise ValueError("AI response contained an unterminated JSON object.")
    text = _TRAILING_COMMA_RE.sub(r"\1", text[start:end + 1])

    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"AI response could not be parsed as JSON: {e}") from e
    return text
