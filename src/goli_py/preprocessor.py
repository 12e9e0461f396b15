import re
import uuid
from typing import Dict, List, Set, Tuple

# --- Quote Preservation ---

# Placeholder -> original literal text (including its delimiters)
QuoteMap = Dict[str, str]

# Double-, single- and backtick-quoted literals. Each body may contain escaped
# characters (including an escaped newline) and raw newlines.
LITERAL_PATTERN = (
    r'"[^"\\]*(?:\\(?:.|\n)[^"\\]*)*"'
    r"|'[^'\\]*(?:\\(?:.|\n)[^'\\]*)*'"
    r'|`[^`\\]*(?:\\(?:.|\n)[^`\\]*)*`'
)

COMMENT_MARKER = ';'
# A marker preceded by a backslash is escaped and kept as text
COMMENT_REGEX = re.compile(r'(?<!\\)' + re.escape(COMMENT_MARKER))


class PreprocessError(Exception):
    """Raised when the source text cannot be prepared for tokenizing."""
    pass


class MalformedLiteralPattern(PreprocessError):
    """The literal-matching pattern failed to compile."""
    pass


def compile_literal_pattern(pattern: str = LITERAL_PATTERN) -> 're.Pattern[str]':
    try:
        return re.compile(pattern)
    except re.error as e:
        raise MalformedLiteralPattern(f"Invalid literal pattern {pattern!r}: {e}") from e


LITERAL_REGEX = compile_literal_pattern()

PLACEHOLDER_PREFIX = 'QUOTE_'
PLACEHOLDER_REGEX = re.compile(PLACEHOLDER_PREFIX + r'[0-9a-f]{32}')


def _new_placeholder(taken: Set[str]) -> str:
    """Returns a fresh placeholder not in `taken` and records it there."""
    while True:
        placeholder = f"{PLACEHOLDER_PREFIX}{uuid.uuid4().hex}"
        if placeholder not in taken:
            taken.add(placeholder)
            return placeholder


def preserve_quotes(text: str, pattern: str = LITERAL_PATTERN) -> Tuple[QuoteMap, str]:
    """
    Replaces every quoted literal in `text` with a unique placeholder.
    Returns the placeholder map and the rewritten text. Every occurrence gets
    its own placeholder, even when two literals are textually identical.
    Unterminated literals never match and are left as they are.
    """
    regex = LITERAL_REGEX if pattern == LITERAL_PATTERN else compile_literal_pattern(pattern)
    quote_map: QuoteMap = {}
    # Placeholder-shaped text already in the source can never be reused
    taken = set(PLACEHOLDER_REGEX.findall(text))

    def substitute(match: 're.Match[str]') -> str:
        placeholder = _new_placeholder(taken)
        quote_map[placeholder] = match.group()
        return placeholder

    output = regex.sub(substitute, text)
    return quote_map, output


# --- Comment Stripping ---

def strip_comments(text: str) -> str:
    """
    Removes everything from the first unescaped ';' to the end of each line.
    Newlines are kept, so line structure is unchanged.
    """
    lines: List[str] = []
    for line in text.split('\n'):
        mo = COMMENT_REGEX.search(line)
        if mo:
            line = line[:mo.start()]
        lines.append(line)
    return '\n'.join(lines)


# --- Quote Restoration ---

def restore_quotes(text: str, quote_map: QuoteMap) -> str:
    """
    Replaces each placeholder with the literal it stands for, in one pass.
    Placeholder-shaped text that is not in the map is left as it is.
    """
    if not quote_map:
        return text
    return PLACEHOLDER_REGEX.sub(lambda mo: quote_map.get(mo.group(), mo.group()), text)


def prepare(text: str) -> str:
    """Strips comments from `text` without touching comment markers inside literals."""
    quote_map, protected = preserve_quotes(text)
    stripped = strip_comments(protected)
    return restore_quotes(stripped, quote_map)
