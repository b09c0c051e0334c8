"""
Tokenizer for kit source text

Splits raw text into an ordered list of fragments so that comment
delimiters always sit at the start or end of a token. Concatenating the
tokens gives back the input exactly.

Boundaries are placed:
- after a space, tab or line feed
- after a carriage return not followed by a line feed
- between '>' and an immediately following '<'

Example:
    >>> tokens_split("<p><!--$title Home-->\\n</p>")
    ['<p>', '<!--$title ', 'Home-->\\n', '</p>']
"""

from typing import List

BREAK_AFTER = (' ', '\t', '\n')


def tokens_split(text: str) -> List[str]:
    """
    Split source text into tokens

    Args:
        text: Full contents of a kit file

    Returns:
        Ordered list of tokens covering `text` with no gaps or overlaps.
        Empty input gives an empty list.
    """
    tokens: List[str] = []
    start = 0
    last = len(text) - 1

    for pos, char in enumerate(text):
        nextChar = text[pos + 1] if pos < last else ''

        if char in BREAK_AFTER:
            split = True
        elif char == '\r':
            split = nextChar != '\n'
        elif char == '>':
            split = nextChar == '<'
        else:
            split = False

        if split or pos == last:
            tokens.append(text[start:pos + 1])
            start = pos + 1

    return tokens


def lineBreaks_count(text: str) -> int:
    """
    Count line terminators in text

    '\\r\\n', a lone '\\n' and a lone '\\r' each count as one.
    """
    return text.count('\n') + text.count('\r') - text.count('\r\n')


def whitespace_is(token: str) -> bool:
    """True for a non-empty token made only of spaces, tabs and line breaks"""
    return bool(token) and not token.strip(' \t\r\n')
