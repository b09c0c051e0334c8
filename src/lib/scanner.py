"""
Directive scanner for kit comments

Decides whether an HTML comment in the token stream is a kit directive,
reconstructs its full text (possibly spanning several tokens) and splits
it into keyword and predicate.

A directive is a comment whose body starts with '$' or '@' immediately
followed by a letter. Two layouts are recognized:

    <!--$title Home-->          compact: keyword right after '<!--'
    <!-- @import header -->     spaced: only whitespace before the keyword

Anything else (e.g. '<!-- just a note -->') is an ordinary comment and is
left for the compiler to copy through verbatim.
"""

import string
from typing import List, Optional, Tuple

from ..models.compile import Directive
from .errors import DirectiveSyntaxError
from .tokenizer import whitespace_is

COMMENT_OPEN = '<!--'
COMMENT_CLOSE = '-->'
SIGILS = ('$', '@')
KEYWORD_STOP = ' \t=:'
PREDICATE_SKIP = string.whitespace + '=:'
DROPPED_SUFFIXES = ('\n', '\r\n', '\r')


def keyword_start(text: str) -> bool:
    """True when text begins with a sigil followed by an ASCII letter"""
    return (
        len(text) >= 2
        and text[0] in SIGILS
        and text[1] in string.ascii_letters
    )


def keyword_extract(body: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a comment body into keyword and predicate

    The body is trimmed first. The keyword starts at the first '$' or '@'
    and runs until a space, tab, '=' or ':', so a line break does not end
    it. The predicate is what follows once a run of whitespace,
    '=' and ':' has been skipped, trimmed. An empty predicate is None.

    Args:
        body: Comment text between '<!--' and '-->'

    Returns:
        (keyword, predicate); keyword is None when the body has no sigil

    Example:
        >>> keyword_extract(" $title: My Page ")
        ('$title', 'My Page')
        >>> keyword_extract("@import-partial $postFile")
        ('@import-partial', '$postFile')
    """
    body = body.strip()
    positions = [body.find(sigil) for sigil in SIGILS if sigil in body]
    if not positions:
        return None, None

    start = min(positions)
    end = start + 1
    while end < len(body) and body[end] not in KEYWORD_STOP:
        end += 1

    keyword = body[start:end]
    predicate = body[end:].lstrip(PREDICATE_SKIP).strip()
    return keyword, (predicate or None)


class DirectiveScanner:
    """
    Classifies and reconstructs kit directives in a token list

    One scanner is built per tokenized file. The compiler hands it the
    index of a token whose text (from '<!--' on) opens a comment.
    """

    def __init__(self, tokens: List[str], fileName: str = ""):
        """
        Args:
            tokens: Output of tokens_split() for one file
            fileName: Name used in error messages
        """
        self.tokens = tokens
        self.fileName = fileName

    def candidate_is(self, index: int, opening: str) -> bool:
        """
        Decide whether the comment opened at `index` is a directive

        Args:
            index: Token index holding the comment opening
            opening: That token's text starting at '<!--'

        Returns:
            True for a compact or spaced directive, False for an
            ordinary comment
        """
        rest = opening[len(COMMENT_OPEN):]
        if keyword_start(rest):
            return True
        if rest and not whitespace_is(rest):
            return False

        for token in self.tokens[index + 1:]:
            if whitespace_is(token):
                continue
            return keyword_start(token)
        return False

    def directive_read(self, index: int, opening: str, line: int) -> Directive:
        """
        Reconstruct a directive starting at `index`

        Tokens are joined until the first '-->'. Text after it in the
        closing token becomes the suffix, unless it is a single line
        terminator, which is dropped.

        Args:
            index: Token index holding the comment opening
            opening: That token's text starting at '<!--'
            line: Current line number, for error reporting

        Returns:
            Directive with keyword, predicate, consumed source and suffix

        Raises:
            DirectiveSyntaxError: No closing '-->' before end of file, or
                                  no keyword in the comment body
        """
        text = opening
        current = index
        searchFrom = len(COMMENT_OPEN)

        while True:
            close = text.find(COMMENT_CLOSE, searchFrom)
            if close != -1:
                break
            current += 1
            if current >= len(self.tokens):
                raise DirectiveSyntaxError(
                    "Found a kit comment, but could not find its closing '-->'. "
                    "(Ensure the file is UTF-8 encoded and not damaged.)",
                    fileName=self.fileName,
                    line=line,
                )
            # tokens never split inside '-->'
            searchFrom = len(text)
            text += self.tokens[current]

        end = close + len(COMMENT_CLOSE)
        body = text[len(COMMENT_OPEN):close]
        suffix = text[end:]
        if suffix in DROPPED_SUFFIXES:
            suffix = ""

        keyword, predicate = keyword_extract(body)
        if keyword is None:
            raise DirectiveSyntaxError(
                'Unable to find an appropriate keyword (either "@import" or a '
                f"variable name) in this kit comment: {text[:end]}",
                fileName=self.fileName,
                line=line,
            )

        return Directive(
            keyword=keyword,
            predicate=predicate,
            source=text,
            tokenCount=current - index + 1,
            line=line,
            suffix=suffix,
        )
