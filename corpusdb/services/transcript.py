"""Detect token boundaries in a transcribed segment.

Tokenization is deliberately simple: it only splits the text into paired
delimiters and everything else. Checking whether tokens are well formed is
left to a later validation step, so that a tokenization problem never stops
the remaining checks from running.

Whitespace is normalized before tokenizing, since nobody should have to fix
that by hand.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Optional

WHITESPACE_RE = re.compile(r"\s+")
TOKENIZER_RE = re.compile(
    r"""
    # paired delimiter token:
        [\[\]()<>]
    |
    # whitespace:
        \s+
    |
    # non-whitespace:
        [^\[\]()<>\s]+
    """,
    re.VERBOSE,
)


class DelimKind(str, enum.Enum):
    ROUND = "round"
    SQUARE = "square"
    ANGLE = "angle"


class TokenKind(str, enum.Enum):
    NON_DELIM = "non_delim"
    OPEN = "open"
    CLOSE = "close"


DELIMITERS = {
    "(": (TokenKind.OPEN, DelimKind.ROUND),
    ")": (TokenKind.CLOSE, DelimKind.ROUND),
    "[": (TokenKind.OPEN, DelimKind.SQUARE),
    "]": (TokenKind.CLOSE, DelimKind.SQUARE),
    "<": (TokenKind.OPEN, DelimKind.ANGLE),
    ">": (TokenKind.CLOSE, DelimKind.ANGLE),
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    delim: Optional[DelimKind] = None


@dataclass
class Tokenized:
    source: str
    tokens: list[Token] = field(default_factory=list)

    def as_str(self, token: Token) -> str:
        return self.source[token.start:token.end]


def normalize_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text.strip())


def tokenize(text: str) -> Tokenized:
    """Split a segment into delimiter and non-delimiter tokens."""
    source = normalize_whitespace(text)
    tokens = []
    for match in TOKENIZER_RE.finditer(source):
        value = match.group()
        if value == " ":
            continue
        kind, delim = DELIMITERS.get(value, (TokenKind.NON_DELIM, None))
        tokens.append(Token(kind=kind, start=match.start(), end=match.end(), delim=delim))
    return Tokenized(source=source, tokens=tokens)
