from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import List, NamedTuple, Optional, Union


class TokenCategory(Enum):
    UNKNOWN = "unknown"
    BRACKET = "bracket"
    DELIMITER = "delimiter"
    IDENTIFIER = "identifier"
    INVALID = "invalid"  # merged away by the tokenizer, never returned


class TokenFlag(Flag):
    NONE = 0
    BRACKET = auto()
    NOT_BRACKET = auto()
    DELIMITER = auto()
    NOT_DELIMITER = auto()
    IDENTIFIER = auto()
    NOT_IDENTIFIER = auto()
    UNKNOWN = auto()
    NOT_UNKNOWN = auto()
    VALID = auto()
    NOT_VALID = auto()
    ENCLOSED = auto()
    NOT_ENCLOSED = auto()


MASK_CATEGORIES = (
    TokenFlag.BRACKET | TokenFlag.NOT_BRACKET
    | TokenFlag.DELIMITER | TokenFlag.NOT_DELIMITER
    | TokenFlag.IDENTIFIER | TokenFlag.NOT_IDENTIFIER
    | TokenFlag.UNKNOWN | TokenFlag.NOT_UNKNOWN
    | TokenFlag.VALID | TokenFlag.NOT_VALID
)
MASK_ENCLOSED = TokenFlag.ENCLOSED | TokenFlag.NOT_ENCLOSED

_CATEGORY_FLAGS = (
    (TokenFlag.BRACKET, TokenFlag.NOT_BRACKET, TokenCategory.BRACKET),
    (TokenFlag.DELIMITER, TokenFlag.NOT_DELIMITER, TokenCategory.DELIMITER),
    (TokenFlag.IDENTIFIER, TokenFlag.NOT_IDENTIFIER, TokenCategory.IDENTIFIER),
    (TokenFlag.UNKNOWN, TokenFlag.NOT_UNKNOWN, TokenCategory.UNKNOWN),
    (TokenFlag.NOT_VALID, TokenFlag.VALID, TokenCategory.INVALID),
)


@dataclass(eq=False)
class Token:
    # eq=False: tokens are located in their list by identity
    category: TokenCategory
    content: str
    enclosed: bool = False

    def check_flags(self, flags: TokenFlag) -> bool:
        if flags & MASK_ENCLOSED:
            if (TokenFlag.ENCLOSED in flags) != self.enclosed:
                return False

        if flags & MASK_CATEGORIES:
            for wanted, unwanted, category in _CATEGORY_FLAGS:
                if wanted in flags:
                    if self.category == category:
                        return True
                elif unwanted in flags and self.category != category:
                    return True
            return False

        return True


class TokenRange(NamedTuple):
    offset: int
    size: int


class Result(NamedTuple):
    token: Optional[Token]
    pos: Optional[int]


NOT_FOUND = Result(None, None)

Position = Union[int, Result]


def _start(position: Position) -> Optional[int]:
    if isinstance(position, Result):
        return position.pos
    return position


def find_token(tokens: List[Token], begin: int, end: int, flags: TokenFlag) -> Result:
    for i in range(max(begin, 0), min(end, len(tokens))):
        if tokens[i].check_flags(flags):
            return Result(tokens[i], i)
    return NOT_FOUND


def find_next_token(tokens: List[Token], position: Position, flags: TokenFlag) -> Result:
    start = _start(position)
    if start is None:
        return NOT_FOUND
    return find_token(tokens, start + 1, len(tokens), flags)


def find_prev_token(tokens: List[Token], position: Position, flags: TokenFlag) -> Result:
    start = _start(position)
    if start is None:
        return NOT_FOUND
    for i in range(min(start, len(tokens)) - 1, -1, -1):
        if tokens[i].check_flags(flags):
            return Result(tokens[i], i)
    return NOT_FOUND


def is_token_category(result: Union[Result, Token, None], category: TokenCategory) -> bool:
    token = result.token if isinstance(result, Result) else result
    return token is not None and token.category == category


def is_token_isolated(tokens: List[Token], pos: int) -> bool:
    """True when the token is the only non-delimiter token between two brackets."""
    prev_token = find_prev_token(tokens, pos, TokenFlag.NOT_DELIMITER)
    if not is_token_category(prev_token, TokenCategory.BRACKET):
        return False
    next_token = find_next_token(tokens, pos, TokenFlag.NOT_DELIMITER)
    return is_token_category(next_token, TokenCategory.BRACKET)


def index_of_token(tokens: List[Token], token: Token) -> int:
    for i, t in enumerate(tokens):
        if t is token:
            return i
    return -1
