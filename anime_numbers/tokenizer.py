from __future__ import annotations

from typing import List, Optional

from .config import ParseOptions
from .elements import Element
from .keywords import KeywordManager, keyword_manager
from .rules import BRACKET_PAIRS
from .text import is_numeric_string
from .tokens import Token, TokenCategory, TokenFlag, TokenRange, find_next_token, find_prev_token

_OPENING_BRACKETS = dict(BRACKET_PAIRS)


class Tokenizer:
    """
    Splits a filename into bracket, delimiter and unknown tokens.

    Terms found by the keyword peek scan become identifier tokens and are not
    split further. Elements found by the peek scan are appended to elements.
    """

    def __init__(
        self,
        filename: str,
        elements: List[Element],
        options: ParseOptions,
        keywords: KeywordManager = keyword_manager,
    ) -> None:
        self.filename = filename
        self.elements = elements
        self.options = options
        self.keywords = keywords
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        self.tokens = []
        self._tokenize_by_brackets()
        self._validate_delimiter_tokens()
        return self.tokens

    def _add(self, category: TokenCategory, enclosed: bool, token_range: TokenRange) -> None:
        content = self.filename[token_range.offset:token_range.offset + token_range.size]
        self.tokens.append(Token(category, content, enclosed))

    def _tokenize_by_brackets(self) -> None:
        text = self.filename
        is_open = False
        matching_bracket: Optional[str] = None
        begin = 0

        while begin < len(text):
            if not is_open:
                current = next((i for i in range(begin, len(text)) if text[i] in _OPENING_BRACKETS), len(text))
                if current < len(text):
                    matching_bracket = _OPENING_BRACKETS[text[current]]
            else:
                current = text.find(matching_bracket, begin)
                if current == -1:
                    current = len(text)

            if current > begin:
                self._tokenize_by_preidentified(is_open, TokenRange(begin, current - begin))

            if current < len(text):
                self._add(TokenCategory.BRACKET, True, TokenRange(current, 1))
                is_open = not is_open
            begin = current + 1

    def _tokenize_by_preidentified(self, enclosed: bool, token_range: TokenRange) -> None:
        preidentified: List[TokenRange] = []
        self.keywords.peek_and_add(self.filename, token_range, self.elements, preidentified)

        end = token_range.offset + token_range.size
        offset = token_range.offset
        sub_offset = offset
        while offset < end:
            found = next((r for r in preidentified if r.offset == offset), None)
            if found is None:
                offset += 1
                continue
            if offset > sub_offset:
                self._tokenize_by_delimiters(enclosed, TokenRange(sub_offset, offset - sub_offset))
            self._add(TokenCategory.IDENTIFIER, enclosed, found)
            offset = sub_offset = found.offset + found.size

        if end > sub_offset:
            self._tokenize_by_delimiters(enclosed, TokenRange(sub_offset, end - sub_offset))

    def _tokenize_by_delimiters(self, enclosed: bool, token_range: TokenRange) -> None:
        text = self.filename[token_range.offset:token_range.offset + token_range.size]
        delimiters = {c for c in text if c in self.options.allowed_delimiters}
        if not delimiters:
            self.tokens.append(Token(TokenCategory.UNKNOWN, text, enclosed))
            return

        word = ""
        for ch in text:
            if ch not in delimiters:
                word += ch
                continue
            if word:
                self.tokens.append(Token(TokenCategory.UNKNOWN, word, enclosed))
                word = ""
            self.tokens.append(Token(TokenCategory.DELIMITER, ch, enclosed))
        if word:
            self.tokens.append(Token(TokenCategory.UNKNOWN, word, enclosed))

    # -------------------------
    # Delimiter validation
    # -------------------------

    def _validate_delimiter_tokens(self) -> None:
        tokens = self.tokens

        def is_delimiter(index: Optional[int]) -> bool:
            return index is not None and tokens[index].category == TokenCategory.DELIMITER

        def is_unknown(index: Optional[int]) -> bool:
            return index is not None and tokens[index].category == TokenCategory.UNKNOWN

        def is_single_character(index: Optional[int]) -> bool:
            return is_unknown(index) and len(tokens[index].content) == 1 and tokens[index].content != "-"

        def append_to(index: int, destination: int) -> None:
            tokens[destination].content += tokens[index].content
            tokens[index].category = TokenCategory.INVALID

        def next_valid(index: Optional[int]) -> Optional[int]:
            return find_next_token(tokens, index, TokenFlag.VALID).pos

        for i, token in enumerate(tokens):
            if token.category != TokenCategory.DELIMITER:
                continue

            delimiter = token.content
            prev_i = find_prev_token(tokens, i, TokenFlag.VALID).pos
            next_i = next_valid(i)

            # keep "5.1", "H.264", "A.B.C" and similar together
            if delimiter not in " _":
                if is_single_character(prev_i):
                    append_to(i, prev_i)
                    while is_unknown(next_i):
                        append_to(next_i, prev_i)
                        next_i = next_valid(next_i)
                        if is_delimiter(next_i) and tokens[next_i].content == delimiter:
                            append_to(next_i, prev_i)
                            next_i = next_valid(next_i)
                    continue
                if prev_i is not None and is_single_character(next_i):
                    append_to(i, prev_i)
                    append_to(next_i, prev_i)
                    continue

            # adjacent delimiters
            if is_unknown(prev_i) and is_delimiter(next_i):
                next_delimiter = tokens[next_i].content
                if delimiter != next_delimiter and delimiter != "," and next_delimiter in " _":
                    append_to(i, prev_i)
            elif is_delimiter(prev_i) and is_delimiter(next_i):
                prev_delimiter = tokens[prev_i].content
                if prev_delimiter == tokens[next_i].content and prev_delimiter != delimiter:
                    token.category = TokenCategory.UNKNOWN  # e.g. "&" in "_&_"

            # e.g. "01+02"
            if delimiter in "&+" and is_unknown(prev_i) and is_unknown(next_i):
                if is_numeric_string(tokens[prev_i].content) and is_numeric_string(tokens[next_i].content):
                    append_to(i, prev_i)
                    append_to(next_i, prev_i)

        self.tokens = [t for t in tokens if t.category != TokenCategory.INVALID]


def tokenize(
    filename: str,
    elements: List[Element],
    options: Optional[ParseOptions] = None,
    keywords: KeywordManager = keyword_manager,
) -> List[Token]:
    return Tokenizer(filename, elements, options or ParseOptions(), keywords).tokenize()
