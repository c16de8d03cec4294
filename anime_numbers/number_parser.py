from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .elements import Element, ElementCategory
from .keywords import KeywordManager, keyword_manager
from .rules import EPISODE_NUMBER_MAX, JAPANESE_EPISODE_COUNTER, LAST_NUMBER_EXCLUDED_PREVIOUS, VOLUME_NUMBER_MAX
from .text import (
    canonical_number,
    index_of_first_digit,
    is_dash_character,
    is_numeric_string,
    leading_digits,
    string_to_int,
)
from .tokens import (
    Token,
    TokenCategory,
    TokenFlag,
    find_next_token,
    find_prev_token,
    index_of_token,
    is_token_category,
    is_token_isolated,
)

logger = logging.getLogger(__name__)

# All patterns are applied with fullmatch: a token is matched as a whole.
RE_SINGLE_EPISODE = re.compile(r"(\d{1,3})[vV](\d)")
RE_MULTI_EPISODE = re.compile(r"(\d{1,3})(?:[vV](\d))?[-~&+](\d{1,3})(?:[vV](\d))?")
RE_FRACTIONAL_EPISODE = re.compile(r"\d+\.5")
RE_SEASON_EPISODE = re.compile(
    r"S?(\d{1,2})(?:-S?(\d{1,2}))?(?:x|[ ._x-]?E)(\d{1,3})(?:-E?(\d{1,3}))?",
    re.IGNORECASE,
)
RE_NUMBER_SIGN = re.compile(r"#(\d{1,3})(?:[-~&+](\d{1,3}))?(?:[vV](\d))?")
RE_JAPANESE_COUNTER = re.compile(r"(\d{1,3})" + JAPANESE_EPISODE_COUNTER)
RE_SINGLE_VOLUME = re.compile(r"(\d{1,2})[vV](\d)")
RE_MULTI_VOLUME = re.compile(r"(\d{1,2})[-~&+](\d{1,2})(?:[vV](\d))?")

Matcher = Callable[[str, Token], bool]
# (needs digit first, needs digit last, matcher); None means either
MatcherRule = Tuple[Optional[bool], Optional[bool], Matcher]


@dataclass
class ParseContext:
    """State for one filename: the token list, the element list and the
    "an explicit episode keyword was seen" flag."""

    tokens: List[Token] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    episode_keywords_found: bool = False


class NumberParser:
    def __init__(self, context: ParseContext, keywords: KeywordManager = keyword_manager) -> None:
        self.context = context
        self.keywords = keywords

        self._episode_matchers: Tuple[MatcherRule, ...] = (
            (True, True, self.match_single_episode_pattern),  # "01v2"
            (True, True, self.match_multi_episode_pattern),  # "01-02", "03-05v2"
            (True, True, self.match_fractional_episode_pattern),  # "07.5"
            (None, True, self.match_season_and_episode_pattern),  # "2x01", "S01E03"
            (None, True, self.match_number_sign_pattern),  # "#01", "#02-03v2"
            (False, None, self.match_type_and_episode_pattern),  # "ED1", "OP4a", "OVA2"
            (True, False, self.match_partial_episode_pattern),  # "4a", "111C"
            (True, None, self.match_japanese_counter_pattern),  # "01話"
        )
        self._volume_matchers: Tuple[MatcherRule, ...] = (
            (True, True, self.match_single_volume_pattern),  # "01v2"
            (True, True, self.match_multi_volume_pattern),  # "01-02", "03-05v2"
        )

    @property
    def tokens(self) -> List[Token]:
        return self.context.tokens

    @property
    def elements(self) -> List[Element]:
        return self.context.elements

    def _add(self, category: ElementCategory, value: str) -> None:
        self.elements.append(Element(category, value))

    # -------------------------
    # Validation and setters
    # -------------------------

    def is_valid_volume_number(self, number: str) -> bool:
        digits = leading_digits(number)
        return bool(digits) and string_to_int(digits) <= VOLUME_NUMBER_MAX

    def is_valid_episode_number(self, number: str) -> bool:
        # "12a" and "07.5" are judged by their leading digits
        digits = leading_digits(number)
        return bool(digits) and string_to_int(digits) <= EPISODE_NUMBER_MAX

    def set_volume_number(self, number: str, token: Token, validate: bool) -> bool:
        if not number:
            raise ValueError("volume number is empty")
        if validate and not self.is_valid_volume_number(number):
            logger.debug("Rejected volume number %r", number)
            return False

        self._add(ElementCategory.VOLUME_NUMBER, canonical_number(number))
        token.category = TokenCategory.IDENTIFIER
        return True

    def set_episode_number(self, number: str, token: Token, validate: bool) -> bool:
        if not number:
            raise ValueError("episode number is empty")
        if validate and not self.is_valid_episode_number(number):
            logger.debug("Rejected episode number %r", number)
            return False

        token.category = TokenCategory.IDENTIFIER
        category = ElementCategory.EPISODE_NUMBER

        # With an explicit episode keyword the smaller number stays primary.
        if self.context.episode_keywords_found:
            for element in self.elements:
                if element.category != ElementCategory.EPISODE_NUMBER:
                    continue

                comparison = string_to_int(number) - string_to_int(element.value)
                if comparison > 0:
                    category = ElementCategory.EPISODE_NUMBER_ALT
                elif comparison < 0:
                    element.category = ElementCategory.EPISODE_NUMBER_ALT
                else:
                    logger.debug("Episode number %r already set", number)
                    return False
                break

        self._add(category, canonical_number(number))
        logger.debug("Set %s %r", category.value, number)
        return True

    def set_alternative_episode_number(self, number: str, token: Token) -> bool:
        if not number:
            raise ValueError("episode number is empty")
        self._add(ElementCategory.EPISODE_NUMBER_ALT, canonical_number(number))
        token.category = TokenCategory.IDENTIFIER
        return True

    # -------------------------
    # Prefixes and "N of M"
    # -------------------------

    def number_comes_after_prefix(self, category: ElementCategory, token: Token) -> bool:
        """
        Handle "EP.1" / "Vol.3" style tokens. Returns True when the prefix is a
        known keyword of category, whether or not a number could be set.
        """
        number_begin = index_of_first_digit(token.content)
        if number_begin == -1:
            return False

        prefix = self.keywords.normalize(token.content[:number_begin])
        if not self.keywords.contains(category, prefix):
            return False

        number = token.content[number_begin:]
        if category == ElementCategory.EPISODE_PREFIX:
            if not self.match_episode_patterns(number, token):
                self.set_episode_number(number, token, False)
            return True
        if category == ElementCategory.VOLUME_PREFIX:
            if not self.match_volume_patterns(number, token):
                self.set_volume_number(number, token, False)
            return True
        return False

    def number_comes_before_total_number(self, token: Token, position: int) -> bool:
        # e.g. "8 of 12"
        next_token = find_next_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if next_token.token is None or next_token.token.content.casefold() != "of":
            return False

        other_token = find_next_token(self.tokens, next_token, TokenFlag.NOT_DELIMITER)
        if other_token.token is None or not is_numeric_string(other_token.token.content):
            return False

        self.set_episode_number(token.content, token, False)
        next_token.token.category = TokenCategory.IDENTIFIER
        other_token.token.category = TokenCategory.IDENTIFIER
        return True

    # -------------------------
    # Episode matchers
    # -------------------------

    @staticmethod
    def _run(matchers: Sequence[MatcherRule], word: str, token: Token) -> bool:
        numeric_front = word[0].isdecimal()
        numeric_back = word[-1].isdecimal()
        for front, back, matcher in matchers:
            if front is not None and front != numeric_front:
                continue
            if back is not None and back != numeric_back:
                continue
            if matcher(word, token):
                return True
        return False

    def match_episode_patterns(self, word: str, token: Token) -> bool:
        # every pattern contains at least one non-digit
        if not word or is_numeric_string(word):
            return False
        word = word.strip(" -")
        if not word:
            return False
        return self._run(self._episode_matchers, word, token)

    def match_single_episode_pattern(self, word: str, token: Token) -> bool:
        m = RE_SINGLE_EPISODE.fullmatch(word)
        if not m:
            return False
        self.set_episode_number(m.group(1), token, False)
        self._add(ElementCategory.RELEASE_VERSION, m.group(2))
        return True

    def match_multi_episode_pattern(self, word: str, token: Token) -> bool:
        m = RE_MULTI_EPISODE.fullmatch(word)
        if not m:
            return False

        lower, upper = m.group(1), m.group(3)
        # rejects "009-1", "5-2"
        if string_to_int(lower) >= string_to_int(upper):
            return False
        if not self.set_episode_number(lower, token, True):
            return False

        self.set_episode_number(upper, token, True)
        for version in (m.group(2), m.group(4)):
            if version:
                self._add(ElementCategory.RELEASE_VERSION, version)
        return True

    def match_fractional_episode_pattern(self, word: str, token: Token) -> bool:
        return bool(RE_FRACTIONAL_EPISODE.fullmatch(word)) and self.set_episode_number(word, token, True)

    def match_season_and_episode_pattern(self, word: str, token: Token) -> bool:
        m = RE_SEASON_EPISODE.fullmatch(word)
        if not m:
            return False
        # rejects "S01E05-03"
        if m.group(4) and string_to_int(m.group(3)) >= string_to_int(m.group(4)):
            return False

        self._add(ElementCategory.ANIME_SEASON, canonical_number(m.group(1)))
        if m.group(2):
            self._add(ElementCategory.ANIME_SEASON, canonical_number(m.group(2)))
        self.set_episode_number(m.group(3), token, False)
        if m.group(4):
            self.set_episode_number(m.group(4), token, False)
        return True

    def match_number_sign_pattern(self, word: str, token: Token) -> bool:
        if not word.startswith("#"):
            return False
        m = RE_NUMBER_SIGN.fullmatch(word)
        if not m:
            return False
        # rejects "#09-1", "#05-05"
        if m.group(2) and string_to_int(m.group(1)) >= string_to_int(m.group(2)):
            return False
        if not self.set_episode_number(m.group(1), token, True):
            return False

        if m.group(2):
            self.set_episode_number(m.group(2), token, False)
        if m.group(3):
            self._add(ElementCategory.RELEASE_VERSION, m.group(3))
        return True

    def match_type_and_episode_pattern(self, word: str, token: Token) -> bool:
        number_begin = index_of_first_digit(word)
        if number_begin <= 0:
            return False

        prefix = word[:number_begin]
        keyword = self.keywords.find_and_set(self.keywords.normalize(prefix), ElementCategory.ANIME_TYPE)
        if keyword is None:
            return False

        self._add(ElementCategory.ANIME_TYPE, prefix)
        number = word[number_begin:]
        if not (self.match_episode_patterns(number, token) or self.set_episode_number(number, token, True)):
            return False

        # Split "OP4a" into "OP" + "4a"
        index = index_of_token(self.tokens, token)
        if index != -1:
            token.content = number
            category = TokenCategory.IDENTIFIER if keyword.options.identifiable else TokenCategory.UNKNOWN
            self.tokens.insert(index, Token(category, prefix, token.enclosed))
        return True

    def match_partial_episode_pattern(self, word: str, token: Token) -> bool:
        suffix = word[len(leading_digits(word)):]
        if len(suffix) != 1 or suffix not in "ABCabc":
            return False
        return self.set_episode_number(word, token, True)

    def match_japanese_counter_pattern(self, word: str, token: Token) -> bool:
        if not word.endswith(JAPANESE_EPISODE_COUNTER):
            return False
        m = RE_JAPANESE_COUNTER.fullmatch(word)
        if not m:
            return False
        self.set_episode_number(m.group(1), token, False)
        return True

    # -------------------------
    # Volume matchers
    # -------------------------

    def match_volume_patterns(self, word: str, token: Token) -> bool:
        if not word or is_numeric_string(word):
            return False
        word = word.strip(" -")
        if not word:
            return False
        return self._run(self._volume_matchers, word, token)

    def match_single_volume_pattern(self, word: str, token: Token) -> bool:
        m = RE_SINGLE_VOLUME.fullmatch(word)
        if not m:
            return False
        self.set_volume_number(m.group(1), token, False)
        self._add(ElementCategory.RELEASE_VERSION, m.group(2))
        return True

    def match_multi_volume_pattern(self, word: str, token: Token) -> bool:
        m = RE_MULTI_VOLUME.fullmatch(word)
        if not m:
            return False

        lower, upper = m.group(1), m.group(2)
        if string_to_int(lower) >= string_to_int(upper):
            return False
        if not self.set_volume_number(lower, token, True):
            return False

        self.set_volume_number(upper, token, False)
        if m.group(3):
            self._add(ElementCategory.RELEASE_VERSION, m.group(3))
        return True

    # -------------------------
    # Whole-list searches
    # -------------------------

    def search_for_isolated_numbers(self, candidates: Iterable[Token]) -> bool:
        # e.g. "[12]", "(2006)"
        for token in candidates:
            if not token.enclosed:
                continue
            pos = index_of_token(self.tokens, token)
            if pos == -1 or not is_token_isolated(self.tokens, pos):
                continue
            if self.set_episode_number(token.content, token, True):
                return True
        return False

    def search_for_separated_numbers(self, candidates: Iterable[Token]) -> bool:
        # e.g. " - 08"
        for token in candidates:
            pos = index_of_token(self.tokens, token)
            previous_token = find_prev_token(self.tokens, pos if pos != -1 else None, TokenFlag.NOT_DELIMITER)
            if not is_token_category(previous_token, TokenCategory.UNKNOWN):
                continue
            if not is_dash_character(previous_token.token.content):
                continue
            if self.set_episode_number(token.content, token, True):
                previous_token.token.category = TokenCategory.IDENTIFIER
                return True
        return False

    def search_for_episode_patterns(self, candidates: Iterable[Token]) -> bool:
        for token in candidates:
            numeric_front = token.content[:1].isdecimal()

            if not numeric_front:
                # e.g. "EP.1", "Vol.1"
                if self.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token):
                    return True
                if self.number_comes_after_prefix(ElementCategory.VOLUME_PREFIX, token):
                    continue
            else:
                # e.g. "8 of 12"
                pos = index_of_token(self.tokens, token)
                if pos != -1 and self.number_comes_before_total_number(token, pos):
                    return True

            if self.match_episode_patterns(token.content, token):
                return True
        return False

    def search_for_equivalent_numbers(self, candidates: Iterable[Token]) -> bool:
        # e.g. "08 (114)", "29 (04)"
        for token in candidates:
            pos = index_of_token(self.tokens, token)
            if pos == -1:
                continue
            if is_token_isolated(self.tokens, pos) or not self.is_valid_episode_number(token.content):
                continue

            next_token = find_next_token(self.tokens, pos, TokenFlag.NOT_DELIMITER)
            if not is_token_category(next_token, TokenCategory.BRACKET):
                continue
            next_token = find_next_token(self.tokens, next_token, TokenFlag.ENCLOSED | TokenFlag.NOT_DELIMITER)
            if not is_token_category(next_token, TokenCategory.UNKNOWN):
                continue

            other = next_token.token
            if (
                not is_token_isolated(self.tokens, next_token.pos)
                or not is_numeric_string(other.content)
                or not self.is_valid_episode_number(other.content)
            ):
                continue

            low, high = sorted((token, other), key=lambda t: string_to_int(t.content))
            self.set_episode_number(low.content, low, False)
            self.set_alternative_episode_number(high.content, high)
            return True
        return False

    def search_for_last_number(self, candidates: Sequence[Token]) -> bool:
        for token in reversed(candidates):
            pos = index_of_token(self.tokens, token)
            # the episode number comes after the title, so never the first token
            if pos <= 0:
                continue
            if token.enclosed:
                continue

            # ignore the first token that is neither enclosed nor a delimiter
            if all(t.enclosed or t.category == TokenCategory.DELIMITER for t in self.tokens[:pos]):
                continue

            previous_token = find_prev_token(self.tokens, pos, TokenFlag.NOT_DELIMITER)
            if is_token_category(previous_token, TokenCategory.UNKNOWN):
                if previous_token.token.content.upper() in LAST_NUMBER_EXCLUDED_PREVIOUS:
                    continue

            if self.set_episode_number(token.content, token, True):
                return True
        return False
