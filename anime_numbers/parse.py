from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import ParseOptions
from .elements import Element, ElementCategory
from .keywords import KeywordManager, keyword_manager
from .number_parser import NumberParser, ParseContext
from .rules import ANIME_YEAR_MAX, ANIME_YEAR_MIN, ORDINAL_SEASONS
from .text import canonical_number, index_of_first_digit, is_crc32, is_numeric_string, is_resolution, string_to_int
from .tokenizer import Tokenizer
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

# Categories a keyword lookup is allowed to produce elements for
SEARCHABLE_CATEGORIES = frozenset({
    ElementCategory.ANIME_SEASON_PREFIX,
    ElementCategory.ANIME_TYPE,
    ElementCategory.AUDIO_TERM,
    ElementCategory.DEVICE_COMPATIBILITY,
    ElementCategory.EPISODE_PREFIX,
    ElementCategory.FILE_CHECKSUM,
    ElementCategory.LANGUAGE,
    ElementCategory.OTHER,
    ElementCategory.RELEASE_GROUP,
    ElementCategory.RELEASE_INFORMATION,
    ElementCategory.RELEASE_VERSION,
    ElementCategory.SOURCE,
    ElementCategory.SUBTITLES,
    ElementCategory.VIDEO_RESOLUTION,
    ElementCategory.VIDEO_TERM,
    ElementCategory.VOLUME_PREFIX,
})

# Categories that may occur more than once in one filename
MULTIPLE_CATEGORIES = frozenset({
    ElementCategory.ANIME_SEASON,
    ElementCategory.ANIME_TYPE,
    ElementCategory.AUDIO_TERM,
    ElementCategory.DEVICE_COMPATIBILITY,
    ElementCategory.EPISODE_NUMBER,
    ElementCategory.LANGUAGE,
    ElementCategory.OTHER,
    ElementCategory.RELEASE_INFORMATION,
    ElementCategory.SOURCE,
    ElementCategory.VIDEO_TERM,
})


@dataclass
class ParseResult:
    elements: List[Element] = field(default_factory=list)
    tokens: List[Token] = field(default_factory=list)

    def get(self, category: ElementCategory) -> Optional[str]:
        for element in self.elements:
            if element.category == category:
                return element.value
        return None

    def get_all(self, category: ElementCategory) -> List[str]:
        return [e.value for e in self.elements if e.category == category]

    def to_dict(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for element in self.elements:
            out.setdefault(element.category.value, []).append(element.value)
        return out


def remove_extension(filename: str, keywords: KeywordManager = keyword_manager) -> Tuple[str, Optional[str]]:
    pos = filename.rfind(".")
    if pos == -1:
        return filename, None

    ext = filename[pos + 1:]
    if not ext or len(ext) > 4 or not ext.isalnum():
        return filename, None
    if keywords.find_and_set(keywords.normalize(ext), ElementCategory.FILE_EXTENSION) is None:
        return filename, None
    return filename[:pos], ext


class _NumberSearch:
    """Runs keyword classification and the episode number strategies over one token list."""

    def __init__(self, context: ParseContext, options: ParseOptions, keywords: KeywordManager) -> None:
        self.context = context
        self.options = options
        self.keywords = keywords
        self.numbers = NumberParser(context, keywords)

    @property
    def tokens(self) -> List[Token]:
        return self.context.tokens

    def _has(self, category: ElementCategory) -> bool:
        return any(e.category == category for e in self.context.elements)

    def _add(self, category: ElementCategory, value: str) -> None:
        self.context.elements.append(Element(category, value))

    def run(self) -> None:
        self.search_for_keywords()
        self.search_for_isolated_numbers()
        if self.options.parse_episode_number:
            self.search_for_episode_number()

    # -------------------------
    # Keywords
    # -------------------------

    def search_for_keywords(self) -> None:
        # snapshot: prefix handling may split tokens
        for token in list(self.tokens):
            if token.category != TokenCategory.UNKNOWN:
                continue

            word = token.content.strip(" -")
            if not word:
                continue
            # a number is only worth a lookup when it could be a CRC32
            if len(word) != 8 and is_numeric_string(word):
                continue

            category = ElementCategory.UNKNOWN
            identifiable = True
            keyword = self.keywords.find_and_set(self.keywords.normalize(word))

            if keyword is not None:
                category = keyword.category
                if category not in SEARCHABLE_CATEGORIES or not keyword.options.searchable:
                    continue
                if category not in MULTIPLE_CATEGORIES and self._has(category):
                    continue

                if category == ElementCategory.ANIME_SEASON_PREFIX:
                    self._check_anime_season_keyword(token)
                    continue
                if category == ElementCategory.EPISODE_PREFIX:
                    if keyword.options.valid:
                        self._check_extent_keyword(ElementCategory.EPISODE_NUMBER, token)
                    continue
                if category == ElementCategory.VOLUME_PREFIX:
                    self._check_extent_keyword(ElementCategory.VOLUME_NUMBER, token)
                    continue
                if category == ElementCategory.RELEASE_VERSION:
                    word = word[1:]  # "v2" -> "2"
                identifiable = keyword.options.identifiable
            elif not self._has(ElementCategory.FILE_CHECKSUM) and is_crc32(word):
                category = ElementCategory.FILE_CHECKSUM
            elif not self._has(ElementCategory.VIDEO_RESOLUTION) and is_resolution(word):
                category = ElementCategory.VIDEO_RESOLUTION

            if category != ElementCategory.UNKNOWN:
                self._add(category, word)
                if identifiable:
                    token.category = TokenCategory.IDENTIFIER

    def _check_anime_season_keyword(self, token: Token) -> bool:
        pos = index_of_token(self.tokens, token)

        # "2nd Season"
        previous_token = find_prev_token(self.tokens, pos, TokenFlag.NOT_DELIMITER)
        if previous_token.token is not None:
            number = ORDINAL_SEASONS.get(previous_token.token.content.upper())
            if number:
                self._add(ElementCategory.ANIME_SEASON, number)
                previous_token.token.category = TokenCategory.IDENTIFIER
                token.category = TokenCategory.IDENTIFIER
                return True

        # "Season 2"
        next_token = find_next_token(self.tokens, pos, TokenFlag.NOT_DELIMITER)
        if next_token.token is not None and is_numeric_string(next_token.token.content):
            self._add(ElementCategory.ANIME_SEASON, canonical_number(next_token.token.content))
            next_token.token.category = TokenCategory.IDENTIFIER
            token.category = TokenCategory.IDENTIFIER
            return True
        return False

    def _check_extent_keyword(self, category: ElementCategory, token: Token) -> bool:
        # "Episode 01", "Vol 3"
        pos = index_of_token(self.tokens, token)
        next_token = find_next_token(self.tokens, pos, TokenFlag.NOT_DELIMITER)
        if not is_token_category(next_token, TokenCategory.UNKNOWN):
            return False

        other = next_token.token
        if index_of_first_digit(other.content) != 0:
            return False

        if category == ElementCategory.EPISODE_NUMBER:
            if not self.numbers.match_episode_patterns(other.content, other):
                self.numbers.set_episode_number(other.content, other, False)
        elif category == ElementCategory.VOLUME_NUMBER:
            if not self.numbers.match_volume_patterns(other.content, other):
                self.numbers.set_volume_number(other.content, other, False)
        else:
            return False

        token.category = TokenCategory.IDENTIFIER
        return True

    # -------------------------
    # Numbers
    # -------------------------

    def search_for_isolated_numbers(self) -> None:
        """Bracketed years and resolutions, e.g. "(2006)", "[720]"."""
        for pos, token in enumerate(self.tokens):
            if token.category != TokenCategory.UNKNOWN or not is_numeric_string(token.content):
                continue
            if not is_token_isolated(self.tokens, pos):
                continue

            number = string_to_int(token.content)
            if ANIME_YEAR_MIN <= number <= ANIME_YEAR_MAX and not self._has(ElementCategory.ANIME_YEAR):
                self._add(ElementCategory.ANIME_YEAR, token.content)
                token.category = TokenCategory.IDENTIFIER
                continue
            if number in (480, 720, 1080) and not self._has(ElementCategory.VIDEO_RESOLUTION):
                self._add(ElementCategory.VIDEO_RESOLUTION, token.content)
                token.category = TokenCategory.IDENTIFIER

    def search_for_episode_number(self) -> bool:
        candidates = [
            t for t in self.tokens
            if t.category == TokenCategory.UNKNOWN and index_of_first_digit(t.content) != -1
        ]
        if not candidates:
            return False

        self.context.episode_keywords_found = self._has(ElementCategory.EPISODE_NUMBER)

        # a token matching a known episode pattern has to be the episode number
        if self.numbers.search_for_episode_patterns(candidates):
            logger.debug("Episode number found by pattern")
            return True

        # already found through an episode keyword
        if self._has(ElementCategory.EPISODE_NUMBER):
            return True

        candidates = [t for t in candidates if is_numeric_string(t.content)]
        if not candidates:
            return False

        strategies = (
            self.numbers.search_for_equivalent_numbers,  # "01 (176)", "29 (04)"
            self.numbers.search_for_separated_numbers,  # " - 08"
            self.numbers.search_for_isolated_numbers,  # "[12]", "(2006)"
            self.numbers.search_for_last_number,
        )
        for strategy in strategies:
            if strategy(candidates):
                logger.debug("Episode number found by %s", strategy.__name__)
                return True
        return False


def parse_filename(
    filename: str,
    options: Optional[ParseOptions] = None,
    keywords: KeywordManager = keyword_manager,
) -> ParseResult:
    options = options or ParseOptions()
    context = ParseContext()

    name = filename
    if options.parse_file_extension:
        name, ext = remove_extension(filename, keywords)
        if ext:
            context.elements.append(Element(ElementCategory.FILE_EXTENSION, ext))

    for ignored in options.ignored_strings:
        name = name.replace(ignored, "")

    if not name:
        return ParseResult(context.elements, context.tokens)
    context.elements.append(Element(ElementCategory.FILE_NAME, name))

    context.tokens = Tokenizer(name, context.elements, options, keywords).tokenize()
    if not context.tokens:
        return ParseResult(context.elements, context.tokens)

    _NumberSearch(context, options, keywords).run()
    return ParseResult(context.elements, context.tokens)
