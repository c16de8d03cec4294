from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .elements import Element, ElementCategory
from .rules import KEYWORD_TABLE, PEEK_ENTRIES
from .tokens import TokenRange


@dataclass(frozen=True)
class KeywordOptions:
    identifiable: bool = True
    searchable: bool = True
    valid: bool = True


@dataclass(frozen=True)
class Keyword:
    category: ElementCategory
    options: KeywordOptions


class KeywordManager:
    """
    Registry of known anime keywords.

    Keys are normalized (upper-cased) strings. File extensions live in their
    own table so that e.g. "AAC" can be both an audio term and an extension.
    The first registration of a string in a table wins.
    """

    def __init__(self) -> None:
        self._keys: Dict[str, Keyword] = {}
        self._extensions: Dict[str, Keyword] = {}

    @classmethod
    def default(cls) -> "KeywordManager":
        manager = cls()
        for category, identifiable, searchable, valid, keywords in KEYWORD_TABLE:
            manager.register(category, KeywordOptions(identifiable, searchable, valid), keywords)
        return manager

    @staticmethod
    def normalize(word: str) -> str:
        return word.upper() if word else word

    def _container(self, category: ElementCategory) -> Dict[str, Keyword]:
        return self._extensions if category == ElementCategory.FILE_EXTENSION else self._keys

    def register(self, category: ElementCategory, options: KeywordOptions, keywords: Iterable[str]) -> None:
        keys = self._container(category)
        for word in keywords:
            if not word or word in keys:
                continue
            keys[word] = Keyword(category, options)

    def contains(self, category: ElementCategory, keyword: str) -> bool:
        found = self._container(category).get(keyword)
        return found is not None and found.category == category

    def find_and_set(
        self, keyword: str, category: ElementCategory = ElementCategory.UNKNOWN
    ) -> Optional[Keyword]:
        """
        Look up a normalized keyword.

        With ElementCategory.UNKNOWN the registered category is adopted; a
        concrete category must match the registered one exactly.
        """
        found = self._container(category).get(keyword)
        if found is None:
            return None
        if category != ElementCategory.UNKNOWN and found.category != category:
            return None
        return found

    def peek_and_add(
        self,
        filename: str,
        token_range: TokenRange,
        elements: List[Element],
        preidentified: List[TokenRange],
    ) -> None:
        end = min(token_range.offset + token_range.size, len(filename))
        search = filename[token_range.offset:end]
        for category, keywords in PEEK_ENTRIES:
            for keyword in keywords:
                found = search.find(keyword)
                if found == -1:
                    continue
                elements.append(Element(category, keyword))
                preidentified.append(TokenRange(token_range.offset + found, len(keyword)))


keyword_manager = KeywordManager.default()
