"""Unit tests for number validation, setters and the per-token pattern cascades."""

import pytest

from anime_numbers.elements import Element, ElementCategory
from anime_numbers.number_parser import NumberParser, ParseContext
from anime_numbers.tokens import Token, TokenCategory

EP = ElementCategory.EPISODE_NUMBER
ALT = ElementCategory.EPISODE_NUMBER_ALT
VOL = ElementCategory.VOLUME_NUMBER
SEASON = ElementCategory.ANIME_SEASON
VERSION = ElementCategory.RELEASE_VERSION
TYPE = ElementCategory.ANIME_TYPE


def U(content, enclosed=False):
    return Token(TokenCategory.UNKNOWN, content, enclosed)


def D(content=" "):
    return Token(TokenCategory.DELIMITER, content)


def make(*tokens, keywords_found=False, elements=None):
    context = ParseContext(tokens=list(tokens), elements=list(elements or []), episode_keywords_found=keywords_found)
    return NumberParser(context), context


def values(context, category):
    return [e.value for e in context.elements if e.category == category]


class TestValidation:
    def test_episode_bounds(self):
        parser, _ = make()
        assert parser.is_valid_episode_number("2049")
        assert not parser.is_valid_episode_number("2050")
        assert parser.is_valid_episode_number("0")

    def test_volume_bounds(self):
        parser, _ = make()
        assert parser.is_valid_volume_number("20")
        assert not parser.is_valid_volume_number("21")

    def test_leading_digits_decide(self):
        parser, _ = make()
        assert parser.is_valid_episode_number("12a")
        assert parser.is_valid_episode_number("07.5")
        assert not parser.is_valid_episode_number("3000b")
        assert parser.is_valid_volume_number("3v2")

    @pytest.mark.parametrize("text", ["", "abc", "v2", "#1"])
    def test_non_numeric_is_invalid(self, text):
        parser, _ = make()
        assert not parser.is_valid_episode_number(text)
        assert not parser.is_valid_volume_number(text)

    def test_oversized_numbers_are_invalid(self):
        parser, _ = make()
        assert not parser.is_valid_episode_number("9" * 5000)
        assert not parser.is_valid_volume_number("1" * 5000 + "v2")
        assert parser.is_valid_episode_number("0" * 5000 + "12")


class TestSetters:
    def test_set_episode_number(self):
        token = U("05")
        parser, context = make(token)
        assert parser.set_episode_number("05", token, True)
        assert context.elements == [Element(EP, "5")]
        assert token.category == TokenCategory.IDENTIFIER

    def test_validation_failure_leaves_token_alone(self):
        token = U("2100")
        parser, context = make(token)
        assert not parser.set_episode_number("2100", token, True)
        assert context.elements == []
        assert token.category == TokenCategory.UNKNOWN

    def test_unvalidated_set_accepts_anything(self):
        token = U("2100")
        parser, context = make(token)
        assert parser.set_episode_number("2100", token, False)
        assert values(context, EP) == ["2100"]

    def test_set_volume_number(self):
        token = U("21")
        parser, context = make(token)
        assert not parser.set_volume_number("21", token, True)
        assert parser.set_volume_number("03", token, True)
        assert values(context, VOL) == ["3"]
        assert token.category == TokenCategory.IDENTIFIER

    def test_set_alternative_episode_number(self):
        token = U("114")
        parser, context = make(token)
        assert parser.set_alternative_episode_number("114", token)
        assert context.elements == [Element(ALT, "114")]
        assert token.category == TokenCategory.IDENTIFIER

    def test_empty_number_is_a_programming_error(self):
        token = U("")
        parser, _ = make(token)
        with pytest.raises(ValueError):
            parser.set_episode_number("", token, False)
        with pytest.raises(ValueError):
            parser.set_volume_number("", token, False)

    def test_duplicates_allowed_without_episode_keyword(self):
        token = U("12")
        parser, context = make(token, elements=[Element(EP, "12")])
        assert parser.set_episode_number("12", token, False)
        assert values(context, EP) == ["12", "12"]


class TestEpisodeKeywordArbitration:
    """With an explicit episode keyword the smaller number is primary."""

    def _make(self):
        token = U("x")
        parser, context = make(token, keywords_found=True, elements=[Element(EP, "12")])
        return parser, context, token

    def test_equal_number_is_rejected(self):
        parser, context, token = self._make()
        assert not parser.set_episode_number("12", token, False)
        assert context.elements == [Element(EP, "12")]

    def test_larger_number_becomes_alternative(self):
        parser, context, token = self._make()
        assert parser.set_episode_number("24", token, False)
        assert context.elements == [Element(EP, "12"), Element(ALT, "24")]

    def test_smaller_number_demotes_existing(self):
        parser, context, token = self._make()
        assert parser.set_episode_number("5", token, False)
        assert context.elements == [Element(ALT, "12"), Element(EP, "5")]

    def test_comparison_is_numeric(self):
        parser, context, token = self._make()
        assert not parser.set_episode_number("012", token, False)


class TestEpisodeCascade:
    def _match(self, word):
        token = U(word)
        parser, context = make(token)
        return parser.match_episode_patterns(word, token), context

    @pytest.mark.parametrize("word", ["01", "123", "", " - ", "Title", "OPENING"])
    def test_no_match(self, word):
        matched, context = self._match(word)
        assert not matched
        assert context.elements == []

    def test_single_episode_with_version(self):
        matched, context = self._match("01v2")
        assert matched
        assert context.elements == [Element(EP, "1"), Element(VERSION, "2")]

    def test_multi_episode_with_version(self):
        matched, context = self._match("03-05v2")
        assert matched
        assert values(context, EP) == ["3", "5"]
        assert values(context, VERSION) == ["2"]

    def test_multi_episode_versions_on_both_bounds(self):
        matched, context = self._match("01v2-02v3")
        assert matched
        assert values(context, EP) == ["1", "2"]
        assert values(context, VERSION) == ["2", "3"]

    @pytest.mark.parametrize("word", ["5-2", "009-1", "04-04", "#09-1", "#05-05", "S01E05-03", "2x10-10"])
    def test_reversed_ranges_are_rejected(self, word):
        matched, context = self._match(word)
        assert not matched
        assert context.elements == []

    def test_range_with_plus(self):
        matched, context = self._match("01+02")
        assert matched
        assert values(context, EP) == ["1", "2"]

    def test_fractional_episode(self):
        matched, context = self._match("07.5")
        assert matched
        assert values(context, EP) == ["7.5"]

    def test_trims_spaces_and_dashes(self):
        matched, context = self._match("-07.5 ")
        assert matched
        assert values(context, EP) == ["7.5"]

    @pytest.mark.parametrize(
        "word,seasons,episodes",
        [
            ("S01E03", ["1"], ["3"]),
            ("s02e10", ["2"], ["10"]),
            ("2x01", ["2"], ["1"]),
            ("S01-02xE001-150", ["1", "2"], ["1", "150"]),
            ("S03.E05", ["3"], ["5"]),
        ],
    )
    def test_season_and_episode(self, word, seasons, episodes):
        matched, context = self._match(word)
        assert matched
        assert values(context, SEASON) == seasons
        assert values(context, EP) == episodes

    def test_number_sign(self):
        matched, context = self._match("#01-03v2")
        assert matched
        assert values(context, EP) == ["1", "3"]
        assert values(context, VERSION) == ["2"]

    def test_number_sign_single(self):
        matched, context = self._match("#999")
        assert matched
        assert values(context, EP) == ["999"]

    @pytest.mark.parametrize("word,expected", [("4a", "4a"), ("111C", "111C"), ("04b", "4b")])
    def test_partial_episode(self, word, expected):
        matched, context = self._match(word)
        assert matched
        assert values(context, EP) == [expected]

    @pytest.mark.parametrize("word", ["4d", "12ab", "3000a"])
    def test_partial_episode_rejects(self, word):
        matched, _ = self._match(word)
        assert not matched

    def test_japanese_counter(self):
        matched, context = self._match("01話")
        assert matched
        assert values(context, EP) == ["1"]


class TestTypeAndEpisode:
    def test_op4a_splits_the_token(self):
        title, delimiter, token = U("Title"), D(), U("OP4a")
        parser, context = make(title, delimiter, token)

        assert parser.match_episode_patterns("OP4a", token)
        assert context.elements == [Element(TYPE, "OP"), Element(EP, "4a")]

        assert [t.content for t in context.tokens] == ["Title", " ", "OP", "4a"]
        assert context.tokens[2].category == TokenCategory.UNKNOWN
        assert context.tokens[3] is token
        assert token.category == TokenCategory.IDENTIFIER

    def test_inserted_token_keeps_enclosure(self):
        token = U("ED1", enclosed=True)
        parser, context = make(token)
        assert parser.match_episode_patterns("ED1", token)
        assert context.tokens[0].content == "ED"
        assert context.tokens[0].enclosed

    def test_remainder_goes_through_the_cascade(self):
        token = U("OVA01v2")
        parser, context = make(token)
        assert parser.match_episode_patterns("OVA01v2", token)
        assert values(context, TYPE) == ["OVA"]
        assert values(context, EP) == ["1"]
        assert values(context, VERSION) == ["2"]

    def test_unknown_prefix(self):
        token = U("ABC12")
        parser, context = make(token)
        assert not parser.match_episode_patterns("ABC12", token)
        assert context.elements == []
        assert context.tokens == [token]

    def test_prefix_of_another_category(self):
        token = U("EP12")
        parser, context = make(token)
        assert not parser.match_type_and_episode_pattern("EP12", token)
        assert context.elements == []


class TestVolumeCascade:
    def _match(self, word):
        token = U(word)
        parser, context = make(token)
        return parser.match_volume_patterns(word, token), context

    def test_single_volume(self):
        matched, context = self._match("01v2")
        assert matched
        assert context.elements == [Element(VOL, "1"), Element(VERSION, "2")]

    def test_multi_volume(self):
        matched, context = self._match("01-02v2")
        assert matched
        assert values(context, VOL) == ["1", "2"]
        assert values(context, VERSION) == ["2"]

    def test_multi_volume_without_version(self):
        matched, context = self._match("03~05")
        assert matched
        assert values(context, VOL) == ["3", "5"]
        assert values(context, VERSION) == []

    @pytest.mark.parametrize("word", ["05-02", "25-30", "03", "S01E02", "4a"])
    def test_no_match(self, word):
        matched, context = self._match(word)
        assert not matched
        assert context.elements == []


class TestPrefixes:
    def test_episode_prefix(self):
        token = U("EP01")
        parser, context = make(token)
        assert parser.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token)
        assert values(context, EP) == ["1"]

    def test_episode_prefix_with_pattern(self):
        token = U("Ep.03-04")
        parser, context = make(token)
        assert parser.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token)
        assert values(context, EP) == ["3", "4"]

    def test_single_letter_prefix_is_still_a_prefix(self):
        token = U("E07")
        parser, context = make(token)
        assert parser.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token)
        assert values(context, EP) == ["7"]

    def test_volume_prefix(self):
        token = U("Vol.3")
        parser, context = make(token)
        assert not parser.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token)
        assert parser.number_comes_after_prefix(ElementCategory.VOLUME_PREFIX, token)
        assert values(context, VOL) == ["3"]

    def test_volume_prefix_is_not_validated_directly(self):
        token = U("Vol30")
        parser, context = make(token)
        assert parser.number_comes_after_prefix(ElementCategory.VOLUME_PREFIX, token)
        assert values(context, VOL) == ["30"]

    def test_recognized_prefix_without_a_set_number(self):
        # range rejected by the cascade, the raw remainder is still set
        token = U("Vol05-02")
        parser, context = make(token)
        assert parser.number_comes_after_prefix(ElementCategory.VOLUME_PREFIX, token)
        assert values(context, VOL) == ["5-02"]

    @pytest.mark.parametrize("content", ["XYZ01", "EP", "01"])
    def test_not_a_prefix(self, content):
        token = U(content)
        parser, context = make(token)
        assert not parser.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token)
        assert context.elements == []


class TestTotalNumber:
    def test_n_of_m(self):
        tokens = [U("Title"), D(), U("8"), D(), U("of"), D(), U("12")]
        parser, context = make(*tokens)
        assert parser.number_comes_before_total_number(tokens[2], 2)
        assert values(context, EP) == ["8"]
        assert tokens[4].category == TokenCategory.IDENTIFIER
        assert tokens[6].category == TokenCategory.IDENTIFIER

    def test_of_is_case_insensitive(self):
        tokens = [U("3"), D(), U("OF"), D(), U("13")]
        parser, context = make(*tokens)
        assert parser.number_comes_before_total_number(tokens[0], 0)
        assert values(context, EP) == ["3"]

    @pytest.mark.parametrize(
        "tokens",
        [
            [U("8"), D(), U("of"), D(), U("Title")],
            [U("8"), D(), U("and"), D(), U("12")],
            [U("8"), D(), U("of")],
        ],
    )
    def test_no_total(self, tokens):
        parser, context = make(*tokens)
        assert not parser.number_comes_before_total_number(tokens[0], 0)
        assert context.elements == []
