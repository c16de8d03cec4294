"""End-to-end tests for parse_filename."""

import pytest

from anime_numbers.config import ParseOptions
from anime_numbers.elements import ElementCategory
from anime_numbers.parse import parse_filename, remove_extension

EP = ElementCategory.EPISODE_NUMBER


class TestRemoveExtension:
    def test_known_extension(self):
        assert remove_extension("Title - 01.mkv") == ("Title - 01", "mkv")

    @pytest.mark.parametrize("name", ["Title - 01", "Title - 01.xyz", "Title 07.5", "Title.mkv2000"])
    def test_unknown_extension(self, name):
        assert remove_extension(name) == (name, None)


class TestParseFilename:
    def test_full_release_name(self):
        result = parse_filename(
            "[TaigaSubs]_Toradora!_(2008)_-_01v2_-_Tiger_and_Dragon_[1280x720_H.264_FLAC][1234ABCD].mkv"
        )
        assert result.get_all(EP) == ["1"]
        assert result.get(ElementCategory.RELEASE_VERSION) == "2"
        assert result.get(ElementCategory.ANIME_YEAR) == "2008"
        assert result.get(ElementCategory.FILE_CHECKSUM) == "1234ABCD"
        assert result.get(ElementCategory.VIDEO_RESOLUTION) == "1280x720"
        assert result.get(ElementCategory.VIDEO_TERM) == "H.264"
        assert result.get(ElementCategory.AUDIO_TERM) == "FLAC"
        assert result.get(ElementCategory.FILE_EXTENSION) == "mkv"

    @pytest.mark.parametrize(
        "filename, episode",
        [
            ("Title - 12 [1080p].mkv", "12"),
            ("[Group] Title [05].mkv", "5"),
            ("Title 2 Part 3.mkv", "2"),
            ("Title Episode 05 [720p].mkv", "5"),
            ("Title 8 of 12.mkv", "8"),
            ("Title (2006) - 01.mkv", "1"),
        ],
    )
    def test_episode_number(self, filename, episode):
        assert parse_filename(filename).get_all(EP) == [episode]

    def test_equivalent_numbers(self):
        result = parse_filename("[Group] Title 08 (114) [720p].mkv")
        assert result.get_all(EP) == ["8"]
        assert result.get(ElementCategory.EPISODE_NUMBER_ALT) == "114"
        assert result.get(ElementCategory.VIDEO_RESOLUTION) == "720p"

    def test_movie_number_is_not_an_episode(self):
        result = parse_filename("Title Movie 2.mkv")
        assert result.get(EP) is None
        assert result.get(ElementCategory.ANIME_TYPE) == "Movie"

    def test_volume(self):
        result = parse_filename("Title Vol.3 [720p].mkv")
        assert result.get(ElementCategory.VOLUME_NUMBER) == "3"
        assert result.get(EP) is None

    def test_type_and_episode(self):
        result = parse_filename("Title OP4a [720p].mkv")
        assert result.get(ElementCategory.ANIME_TYPE) == "OP"
        assert result.get_all(EP) == ["4a"]

    def test_season_and_episode(self):
        result = parse_filename("Title S01E03 [720p].mkv")
        assert result.get(ElementCategory.ANIME_SEASON) == "1"
        assert result.get_all(EP) == ["3"]

    def test_ordinal_season(self):
        result = parse_filename("Title 2nd Season - 05.mkv")
        assert result.get(ElementCategory.ANIME_SEASON) == "2"
        assert result.get_all(EP) == ["5"]

    def test_ignored_strings(self):
        options = ParseOptions(ignored_strings=("[Group] ",))
        result = parse_filename("[Group] Title - 03 [720p].mkv", options)
        assert result.get(ElementCategory.FILE_NAME) == "Title - 03 [720p]"
        assert result.get_all(EP) == ["3"]

    def test_extension_parsing_disabled(self):
        result = parse_filename("Title - 03.mkv", ParseOptions(parse_file_extension=False))
        assert result.get(ElementCategory.FILE_EXTENSION) is None
        assert result.get(ElementCategory.FILE_NAME) == "Title - 03.mkv"
        assert result.get_all(EP) == ["3"]

    def test_episode_parsing_disabled(self):
        result = parse_filename("Title - 03.mkv", ParseOptions(parse_episode_number=False))
        assert result.get(EP) is None

    def test_empty_name(self):
        result = parse_filename("")
        assert result.elements == []
        assert result.tokens == []

    def test_to_dict(self):
        result = parse_filename("Title - 03.mkv")
        assert result.to_dict() == {
            "file_extension": ["mkv"],
            "file_name": ["Title - 03"],
            "episode_number": ["3"],
        }

    def test_oversized_numbers_are_not_episodes(self):
        result = parse_filename("Title - " + "1" * 5000 + ".mkv")
        assert result.get(EP) is None

        result = parse_filename("Title [" + "2" * 5000 + "] - 04.mkv")
        assert result.get_all(EP) == ["4"]
        assert result.get(ElementCategory.ANIME_YEAR) is None

    def test_oversized_prefixed_number_is_kept_whole(self):
        number = "0" + "7" * 5000
        result = parse_filename(f"Title EP{number}.mkv")
        assert result.get_all(EP) == [number[1:]]
