from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ElementCategory(str, Enum):
    ANIME_SEASON = "anime_season"
    ANIME_SEASON_PREFIX = "anime_season_prefix"
    ANIME_TYPE = "anime_type"
    ANIME_YEAR = "anime_year"
    AUDIO_TERM = "audio_term"
    DEVICE_COMPATIBILITY = "device_compatibility"
    EPISODE_NUMBER = "episode_number"
    EPISODE_NUMBER_ALT = "episode_number_alt"
    EPISODE_PREFIX = "episode_prefix"
    FILE_CHECKSUM = "file_checksum"
    FILE_EXTENSION = "file_extension"
    FILE_NAME = "file_name"
    LANGUAGE = "language"
    OTHER = "other"
    RELEASE_GROUP = "release_group"
    RELEASE_INFORMATION = "release_information"
    RELEASE_VERSION = "release_version"
    SOURCE = "source"
    SUBTITLES = "subtitles"
    VIDEO_RESOLUTION = "video_resolution"
    VIDEO_TERM = "video_term"
    VOLUME_NUMBER = "volume_number"
    VOLUME_PREFIX = "volume_prefix"
    UNKNOWN = "unknown"


@dataclass
class Element:
    # category is rewritten in place when an episode number is demoted to an alternate
    category: ElementCategory
    value: str
