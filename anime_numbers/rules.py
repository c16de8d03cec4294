from __future__ import annotations

from .elements import ElementCategory as C

# Upper bounds for bare numbers. Years are used to keep "(2006)" out of episodes.
ANIME_YEAR_MIN = 1900
ANIME_YEAR_MAX = 2050
EPISODE_NUMBER_MAX = ANIME_YEAR_MAX - 1
VOLUME_NUMBER_MAX = 20

# Tokens right after these words are never taken as a trailing episode number,
# e.g. "Movie 2", "Part 1".
LAST_NUMBER_EXCLUDED_PREVIOUS = ("MOVIE", "PART")

DEFAULT_DELIMITERS = " _.&+,|"

BRACKET_PAIRS = (
    ("(", ")"),
    ("[", "]"),
    ("{", "}"),
    ("「", "」"),  # corner bracket
    ("『", "』"),  # white corner bracket
    ("【", "】"),  # black lenticular bracket
    ("（", "）"),  # fullwidth parenthesis
)

DASHES = "-‐‑‒–—―"

# U+8A71 counts stories/episodes, e.g. "第05話"
JAPANESE_EPISODE_COUNTER = "話"

ORDINAL_SEASONS = {
    "1ST": "1", "FIRST": "1",
    "2ND": "2", "SECOND": "2",
    "3RD": "3", "THIRD": "3",
    "4TH": "4", "FOURTH": "4",
    "5TH": "5", "FIFTH": "5",
    "6TH": "6", "SIXTH": "6",
    "7TH": "7", "SEVENTH": "7",
    "8TH": "8", "EIGHTH": "8",
    "9TH": "9", "NINTH": "9",
}

# (category, identifiable, searchable, valid, keywords)
# Order matters: the first registration of a string wins.
KEYWORD_TABLE = (
    (C.ANIME_SEASON_PREFIX, False, True, True, ("SAISON", "SEASON")),
    (C.ANIME_TYPE, False, True, True, (
        "GEKIJOUBAN", "MOVIE", "OAD", "OAV", "ONA", "OVA", "SPECIAL", "SPECIALS", "TV",
    )),
    # e.g. "Yumeiro Patissiere SP Professional"
    (C.ANIME_TYPE, False, False, True, ("SP",)),
    (C.ANIME_TYPE, False, True, False, (
        "ED", "ENDING", "NCED", "NCOP", "OP", "OPENING", "PREVIEW", "PV",
    )),
    (C.AUDIO_TERM, True, True, True, (
        # channels
        "2.0CH", "2CH", "5.1", "5.1CH", "DTS", "DTS-ES", "DTS5.1", "TRUEHD5.1",
        # codecs
        "AAC", "AACX2", "AACX3", "AACX4", "AC3", "EAC3", "E-AC-3",
        "FLAC", "FLACX2", "FLACX3", "FLACX4", "LOSSLESS", "MP3", "OGG", "VORBIS",
        # language
        "DUALAUDIO", "DUAL AUDIO",
    )),
    (C.DEVICE_COMPATIBILITY, True, True, True, ("IPAD3", "IPHONE5", "IPOD", "PS3", "XBOX", "XBOX360")),
    (C.DEVICE_COMPATIBILITY, False, True, True, ("ANDROID",)),
    (C.EPISODE_PREFIX, True, True, True, (
        "EP", "EP.", "EPS", "EPS.", "EPISODE", "EPISODE.", "EPISODES",
        "CAPITULO", "EPISODIO", "EPISÓDIO", "FOLGE",
    )),
    # single-letter episode keywords are not valid tokens on their own
    (C.EPISODE_PREFIX, True, True, False, ("E", "第")),
    (C.FILE_EXTENSION, True, True, True, (
        "3GP", "AVI", "DIVX", "FLV", "M2TS", "MKV", "MOV", "MP4", "MPG", "OGM",
        "RM", "RMVB", "TS", "WEBM", "WMV",
    )),
    (C.FILE_EXTENSION, True, True, False, (
        "AAC", "AIFF", "FLAC", "M4A", "MP3", "MKA", "OGG", "WAV", "WMA",
        "7Z", "RAR", "ZIP", "ASS", "SRT",
    )),
    (C.LANGUAGE, True, True, True, ("ENG", "ENGLISH", "ESPANO", "JAP", "PT-BR", "SPANISH", "VOSTFR")),
    # e.g. "Tokyo ESP", "Bokura ga Ita"
    (C.LANGUAGE, False, True, True, ("ESP", "ITA")),
    (C.OTHER, True, True, True, (
        "REMASTER", "REMASTERED", "UNCENSORED", "UNCUT", "TS", "VFR", "WIDESCREEN", "WS",
    )),
    (C.RELEASE_GROUP, True, True, True, ("THORA",)),
    (C.RELEASE_INFORMATION, True, True, True, ("BATCH", "COMPLETE", "PATCH", "REMUX")),
    # e.g. "The End of Evangelion", "Final Approach"
    (C.RELEASE_INFORMATION, False, True, True, ("END", "FINAL")),
    (C.RELEASE_VERSION, True, True, True, ("V0", "V1", "V2", "V3", "V4")),
    (C.SOURCE, True, True, True, (
        "BD", "BDRIP", "BLURAY", "BLU-RAY", "DVD", "DVD5", "DVD9", "DVD-R2J",
        "DVDRIP", "DVD-RIP", "R2DVD", "R2J", "R2JDVD", "R2JDVDRIP",
        "HDTV", "HDTVRIP", "TVRIP", "TV-RIP", "WEBCAST", "WEBRIP",
    )),
    (C.SUBTITLES, True, True, True, (
        "ASS", "BIG5", "DUB", "DUBBED", "HARDSUB", "HARDSUBS", "RAW",
        "SOFTSUB", "SOFTSUBS", "SUB", "SUBBED", "SUBTITLED",
    )),
    (C.VIDEO_TERM, True, True, True, (
        # frame rate
        "23.976FPS", "24FPS", "29.97FPS", "30FPS", "60FPS", "120FPS",
        # codec
        "8BIT", "8-BIT", "10BIT", "10BITS", "10-BIT", "10-BITS",
        "HI10", "HI10P", "HI444", "HI444P", "HI444PP",
        "H264", "H265", "H.264", "H.265", "X264", "X265", "X.264",
        "AVC", "HEVC", "HEVC2", "DIVX", "DIVX5", "DIVX6", "XVID", "AV1",
        # format
        "AVI", "RMVB", "WMV", "WMV3", "WMV9",
        # quality
        "HQ", "LQ",
        # resolution
        "HD", "SD",
    )),
    (C.VOLUME_PREFIX, True, True, True, ("VOL", "VOL.", "VOLUME")),
)

# Literal, case-sensitive terms located before tokenization so delimiters
# inside them ("Dual Audio", "H.264", "Blu-Ray") do not split them.
PEEK_ENTRIES = (
    (C.AUDIO_TERM, ("Dual Audio",)),
    (C.VIDEO_TERM, ("H264", "H.264", "h264", "h.264")),
    (C.VIDEO_RESOLUTION, ("480p", "720p", "1080p")),
    (C.SOURCE, ("Blu-Ray",)),
)
