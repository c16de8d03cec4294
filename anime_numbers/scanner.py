from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from .elements import ElementCategory
from .keywords import KeywordManager, keyword_manager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaFile:
    path: Path


def is_video_file(path: Path, keywords: KeywordManager = keyword_manager) -> bool:
    ext = path.suffix.lstrip(".")
    if not ext:
        return False
    keyword = keywords.find_and_set(keywords.normalize(ext), ElementCategory.FILE_EXTENSION)
    return keyword is not None and keyword.options.valid


def iter_media_files(root: Path, keywords: KeywordManager = keyword_manager) -> Iterable[MediaFile]:
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        if is_video_file(p, keywords):
            yield MediaFile(path=p)
        else:
            logger.debug("Skipping %s", p)


def list_media_files(root: Path, keywords: KeywordManager = keyword_manager) -> List[MediaFile]:
    media = sorted(iter_media_files(root, keywords), key=lambda m: str(m.path).lower())
    logger.info("Found %d media files under %s", len(media), root)
    return media
