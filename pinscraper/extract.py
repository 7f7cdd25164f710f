"""Pulling image URLs out of rendered markup and turning them into their full-size form."""

import re
from typing import List

_IMG_SRC_RE = re.compile(r"""<img\b[^>]*?\ssrc=["']([^"']*)["']""", re.IGNORECASE)

# Square crops used for avatars and board covers, never real pins.
THUMBNAIL_MARKERS = ("75x75_RS", "/30x30_RS/")

# Width directories pinimg serves; "/originals/" is the uploaded file.
# Any other width (e.g. /170x/) is left alone.
_SIZE_DIR_RE = re.compile(r"/(?:236x|474x|564x|736x)(?=/)")
ORIGINALS = "/originals"


def extract_image_sources(markup: str) -> List[str]:
    """Every non-empty <img src> in document order. Duplicates are kept."""
    return [src for src in _IMG_SRC_RE.findall(markup or "") if src]


def is_eligible(ref: str) -> bool:
    return not any(marker in ref for marker in THUMBNAIL_MARKERS)


def canonicalize(ref: str) -> str:
    return _SIZE_DIR_RE.sub(ORIGINALS, ref)


def canonical_images(markup: str) -> List[str]:
    return [canonicalize(src) for src in extract_image_sources(markup) if is_eligible(src)]
