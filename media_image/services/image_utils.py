from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageInfo:
	width: Optional[int] = None
	height: Optional[int] = None


class ImageInspector(Protocol):
	def open(self, uri: str) -> ImageInfo:
		...


def _positive_int(v: object) -> Optional[int]:
	if isinstance(v, bool) or not isinstance(v, int):
		return None
	return v if v > 0 else None


class PilImageInspector:
	"""Reads pixel dimensions from the image header with Pillow."""

	def open(self, uri: str) -> ImageInfo:
		try:
			# Image.open only parses the header; pixel data is never decoded here
			with Image.open(uri) as img:
				width, height = img.size
		except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
			logger.warning("Cannot read image %s: %s", uri, e)
			return ImageInfo()
		return ImageInfo(width=_positive_int(width), height=_positive_int(height))
