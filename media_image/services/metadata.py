from __future__ import annotations

import importlib.util
import logging
import struct
from typing import Any, Dict, Optional, Protocol

import piexif

logger = logging.getLogger(__name__)

# IFDs whose tags are exposed, in lookup order; later IFDs win on name clashes
_IFDS = ("0th", "Exif")


class ExifReader(Protocol):
	def read(self, uri: str) -> Optional[Dict[str, str]]:
		...


def exif_supported() -> bool:
	return importlib.util.find_spec("piexif") is not None


_RATIONAL_TYPES = (piexif.TYPES.Rational, piexif.TYPES.SRational)


def _rational_to_str(x: Any) -> str:
	num, den = x
	return f"{num}/{den}"


def _bytes_to_str(v: bytes) -> str:
	return v.decode("utf-8", errors="ignore").rstrip("\x00").strip()


def format_exif_value(v: Any, tag_type: Optional[int] = None) -> Optional[str]:
	if v is None:
		return None
	if isinstance(v, bytes):
		return _bytes_to_str(v)
	if isinstance(v, str):
		return v.strip()
	if not isinstance(v, (list, tuple)):
		return str(v)
	if not v:
		return None
	if tag_type in _RATIONAL_TYPES:
		# a single rational is (num, den), several are ((num, den), ...)
		return _rational_to_str(v[0] if isinstance(v[0], (list, tuple)) else v)
	return str(v[0])


class PiexifReader:
	"""Maps EXIF tag names to string values using piexif."""

	def read(self, uri: str) -> Optional[Dict[str, str]]:
		try:
			ex = piexif.load(uri)
		except (OSError, ValueError, struct.error, piexif.InvalidImageDataError) as e:
			logger.warning("EXIF data unavailable for %s: %s", uri, e)
			return None
		tags: Dict[str, str] = {}
		for ifd in _IFDS:
			for tag_id, value in (ex.get(ifd) or {}).items():
				info = piexif.TAGS.get(ifd, {}).get(tag_id)
				if info is None:
					continue
				formatted = format_exif_value(value, info.get("type"))
				if formatted is not None:
					tags[info["name"]] = formatted
		logger.debug("Read %d EXIF tags from %s", len(tags), uri)
		return tags
