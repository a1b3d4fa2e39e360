"""Field resolution for image media items.

One ``ImageFieldResolver`` is created per request. It answers field queries for
stored image files and reads EXIF data at most once during its lifetime.
"""
from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from media_image.config import MediaTypeConfig
from media_image.services.fields import FIELDS_BY_NAME, list_available_fields
from media_image.services.file_store import FileHandle, FileStore, FileStoreError
from media_image.services.image_utils import ImageInspector
from media_image.services.metadata import ExifReader

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
FALLBACK_ICON = "image.png"


class ExifDateError(ValueError):
	"""Raised when an EXIF datetime cannot be parsed."""

	def __init__(self, raw: str) -> None:
		super().__init__(f"malformed EXIF datetime: {raw!r}")
		self.raw = raw


def get_source_file_reference(entity: Mapping[str, Any], field_name: Optional[str]) -> Optional[str]:
	"""Return the file id stored in ``entity[field_name]``.

	The value may be a plain id, a mapping with a ``target_id`` key, or a list
	of those, of which the first item is used.
	"""
	if not field_name:
		return None
	value = entity.get(field_name)
	if isinstance(value, (list, tuple)):
		value = value[0] if value else None
	if isinstance(value, Mapping):
		value = value.get("target_id")
	if value is None or value == "":
		return None
	return str(value)


def parse_exif_datetime(raw: str, tz: tzinfo) -> int:
	try:
		dt = datetime.strptime(raw, EXIF_DATETIME_FORMAT)
	except ValueError:
		try:
			dt = date_parser.isoparse(raw)
		except (ValueError, OverflowError) as e:
			raise ExifDateError(raw) from e
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=tz)
	return int(dt.timestamp())


class ImageFieldResolver:
	def __init__(
		self,
		file_store: FileStore,
		image_inspector: ImageInspector,
		exif_reader: ExifReader,
		config: MediaTypeConfig,
		exif_supported: bool = True,
		icon_base: str = "",
		timezone: str = "UTC",
	) -> None:
		self.file_store = file_store
		self.image_inspector = image_inspector
		self.exif_reader = exif_reader
		self.config = config
		self.exif_supported = exif_supported
		self.icon_base = icon_base
		self.tz = ZoneInfo(timezone)
		self._exif: Optional[Dict[str, str]] = None

	def provided_fields(self) -> Dict[str, str]:
		return list_available_fields(self.config)

	@property
	def exif_enabled(self) -> bool:
		return self.config.gather_exif and self.exif_supported

	def _load_file(self, file_reference: Optional[str]) -> Optional[FileHandle]:
		if file_reference is None:
			return None
		try:
			return self.file_store.load(file_reference)
		except FileStoreError as e:
			logger.warning("File %s could not be loaded: %s", file_reference, e)
			return None

	def _exif_field(self, uri: str, tag: str) -> Optional[str]:
		if self._exif is None:
			logger.debug("Extracting EXIF data from %s", uri)
			self._exif = self.exif_reader.read(uri) or {}
		value = self._exif.get(tag)
		return value if value else None

	def resolve(self, file_reference: Optional[str], field_name: str) -> Any:
		"""Return the value of ``field_name`` for the file, or None when absent.

		Raises ExifDateError when the ``created`` field holds a malformed datetime.
		"""
		descriptor = FIELDS_BY_NAME.get(field_name)
		if descriptor is None:
			return None
		file = self._load_file(file_reference)
		if file is None:
			return None

		if field_name == "mime":
			return file.mime_type or None
		if field_name in ("width", "height"):
			info = self.image_inspector.open(file.uri)
			value = getattr(info, field_name)
			return value if isinstance(value, int) and value > 0 else None
		if field_name == "size":
			return file.size if isinstance(file.size, int) and file.size > 0 else None

		if not self.exif_enabled:
			return None
		value = self._exif_field(file.uri, descriptor.exif_tag)
		if field_name == "created" and value is not None:
			return parse_exif_datetime(value, self.tz)
		return value

	def resolve_all(self, file_reference: Optional[str]) -> Dict[str, Any]:
		return {name: self.resolve(file_reference, name) for name in self.provided_fields()}

	def thumbnail_path(self, file_reference: Optional[str]) -> str:
		file = self._load_file(file_reference)
		if file is None:
			return f"{self.icon_base}/{FALLBACK_ICON}"
		return file.uri
