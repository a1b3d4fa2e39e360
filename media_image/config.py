from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class MediaTypeConfig(BaseModel):
	"""Per media-type configuration, as stored by the administrative form."""

	source_field: Optional[str] = None
	gather_exif: bool = False


class Settings(BaseSettings):
	"""Application configuration loaded from environment variables or .env file."""

	model_config = SettingsConfigDict(env_prefix="MEDIA_IMAGE_")

	# Storage
	files_dir: Path = Field(Path("files"), description="Directory holding one JSON record per stored file.")
	upload_dir: Path = Field(Path("uploads"), description="Directory receiving uploaded binaries.")

	# Media type
	source_field: Optional[str] = Field("field_media_image", description="Entity field holding the image file.")
	gather_exif: bool = False
	icon_base: str = Field("public://media-icons", description="Base path of the fallback icons.")

	# Used to interpret EXIF datetimes, which carry no offset
	timezone: str = "UTC"

	log_level: str = "INFO"

	@field_validator("timezone")
	@classmethod
	def known_timezone(cls, v: str) -> str:
		try:
			ZoneInfo(v)
		except (ZoneInfoNotFoundError, ValueError) as e:
			raise ValueError(f"unknown timezone {v!r}") from e
		return v

	def media_type_config(self) -> MediaTypeConfig:
		return MediaTypeConfig(source_field=self.source_field, gather_exif=self.gather_exif)


@lru_cache
def get_settings() -> Settings:
	return Settings()


def configure_logging(level: str = "INFO") -> None:
	root = logging.getLogger("media_image")
	root.setLevel(level.upper())
	if not any(getattr(h, "_is_media_image_handler", False) for h in root.handlers):
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
		setattr(handler, "_is_media_image_handler", True)
		root.addHandler(handler)
