from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import piexif
import pytest
from PIL import Image

from media_image.config import MediaTypeConfig
from media_image.services.file_store import FileHandle, FileStoreError
from media_image.services.image_utils import ImageInfo
from media_image.services.resolver import ImageFieldResolver


class FakeFileStore:
	def __init__(self, files: Optional[Dict[str, FileHandle]] = None) -> None:
		self.files = dict(files or {})
		self.calls = 0

	def load(self, file_id):
		self.calls += 1
		if file_id == "broken":
			raise FileStoreError("broken record")
		return self.files.get(file_id)


class FakeImageInspector:
	def __init__(self, sizes: Optional[Dict[str, ImageInfo]] = None) -> None:
		self.sizes = dict(sizes or {})

	def open(self, uri: str) -> ImageInfo:
		return self.sizes.get(uri, ImageInfo())


class CountingExifReader:
	def __init__(self, tags: Optional[Dict[str, str]] = None) -> None:
		self.tags = tags
		self.calls = 0

	def read(self, uri: str):
		self.calls += 1
		return None if self.tags is None else dict(self.tags)


CANON = FileHandle(uri="/data/canon.jpg", mime_type="image/jpeg", size=2048)


@pytest.fixture
def make_exif_reader():
	return CountingExifReader


@pytest.fixture
def exif_reader() -> CountingExifReader:
	return CountingExifReader({"Model": "Canon EOS", "ISOSpeedRatings": "400"})


@pytest.fixture
def make_resolver(exif_reader: CountingExifReader):
	def _make(gather_exif: bool = True, exif_supported: bool = True, reader=None, **kwargs) -> ImageFieldResolver:
		store = FakeFileStore({"canon": CANON})
		inspector = FakeImageInspector({CANON.uri: ImageInfo(800, 600)})
		return ImageFieldResolver(
			store,
			inspector,
			reader or exif_reader,
			MediaTypeConfig(source_field="field_media_image", gather_exif=gather_exif),
			exif_supported=exif_supported,
			icon_base="public://media-icons",
			**kwargs,
		)

	return _make


def write_jpeg(path: Path, size=(32, 24), exif: Optional[dict] = None) -> Path:
	img = Image.new("RGB", size, color="red")
	if exif is None:
		img.save(path, format="JPEG")
	else:
		img.save(path, format="JPEG", exif=piexif.dump(exif))
	return path


@pytest.fixture
def camera_exif() -> dict:
	return {
		"0th": {
			piexif.ImageIFD.Make: b"Canon",
			piexif.ImageIFD.Model: b"Canon EOS",
		},
		"Exif": {
			piexif.ExifIFD.DateTimeOriginal: b"2021:06:15 12:30:45",
			piexif.ExifIFD.ISOSpeedRatings: 400,
			piexif.ExifIFD.ExposureTime: (1, 250),
			piexif.ExifIFD.FNumber: (28, 10),
			piexif.ExifIFD.FocalLength: (50, 1),
		},
		"GPS": {},
		"1st": {},
		"thumbnail": None,
	}


@pytest.fixture
def jpeg(tmp_path: Path):
	def _jpeg(name: str = "image.jpg", **kwargs) -> Path:
		return write_jpeg(tmp_path / name, **kwargs)

	return _jpeg


@pytest.fixture
def oversized_jpeg(jpeg) -> Path:
	path = jpeg("huge.jpg", size=(16, 16))
	data = bytearray(path.read_bytes())
	# SOF0: marker, length, precision, then height and width
	sof = data.index(b"\xff\xc0")
	data[sof + 5:sof + 9] = (30000).to_bytes(2, "big") * 2
	path.write_bytes(bytes(data))
	return path
