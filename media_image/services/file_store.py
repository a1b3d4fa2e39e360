from __future__ import annotations

import json
import logging
import mimetypes
import re
import uuid
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_VALID_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class FileStoreError(Exception):
	pass


@dataclass(frozen=True)
class FileHandle:
	uri: str
	mime_type: Optional[str] = None
	size: Optional[int] = None


class FileStore(Protocol):
	def load(self, file_id: Optional[str]) -> Optional[FileHandle]:
		...


class JsonFileStore:
	"""Keeps one ``<id>.json`` record per stored file under ``root``."""

	def __init__(self, root: Path) -> None:
		self.root = Path(root)
		self.root.mkdir(parents=True, exist_ok=True)

	def _record_path(self, file_id: str) -> Path:
		return self.root / f"{file_id}.json"

	def load(self, file_id: Optional[str]) -> Optional[FileHandle]:
		if not file_id or not _VALID_ID.match(str(file_id)):
			return None
		path = self._record_path(str(file_id))
		if not path.exists():
			return None
		try:
			with path.open("r", encoding="utf-8") as f:
				data = json.load(f)
			return FileHandle(
				uri=str(data["uri"]),
				mime_type=data.get("mime_type") or None,
				size=data.get("size"),
			)
		except (OSError, ValueError, KeyError, TypeError) as e:
			logger.warning("Corrupt file record %s: %s", path, e)
			raise FileStoreError(f"corrupt record for file {file_id!r}") from e

	def save(self, file_id: str, uri: str, mime_type: Optional[str] = None, size: Optional[int] = None) -> FileHandle:
		if not _VALID_ID.match(file_id):
			raise FileStoreError(f"invalid file id {file_id!r}")
		handle = FileHandle(uri=uri, mime_type=mime_type, size=size)
		with self._record_path(file_id).open("w", encoding="utf-8") as f:
			json.dump(asdict(handle), f, indent=2)
		logger.debug("Saved file record %s -> %s", file_id, uri)
		return handle

	def register(self, path: Path, mime_type: Optional[str] = None, file_id: Optional[str] = None) -> str:
		path = Path(path)
		if mime_type is None:
			mime_type, _ = mimetypes.guess_type(path.name)
		file_id = file_id or uuid.uuid4().hex
		self.save(file_id, str(path), mime_type, path.stat().st_size)
		return file_id
