from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from media_image.config import MediaTypeConfig, Settings, get_settings
from media_image.services.fields import list_available_fields
from media_image.services.file_store import FileStoreError, JsonFileStore
from media_image.services.image_utils import PilImageInspector
from media_image.services.metadata import PiexifReader, exif_supported
from media_image.services.resolver import ImageFieldResolver, get_source_file_reference
from media_image.services.settings_form import (
	FieldDefinition,
	SettingsFormError,
	build_settings_form,
	submit_settings_form,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])

# Field definitions of the media bundle the settings form offers as sources
MEDIA_FIELD_DEFINITIONS: List[FieldDefinition] = [
	FieldDefinition("mid", "ID", "integer", is_base_field=True),
	FieldDefinition("thumbnail", "Thumbnail", "image", is_base_field=True),
	FieldDefinition("field_media_image", "Image", "image"),
	FieldDefinition("field_media_file", "File", "file"),
]


def _slugify(text: str) -> str:
	return "".join(ch if (ch.isalnum() or ch in ("-", "_")) else "-" for ch in text).strip("-_").lower()


def get_file_store(settings: Settings = Depends(get_settings)) -> JsonFileStore:
	return JsonFileStore(settings.files_dir)


def get_resolver(
	settings: Settings = Depends(get_settings),
	file_store: JsonFileStore = Depends(get_file_store),
) -> ImageFieldResolver:
	# One resolver per request, so the EXIF cache never outlives it
	return ImageFieldResolver(
		file_store,
		PilImageInspector(),
		PiexifReader(),
		settings.media_type_config(),
		exif_supported=exif_supported(),
		icon_base=settings.icon_base,
		timezone=settings.timezone,
	)


@router.get("/fields", summary="List the fields provided for image media")
def fields(gather_exif: bool = False) -> Dict[str, str]:
	return list_available_fields(MediaTypeConfig(gather_exif=gather_exif))


@router.get("/files/{file_id}/fields", summary="Resolve every provided field of a file")
def all_fields(file_id: str, resolver: ImageFieldResolver = Depends(get_resolver)) -> Dict[str, Any]:
	return {"file_id": file_id, "fields": resolver.resolve_all(file_id)}


@router.get("/files/{file_id}/fields/{name}", summary="Resolve a single field of a file")
def field(file_id: str, name: str, resolver: ImageFieldResolver = Depends(get_resolver)) -> Dict[str, Any]:
	return {"file_id": file_id, "name": name, "value": resolver.resolve(file_id, name)}


@router.get("/files/{file_id}/thumbnail", summary="Thumbnail path of a file")
def thumbnail(file_id: str, resolver: ImageFieldResolver = Depends(get_resolver)) -> Dict[str, str]:
	return {"file_id": file_id, "thumbnail": resolver.thumbnail_path(file_id)}


@router.post("/entity/fields", summary="Resolve every provided field of a media entity")
def entity_fields(entity: Dict[str, Any], resolver: ImageFieldResolver = Depends(get_resolver)) -> Dict[str, Any]:
	file_id = get_source_file_reference(entity, resolver.config.source_field)
	return {"file_id": file_id, "fields": resolver.resolve_all(file_id)}


@router.post("/entity/thumbnail", summary="Thumbnail path of a media entity")
def entity_thumbnail(entity: Dict[str, Any], resolver: ImageFieldResolver = Depends(get_resolver)) -> Dict[str, Any]:
	file_id = get_source_file_reference(entity, resolver.config.source_field)
	return {"file_id": file_id, "thumbnail": resolver.thumbnail_path(file_id)}

@router.post("/files", summary="Upload an image and register it in the file store")
def upload(
	file: UploadFile = File(...),
	settings: Settings = Depends(get_settings),
	file_store: JsonFileStore = Depends(get_file_store),
) -> Dict[str, Any]:
	name = Path(file.filename or "image.jpg").name
	upload_dir = Path(settings.upload_dir)
	upload_dir.mkdir(parents=True, exist_ok=True)
	file_id = uuid.uuid4().hex
	target = upload_dir / f"{_slugify(Path(name).stem) or 'image'}_{file_id[:8]}{Path(name).suffix.lower()}"
	with target.open("wb") as f:
		shutil.copyfileobj(file.file, f)
	try:
		file_store.register(target, mime_type=file.content_type or None, file_id=file_id)
	except FileStoreError as e:
		raise HTTPException(status_code=400, detail=str(e)) from e
	logger.info("Registered upload %s as %s", target, file_id)
	return {"file_id": file_id, "uri": str(target)}


@router.get("/settings-form", summary="Administrative settings form for image media")
def settings_form(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
	return build_settings_form(MEDIA_FIELD_DEFINITIONS, settings.media_type_config(), exif_supported())


@router.post("/settings-form", summary="Validate submitted settings")
def submit_settings(values: Dict[str, Any]) -> Dict[str, Any]:
	try:
		config = submit_settings_form(MEDIA_FIELD_DEFINITIONS, values, exif_supported())
	except (SettingsFormError, ValueError) as e:
		raise HTTPException(status_code=422, detail=str(e)) from e
	return config.model_dump()
