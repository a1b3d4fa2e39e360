from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from media_image.config import MediaTypeConfig

ALLOWED_FIELD_TYPES = ("file", "image")


class SettingsFormError(ValueError):
	pass


@dataclass(frozen=True)
class FieldDefinition:
	name: str
	label: str
	type: str
	is_base_field: bool = False


def source_field_options(field_definitions: Iterable[FieldDefinition]) -> Dict[str, str]:
	return {
		f.name: f.label
		for f in field_definitions
		if f.type in ALLOWED_FIELD_TYPES and not f.is_base_field
	}


def build_settings_form(
	field_definitions: Iterable[FieldDefinition],
	config: MediaTypeConfig,
	exif_supported: bool,
) -> Dict[str, Dict[str, Any]]:
	return {
		"source_field": {
			"type": "select",
			"title": "Field with source information",
			"description": "Field on media entity that stores Image file.",
			"default_value": config.source_field or None,
			"options": source_field_options(field_definitions),
		},
		"gather_exif": {
			"type": "select",
			"title": "Whether to gather exif data.",
			"description": "Gather exif data from the image file.",
			"default_value": 1 if config.gather_exif and exif_supported else 0,
			"options": {0: "No", 1: "Yes"},
			"disabled": not exif_supported,
		},
	}


def submit_settings_form(
	field_definitions: Iterable[FieldDefinition],
	values: Dict[str, Any],
	exif_supported: bool,
) -> MediaTypeConfig:
	"""Validate submitted form values into a MediaTypeConfig."""
	config = MediaTypeConfig.model_validate(values)
	options = source_field_options(field_definitions)
	if config.source_field is not None and config.source_field not in options:
		raise SettingsFormError(f"{config.source_field!r} is not a file or image field")
	if not exif_supported:
		config = config.model_copy(update={"gather_exif": False})
	return config
