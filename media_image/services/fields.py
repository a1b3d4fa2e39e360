from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from media_image.config import MediaTypeConfig


@dataclass(frozen=True)
class FieldDescriptor:
	name: str
	label: str
	exif_tag: Optional[str] = None
	listed: bool = True

	@property
	def requires_exif(self) -> bool:
		return self.exif_tag is not None


FIELDS: Tuple[FieldDescriptor, ...] = (
	FieldDescriptor("mime", "File MIME"),
	FieldDescriptor("width", "Width"),
	FieldDescriptor("height", "Height"),
	# resolvable, but not advertised to the host
	FieldDescriptor("size", "File size", listed=False),
	FieldDescriptor("model", "Camera model", "Model"),
	FieldDescriptor("created", "Image creation datetime", "DateTimeOriginal"),
	FieldDescriptor("iso", "Iso", "ISOSpeedRatings"),
	FieldDescriptor("exposure", "Exposure time", "ExposureTime"),
	FieldDescriptor("aperture", "Aperture value", "FNumber"),
	FieldDescriptor("focal_length", "Focal length", "FocalLength"),
)

FIELDS_BY_NAME: Dict[str, FieldDescriptor] = {f.name: f for f in FIELDS}


def list_available_fields(config: MediaTypeConfig) -> Dict[str, str]:
	fields: Dict[str, str] = {}
	for f in FIELDS:
		if not f.listed:
			continue
		if f.requires_exif and not config.gather_exif:
			continue
		fields[f.name] = f.label
	return fields
