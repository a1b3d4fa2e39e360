from media_image.config import MediaTypeConfig
from media_image.services.fields import FIELDS_BY_NAME, list_available_fields


def test_basic_fields():
	assert list_available_fields(MediaTypeConfig()) == {
		"mime": "File MIME",
		"width": "Width",
		"height": "Height",
	}


def test_exif_fields_in_order():
	fields = list_available_fields(MediaTypeConfig(gather_exif=True))
	assert list(fields) == ["mime", "width", "height", "model", "created", "iso", "exposure", "aperture", "focal_length"]
	assert fields["model"] == "Camera model"


def test_exif_tags():
	assert {n: f.exif_tag for n, f in FIELDS_BY_NAME.items() if f.requires_exif} == {
		"model": "Model",
		"created": "DateTimeOriginal",
		"iso": "ISOSpeedRatings",
		"exposure": "ExposureTime",
		"aperture": "FNumber",
		"focal_length": "FocalLength",
	}
	assert not FIELDS_BY_NAME["size"].listed
