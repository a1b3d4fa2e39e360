import pytest
from pydantic import ValidationError

from media_image.config import MediaTypeConfig, Settings


def test_defaults(monkeypatch):
	monkeypatch.delenv("MEDIA_IMAGE_TIMEZONE", raising=False)
	monkeypatch.delenv("MEDIA_IMAGE_GATHER_EXIF", raising=False)
	monkeypatch.delenv("MEDIA_IMAGE_SOURCE_FIELD", raising=False)
	settings = Settings()
	assert settings.timezone == "UTC"
	assert settings.media_type_config() == MediaTypeConfig(source_field="field_media_image", gather_exif=False)


def test_timezone_from_env(monkeypatch):
	monkeypatch.setenv("MEDIA_IMAGE_TIMEZONE", "Europe/Paris")
	assert Settings().timezone == "Europe/Paris"


@pytest.mark.parametrize("tz", ["Mars/Olympus_Mons", "Not a zone"])
def test_unknown_timezone_rejected(monkeypatch, tz):
	monkeypatch.setenv("MEDIA_IMAGE_TIMEZONE", tz)
	with pytest.raises(ValidationError):
		Settings()
