from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from media_image.config import configure_logging, get_settings
from media_image.routers.media_fields import router as media_router
from media_image.services.resolver import ExifDateError


async def exif_date_error_handler(request: Request, exc: ExifDateError) -> JSONResponse:
	return JSONResponse(status_code=422, content={"detail": str(exc), "raw": exc.raw})


def create_app() -> FastAPI:
	settings = get_settings()
	configure_logging(settings.log_level)

	app = FastAPI(title="Media Image - field resolver API", version="0.1.0")

	# CORS (adjust origins in production)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=["*"],
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	# Routers
	app.include_router(media_router)

	app.add_exception_handler(ExifDateError, exif_date_error_handler)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn media_image.main:app --reload
	import uvicorn

	uvicorn.run("media_image.main:app", host="0.0.0.0", port=8000, reload=True)
