"""FastAPI application for the ID card extraction service.

Exposes the extraction pipeline over HTTP and a health check.
"""

from functools import lru_cache

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from starlette.datastructures import UploadFile

from idcard import __version__
from idcard.exceptions import ClientInputError
from idcard.extraction.barcode_extractor import zbar_available
from idcard.pipeline.orchestrator import IDCardPipeline, build_pipeline
from idcard.utils.config import load_config
from idcard.utils.logger import get_logger

from .schemas import HealthResponse, IDCardResponse

logger = get_logger(__name__)

UPLOAD_REQUIRED_MESSAGE = "Please upload an image file."

app = FastAPI(
    title="ID Card Extraction API",
    description="Extract holder name, barcode payload and portrait from ID card photos",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_pipeline() -> IDCardPipeline:
    """Build the shared extraction pipeline from configuration."""
    return build_pipeline(load_config())


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health and availability of the external engines."""
    pipeline = get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=pipeline.name_extractor.ocr_engine.is_available(),
        face_model_available=pipeline.face_extractor.detector.is_available(),
        barcode_available=zbar_available(),
    )


@app.post(
    "/ProcessIDCard",
    response_model=IDCardResponse,
    responses={400: {"description": "No image uploaded"}},
)
async def process_id_card(request: Request) -> Response | IDCardResponse:
    """Extract name, barcode and face photo from an uploaded ID card.

    The card photo is read from the multipart file field ``image``. A
    missing field, a plain text field or an empty file is a client error.

    Returns:
        The three extracted fields, each a value or a sentinel string.
    """
    logger.info("Processing ID card upload")

    form = await request.form()
    image = form.get("image")
    if not isinstance(image, UploadFile):
        return PlainTextResponse(UPLOAD_REQUIRED_MESSAGE, status_code=400)

    content = await image.read()
    if not content:
        return PlainTextResponse(UPLOAD_REQUIRED_MESSAGE, status_code=400)

    try:
        pipeline = get_pipeline()
        result = await pipeline.process_async(content, image.content_type)
    except ClientInputError as exc:
        return PlainTextResponse(str(exc), status_code=400)
    except Exception as exc:
        logger.error("Error processing ID card: %s", exc)
        return Response(status_code=500)

    return IDCardResponse.from_result(result)
