from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from loguru import logger
from ..deps import get_relay
from ...core.config import settings
from ...core.errors import BadRequest, InternalError, MethodNotAllowed, RelayError
from ...services.uploads import spool_upload
from ...services.vision_parser import VisionParserRelay

router = APIRouter(prefix="/api", tags=["invoices"])


@router.post("/parse-invoice")
async def parse_invoice(
    file: UploadFile | None = File(None),
    apiKey: str | None = Form(None),
    relay: VisionParserRelay = Depends(get_relay),
):
    """
    Relay one uploaded invoice to Vision Parser and return its JSON verbatim.

    Accepts multipart/form-data with:
    - file: the invoice (PDF, JPG, JPEG or PNG; at most MAX_UPLOAD_BYTES)
    - apiKey: optional Vision Parser key overriding VISION_PARSER_API_KEY

    Errors come back as {"message": ..., "error": ...}:
    400 no file, 413 too large, upstream status on provider errors, 500 otherwise.
    """
    logger.info("API route started")
    try:
        key = relay.resolve_api_key(apiKey)

        if file is None or not file.filename:
            raise BadRequest("No file uploaded")

        logger.info("Form data processed", filename=file.filename, content_type=file.content_type)
        async with spool_upload(file, settings.upload_dir, settings.max_upload_bytes) as path:
            upstream = await relay.forward(
                path,
                filename=file.filename,
                content_type=file.content_type,
                api_key=key,
            )
        return Response(content=upstream.content, status_code=200, media_type="application/json")
    except RelayError:
        raise
    except Exception as e:
        logger.exception(f"Error in API route: {e}")
        raise InternalError(str(e) or e.__class__.__name__) from e


@router.api_route("/parse-invoice", methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"], include_in_schema=False)
async def parse_invoice_method_not_allowed():
    raise MethodNotAllowed()
