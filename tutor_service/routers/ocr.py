import logging

from fastapi import APIRouter, Depends

from shared.config import get_settings
from shared.errors import APIError, InternalServerError, create_success_response
from shared.rate_limiter import rate_limit

from ..dependencies import get_ocr_service
from ..ocr import OCRService, check_extracted_latex
from ..schemas import OCRRequest

logger = logging.getLogger(__name__)


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api", tags=["ocr"])

    @router.post("/ocr", dependencies=[Depends(rate_limit("OCR"))])
    async def ocr(req: OCRRequest, service: OCRService = Depends(get_ocr_service)):
        if not get_settings().enable_ocr:
            raise APIError("OCR is disabled", 503, "SERVICE_UNAVAILABLE")

        result = await service.extract(req.image, req.options)
        if not result.success:
            raise InternalServerError(result.error or "OCR processing failed")

        passed, warnings = check_extracted_latex(result)
        data = result.model_dump(by_alias=True)
        data["validationPassed"] = passed
        if not passed:
            logger.warning("OCR result failed LaTeX validation: %s", warnings)
            data["warnings"] = warnings
        return create_success_response(data)

    return router
