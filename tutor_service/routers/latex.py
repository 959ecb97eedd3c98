from fastapi import APIRouter

from shared.errors import create_success_response
from latex_tools import LaTeXPostProcessor, LatexValidator

from ..schemas import LatexCleanRequest, LatexValidateRequest


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api/latex", tags=["latex"])

    @router.post("/clean")
    async def clean(req: LatexCleanRequest):
        result = LaTeXPostProcessor.process_response(req.content)
        data = result.model_dump(exclude_none=True)
        data["report"] = LaTeXPostProcessor.generate_report(result)
        return create_success_response(data)

    @router.post("/validate")
    async def validate(req: LatexValidateRequest):
        results = []
        for item in LatexValidator.validate_batch(req.expressions):
            result = item["result"]
            results.append(
                {
                    "latex": item["latex"],
                    **result.model_dump(exclude_none=True),
                    "issues": [
                        issue.model_dump(exclude_none=True)
                        for issue in LaTeXPostProcessor.validate_expression(item["latex"])
                    ],
                }
            )
        return create_success_response({"results": results, "allValid": all(r["valid"] for r in results)})

    return router
