from fastapi import APIRouter, Depends

from shared.errors import create_success_response
from shared.rate_limiter import rate_limit

from ..agent import TutorAgent
from ..dependencies import get_tutor_agent
from ..schemas import AITutorRequest


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api/ai", tags=["ai_tutor"])

    @router.post("/tutor", dependencies=[Depends(rate_limit("AI_TUTOR"))])
    async def tutor(req: AITutorRequest, agent: TutorAgent = Depends(get_tutor_agent)):
        """Answer one tutoring turn in Socratic or explanation mode."""
        data = await agent.respond(req)
        return create_success_response(data)

    return router
