"""
Assistant Routes

Endpoints for AI message summaries and announcement drafts.
Both always answer 200: failures come back as fallback text.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .deps import get_admin_actor, get_current_actor, get_engine
from ..models.draft import Tone
from ..models.user import User
from ..services.engine_service import EngineService

router = APIRouter(prefix="/assistant", tags=["assistant"])


class SummarizeRequest(BaseModel):
    text: str


class DraftRequest(BaseModel):
    topic: str
    tone: Tone = Tone.FORMAL


class DraftResponse(BaseModel):
    subject: str
    content: str
    generated: bool


@router.post("/summarize")
async def summarize(
    request: SummarizeRequest,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Summarize a message body"""
    return {"summary": await engine.assistant_service.summarize(request.text)}


@router.post("/draft", response_model=DraftResponse)
async def draft(
    request: DraftRequest,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Draft an announcement from a short topic"""
    result = await engine.assistant_service.draft(request.topic, request.tone)
    return DraftResponse(**result.to_dict())
