"""
Widget analysis API route.
Answers a CRM question with a list of visualization widgets generated by Gemini.
"""
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_analysis_service
from insights.analysis import AnalysisService, error_payload, parse_user_cookie
from insights.config import ANALYSIS_CONFIG
from insights.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


class AnalysisRequest(BaseModel):
    """Analysis request body."""
    prompt: str


@router.post("/analise")
async def analyze(
    request: Request,
    service: AnalysisService = Depends(get_analysis_service),
    user: Optional[str] = Cookie(None),
):
    """
    Generate widgets answering the user's question.

    Every failure (invalid body, model unavailable, unparseable output)
    returns the same error payload with status 500.
    """
    try:
        body = AnalysisRequest.model_validate(await request.json())
        identity = parse_user_cookie(user)
        result = await service.analyze(body.prompt, identity.user_id)
        return JSONResponse(content=result, status_code=200)
    except Exception as e:
        logger.exception(f"Erro na análise Gemini: {e}")
        return JSONResponse(content=error_payload(ANALYSIS_CONFIG["error_message"]), status_code=500)
