#!/usr/bin/env python3
"""
Score preview - runs the scoring engine without persisting anything.
"""

from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import get_app_context
from ..models.requests import ScorePreviewRequest
from ..models.responses import ScorePreviewResponse
from ..serializers import score_preview_response

router = APIRouter(prefix="/api/score", tags=["score"])


@router.post("/preview", response_model=ScorePreviewResponse)
def preview_score(
    body: ScorePreviewRequest,
    ctx: AppContext = Depends(get_app_context)
):
    result = ctx.scoring_service.compute_match(body.job, body.candidate)
    return score_preview_response(result)
