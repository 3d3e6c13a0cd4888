#!/usr/bin/env python3
"""
Job endpoints - candidate ranking.
"""

import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.actors import Actor
from core.app_context import Services
from ..dependencies import get_actor, get_services
from ..models.responses import RankingResponse
from ..serializers import ranked_matches

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("/{job_id}/ranking", response_model=RankingResponse)
def rank_candidates(
    job_id: uuid.UUID,
    include_rejected: bool = Query(default=False, description="Show all, including rejected candidates"),
    limit: Optional[int] = Query(default=None, ge=1, le=500, description="Maximum results to return"),
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """Candidates for a job, best score first; ties go to the earlier match."""
    matches = services.ranking.rank_candidates(
        job_id, include_rejected=include_rejected, limit=limit, actor=actor
    )
    return RankingResponse(
        job_id=str(job_id),
        count=len(matches),
        include_rejected=include_rejected,
        matches=ranked_matches(matches)
    )
