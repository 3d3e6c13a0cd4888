#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

Each request gets one unit of work: services share a single session that is
committed when the endpoint returns and rolled back when it raises.
"""

from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import sessionmaker

from core.actors import Actor, ActorRole
from core.app_context import AppContext, Services
from core.config_loader import get_config
from database.repository import MatchRepositoryHub
from database.uow import match_uow


@lru_cache()
def get_app_context() -> AppContext:
    """Process-wide context built from configuration."""
    return AppContext.build(get_config())


def get_session_maker() -> sessionmaker:
    """Session factory for request units of work (overridden in tests)."""
    from database.database import get_session_factory
    return get_session_factory()


def get_repo(
    session_maker: sessionmaker = Depends(get_session_maker)
) -> Generator[MatchRepositoryHub, None, None]:
    """
    FastAPI dependency that yields a repository hub.

    Yields:
        MatchRepositoryHub bound to a session committed after the endpoint.
    """
    with match_uow(session_maker) as repo:
        yield repo


def get_services(
    repo: MatchRepositoryHub = Depends(get_repo),
    ctx: AppContext = Depends(get_app_context)
) -> Services:
    return ctx.services_for(repo)


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_organization_id: Optional[str] = Header(default=None)
) -> Actor:
    """
    Caller identity forwarded by the authentication proxy.

    Headers: X-User-Id, X-User-Role (candidate|hiring_org),
    X-Organization-Id (hiring agents only). The system role belongs to
    in-process jobs and is refused over HTTP.
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="X-User-Id and X-User-Role headers are required")

    try:
        role = ActorRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {x_user_role}")

    if role == ActorRole.SYSTEM:
        raise HTTPException(status_code=403, detail="The system role cannot be used over HTTP")

    if role == ActorRole.HIRING_ORG and not x_organization_id:
        raise HTTPException(status_code=400, detail="X-Organization-Id is required for hiring_org")

    return Actor(
        user_id=x_user_id.strip(),
        role=role,
        organization_id=x_organization_id.strip() if x_organization_id else None
    )
