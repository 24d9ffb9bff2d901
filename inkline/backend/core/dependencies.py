"""
Request dependencies shared by the routers.

    DbSession      request-scoped AsyncSession
    RequestId      id assigned by RequestContextMiddleware
    CurrentUserId  owner id from the bearer token; 401 without one
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.config import get_app_config
from inkline.backend.core.database import get_db_session
from inkline.backend.core.exceptions import AuthenticationError, FeatureDisabledError
from inkline.backend.core.security import user_id_from_token

_bearer = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("X-Request-ID") or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    if credentials is None:
        raise AuthenticationError()
    return user_id_from_token(credentials.credentials)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def require_feature(feature: str):
    """
    Dependency that answers 404 FEATURE_DISABLED while ``features.<feature>`` is off.

        @router.get("/share/{share_id}", dependencies=[Depends(require_feature("sharing_enabled"))])
    """

    async def check() -> None:
        if not getattr(get_app_config().features, feature):
            raise FeatureDisabledError(feature)

    return check
