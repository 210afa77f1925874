from __future__ import annotations

import logging

from fastapi import Header, HTTPException, status

from staffbot.core.config import settings

logger = logging.getLogger(__name__)


async def get_current_user_id(x_user_id: str | None = Header(None)) -> int:
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return int(x_user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        ) from e


async def require_admin(x_user_id: str | None = Header(None)) -> int:
    user_id = await get_current_user_id(x_user_id)
    if user_id not in settings.admin_user_ids:
        logger.warning("Admin operation denied for user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Administrator access required",
        )
    return user_id
