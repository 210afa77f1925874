from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from staffbot.models.message import BotReply, IncomingMessage
from staffbot.services.message_pipeline import message_pipeline
from staffbot.services.session_service import session_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])


@router.post("/messages", response_model=BotReply)
async def post_message(message: IncomingMessage, response: Response):
    logger.info("Message from session=%s text=%s", message.session_id, message.text[:50])

    reply = await message_pipeline.handle(message)
    if reply.retry_after is not None:
        response.headers["Retry-After"] = str(reply.retry_after)
    return reply


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_session(session_id: str):
    await session_service.clear(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
