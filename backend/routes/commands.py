"""Slack slash-command endpoint for /ctt."""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services.game import GameController
from services.session_locks import session_locks
from services.slack_token import get_verify_token, is_valid_token
from services.store import StoreError, get_store

router = APIRouter(tags=["commands"])
logger = logging.getLogger(__name__)

# Slack shows a reply to the whole channel only when asked; its default is requester-only.
RESPONSE_TYPE_IN_CHANNEL = "in_channel"


class SlashCommandResponse(BaseModel):
    text: str
    response_type: str | None = None


@router.post(
    "/commands",
    response_model=SlashCommandResponse,
    response_model_exclude_none=True,
    responses={403: {"description": "Verification token mismatch"}},
)
def run_command(
    token: Annotated[str, Form()] = "",
    channel_id: Annotated[str, Form()] = "",
    user_name: Annotated[str, Form()] = "",
    text: Annotated[str, Form()] = "",
) -> SlashCommandResponse | JSONResponse:
    """Run one /ctt command for the calling user in their channel."""
    expected = get_verify_token()
    if expected is None:
        logger.warning("[commands] SLACK_VERIFY_TOKEN not set; rejecting all commands")
    if not is_valid_token(token, expected):
        logger.info("[commands] Rejected command for channel=%s: bad token", channel_id)
        return JSONResponse(status_code=403, content={"text": "Slack command not supported."})

    logger.info("[commands] /ctt %r from user=%s channel=%s", text, user_name, channel_id)
    try:
        with session_locks.hold(channel_id):
            game = GameController(channel_id, get_store())
            response = game.process_command(user_name, text)
    except StoreError:
        logger.exception("[commands] Store failure for channel=%s", channel_id)
        raise HTTPException(status_code=503, detail="Game state unavailable")

    return SlashCommandResponse(
        text=response.text,
        response_type=RESPONSE_TYPE_IN_CHANNEL if response.broadcast else None,
    )
