"""pw_game REST API — paid join, requires Bearer authentication."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.database import get_db_session
from src.pw_common.response import ApiResponse, respond
from src.pw_game.application.join_service import GameJoinService
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_gateway.user.db_models import UserModel

router = APIRouter(prefix="/games", tags=["games"])

_service = GameJoinService()


def get_join_service() -> GameJoinService:
    return _service


@router.post("/{game_id}/join-with-wallet")
async def join_with_wallet(
    game_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[GameJoinService, Depends(get_join_service)],
    request: Request,
) -> ApiResponse:
    data = await service.join_with_wallet(db, str(current_user.id), str(game_id))
    return respond(request, data.model_dump(), message="Successfully joined game using wallet")
