"""pw_settlement REST API — share payment and per-game payment status."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.database import get_db_session
from src.pw_common.response import ApiResponse, respond
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_gateway.user.db_models import UserModel
from src.pw_settlement.application.schemas import PayShareRequest
from src.pw_settlement.application.service import SettlementService

router = APIRouter(prefix="/wallet", tags=["settlement"])

_service = SettlementService()


def get_settlement_service() -> SettlementService:
    return _service


@router.post("/pay-game")
async def pay_game(
    body: PayShareRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[SettlementService, Depends(get_settlement_service)],
    request: Request,
) -> ApiResponse:
    data = await service.pay_share(
        db, str(current_user.id), str(body.game_id), body.total_price_paise
    )
    message = "Game already paid" if data.already_paid else "Payment successful"
    return respond(request, data.model_dump(), message=message)


@router.get("/game/{game_id}/status")
async def game_payment_status(
    game_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[SettlementService, Depends(get_settlement_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_game_status(db, str(game_id))
    return respond(request, data.model_dump())
