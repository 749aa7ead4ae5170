"""pw_wallet REST API — read endpoints, all require Bearer authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pw_common.database import get_db_session
from src.pw_common.response import ApiResponse, respond
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_gateway.user.db_models import UserModel
from src.pw_wallet.application.service import WalletApplicationService

router = APIRouter(prefix="/wallet", tags=["wallet"])

_service = WalletApplicationService()


def get_wallet_service() -> WalletApplicationService:
    return _service


@router.get("/me")
async def get_wallet_summary(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WalletApplicationService, Depends(get_wallet_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_summary(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WalletApplicationService, Depends(get_wallet_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_balance(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WalletApplicationService, Depends(get_wallet_service)],
    request: Request,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=50, description="Items per page"),
) -> ApiResponse:
    data = await service.list_transactions(db, str(current_user.id), page, limit)
    return respond(request, data.model_dump())
