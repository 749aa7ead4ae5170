"""pw_topup REST API — Razorpay order creation and payment reconciliation.

Both endpoints are rate-limited per user because they call the gateway.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pw_common.database import get_db_session
from src.pw_common.response import ApiResponse, respond
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_gateway.middleware.rate_limit import rate_limited
from src.pw_gateway.user.db_models import UserModel
from src.pw_topup.application.schemas import CreateOrderRequest, VerifyAndCreditRequest
from src.pw_topup.application.service import TopUpService

router = APIRouter(prefix="/wallet", tags=["topup"])

_service = TopUpService()

topup_rate_limit = rate_limited("topup", settings.TOPUP_RATE_LIMIT_PER_MINUTE)


def get_topup_service() -> TopUpService:
    return _service


@router.post("/create-order", dependencies=[Depends(topup_rate_limit)])
async def create_order(
    body: CreateOrderRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[TopUpService, Depends(get_topup_service)],
    request: Request,
) -> ApiResponse:
    data = await service.create_order(str(current_user.id), body.amount_paise)
    return respond(request, data.model_dump())


@router.post("/verify-and-credit", dependencies=[Depends(topup_rate_limit)])
async def verify_and_credit(
    body: VerifyAndCreditRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TopUpService, Depends(get_topup_service)],
    request: Request,
) -> ApiResponse:
    data = await service.verify_and_credit(
        db,
        str(current_user.id),
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
    )
    message = (
        "Payment already processed"
        if data.already_processed
        else "Wallet credited successfully"
    )
    return respond(request, data.model_dump(), message=message)
