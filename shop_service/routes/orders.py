# shop_service/routes/orders.py
from typing import List

import structlog
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth import require_admin
from shop_service.checkout import CheckoutOrchestrator, CheckoutRequest
from shop_service.db.cart import CartStore
from shop_service.db.database import get_db
from shop_service.db.orders import OrderLedger
from shop_service.db.schemas import OkResponse, OrderCreate, OrderCreatedResponse, OrderResponse, OrderStatusUpdate
from shop_service.notifications import NotificationDispatcher
from shop_service.routes.cart import get_cart_store

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_ledger(db: AsyncSession = Depends(get_db)) -> OrderLedger:
    return OrderLedger(db)


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_orchestrator(
    cart: CartStore = Depends(get_cart_store),
    ledger: OrderLedger = Depends(get_order_ledger),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(cart, ledger, dispatcher)


@router.get("/admin/all", response_model=List[OrderResponse], dependencies=[Depends(require_admin)])
async def list_all_orders(ledger: OrderLedger = Depends(get_order_ledger)):
    return await ledger.list_all()


@router.patch("/order/{order_id}/status", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def update_order_status(order_id: int, body: OrderStatusUpdate, ledger: OrderLedger = Depends(get_order_ledger)):
    order = await ledger.set_status(order_id, body.status)
    logger.info("order_status_changed", order_id=order_id, status=order.status.value)
    return {"ok": True}


@router.get("/{user_id}", response_model=List[OrderResponse])
async def list_orders(user_id: str, ledger: OrderLedger = Depends(get_order_ledger)):
    return await ledger.list_orders(user_id)


@router.post("/{user_id}", response_model=OrderCreatedResponse, status_code=201)
async def create_order(user_id: str, body: OrderCreate, orchestrator: CheckoutOrchestrator = Depends(get_orchestrator)):
    result = await orchestrator.checkout(user_id, CheckoutRequest(**body.model_dump()))
    return {"ok": True, "orderId": result.order_id}
