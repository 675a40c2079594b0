"""
Order routes - submit an order to the sheet, then fetch its receipt as
text/WhatsApp link or as a PNG image.
"""
from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

import config
from api.auth.dependencies import get_current_user, get_staff_store
from api.helpers import get_sales_service, http_error, resolve_account_config
from orders.models import SKU
from orders.order_builder import OrderBuilder
from receipts.receipt_image import receipt_png_bytes
from receipts.receipt_text import receipt_lines, receipt_text, whatsapp_message, whatsapp_share_url
from sales_errors import ValidationFailed

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class CartLineRequest(BaseModel):
    sku_id: str
    name: str = Field(..., min_length=1)
    unit_price: Union[int, float] = Field(..., ge=0)
    pack_type: str = ""
    pack_type_2: str = ""
    quantity: int = Field(..., gt=0)


class CustomerRequest(BaseModel):
    name: str = ""
    address: str = ""
    phone: str = ""


class OrderRequest(BaseModel):
    """Checkout request. Driver defaults to the first configured driver."""
    items: List[CartLineRequest]
    customer: CustomerRequest
    payment_method: str = Field(..., description="'Bank Transfer' or 'POS'")
    amount_paid: Optional[Union[int, float]] = Field(None, ge=0, description="Blank or 0 means paid in full")
    driver: Optional[str] = None
    transaction_date: Optional[date] = None


class ReceiptResponse(BaseModel):
    order_id: str
    lines: List[str]
    text: str
    whatsapp_message: str
    whatsapp_url: str


class OrderSubmitResponse(BaseModel):
    order_id: str
    fully_recorded: bool
    total: Union[int, float]
    amount_paid: Union[int, float]
    balance: Union[int, float]
    sales: Dict[str, Any]
    payment: Dict[str, Any]
    receipt: ReceiptResponse


# ── Recent orders, for receipt lookups ────────────────────────────

_submitted_orders: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()


def _remember(order, user: dict, app_config):
    _submitted_orders[order.id] = {"user_id": user["id"], "order": order, "config": app_config}
    while len(_submitted_orders) > config.API_RECENT_ORDER_LIMIT:
        _submitted_orders.popitem(last=False)


def _receipt(order, app_config) -> ReceiptResponse:
    return ReceiptResponse(
        order_id=order.id,
        lines=receipt_lines(order, app_config),
        text=receipt_text(order, app_config),
        whatsapp_message=whatsapp_message(order, app_config),
        whatsapp_url=whatsapp_share_url(order, app_config),
    )


def _get_owned(order_id: str, user: dict) -> Dict[str, Any]:
    entry = _submitted_orders.get(order_id)
    if not entry or entry["user_id"] != user["id"]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return entry


# ── Routes ────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=OrderSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an order",
)
async def submit_order(body: OrderRequest, response: Response, user: dict = Depends(get_current_user)):
    """
    Build the order and append it to the sales and payments tabs.

    Both appends are always attempted. 201 when both succeeded, 207 when at
    least one failed; the per-tab outcomes say which. Validation problems
    return 422 before anything is written.
    """
    app_config = resolve_account_config(user)

    builder = OrderBuilder(app_config.drivers, transaction_date=body.transaction_date)
    try:
        for line in body.items:
            sku = SKU(
                id=line.sku_id,
                name=line.name,
                unit_price=line.unit_price,
                pack_type=line.pack_type,
                pack_type_2=line.pack_type_2,
            )
            builder.add_to_cart(sku, line.quantity)
        builder.set_customer(body.customer.name, body.customer.address, body.customer.phone)
        builder.set_payment_method(body.payment_method)
        builder.set_amount_paid(body.amount_paid)
        if body.driver is not None:
            builder.set_driver(body.driver)
        order = builder.build()
        result = await get_sales_service().submit_order(order, app_config)
    except ValidationFailed as e:
        raise http_error(e)

    _remember(order, user, app_config)
    get_staff_store().record_order(user["id"], order.id)

    if not result.fully_recorded:
        response.status_code = status.HTTP_207_MULTI_STATUS

    outcome = result.to_dict()
    return OrderSubmitResponse(
        order_id=order.id,
        fully_recorded=result.fully_recorded,
        total=order.total,
        amount_paid=order.amount_paid,
        balance=order.balance,
        sales=outcome["sales"],
        payment=outcome["payment"],
        receipt=_receipt(order, app_config),
    )


@router.get(
    "/{order_id}/receipt",
    response_model=ReceiptResponse,
    summary="Receipt text and WhatsApp share link",
)
async def get_receipt(order_id: str, user: dict = Depends(get_current_user)):
    entry = _get_owned(order_id, user)
    return _receipt(entry["order"], entry["config"])


@router.get(
    "/{order_id}/receipt.png",
    summary="Receipt as a PNG image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def get_receipt_image(order_id: str, user: dict = Depends(get_current_user)):
    """Rendered in memory; nothing is written to disk."""
    entry = _get_owned(order_id, user)
    return Response(
        content=receipt_png_bytes(entry["order"], entry["config"]),
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="receipt_{order_id}.png"'},
    )
