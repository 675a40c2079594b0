"""
Text receipts
=============

Two views of the same Order:

- receipt_lines(): the on-screen receipt shown after checkout
- whatsapp_message(): the WhatsApp summary, shared through a wa.me link

Both read amounts straight from the Order, so they always agree with the
rows written to the spreadsheet.
"""
from typing import List
from urllib.parse import quote

from orders.models import Order
from receipts.formatting import format_naira, format_receipt_date
from settings_store.app_config import AppConfig

WHATSAPP_SHARE_BASE = "https://wa.me/?text="
SEPARATOR = "─" * 35
SKU_NAME_WIDTH = 12


def _payment_text(order: Order) -> str:
    return order.payment_method.value if order.payment_method else ""


def receipt_lines(order: Order, app_config: AppConfig) -> List[str]:
    lines = [
        app_config.company_name,
        app_config.company_address,
        app_config.company_phone,
        "",
        "SALES RECEIPT",
        f"Order ID: {order.id}",
        f"Date: {format_receipt_date(order.transaction_date)}",
        "",
        "Customer Details:",
        order.customer.name,
    ]
    if order.customer.address:
        lines.append(order.customer.address)
    lines.append(order.customer.phone)

    lines += ["", "Items:"]
    for item in order.items:
        lines.append(item.sku.name)
        lines.append(
            f"  {item.quantity} x {format_naira(item.sku.unit_price)} = {format_naira(item.line_total)}"
        )

    lines += [
        "",
        f"Subtotal: {format_naira(order.subtotal)}",
        f"Total: {format_naira(order.total)}",
        "",
        f"Payment Method: {_payment_text(order)}",
        f"Amount Paid: {format_naira(order.amount_paid)}",
    ]
    if order.balance > 0:
        lines.append(f"Balance Due: {format_naira(order.balance)}")

    lines += ["", f"Driver: {order.driver}", "Thank you for your business!"]
    return lines


def receipt_text(order: Order, app_config: AppConfig) -> str:
    return "\n".join(receipt_lines(order, app_config))


def whatsapp_message(order: Order, app_config: AppConfig) -> str:
    parts = [
        "📋 *SALES RECEIPT*",
        f"Order: {order.id}",
        f"Date: {format_receipt_date(order.transaction_date)}",
        f"Driver: {order.driver}",
        "",
        "👤 *Customer:*",
        order.customer.name,
    ]
    if order.customer.address:
        parts.append(order.customer.address)
    parts += [
        order.customer.phone,
        "",
        "🛒 *Items:*",
        SEPARATOR,
        "S/N | SKU | Qty | Price | Total",
        SEPARATOR,
    ]
    for index, item in enumerate(order.items, start=1):
        parts.append(
            f"{index:>2} | {item.sku.name[:SKU_NAME_WIDTH]} | {item.quantity:>2} | "
            f"{format_naira(item.sku.unit_price)} | {format_naira(item.line_total)}"
        )
    parts += [
        SEPARATOR,
        f"💰 *TOTAL: {format_naira(order.total)}*",
        f"💳 Payment: {_payment_text(order)}",
        f"💵 Paid: {format_naira(order.amount_paid)}",
    ]
    if order.balance > 0:
        parts.append(f"🔴 Balance: {format_naira(order.balance)}")
    else:
        parts.append("✅ *PAID IN FULL*")
    parts += [
        "",
        f"🏢 {app_config.company_name}",
        f"📍 {app_config.company_address}",
        f"📞 {app_config.company_phone}",
        "",
        "Thank you for your business! 🙏",
    ]
    return "\n".join(parts)


def whatsapp_share_url(order: Order, app_config: AppConfig) -> str:
    # Same reserved set as JavaScript's encodeURIComponent
    return WHATSAPP_SHARE_BASE + quote(whatsapp_message(order, app_config), safe="-_.!~*'()")
