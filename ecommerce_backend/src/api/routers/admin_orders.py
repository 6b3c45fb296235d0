"""Admin order management: listing, status changes, the order editor and invoices."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_admin
from src.core.errors import NotFoundError, ValidationError
from src.db.models import Coupon, Order, Product
from src.schemas.orders import DraftAction, DraftEditRequest, OrderDraft, OrderOut, StatusUpdate
from src.services import order_editing, store_settings

router = APIRouter(prefix="/admin/orders", tags=["Admin: Orders"], dependencies=[Depends(require_admin)])


def _order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


def _coupons(db: Session) -> List[Coupon]:
    return list(db.scalars(select(Coupon)))


@router.get("", response_model=List[OrderOut], summary="Orders, newest first")
def list_orders(status: Optional[str] = None, q: str = "", db: Session = Depends(get_db)):
    """Optionally filter by status, and by order number, customer name or phone via `q`."""
    stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    if status:
        stmt = stmt.where(Order.status == status)
    orders = list(db.scalars(stmt))
    needle = q.strip().lower().lstrip("#")
    if needle:
        orders = [
            o
            for o in orders
            if needle == str(o.id) or needle in (o.customer_name or "").lower() or needle in (o.customer_phone or "")
        ]
    return orders


@router.get("/{order_id}", response_model=OrderOut, summary="One order")
def get_order(order_id: int, db: Session = Depends(get_db)):
    return _order(db, order_id)


@router.patch("/{order_id}/status", response_model=OrderOut, summary="Change an order's status")
def update_status(order_id: int, body: StatusUpdate, db: Session = Depends(get_db)):
    return order_editing.update_order_status(db, order_id, body.status)


@router.get("/{order_id}/draft", response_model=OrderDraft, summary="Editable copy of an order")
def get_draft(order_id: int, db: Session = Depends(get_db)):
    return order_editing.order_to_draft(_order(db, order_id))


def _apply(db: Session, draft: dict, action: DraftAction, coupons: List[Coupon]) -> dict:
    if action.action == "remove_item":
        return order_editing.remove_item(draft, action.index, coupons)
    if action.action == "change_quantity":
        return order_editing.change_item_quantity(draft, action.index, action.delta or 0, coupons)
    if action.action == "change_shipping":
        if action.shipping_cents is None:
            raise ValidationError("shipping_cents is required.")
        return order_editing.change_shipping(draft, action.shipping_cents, coupons)
    if action.action == "update_customer":
        return order_editing.update_customer_info(draft, action.field or "", action.value)
    product = db.get(Product, action.product_id) if action.product_id is not None else None
    if product is None:
        raise NotFoundError(f"Product {action.product_id} not found.")
    variant = None
    if action.variant_id is not None:
        variant = next((v for v in product.variants if v.id == action.variant_id), None)
        if variant is None:
            raise NotFoundError(f"Variant {action.variant_id} not found.")
    return order_editing.add_product(draft, product, variant, coupons)


@router.post("/{order_id}/draft", response_model=OrderDraft, summary="Apply editor actions to a draft")
def edit_draft(order_id: int, body: DraftEditRequest, db: Session = Depends(get_db)):
    """Stateless: returns the draft with every action applied and totals recalculated."""
    _order(db, order_id)
    coupons = _coupons(db)
    draft = body.draft.model_dump()
    for action in body.actions:
        draft = _apply(db, draft, action, coupons)
    return draft


@router.put("/{order_id}", response_model=OrderOut, summary="Save an edited order")
def save_order(order_id: int, body: OrderDraft, db: Session = Depends(get_db)):
    return order_editing.save_order_edits(db, order_id, body.model_dump(), _coupons(db))


@router.delete("/{order_id}", status_code=204, summary="Delete an order")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    db.delete(_order(db, order_id))
    db.commit()


@router.get("/{order_id}/invoice", response_class=HTMLResponse, summary="Printable invoice")
def invoice(order_id: int, db: Session = Depends(get_db)):
    info = store_settings.store_info(db)
    return order_editing.render_invoice(_order(db, order_id), info["name"], info.get("address") or "")
