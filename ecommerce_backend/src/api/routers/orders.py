"""Cart quotes, checkout and public order tracking."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.deps import get_current_user, get_db
from src.db.models import Profile
from src.schemas.orders import CheckoutRequest, OrderOut, Quote, QuoteRequest, TrackingResult
from src.services import checkout, tracking

router = APIRouter(tags=["Checkout"])


@router.post("/cart/quote", response_model=Quote, summary="Price a cart")
def quote_cart(body: QuoteRequest, db: Session = Depends(get_db)):
    """
    Reprice cart lines from the catalog and compute shipping, discount and total.

    Without a coupon code the best auto-apply coupon (if any) is used.
    """
    return checkout.quote(db, body.items, body.district, body.coupon_code)


@router.post("/checkout", response_model=OrderOut, status_code=201, summary="Place a cash-on-delivery order")
def place_order(
    body: CheckoutRequest,
    user: Optional[Profile] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return checkout.place_order(db, body, user)


@router.get("/orders/track", response_model=TrackingResult, summary="Track an order by number and phone")
def track_order(
    order_id: str = Query(..., description="Order number, with or without a leading #."),
    phone: str = Query(..., description="Phone number used at checkout (or part of it)."),
    db: Session = Depends(get_db),
):
    order = tracking.track_order(db, order_id, phone)
    return tracking.tracking_payload(order)
