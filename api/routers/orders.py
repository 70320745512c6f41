"""
Orders API Endpoints.

Prices a basket of line items with the configured order pricing policy.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_app_settings
from api.models import OrderQuoteRequest, OrderQuoteResponse
from config.settings import Settings
from domain.errors import InvalidInputError
from domain.order import LineItem
from services.order_totals_service import compute_order_totals

router = APIRouter()


@router.post(
    "/orders/quote",
    response_model=OrderQuoteResponse,
    summary="Quote Order Totals",
    description="Compute subtotal, shipping, tax, discount and total for a list of line items."
)
def quote_order(request: OrderQuoteRequest, settings: Settings = Depends(get_app_settings)):
    """
    Compute order totals.

    **Rules:**
    - Shipping is free above 200.00, otherwise the flat rate
    - Tax is 20% of the subtotal
    - Orders above 300.00 get a 5% discount

    **Example request:**
    ```json
    {
      "items": [
        {"product_id": "1", "product_name": "Bougie Vanille", "quantity": 1, "unit_price": "20.00"},
        {"product_id": "2", "product_name": "Diffuseur", "quantity": 2, "unit_price": "7.00"}
      ]
    }
    ```
    """
    try:
        items = [
            LineItem(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in request.items
        ]
        totals = compute_order_totals(items, settings.order_policy)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return OrderQuoteResponse(
        subtotal=totals.subtotal,
        shipping_cost=totals.shipping_cost,
        tax_amount=totals.tax_amount,
        discount_amount=totals.discount_amount,
        total_amount=totals.total_amount,
        currency="EUR",
    )
