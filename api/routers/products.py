"""
Products API Endpoints.

Catalog listing with the promotion that applies right now.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_clock, get_store
from api.models import CatalogResponse, ProductResponse, PromotionResponse
from domain.errors import InvalidInputError
from repositories.store import EntityStore, RepositoryError
from services.analytics_service import load_catalog

router = APIRouter()


@router.get(
    "/products",
    response_model=CatalogResponse,
    summary="List Products",
    description="Catalog products with their effective price after the active promotion."
)
def get_products(
    featured_only: bool = Query(False, description="Only featured products"),
    active_only: bool = Query(True, description="Hide products that are switched off"),
    store: EntityStore = Depends(get_store),
    now: datetime = Depends(get_clock),
):
    """
    List catalog products.

    A product shows at most one promotion: the first active promotion (in
    creation order) whose date window contains today.
    """
    try:
        catalog = load_catalog(store, now)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RepositoryError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load catalog: {str(e)}"
        )

    products = [
        ProductResponse(
            id=priced.product.id,
            name=priced.product.name,
            category=priced.product.category,
            sku=priced.product.sku,
            price=priced.product.price,
            final_price=priced.final_price,
            has_discount=priced.has_discount,
            promotion_id=priced.promotion.id if priced.promotion else None,
            stock_quantity=priced.product.stock_quantity,
            is_low_stock=priced.is_low_stock,
            is_featured=priced.product.is_featured,
        )
        for priced in catalog.products
        if (not featured_only or priced.product.is_featured)
        and (not active_only or priced.product.is_active)
    ]

    promotions = [
        PromotionResponse(
            id=promo.id,
            name=promo.name,
            description=promo.description,
            discount_type=promo.discount_type.value,
            discount_value=promo.discount_value,
            start_date=promo.start_date,
            end_date=promo.end_date,
            is_active=promo.is_active,
            product_ids=sorted(promo.product_ids),
        )
        for promo in catalog.active_promotions
    ]

    return CatalogResponse(products=products, active_promotions=promotions, total_count=len(products))
