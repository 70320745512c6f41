"""
Contacts API Endpoints.

Contact list with lifetime stats and a per-contact detail view.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_clock, get_store
from api.models import (
    ContactDetailResponse,
    ContactInsightsResponse,
    ContactListResponse,
    ContactOverviewResponse,
    ContactResponse,
    LineItemModel,
    OrderResponse,
)
from domain.contact import ContactWithStats, CustomerType
from domain.errors import InvalidInputError
from domain.order import Order
from repositories.store import EntityStore, RepositoryError
from services.analytics_service import load_contact_detail, load_contacts

router = APIRouter()


def contact_response(enriched: ContactWithStats) -> ContactResponse:
    contact = enriched.contact
    return ContactResponse(
        id=contact.id,
        username=contact.username,
        full_name=contact.full_name,
        email=contact.email,
        phone=contact.phone,
        customer_type=contact.customer_type.value if contact.customer_type else None,
        total_messages=contact.total_messages,
        created_at=contact.created_at,
        first_contact_at=contact.first_contact_at,
        last_contact_at=contact.last_contact_at,
        total_orders=enriched.total_orders,
        total_spent=enriched.total_spent,
    )


def order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        status=order.status.value,
        subtotal=order.subtotal,
        shipping_cost=order.shipping_cost,
        tax_amount=order.tax_amount,
        discount_amount=order.discount_amount,
        total_amount=order.total_amount,
        currency=order.currency,
        created_at=order.created_at,
        paid_at=order.paid_at,
        items=[
            LineItemModel(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
    )


@router.get(
    "/contacts",
    response_model=ContactListResponse,
    summary="List Contacts",
    description="All contacts, newest first, with order count, lifetime spend and the segment overview."
)
def get_contacts(
    customer_type: Optional[str] = Query(None, description="Filter by type ('lead', 'customer' or 'vip')"),
    store: EntityStore = Depends(get_store),
):
    """
    List contacts with their derived stats.

    The overview always covers every contact; `customer_type` only filters
    the returned list.
    """
    wanted = None
    if customer_type:
        try:
            wanted = CustomerType(customer_type)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid customer_type. Must be 'lead', 'customer' or 'vip', got '{customer_type}'"
            )

    try:
        view = load_contacts(store)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RepositoryError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load contacts: {str(e)}"
        )

    contacts = [
        contact_response(enriched)
        for enriched in view.contacts
        if wanted is None or enriched.contact.customer_type is wanted
    ]
    overview = view.overview

    return ContactListResponse(
        contacts=contacts,
        overview=ContactOverviewResponse(
            total=overview.total,
            leads=overview.leads,
            customers=overview.customers,
            vip=overview.vip,
            total_revenue=overview.total_revenue,
            avg_spent=overview.avg_spent,
            conversion_rate=overview.conversion_rate,
        ),
        total_count=len(contacts),
    )


@router.get(
    "/contacts/{contact_id}",
    response_model=ContactDetailResponse,
    summary="Contact Detail",
    description="One contact with stats, loyalty insights and full order history."
)
def get_contact(
    contact_id: str,
    store: EntityStore = Depends(get_store),
    now: datetime = Depends(get_clock),
):
    try:
        detail = load_contact_detail(store, contact_id, now)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RepositoryError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load contact {contact_id}: {str(e)}"
        )

    if detail is None:
        raise HTTPException(status_code=404, detail=f"Contact not found: {contact_id}")

    insights = detail.insights
    return ContactDetailResponse(
        contact=contact_response(detail.contact),
        insights=ContactInsightsResponse(
            avg_order_value=insights.avg_order_value,
            days_since_first_contact=insights.days_since_first_contact,
            days_per_order=insights.days_per_order,
            loyalty_score=insights.loyalty_score,
        ),
        orders=[order_response(order) for order in detail.orders],
    )
