"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Dashboard Models
# ============================================================================

class DashboardStatsResponse(BaseModel):
    """Headline KPIs."""
    revenue: Decimal
    total_orders: int
    total_messages: int
    avg_rating: float
    conversion_rate: float
    avg_order_value: Decimal


class GoalProgressResponse(BaseModel):
    """Progress of counted revenue toward the revenue objective."""
    objective: Decimal
    progress_pct: float
    remaining: Decimal
    milestone: str


class RevenuePointResponse(BaseModel):
    """One labeled bucket of the revenue series."""
    label: str
    revenue: Decimal


class ProductRankingResponse(BaseModel):
    """Best-selling product by quantity sold."""
    product_name: str
    quantity_sold: int
    revenue: Decimal


class PaymentSummaryResponse(BaseModel):
    """Totals over completed payments."""
    completed_count: int
    gross_amount: Decimal
    total_fees: Decimal
    net_amount: Decimal


class DashboardResponse(BaseModel):
    """Response for the dashboard view."""
    stats: DashboardStatsResponse
    goal: GoalProgressResponse
    granularity: str
    revenue_series: List[RevenuePointResponse]
    top_products: List[ProductRankingResponse]
    orders_by_status: Dict[str, int]
    payments: PaymentSummaryResponse

    class Config:
        json_schema_extra = {
            "example": {
                "stats": {
                    "revenue": "1042.40",
                    "total_orders": 12,
                    "total_messages": 230,
                    "avg_rating": 4.4,
                    "conversion_rate": 60.0,
                    "avg_order_value": "86.87"
                },
                "goal": {
                    "objective": "10000",
                    "progress_pct": 10.42,
                    "remaining": "8957.60",
                    "milestone": "started"
                },
                "granularity": "day",
                "revenue_series": [
                    {"label": "J1", "revenue": "120.00"},
                    {"label": "J2", "revenue": "0.00"}
                ],
                "top_products": [
                    {"product_name": "Bougie Vanille", "quantity_sold": 18, "revenue": "450.00"}
                ],
                "orders_by_status": {"paid": 4, "delivered": 8},
                "payments": {
                    "completed_count": 10,
                    "gross_amount": "980.00",
                    "total_fees": "30.92",
                    "net_amount": "949.08"
                }
            }
        }


# ============================================================================
# Contact Models
# ============================================================================

class ContactResponse(BaseModel):
    """Contact with lifetime order stats."""
    id: str
    username: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    customer_type: Optional[str] = None
    total_messages: int
    created_at: datetime
    first_contact_at: Optional[datetime] = None
    last_contact_at: Optional[datetime] = None
    total_orders: int
    total_spent: Decimal

    class Config:
        json_schema_extra = {
            "example": {
                "id": "c6c1c1c8-2f0c-4f4e-9a57-3e1f0b8b9d11",
                "username": "marie.dupont",
                "full_name": "Marie Dupont",
                "email": "marie@example.com",
                "phone": None,
                "customer_type": "customer",
                "total_messages": 14,
                "created_at": "2025-01-01T12:00:00Z",
                "first_contact_at": "2025-01-01T12:00:00Z",
                "last_contact_at": "2025-02-10T08:30:00Z",
                "total_orders": 2,
                "total_spent": "42.40"
            }
        }


class ContactOverviewResponse(BaseModel):
    """Segment counts across all contacts."""
    total: int
    leads: int
    customers: int
    vip: int
    total_revenue: Decimal
    avg_spent: Decimal
    conversion_rate: float


class ContactListResponse(BaseModel):
    """Response for contact listing."""
    contacts: List[ContactResponse]
    overview: ContactOverviewResponse
    total_count: int


class ContactInsightsResponse(BaseModel):
    avg_order_value: Decimal
    days_since_first_contact: int
    days_per_order: int
    loyalty_score: float


class LineItemModel(BaseModel):
    """Single line of an order."""
    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)


class OrderResponse(BaseModel):
    id: str
    order_number: str
    status: str
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str
    created_at: datetime
    paid_at: Optional[datetime] = None
    items: List[LineItemModel]


class ContactDetailResponse(BaseModel):
    """Response for a single contact."""
    contact: ContactResponse
    insights: ContactInsightsResponse
    orders: List[OrderResponse]


# ============================================================================
# Catalog Models
# ============================================================================

class PromotionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    discount_type: str
    discount_value: Decimal
    start_date: date
    end_date: date
    is_active: bool
    product_ids: List[str]


class ProductResponse(BaseModel):
    """Catalog product with its effective price."""
    id: str
    name: str
    category: Optional[str] = None
    sku: Optional[str] = None
    price: Decimal
    final_price: Decimal
    has_discount: bool
    promotion_id: Optional[str] = None
    stock_quantity: int
    is_low_stock: bool
    is_featured: bool

    class Config:
        json_schema_extra = {
            "example": {
                "id": "1",
                "name": "Bougie Vanille",
                "category": "bougies",
                "sku": "BOU-VAN-01",
                "price": "25.00",
                "final_price": "21.25",
                "has_discount": True,
                "promotion_id": "promo_1",
                "stock_quantity": 3,
                "is_low_stock": True,
                "is_featured": True
            }
        }


class CatalogResponse(BaseModel):
    """Response for catalog listing."""
    products: List[ProductResponse]
    active_promotions: List[PromotionResponse]
    total_count: int


# ============================================================================
# Order Quote Models
# ============================================================================

class OrderQuoteRequest(BaseModel):
    """Request to price a basket of line items."""
    items: List[LineItemModel] = Field(
        ...,
        min_length=1,
        description="Line items to price"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": "1", "product_name": "Bougie Vanille", "quantity": 1, "unit_price": "20.00"},
                    {"product_id": "2", "product_name": "Diffuseur", "quantity": 2, "unit_price": "7.00"}
                ]
            }
        }


class OrderQuoteResponse(BaseModel):
    """Computed order totals."""
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str

    class Config:
        json_schema_extra = {
            "example": {
                "subtotal": "34.00",
                "shipping_cost": "9.90",
                "tax_amount": "6.80",
                "discount_amount": "0.00",
                "total_amount": "50.70",
                "currency": "EUR"
            }
        }


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "quantity must be >= 1",
                "status_code": 400
            }
        }
