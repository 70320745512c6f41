"""
Dashboard API Endpoints.

Headline KPIs, revenue objective progress and the revenue chart series.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_app_settings, get_store
from api.models import (
    DashboardResponse,
    DashboardStatsResponse,
    GoalProgressResponse,
    PaymentSummaryResponse,
    ProductRankingResponse,
    RevenuePointResponse,
)
from config.settings import Settings
from domain.errors import InvalidInputError
from domain.sales import Granularity
from repositories.store import EntityStore, RepositoryError
from services.analytics_service import DashboardView, load_dashboard

router = APIRouter()


def _to_response(view: DashboardView) -> DashboardResponse:
    stats = view.stats
    return DashboardResponse(
        stats=DashboardStatsResponse(
            revenue=stats.revenue,
            total_orders=stats.total_orders,
            total_messages=stats.total_messages,
            avg_rating=stats.avg_rating,
            conversion_rate=stats.conversion_rate,
            avg_order_value=stats.avg_order_value,
        ),
        goal=GoalProgressResponse(
            objective=view.goal.objective,
            progress_pct=view.goal.progress_pct,
            remaining=view.goal.remaining,
            milestone=view.goal.milestone.value,
        ),
        granularity=view.granularity.value,
        revenue_series=[
            RevenuePointResponse(label=point.label, revenue=point.revenue)
            for point in view.revenue_series
        ],
        top_products=[
            ProductRankingResponse(
                product_name=ranking.product_name,
                quantity_sold=ranking.quantity_sold,
                revenue=ranking.revenue,
            )
            for ranking in view.top_products
        ],
        orders_by_status={status.value: count for status, count in view.orders_by_status.items()},
        payments=PaymentSummaryResponse(
            completed_count=view.payments.completed_count,
            gross_amount=view.payments.gross_amount,
            total_fees=view.payments.total_fees,
            net_amount=view.payments.net_amount,
        ),
    )


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard",
    description="Revenue, order count, messages, average rating, conversion rate and the revenue series."
)
def get_dashboard(
    granularity: str = Query("day", description="Series granularity: 'day', 'week', 'month' or 'year'"),
    top: int = Query(3, ge=1, le=20, description="Number of best-selling products to return"),
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Build the dashboard view.

    Only counted orders (paid, processing, shipped, delivered) contribute to
    revenue, order count, best sellers and the revenue series.

    **Example usage:**
    - Last 7 days: `GET /api/v1/dashboard`
    - Last 4 weeks: `GET /api/v1/dashboard?granularity=week`
    - Last 12 months: `GET /api/v1/dashboard?granularity=year`
    """
    try:
        selected = Granularity(granularity)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid granularity. Must be 'day', 'week', 'month' or 'year', got '{granularity}'"
        )

    try:
        view = load_dashboard(store, selected, settings.revenue_objective, top_products_limit=top)
        return _to_response(view)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RepositoryError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build dashboard: {str(e)}"
        )
