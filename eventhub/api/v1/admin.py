"""Admin reporting API endpoints."""

from fastapi import APIRouter, Query

from eventhub.api.v1.dependencies import AdminUser, ReportServiceDep
from eventhub.schemas.report import (
    DashboardOverview,
    DashboardResponse,
    EventRevenueItem,
    EventStatusCount,
    PaymentSummaryItem,
    TopRegisteredItem,
)
from eventhub.schemas.ticket import TicketResponse

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard statistics",
)
async def dashboard(
    admin: AdminUser,
    report_service: ReportServiceDep,
) -> DashboardResponse:
    data = await report_service.get_dashboard()
    return DashboardResponse(
        overview=DashboardOverview(**data["overview"]),
        events_by_status=[EventStatusCount(**row) for row in data["events_by_status"]],
        recent_bookings=[
            TicketResponse.model_validate(t) for t in data["recent_bookings"]
        ],
    )


@router.get(
    "/revenue/by-event",
    response_model=list[EventRevenueItem],
    summary="Revenue per event",
)
async def revenue_by_event(
    admin: AdminUser,
    report_service: ReportServiceDep,
) -> list[EventRevenueItem]:
    rows = await report_service.get_revenue_by_event()
    return [EventRevenueItem(**row) for row in rows]


@router.get(
    "/payment-summary/by-event",
    response_model=list[PaymentSummaryItem],
    summary="Payment status summary per event",
)
async def payment_summary_by_event(
    admin: AdminUser,
    report_service: ReportServiceDep,
) -> list[PaymentSummaryItem]:
    rows = await report_service.get_payment_summary_by_event()
    return [PaymentSummaryItem.model_validate(row) for row in rows]


@router.get(
    "/events/count-by-status",
    response_model=list[EventStatusCount],
    summary="Count events by status",
)
async def count_events_by_status(
    admin: AdminUser,
    report_service: ReportServiceDep,
) -> list[EventStatusCount]:
    rows = await report_service.count_events_by_status()
    return [EventStatusCount(**row) for row in rows]


@router.get(
    "/events/top-registered",
    response_model=list[TopRegisteredItem],
    summary="Events with the most registrations",
)
async def top_registered(
    admin: AdminUser,
    report_service: ReportServiceDep,
    limit: int = Query(10, ge=1, le=100),
) -> list[TopRegisteredItem]:
    rows = await report_service.get_top_registered(limit=limit)
    return [TopRegisteredItem(**row) for row in rows]
