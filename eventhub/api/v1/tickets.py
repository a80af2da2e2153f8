"""Tickets API endpoints."""

from fastapi import APIRouter, Query, status

from eventhub.api.v1.dependencies import (
    CurrentUser,
    PurchaseServiceDep,
    TicketServiceDep,
)
from eventhub.models.ticket import PaymentStatus, Ticket
from eventhub.schemas.common import PaginatedResponse
from eventhub.schemas.ticket import (
    CancellationResponse,
    PurchaseRequest,
    PurchaseResponse,
    ReceiptResponse,
    TicketDetailResponse,
    TicketEventSummary,
    TicketResponse,
)

router = APIRouter()


def to_ticket_detail(ticket: Ticket) -> TicketDetailResponse:
    """Ticket with its event summary. The event relationship must be loaded."""
    return TicketDetailResponse(
        **TicketResponse.model_validate(ticket).model_dump(),
        event=TicketEventSummary.model_validate(ticket.event),
    )


@router.post(
    "/purchase",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Purchase tickets",
)
async def purchase_tickets(
    purchase_data: PurchaseRequest,
    current_user: CurrentUser,
    purchase_service: PurchaseServiceDep,
) -> PurchaseResponse:
    """
    Purchase tickets for an upcoming event.

    Availability is re-checked at commit time under a per-event lock, so
    concurrent purchases can never oversell an event.
    """
    result = await purchase_service.purchase(
        user_id=current_user.user_id,
        event_id=purchase_data.event_id,
        quantity=purchase_data.quantity,
        payment_method=purchase_data.payment_method,
        card_last_four=purchase_data.payment_details.card_last_four,
    )

    return PurchaseResponse(
        ticket=TicketResponse.model_validate(result.ticket),
        event=TicketEventSummary.model_validate(result.event),
        receipt=ReceiptResponse(
            transaction_id=result.payment.transaction_id,
            payment_date=result.payment.paid_at,
            payment_method=result.payment.method,
        ),
    )


@router.get(
    "/my-tickets",
    response_model=PaginatedResponse[TicketDetailResponse],
    summary="Get my tickets",
)
async def get_my_tickets(
    current_user: CurrentUser,
    ticket_service: TicketServiceDep,
    status_filter: PaymentStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> PaginatedResponse[TicketDetailResponse]:
    tickets, total = await ticket_service.list_user_tickets(
        current_user.user_id,
        status=status_filter,
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse.of(
        [to_ticket_detail(t) for t in tickets],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{ticket_id}",
    response_model=TicketDetailResponse,
    summary="Get ticket details",
)
async def get_ticket(
    ticket_id: int,
    current_user: CurrentUser,
    ticket_service: TicketServiceDep,
) -> TicketDetailResponse:
    ticket = await ticket_service.get_ticket(current_user, ticket_id)
    return to_ticket_detail(ticket)


@router.post(
    "/{ticket_id}/cancel",
    response_model=CancellationResponse,
    summary="Cancel ticket",
)
async def cancel_ticket(
    ticket_id: int,
    current_user: CurrentUser,
    ticket_service: TicketServiceDep,
) -> CancellationResponse:
    """Cancel a paid ticket at least the cancellation window before the event."""
    ticket = await ticket_service.cancel(current_user, ticket_id)
    return CancellationResponse(
        ticket_id=ticket.ticket_id,
        ticket_number=ticket.ticket_number,
        payment_status=ticket.payment_status,
        refund_amount=ticket.total_amount,
        message="Ticket cancelled successfully. Refund will be processed within 5-7 business days.",
    )
