"""Tests for the ticket payment status state machine."""

import pytest

from eventhub.errors import InvalidStateError
from eventhub.models.ticket import PaymentStatus, Ticket, ensure_transition


@pytest.mark.parametrize(
    "current,target",
    [
        (PaymentStatus.PENDING, PaymentStatus.PAID),
        (PaymentStatus.PENDING, PaymentStatus.FAILED),
        (PaymentStatus.PAID, PaymentStatus.REFUNDED),
    ],
)
def test_legal_transitions(current, target):
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (PaymentStatus.PAID, PaymentStatus.PENDING),
        (PaymentStatus.PAID, PaymentStatus.FAILED),
        (PaymentStatus.PENDING, PaymentStatus.REFUNDED),
        (PaymentStatus.FAILED, PaymentStatus.PAID),
        (PaymentStatus.REFUNDED, PaymentStatus.PAID),
        (PaymentStatus.REFUNDED, PaymentStatus.REFUNDED),
    ],
)
def test_illegal_transitions(current, target):
    with pytest.raises(InvalidStateError):
        ensure_transition(current, target)


def test_transition_to_updates_status():
    ticket = Ticket(payment_status=PaymentStatus.PENDING)

    ticket.transition_to(PaymentStatus.PAID)

    assert ticket.payment_status == PaymentStatus.PAID


def test_transition_to_leaves_status_on_failure():
    ticket = Ticket(payment_status=PaymentStatus.REFUNDED)

    with pytest.raises(InvalidStateError):
        ticket.transition_to(PaymentStatus.PAID)

    assert ticket.payment_status == PaymentStatus.REFUNDED
