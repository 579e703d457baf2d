"""
Secondary views of a list screen (forms, receipt viewer, reject prompt).

A screen holds exactly one ``OverlayState``; opening an overlay replaces
whatever was open before, so two overlays can never share state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Union

from forma.models.membership import LatestPayment
from forma.models.payment import PaymentRecord
from forma.services.status_transitions import StatusTransitionHandler


@dataclass(frozen=True)
class ReceiptInfo:
    """Payment details shown next to a receipt image."""
    amount: Decimal | None = None
    date: datetime | None = None
    reference: str | None = None
    phone: str | None = None
    member_name: str | None = None

    @classmethod
    def from_payment(cls, payment: PaymentRecord) -> "ReceiptInfo":
        return cls(
            amount=payment.amount,
            date=payment.payment_date,
            reference=payment.sinpe_reference,
            phone=payment.sinpe_phone,
            member_name=payment.user.full_name or None,
        )

    @classmethod
    def from_latest_payment(cls, payment: LatestPayment, member_name: str | None = None) -> "ReceiptInfo":
        return cls(
            amount=payment.amount,
            date=payment.payment_date,
            reference=payment.sinpe_reference,
            phone=payment.sinpe_phone,
            member_name=member_name,
        )

class ReceiptState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    ERROR_DISPLAY = "error_display"

class ReceiptViewer:
    """Closed -> Open(image_url, info) -> Closed, with an ErrorDisplay
    sub-state when the image fails to load. A failed image keeps the viewer
    open and offers the original URL instead."""

    def __init__(self) -> None:
        self.state = ReceiptState.CLOSED
        self.image_url: str | None = None
        self.info: ReceiptInfo | None = None

    @property
    def is_open(self) -> bool:
        return self.state is not ReceiptState.CLOSED

    @property
    def fallback_url(self) -> str | None:
        """URL to open the original image, offered only after a load failure."""
        if self.state is ReceiptState.ERROR_DISPLAY:
            return self.image_url
        return None

    def open(self, image_url: str, info: ReceiptInfo | None = None) -> None:
        if not image_url:
            raise ValueError("A receipt needs an image URL")
        self.state = ReceiptState.OPEN
        self.image_url = image_url
        self.info = info

    def image_failed(self) -> None:
        if self.state is ReceiptState.OPEN:
            self.state = ReceiptState.ERROR_DISPLAY

    def close(self) -> None:
        self.state = ReceiptState.CLOSED
        self.image_url = None
        self.info = None

@dataclass(frozen=True)
class NoOverlay:
    pass

@dataclass(frozen=True)
class CreateUser:
    pass

@dataclass(frozen=True)
class EditUser:
    record_id: str

@dataclass
class Receipt:
    viewer: ReceiptViewer

@dataclass
class RejectPrompt:
    payment_id: str
    reason: str = ""

ActiveOverlay = Union[NoOverlay, CreateUser, EditUser, Receipt, RejectPrompt]

@dataclass
class OverlayState:
    """The single active overlay of a screen."""
    active: ActiveOverlay = field(default_factory=NoOverlay)

    @property
    def is_open(self) -> bool:
        return not isinstance(self.active, NoOverlay)

    def open(self, overlay: ActiveOverlay) -> ActiveOverlay:
        """Replace the active overlay."""
        if isinstance(self.active, Receipt):
            self.active.viewer.close()
        self.active = overlay
        return overlay

    def close(self) -> None:
        self.open(NoOverlay())

    def open_create_user(self) -> CreateUser:
        return self.open(CreateUser())  # type: ignore[return-value]

    def open_edit_user(self, record_id: str) -> EditUser:
        return self.open(EditUser(record_id))  # type: ignore[return-value]

    def open_receipt(self, image_url: str, info: ReceiptInfo | None = None) -> Receipt:
        viewer = ReceiptViewer()
        viewer.open(image_url, info)
        return self.open(Receipt(viewer))  # type: ignore[return-value]

    def open_reject_prompt(self, payment_id: str, reason: str = "") -> RejectPrompt:
        return self.open(RejectPrompt(payment_id, reason))  # type: ignore[return-value]

    def set_reject_reason(self, reason: str) -> None:
        if isinstance(self.active, RejectPrompt):
            self.active.reason = reason

    def receipt_failed(self) -> None:
        if isinstance(self.active, Receipt):
            self.active.viewer.image_failed()

    def confirm_reject(self, handler: StatusTransitionHandler) -> bool:
        """Reject the payment captured by the open reject prompt.

        Does nothing unless a reject prompt is the active overlay. The prompt
        closes only when the rejection succeeds.
        """
        prompt = self.active
        if not isinstance(prompt, RejectPrompt):
            return False
        if not handler.reject(prompt.payment_id, prompt.reason):
            return False
        if self.active is prompt:
            self.close()
        return True
