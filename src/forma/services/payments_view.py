"""Payments screen: review receipts and approve or reject pending payments."""

from forma.api.forma_api import FormaAPI
from forma.models.payment import PaymentRecord
from forma.models.payment import PaymentStatus
from forma.services.auth_service import AuthSession
from forma.services.collection_store import CollectionStore
from forma.services.filters import ALL
from forma.services.filters import FilterComposer
from forma.services.filters import status_counts
from forma.services.memberships_view import resolve_receipt_url
from forma.services.overlay import OverlayState
from forma.services.overlay import Receipt
from forma.services.overlay import ReceiptInfo
from forma.services.overlay import RejectPrompt
from forma.services.preferences import LanguagePreference
from forma.services.status_transitions import Reconcile
from forma.services.status_transitions import StatusTransitionHandler
from forma.utils.logging_utils import LoggerMixin


PAYMENT_STATUSES = [status.value for status in PaymentStatus]

class PaymentsView(LoggerMixin):
    """State of the payments screen for the signed-in gym."""

    def __init__(
        self,
        api: FormaAPI,
        auth: AuthSession,
        page_size: int = 100,
        reconcile: Reconcile = 'reload',
        language: LanguagePreference | None = None
    ):
        super().__init__()
        self.api = api
        self.auth = auth
        self.language = language or auth.language
        self.store: CollectionStore[PaymentRecord] = CollectionStore(
            api.get_payments,
            page_size=page_size,
            default_error=self.language.t('error_loading_payments')
        )
        self.filters = FilterComposer()
        self.overlay = OverlayState()
        self.transitions = StatusTransitionHandler(
            api,
            self.store,
            auth.operator_id,
            reconcile=reconcile,
            language=self.language
        )

    @property
    def loading(self) -> bool:
        return self.store.loading or self.transitions.busy

    @property
    def error_message(self) -> str | None:
        return self.transitions.error_message or self.store.error_message

    @property
    def visible(self) -> list[PaymentRecord]:
        return self.filters.visible(self.store.records)

    @property
    def counts(self) -> dict[str, int]:
        return status_counts(self.store.records, PAYMENT_STATUSES)

    def load(self) -> bool:
        gym = self.auth.gym
        return self.store.reload(gym.id if gym else None, self.filters.status_filter)

    def set_status_filter(self, status: str) -> bool:
        if status != ALL and status not in PAYMENT_STATUSES:
            raise ValueError(f"Unknown payment status: {status}")
        self.filters.status_filter = status
        return self.load()

    def set_search(self, query: str) -> list[PaymentRecord]:
        self.filters.query = query
        return self.visible

    def approve(self, payment_id: str) -> bool:
        return self.transitions.approve(payment_id)

    def request_reject(self, payment_id: str) -> RejectPrompt:
        """Open the rejection prompt for ``payment_id``."""
        return self.overlay.open_reject_prompt(payment_id)

    def confirm_reject(self, reason: str | None = None) -> bool:
        """Reject the payment of the open prompt, optionally setting its reason first."""
        if reason is not None:
            self.overlay.set_reject_reason(reason)
        return self.overlay.confirm_reject(self.transitions)

    def open_receipt(self, payment_id: str) -> Receipt | None:
        record = self.store.get(payment_id)
        if record is None or not record.payment_proof_url:
            return None
        url = resolve_receipt_url(self.api.base_url, record.payment_proof_url)
        return self.overlay.open_receipt(url, ReceiptInfo.from_payment(record))

    def close_overlay(self) -> None:
        self.overlay.close()

    def close(self) -> None:
        self.overlay.close()
        self.store.close()
