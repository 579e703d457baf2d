"""Memberships screen: list, filter, search and member overlays."""

from urllib.parse import urljoin

from forma.api.forma_api import FormaAPI
from forma.models.membership import MembershipRecord
from forma.models.membership import MembershipStatus
from forma.models.placeholders import placeholder_memberships
from forma.services.auth_service import AuthSession
from forma.services.collection_store import CollectionStore
from forma.services.filters import ALL
from forma.services.filters import FilterComposer
from forma.services.filters import status_counts
from forma.services.overlay import EditUser
from forma.services.overlay import OverlayState
from forma.services.overlay import Receipt
from forma.services.overlay import ReceiptInfo
from forma.services.preferences import LanguagePreference
from forma.utils.logging_utils import LoggerMixin


MEMBERSHIP_STATUSES = [status.value for status in MembershipStatus]

def resolve_receipt_url(base_url: str, url: str) -> str:
    """Proof URLs may be relative to the API host."""
    return urljoin(base_url.rstrip('/') + '/', url)

class MembershipsView(LoggerMixin):
    """State of the memberships screen for the signed-in gym."""

    def __init__(
        self,
        api: FormaAPI,
        auth: AuthSession,
        page_size: int = 100,
        fallback_on_error: bool = False,
        language: LanguagePreference | None = None
    ):
        super().__init__()
        self.api = api
        self.auth = auth
        self.language = language or auth.language
        self.store: CollectionStore[MembershipRecord] = CollectionStore(
            api.get_memberships,
            page_size=page_size,
            fallback_on_error=fallback_on_error,
            fallback_records=placeholder_memberships,
            default_error=self.language.t('error_loading_memberships')
        )
        self.filters = FilterComposer()
        self.overlay = OverlayState()

    @property
    def loading(self) -> bool:
        return self.store.loading

    @property
    def error_message(self) -> str | None:
        return self.store.error_message

    @property
    def visible(self) -> list[MembershipRecord]:
        return self.filters.visible(self.store.records)

    @property
    def counts(self) -> dict[str, int]:
        return status_counts(self.store.records, MEMBERSHIP_STATUSES)

    def load(self) -> bool:
        """(Re)load memberships for the current gym, scoped to the status filter."""
        gym = self.auth.gym
        return self.store.reload(gym.id if gym else None, self.filters.status_filter)

    def set_status_filter(self, status: str) -> bool:
        if status != ALL and status not in MEMBERSHIP_STATUSES:
            raise ValueError(f"Unknown membership status: {status}")
        self.filters.status_filter = status
        return self.load()

    def set_search(self, query: str) -> list[MembershipRecord]:
        self.filters.query = query
        return self.visible

    def open_create_user(self) -> None:
        self.overlay.open_create_user()

    def open_edit_user(self, membership_id: str) -> EditUser:
        if self.store.get(membership_id) is None:
            raise KeyError(membership_id)
        return self.overlay.open_edit_user(membership_id)

    def open_receipt(self, membership_id: str) -> Receipt | None:
        """Show the latest payment's receipt. None when there is nothing to show."""
        record = self.store.get(membership_id)
        if record is None or record.latest_payment is None:
            return None
        payment = record.latest_payment
        if not payment.payment_proof_url:
            return None
        info = ReceiptInfo.from_latest_payment(payment, record.user.full_name)
        return self.overlay.open_receipt(resolve_receipt_url(self.api.base_url, payment.payment_proof_url), info)

    def close_overlay(self) -> None:
        self.overlay.close()

    def close(self) -> None:
        """Leave the screen; late responses are ignored."""
        self.overlay.close()
        self.store.close()
