"""Approve/reject actions for pending payments."""

from typing import Literal

from forma.api.forma_api import FormaAPI
from forma.exceptions import ApiError
from forma.exceptions import TransitionError
from forma.models.payment import PaymentRecord
from forma.models.payment import PaymentStatus
from forma.services.collection_store import CollectionStore
from forma.services.preferences import LanguagePreference
from forma.utils.logging_utils import LoggerMixin


Reconcile = Literal['reload', 'patch']

class StatusTransitionHandler(LoggerMixin):
    """Sends a payment status change, then reconciles the payments collection.

    With ``reconcile='reload'`` the whole collection is re-fetched after the
    backend acknowledges the change, so derived fields such as a membership's
    latest payment stay backend-computed. ``reconcile='patch'`` swaps in the
    record returned by the backend and reloads only when none came back.
    """

    def __init__(
        self,
        api: FormaAPI,
        store: CollectionStore[PaymentRecord],
        operator_id: str | None,
        reconcile: Reconcile = 'reload',
        language: LanguagePreference | None = None
    ):
        super().__init__()
        if reconcile not in ('reload', 'patch'):
            raise ValueError(f"Unknown reconcile mode: {reconcile}")
        self.api = api
        self.store = store
        self.operator_id = operator_id
        self.reconcile = reconcile
        self.language = language or LanguagePreference.fixed()
        self.busy = False
        self.error_message: str | None = None

    def approve(self, payment_id: str) -> bool:
        return self._transition(payment_id, PaymentStatus.APPROVED)

    def reject(self, payment_id: str, reason: str | None = None) -> bool:
        """Reject a payment. The reason is optional; blank reasons are not sent."""
        return self._transition(payment_id, PaymentStatus.REJECTED, (reason or '').strip() or None)

    def _check_allowed(self, payment_id: str) -> None:
        if self.busy:
            raise TransitionError(self.language.t('transition_in_progress'), payment_id)
        record = self.store.get(payment_id)
        if record is None:
            raise TransitionError(self.language.t('payment_not_found'), payment_id)
        if not record.can_transition:
            raise TransitionError(self.language.t('payment_not_pending'), payment_id)

    def _transition(self, payment_id: str, status: PaymentStatus, reason: str | None = None) -> bool:
        self._check_allowed(payment_id)

        self.busy = True
        self.error_message = None
        self.set_log_context(payment_id=payment_id, status=status.value)
        try:
            updated = self.api.update_payment(payment_id, status, self.operator_id, reason)
        except ApiError as e:
            self.error_message = e.message or self.language.t('error_updating_payment')
            self.warning("Payment update failed", error=self.error_message)
            return False
        else:
            self.info("Payment updated")
            self._reconcile(updated)
            return True
        finally:
            self.busy = False
            self.clear_log_context()

    def _reconcile(self, updated: PaymentRecord | None) -> None:
        if self.reconcile == 'patch' and updated is not None and self.store.replace_record(updated):
            return
        self.store.reload(self.store.gym_id, self.store.status)
