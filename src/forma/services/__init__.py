"""Services of the Forma client: sessions, screens and workflows."""

from .app_state import AppState
from .auth_service import AuthSession
from .checkout import CheckoutService
from .collection_store import CollectionStore
from .filters import FilterComposer
from .memberships_view import MembershipsView
from .overlay import OverlayState
from .payments_view import PaymentsView
from .status_transitions import StatusTransitionHandler
from .user_form import UserForm
from .workout_calendar import WorkoutCalendar

__all__ = [
    'AppState',
    'AuthSession',
    'CheckoutService',
    'CollectionStore',
    'FilterComposer',
    'MembershipsView',
    'OverlayState',
    'PaymentsView',
    'StatusTransitionHandler',
    'UserForm',
    'WorkoutCalendar',
]
