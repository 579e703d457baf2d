"""
Wiring of the API client, stores and preferences from configuration.
"""

from dataclasses import dataclass
from datetime import date

import requests

from forma.api.activation import ActivationAPI
from forma.api.forma_api import FormaAPI
from forma.config.types import AppConfig
from forma.services.auth_service import AuthSession
from forma.services.checkout import CheckoutService
from forma.services.memberships_view import MembershipsView
from forma.services.payments_view import PaymentsView
from forma.services.preferences import LanguagePreference
from forma.services.preferences import ThemePreference
from forma.services.storage import FileStorage
from forma.services.storage import SessionFileStorage
from forma.services.storage import Storage
from forma.services.user_form import UserForm
from forma.services.workout_calendar import WorkoutCalendar


STATE_FILE = 'state.json'

@dataclass
class AppState:
    """Everything a command needs, built once per process."""
    config: AppConfig
    api: FormaAPI
    durable: Storage
    session: Storage
    language: LanguagePreference
    theme: ThemePreference
    auth: AuthSession

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        session: requests.Session | None = None,
        session_id: str | None = None
    ) -> "AppState":
        """Build the app state and restore any persisted sign-in."""
        api = FormaAPI.from_config(config.api, session=session)
        durable = FileStorage(config.state_path / STATE_FILE)
        ephemeral = SessionFileStorage(config.state_path, session_id=session_id)
        language = LanguagePreference(durable)
        auth = AuthSession(api, durable, ephemeral, language=language)
        auth.restore()
        return cls(
            config=config,
            api=api,
            durable=durable,
            session=ephemeral,
            language=language,
            theme=ThemePreference(durable),
            auth=auth,
        )

    def memberships_view(self) -> MembershipsView:
        return MembershipsView(
            self.api,
            self.auth,
            page_size=self.config.api.page_size,
            fallback_on_error=self.config.memberships.fallback_on_error,
            language=self.language
        )

    def payments_view(self) -> PaymentsView:
        return PaymentsView(self.api, self.auth, page_size=self.config.api.page_size, language=self.language)

    def user_form(self, today: date | None = None) -> UserForm:
        return UserForm(self.api, self.auth, language=self.language, today=today)

    def workout_calendar(self, today: date | None = None) -> WorkoutCalendar:
        return WorkoutCalendar(self.api, self.auth, language=self.language, today=today)

    def checkout(self) -> CheckoutService:
        activation = ActivationAPI.from_config(self.config.checkout, self.config.api)
        return CheckoutService(self.config.checkout.stripe_secret_key, activation=activation, auth=self.auth)
