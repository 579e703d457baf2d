"""Authentication session: the signed-in user and their gym."""

from typing import Any

from forma.api.forma_api import FormaAPI
from forma.error_codes import ErrorCode
from forma.exceptions import ApiError
from forma.exceptions import AuthError
from forma.models.auth import Gym
from forma.models.auth import User
from forma.services.preferences import LanguagePreference
from forma.services.storage import Storage
from forma.utils.logging_utils import LoggerMixin


USER_KEY = 'forma_user'
GYM_KEY = 'forma_gym'
MIN_PASSWORD_LENGTH = 8

class AuthSession(LoggerMixin):
    """Holds the authenticated identity and keeps it in one of two stores.

    With ``remember_me`` the identity goes to the durable store, otherwise to
    the session store. Restoring never touches the network.
    """

    def __init__(
        self,
        api: FormaAPI,
        durable: Storage,
        session: Storage,
        language: LanguagePreference | None = None
    ):
        super().__init__()
        self.api = api
        self.durable = durable
        self.session = session
        self.language = language or LanguagePreference.fixed()
        self.user: User | None = None
        self.gym: Gym | None = None
        self.error_message: str | None = None
        self.is_loading = False
        self._store: Storage | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_gym_active(self) -> bool:
        return self.gym is not None and self.gym.is_active

    @property
    def operator_id(self) -> str | None:
        return self.user.id if self.user else None

    def clear_error(self) -> None:
        self.error_message = None

    def require_gym(self) -> Gym:
        """Return the current tenant or raise ``AuthError``."""
        if not self.is_authenticated:
            raise AuthError(self.language.t('not_signed_in'), ErrorCode.NOT_AUTHENTICATED)
        if self.gym is None or not self.gym.id:
            raise AuthError(self.language.t('no_gym'), ErrorCode.NO_TENANT)
        return self.gym

    def restore(self) -> bool:
        """Load a persisted identity, durable store first."""
        for store in (self.durable, self.session):
            user_data = store.get(USER_KEY)
            gym_data = store.get(GYM_KEY)
            if not user_data or not gym_data:
                continue
            try:
                user = User.from_dict(user_data)
                gym = Gym.from_dict(gym_data)
            except (KeyError, TypeError, ValueError) as e:
                self.warning("Discarding corrupted auth data", error=str(e))
                store.remove(USER_KEY)
                store.remove(GYM_KEY)
                continue
            self.user, self.gym, self._store = user, gym, store
            self.debug("Restored auth data", user_id=user.id, gym_id=gym.id)
            return True
        return False

    def sign_in(self, email: str, password: str, remember_me: bool = False) -> bool:
        """Sign in and persist the identity; on failure ``error_message`` is set."""
        self.is_loading = True
        self.error_message = None
        try:
            response = self.api.sign_in(email, password)
            user_data = response.get('user')
            gym_data = response.get('gym')
            if not user_data or not gym_data:
                self.error_message = self.language.t('invalid_auth_response')
                return False
            user = User.from_dict(user_data)
            gym = Gym.from_dict(gym_data)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return False
        except (KeyError, TypeError, ValueError) as e:
            self.logger.error(f"Malformed sign-in response: {e}")
            self.error_message = self.language.t('invalid_auth_response')
            return False
        finally:
            self.is_loading = False

        self._persist(user, gym, self.durable if remember_me else self.session)
        self.info("Signed in", user_id=user.id, gym_id=gym.id, remember_me=remember_me)
        return True

    def sign_up(self, payload: dict[str, Any]) -> str | None:
        """Register a gym owner. Returns the success message, or None with ``error_message`` set."""
        self.error_message = None
        try:
            response = self.api.sign_up(payload)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return None
        return str(response.get('message') or self.language.t('account_created_success'))

    def sign_out(self) -> None:
        """Sign out. Local state is cleared even when the API call fails."""
        self.is_loading = True
        try:
            self.api.sign_out()
        except ApiError as e:
            self.warning("Sign out request failed", error=e.message)
        finally:
            self.clear_session()
            self.is_loading = False

    def clear_session(self) -> None:
        self.user = None
        self.gym = None
        self._store = None
        for store in (self.durable, self.session):
            store.remove(USER_KEY)
            store.remove(GYM_KEY)

    def refresh_gym_status(self) -> None:
        """Mark the current gym active after a successful activation."""
        if self.gym is None:
            return
        self.gym.is_active = True
        store = self._store or self.session
        store.set(GYM_KEY, self.gym.to_dict())
        self.info("Gym status refreshed to active", gym_id=self.gym.id)

    def forgot_password(self, email: str) -> bool:
        self.error_message = None
        try:
            self.api.forgot_password(email)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return False
        return True

    def reset_password(self, access_token: str, refresh_token: str, password: str, confirm_password: str) -> bool:
        """Set a new password using the tokens from the reset link."""
        self.error_message = None
        if password != confirm_password:
            self.error_message = self.language.t('password_mismatch')
            return False
        if len(password) < MIN_PASSWORD_LENGTH:
            self.error_message = self.language.t('password_too_short')
            return False
        if not access_token or not refresh_token:
            self.error_message = self.language.t('invalid_reset_token')
            return False
        try:
            self.api.reset_password(access_token, refresh_token, password)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return False
        return True

    def _persist(self, user: User, gym: Gym, store: Storage) -> None:
        other = self.session if store is self.durable else self.durable
        other.remove(USER_KEY)
        other.remove(GYM_KEY)
        store.set(USER_KEY, user.to_dict())
        store.set(GYM_KEY, gym.to_dict())
        self.user, self.gym, self._store = user, gym, store
