"""
Forma REST API client: auth, users, memberships, payments and daily workouts.
"""

from collections.abc import Callable
from typing import Any, TypeVar

import requests

from forma.api.base_api import BaseAPI
from forma.config.types import ApiConfig
from forma.exceptions import ApiInvalidResponseError
from forma.models.membership import MembershipRecord
from forma.models.payment import PaymentRecord
from forma.models.payment import PaymentStatus
from forma.models.workout import DailyWorkout
from forma.utils.logging_utils import log_api_call


R = TypeVar('R')

class FormaAPI(BaseAPI):
    """Client for the ``/api/*`` endpoints of the gym-management backend."""

    @classmethod
    def from_config(cls, config: ApiConfig, session: requests.Session | None = None) -> "FormaAPI":
        """Create a client from the ``api`` configuration section."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=(config.connect_timeout, config.timeout),
            session=session
        )

    def _parse_records(
        self,
        response: dict[str, Any],
        key: str,
        factory: Callable[[dict[str, Any]], R]
    ) -> list[R]:
        """Convert the list under ``key`` into models, rejecting malformed items."""
        items = response.get(key) or []
        if not isinstance(items, list):
            raise ApiInvalidResponseError(200, f"Expected a list under '{key}'")
        try:
            return [factory(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise ApiInvalidResponseError(200, f"Malformed {key} record: {e}") from e

    # Auth

    @log_api_call
    def sign_in(self, email: str, password: str) -> dict[str, Any]:
        """Sign in; the response carries ``user`` and ``gym``."""
        return self._make_request('POST', '/api/auth/signin', data={'email': email, 'password': password})

    @log_api_call
    def sign_up(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Register a gym owner together with their gym."""
        return self._make_request('POST', '/api/auth/signup', data=payload)

    def sign_out(self) -> dict[str, Any]:
        return self._make_request('POST', '/api/auth/signout')

    def forgot_password(self, email: str) -> dict[str, Any]:
        return self._make_request('POST', '/api/auth/forgot-password', data={'email': email})

    def reset_password(self, access_token: str, refresh_token: str, password: str) -> dict[str, Any]:
        return self._make_request(
            'PUT',
            '/api/auth/reset-password',
            data={
                'access_token': access_token,
                'refresh_token': refresh_token,
                'password': password,
            }
        )

    # Users

    @log_api_call
    def create_user(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a member and their initial membership."""
        return self._make_request('POST', '/api/users', data=payload)

    @log_api_call
    def update_user(self, user_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._make_request('PUT', f'/api/users/{user_id}', data=payload)

    # Memberships

    @log_api_call
    def get_memberships(
        self,
        gym_id: str,
        limit: int = 100,
        offset: int = 0,
        status: str | None = None
    ) -> list[MembershipRecord]:
        """Fetch one page of a gym's memberships, optionally scoped to a status."""
        response = self._make_request(
            'GET',
            '/api/memberships',
            params={'gymId': gym_id, 'limit': limit, 'offset': offset, 'status': status}
        )
        return self._parse_records(response, 'memberships', MembershipRecord.from_dict)

    # Payments

    @log_api_call
    def get_payments(
        self,
        gym_id: str,
        limit: int = 100,
        offset: int = 0,
        status: str | None = None,
        membership_id: str | None = None
    ) -> list[PaymentRecord]:
        """Fetch one page of a gym's payments."""
        response = self._make_request(
            'GET',
            '/api/payments',
            params={
                'gymId': gym_id,
                'limit': limit,
                'offset': offset,
                'status': status,
                'membershipId': membership_id,
            }
        )
        return self._parse_records(response, 'payments', PaymentRecord.from_dict)

    @log_api_call
    def update_payment(
        self,
        payment_id: str,
        status: PaymentStatus,
        approved_by: str | None,
        rejection_reason: str | None = None
    ) -> PaymentRecord | None:
        """Transition a payment's status.

        Returns the updated record when the backend echoes one back.
        """
        payload: dict[str, Any] = {
            'paymentId': payment_id,
            'status': status.value,
            'approvedBy': approved_by,
        }
        if rejection_reason:
            payload['rejectionReason'] = rejection_reason

        response = self._make_request('PATCH', '/api/payments', data=payload)
        payment = response.get('payment')
        if not isinstance(payment, dict):
            return None
        try:
            return PaymentRecord.from_dict(payment)
        except (KeyError, TypeError, ValueError):
            self.warning("Ignoring partial payment in update response", payment_id=payment_id)
            return None

    # Daily workouts

    @log_api_call
    def get_workouts(self, gym_id: str, year: int, month: int) -> list[DailyWorkout]:
        """Fetch a gym's workouts for one calendar month (``month`` is 1-based)."""
        response = self._make_request(
            'GET',
            '/api/daily-workouts',
            params={'gymId': gym_id, 'year': str(year), 'month': str(month)}
        )
        return self._parse_records(response, 'workouts', DailyWorkout.from_dict)

    def create_workout(self, gym_id: str, workout_date: str, workout_text: str) -> dict[str, Any]:
        return self._make_request(
            'POST',
            '/api/daily-workouts',
            data={'gym_id': gym_id, 'workout_date': workout_date, 'workout_text': workout_text}
        )

    def update_workout(self, workout_id: str, workout_text: str) -> dict[str, Any]:
        return self._make_request(
            'PUT',
            '/api/daily-workouts',
            data={'id': workout_id, 'workout_text': workout_text}
        )

    def delete_workout(self, workout_id: str) -> dict[str, Any]:
        return self._make_request('DELETE', '/api/daily-workouts', params={'id': workout_id})
