"""
Subscription checkout with Stripe and gym activation after payment.
"""

from dataclasses import dataclass
from typing import Any

import stripe

from forma.api.activation import ActivationAPI
from forma.error_codes import ErrorCode
from forma.exceptions import ApiError
from forma.exceptions import CheckoutError
from forma.services.auth_service import AuthSession
from forma.utils.logging_utils import LoggerMixin


@dataclass(frozen=True)
class Plan:
    """A subscription plan. ``amount`` is in céntimos."""
    name: str
    label: str
    amount: int
    interval: str
    currency: str = 'crc'

PLANS: dict[str, Plan] = {
    'monthly': Plan('monthly', 'Monthly', 2750000, 'month'),
    'yearly': Plan('yearly', 'Yearly', 33000000, 'year'),
}

PRODUCT_DESCRIPTION = "Complete gym management system with automated payments and analytics"
PRODUCT_IMAGE = "https://formacr.com/images/forma-logo-black.png"

class CheckoutService(LoggerMixin):
    """Creates Stripe checkout sessions for gym subscriptions."""

    def __init__(
        self,
        secret_key: str,
        activation: ActivationAPI | None = None,
        auth: AuthSession | None = None
    ):
        super().__init__()
        self.secret_key = secret_key
        self.activation = activation
        self.auth = auth
        self.error_message: str | None = None

    @staticmethod
    def get_plan(plan: str) -> Plan:
        try:
            return PLANS[plan]
        except KeyError:
            raise CheckoutError("Invalid plan", ErrorCode.VALIDATION_FAILED, {'plan': plan}) from None

    def session_params(self, plan: str, gym_id: str, origin: str) -> dict[str, Any]:
        """Build the ``stripe.checkout.Session.create`` arguments."""
        if not plan or not gym_id:
            raise CheckoutError("Plan and gymId are required", ErrorCode.VALIDATION_FAILED)
        selected = self.get_plan(plan)
        origin = origin.rstrip('/')
        metadata = {'gymId': gym_id, 'plan': selected.name}
        return {
            'payment_method_types': ['card'],
            'line_items': [{
                'price_data': {
                    'currency': selected.currency,
                    'product_data': {
                        'name': f"Forma Gym Management - {selected.label} Plan",
                        'description': PRODUCT_DESCRIPTION,
                        'images': [PRODUCT_IMAGE],
                    },
                    'unit_amount': selected.amount,
                    'recurring': {'interval': selected.interval},
                },
                'quantity': 1,
            }],
            'mode': 'subscription',
            'success_url': f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}&gym_id={gym_id}",
            'cancel_url': f"{origin}/pricing",
            'metadata': metadata,
            'allow_promotion_codes': True,
            'billing_address_collection': 'required',
            'payment_method_collection': 'always',
            'subscription_data': {'metadata': dict(metadata)},
        }

    def create_session(self, plan: str, gym_id: str, origin: str) -> dict[str, Any]:
        """Create a hosted checkout session; returns its id and URL."""
        params = self.session_params(plan, gym_id, origin)
        if not self.secret_key:
            raise CheckoutError("Stripe is not configured", details={'setting': 'STRIPE_SECRET_KEY'})
        try:
            session = stripe.checkout.Session.create(api_key=self.secret_key, **params)
        except stripe.StripeError as e:
            self.logger.error(f"Error creating checkout session: {e}")
            raise CheckoutError("Error creating checkout session") from e
        self.info("Created checkout session", gym_id=gym_id, plan=plan, session_id=session.id)
        return {'sessionId': session.id, 'url': getattr(session, 'url', None)}

    def activate_gym(self, gym_id: str | None = None) -> bool:
        """Activate the gym after checkout and mark it active locally."""
        self.error_message = None
        if gym_id is None and self.auth is not None and self.auth.gym is not None:
            gym_id = self.auth.gym.id
        if not gym_id:
            raise CheckoutError("No gym to activate", ErrorCode.ACTIVATION_FAILED)
        if self.activation is None:
            raise CheckoutError("Activation endpoint is not configured", ErrorCode.ACTIVATION_FAILED)

        try:
            self.activation.activate(gym_id)
        except ApiError as e:
            self.error_message = e.message
            self.warning("Failed to activate gym", gym_id=gym_id, error=e.message)
            return False

        if self.auth is not None:
            self.auth.refresh_gym_status()
        return True
