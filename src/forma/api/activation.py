"""
Client for the gym activation endpoint called after a completed checkout.
"""

from typing import Any

import requests

from forma.api.base_api import BaseAPI
from forma.config.types import ApiConfig
from forma.config.types import CheckoutConfig


class ActivationAPI(BaseAPI):
    """Flips a gym's active flag.

    The endpoint is authenticated with its own static key sent as
    ``X-API-Key``, distinct from the shared public API key.
    """

    def __init__(
        self,
        activation_url: str,
        activation_key: str,
        timeout: tuple[int, int] | None = None,
        session: requests.Session | None = None
    ):
        super().__init__(activation_url, api_key="", timeout=timeout, session=session)
        self.activation_url = activation_url
        self.activation_key = activation_key

    @classmethod
    def from_config(
        cls,
        checkout: CheckoutConfig,
        api: ApiConfig,
        session: requests.Session | None = None
    ) -> "ActivationAPI":
        return cls(
            activation_url=checkout.activation_url,
            activation_key=checkout.activation_key,
            timeout=(api.connect_timeout, api.timeout),
            session=session
        )

    def activate(self, gym_id: str) -> dict[str, Any]:
        """Activate ``gym_id``; raises ``ApiError`` unless the backend reports success."""
        self.info("Activating gym", gym_id=gym_id)
        return self._make_request(
            'POST',
            '',
            data={'gymId': gym_id},
            headers={'X-API-Key': self.activation_key},
            url=self.activation_url
        )
