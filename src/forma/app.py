"""
Flask app serving the checkout session endpoint used by the pricing page.
"""

import logging

from flask import Flask
from flask import jsonify
from flask import request
from flask_cors import CORS

from forma.config.types import AppConfig
from forma.error_codes import ErrorCode
from forma.exceptions import CheckoutError
from forma.services.checkout import CheckoutService


logger = logging.getLogger(__name__)

def create_app(config: AppConfig | None = None, checkout: CheckoutService | None = None) -> Flask:
    """Create the Flask app.

    Args:
        config: Application configuration; loaded from the environment when omitted
        checkout: Pre-built checkout service (tests inject one)
    """
    if checkout is None:
        if config is None:
            from forma.config.settings import load_config
            config = load_config()
        checkout = CheckoutService(config.checkout.stripe_secret_key)

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    app.extensions['forma_checkout'] = checkout

    @app.post('/api/create-checkout-session')
    def create_checkout_session():  # type: ignore[no-untyped-def]
        body = request.get_json(silent=True) or {}
        plan = body.get('plan')
        gym_id = body.get('gymId')
        origin = request.headers.get('Origin') or request.host_url.rstrip('/')

        try:
            session = checkout.create_session(plan, gym_id, origin)
        except CheckoutError as e:
            if e.code is ErrorCode.VALIDATION_FAILED:
                return jsonify({'error': e.message}), 400
            logger.error(f"Error creating checkout session: {e}")
            return jsonify({'error': 'Error creating checkout session'}), 500

        return jsonify({'sessionId': session['sessionId']})

    return app

def main() -> None:
    """Run the checkout endpoint with Flask's development server."""
    import argparse

    from forma.config.logging import setup_logging
    from forma.config.settings import load_config

    parser = argparse.ArgumentParser(description='Forma checkout API server')
    parser.add_argument('--host', default='127.0.0.1', help='Interface to bind (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5000, help='Port to listen on (default: 5000)')
    parser.add_argument('--config-dir', help='Directory containing config.yaml')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging output')
    args = parser.parse_args()

    config = load_config(args.config_dir)
    setup_logging(config, verbose=args.verbose)
    create_app(config).run(host=args.host, port=args.port)

if __name__ == '__main__':
    main()
