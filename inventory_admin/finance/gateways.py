"""
Credential checks for payment gateways.

Each check makes one cheap authenticated call to the provider and reports
{valid, message}; nothing is stored here. Cash on delivery needs no
credentials.
"""
import logging
import requests

logger = logging.getLogger(__name__)

RAZORPAY_PAYMENTS_URL = "https://api.razorpay.com/v1/payments"
STRIPE_BALANCE_URL = "https://api.stripe.com/v1/balance"
REQUEST_TIMEOUT = 10


def _result(valid, message):
    return {'valid': valid, 'message': message}


def _error_body(response):
    try:
        return response.json().get('error') or {}
    except ValueError:
        return {}


def validate_razorpay_credentials(api_key, secret_key):
    if not api_key or not secret_key:
        return _result(False, "API Key and Secret Key are required for Razorpay")

    try:
        response = requests.get(
            RAZORPAY_PAYMENTS_URL,
            auth=(api_key, secret_key),
            params={'count': 1},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Razorpay validation error: {str(e)}")
        return _result(False, "Failed to validate Razorpay credentials")

    if response.status_code == 200:
        return _result(True, "Razorpay credentials validated successfully")
    logger.warning(f"Razorpay rejected credentials with status {response.status_code}")
    if response.status_code == 401:
        return _result(False, "Invalid Razorpay API Key or Secret Key")
    if response.status_code == 400:
        return _result(False, "Bad request to Razorpay API. Please check your credentials")
    return _result(False, _error_body(response).get('description') or "Failed to validate Razorpay credentials")


def validate_stripe_credentials(secret_key):
    if not secret_key:
        return _result(False, "Secret Key is required for Stripe")
    if not secret_key.startswith('sk_'):
        return _result(False, "Invalid Stripe Secret Key format. Must start with 'sk_'")

    try:
        response = requests.get(
            STRIPE_BALANCE_URL,
            headers={'Authorization': f'Bearer {secret_key}'},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Stripe validation error: {str(e)}")
        return _result(False, "Failed to validate Stripe credentials")

    if response.status_code == 200:
        return _result(True, "Stripe credentials validated successfully")
    logger.warning(f"Stripe rejected credentials with status {response.status_code}")
    if response.status_code == 401:
        return _result(False, "Invalid Stripe Secret Key")
    return _result(False, _error_body(response).get('message') or "Failed to validate Stripe credentials")


def validate_webhook_secret(webhook_secret, gateway_name):
    """Format check only; the secret is optional"""
    if not webhook_secret:
        return _result(True, "Webhook secret not provided (optional)")
    if gateway_name == 'razorpay' and len(webhook_secret) < 10:
        return _result(False, "Razorpay webhook secret is too short (minimum 10 characters)")
    if gateway_name == 'stripe' and not webhook_secret.startswith('whsec_'):
        return _result(False, "Invalid Stripe webhook secret format. Must start with 'whsec_'")
    return _result(True, "Webhook secret format is valid")


def validate_gateway_credentials(gateway_name, api_key=None, secret_key=None, webhook_secret=None):
    """Run the provider check for `gateway_name` followed by the webhook format check"""
    if gateway_name == 'razorpay':
        result = validate_razorpay_credentials(api_key, secret_key)
    elif gateway_name == 'stripe':
        result = validate_stripe_credentials(secret_key)
    elif gateway_name == 'cod':
        return _result(True, "Cash on delivery needs no credentials")
    else:
        return _result(False, f"Unsupported payment gateway: {gateway_name}")

    if not result['valid']:
        return result
    webhook = validate_webhook_secret(webhook_secret, gateway_name)
    return webhook if not webhook['valid'] else result
