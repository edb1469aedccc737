"""
HTTP client for the admin API.

Mirrors what the admin frontend does with every response: unwrap the
`{success, data, message}` envelope, and turn failures into one readable
message. Requests are never retried.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
import requests

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    """A failed API call; `message` is safe to show to the user"""

    def __init__(self, message, status_code=None, error=None, errors=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error
        self.errors = errors or {}


def error_message(body):
    """Pick the user-facing message out of an error body"""
    if isinstance(body, dict):
        return body.get('message') or body.get('error') or DEFAULT_ERROR_MESSAGE
    return DEFAULT_ERROR_MESSAGE


class AdminApiClient:
    def __init__(self, base_url, token=None, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        self.token = None
        if token:
            self.set_token(token)

    def set_token(self, token):
        self.token = token
        self.session.headers['Authorization'] = f'Bearer {token}'

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, params=None, json=None, data=None, files=None):
        url = self.url(path)
        try:
            response = self.session.request(
                method, url, params=params, json=json, data=data, files=files, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {str(e)}")
            raise ApiError(DEFAULT_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok or (isinstance(body, dict) and body.get('success') is False):
            message = error_message(body)
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ApiError(
                message,
                status_code=response.status_code,
                error=body.get('error') if isinstance(body, dict) else None,
                errors=body.get('errors') if isinstance(body, dict) else None,
            )

        if isinstance(body, dict) and 'success' in body:
            return body.get('data')
        return body

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, data=None, files=None):
        return self.request('POST', path, json=json, data=data, files=files)

    def put(self, path, json=None, data=None, files=None):
        return self.request('PUT', path, json=json, data=data, files=files)

    def patch(self, path, json=None, data=None, files=None):
        return self.request('PATCH', path, json=json, data=data, files=files)

    def delete(self, path):
        return self.request('DELETE', path)

    def login(self, username, password):
        """Obtain a JWT pair and use the access token from now on"""
        data = self.post('auth/admin/login', json={'username': username, 'password': password})
        self.set_token(data['access'])
        logger.info(f"Logged in as {username}")
        return data

    def me(self):
        return self.get('auth/admin/me')


FORM_CONTEXT_PATHS = {
    'suppliers': 'purchase/suppliers',
    'warehouses': 'inventory/warehouses',
    'categories': 'inventory/categories',
    'gst_rates': 'finance/gst-rates',
}


def load_form_context(client, paths=None):
    """
    Fetch the lookups a purchase or item form needs, all at once.

    Returns a dict keyed like `paths`; the first failing request raises its
    ApiError after every request has finished.
    """
    paths = paths or FORM_CONTEXT_PATHS
    with ThreadPoolExecutor(max_workers=len(paths)) as executor:
        futures = {name: executor.submit(client.get, path) for name, path in paths.items()}
    return {name: future.result() for name, future in futures.items()}
