"""
HTTP client for the Baakh admin services the couplet workflow talks to.

Every call goes through one ``requests.Session`` with a single timeout, and
every failure (connection error, timeout, non-2xx status, unreadable body)
is raised as ``ServiceError`` so callers have one exception to handle.
"""

import requests
import structlog

from baakh import config
from baakh.errors import ServiceError

logger = structlog.get_logger(__name__)


class BaakhClient:
    """Thin JSON client; methods return decoded response bodies."""

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or config.API_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("service_unreachable", method=method, url=url, error=str(e))
            raise ServiceError(f"Could not reach {path}: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = self._error_message(payload) or f"Request to {path} failed ({response.status_code})"
            logger.warning("service_error", method=method, url=url, status=response.status_code, error=message)
            raise ServiceError(message, status_code=response.status_code, payload=payload)

        if payload is None:
            raise ServiceError(f"Invalid JSON from {path}", status_code=response.status_code)
        return payload

    @staticmethod
    def _error_message(payload):
        if not isinstance(payload, dict):
            return None
        error = payload.get('error')
        if isinstance(error, dict):
            return error.get('message')
        return error or payload.get('message')

    # Text services

    def correct_hesudhar(self, text):
        return self._request('POST', '/api/admin/hesudhar/correct', json={'text': text})

    def romanize(self, text):
        return self._request('POST', '/api/admin/romanizer/fast', json={'text': text})

    def add_roman_word(self, word_sd, word_roman, user_id=None):
        body = {'word_sd': word_sd, 'word_roman': word_roman}
        if user_id is not None:
            body['user_id'] = user_id
        return self._request('POST', '/api/admin/romanizer/roman-words', json=body)

    def sync_romanizer(self, full=False):
        return self._request('POST', '/api/admin/romanizer/sync', json={'full': full})

    def sync_hesudhar(self, full=False):
        return self._request('POST', '/api/admin/hesudhar/sync', json={'full': full})

    # Content

    def create_couplets(self, records):
        """POST couplet records; always sent as an array."""
        return self._request('POST', '/api/admin/poetry/couplets', json=list(records))

    def list_poets(self, limit=100):
        return self._request('GET', '/api/admin/poets', params={'limit': limit}).get('poets', [])

    def list_tags(self):
        return self._request('GET', '/api/tags').get('tags', [])
