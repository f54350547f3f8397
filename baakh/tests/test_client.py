#!/usr/bin/env python3
"""
Unit tests for the workflow HTTP client.
"""

import unittest
from unittest.mock import MagicMock, patch

import requests

from baakh.errors import ServiceError
from baakh.workflow.client import BaakhClient


def fake_response(status=200, payload=None, invalid_json=False):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if invalid_json:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


class TestBaakhClient(unittest.TestCase):
    """Request shapes and error mapping of BaakhClient."""

    def setUp(self):
        self.client = BaakhClient(base_url="http://baakh.test/", timeout=3)

    @patch.object(requests.Session, "request")
    def test_correct_hesudhar_posts_text(self, mock_request):
        mock_request.return_value = fake_response(payload={"correctedText": "x", "corrections": []})

        result = self.client.correct_hesudhar("x")

        self.assertEqual(result["correctedText"], "x")
        mock_request.assert_called_once_with(
            "POST", "http://baakh.test/api/admin/hesudhar/correct", json={"text": "x"}, timeout=3
        )

    @patch.object(requests.Session, "request")
    def test_create_couplets_always_sends_an_array(self, mock_request):
        mock_request.return_value = fake_response(201, {"success": True, "couplets": []})
        record = {"couplet_slug": "dil", "lang": "sd"}

        self.client.create_couplets((record,))

        _, kwargs = mock_request.call_args
        self.assertEqual(kwargs["json"], [record])

    @patch.object(requests.Session, "request")
    def test_list_poets_unwraps_poets(self, mock_request):
        mock_request.return_value = fake_response(payload={"poets": [{"id": 1}], "total": 1})

        self.assertEqual(self.client.list_poets(), [{"id": 1}])
        _, kwargs = mock_request.call_args
        self.assertEqual(kwargs["params"], {"limit": 100})

    @patch.object(requests.Session, "request")
    def test_sync_romanizer_sends_full_flag(self, mock_request):
        mock_request.return_value = fake_response(payload={"success": True, "newEntries": 0})

        self.client.sync_romanizer(full=True)

        args, kwargs = mock_request.call_args
        self.assertEqual(args[1], "http://baakh.test/api/admin/romanizer/sync")
        self.assertEqual(kwargs["json"], {"full": True})

    @patch.object(requests.Session, "request")
    def test_error_body_message_is_surfaced(self, mock_request):
        mock_request.return_value = fake_response(
            409, {"error": {"message": "Duplicate key violation. Please use a unique couplet slug."}}
        )

        with self.assertRaises(ServiceError) as ctx:
            self.client.create_couplets([{}])

        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.message, "Duplicate key violation. Please use a unique couplet slug.")

    @patch.object(requests.Session, "request")
    def test_error_without_body_uses_status(self, mock_request):
        mock_request.return_value = fake_response(502, invalid_json=True)

        with self.assertRaises(ServiceError) as ctx:
            self.client.romanize("x")

        self.assertIn("502", ctx.exception.message)

    @patch.object(requests.Session, "request")
    def test_timeout_becomes_service_error(self, mock_request):
        mock_request.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(ServiceError):
            self.client.sync_hesudhar()

    @patch.object(requests.Session, "request")
    def test_invalid_json_on_success_is_an_error(self, mock_request):
        mock_request.return_value = fake_response(200, invalid_json=True)

        with self.assertRaises(ServiceError) as ctx:
            self.client.list_tags()

        self.assertIn("Invalid JSON", ctx.exception.message)

    def test_defaults_come_from_config(self):
        from baakh import config

        client = BaakhClient()
        self.assertEqual(client.base_url, config.API_URL.rstrip("/"))
        self.assertEqual(client.timeout, config.HTTP_TIMEOUT)


if __name__ == "__main__":
    unittest.main()
