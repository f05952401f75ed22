"""Tests for client.py - image download with mocked requests."""

import pytest
import requests
from unittest.mock import Mock, patch
from puml2drawio.client import ImageServiceClient, ImageServiceError


class TestImageServiceClient:
    def test_init(self):
        assert ImageServiceClient(timeout=5).timeout == 5

    @patch("puml2drawio.client.requests.get")
    def test_download_success(self, mock_get):
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.content = b"<svg/>"
        mock_get.return_value = mock_response

        data = ImageServiceClient(timeout=7).download("https://example.com/svg/abc")

        assert data == b"<svg/>"
        args, kwargs = mock_get.call_args
        assert args[0] == "https://example.com/svg/abc"
        assert kwargs["timeout"] == 7

    @patch("puml2drawio.client.requests.get")
    def test_http_error(self, mock_get):
        mock_response = Mock()
        mock_response.status_code = 500
        mock_response.text = "Internal server error"
        mock_get.return_value = mock_response

        with pytest.raises(ImageServiceError, match="HTTP 500"):
            ImageServiceClient().download("https://example.com/svg/abc")

    @patch("puml2drawio.client.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()
        with pytest.raises(ImageServiceError, match="timed out after 30 seconds"):
            ImageServiceClient().download("https://example.com/svg/abc")

    @patch("puml2drawio.client.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ImageServiceError, match="Failed to connect"):
            ImageServiceClient().download("https://example.com/svg/abc")

    @patch("puml2drawio.client.requests.get")
    def test_other_request_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.RequestException("bad")
        with pytest.raises(ImageServiceError, match="request failed"):
            ImageServiceClient().download("https://example.com/svg/abc")
