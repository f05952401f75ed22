import logging

import requests

log = logging.getLogger(__name__)


class ImageServiceError(Exception):
    """Raised when image service request fails."""

    pass


class ImageServiceClient:
    """HTTP client downloading diagrams rendered by PlantUML or Mermaid image services."""

    def __init__(self, timeout: int = 30):
        """
        :param timeout: Request timeout in seconds
        """
        self.timeout = timeout

    def download(self, url: str) -> bytes:
        """
        Fetch rendered image.

        :param url: Image URL, as built by puml2drawio.imgurl
        :return: Image bytes
        :raises ImageServiceError: If request fails
        """
        log.debug(f"Downloading {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise ImageServiceError(f"Image service request timed out after {self.timeout} seconds")
        except requests.exceptions.ConnectionError as e:
            raise ImageServiceError(f"Failed to connect to image service: {e}")
        except requests.exceptions.RequestException as e:
            raise ImageServiceError(f"Image service request failed: {e}")
        if response.status_code != 200:
            raise ImageServiceError(f"Image service returned HTTP {response.status_code}: {response.text[:200]}")
        return response.content
