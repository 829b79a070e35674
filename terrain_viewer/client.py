import logging
import httpx
from typing import Optional
from pydantic import ValidationError

from terrain_viewer.config import APP_CONFIG
from terrain_viewer.models import BoundingBoxRequest, ImageResponse

# Configure logging
logger = logging.getLogger(__name__)


class ImageRequestError(RuntimeError):
    """The image service could not produce an image reference."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ImageServiceClient:
    """
    Client for the Image Generation Service.

    This client posts a bounding box to the service and returns the
    reference of the generated image.
    """

    def __init__(
        self,
        endpoint: str = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client with the service URL.

        Args:
            endpoint: Full URL of the image endpoint
            timeout: Seconds to wait for a reply, None to wait forever
            transport: Optional transport, mainly for tests
        """
        self.endpoint = endpoint or APP_CONFIG.image_service.endpoint
        self.timeout = timeout
        self.transport = transport
        logger.info(f"Initializing ImageServiceClient with endpoint: {self.endpoint}")
        self.client = None

    async def _get_client(self):
        """Get or create an HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self.client

    async def close(self):
        """Close the HTTP client connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Closed HTTP client connection")

    async def request_image(self, request: BoundingBoxRequest) -> str:
        """
        Ask the service to render the given bounding box.

        Args:
            request: Viewport and render mode to send

        Returns:
            The image reference (URL or path) from the reply

        Raises:
            ImageRequestError: on a non-2xx status, a transport failure or
                a reply without an image reference
        """
        try:
            client = await self._get_client()
            response = await client.post(
                self.endpoint,
                headers={"Content-Type": "application/json"},
                json=request.to_payload()
            )

            # Check if the request was successful
            response.raise_for_status()

            # Parse the response
            return ImageResponse(**response.json()).image_path
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during image request: {e.response.text}")
            raise ImageRequestError(
                f"Failed to send bounding box. Status: {e.response.status_code}",
                status_code=e.response.status_code
            )
        except httpx.RequestError as e:
            logger.error(f"Request error during image request: {e!r}")
            raise ImageRequestError(f"Could not connect to image service: {e!r}")
        except (ValidationError, ValueError, TypeError) as e:
            logger.error(f"Malformed reply from image service: {e}")
            raise ImageRequestError(f"Image service reply has no image_path: {e}")
