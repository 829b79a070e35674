import logging
from typing import Awaitable, Callable, Optional

from terrain_viewer.client import ImageRequestError, ImageServiceClient
from terrain_viewer.models import (
    BoundingBoxRequest,
    Failed,
    Idle,
    Loaded,
    Loading,
    RenderState,
    ViewerState,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[ViewerState], Awaitable[None]]


class RequestDispatcher:
    """
    Sends one bounding box to the image service and records the outcome.

    Failures are logged and kept in the state, never raised. The state
    always leaves Loading before dispatch returns.
    """

    def __init__(self, client: ImageServiceClient, on_change: Optional[StateListener] = None):
        self.client = client
        self.on_change = on_change

    async def _notify(self, state: ViewerState) -> None:
        if self.on_change is not None:
            await self.on_change(state)

    async def dispatch(self, request: BoundingBoxRequest, state: ViewerState) -> RenderState:
        state.status = Loading(option=request.render_mode)
        try:
            await self._notify(state)
            image_path = await self.client.request_image(request)
        except ImageRequestError as e:
            logger.error(f"Error sending bounding box: {e}")
            state.status = Failed(reason=str(e), status_code=e.status_code)
        else:
            logger.info(f"Received {request.render_mode} image: {image_path}")
            state.image_path = image_path
            state.status = Loaded(image_path=image_path)
        finally:
            # Cancelled mid-flight, or the listener failed
            if state.loading:
                state.status = Idle()
            await self._notify(state)
        return state.status
