from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated, Literal
from typing import Any, Dict, Optional, Union
import logging
from terrain_viewer.config import RenderMode

# Configure logging
logger = logging.getLogger(__name__)


class BoundingBoxRequest(BaseModel):
    """Viewport and render mode sent to the image service.

    Built once per Generate click and discarded after the reply is handled.
    Field aliases are the wire names.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    upper_left_longitude: float = Field(alias="ulx", description="Upper left X (longitude)")
    upper_left_latitude: float = Field(alias="uly", description="Upper left Y (latitude)")
    lower_right_longitude: float = Field(alias="lrx", description="Lower right X (longitude)")
    lower_right_latitude: float = Field(alias="lry", description="Lower right Y (latitude)")
    zoom_level: int = Field(description="Map zoom at click time")
    render_mode: RenderMode = Field(alias="option", description="Requested image style")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ImageResponse(BaseModel):
    """Reply from the image service."""
    image_path: str


# Render state, one variant per UI phase
class Idle(BaseModel):
    kind: Literal["idle"] = "idle"

class Loading(BaseModel):
    kind: Literal["loading"] = "loading"
    option: RenderMode

class Loaded(BaseModel):
    kind: Literal["loaded"] = "loaded"
    image_path: str

class Failed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str
    status_code: Optional[int] = None

RenderState = Annotated[Union[Idle, Loading, Loaded, Failed], Field(discriminator="kind")]


class ViewerState(BaseModel):
    render_mode: RenderMode = "hillshade"
    image_path: str = ""  # Last image returned by the service
    status: RenderState = Field(default_factory=Idle)

    @property
    def loading(self) -> bool:
        return isinstance(self.status, Loading)
