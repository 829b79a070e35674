import os
import logging
from fastapi import FastAPI
from chainlit.utils import mount_chainlit

from terrain_viewer.config import APP_CONFIG

# Configure logging
logger = logging.getLogger(__name__)

app = FastAPI()

@app.get("/api")
def read_main():
    return {
        "message": "Terrain Image Generator API",
        "image_endpoint": APP_CONFIG.image_service.endpoint,
    }

# Mount the Chainlit app with the correct path
current_dir = os.path.dirname(os.path.abspath(__file__))
app_path = os.path.join(current_dir, "app.py")
# leave path="/" we want to load the app at the root
mount_chainlit(app=app, target=app_path, path="/")

@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources when the FastAPI application shuts down."""
    logger.info("FastAPI application shutting down")


def main():
    import uvicorn
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    uvicorn.run(
        "terrain_viewer.main:app",
        host=APP_CONFIG.server.host,
        port=APP_CONFIG.server.port,
        reload=os.getenv("RELOAD", "").lower() in ("1", "true")
    )

if __name__ == "__main__":
    main()
