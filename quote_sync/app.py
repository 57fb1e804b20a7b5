import uvicorn

from quote_sync.common.fastapi_setup import setup_fastapi_app
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.config import settings
from quote_sync.routes import routers

LOGGER = setup_logger()

app, _ = setup_fastapi_app("quote-sync", routers, settings.PORT)

if __name__ == "__main__":
    LOGGER.info(f"Quote Sync Service is running on port {settings.PORT}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.PORT,
        log_config=None,
        access_log=False,
    )
