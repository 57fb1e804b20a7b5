import time
import uuid

from quote_sync.common.logging.json_logger import REQUEST_GUID, REQUEST_METHOD, setup_logger

LOGGER = setup_logger()


def setup_fastapi_app(service: str, routers: list = [], port: int = 8080):
    import logging

    from fastapi import FastAPI, Request

    logger = setup_logger()

    logging.getLogger("uvicorn.access").disabled = True

    app = FastAPI(title=f"{service.title()} Service")

    @app.middleware("http")
    async def guid_and_timing_middleware(request: Request, call_next):
        request_guid = str(uuid.uuid4())
        start_time = time.time()

        request.state.guid = request_guid
        request.state.start_time = start_time
        request.state.method_path = f"{request.url.path} [{request.method}]"
        guid_token = REQUEST_GUID.set(request_guid)
        method_token = REQUEST_METHOD.set(request.state.method_path)

        try:
            response = await call_next(request)

            if not request.url.path.endswith("/health"):
                duration = time.time() - start_time
                logger.info(f"Request: {request.method} {request.url.path} {response.status_code} {duration:.2f}s")

            return response
        finally:
            REQUEST_GUID.reset(guid_token)
            REQUEST_METHOD.reset(method_token)

    if routers:
        for router in routers:
            app.include_router(router)

    return app, port
