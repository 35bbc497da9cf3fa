"""
collabhive API entry point.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from collabhive.config import settings
from collabhive.api.v1.router import api_router
from collabhive.api.v1.helpers.responses import APIResponse
from logging import getLogger, Filter
import logging

logger = getLogger(__name__)
logger.setLevel(logging.INFO)


class HealthCheckFilter(Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.getMessage().find("/health") == -1


logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


app = FastAPI(title=settings.app_name, debug=settings.debug, redirect_slashes=False)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # error bodies always carry a top-level "message"
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = APIResponse(success=False, message=str(exc.detail), errors=[]).model_dump()
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    body = APIResponse(success=False, message="Invalid request", errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


@app.on_event("startup")
async def startup_event():
    logger.info("--- collabhive startup completed ---")


@app.on_event("shutdown")
async def shutdown_event():
    try:
        logger.info("--- Server shutting down! ---")

        from collabhive.db.session import dispose_engine
        from collabhive.db.valkey import close_valkey_client

        await dispose_engine()
        logger.info("--- Database connections closed. ---")

        await close_valkey_client()
        logger.info("--- Cache connection closed. ---")
    except Exception as e:
        logger.error(f"Warning: Error during shutdown: {e}")


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to CollabHive"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
