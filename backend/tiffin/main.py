from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tiffin.api.routes import router as api_router
from tiffin.config import settings
from tiffin.errors import TiffinError
from tiffin.logging import configure_logging, get_logger
from tiffin.storage.db import create_db_and_tables

app = FastAPI(title="Tiffin API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TiffinError)
async def tiffin_error_handler(request: Request, exc: TiffinError) -> JSONResponse:
    logger.info(
        "request.rejected path=%s error=%s status=%s", request.url.path, type(exc).__name__, exc.status_code
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
        headers=headers,
    )


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    logger.info("startup: env=%s", settings.env)
    create_db_and_tables()


app.include_router(api_router)
