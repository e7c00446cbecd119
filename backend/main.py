import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.logger import setup_logger
from db.database import DatabaseNotConfigured, create_db_and_tables, is_configured
from routers.alerts import router as alerts_router
from routers.health import router as health_router
from routers.inventory import router as inventory_router
from routers.session import router as session_router

setup_logger()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if is_configured():
        await create_db_and_tables()
    else:
        logger.error("Missing DATABASE_URL env; data endpoints will return 500")
    yield


app = FastAPI(
    title="PreCheck API",
    description="Staff stock checks with expiry and low-stock alerts",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DatabaseNotConfigured)
async def database_not_configured_handler(request: Request, exc: DatabaseNotConfigured):
    logger.error("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "database is not configured"},
    )


app.include_router(health_router, prefix="/api", tags=["health"])
app.include_router(session_router, prefix="/api", tags=["session"])
app.include_router(inventory_router, prefix="/api", tags=["inventory"])
app.include_router(alerts_router, prefix="/api", tags=["alerts"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=True)
