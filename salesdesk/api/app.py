# salesdesk/api/app.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn

from .dependencies import set_engine, current_engine
from .routes import router
from .schemas import HealthResponse

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings and sales data on startup"""
    logger.info("Starting SalesDesk API")

    try:
        from config.settings import get_settings
        get_settings()

        from ..engine.core import SalesDeskCore
        engine = SalesDeskCore()
        engine.load_records()
        set_engine(engine)
        logger.info("Engine initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize engine: {e}")
        set_engine(None)

    yield

    logger.info("Shutting down SalesDesk API")
    set_engine(None)


app = FastAPI(
    title="SalesDesk API",
    description="Customer sales history and sales chat assistant",
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "message": str(exc)}
    )


@app.get("/")
async def root():
    return {
        "name": "SalesDesk API",
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check"""
    engine = current_engine()
    if engine is None:
        return HealthResponse(status="degraded", version=VERSION, engine_status="not initialized")

    return HealthResponse(
        status="degraded" if engine.state['error'] else "healthy",
        version=VERSION,
        engine_status="running",
        record_count=len(engine.records or [])
    )


if __name__ == "__main__":
    import os

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    port = int(os.getenv("API_PORT", 8000))

    uvicorn.run(
        "salesdesk.api.app:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info"
    )
