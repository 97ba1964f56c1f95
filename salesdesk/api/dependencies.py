"""API dependencies"""
import logging
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# set by the app lifespan
_engine = None


def set_engine(engine):
    """Register the dashboard core (called at startup)"""
    global _engine
    _engine = engine


def get_engine():
    """Dependency returning the dashboard core"""
    if _engine is None:
        logger.error("Engine not initialized")
        raise HTTPException(status_code=503, detail="Engine not available")
    return _engine


def current_engine():
    """The registered core, or None before startup"""
    return _engine
