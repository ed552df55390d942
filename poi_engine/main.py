"""
FastAPI application with all routes.
"""
import logging

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from poi_engine.config import get_settings
from poi_engine.places.routes import router as poi_router
from poi_engine.reconcile.routes import router as route_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title="Route POI Engine",
    description="Multi-provider POI search along routes and safe write-back to the route store",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def verify_api_key(x_api_key: str = Header(...)) -> str:
    """Verify API key from header."""
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


app.include_router(poi_router, dependencies=[Depends(verify_api_key)])
app.include_router(route_router, dependencies=[Depends(verify_api_key)])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
