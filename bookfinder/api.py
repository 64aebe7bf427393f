"""
FastAPI backend for the book discovery UI.
Exposes REST endpoints for the web frontend.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging

# Initialize Logging EARLY to capture import errors
from bookfinder.logger import setup_logging
setup_logging()
logger = logging.getLogger(__name__)

try:
    from bookfinder.cache import recommendation_cache
    from bookfinder.config import config
    from bookfinder.search import book_search
except Exception as e:
    logger.critical(f"Startup Failure: {e}", exc_info=True)
    raise e

SECRET_KEYS = ["OPENROUTER_API_KEY", "GOOGLE_API_KEY", "GOOGLE_CX"]
VALID_CONFIG_KEYS = SECRET_KEYS + ["LLM_MODEL", "LLM_TIMEOUT", "CACHE_TTL_SECONDS", "USE_STATIC_FALLBACK"]

@asynccontextmanager
async def lifespan(app: FastAPI):
    config.validate()
    recommendation_cache.start_sweeper()
    yield
    await recommendation_cache.stop_sweeper()

app = FastAPI(title="Bookfinder API", version="1.0.0", lifespan=lifespan)

# Allow CORS for the browser frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============== Models ==============

class SearchRequest(BaseModel):
    query: str

class ConfigUpdate(BaseModel):
    key: str
    value: str

def mask(value: str) -> str:
    if len(value) > 4:
        return "***" + value[-4:]
    return "***"

# ============== Routes ==============

@app.get("/health")
async def health():
    return {"status": "ok", "cached_queries": len(recommendation_cache)}

@app.post("/search")
async def search(request: SearchRequest):
    query = request.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query must not be empty")
    try:
        result = await book_search.search(query)
        return result.to_wire()
    except Exception as e:
        logger.error(f"Search failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/cache/clear")
async def clear_cache():
    count = len(recommendation_cache)
    recommendation_cache.clear()
    logger.info(f"Recommendation cache cleared ({count} entries)")
    return {"success": True, "cleared": count}

@app.get("/config")
async def get_config(reveal_keys: bool = False):
    """
    Get current configuration.
    """
    try:
        # Force reload from disk
        config._load_from_file()

        cfg = {
            "OPENROUTER_API_KEY": config.OPENROUTER_API_KEY,
            "GOOGLE_API_KEY": config.GOOGLE_API_KEY,
            "GOOGLE_CX": config.GOOGLE_CX,
            "LLM_MODEL": config.LLM_MODEL,
            "LLM_TIMEOUT": config.LLM_TIMEOUT,
            "CACHE_TTL_SECONDS": config.CACHE_TTL_SECONDS,
            "USE_STATIC_FALLBACK": config.USE_STATIC_FALLBACK,
        }

        if not reveal_keys:
            for key in SECRET_KEYS:
                if cfg[key]:
                    cfg[key] = mask(cfg[key])

        return cfg
    except Exception as e:
        logger.error(f"GET /config failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/config")
async def update_config(update: ConfigUpdate):
    """
    Update a single configuration key.
    """
    if update.key not in VALID_CONFIG_KEYS:
        raise HTTPException(status_code=400, detail=f"Invalid config key: {update.key}")

    try:
        config.save(update.key, update.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid value for {update.key}: {e}")
    except OSError as e:
        logger.error(f"Failed to update config: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    shown = mask(update.value) if update.key in SECRET_KEYS else update.value
    logger.info(f"Config updated: {update.key} = {shown}")
    return {"success": True}

# ============== Run Server ==============

def start_server(port: int = None):
    """Start the API server"""
    import argparse
    import uvicorn

    if port is None:
        parser = argparse.ArgumentParser(description="Bookfinder API Server")
        parser.add_argument("--port", type=int, default=8743, help="Port to bind to")
        args, unknown = parser.parse_known_args()
        port = args.port

    logger.info(f"Starting API server on port {port}")
    uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")

if __name__ == "__main__":
    start_server()
