# memhub/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memhub.routers import brain_router
from memhub.startup import lifespan

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Initialize FastAPI app with lifespan
app = FastAPI(title="memhub", lifespan=lifespan)

# The web client runs on its own dev-server origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(brain_router)


@app.get("/health", tags=["health"])
async def health_check():
    """Lightweight health check; returns without touching providers or the database."""
    return {"status": "ok"}


if __name__ == "__main__":
    import os
    import uvicorn

    # Set DEV_MODE=true for hot reload
    dev_mode = os.getenv("DEV_MODE", "false").lower() == "true"
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("memhub.main:app", host="127.0.0.1", port=port, reload=dev_mode)
