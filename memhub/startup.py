# memhub/startup.py
"""
Application startup logic and health checks.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from memhub.config import settings
from memhub.db.session import init_database
from memhub.services.config_service import load_ai_config
from memhub.services.exceptions import ConfigurationError
from memhub.services.llm_providers import create_llm_provider


logger = logging.getLogger(__name__)


def check_llm_provider_available() -> tuple[bool, str]:
    """Check if the configured chat provider is available.

    Returns:
        Tuple of (is_available, provider_name)
    """
    config = load_ai_config()
    try:
        provider, model = create_llm_provider(config)
        return provider.is_available(), provider.provider_name
    except ConfigurationError as e:
        logger.error(f"Failed to create LLM provider: {e}")
        return False, config.provider or "unknown"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # Sync route handlers and provider calls run on the default executor
    executor = ThreadPoolExecutor(max_workers=settings.THREAD_POOL_SIZE)
    loop = asyncio.get_running_loop()
    loop.set_default_executor(executor)
    logger.info(f"Configured thread pool with {settings.THREAD_POOL_SIZE} workers")

    # Startup
    init_database()

    is_available, provider_name = check_llm_provider_available()
    if not is_available:
        logger.warning(f"LLM provider '{provider_name}' is not available - some features may not work")
    else:
        logger.info(f"LLM provider '{provider_name}' is ready")

    yield

    # Shutdown
    logger.info("Application shutting down")
    executor.shutdown(wait=False)
