# memhub/services/__init__.py
# Service layer for memhub

# Config service
from memhub.services.config_service import (
    AIConfig,
    ConfigService,
    get_config_service,
    get_setting,
    load_ai_config,
)

# Errors
from memhub.services.exceptions import (
    MemhubError,
    ConfigurationError,
    GenerationError,
    TransientProviderError,
    EmbeddingError,
)

# Generation service
from memhub.services.generation_service import (
    GenerationService,
    JSONResult,
    get_generation_service,
    generate_text,
    generate_json,
)

__all__ = [
    "AIConfig",
    "ConfigService",
    "get_config_service",
    "get_setting",
    "load_ai_config",
    "MemhubError",
    "ConfigurationError",
    "GenerationError",
    "TransientProviderError",
    "EmbeddingError",
    "GenerationService",
    "JSONResult",
    "get_generation_service",
    "generate_text",
    "generate_json",
]
