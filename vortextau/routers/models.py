"""VortexTau Models Router - installed models under the configured namespace."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import runtime_config
from ..errors import GenerationError, error_response, log_error
from ..services.llm_client import LLMClient
from ..utils.deps import get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/models")
def list_models(client: LLMClient = Depends(get_llm_client)):
    """List models whose name starts with the configured namespace prefix."""
    try:
        models = client.list_models(prefix=runtime_config.model_namespace)
    except GenerationError as e:
        log_error(logger, e, context="models", include_traceback=False)
        return JSONResponse(status_code=500, content=error_response(e, "Failed to fetch models"))

    logger.info(f"Listed {len(models)} models under {runtime_config.model_namespace!r}")
    return models
