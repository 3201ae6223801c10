"""
VortexTau Search Router - web search with the server-held SerpAPI key.

Failures answer 500 with `{"error": ...}`; the client treats any failure
as "no results".
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import ConfigurationError, RetrievalError, error_response, log_error
from ..services.search_client import SearchClient
from ..utils.deps import get_search_client

logger = logging.getLogger(__name__)

router = APIRouter()


class SearchRequest(BaseModel):
    query: str


@router.post("/search")
def search(request: SearchRequest, client: SearchClient = Depends(get_search_client)):
    try:
        results = client.search(request.query)
    except ConfigurationError as e:
        log_error(logger, e, context="search", include_traceback=False)
        return JSONResponse(status_code=500, content=error_response(e))
    except RetrievalError as e:
        log_error(logger, e, context="search", include_traceback=False)
        return JSONResponse(status_code=500, content=error_response(e, "Failed to fetch search results"))

    return {"results": [r.to_dict() for r in results]}
