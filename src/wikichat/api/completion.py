"""Suggested-questions endpoint implementation."""

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from .deps import ErrorReporterDep, SuggestionServiceDep
from .streaming import stream_text_response

router = APIRouter(prefix="/api", tags=["suggestions"])


@router.post("/completion")
async def completion(
    suggestion_service: SuggestionServiceDep,
    reporter: ErrorReporterDep,
) -> StreamingResponse:
    """Stream four suggested questions about recently added Wikipedia data.

    The request body is ignored.  If the suggestions record cannot be read
    the model is prompted with an empty context instead of failing.
    """
    return await stream_text_response(
        suggestion_service.stream_response(),
        reporter,
        service_name=suggestion_service.chat_service_name,
    )
