"""Chat API endpoint implementation."""

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from .deps import ChatServiceDep, ErrorReporterDep
from .models import ChatRequest
from .streaming import stream_text_response

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(
    chat_request: ChatRequest,
    chat_service: ChatServiceDep,
    reporter: ErrorReporterDep,
) -> StreamingResponse:
    """Answer the latest message using Wikipedia context, streamed as text.

    The last element of ``messages`` is the question and everything before
    it is chat history.  Any failure is reported to the error tracker and
    surfaces as a 500 (or an aborted stream once output has started).
    """
    tokens = chat_service.stream_response(
        chat_request.messages, model_name=chat_request.llm
    )
    return await stream_text_response(
        tokens, reporter, service_name=chat_service.chat_service_name
    )
