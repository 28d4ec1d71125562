"""
Interview chat relay.

POST /api/stream-chat/groq streams the interviewer's reply as plain text,
one upstream delta per body chunk.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from interview_relay.dependencies import get_groq_client
from interview_relay.models.request import ChatRequest
from interview_relay.models.response import ErrorResponse
from interview_relay.providers.groq import GroqClient
from interview_relay.services.relay import StreamRelay

router = APIRouter()


@router.post(
    "/stream-chat/groq",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/plain": {}}},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def stream_chat(
    request: ChatRequest,
    client: GroqClient = Depends(get_groq_client),
):
    """
    POST /api/stream-chat/groq - relay a chat completion as raw text

    The body is the concatenation of the model's text deltas, with no
    envelope and no trailing sentinel. Configuration and upstream errors
    are reported as {"error": ...} with status 500 before streaming starts.
    """
    messages = [m.model_dump() for m in request.messages]

    relay = StreamRelay(client)
    await relay.open(messages)

    return StreamingResponse(
        relay.iter_bytes(),
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
        background=BackgroundTask(relay.aclose),
    )
