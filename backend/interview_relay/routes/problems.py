from fastapi import APIRouter, Depends

from interview_relay.dependencies import get_groq_client
from interview_relay.models.request import ProblemListRequest
from interview_relay.models.response import ErrorResponse, ProblemListResponse
from interview_relay.providers.groq import GroqClient
from interview_relay.services.problems import generate_problem_list

router = APIRouter()


@router.post(
    "/generate-problem/list",
    response_model=ProblemListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_problems(
    request: ProblemListRequest,
    client: GroqClient = Depends(get_groq_client),
):
    """POST /api/generate-problem/list - raw JSON-array text of problems for a topic"""
    result = await generate_problem_list(client, request.query)
    return ProblemListResponse(result=result)
