from fastapi import APIRouter, Depends

from interview_relay.dependencies import get_groq_client
from interview_relay.providers.groq import GroqClient


router = APIRouter()


@router.get("/health")
async def health(client: GroqClient = Depends(get_groq_client)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "model": client.model,
        "configured": client.is_configured(),
    }
