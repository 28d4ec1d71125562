import logging

from interview_relay.providers.base import ChatCompletionsClient
from interview_relay.services.prompts import build_problem_list_messages
from interview_relay.utils.deltas import extract_message_content

logger = logging.getLogger(__name__)


async def generate_problem_list(client: ChatCompletionsClient, query: str) -> str:
    """
    Ask the model for a list of interview problems about `query`.

    The content is returned verbatim. It should be a JSON array of
    {"id", "title", "difficulty"} objects, but is not parsed or validated here.
    """
    payload = await client.complete(build_problem_list_messages(query))
    content = extract_message_content(payload)
    if not content:
        logger.warning(f"[{client.name}] empty problem list content for query {query!r}")
    return content
