from pydantic import BaseModel, Field, ConfigDict
from typing import List


class Message(BaseModel):
    """One turn of the interview conversation"""
    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "role": "user",
                    "content": "Can you walk me through a two-sum solution?"
                }
            ]
        }
    )


class ChatRequest(BaseModel):
    # Conversation order; forwarded upstream unchanged
    messages: List[Message] = Field(..., min_length=1)


class ProblemListRequest(BaseModel):
    query: str
