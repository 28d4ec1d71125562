from pydantic import BaseModel


class ProblemListResponse(BaseModel):
    """Raw model output; expected to be a JSON array of problems but not validated"""

    result: str


class ErrorResponse(BaseModel):
    error: str
