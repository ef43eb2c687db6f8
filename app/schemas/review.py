from pydantic import BaseModel


class GuidanceRequest(BaseModel):
    query: str | None = None


class InterviewFeedbackRequest(BaseModel):
    question: str | None = None
    answer: str | None = None


class FeedbackResponse(BaseModel):
    feedback: str


class GuidanceResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
