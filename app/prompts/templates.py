from __future__ import annotations

from app.services.review_requests import (
    DocumentReview,
    GuidanceQuery,
    InterviewFeedback,
    ReviewRequest,
)

RESUME_REVIEW_TEMPLATE = """Review this resume and provide constructive feedback to help improve it for software engineering roles.

Here is the resume content:
\"\"\"
{resume_text}
\"\"\"
"""

CAREER_GUIDANCE_TEMPLATE = """You are a professional career guidance chatbot.

Given the following user question, offer tailored guidance:

User Question:
"{query}"

Respond with:
1. Recommended Career Paths
2. Required Skills to Acquire
3. Month-by-Month Learning Roadmap (6 months)
4. Useful Online Resources (include links if possible)

Respond clearly and concisely. Add some friendly words, and feel like chatting with a career friend.
"""

INTERVIEW_FEEDBACK_TEMPLATE = """You are an experienced interviewer.
Analyze the following response to the interview question and provide detailed constructive feedback.

Question: "{question}"
Answer: "{answer}"

Your feedback should help the candidate improve.
"""


def compose_prompt(request: ReviewRequest, *, resume_text: str | None = None) -> str:
    # str.format does not re-scan substituted values, so braces in user text are safe.
    if isinstance(request, DocumentReview):
        if resume_text is None:
            raise ValueError("resume_text is required to compose a document review prompt.")
        return RESUME_REVIEW_TEMPLATE.format(resume_text=resume_text)
    if isinstance(request, GuidanceQuery):
        return CAREER_GUIDANCE_TEMPLATE.format(query=request.query)
    if isinstance(request, InterviewFeedback):
        return INTERVIEW_FEEDBACK_TEMPLATE.format(question=request.question, answer=request.answer)
    raise TypeError(f"Unsupported review request type: {type(request).__name__}")
