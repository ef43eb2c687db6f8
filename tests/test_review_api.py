import os
import shutil
import sys
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_ai_client, get_upload_store  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.errors import InferenceError  # noqa: E402
from app.main import app  # noqa: E402
from app.storage.temp_files import TempFileStore  # noqa: E402

RESUME_TEXT = b"Experienced backend engineer with 6 years of Python, PostgreSQL and AWS."


class FakeAIClient:
    def __init__(self, completion: str = "Solid resume. Quantify your impact.", error: Exception | None = None):
        self.completion = completion
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        self.calls.append((prompt, model))
        if self.error is not None:
            raise self.error
        return self.completion


class ReviewApiTestCase(unittest.TestCase):
    def setUp(self):
        self.upload_dir = tempfile.mkdtemp()
        self.store = TempFileStore(self.upload_dir)
        self.ai = FakeAIClient()
        app.dependency_overrides[get_upload_store] = lambda: self.store
        app.dependency_overrides[get_ai_client] = lambda: self.ai
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def _stored_files(self) -> list[str]:
        return os.listdir(self.upload_dir)

    def _post_resume(self, content: bytes, filename: str = "resume.txt", media_type: str = "text/plain"):
        return self.client.post("/review", files={"resume": (filename, content, media_type)})


class DocumentReviewTests(ReviewApiTestCase):
    def test_text_resume_returns_feedback_and_removes_upload(self):
        response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"feedback": "Solid resume. Quantify your impact."})
        self.assertEqual(self._stored_files(), [])
        self.assertEqual(len(self.ai.calls), 1)
        prompt, _model = self.ai.calls[0]
        self.assertIn("software engineering roles", prompt)
        self.assertIn(RESUME_TEXT.decode(), prompt)

    def test_completion_is_returned_verbatim(self):
        self.ai.completion = "  **Summary**\n\n- keep it to one page  \n"
        response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["feedback"], "  **Summary**\n\n- keep it to one page  \n")

    def test_missing_file_returns_400_without_work(self):
        with patch("app.services.review_service.extract_document_text") as extract:
            response = self.client.post("/review")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No resume file uploaded."})
        extract.assert_not_called()
        self.assertEqual(self.ai.calls, [])
        self.assertEqual(self._stored_files(), [])

    def test_unreadable_document_returns_500_and_skips_inference(self):
        response = self._post_resume(b"\x00\x01\x02\x03binary", filename="resume.pdf", media_type="application/pdf")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to process resume."})
        self.assertEqual(self.ai.calls, [])
        self.assertEqual(self._stored_files(), [])

    def test_blank_document_is_treated_as_extraction_failure(self):
        response = self._post_resume(b"   \n\t\n")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to process resume."})
        self.assertEqual(self.ai.calls, [])

    def test_inference_failure_does_not_leak_provider_detail(self):
        self.ai.error = InferenceError("Gemini request failed: 429 quota exceeded for project acme-prod-42")
        response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to process resume."})
        self.assertNotIn("acme-prod-42", response.text)
        self.assertNotIn("quota", response.text)
        self.assertEqual(self._stored_files(), [])

    def test_unexpected_fault_still_cleans_up(self):
        self.ai.error = RuntimeError("connection reset by peer")
        response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to process resume."})
        self.assertEqual(self._stored_files(), [])

    def test_upload_is_released_exactly_once_on_every_outcome(self):
        scenarios = [
            (RESUME_TEXT, None),
            (b"\x00\x00\x00", None),
            (RESUME_TEXT, InferenceError("provider down")),
        ]
        for content, error in scenarios:
            with self.subTest(content=content[:8], error=error):
                self.ai.error = error
                with patch.object(self.store, "release", wraps=self.store.release) as release:
                    self._post_resume(content)
                self.assertEqual(release.call_count, 1)
                self.assertEqual(self._stored_files(), [])

    def test_review_uses_review_model(self):
        with patch("app.api.v1.review.settings", replace(settings, review_model="review-model-x")):
            response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.ai.calls[0][1], "review-model-x")

    def test_cleanup_failure_does_not_change_response(self):
        def failing_unlink(path, missing_ok=False):
            raise PermissionError(13, "Permission denied", str(path))

        with patch("pathlib.Path.unlink", autospec=True, side_effect=failing_unlink):
            with self.assertLogs("app.storage.temp_files", level="WARNING") as logs:
                response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"feedback": "Solid resume. Quantify your impact."})
        self.assertIn("upload_cleanup_failed", logs.output[0])

    def test_oversized_upload_returns_413_without_storing(self):
        with patch("app.api.v1.review.settings", replace(settings, max_upload_bytes=16)):
            with patch.object(self.store, "acquire", wraps=self.store.acquire) as acquire:
                response = self._post_resume(RESUME_TEXT)

        self.assertEqual(response.status_code, 413)
        self.assertIn("error", response.json())
        acquire.assert_not_called()
        self.assertEqual(self.ai.calls, [])


class CareerChatbotTests(ReviewApiTestCase):
    def test_query_returns_guidance_message(self):
        self.ai.completion = "Start with SQL, then learn Spark and Airflow."
        response = self.client.post("/career/ask-chatbot", json={"query": "How do I become a data engineer?"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Start with SQL, then learn Spark and Airflow."})
        prompt, model = self.ai.calls[0]
        self.assertIn("How do I become a data engineer?", prompt)
        self.assertIn("Month-by-Month Learning Roadmap (6 months)", prompt)
        self.assertEqual(model, settings.guidance_model)

    def test_missing_query_returns_400(self):
        for body in ({}, {"query": ""}, {"query": "   "}, {"query": None}):
            with self.subTest(body=body):
                response = self.client.post("/career/ask-chatbot", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Missing query."})
        self.assertEqual(self.ai.calls, [])

    def test_malformed_body_returns_400(self):
        response = self.client.post(
            "/career/ask-chatbot",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request body."})
        self.assertEqual(self.ai.calls, [])

    def test_inference_failure_returns_generic_error(self):
        self.ai.error = InferenceError("OpenAI request failed: invalid api key sk-live-123")
        response = self.client.post("/career/ask-chatbot", json={"query": "Should I learn Rust?"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Something went wrong with the chatbot."})
        self.assertNotIn("sk-live-123", response.text)


class MockInterviewTests(ReviewApiTestCase):
    def test_question_and_answer_return_feedback(self):
        self.ai.completion = "Use the STAR format."
        payload = {"question": "Tell me about a conflict.", "answer": "I talked to my teammate."}
        response = self.client.post("/mock-interview", json=payload)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"feedback": "Use the STAR format."})
        prompt, model = self.ai.calls[0]
        self.assertIn('Question: "Tell me about a conflict."', prompt)
        self.assertIn('Answer: "I talked to my teammate."', prompt)
        self.assertEqual(model, settings.interview_model)

    def test_empty_answer_returns_400(self):
        response = self.client.post("/mock-interview", json={"question": "Why us?", "answer": ""})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Question and answer are required."})
        self.assertEqual(self.ai.calls, [])

    def test_missing_question_returns_400(self):
        response = self.client.post("/mock-interview", json={"answer": "Because of the mission."})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.ai.calls, [])

    def test_inference_failure_returns_500(self):
        self.ai.error = InferenceError("Gemini returned an empty completion.")
        response = self.client.post("/mock-interview", json={"question": "Why us?", "answer": "Mission."})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to get feedback from AI."})


if __name__ == "__main__":
    unittest.main()
