import os
import sys
import unittest
from io import BytesIO
from pathlib import Path

# Keep API tests deterministic: no outbound calls, no rate limiting.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ["GEMINI_API_KEY"] = ""

from docx import Document
from fastapi.testclient import TestClient
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_ai.ai.types import GenerationResult  # noqa: E402
from resume_ai.api.deps import get_resume_service  # noqa: E402
from resume_ai.main import app  # noqa: E402
from resume_ai.services.resume_service import ResumeService  # noqa: E402
from resume_ai.sessions.store import SessionStore  # noqa: E402

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FakeLLM:
    def __init__(self):
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        if "2-sentence summary" in prompt:
            return GenerationResult(text="Backend engineer with deep Java experience.")
        return GenerationResult(text="Your key strength is Java backend work.")


class ExplodingService:
    def has_resume(self, session_id: str) -> bool:
        return True

    async def answer_question(self, session_id, question, context=None):
        raise RuntimeError("store exploded")


def make_docx(*paragraphs: str) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.llm = FakeLLM()
        self.service = ResumeService(SessionStore(shards=4), self.llm)
        app.dependency_overrides[get_resume_service] = lambda: self.service

    def tearDown(self):
        app.dependency_overrides.clear()

    def _upload_docx(self) -> dict:
        content = make_docx("Jane Doe", "5 years Java backend with Spring Boot")
        response = self.client.post(
            "/api/resume/upload",
            files={"file": ("resume.docx", content, DOCX_MIME)},
        )
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_upload_docx_creates_session(self):
        body = self._upload_docx()

        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Resume uploaded successfully!")
        self.assertEqual(body["summary"], "Backend engineer with deep Java experience.")
        self.assertGreater(body["resumeLength"], 0)
        self.assertTrue(self.service.has_resume(body["sessionId"]))

    def test_upload_rejects_unsupported_extension(self):
        response = self.client.post(
            "/api/resume/upload",
            files={"file": ("resume.txt", b"Jane Doe", "text/plain")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"success": False, "message": "Invalid file. Please upload a PDF or DOCX file."},
        )

    def test_upload_rejects_pdf_without_text(self):
        response = self.client.post(
            "/api/resume/upload",
            files={"file": ("resume.pdf", make_blank_pdf(), "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("Could not extract text", body["message"])
        self.assertEqual(self.service.session_count(), 0)

    def test_upload_rejects_mismatched_signature(self):
        response = self.client.post(
            "/api/resume/upload",
            files={"file": ("resume.pdf", b"not a pdf at all", "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_query_answers_with_session(self):
        session_id = self._upload_docx()["sessionId"]

        response = self.client.post(
            "/api/resume/query",
            json={"question": "What are my key strengths?", "context": "Senior Java role"},
            headers={"X-Session-ID": session_id},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            body,
            {
                "success": True,
                "answer": "Your key strength is Java backend work.",
                "sessionId": session_id,
            },
        )
        self.assertIn("Jane Doe", self.llm.prompts[-1])
        self.assertIn("Senior Java role", self.llm.prompts[-1])

    def test_query_requires_session_header(self):
        response = self.client.post("/api/resume/query", json={"question": "Hi?"})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("Session ID required", body["error"])

    def test_query_unknown_session(self):
        response = self.client.post(
            "/api/resume/query",
            json={"question": "Hi?"},
            headers={"X-Session-ID": "does-not-exist"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("No resume found", response.json()["error"])
        self.assertEqual(self.llm.prompts, [])

    def test_query_rejects_blank_question(self):
        response = self.client.post(
            "/api/resume/query",
            json={"question": "   "},
            headers={"X-Session-ID": "anything"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Question cannot be empty")

    def test_query_null_question_returns_400_body(self):
        response = self.client.post(
            "/api/resume/query",
            json={"question": None},
            headers={"X-Session-ID": "anything"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "Question cannot be empty"})

    def test_query_without_body_returns_400_body(self):
        response = self.client.post("/api/resume/query", headers={"X-Session-ID": "anything"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "Question cannot be empty"})

    def test_query_uses_session_header_verbatim(self):
        seen: list[str] = []

        class RecordingService(ResumeService):
            def has_resume(self, session_id: str) -> bool:
                seen.append(session_id)
                return super().has_resume(session_id)

        store = SessionStore(shards=4)
        store.put("Session-ABC.1", "Jane Doe resume")
        service = RecordingService(store, self.llm)
        app.dependency_overrides[get_resume_service] = lambda: service

        response = self.client.post(
            "/api/resume/query",
            json={"question": "Hi?"},
            headers={"X-Session-ID": "Session-ABC.1"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(seen, ["Session-ABC.1"])
        self.assertEqual(response.json()["sessionId"], "Session-ABC.1")

    def test_cors_preflight_allows_configured_origin(self):
        response = self.client.options(
            "/api/resume/query",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "X-Session-ID",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "http://localhost:5173")

    def test_cors_preflight_rejects_unknown_origin(self):
        response = self.client.options(
            "/api/resume/query",
            headers={
                "Origin": "https://evil.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertNotIn("access-control-allow-origin", response.headers)

    def test_query_unexpected_error_still_returns_200_body(self):
        app.dependency_overrides[get_resume_service] = lambda: ExplodingService()
        response = self.client.post(
            "/api/resume/query",
            json={"question": "Hi?"},
            headers={"X-Session-ID": "s1"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("error processing your question", body["error"])

    def test_clear_session_then_query_fails(self):
        session_id = self._upload_docx()["sessionId"]

        first = self.client.delete(f"/api/resume/session/{session_id}")
        second = self.client.delete(f"/api/resume/session/{session_id}")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"message": "Session cleared successfully"})
        self.assertEqual(second.status_code, 200)

        response = self.client.post(
            "/api/resume/query",
            json={"question": "Hi?"},
            headers={"X-Session-ID": session_id},
        )
        self.assertEqual(response.status_code, 400)

    def test_suggestions_are_categorized(self):
        response = self.client.get("/api/resume/suggestions")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), {"interview", "analysis", "matching"})
        for questions in body.values():
            self.assertEqual(len(questions), 4)

    def test_health_reports_status_and_sessions(self):
        self._upload_docx()
        response = self.client.get("/api/resume/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "UP")
        self.assertEqual(body["service"], "Resume AI Agent")
        self.assertEqual(body["version"], "1.0.0")
        self.assertEqual(body["activeSessions"], 1)

    def test_upload_without_api_key_still_succeeds(self):
        app.dependency_overrides.clear()
        content = make_docx("John Roe", "Python developer")
        response = self.client.post(
            "/api/resume/upload",
            files={"file": ("resume.docx", content, DOCX_MIME)},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertIn("not configured", body["summary"])
        app.state.resume_service.clear_session(body["sessionId"])


if __name__ == "__main__":
    unittest.main()
