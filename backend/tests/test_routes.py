"""
HTTP-level tests for the chat, quiz and credentials routes.
"""

import json
import os

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from fakes import SAMPLE_QUIZ, ScriptedChatModel, quiz_responder, retrieval_responder
from study_companion.features.quiz.generator import parse_quiz
from study_companion.main import create_app


@pytest.fixture
def client_for(build_container):
    """Factory: TestClient over an app wired to fakes."""

    def _client(**kwargs):
        container = build_container(**kwargs)
        return TestClient(create_app(container)), container

    return _client


class TestHealth:
    def test_health(self, client_for):
        client, _ = client_for()
        with client:
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestChatWithContext:
    def test_no_files_is_direct_chat(self, client_for):
        client, _ = client_for(creative=ScriptedChatModel(responses=[AIMessage(content="Hello!")]))

        response = client.post("/api/chat-with-context", data={"query": "hi"})

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Hello!", "type": "direct_chat"}

    def test_uploaded_files_share_one_document(self, client_for, sample_pdf, fake_index):
        client, container = client_for(model=ScriptedChatModel(responder=retrieval_responder))
        files = [
            ("files", ("sample.pdf", sample_pdf.read_bytes(), "application/pdf")),
            ("files", ("notes.csv", b"topic,fact\nleaf,green\n", "text/csv")),
        ]

        response = client.post("/api/chat-with-context", data={"query": "summarize"}, files=files)

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "document_query"
        assert [p["status"] for p in body["processedFiles"]] == ["success", "success"]
        [result] = body["results"]
        assert result["fileNames"] == ["sample.pdf", "notes.csv"]
        assert result["documentId"] == body["processedFiles"][0]["documentId"]
        assert len({r["metadata"]["documentId"] for r in fake_index.records}) == 1

    def test_failed_file_is_reported_alongside_successes(self, client_for, sample_pdf, settings):
        client, _ = client_for(model=ScriptedChatModel(responder=retrieval_responder))
        files = [
            ("files", ("sample.pdf", sample_pdf.read_bytes(), "application/pdf")),
            ("files", ("archive.xyz", b"???", "application/octet-stream")),
        ]

        response = client.post("/api/chat-with-context", files=files)

        assert response.status_code == 200
        processed = response.json()["processedFiles"]
        assert processed[0]["status"] == "success"
        assert "message" not in processed[0]
        assert processed[1] == {
            "documentId": processed[0]["documentId"],
            "fileName": "archive.xyz",
            "status": "error",
            "message": "Unsupported file type: .xyz",
        }
        assert os.listdir(settings.UPLOAD_DIR) == []

    def test_all_files_failing_is_500(self, client_for):
        client, _ = client_for()
        files = [("files", ("archive.xyz", b"???", "application/octet-stream"))]

        response = client.post("/api/chat-with-context", data={"query": "q"}, files=files)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to process any documents"

    def test_unwritable_upload_dir_is_reported_per_file(self, client_for, settings):
        with open(settings.UPLOAD_DIR, "w") as f:
            f.write("not a directory")
        client, _ = client_for()
        files = [
            ("files", ("a.pdf", b"%PDF", "application/pdf")),
            ("files", ("b.csv", b"x,y\n", "text/csv")),
        ]

        response = client.post("/api/chat-with-context", files=files)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to process any documents"
        assert [p["fileName"] for p in body["processedFiles"]] == ["a.pdf", "b.csv"]
        assert all(p["status"] == "error" for p in body["processedFiles"])

    def test_query_failure_is_isolated(self, client_for, sample_pdf):
        def failing_model(messages):
            raise RuntimeError("model down")

        client, _ = client_for(model=ScriptedChatModel(responder=failing_model))
        files = [("files", ("sample.pdf", sample_pdf.read_bytes(), "application/pdf"))]

        response = client.post("/api/chat-with-context", data={"query": "q"}, files=files)

        assert response.status_code == 200
        [result] = response.json()["results"]
        assert result["status"] == "error"
        assert result["message"] == "Failed to query documents"

    def test_too_many_files(self, client_for):
        client, _ = client_for()
        files = [("files", (f"f{i}.pdf", b"%PDF", "application/pdf")) for i in range(6)]

        response = client.post("/api/chat-with-context", files=files)

        assert response.status_code == 400


class TestQuizRoutes:
    def test_generate_then_evaluate(self, client_for, fake_index):
        fake_index.records.append({
            "id": "r0", "values": [1.0, 1.0],
            "metadata": {"text": "Plants make glucose.", "documentId": "doc_quiz", "chunkIndex": 0},
        })
        client, _ = client_for(creative=ScriptedChatModel(responder=quiz_responder(json.dumps(SAMPLE_QUIZ))))

        generated = client.post("/api/quiz/generate", json={"documentId": "doc_quiz"})
        assert generated.status_code == 200
        body = generated.json()
        assert body["status"] == "success"
        assert all("correctAnswer" not in q for q in body["quiz"])

        evaluated = client.post("/api/quiz/evaluate", json={"quizId": body["quizId"], "answers": ["A", "C"]})
        assert evaluated.status_code == 200
        evaluation = evaluated.json()["evaluation"]
        assert (evaluation["score"], evaluation["total"], evaluation["percentage"]) == (1, 2, 50.0)
        assert evaluation["results"][1]["isCorrect"] is False

    def test_generate_requires_document_id(self, client_for):
        client, _ = client_for()
        response = client.post("/api/quiz/generate", json={})
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "documentId is required"}

    def test_generate_with_unparseable_output(self, client_for):
        client, _ = client_for(creative=ScriptedChatModel(responder=quiz_responder("not json")))
        response = client.post("/api/quiz/generate", json={"documentId": "doc_quiz"})
        assert response.status_code == 500
        assert response.json()["status"] == "error"

    def test_evaluate_requires_quiz_id_and_answers(self, client_for):
        client, _ = client_for()
        response = client.post("/api/quiz/evaluate", json={"quizId": "quiz_1"})
        assert response.status_code == 400
        assert response.json()["message"] == "Valid quizId and answers array are required"

    def test_evaluate_unknown_quiz_is_404(self, client_for):
        client, _ = client_for()
        response = client.post("/api/quiz/evaluate", json={"quizId": "quiz_nope", "answers": ["A"]})
        assert response.status_code == 404
        assert response.json()["message"].startswith("Quiz not found")

    def test_evaluate_wrong_answer_count_is_400(self, client_for):
        client, container = client_for()
        quiz_id = container.quiz_service.store.save(parse_quiz(json.dumps(SAMPLE_QUIZ)))
        response = client.post("/api/quiz/evaluate", json={"quizId": quiz_id, "answers": ["A"]})
        assert response.status_code == 400
        assert response.json()["message"] == "Number of answers must match number of questions"

    def test_evaluate_non_letter_answer_is_400(self, client_for):
        client, container = client_for()
        quiz_id = container.quiz_service.store.save(parse_quiz(json.dumps(SAMPLE_QUIZ)))
        response = client.post("/api/quiz/evaluate", json={"quizId": quiz_id, "answers": [1, "A"]})
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "All answers must be one of: A, B, C, or D"}

    def test_evaluate_answers_not_a_list_is_400(self, client_for):
        client, _ = client_for()
        response = client.post("/api/quiz/evaluate", json={"quizId": "quiz_1", "answers": "A"})
        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["message"].startswith("Invalid request: answers")


class TestCredentialsRoute:
    def test_missing_field_is_400(self, client_for):
        client, _ = client_for()
        response = client.post("/api/set-credentials", json={"openaiApiKey": "sk"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required credentials"}

    def test_update_bumps_revision(self, client_for):
        client, container = client_for()
        response = client.post("/api/set-credentials", json={
            "openaiApiKey": "sk-new", "pineconeApiKey": "pc-new", "pineconeIndexName": "new-index",
        })
        assert response.status_code == 200
        assert response.json() == {"message": "Credentials set successfully"}
        assert container.credentials.revision == 1
        assert container.credentials.pinecone_index_name == "new-index"
