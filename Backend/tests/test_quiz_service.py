import asyncio
import json
import threading

import httpx
import pytest

from conftest import MODEL_QUESTIONS, PHOTOSYNTHESIS, FakeCompletionService, completion_response, data_uri, make_pdf
from quizgen.errors import ConfigurationMissing, FailureReason
from quizgen.schemas import GenerationDegraded, GenerationRequest, GenerationSuccess
from quizgen.services import quiz_service as quiz_service_module
from quizgen.services.fallback import SAMPLE_CONTENT, fallback_questions
from quizgen.services.quiz_service import QuizService
from quizgen.utils.config import Settings


def run(settings, service, request, sleep=None):
    async def no_sleep(delay):
        pass

    quiz_service = QuizService(settings, transport=service.transport, sleep=sleep or no_sleep)
    return asyncio.run(quiz_service.generate_quiz(request))


def sent_prompt(request: httpx.Request) -> str:
    return json.loads(request.content)["messages"][1]["content"]


def test_prose_document_gives_model_questions(settings, prose_pdf):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    request = GenerationRequest(
        document_payload=data_uri(prose_pdf), question_count=4, model="caller/model", source_name="plants.pdf"
    )

    result = run(settings, service, request)

    assert isinstance(result, GenerationSuccess)
    quiz = result.quiz
    assert quiz.source_name == "plants.pdf"
    assert [q.question for q in quiz.questions] == [q["question"] for q in MODEL_QUESTIONS]
    assert [q.options for q in quiz.questions] == [q["options"] for q in MODEL_QUESTIONS]
    assert [q.answer for q in quiz.questions] == ["B", "C", "A", "D"]
    assert len(service.requests) == 1
    assert "chlorophyll" in sent_prompt(service.requests[0])
    assert json.loads(service.requests[0].content)["model"] == "caller/model"


def test_quiz_title_from_completion_is_used(settings, prose_pdf):
    payload = {"title": "Photosynthesis", "questions": MODEL_QUESTIONS}
    service = FakeCompletionService(completion_response(payload))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=4))
    assert result.quiz.title == "Photosynthesis"


def test_structural_document_with_unreachable_service_degrades_to_fallback(settings, noise_pdf):
    service = FakeCompletionService(httpx.Response(401, text="unauthorized"))
    result = run(settings, service, GenerationRequest(document_payload=noise_pdf, question_count=4))

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.COMPLETION_UNAVAILABLE
    assert result.quiz.questions == fallback_questions(4)
    assert len(service.requests) == 1


def test_structural_document_is_prompted_with_sample_content(settings, noise_pdf):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    result = run(settings, service, GenerationRequest(document_payload=noise_pdf, question_count=4))

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.UNREADABLE_CONTENT
    assert [q.question for q in result.quiz.questions] == [q["question"] for q in MODEL_QUESTIONS]
    assert "Introduction to Machine Learning" in sent_prompt(service.requests[0])


def test_structural_document_without_substitution_skips_the_service(settings, noise_pdf):
    settings = settings.model_copy(update={"substitute_sample_content": False})
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    result = run(settings, service, GenerationRequest(document_payload=noise_pdf, question_count=4))

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.UNREADABLE_CONTENT
    assert result.quiz.questions == fallback_questions(4)
    assert service.requests == []


def test_undecodable_payload_uses_sample_content(settings):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    result = run(settings, service, GenerationRequest(document_payload="%%%", question_count=4))

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.EXTRACTION_FAILED
    assert SAMPLE_CONTENT[:60] in sent_prompt(service.requests[0])


def test_non_json_completion_degrades_with_requested_count(settings, prose_pdf):
    service = FakeCompletionService(completion_response("not json"))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=6))

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.INVALID_COMPLETION_SHAPE
    assert len(result.quiz.questions) == 6


def test_wrong_option_count_discards_whole_response(settings, prose_pdf):
    questions = [dict(q) for q in MODEL_QUESTIONS]
    questions[3]["options"] = ["one", "two", "three"]
    service = FakeCompletionService(completion_response(questions))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=4))

    assert isinstance(result, GenerationDegraded)
    assert result.quiz.questions == fallback_questions(4)


def test_server_errors_exhaust_retries_then_degrade(settings, prose_pdf, sleep_recorder):
    service = FakeCompletionService(httpx.Response(502))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=4), sleep_recorder)

    assert isinstance(result, GenerationDegraded)
    assert result.reason == FailureReason.COMPLETION_UNAVAILABLE
    assert len(service.requests) == 3
    assert sleep_recorder.delays == [1, 2]


@pytest.mark.parametrize("count", [1, 3, 4, 9, 20])
@pytest.mark.parametrize("reachable", [True, False])
def test_every_result_has_the_requested_shape(settings, prose_pdf, count, reachable):
    if reachable:
        questions = (MODEL_QUESTIONS * 5)[:count]
        service = FakeCompletionService(completion_response(questions))
    else:
        service = FakeCompletionService(httpx.ConnectError("offline"))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=count))

    assert len(result.quiz.questions) == count
    for question in result.quiz.questions:
        assert len(question.options) == 4
        assert question.answer in ("A", "B", "C", "D")


def test_missing_credential_is_the_only_hard_failure(prose_pdf):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    no_key = Settings(_env_file=None, openrouter_api_key=None)
    with pytest.raises(ConfigurationMissing):
        run(no_key, service, GenerationRequest(document_payload=prose_pdf, question_count=4))
    assert service.requests == []


def test_create_quiz_stamps_derived_title(settings, prose_pdf):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS), title="Plant Energy")
    quiz_service = QuizService(settings, transport=service.transport)
    request = GenerationRequest(document_payload=prose_pdf, question_count=4, source_name="photosynthesis.pdf")

    result = asyncio.run(quiz_service.create_quiz(request))

    assert isinstance(result, GenerationSuccess)
    assert result.quiz.title == "Plant Energy"
    assert len(service.title_requests) == 1


def test_create_quiz_title_failure_does_not_block_generation(settings, prose_pdf):
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS), title=500)
    quiz_service = QuizService(settings, transport=service.transport)
    request = GenerationRequest(
        document_payload=prose_pdf, question_count=4, source_name="chapter_3_intro_to_ml.pdf"
    )

    result = asyncio.run(quiz_service.create_quiz(request))

    assert isinstance(result, GenerationSuccess)
    assert result.quiz.title == "Chapter 3 Intro To Ml"


def test_read_document_rejects_sparse_text():
    with pytest.raises(quiz_service_module.UnreadableContent):
        quiz_service_module.read_document(make_pdf("Page 1 of 12"))
    assert "chlorophyll" in quiz_service_module.read_document(make_pdf(PHOTOSYNTHESIS))


def test_document_is_parsed_off_the_event_loop(settings, prose_pdf, monkeypatch):
    parsed_on = []
    read_document = quiz_service_module.read_document

    def recording_read_document(payload):
        parsed_on.append(threading.current_thread())
        return read_document(payload)

    monkeypatch.setattr(quiz_service_module, "read_document", recording_read_document)
    service = FakeCompletionService(completion_response(MODEL_QUESTIONS))
    result = run(settings, service, GenerationRequest(document_payload=prose_pdf, question_count=4))

    assert isinstance(result, GenerationSuccess)
    assert parsed_on and parsed_on[0] is not threading.main_thread()
