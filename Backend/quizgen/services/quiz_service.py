import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

import httpx

from quizgen.errors import (
    CompletionUnavailable,
    ExtractionFailed,
    FailureReason,
    InvalidCompletionShape,
    UnreadableContent,
)
from quizgen.schemas import (
    GenerationDegraded,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    Question,
    Quiz,
)
from quizgen.services.completion_client import CompletionClient
from quizgen.services.fallback import SAMPLE_CONTENT, fallback_questions
from quizgen.services.prompt_builder import build_quiz_prompt
from quizgen.services.quiz_parser import ParseError, parse_completion
from quizgen.services.title_service import DEFAULT_TITLE, TitleService
from quizgen.utils.config import Settings
from quizgen.utils.content_filter import filter_content
from quizgen.utils.file_processing import extract_text

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def read_document(payload: Union[bytes, str]) -> str:
    """Extract and filter document text.

    Raises ExtractionFailed when the payload cannot be opened and
    UnreadableContent when the filtered text fails the meaningfulness gate.
    """
    extracted = extract_text(payload)
    filtered = filter_content(extracted)
    if not filtered.readable:
        raise UnreadableContent(
            f"only {len(filtered.text)} meaningful characters on {extracted.page_count} pages"
        )
    logger.info(f"Content preview: {filtered.text[:300]}...")
    return filtered.text


class QuizService:
    """Document -> text -> prompt -> completion -> validated quiz.

    Every failure after configuration is resolved degrades instead of raising:
    unusable text is swapped for the sample chapter, and an unreachable model or
    an invalid answer is replaced by the fallback quiz. Only ConfigurationMissing
    reaches the caller.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.transport = transport
        self.sleep = sleep
        self.title_service = TitleService(self.completion_client)

    def completion_client(self) -> CompletionClient:
        return CompletionClient(self.settings, transport=self.transport, sleep=self.sleep)

    def prepare_text(
        self, payload: Union[bytes, str]
    ) -> tuple[Optional[str], Optional[FailureReason]]:
        """Return (text to prompt with, degrade reason or None).

        The text is None when the document is unusable and sample content
        substitution is switched off.
        """
        try:
            return read_document(payload), None
        except (ExtractionFailed, UnreadableContent) as e:
            logger.warning(f"Document has no usable text ({e.reason.value}): {str(e)}")
            if self.settings.substitute_sample_content:
                logger.info("Using sample content for quiz generation")
                return SAMPLE_CONTENT, e.reason
            return None, e.reason

    def build_quiz(
        self, questions: list[Question], request: GenerationRequest, title: Optional[str] = None
    ) -> Quiz:
        return Quiz(
            title=title or DEFAULT_TITLE,
            questions=questions,
            source_name=request.source_name,
        )

    def fallback_result(self, request: GenerationRequest, reason: FailureReason) -> GenerationDegraded:
        logger.info(f"Using default quiz as fallback ({reason.value})")
        quiz = self.build_quiz(fallback_questions(request.question_count), request)
        return GenerationDegraded(quiz=quiz, reason=reason)

    async def generate_quiz(self, request: GenerationRequest) -> GenerationResult:
        """Generate a quiz for one request; raises only ConfigurationMissing"""
        client = self.completion_client()
        logger.info(f"Number of questions: {request.question_count}")

        # PDF parsing is blocking, keep it off the event loop
        text, reason = await asyncio.to_thread(self.prepare_text, request.document_payload)
        if text is None:
            return self.fallback_result(request, reason)

        prompt = build_quiz_prompt(
            text,
            request.question_count,
            difficulty=request.difficulty,
            budget=self.settings.prompt_char_budget,
        )
        try:
            raw = await client.complete(prompt, model=request.model)
        except (CompletionUnavailable, InvalidCompletionShape) as e:
            logger.error(f"Completion failed: {str(e)}")
            return self.fallback_result(request, e.reason)

        logger.info(f"Response content: {raw[:200]}...")
        parsed = parse_completion(raw, expected_count=request.question_count)
        if isinstance(parsed, ParseError):
            logger.error(f"Discarding completion: {parsed.message}")
            return self.fallback_result(request, FailureReason.INVALID_COMPLETION_SHAPE)

        quiz = self.build_quiz(parsed.questions, request, title=parsed.title)
        if reason is not None:
            return GenerationDegraded(quiz=quiz, reason=reason)
        return GenerationSuccess(quiz=quiz)

    async def create_quiz(self, request: GenerationRequest) -> GenerationResult:
        """Generate the quiz and derive its title from the file name concurrently"""
        result, title = await asyncio.gather(
            self.generate_quiz(request),
            self.title_service.derive_title(request.source_name),
        )
        quiz = result.quiz.model_copy(update={"title": title})
        return result.model_copy(update={"quiz": quiz})
