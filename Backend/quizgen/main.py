import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from quizgen.errors import ConfigurationMissing
from quizgen.schemas import (
    GenerationDegraded,
    GenerationRequest,
    QuizGenerationRequest,
    QuizGenerationResponse,
    TitleRequest,
    TitleResponse,
)
from quizgen.services.quiz_service import QuizService
from quizgen.utils.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(title="PDF to Quiz Generator")
quiz_service = QuizService(settings)


def get_quiz_service() -> QuizService:
    return quiz_service


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/generate-quiz", response_model=QuizGenerationResponse, response_model_exclude_none=True)
async def generate_quiz(request: QuizGenerationRequest, service: QuizService = Depends(get_quiz_service)):
    if not request.files:
        return JSONResponse(status_code=400, content={"success": False, "error": "No files uploaded"})

    customization = request.customization
    upload = request.files[0]
    generation_request = GenerationRequest(
        document_payload=upload.data,
        question_count=min(
            (customization and customization.num_questions) or service.settings.default_question_count,
            service.settings.max_question_count,
        ),
        model=customization.model if customization else None,
        difficulty=customization.difficulty if customization else None,
        source_name=upload.name,
    )
    logger.info(f"Received request for quiz generation: {len(request.files)} file(s)")

    try:
        result = await service.generate_quiz(generation_request)
    except ConfigurationMissing as e:
        logger.error(str(e))
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    degraded = isinstance(result, GenerationDegraded)
    return QuizGenerationResponse(
        success=True,
        questions=result.quiz.questions,
        title=result.quiz.title,
        degraded=degraded,
        reason=result.reason if degraded else None,
    )


@app.post("/api/quiz-title", response_model=TitleResponse)
async def quiz_title(request: TitleRequest, service: QuizService = Depends(get_quiz_service)):
    title = await service.title_service.derive_title(request.file_name)
    return TitleResponse(title=title)
