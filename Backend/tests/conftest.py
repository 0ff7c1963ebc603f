import base64
import json

import fitz
import httpx
import pytest

from quizgen.utils.config import Settings

PHOTOSYNTHESIS = (
    "Photosynthesis is the process by which green plants, algae and some bacteria convert "
    "light energy into chemical energy. During photosynthesis, chlorophyll inside the "
    "chloroplasts absorbs sunlight and uses that energy to combine carbon dioxide from the "
    "air with water drawn up from the roots. The reaction produces glucose, which the plant "
    "stores or burns for growth, and releases oxygen as a by-product. Almost every food "
    "chain on Earth depends on this process, because plants form the base that feeds "
    "herbivores and, in turn, the predators that hunt them."
)

MODEL_QUESTIONS = [
    {
        "question": "What pigment absorbs sunlight during photosynthesis?",
        "options": ["Hemoglobin", "Chlorophyll", "Keratin", "Melanin"],
        "answer": "B",
    },
    {
        "question": "Which gas is released as a by-product?",
        "options": ["Nitrogen", "Carbon dioxide", "Oxygen", "Helium"],
        "answer": 2,
    },
    {
        "question": "What sugar does the reaction produce?",
        "options": ["Glucose", "Lactose", "Sucrose", "Fructose"],
        "correctAnswer": 0,
        "explanation": "The text names glucose as the product.",
    },
    {
        "question": "Where does the water used by the plant come from?",
        "options": ["The leaves", "The air", "The flowers", "The roots"],
        "answer": "d",
    },
]


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FakeCompletionService:
    """httpx handler that answers chat-completion calls from a script"""

    def __init__(self, *responses, title="Photosynthesis Basics"):
        self.responses = list(responses)
        self.title = title
        self.requests = []
        self.title_requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["max_tokens"] == 50:
            self.title_requests.append(request)
            if isinstance(self.title, Exception):
                raise self.title
            if isinstance(self.title, int):
                return httpx.Response(self.title, text="title error")
            return completion_response(self.title)

        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def transport(self):
        return httpx.MockTransport(self)


def completion_response(content) -> httpx.Response:
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_textbox(fitz.Rect(72, 72, 540, 770), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def data_uri(data: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


@pytest.fixture
def settings():
    return Settings(_env_file=None, openrouter_api_key="test-key", app_referer="https://quiz.test")


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def prose_pdf():
    return make_pdf(PHOTOSYNTHESIS)


@pytest.fixture
def noise_pdf():
    return make_pdf("Page 1 of 12 - Confidential - Arial 12pt")
