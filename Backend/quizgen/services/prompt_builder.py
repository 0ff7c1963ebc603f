from dataclasses import dataclass
from typing import Optional

from langchain_core.prompts import PromptTemplate

CONTINUATION_MARKER = "...(content continues)"

QUIZ_SYSTEM_TEMPLATE = """You are a teacher creating comprehension quizzes from document text. Generate exactly {number} multiple choice questions ONLY about the actual readable content, facts, concepts, and information presented in the text. NEVER ask about document structure, headers, metadata, technical formatting, or PDF-specific details. Each question must have exactly 4 options labeled A, B, C, and D, and only one option may be correct. Respond with JSON only, no prose and no markdown."""

QUIZ_USER_TEMPLATE = """Based on the following document content, create a {number}-question multiple choice quiz that tests comprehension of the actual text.{difficulty_line}
Focus on:
- Factual information presented in the text
- Key concepts and ideas explained
- Main topics and themes
- Important details and examples
- Definitions and explanations

STRICTLY AVOID questions about:
- Document structure or formatting
- Headers, footers, or metadata
- PDF technical details
- File size, page count, or creation info
- Fonts, colors, or layout elements

Format your response as a JSON object matching this structure:
{{
    "title": "short quiz title",
    "questions": [
        {{
            "question": "question text about the content",
            "options": ["option A", "option B", "option C", "option D"],
            "answer": "A",
            "explanation": "why this answer is correct"
        }}
    ]
}}
"answer" must be one of "A", "B", "C" or "D".

Document Content (readable text only):
{text}

Create questions that test understanding of the actual material, not technical aspects. Ensure exactly {number} questions."""

TITLE_SYSTEM_PROMPT = "You are a helpful assistant that generates short, descriptive titles for quizzes."

TITLE_USER_TEMPLATE = """Generate a title for a quiz based on the following (PDF) file name. Try and extract as much info from the file name as possible. If the file name is just numbers or incoherent, just return "quiz". Respond with just the title, nothing else.

{file_name}"""

quiz_system_prompt = PromptTemplate(input_variables=["number"], template=QUIZ_SYSTEM_TEMPLATE)
quiz_user_prompt = PromptTemplate(
    input_variables=["number", "difficulty_line", "text"], template=QUIZ_USER_TEMPLATE
)
title_user_prompt = PromptTemplate(input_variables=["file_name"], template=TITLE_USER_TEMPLATE)


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


def truncate_text(text: str, budget: int) -> str:
    if len(text) <= budget:
        return text
    return text[:budget] + CONTINUATION_MARKER


def build_quiz_prompt(
    text: str, number: int, difficulty: Optional[str] = None, budget: int = 2500
) -> Prompt:
    """Build the system and user messages for one quiz completion"""
    difficulty_line = f"\nDifficulty level: {difficulty}." if difficulty else ""
    return Prompt(
        system=quiz_system_prompt.format(number=number),
        user=quiz_user_prompt.format(
            number=number,
            difficulty_line=difficulty_line,
            text=truncate_text(text, budget),
        ),
    )


def build_title_prompt(file_name: str) -> Prompt:
    return Prompt(system=TITLE_SYSTEM_PROMPT, user=title_user_prompt.format(file_name=file_name))
