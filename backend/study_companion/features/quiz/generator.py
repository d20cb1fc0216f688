"""
Quiz feature: generate multiple-choice questions from an indexed document.
"""

import json
import logging
import re

from pydantic import TypeAdapter, ValidationError

from study_companion.core.exceptions import QuizFormatInvalid
from study_companion.features.agent.graph import AgentWorkflow
from study_companion.features.agent.prompts import QUIZ_REQUEST, build_quiz_system_prompt
from study_companion.features.quiz.schemas import QuizQuestion

logger = logging.getLogger(__name__)

_quiz_adapter = TypeAdapter(list[QuizQuestion])


def strip_code_fences(raw: str) -> str:
    """Remove surrounding whitespace and markdown code-fence markers."""
    text = raw.strip()
    text = re.sub(r"^```json\s*", "", text)
    text = re.sub(r"^```\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text


def parse_quiz(raw: str) -> list[QuizQuestion]:
    """Parse model output into validated questions.

    Raises:
        QuizFormatInvalid: If the text is not JSON or does not match the schema.
    """
    cleaned = strip_code_fences(raw)
    try:
        return _quiz_adapter.validate_python(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Raw quiz content: {cleaned}")
        logger.error(f"Quiz parsing error: {e}")
        raise QuizFormatInvalid(cleaned) from e


class QuizGenerator:
    """Runs the quiz workflow (fetch_document_content only) and parses its answer."""

    def __init__(self, workflow: AgentWorkflow, question_count: int = 2):
        self.workflow = workflow
        self.question_count = question_count

    async def generate(self, document_id: str) -> list[QuizQuestion]:
        logger.info(f"📝 Generating quiz for document: {document_id}")
        raw = await self.workflow.run(
            build_quiz_system_prompt(self.question_count),
            QUIZ_REQUEST.format(question_count=self.question_count, document_id=document_id),
        )
        return parse_quiz(raw)
