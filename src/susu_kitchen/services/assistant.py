"""Conversational cooking questions with grounded answers."""

import logging
from dataclasses import dataclass

from susu_kitchen.domain.errors import ValidationError
from susu_kitchen.domain.generation import GroundedAnswer
from susu_kitchen.domain.models import Recipe
from susu_kitchen.services.generation import GenerationGateway

_logger = logging.getLogger(__name__)

OFFLINE_REPLY = "Sorry love, I'm having a bit of trouble connecting to the internet."
EMPTY_REPLY = "Sorry, dear, I couldn't find that right now."


@dataclass
class AssistantService:
    """Answers questions, never raising for gateway trouble."""

    gateway: GenerationGateway

    async def ask(self, query: str, recipe: Recipe | None = None) -> GroundedAnswer:
        cleaned = query.strip()
        if not cleaned:
            raise ValidationError("Please type a question first")
        context = f"{recipe.title}: {recipe.description}" if recipe else None
        try:
            answer = await self.gateway.answer_grounded(cleaned, context)
        except Exception:
            _logger.exception("Grounded answer failed")
            return GroundedAnswer(text=OFFLINE_REPLY, sources=[])
        if not answer.text.strip():
            return GroundedAnswer(text=EMPTY_REPLY, sources=answer.sources)
        return answer
