import logging
from datetime import date
from typing import Callable, List, Optional

from ai_newsroom.errors import ModelOutputError
from ai_newsroom.llm.client import LanguageModelClient, parse_json_response
from ai_newsroom.prompts.common import publication_profile
from ai_newsroom.schemas.models import Angle, AnglesResponse

logger = logging.getLogger(__name__)

ANGLES_PER_RUN = 3

# =============================================================================
# PROMPT
# =============================================================================

brainstorm_prompt = """You are the Editor-in-Chief of a top AI Tech Publication.

{publication_profile}

Today is {today}.

<Task>
Identify 3 distinct, high-impact story angles based on likely breaking news or major trends in AI right now.
Avoid generic "AI is growing" stories. Look for specific model releases, benchmarks, or corporate moves.
</Task>

<Output>
Return a JSON object with an "angles" array containing exactly 3 objects, each with:
- title: A catchy headline
- query: A specific search query to find facts for this story
- focus: What specific details the journalist should look for

Example format: {{"angles": [{{"title": "DeepSeek V3 Crushes Benchmarks", "query": "DeepSeek V3 benchmark results vs GPT-4", "focus": "Technical specs and coding performance"}}, {{...}}, {{...}}]}}

IMPORTANT: Return exactly 3 distinct angles.
</Output>
"""

FALLBACK_ANGLES = [
    Angle(
        title="AI Model Breakthrough: Latest Advances in Large Language Models",
        search_query="latest LLM releases 2025",
        focus="Model architecture and performance metrics",
    ),
    Angle(
        title="GPU Wars: NVIDIA vs AMD in the AI Acceleration Race",
        search_query="NVIDIA AMD AI chips 2025",
        focus="Hardware specifications and pricing",
    ),
    Angle(
        title="Enterprise AI Adoption Surges: What Companies Are Doing Differently",
        search_query="enterprise AI adoption trends 2025",
        focus="Use cases and ROI data",
    ),
]


def get_fallback_angles() -> List[Angle]:
    return [angle.model_copy() for angle in FALLBACK_ANGLES]


def _fill_batch(angles: List[Angle]) -> List[Angle]:
    """Trim or top up ``angles`` so the batch always has ANGLES_PER_RUN items."""
    batch = list(angles[:ANGLES_PER_RUN])
    if len(batch) < ANGLES_PER_RUN:
        taken = {angle.title for angle in batch}
        for fallback in get_fallback_angles():
            if len(batch) >= ANGLES_PER_RUN:
                break
            if fallback.title not in taken:
                batch.append(fallback)
    return batch


class AngleBrainstormer:
    """The Editor-in-Chief: picks today's story angles.

    ``brainstorm()`` never raises. Any model failure falls back to a fixed set
    of evergreen angles so the newsroom always has work to do.
    """

    def __init__(self, llm: LanguageModelClient, today: Optional[Callable[[], date]] = None):
        self.llm = llm
        self.today = today or date.today

    def build_prompt(self) -> str:
        return brainstorm_prompt.format(
            publication_profile=publication_profile.strip(),
            today=self.today().strftime("%B %d, %Y"),
        )

    def brainstorm(self) -> List[Angle]:
        logger.info("-> brainstorm_angles")

        try:
            raw = self.llm.complete(self.build_prompt(), json_mode=True)
            logger.debug(f"  Raw brainstorm response: {raw}")
            angles = parse_json_response(raw, AnglesResponse).angles
        except ModelOutputError as e:
            logger.error(f"  Could not parse brainstorm response, using fallback: {e}")
            return get_fallback_angles()
        except Exception as e:
            logger.error(f"  Brainstorming failed, using fallback: {e}")
            return get_fallback_angles()

        if not angles:
            logger.error("  No angles returned, using fallback")
            return get_fallback_angles()

        if len(angles) != ANGLES_PER_RUN:
            logger.warning(f"  Model returned {len(angles)} angles, expected {ANGLES_PER_RUN}")
            angles = _fill_batch(angles)

        logger.info(f"  Brainstormed {len(angles)} angles")
        for angle in angles:
            logger.debug(f"  - {angle.title}")
        return angles


if __name__ == "__main__":
    from ai_newsroom.config import NewsroomConfig
    from ai_newsroom.llm.openai import get_newsroom_model
    from ai_newsroom.utils.newsroom_logging import setup_logging

    setup_logging()

    config = NewsroomConfig.from_env()
    brainstormer = AngleBrainstormer(LanguageModelClient(get_newsroom_model(config)))

    print("Editor-in-Chief: Brainstorming today's angles...")
    for i, angle in enumerate(brainstormer.brainstorm(), 1):
        print(f"{i}. {angle.title}")
        print(f"   Query: {angle.search_query}")
        print(f"   Focus: {angle.focus}")
