import operator
from typing import TypedDict, List, Annotated

from ai_newsroom.schemas.models import Angle, Article


class PipelineState(TypedDict):
    """State for the newsroom workflow.

    Flow: brainstorm -> process_angle (once per angle, in order) -> END
    """
    # Editor-in-Chief output
    angles: List[Angle]

    # Loop control
    index: int
    cancelled: bool

    # Accumulated results
    articles: Annotated[List[Article], operator.add]
    failures: Annotated[List[str], operator.add]
