import logging
import threading
import time
from typing import List, Literal, Optional

from langchain_core.runnables import RunnableConfig
from langgraph.graph import START, END, StateGraph

from ai_newsroom.agents.editor_in_chief import AngleBrainstormer
from ai_newsroom.agents.reporter import ArticleWriter
from ai_newsroom.config import DEFAULT_REQUEST_DELAY, NewsroomConfig
from ai_newsroom.llm.client import LanguageModelClient
from ai_newsroom.llm.openai import get_newsroom_model
from ai_newsroom.schemas.models import Article
from ai_newsroom.schemas.states import PipelineState
from ai_newsroom.storage.article_store import ArticleStore, JsonArticleStore
from ai_newsroom.tools.tavily_search import WebSearchClient
from ai_newsroom.utils.rate_limit import FixedDelay, RateLimiter

logger = logging.getLogger(__name__)


def _is_cancelled(config: Optional[RunnableConfig]) -> bool:
    configuration = config.get("configurable", {}) if config else {}
    cancel_event = configuration.get("cancel_event")
    deadline = configuration.get("deadline")
    if cancel_event is not None and cancel_event.is_set():
        return True
    if deadline is not None and time.monotonic() >= deadline:
        return True
    return False


class NewsroomPipeline:
    """Editor-in-Chief -> (Search -> Reporter -> Store) per angle.

    Angles are processed one at a time in brainstorm order, with a rate-limit
    pause before every angle except the first. A failing angle is logged and
    skipped; only an empty brainstorm ends the run early.
    """

    def __init__(
        self,
        brainstormer: AngleBrainstormer,
        search_client: WebSearchClient,
        writer: ArticleWriter,
        store: ArticleStore,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.brainstormer = brainstormer
        self.search_client = search_client
        self.writer = writer
        self.store = store
        self.rate_limiter = rate_limiter or FixedDelay(DEFAULT_REQUEST_DELAY)
        self.graph = self.build_graph()

    # =========================================================================
    # NODES
    # =========================================================================

    def brainstorm(self, state: PipelineState):
        """Ask the Editor-in-Chief for today's angles."""
        logger.info("-> brainstorm")
        try:
            angles = self.brainstormer.brainstorm()
        except Exception:
            logger.exception("  Fatal error in brainstorming")
            angles = []

        if angles:
            logger.info(f"  Brainstormed {len(angles)} angles: {[a.title for a in angles]}")
        else:
            logger.error("  No angles to process")

        return {"angles": angles or [], "index": 0, "cancelled": False}

    def process_angle(self, state: PipelineState, config: RunnableConfig = None):
        """Research, write and store the angle at ``state['index']``."""
        angles = state["angles"]
        i = state["index"]
        angle = angles[i]
        progress = f"[{i + 1}/{len(angles)}]"
        logger.info(f"-> process_angle {progress}: {angle.title}")

        configuration = config.get("configurable", {}) if config else {}
        cancel_event = configuration.get("cancel_event")

        if _is_cancelled(config):
            logger.warning(f"  {progress} Run cancelled before processing")
            return {"cancelled": True}

        # No pause before the first angle
        if i > 0:
            if not self.rate_limiter.wait(cancel_event) or _is_cancelled(config):
                logger.warning(f"  {progress} Run cancelled while waiting")
                return {"cancelled": True}

        try:
            search_results = self.search_client.search(angle.search_query)
            logger.info(f"  {progress} Found {len(search_results)} search results")
            article = self.writer.write(angle, search_results)
        except Exception as e:
            logger.error(f"  {progress} Error processing '{angle.title}': {e}")
            return {"index": i + 1, "failures": [angle.title]}

        if article is None:
            logger.error(f"  {progress} Failed to write article")
            return {"index": i + 1, "failures": [angle.title]}

        try:
            self.store.upsert(article)
        except Exception:
            # Not retried; the article is dropped from this run's results
            logger.exception(f"  {progress} Failed to save '{article.slug}'")
            return {"index": i + 1, "failures": [angle.title]}

        logger.info(f"  {progress} Article saved: {article.title}")
        return {"index": i + 1, "articles": [article]}

    # =========================================================================
    # EDGES
    # =========================================================================

    @staticmethod
    def route_after_brainstorm(state: PipelineState) -> Literal["process_angle", "__end__"]:
        if not state.get("angles"):
            return END
        return "process_angle"

    @staticmethod
    def check_loop(state: PipelineState) -> Literal["process_angle", "__end__"]:
        if state.get("cancelled"):
            return END
        if state.get("index", 0) >= len(state.get("angles", [])):
            return END
        return "process_angle"

    # =========================================================================
    # GRAPH
    # =========================================================================

    def build_graph(self):
        """
        START -> brainstorm -> process_angle (looped once per angle) -> END
        """
        builder = StateGraph(PipelineState)

        builder.add_node("brainstorm", self.brainstorm)
        builder.add_node("process_angle", self.process_angle)

        builder.add_edge(START, "brainstorm")
        builder.add_conditional_edges("brainstorm", self.route_after_brainstorm, ["process_angle", END])
        builder.add_conditional_edges("process_angle", self.check_loop, ["process_angle", END])

        return builder.compile()

    def run(
        self,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> List[Article]:
        """Run the newsroom once and return the articles produced and stored.

        Args:
            cancel_event: set it from another thread to stop after the current angle
            deadline: absolute ``time.monotonic()`` value after which no new angle starts
        """
        logger.info("Starting newsroom pipeline...")

        initial_state = {
            "angles": [],
            "index": 0,
            "cancelled": False,
            "articles": [],
            "failures": [],
        }
        config = {
            "recursion_limit": 100,
            "configurable": {"cancel_event": cancel_event, "deadline": deadline},
        }
        result = self.graph.invoke(initial_state, config=config)

        articles = result.get("articles", [])
        failures = result.get("failures", [])
        attempted = len(result.get("angles", []))
        logger.info(
            f"Newsroom pipeline complete. Generated {len(articles)}/{attempted} articles "
            f"({len(failures)} failed{', cancelled' if result.get('cancelled') else ''})."
        )
        return articles


def build_newsroom_pipeline(config: NewsroomConfig, store: Optional[ArticleStore] = None) -> NewsroomPipeline:
    """Wire the production components from configuration."""
    llm = LanguageModelClient(get_newsroom_model(config))
    return NewsroomPipeline(
        brainstormer=AngleBrainstormer(llm),
        search_client=WebSearchClient(api_key=config.tavily_api_key),
        writer=ArticleWriter(llm),
        store=store or JsonArticleStore(config.store_path),
        rate_limiter=FixedDelay(config.request_delay),
    )
