"""Command line interface for the AI Newsroom."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from ai_newsroom.config import NewsroomConfig
from ai_newsroom.errors import ConfigurationError
from ai_newsroom.storage.article_store import JsonArticleStore, get_article, list_articles
from ai_newsroom.utils.content import count_words
from ai_newsroom.utils.newsroom_logging import setup_logging


def _store_for(args, config: NewsroomConfig) -> JsonArticleStore:
    return JsonArticleStore(args.store or config.store_path)


def cmd_run(args, config: NewsroomConfig) -> int:
    from ai_newsroom.utils.rate_limit import FixedDelay
    from ai_newsroom.workflows.newsroom_workflow import build_newsroom_pipeline

    pipeline = build_newsroom_pipeline(config, store=_store_for(args, config))
    if args.delay is not None:
        pipeline.rate_limiter = FixedDelay(args.delay)

    deadline = time.monotonic() + args.timeout if args.timeout else None

    print("AI Newsroom: Running the newsroom pipeline...")
    print("   -> Editor-in-Chief: Brainstorming story angles...")
    print("   -> Reporter: Researching and writing each story...\n")

    articles = pipeline.run(deadline=deadline)

    print("=" * 80)
    print("WORKFLOW RESULTS")
    print("=" * 80)
    if not articles:
        print("\nNo articles were produced.")
    for article in articles:
        print(f"\n{article.title}")
        print(f"   Slug: {article.slug}")
        print(f"   Word Count: {count_words(article.content)}")
        print(f"   Tags: {', '.join(article.tags)}")
        if article.source_url:
            print(f"   Source: {article.source_url}")
    print("\n" + "=" * 80)
    return 0 if articles else 1


def cmd_brainstorm(args, config: NewsroomConfig) -> int:
    from ai_newsroom.agents.editor_in_chief import AngleBrainstormer
    from ai_newsroom.llm.client import LanguageModelClient
    from ai_newsroom.llm.openai import get_newsroom_model

    brainstormer = AngleBrainstormer(LanguageModelClient(get_newsroom_model(config)))
    for i, angle in enumerate(brainstormer.brainstorm(), 1):
        print(f"{i}. {angle.title}")
        print(f"   Query: {angle.search_query}")
        print(f"   Focus: {angle.focus}")
    return 0


def cmd_list(args, config: NewsroomConfig) -> int:
    articles = list_articles(_store_for(args, config))
    if not articles:
        print("No articles stored yet.")
        return 0
    for article in articles:
        print(f"{article.date.strftime('%Y-%m-%d %H:%M')}  {article.slug}")
        print(f"   {article.title}")
    return 0


def cmd_show(args, config: NewsroomConfig) -> int:
    article = get_article(_store_for(args, config), args.slug)
    if article is None:
        print(f"No article found for slug '{args.slug}'", file=sys.stderr)
        return 1
    print(article.to_markdown())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-newsroom",
        description="Run the AI Newsroom pipeline and browse its articles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py run --timeout 600
  python main.py list
  python main.py show gpu-wars-nvidia-vs-amd-in-the-ai-acceleration-race
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Brainstorm, research and write today's articles")
    run_parser.add_argument("--timeout", type=float, default=None,
                            help="Stop starting new articles after this many seconds")
    run_parser.add_argument("--delay", type=float, default=None,
                            help="Seconds to wait between articles (default: NEWSROOM_REQUEST_DELAY)")
    run_parser.set_defaults(func=cmd_run)

    brainstorm_parser = subparsers.add_parser("brainstorm", help="Print today's story angles without writing")
    brainstorm_parser.set_defaults(func=cmd_brainstorm)

    list_parser = subparsers.add_parser("list", help="List stored articles, newest first")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Print a stored article as markdown")
    show_parser.add_argument("slug", help="The article slug")
    show_parser.set_defaults(func=cmd_show)

    for sub in (run_parser, list_parser, show_parser):
        sub.add_argument("--store", type=Path, default=None, help="Path to the JSON article store")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = NewsroomConfig.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(logging.DEBUG if args.verbose else config.log_level)
    return args.func(args, config)
