#!/usr/bin/env python3
"""
Main entry point for running the AI Newsroom.

Brainstorms today's story angles, researches and writes an article for each,
and stores them in the article store.
"""

import sys

from ai_newsroom.cli import main

if __name__ == "__main__":
    sys.exit(main())
