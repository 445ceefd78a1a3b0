"""AI Newsroom: an automated pipeline that brainstorms, researches and writes AI news articles."""

__version__ = "0.1.0"
