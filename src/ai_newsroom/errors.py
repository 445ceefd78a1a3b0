"""Exceptions raised inside the newsroom.

None of these are expected to escape ``NewsroomPipeline.run()``; each component
converts them into a fallback value at its own boundary.
"""


class NewsroomError(Exception):
    """Base class for newsroom errors."""


class ConfigurationError(NewsroomError):
    """A required setting is missing or has an invalid value."""


class ModelOutputError(NewsroomError):
    """The language model returned text that does not match the expected schema."""

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output
