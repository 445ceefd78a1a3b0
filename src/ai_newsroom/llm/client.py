"""Thin capability wrapper around a LangChain chat model."""

import json
import logging
import re
from typing import Type, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from pydantic import BaseModel, ValidationError

from ai_newsroom.errors import ModelOutputError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


class LanguageModelClient:
    """Issues single-turn completions and returns the raw text.

    Errors from the provider propagate; callers own the fallback policy.
    """

    def __init__(self, model: BaseChatModel):
        self.model = model

    def complete(self, prompt: str, json_mode: bool = False) -> str:
        runnable = self.model
        if json_mode:
            runnable = self.model.bind(response_format={"type": "json_object"})

        response = runnable.invoke([HumanMessage(content=prompt)])
        content = response.content
        if isinstance(content, list):
            # Some providers return content blocks instead of a plain string
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        logger.debug(f"  Model returned {len(content)} characters")
        return content


def parse_json_response(text: str, schema: Type[SchemaT]) -> SchemaT:
    """Parse a JSON-mode completion into ``schema``.

    Raises:
        ModelOutputError: if the text is empty, not JSON, or violates the schema
    """
    if not text or not text.strip():
        raise ModelOutputError("Model returned an empty response", raw_output=text or "")

    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelOutputError(f"Model response is not valid JSON: {e}", raw_output=text)

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ModelOutputError(
            f"Model response does not match {schema.__name__}: {e.error_count()} errors",
            raw_output=text,
        )
