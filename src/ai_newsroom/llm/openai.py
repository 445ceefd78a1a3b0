from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel

from ai_newsroom.config import NewsroomConfig


def get_newsroom_model(config: NewsroomConfig) -> BaseChatModel:
    """
    Returns the chat model shared by the Editor-in-Chief and the Reporter.
    Any OpenAI-compatible endpoint works (e.g. OpenRouter) via NEWSROOM_MODEL_BASE_URL.
    Default: gpt-4o-mini
    """
    kwargs = {"timeout": config.model_timeout, "max_retries": 2}
    if config.model_base_url:
        kwargs["base_url"] = config.model_base_url
    if config.model_api_key:
        kwargs["api_key"] = config.model_api_key
    return init_chat_model(model=config.model, **kwargs)
