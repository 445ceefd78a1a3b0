from pydantic import BaseModel, ConfigDict


class NewsroomModel(BaseModel):
    """Base for newsroom records.

    Fields may be populated either by their Python name or by their wire alias,
    so records written by older tooling (camelCase keys) load unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_markdown(self) -> str:
        raise NotImplementedError("Subclasses must implement to_markdown")
