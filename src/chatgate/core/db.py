from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoreModel(BaseModel):
    """Base for records persisted in the JSON store, stored with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_store(self) -> dict[str, Any]:
        """Convert the model to a JSON-compatible dictionary in the persisted layout."""
        return self.model_dump(mode="json", by_alias=True)
