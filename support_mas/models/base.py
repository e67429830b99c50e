"""
Shared base model - camelCase field names on the wire
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with the dashboard and the CI pipeline."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
