from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """camelCase on the wire, snake_case in Python; built from ORM objects."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
