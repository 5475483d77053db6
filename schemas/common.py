from pydantic import BaseModel
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Snake case in Python, camelCase on the wire."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def dump(schema, obj) -> dict:
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")


def success(data) -> dict:
    return {"success": True, "data": data}
