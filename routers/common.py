from urllib.parse import unquote
from models.students import ClassLevel
from errors import APIError

def resolve_class_level(value: str) -> ClassLevel:
    """Path/query class name -> ClassLevel, 400 INVALID_CLASS otherwise."""
    try:
        return ClassLevel(unquote(value))
    except ValueError:
        raise APIError(400, "INVALID_CLASS", "Invalid class name")
