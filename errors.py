from fastapi import HTTPException

class APIError(HTTPException):
    """HTTPException with a machine readable error code for the JSON envelope."""

    def __init__(self, status_code: int, code: str, message: str, details=None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


class NotFoundError(APIError):
    def __init__(self, message: str):
        super().__init__(404, "NOT_FOUND", message)


def error_body(code: str, message: str, details=None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}
