from datetime import datetime
from typing import Optional, Literal
from fastapi import Query
from pydantic import Field
from models.students import ClassLevel
from schemas.common import CamelModel

# Input
class StudentCreate(CamelModel):
    roll_number: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    class_name: ClassLevel
    phone_number: str = Field(min_length=10, max_length=15)

class StudentUpdate(CamelModel):
    roll_number: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    class_name: Optional[ClassLevel] = None
    phone_number: Optional[str] = Field(None, min_length=10, max_length=15)

# Output
class StudentOut(CamelModel):
    id: int
    roll_number: str
    name: str
    class_name: ClassLevel
    phone_number: str
    created_at: datetime
    updated_at: datetime

# Query
class StudentQuery:
    """List filters read from the query string, used as ``Depends(StudentQuery)``."""

    def __init__(
        self,
        search: Optional[str] = None,
        class_name: Optional[ClassLevel] = Query(None, alias="className"),
        fee_status: Optional[Literal["PAID", "UNPAID", "ALL"]] = Query(None, alias="feeStatus"),
        sort_by: Optional[Literal["name", "rollNumber", "className", "createdAt"]] = Query(None, alias="sortBy"),
        sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
        page: Optional[int] = Query(None, ge=1),
        limit: Optional[int] = Query(None, ge=1, le=100),
    ):
        self.search = search
        self.class_name = class_name
        self.fee_status = fee_status
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.page = page
        self.limit = limit

    def as_filters(self) -> dict:
        return dict(vars(self))
