from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from errors import APIError, NotFoundError
from models.fees import FeeStatus
from schemas.common import dump, success
from schemas.fees import FeeRecordUpdate, FeeRecordOut
from services.data_store import FeeStore

router = APIRouter(prefix="/api/fees", tags=["Fee Records"])

VALID_STATUSES = [s.value for s in FeeStatus]


@router.get("/{fee_id}")
def get_fee_record(fee_id: int, db: Session = Depends(get_db)):
    record = FeeStore.find_by_id(db, fee_id)
    if not record:
        raise NotFoundError("Fee record not found")
    return success(dump(FeeRecordOut, record))


@router.put("/{fee_id}")
def update_fee_record(fee_id: int, payload: FeeRecordUpdate, db: Session = Depends(get_db)):
    # paymentDate may be cleared with an explicit null, the other two may not
    data = payload.model_dump(exclude_unset=True)
    for key in ("amount", "status"):
        if key in data and data[key] is None:
            del data[key]

    if "status" in data and data["status"] not in VALID_STATUSES:
        raise APIError(400, "INVALID_STATUS", "Status must be either PAID or UNPAID")

    record = FeeStore.update(db, fee_id, data)
    if not record:
        raise NotFoundError("Fee record not found")
    return success(dump(FeeRecordOut, record))


@router.delete("/{fee_id}")
def delete_fee_record(fee_id: int, db: Session = Depends(get_db)):
    if not FeeStore.delete(db, fee_id):
        raise NotFoundError("Fee record not found")
    return success({"message": "Fee record deleted successfully"})
