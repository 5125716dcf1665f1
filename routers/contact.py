import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_staff
from models.contact_messages import ContactMessage as ContactMessageModel
from schemas.contact_messages import ContactMessage as ContactMessageSchema, ContactMessageCreate
from services.exceptions import ValidationError

router = APIRouter(prefix="/contact", tags=["문의"])

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "subject", "message")


# ✅ [CREATE] 문의 접수 (모든 항목 필수, 상태는 unread 로 시작)
@router.post("/")
def create_contact_message(payload: ContactMessageCreate, db: Session = Depends(get_db)):
    values = {field: (getattr(payload, field) or "").strip() for field in REQUIRED_FIELDS}
    missing = [field for field, value in values.items() if not value]
    if missing:
        raise ValidationError(f"모든 항목을 입력해야 합니다: {', '.join(missing)}")

    db_message = ContactMessageModel(**values)
    db.add(db_message)
    db.commit()
    db.refresh(db_message)
    logger.info(f"문의 접수: id={db_message.id}, subject={db_message.subject!r}")
    return {
        "success": True,
        "data": ContactMessageSchema.model_validate(db_message).model_dump(mode="json"),
        "message": "문의가 접수되었습니다"
    }


# ✅ [READ] 문의 목록 (교직원 전용, 최신순)
@router.get("/")
def read_contact_messages(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    query = db.query(ContactMessageModel)
    if status:
        query = query.filter(ContactMessageModel.status == status)
    records = query.order_by(ContactMessageModel.id.desc()).all()
    return {
        "success": True,
        "data": [ContactMessageSchema.model_validate(r).model_dump(mode="json") for r in records],
        "message": "문의 목록 조회 완료"
    }
