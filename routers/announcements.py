from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import actor_label, require_staff
from models.announcements import Announcement as AnnouncementModel
from schemas.announcements import Announcement as AnnouncementSchema, AnnouncementCreate, Audience
from services.exceptions import NotFound

router = APIRouter(prefix="/announcements", tags=["공지사항"])


# ✅ [CREATE] 공지 등록 (교직원 전용)
@router.post("/")
def create_announcement(
    announcement: AnnouncementCreate,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    db_announcement = AnnouncementModel(**announcement.model_dump(), author=actor_label(principal))
    db.add(db_announcement)
    db.commit()
    db.refresh(db_announcement)
    return {
        "success": True,
        "data": AnnouncementSchema.model_validate(db_announcement).model_dump(mode="json"),
        "message": "공지사항이 등록되었습니다"
    }


# ✅ [READ] 게시 중인 공지 목록 (최신순)
# - audience 지정 시 해당 대상 + 전체(all) 공지만
@router.get("/")
def read_announcements(audience: Optional[Audience] = None, db: Session = Depends(get_db)):
    query = db.query(AnnouncementModel).filter(AnnouncementModel.is_active.is_(True))
    if audience:
        query = query.filter(AnnouncementModel.target_audience.in_([audience, "all"]))
    records = query.order_by(AnnouncementModel.created_at.desc(), AnnouncementModel.id.desc()).all()
    return {
        "success": True,
        "data": [AnnouncementSchema.model_validate(r).model_dump(mode="json") for r in records],
        "message": "공지사항 조회 완료"
    }


# ✅ [UPDATE] 공지 게시 중단 (교직원 전용)
@router.patch("/{announcement_id}/deactivate")
def deactivate_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    announcement = db.query(AnnouncementModel).filter(AnnouncementModel.id == announcement_id).first()
    if announcement is None:
        raise NotFound(f"공지사항 {announcement_id} 을(를) 찾을 수 없습니다")

    announcement.is_active = False
    db.commit()
    return {
        "success": True,
        "data": {"announcement_id": announcement_id},
        "message": "공지사항 게시가 중단되었습니다"
    }
