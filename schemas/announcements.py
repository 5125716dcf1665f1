from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from datetime import datetime

Audience = Literal["all", "students", "staff"]

# ✅ 입력용 (POST)
class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)   # 제목
    content: str = Field(..., min_length=1)                 # 내용
    target_audience: Audience = "all"                       # 대상

# ✅ 출력용
class Announcement(AnnouncementCreate):
    id: int
    author: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
