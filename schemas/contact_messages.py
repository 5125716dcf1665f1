from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

# ✅ 입력용 (POST) — 빈 값 검사는 라우터에서 항목별로 수행
class ContactMessageCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

# ✅ 출력용
class ContactMessage(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
