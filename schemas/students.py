from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

# ✅ 입력용 (POST)
class StudentCreate(BaseModel):
    admission_number: str                    # 입학 번호
    first_name: str                          # 이름
    last_name: str                           # 성
    email: Optional[str] = None              # 이메일
    class_name: Optional[str] = None         # 소속 반
    gender: Optional[str] = None             # 성별
    parent_name: Optional[str] = None        # 보호자 이름
    parent_phone: Optional[str] = None       # 보호자 연락처

# ✅ 전체 출력용 (GET, 상세조회 등)
class Student(StudentCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
