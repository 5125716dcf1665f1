from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func
from database.db import Base

class Announcement(Base):
    __tablename__ = "announcements"  # 공지사항 테이블

    id = Column(Integer, primary_key=True, index=True)                              # 공지 고유 ID
    title = Column(String(255), nullable=False)                                     # 제목
    content = Column(Text, nullable=False)                                          # 내용
    author = Column(String(100))                                                    # 작성자 표기 (토큰 주체)
    target_audience = Column(String(50), nullable=False, default="all")             # 대상 (all / students / staff)
    is_active = Column(Boolean, nullable=False, default=True)                       # 게시 여부
    created_at = Column(DateTime, server_default=func.now())                        # 생성 시각
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())   # 수정 시각
