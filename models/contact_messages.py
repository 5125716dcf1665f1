from sqlalchemy import Column, Integer, String, Text, DateTime, CheckConstraint, func
from database.db import Base

class ContactMessage(Base):
    __tablename__ = "contact_messages"  # 문의 메시지 테이블
    __table_args__ = (
        CheckConstraint("status IN ('unread', 'read', 'replied', 'archived')", name="ck_contact_status"),
    )

    id = Column(Integer, primary_key=True, index=True)                              # 문의 고유 ID
    name = Column(String(255), nullable=False)                                      # 보낸 사람 이름
    email = Column(String(255), nullable=False)                                     # 회신 이메일
    subject = Column(String(500), nullable=False)                                   # 제목
    message = Column(Text, nullable=False)                                          # 본문
    status = Column(String(20), nullable=False, default="unread")                   # 처리 상태
    created_at = Column(DateTime, server_default=func.now())                        # 접수 시각
