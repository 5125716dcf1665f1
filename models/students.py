from sqlalchemy import Column, Integer, String, DateTime, func
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                          # 고유 학생 ID (Primary Key)
    admission_number = Column(String(50), unique=True, nullable=False, index=True)  # 입학 번호 (로그인/성적 조회 키)
    first_name = Column(String(100), nullable=False)                            # 이름
    last_name = Column(String(100), nullable=False)                             # 성
    email = Column(String(255), unique=True)                                    # 이메일
    class_name = Column(String(50))                                             # 소속 반 (예: JSS1)
    gender = Column(String(10))                                                 # 성별 (male / female / other)
    parent_name = Column(String(100))                                           # 보호자 이름
    parent_phone = Column(String(20))                                           # 보호자 연락처
    created_at = Column(DateTime, server_default=func.now())                    # 생성 시각
