from sqlalchemy import Column, Integer, Numeric, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, func
from database.db import Base

class Result(Base):
    __tablename__ = "results"  # 과목별 성적 테이블
    __table_args__ = (
        # 학생/과목/학기/학년도 조합당 성적은 하나
        UniqueConstraint("student_id", "subject", "term", "academic_year", name="uq_result_student_subject_term_year"),
        CheckConstraint("score >= 0 AND score <= 100", name="ck_result_score_range"),
    )

    id = Column(Integer, primary_key=True, index=True)                                   # 성적 고유 ID
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)  # 학생 ID
    subject = Column(String(100), nullable=False)                                        # 과목명 (대문자 정규화)
    score = Column(Numeric(5, 2, asdecimal=False), nullable=False)                       # 점수 (0~100, 소수점 2자리)
    grade = Column(String(1), nullable=False)                                            # 등급 (A~F)
    term = Column(String(20), nullable=False)                                            # 학기 (예: First Term)
    academic_year = Column(String(20), nullable=False)                                   # 학년도 (예: 2024/2025)
    created_at = Column(DateTime, server_default=func.now())                             # 생성 시각
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())        # 수정 시각
