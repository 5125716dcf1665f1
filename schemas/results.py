"""
schemas/results.py

- 성적 업로드(일괄 반영) 요청/응답 스키마
- 개별 항목 검증은 서비스 계층에서 수행하므로 score 는 원본 값을 그대로 받는다
  (잘못된 항목 하나 때문에 전체 요청이 422 로 거부되지 않도록)
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =========================================================
# 1) 요청
# =========================================================

class ResultSubmission(BaseModel):
    """과목 하나의 점수 제출"""
    subject: str = ""
    score: Any = None  # bool 이 1.0 으로 바뀌지 않도록 원본 그대로 받는다


class ReconcileRequest(BaseModel):
    """
    한 학생/학기/학년도에 대한 성적 일괄 반영 요청
    - deletions 가 먼저 처리되고 submissions 가 이어서 처리된다
    """
    admission_number: str = Field(..., min_length=1, description="학생 입학 번호")
    term: str = Field(..., min_length=1, description="학기 (예: First Term)")
    academic_year: str = Field(..., min_length=1, description="학년도 (예: 2024/2025)")
    submissions: List[ResultSubmission] = Field(default_factory=list)
    deletions: List[str] = Field(default_factory=list, description="삭제할 과목명 목록")


# =========================================================
# 2) 응답
# =========================================================

class RejectedEntry(BaseModel):
    """반영되지 않은 항목과 사유"""
    subject: str
    code: str = Field(..., description="VALIDATION_ERROR / STORE_ERROR")
    reason: str


class ReconcileReport(BaseModel):
    """일괄 반영 결과 집계"""
    deleted: int = 0
    inserted: int = 0
    updated: int = 0
    errors: List[RejectedEntry] = Field(default_factory=list)


class Result(BaseModel):
    id: int
    student_id: int
    subject: str
    score: float
    grade: str
    term: str
    academic_year: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ResultSummary(BaseModel):
    """학기 성적 요약 (과목 수 / 총점 / 평균)"""
    subject_count: int = 0
    total_score: float = 0.0
    average_score: float = 0.0
