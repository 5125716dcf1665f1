"""
services/result_service.py

성적 일괄 반영(reconcile) 로직
- 점수 → 등급 변환 (grade_for)
- 한 학생/학기/학년도 단위로 삭제 요청과 점수 제출을 저장소에 반영
- 잘못된 항목은 건너뛰고 사유를 리포트에 모아서 반환
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence

from schemas.results import ReconcileReport, RejectedEntry, ResultSubmission, ResultSummary
from services.exceptions import NotFound, StoreError, ValidationError
from services.result_store import ResultStore

logger = logging.getLogger(__name__)

# (하한 점수, 등급) — 위에서부터 처음 만족하는 구간의 등급
GRADE_BANDS = (
    (70, "A"),
    (60, "B"),
    (50, "C"),
    (45, "D"),
    (40, "E"),
)
FAIL_GRADE = "F"

MIN_SCORE = 0
MAX_SCORE = 100
SCORE_DECIMALS = 2


def grade_for(score: float) -> str:
    for lower, letter in GRADE_BANDS:
        if score >= lower:
            return letter
    return FAIL_GRADE


def normalize_subject(subject: Optional[str]) -> str:
    """앞뒤 공백 제거 + 대문자 (예: ' math ' → 'MATH')"""
    return (subject or "").strip().upper()


def parse_score(raw) -> float:
    """제출된 점수를 0~100 사이의 유한한 실수(소수점 2자리)로 변환, 아니면 ValidationError"""
    if raw is None:
        raise ValidationError("점수가 입력되지 않았습니다")
    if isinstance(raw, bool):
        raise ValidationError(f"점수가 숫자가 아닙니다: {raw!r}")
    try:
        score = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"점수가 숫자가 아닙니다: {raw!r}")
    if not math.isfinite(score) or score < MIN_SCORE or score > MAX_SCORE:
        raise ValidationError(f"점수는 {MIN_SCORE}~{MAX_SCORE} 사이여야 합니다: {raw!r}")
    # 저장 정밀도(소수점 2자리)에 맞춰 반올림 → 등급도 저장될 점수 기준으로 계산
    return round(score, SCORE_DECIMALS)


def reconcile(
    store: ResultStore,
    admission_number: str,
    term: str,
    academic_year: str,
    submissions: Sequence[ResultSubmission],
    deletions: Iterable[str] = (),
    actor: Optional[str] = None,
) -> ReconcileReport:
    """
    한 학생의 학기 성적을 일괄 반영

    1) 입학 번호로 학생 조회 (없으면 NotFound, 아무것도 쓰지 않음)
    2) deletions 처리 (없는 과목 삭제는 0건 삭제로 취급)
    3) submissions 검증 후 upsert (INSERT / UPDATE 구분 집계)

    삭제가 항상 먼저 처리되므로 같은 배치에서 삭제 후 다시 제출한 과목은
    새로 INSERT 된 행으로 남는다.
    """
    student = store.find_student_by_admission_ref(admission_number)
    if student is None:
        logger.warning(f"성적 반영 실패 - 학생 없음: admission_number={admission_number}, actor={actor}")
        raise NotFound(f"입학 번호 {admission_number} 에 해당하는 학생이 없습니다")

    logger.info(
        f"성적 반영 시작: student_id={student.id}, term={term}, year={academic_year}, "
        f"submissions={len(submissions)}, actor={actor}"
    )
    report = ReconcileReport()

    # ✅ [1] 삭제 먼저
    for raw_subject in deletions:
        subject = normalize_subject(raw_subject)
        if not subject:
            _reject(report, raw_subject, ValidationError("삭제할 과목명이 비어 있습니다"))
            continue
        try:
            report.deleted += store.delete_result(student.id, subject, term, academic_year)
        except StoreError as e:
            logger.exception(f"성적 삭제 중 저장소 오류: subject={subject}")
            _reject(report, subject, e)

    # ✅ [2] 제출 점수 반영
    for entry in submissions:
        subject = normalize_subject(entry.subject)
        try:
            if not subject:
                raise ValidationError("과목명이 비어 있습니다")
            score = parse_score(entry.score)
        except ValidationError as e:
            _reject(report, subject or entry.subject, e)
            continue

        try:
            _, was_insert = store.upsert_result(
                student.id, subject, score, grade_for(score), term, academic_year
            )
        except StoreError as e:
            logger.exception(f"성적 저장 중 저장소 오류: subject={subject}")
            _reject(report, subject, e)
            continue

        if was_insert:
            report.inserted += 1
        else:
            report.updated += 1

    logger.info(
        f"성적 반영 완료: student_id={student.id}, deleted={report.deleted}, "
        f"inserted={report.inserted}, updated={report.updated}, rejected={len(report.errors)}"
    )
    return report


def _reject(report: ReconcileReport, subject, error) -> None:
    if isinstance(error, ValidationError):
        logger.warning(f"항목 거부: subject={subject!r}, reason={error.message}")
    report.errors.append(RejectedEntry(subject=subject or "", code=error.code, reason=error.message))


def summarize_results(rows: List) -> ResultSummary:
    """과목 수 / 총점 / 평균 (소수점 2자리)"""
    if not rows:
        return ResultSummary()
    total = sum(r.score for r in rows)
    return ResultSummary(
        subject_count=len(rows),
        total_score=round(total, 2),
        average_score=round(total / len(rows), 2),
    )
