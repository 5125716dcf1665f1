import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.results import Result as ResultModel
from models.students import Student as StudentModel
from services.exceptions import StoreError

logger = logging.getLogger(__name__)


class ResultStore:
    """
    성적 테이블 접근 계층 (SQLAlchemy Session 래퍼)

    - 쓰기 작업은 각각 SAVEPOINT 안에서 실행되므로 한 항목의 실패가
      같은 배치의 다른 항목을 되돌리지 않는다
    - 최종 commit 은 호출 측(라우터/스크립트)이 담당
    """

    def __init__(self, db: Session):
        self.db = db

    # ✅ 입학 번호로 학생 조회
    def find_student_by_admission_ref(self, admission_number: str) -> Optional[StudentModel]:
        try:
            return (
                self.db.query(StudentModel)
                .filter(StudentModel.admission_number == admission_number)
                .first()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"학생 조회 실패: {e}") from e

    # ✅ 성적 한 건 삭제 (삭제된 행 수 0 또는 1 반환)
    def delete_result(self, student_id: int, subject: str, term: str, academic_year: str) -> int:
        try:
            with self.db.begin_nested():
                row = self._find(student_id, subject, term, academic_year)
                if row is None:
                    return 0
                self.db.delete(row)
                self.db.flush()
                return 1
        except SQLAlchemyError as e:
            raise StoreError(f"성적 삭제 실패: {e}") from e

    # ✅ 성적 저장 (없으면 INSERT, 있으면 점수/등급 UPDATE)
    def upsert_result(
        self,
        student_id: int,
        subject: str,
        score: float,
        grade: str,
        term: str,
        academic_year: str,
    ) -> Tuple[ResultModel, bool]:
        try:
            return self._upsert_once(student_id, subject, score, grade, term, academic_year)
        except IntegrityError:
            # 동시 요청이 같은 키를 먼저 INSERT 한 경우 → UPDATE 로 재시도
            logger.info(f"성적 INSERT 충돌, UPDATE 재시도: student_id={student_id}, subject={subject}")
            try:
                return self._upsert_once(student_id, subject, score, grade, term, academic_year)
            except SQLAlchemyError as e:
                raise StoreError(f"성적 저장 실패: {e}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"성적 저장 실패: {e}") from e

    def _upsert_once(self, student_id, subject, score, grade, term, academic_year):
        with self.db.begin_nested():
            row = self._find(student_id, subject, term, academic_year)
            if row is not None:
                row.score = score
                row.grade = grade
                self.db.flush()
                return row, False

            row = ResultModel(
                student_id=student_id,
                subject=subject,
                score=score,
                grade=grade,
                term=term,
                academic_year=academic_year,
            )
            self.db.add(row)
            self.db.flush()
            return row, True

    def _find(self, student_id, subject, term, academic_year) -> Optional[ResultModel]:
        return (
            self.db.query(ResultModel)
            .filter(
                ResultModel.student_id == student_id,
                ResultModel.subject == subject,
                ResultModel.term == term,
                ResultModel.academic_year == academic_year,
            )
            .first()
        )

    # ✅ 학생/학기/학년도 성적 목록 (과목명 순)
    def list_results(self, student_id: int, term: str, academic_year: str) -> List[ResultModel]:
        try:
            return (
                self.db.query(ResultModel)
                .filter(
                    ResultModel.student_id == student_id,
                    ResultModel.term == term,
                    ResultModel.academic_year == academic_year,
                )
                .order_by(ResultModel.subject)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"성적 목록 조회 실패: {e}") from e
