import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import actor_label, require_staff
from schemas.results import ReconcileRequest, Result as ResultSchema
from services.exceptions import NotFound
from services.pdf_service import PDFService
from services.result_service import reconcile, summarize_results
from services.result_store import ResultStore

router = APIRouter(prefix="/results", tags=["성적"])

logger = logging.getLogger(__name__)

pdf_service = PDFService()


def _load_term_results(store: ResultStore, admission_number: str, term: str, academic_year: str):
    student = store.find_student_by_admission_ref(admission_number)
    if student is None:
        raise NotFound(f"입학 번호 {admission_number} 에 해당하는 학생이 없습니다")
    return student, store.list_results(student.id, term, academic_year)


# ==========================================================
# [1단계] 성적 업로드 (교직원 전용)
# ==========================================================

# ✅ [UPLOAD] 한 학생/학기 성적 일괄 반영 (삭제 → 등록/수정 순)
@router.post("/upload")
def upload_results(
    payload: ReconcileRequest,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    store = ResultStore(db)
    admission_number = payload.admission_number.strip()
    term = payload.term.strip()
    academic_year = payload.academic_year.strip()

    report = reconcile(
        store,
        admission_number,
        term,
        academic_year,
        payload.submissions,
        payload.deletions,
        actor=actor_label(principal),
    )
    db.commit()

    _, rows = _load_term_results(store, admission_number, term, academic_year)
    summary = summarize_results(rows)
    return {
        "success": True,
        "data": {
            "report": report.model_dump(),
            "summary": summary.model_dump(),
        },
        "message": (
            f"성적 반영 완료 (등록 {report.inserted} / 수정 {report.updated} / "
            f"삭제 {report.deleted} / 거부 {len(report.errors)}). 총점: {summary.total_score}"
        ),
    }


# ==========================================================
# [2단계] 성적 조회
# ==========================================================

# ✅ [READ] 학생의 학기 성적 목록 + 요약 (교직원 전용)
@router.get("/{admission_number}")
def read_term_results(
    admission_number: str,
    term: str,
    academic_year: str,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    student, rows = _load_term_results(ResultStore(db), admission_number, term, academic_year)
    return {
        "success": True,
        "data": {
            "student_id": student.id,
            "admission_number": student.admission_number,
            "name": f"{student.first_name} {student.last_name}",
            "term": term,
            "academic_year": academic_year,
            "results": [ResultSchema.model_validate(r).model_dump(mode="json") for r in rows],
            "summary": summarize_results(rows).model_dump(),
        },
        "message": "학기 성적 조회 완료",
    }


# ✅ [PDF] 학기 성적표 발급 (교직원 전용)
@router.get("/{admission_number}/slip.pdf")
def download_result_slip(
    admission_number: str,
    term: str,
    academic_year: str,
    db: Session = Depends(get_db),
    principal: dict = Depends(require_staff),
):
    student, rows = _load_term_results(ResultStore(db), admission_number, term, academic_year)
    pdf_content = pdf_service.generate_result_slip_pdf({
        "student": student,
        "term": term,
        "academic_year": academic_year,
        "results": rows,
        "summary": summarize_results(rows),
    })
    logger.info(
        f"성적표 발급: admission_number={admission_number}, term={term}, year={academic_year}, "
        f"actor={actor_label(principal)}"
    )

    filename = f"result_slip_{admission_number}.pdf".replace("/", "-")
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
