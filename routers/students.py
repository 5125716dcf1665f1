from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_staff
from models.students import Student as StudentModel
from schemas.students import StudentCreate, Student as StudentSchema
from services.exceptions import NotFound

router = APIRouter(prefix="/students", tags=["학생 정보"])


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학생 등록 (교직원 전용)
@router.post("/")
def create_student(student: StudentCreate, db: Session = Depends(get_db), principal: dict = Depends(require_staff)):
    db_student = StudentModel(**student.model_dump())
    db.add(db_student)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return JSONResponse(
            status_code=409,
            content={
                "success": False,
                "error": {"code": 409, "message": "이미 등록된 입학 번호 또는 이메일입니다"}
            }
        )
    db.refresh(db_student)
    return {
        "success": True,
        "data": StudentSchema.model_validate(db_student).model_dump(mode="json"),
        "message": "학생 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 학생 조회 (입학 번호 순)
@router.get("/")
def read_students(db: Session = Depends(get_db)):
    records = db.query(StudentModel).order_by(StudentModel.admission_number).all()
    return {
        "success": True,
        "data": [StudentSchema.model_validate(r).model_dump(mode="json") for r in records],
        "message": "전체 학생 정보 조회 완료"
    }


# ==========================================================
# [2단계] 동적 라우터
# ==========================================================

# ✅ [READ] 입학 번호로 학생 조회
@router.get("/{admission_number}")
def read_student(admission_number: str, db: Session = Depends(get_db)):
    student = db.query(StudentModel).filter(StudentModel.admission_number == admission_number).first()
    if student is None:
        raise NotFound(f"입학 번호 {admission_number} 에 해당하는 학생이 없습니다")
    return {
        "success": True,
        "data": StudentSchema.model_validate(student).model_dump(mode="json"),
        "message": "학생 정보 조회 성공"
    }
