import csv
import logging
import sys
from collections import OrderedDict
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.results import ResultSubmission
from services.exceptions import NotFound
from services.result_service import reconcile
from services.result_store import ResultStore

logger = logging.getLogger(__name__)

CSV_PATH = "data/results.csv"  # ✅ 기본 파일 경로 (admission_number,term,academic_year,subject,score)

GroupKey = Tuple[str, str, str]


def group_rows(rows: Iterable[dict]) -> Dict[GroupKey, List[ResultSubmission]]:
    """CSV 행을 (입학 번호, 학기, 학년도) 단위로 묶는다 (파일 순서 유지)"""
    groups: Dict[GroupKey, List[ResultSubmission]] = OrderedDict()
    for row in rows:
        key = (
            (row.get("admission_number") or "").strip(),
            (row.get("term") or "").strip(),
            (row.get("academic_year") or "").strip(),
        )
        groups.setdefault(key, []).append(
            ResultSubmission(subject=row.get("subject") or "", score=row.get("score"))
        )
    return groups


def import_results(db: Session, rows: Iterable[dict]) -> dict:
    """그룹별로 reconcile 실행 후 commit. 학생이 없는 그룹은 건너뛴다"""
    store = ResultStore(db)
    totals = {"inserted": 0, "updated": 0, "rejected": 0, "missing_students": []}

    for (admission_number, term, academic_year), submissions in group_rows(rows).items():
        try:
            report = reconcile(store, admission_number, term, academic_year, submissions, actor="csv-import")
        except NotFound:
            totals["missing_students"].append(admission_number)
            continue
        db.commit()
        totals["inserted"] += report.inserted
        totals["updated"] += report.updated
        totals["rejected"] += len(report.errors)
        for err in report.errors:
            print(f"⚠️ {admission_number} {term} {academic_year} {err.subject}: {err.reason}")

    return totals


def migrate_results(csv_path: str = CSV_PATH):
    db: Session = SessionLocal()
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            totals = import_results(db, csv.DictReader(csvfile))
    finally:
        db.close()

    print(
        f"✅ 성적 CSV → DB 반영 완료: 등록 {totals['inserted']} / 수정 {totals['updated']} / "
        f"거부 {totals['rejected']}"
    )
    if totals["missing_students"]:
        print(f"❌ 존재하지 않는 학생: {', '.join(totals['missing_students'])}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate_results(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
