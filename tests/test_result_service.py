import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from schemas.results import ResultSubmission
from services.exceptions import NotFound, StoreError
from services.result_service import grade_for, normalize_subject, parse_score, reconcile, summarize_results
from services.result_store import ResultStore

TERM = "First Term"
YEAR = "2024/2025"


def sub(subject, score):
    return ResultSubmission(subject=subject, score=score)


# ==========================================================
# 등급 변환
# ==========================================================

@pytest.mark.parametrize(
    "score, expected",
    [
        (100, "A"), (70, "A"),
        (69, "B"), (60, "B"),
        (59, "C"), (50, "C"),
        (49, "D"), (45, "D"),
        (44, "E"), (40, "E"),
        (39, "F"), (0, "F"),
        (69.99, "B"), (39.5, "F"),
    ],
)
def test_grade_for_bands(score, expected):
    assert grade_for(score) == expected


def test_normalize_subject():
    assert normalize_subject(" math ") == "MATH"
    assert normalize_subject("Basic Science") == "BASIC SCIENCE"
    assert normalize_subject(None) == ""


@pytest.mark.parametrize("raw", [None, "", "abc", float("nan"), float("inf"), -1, 100.01, 150, True])
def test_parse_score_rejects(raw):
    from services.exceptions import ValidationError

    with pytest.raises(ValidationError):
        parse_score(raw)


def test_parse_score_accepts_numeric_strings():
    assert parse_score("80") == 80.0
    assert parse_score(" 45.5 ") == 45.5
    assert parse_score(0) == 0.0


# ==========================================================
# 일괄 반영
# ==========================================================

def test_reconcile_inserts_new_results(store, student, stored_scores):
    report = reconcile(store, "ADM001", TERM, YEAR, [sub("Math", 72), sub("English", 58)])

    assert (report.inserted, report.updated, report.deleted) == (2, 0, 0)
    assert report.errors == []
    assert stored_scores(student.id) == {"MATH": (72.0, "A"), "ENGLISH": (58.0, "C")}


def test_reconcile_is_idempotent(store, student, stored_scores):
    batch = [sub("MATH", 65), sub("PHYSICS", 41)]

    first = reconcile(store, "ADM001", TERM, YEAR, batch)
    after_first = stored_scores(student.id)
    second = reconcile(store, "ADM001", TERM, YEAR, batch)

    assert (first.inserted, first.updated) == (2, 0)
    assert (second.inserted, second.updated) == (0, 2)
    assert stored_scores(student.id) == after_first


def test_resubmission_updates_score_and_grade(store, student, stored_scores):
    reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 35)])
    report = reconcile(store, "ADM001", TERM, YEAR, [sub("math", 61)])

    assert report.updated == 1
    assert stored_scores(student.id) == {"MATH": (61.0, "B")}


def test_delete_then_resubmit_in_same_batch_recreates(store, db, student, stored_scores):
    store.upsert_result(student.id, "MATH", 50, "C", TERM, YEAR)
    db.commit()

    report = reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 80)], deletions=["MATH"])

    assert (report.deleted, report.inserted, report.updated) == (1, 1, 0)
    assert stored_scores(student.id) == {"MATH": (80.0, "A")}


def test_deleting_missing_subject_is_not_an_error(store, student, stored_scores):
    reconcile(store, "ADM001", TERM, YEAR, [sub("ART", 90)])

    report = reconcile(store, "ADM001", TERM, YEAR, [], deletions=[" art ", "CHEMISTRY"])

    assert report.deleted == 1
    assert report.errors == []
    assert stored_scores(student.id) == {}


def test_empty_subject_is_rejected(store, student, count_results):
    report = reconcile(store, "ADM001", TERM, YEAR, [sub("", 50), sub("   ", 60)])

    assert (report.inserted, report.updated) == (0, 0)
    assert [e.code for e in report.errors] == ["VALIDATION_ERROR", "VALIDATION_ERROR"]
    assert count_results() == 0


def test_out_of_range_score_is_rejected_without_aborting_batch(store, student, stored_scores):
    report = reconcile(store, "ADM001", TERM, YEAR, [sub("ART", 150), sub("MATH", 70), sub("CRS", "abc")])

    assert report.inserted == 1
    assert [(e.subject, e.code) for e in report.errors] == [
        ("ART", "VALIDATION_ERROR"),
        ("CRS", "VALIDATION_ERROR"),
    ]
    assert stored_scores(student.id) == {"MATH": (70.0, "A")}


def test_unknown_student_is_fatal_and_writes_nothing(store, student, count_results):
    reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 50)])
    before = count_results()

    with pytest.raises(NotFound):
        reconcile(store, "NOPE", TERM, YEAR, [sub("MATH", 90)], deletions=["MATH"])

    assert count_results() == before


def test_subject_is_normalized(store, student, stored_scores):
    reconcile(store, "ADM001", TERM, YEAR, [sub(" math ", 70)])

    assert stored_scores(student.id) == {"MATH": (70.0, "A")}


def test_results_are_scoped_by_term_and_year(store, student, stored_scores):
    reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 70)])
    reconcile(store, "ADM001", "Second Term", YEAR, [sub("MATH", 40)])

    assert stored_scores(student.id) == {"MATH": (70.0, "A")}
    assert stored_scores(student.id, term="Second Term") == {"MATH": (40.0, "E")}


class FlakyStore(ResultStore):
    """특정 과목 저장 시 저장소 오류를 흉내내는 테스트용 저장소"""

    def upsert_result(self, student_id, subject, score, grade, term, academic_year):
        if subject == "BROKEN":
            raise StoreError("connection reset")
        return super().upsert_result(student_id, subject, score, grade, term, academic_year)


def test_store_error_is_reported_per_entry(db, student, stored_scores):
    report = reconcile(FlakyStore(db), "ADM001", TERM, YEAR, [sub("BROKEN", 60), sub("MATH", 60)])

    assert report.inserted == 1
    assert len(report.errors) == 1
    assert report.errors[0].subject == "BROKEN"
    assert report.errors[0].code == "STORE_ERROR"
    assert stored_scores(student.id) == {"MATH": (60.0, "B")}


# ==========================================================
# 학기 요약
# ==========================================================

def test_summarize_results(store, student):
    reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 70), sub("ENGLISH", 55.5), sub("ART", 41)])
    rows = store.list_results(student.id, TERM, YEAR)

    summary = summarize_results(rows)

    assert [r.subject for r in rows] == ["ART", "ENGLISH", "MATH"]
    assert summary.subject_count == 3
    assert summary.total_score == 166.5
    assert summary.average_score == 55.5


def test_summarize_empty():
    summary = summarize_results([])
    assert (summary.subject_count, summary.total_score, summary.average_score) == (0, 0.0, 0.0)


# ==========================================================
# 저장소 오류 / 동시 INSERT 충돌
# ==========================================================

class RacingStore(ResultStore):
    """첫 INSERT 시도에서 다른 요청이 같은 키를 먼저 넣은 상황을 흉내"""

    def __init__(self, db, rival_score):
        super().__init__(db)
        self.rival_score = rival_score
        self.attempts = 0

    def _upsert_once(self, student_id, subject, score, grade, term, academic_year):
        self.attempts += 1
        if self.attempts == 1:
            super()._upsert_once(student_id, subject, self.rival_score, grade_for(self.rival_score), term, academic_year)
            raise IntegrityError("INSERT INTO results ...", {}, Exception("duplicate key"))
        return super()._upsert_once(student_id, subject, score, grade, term, academic_year)


def test_upsert_retries_as_update_after_insert_conflict(db, student, stored_scores):
    store = RacingStore(db, rival_score=30)

    row, was_insert = store.upsert_result(student.id, "MATH", 66, "B", TERM, YEAR)

    assert store.attempts == 2
    assert was_insert is False
    assert (row.score, row.grade) == (66, "B")
    assert stored_scores(student.id) == {"MATH": (66.0, "B")}


class BrokenLookupStore(ResultStore):
    """특정 과목 조회 시 DB 연결 오류를 흉내"""

    def _find(self, student_id, subject, term, academic_year):
        if subject == "BROKEN":
            raise OperationalError("SELECT ...", {}, Exception("server has gone away"))
        return super()._find(student_id, subject, term, academic_year)


def test_delete_result_wraps_driver_error(db, student):
    with pytest.raises(StoreError):
        BrokenLookupStore(db).delete_result(student.id, "BROKEN", TERM, YEAR)


def test_delete_store_error_is_reported_per_entry(db, student, stored_scores):
    store = BrokenLookupStore(db)
    reconcile(store, "ADM001", TERM, YEAR, [sub("ART", 50)])

    report = reconcile(store, "ADM001", TERM, YEAR, [sub("MATH", 75)], deletions=["broken", "ART"])

    assert report.deleted == 1
    assert report.inserted == 1
    assert [(e.subject, e.code) for e in report.errors] == [("BROKEN", "STORE_ERROR")]
    assert stored_scores(student.id) == {"MATH": (75.0, "A")}


def test_score_is_rounded_to_two_decimals():
    assert parse_score(69.996) == 70.0
    assert parse_score("44.994") == 44.99
    assert grade_for(parse_score(69.996)) == "A"
