import os

# ✅ 앱 모듈 import 전에 테스트용 환경변수 지정 (인메모리 SQLite)
os.environ.setdefault("DB_DSN", "sqlite://")
os.environ.setdefault("STAFF_API_TOKEN", "test-staff-token")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database.db import Base, get_db, make_engine
from models import announcements as _announcements_model, contact_messages as _contact_model  # noqa: F401
from models.results import Result as ResultModel
from models.students import Student as StudentModel
from services.result_store import ResultStore

# 인메모리 SQLite 는 StaticPool 로 커넥션 하나를 공유하므로
# 테스트 세션은 요청 사이에 트랜잭션을 열어둔 채로 두지 않는다 (commit 후 만료하지 않음)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return ResultStore(db)


@pytest.fixture
def student(db):
    s = StudentModel(
        admission_number="ADM001",
        first_name="Aisha",
        last_name="Bello",
        email="aisha@example.com",
        class_name="JSS2",
    )
    db.add(s)
    db.commit()
    return s


@pytest.fixture
def client(session_factory):
    from main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def stored_scores(db):
    """현재 저장 상태를 {과목: (점수, 등급)} 으로 반환 (진행 중인 변경은 먼저 commit)"""

    def _stored(student_id, term="First Term", academic_year="2024/2025"):
        db.commit()
        rows = (
            db.query(ResultModel)
            .populate_existing()
            .filter(
                ResultModel.student_id == student_id,
                ResultModel.term == term,
                ResultModel.academic_year == academic_year,
            )
            .all()
        )
        scores = {r.subject: (r.score, r.grade) for r in rows}
        db.commit()
        return scores

    return _stored


@pytest.fixture
def count_results(db):
    def _count():
        db.commit()
        n = db.query(ResultModel).count()
        db.commit()
        return n

    return _count
