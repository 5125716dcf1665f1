from sqlalchemy import create_engine, event               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base, sessionmaker  # 모델 Base 클래스 / 세션 팩토리
from sqlalchemy.pool import StaticPool

from config.settings import settings                      # ✅ 환경변수 설정 파일 불러오기


def make_engine(url: str):
    """
    DB URL로 엔진 생성
    - SQLite: 스레드 공유 허용 + 메모리 DB는 단일 커넥션 유지
    - SQLite SAVEPOINT가 정상 동작하도록 BEGIN을 직접 발행
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = make_engine(settings.DATABASE_URL)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


# ✅ [공통] 요청 단위 DB 세션 (FastAPI Depends 용)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
