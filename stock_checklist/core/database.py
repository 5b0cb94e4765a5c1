"""
데이터베이스 관리 모듈

SQLAlchemy 엔진/세션 관리. 전역 싱글톤 대신 저장소에 주입해서 사용한다.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from stock_checklist.core.exceptions import BaseError, DatabaseError

# ORM Base 클래스
Base = declarative_base()


class DatabaseManager:
    """
    데이터베이스 연결 관리자

    사용법:
        db = DatabaseManager("sqlite:///data/checklists.db")
        db.create_all_tables()

        with db.session() as session:
            session.execute(text("SELECT 1"))
    """

    def __init__(
        self,
        connection_string: str,
        pool_size: int = 5,
        pool_timeout: int = 30,
        echo: bool = False,
    ):
        if not connection_string:
            raise DatabaseError("데이터베이스 연결 문자열이 설정되지 않았습니다")

        self._connection_string = connection_string
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._echo = echo

        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def _ensure_engine(self) -> Engine:
        """엔진 생성 (Lazy initialization)"""
        if self._engine is None:
            is_sqlite = self._connection_string.startswith("sqlite")

            # 파일 기반 SQLite인 경우 디렉토리 생성
            if self._connection_string.startswith("sqlite:///") and ":memory:" not in self._connection_string:
                db_path = Path(self._connection_string.replace("sqlite:///", ""))
                db_path.parent.mkdir(parents=True, exist_ok=True)

            if is_sqlite:
                # SQLite는 pool_size 지원 안함
                self._engine = create_engine(
                    self._connection_string,
                    echo=self._echo,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    self._connection_string,
                    pool_size=self._pool_size,
                    pool_timeout=self._pool_timeout,
                    echo=self._echo,
                )

            # 세션 종료 후에도 로드된 속성을 읽을 수 있도록
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

        return self._engine

    @property
    def engine(self) -> Engine:
        """SQLAlchemy 엔진 반환"""
        return self._ensure_engine()

    def get_session(self) -> Session:
        """새 세션 반환 (수동 관리)"""
        self._ensure_engine()
        if self._session_factory is None:
            raise DatabaseError("세션 팩토리가 초기화되지 않았습니다")
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        세션 컨텍스트 매니저

        자동 커밋/롤백 처리. 도메인 예외(BaseError)는 그대로 전파하고
        그 외 예외는 DatabaseError로 감싼다.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except BaseError:
            session.rollback()
            raise
        except Exception as e:
            session.rollback()
            raise DatabaseError(f"데이터베이스 작업 실패: {e}") from e
        finally:
            session.close()

    def create_all_tables(self) -> None:
        """모든 테이블 생성 (ORM 모델 기반)"""
        # 모델 모듈을 임포트해야 metadata에 테이블이 등록된다
        import stock_checklist.core.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def health_check(self) -> bool:
        """연결 상태 확인"""
        try:
            with self.session() as session:
                session.execute(text("SELECT 1"))
            return True
        except DatabaseError:
            return False

    def close(self) -> None:
        """연결 종료"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


def init_database_from_config() -> DatabaseManager:
    """설정 파일 기반 데이터베이스 생성"""
    from stock_checklist.core.config import get_config

    config = get_config()
    db_config = config.get_section("database")

    return DatabaseManager(
        connection_string=db_config.get("connection_string"),
        pool_size=db_config.get("pool_size", 5),
        echo=db_config.get("echo", False),
    )
