from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    SQLAlchemy Async Engine 생성.
    SQLite 메모리 DB는 커넥션마다 DB가 따로 생기므로 하나의 커넥션을 공유한다.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    애플리케이션 시작 시 한 번 호출해서
    teachers / leaves / leave_usage 테이블을 생성.
    이미 있으면 아무 일도 안 함.
    """
    # 모델 모듈을 import 해야 Base.metadata에 테이블이 등록된다
    from leave_service.models import leave, teacher  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
