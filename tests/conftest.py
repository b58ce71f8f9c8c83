# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable

# fam 모듈이 설정을 읽기 전에 테스트용 DB URL 을 지정합니다. (운영 DB 에 접속하지 않도록)
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("DB_CREATE_TABLES", "false")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool, StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

# fam.main 을 임포트하면 모든 도메인 모델이 SQLModel.metadata 에 등록됩니다.
from fam.main import app as main_app  # noqa: E402
from fam.core import dependencies as deps  # noqa: E402
from fam.core.database import get_session  # noqa: E402
from fam.core.security import get_password_hash  # noqa: E402
from fam.domains.usr import models as usr_models  # noqa: E402
from fam.domains.loc import models as loc_models  # noqa: E402
from fam.domains.ven import models as ven_models  # noqa: E402


def _test_engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # 인메모리 SQLite 는 하나의 연결을 공유해야 같은 DB 를 봅니다.
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"poolclass": NullPool}


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 모든 테이블을 새로 만들고, 끝나면 삭제합니다.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, future=True, **_test_engine_options(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수에서 사용할 비동기 데이터베이스 세션을 제공합니다.
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    테스트용 비동기 DB 세션을 주입한 AsyncClient 인스턴스를 생성합니다.
    """

    async def override_get_session_and_dependency():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        # get_session 과 deps.get_db_session 모두 오버라이드
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 테스트 데이터 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_role(db_session: AsyncSession) -> usr_models.Role:
    """테스트용 일반 역할을 생성합니다."""
    role = usr_models.Role(code="STAFF", name="Staff", rank=50)
    db_session.add(role)
    await db_session.commit()
    await db_session.refresh(role)
    return role


@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    사용자명과 비밀번호로 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    """
    async def _create_user(username: str, password: str = "password123", **kwargs) -> usr_models.User:
        user_data = {
            "username": username,
            "password_hash": get_password_hash(password),
            "email": f"{username}@example.com",
            **kwargs,
        }
        user = usr_models.User(**user_data)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable, test_role: usr_models.Role) -> usr_models.User:
    return await user_factory("jdoe", full_name="John Doe", role_id=test_role.id)


@pytest_asyncio.fixture(scope="function")
async def test_supplier(db_session: AsyncSession) -> ven_models.Supplier:
    supplier = ven_models.Supplier(name="Acme Supply", supplier_code="S-001", is_preferred=True)
    db_session.add(supplier)
    await db_session.commit()
    await db_session.refresh(supplier)
    return supplier


@pytest_asyncio.fixture(scope="function")
async def test_manufacturer(db_session: AsyncSession) -> ven_models.Manufacturer:
    manufacturer = ven_models.Manufacturer(name="Dell", country_code="US")
    db_session.add(manufacturer)
    await db_session.commit()
    await db_session.refresh(manufacturer)
    return manufacturer


@pytest_asyncio.fixture(scope="function")
async def test_location(db_session: AsyncSession) -> loc_models.Location:
    location = loc_models.Location(name="HQ", code="HQ", full_path="HQ")
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)
    return location
