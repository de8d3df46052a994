"""测试夹具：为 pytest 提供数据库、会话存储与客户端的共享配置。"""

import os
import uuid
from typing import Callable, Generator

TEST_DB_PATH = os.path.join(os.path.dirname(__file__), "test.db")
TEST_DATABASE_URL = f"sqlite:///{TEST_DB_PATH}"
TEST_IMAGEKIT_PRIVATE_KEY = "private_test_key"

# 必须在导入应用前设置，配置对象会被缓存
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["IMAGEKIT_PRIVATE_KEY"] = TEST_IMAGEKIT_PRIVATE_KEY
os.environ["IMAGEKIT_PUBLIC_KEY"] = "public_test_key"
os.environ["IMAGEKIT_URL_ENDPOINT"] = "https://ik.imagekit.io/droply-test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.main import app  # noqa: E402
from app.packages.droply.core import session as session_store  # noqa: E402
from app.packages.droply.core.dependencies import get_db  # noqa: E402
from app.packages.droply.db import session as db_session  # noqa: E402
from app.packages.droply.db.init_db import init_db  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_database() -> Generator[None, None, None]:
    """创建隔离的 SQLite 测试数据库，并在会话结束后清理。"""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db_session.engine = engine
    db_session.SessionLocal = TestingSessionLocal
    session_store.set_backend(session_store.InMemorySessionBackend())

    init_db()
    yield

    session_store.set_backend(None)
    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture()
def db_session_fixture() -> Generator[Session, None, None]:
    """提供给测试用例使用的数据库会话。"""
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session_fixture):
    """构建 FastAPI TestClient，并注入测试专用的数据库依赖。"""
    def override_get_db() -> Generator[Session, None, None]:
        session = db_session.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class Account:
    def __init__(self, user_id: str, email: str, token: str) -> None:
        self.user_id = user_id
        self.email = email
        self.token = token

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture()
def make_account(client: TestClient) -> Callable[[], Account]:
    """注册并登录一个新账号，返回其用户 ID 与认证头。"""

    def _make() -> Account:
        email = f"user-{uuid.uuid4().hex[:12]}@example.com"
        password = "correct-horse"
        signup = client.post(
            "/api/auth/sign-up",
            json={"email": email, "password": password, "passwordConfirmation": password},
        )
        assert signup.status_code == 200, signup.text
        signin = client.post("/api/auth/sign-in", json={"email": email, "password": password})
        assert signin.status_code == 200, signin.text
        data = signin.json()["data"]
        return Account(data["userId"], email, data["access_token"])

    return _make
