from typing import AsyncGenerator, Awaitable, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.pool import StaticPool

from interior_manager.core.database import create_all
from interior_manager.core.database.entities.projects import Project, ProjectMember
from interior_manager.core.database.entities.users import User
from interior_manager.server.services import auth as auth_service
from interior_manager.server.services.push import OneSignalClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingPushClient(OneSignalClient):
    """Push client that records every send instead of calling OneSignal."""

    def __init__(self) -> None:
        super().__init__("test-app", "test-key", api_url="http://mock/onesignal")
        self.sent: List[dict] = []

    async def send(self, **kwargs) -> bool:
        self.sent.append(kwargs)
        return True

    def recipients(self) -> List[str]:
        return [user_id for call in self.sent for user_id in call.get("external_user_ids") or []]


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch):
    """Use a cheap PBKDF2 cost in tests."""
    monkeypatch.setattr(auth_service, "PBKDF2_ITERATIONS", 1_000)


@pytest_asyncio.fixture
async def test_engine():
    """Create an isolated in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest.fixture
def push_client() -> RecordingPushClient:
    return RecordingPushClient()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, push_client: RecordingPushClient) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app with the test database and push client."""
    from interior_manager.core.database import get_session
    from interior_manager.server.main import app
    from interior_manager.server.services.push import get_push_client

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_push_client] = lambda: push_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def make_user(session: AsyncSession) -> UserFactory:
    counter = {"n": 0}

    async def _make_user(
        role: str = "employee",
        *,
        password: str = "password123",
        username: Optional[str] = None,
        full_name: Optional[str] = None,
        is_active: bool = True,
        role_id: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        name = username or f"{role}{counter['n']}"
        password_hash, password_salt = auth_service.hash_password(password)
        user = User(
            email=f"{name}@example.com",
            username=name,
            full_name=full_name or name.title(),
            role=role,
            role_id=role_id,
            is_active=is_active,
            password_hash=password_hash,
            password_salt=password_salt,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login(session: AsyncSession) -> Callable[[User], Awaitable[Dict[str, str]]]:
    """Open a session for a user and return the Authorization header."""

    async def _login(user: User) -> Dict[str, str]:
        token, _ = await auth_service.AuthService(session).create_session(user)
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user("admin", username="admin", full_name="Site Admin")


@pytest_asyncio.fixture
async def employee(make_user) -> User:
    return await make_user("employee", username="ravi", full_name="Ravi Kumar")


@pytest_asyncio.fixture
async def admin_headers(admin, login) -> Dict[str, str]:
    return await login(admin)


@pytest_asyncio.fixture
async def employee_headers(employee, login) -> Dict[str, str]:
    return await login(employee)


@pytest_asyncio.fixture
async def project(session: AsyncSession, admin: User) -> Project:
    project = Project(title="Sharma Residence", customer_name="Anil Sharma", project_budget=850000, created_by=admin.id)
    session.add(project)
    await session.commit()
    await session.refresh(project)
    return project


@pytest.fixture
def add_member(session: AsyncSession) -> Callable[..., Awaitable[ProjectMember]]:
    async def _add_member(project: Project, user: User, permissions: Optional[List[str]] = None) -> ProjectMember:
        member = ProjectMember(project_id=project.id, user_id=user.id, permissions=permissions or [])
        session.add(member)
        await session.commit()
        await session.refresh(member)
        return member

    return _add_member
