"""
Kharcha - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_kharcha.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['FRONTEND_URL'] = 'http://test'

from kharcha.main import create_app
from kharcha.core.config import settings
from kharcha.core.database import Base, get_db
from kharcha.core.security import create_access_token
from kharcha.models import Account, AccountType, Transaction, User
from kharcha.services.email_service import EmailService
from kharcha.services.outflow_type_service import outflow_type_service

fake = Faker()

# Test database setup (NullPool: every test runs on its own event loop)
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_kharcha.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def email_service() -> AsyncMock:
    """Email service that records sends instead of calling Resend"""
    return AsyncMock(spec=EmailService)


@pytest.fixture
def app(email_service: AsyncMock):
    """App with the session provider started, as after startup"""
    application = create_app(email_service=email_service)
    application.state.session_provider.start()
    return application


@pytest.fixture
async def client(app, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db_session: AsyncSession, is_admin: bool = False) -> User:
    user = User(email=fake.unique.email(), name=fake.name(), is_active=True, is_admin=is_admin)
    db_session.add(user)
    await db_session.flush()
    await outflow_type_service.seed_defaults(db_session, user.id)
    await db_session.commit()
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user with the built-in outflow types"""
    return await make_user(db_session)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, is_admin=True)


def token_for(user: User) -> str:
    return create_access_token({'sub': str(user.id), 'email': user.email})


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return {'Authorization': f'Bearer {token_for(test_user)}'}


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return {'Authorization': f'Bearer {token_for(other_user)}'}


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return {'Authorization': f'Bearer {token_for(admin_user)}'}


@pytest.fixture
def signed_in_client(client: AsyncClient, test_user: User) -> AsyncClient:
    """Client carrying the session cookie of the test user"""
    client.cookies.set(settings.SESSION_COOKIE_NAME, token_for(test_user))
    return client


@pytest.fixture
async def test_account(db_session: AsyncSession, test_user: User) -> Account:
    account = Account(user_id=test_user.id, name='HDFC Savings', type=AccountType.BANK)
    db_session.add(account)
    await db_session.commit()
    return account



@pytest.fixture
def add_transaction(db_session: AsyncSession, test_user: User, test_account: Account):
    """Factory adding a transaction of a named outflow type; extra kwargs become metadata"""
    async def _add(type_name, amount, when, note='', user=None, account=None, **meta) -> Transaction:
        user = user or test_user
        account = account or test_account
        outflow_type = await outflow_type_service.get_by_name(db_session, user.id, type_name)
        transaction = Transaction(
            user_id=user.id,
            account=account,
            outflow_type=outflow_type,
            amount=amount,
            date=when,
            note=note,
            meta=meta,
        )
        db_session.add(transaction)
        await db_session.flush()
        return transaction

    return _add
