"""
Scholarship Portal - Test Configuration and Fixtures
"""
import os
import tempfile
from datetime import date
from typing import AsyncGenerator, Dict, Iterable
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['STORAGE_MODE'] = 'local'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='scholarship-uploads-')
os.environ['PUBLIC_BASE_URL'] = 'http://test'
os.environ['LOG_FILE'] = ''
os.environ['SEED_ADMIN_USERNAME'] = ''
os.environ['SEED_ADMIN_PASSWORD'] = ''

from scholarship.main import app
from scholarship.core.database import Base, get_db
from scholarship.core.security import get_password_hash, create_user_token
from scholarship.models import Application, ApplicationStatus, ApplicationType, User, UserRole
from scholarship.services.storage_service import StorageService, get_storage_service

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)

PDF_BYTES = b'%PDF-1.4\n% test document\n'


class RecordingStorage(StorageService):
    """Local storage that records calls and can be told to fail for given filenames"""

    def __init__(self):
        super().__init__()
        self.uploaded = []
        self.deleted = []
        self.fail_filenames = set()

    async def upload(self, content, filename, content_type=None, folder="documents"):
        if filename in self.fail_filenames:
            raise OSError(f"simulated storage failure for {filename}")
        url = await super().upload(content, filename, content_type, folder)
        self.uploaded.append(url)
        return url

    async def delete(self, url):
        self.deleted.append(url)
        return await super().delete(url)


def registration_fields(**overrides) -> Dict[str, str]:
    """Valid text fields of the public registration form, camelCase like the frontend"""
    fields = {
        'firstName': fake.first_name(),
        'middleName': '',
        'lastName': fake.last_name(),
        'motherName': fake.first_name_female(),
        'dob': date(2004, 6, 15).isoformat(),
        'gender': 'Female',
        'mobileNumber': '9876543210',
        'email': 'Student.Test@Example.com',
        'address': fake.street_address(),
        'city': 'Pune',
        'state': 'Maharashtra',
        'pinCode': '411001',
        'caste': 'Maratha',
        'subCaste': '',
        'category': 'OBC',
        'religion': 'Hindu',
        'orphan': 'false',
        'physicallyDisabled': 'false',
        'academicField': 'Engineering',
        'academicYear': '2024',
        'courseName': 'B.Tech Computer Science',
        'collegeName': 'College of Engineering Pune',
        'lastAcademicYearPercentage': '82.5',
        'hobbies': 'Chess',
    }
    fields.update(overrides)
    return fields


def document_files(field_names: Iterable[str]) -> Dict[str, tuple]:
    """httpx multipart files for the given form field names"""
    return {
        name: (f'{name}.pdf', PDF_BYTES, 'application/pdf')
        for name in field_names
    }


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
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
async def client(db_session: AsyncSession, storage: RecordingStorage) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and storage overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def concurrent_client(db_session: AsyncSession, storage: RecordingStorage) -> AsyncGenerator[AsyncClient, None]:
    """Test client that opens a separate session per request, like production"""
    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    user = User(
        username=fake.unique.user_name(),
        hashed_password=get_password_hash('testpassword123'),
        role=UserRole.USER,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    user = User(
        username=fake.unique.user_name(),
        hashed_password=get_password_hash('adminpassword123'),
        role=UserRole.ADMIN,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return {'x-auth-token': create_user_token(test_user.id, test_user.role.value)}


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return {'x-auth-token': create_user_token(admin_user.id, admin_user.role.value)}


@pytest.fixture
async def pending_application(db_session: AsyncSession, test_user: User) -> Application:
    """A study-books application awaiting review"""
    application = Application(
        user_id=test_user.id,
        application_type=ApplicationType.STUDY_BOOKS,
        status=ApplicationStatus.PENDING,
        year_of_study='Second Year',
        field='Science',
        books_required='Physics Vol 1, Organic Chemistry',
    )
    db_session.add(application)
    await db_session.commit()
    await db_session.refresh(application)
    return application
