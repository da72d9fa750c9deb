import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('JWT_SECRET_KEY', 'educollab-test-secret-key-0123456789abcdef')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from educollab.auth import jwt_handler  # noqa: E402
from educollab.database import Database  # noqa: E402
from educollab.main import create_app  # noqa: E402
from educollab.models.account import Account, Role  # noqa: E402
from educollab.models.study_session import SessionStatus, StudySession  # noqa: E402


@pytest.fixture
def database():
    database = Database('sqlite:///:memory:')
    database.connect()
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_account(database):
    def _make_account(email: str, role: Role = Role.STUDENT, name: str | None = None) -> int:
        with database.session() as session:
            account = Account(email=email, role=role.value, name=name)
            session.add(account)
            session.commit()
            return account.id

    return _make_account


@pytest.fixture
def make_study_session(database):
    def _make_study_session(
        tutor_email: str = 'tutor@example.com',
        status: SessionStatus | None = SessionStatus.PENDING,
        **fields,
    ) -> int:
        with database.session() as session:
            study_session = StudySession(
                tutor_email=tutor_email,
                title=fields.pop('title', 'Intro to Algebra'),
                fee=fields.pop('fee', 5),
                max_participants=fields.pop('max_participants', 20),
                **fields,
            )
            session.add(study_session)
            session.flush()
            # NULL status models rows written before status was always set
            study_session.status = status.value if status else None
            session.commit()
            return study_session.id

    return _make_study_session


@pytest.fixture
def fetch_study_session(database):
    def _fetch(study_session_id: int) -> StudySession | None:
        with database.session() as session:
            study_session = session.get(StudySession, study_session_id)
            if study_session is not None:
                session.expunge(study_session)
            return study_session

    return _fetch


@pytest.fixture
def auth_headers():
    def _auth_headers(email: str, **claims) -> dict:
        token = jwt_handler.create_access_token({'email': email, **claims})
        return {'Authorization': f'Bearer {token}'}

    return _auth_headers
