import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from educollab.auth import dependencies, jwt_handler
from educollab.core.errors import AuthenticationError, AuthenticationFailure, AuthorizationError, ServiceError
from educollab.models.account import Role


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_authenticate_rejects_missing_credentials() -> None:
    with pytest.raises(AuthenticationError) as exception_info:
        dependencies.authenticate(None)

    assert exception_info.value.reason == AuthenticationFailure.MISSING


def test_authenticate_returns_claims_for_valid_token() -> None:
    token = jwt_handler.create_access_token({'email': 'tutor@example.com', 'name': 'Tia'})

    claims = dependencies.authenticate(_credentials(token))

    assert claims['email'] == 'tutor@example.com'
    assert claims['name'] == 'Tia'


def test_authorize_role_returns_account_with_matching_role(db, make_account) -> None:
    make_account('admin@example.com', Role.ADMIN)

    account = dependencies.authorize_role(db, ' Admin@Example.com ', Role.ADMIN)

    assert account.email == 'admin@example.com'


def test_authorize_role_rejects_other_roles(db, make_account) -> None:
    make_account('student@example.com', Role.STUDENT)

    with pytest.raises(AuthorizationError):
        dependencies.authorize_role(db, 'student@example.com', Role.ADMIN)


def test_authorize_role_rejects_unknown_account(db) -> None:
    with pytest.raises(AuthorizationError):
        dependencies.authorize_role(db, 'ghost@example.com', Role.STUDENT)


def test_ensure_self_accepts_same_identity_case_insensitively() -> None:
    dependencies.ensure_self({'email': 'ada@example.com'}, 'ADA@example.com')


def test_ensure_self_rejects_other_identity() -> None:
    with pytest.raises(AuthorizationError):
        dependencies.ensure_self({'email': 'ada@example.com'}, 'bob@example.com')


@pytest.fixture
def guarded_client(database):
    app = FastAPI()
    app.state.database = database

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.get('/admin-only', dependencies=[Depends(dependencies.require_admin)])
    def admin_only():
        return {'ok': True}

    @app.get('/whoami')
    def whoami(request: Request, claims: dict = Depends(dependencies.require_authenticated)):
        return {'email': request.state.claims['email'], 'same': request.state.claims is claims}

    @app.get('/profile/{email}', dependencies=[Depends(dependencies.require_self)])
    def profile(email: str):
        return {'email': email}

    return TestClient(app)


def test_role_guard_does_not_run_when_authentication_fails(guarded_client, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(dependencies, 'authorize_role', lambda *args: calls.append(args))

    response = guarded_client.get('/admin-only')

    assert response.status_code == 401
    assert response.json() == {'message': 'Unauthorized access'}
    assert calls == []


def test_role_guard_rejects_authenticated_non_admin(guarded_client, make_account, auth_headers) -> None:
    make_account('student@example.com', Role.STUDENT)

    response = guarded_client.get('/admin-only', headers=auth_headers('student@example.com'))

    assert response.status_code == 403


def test_role_guard_reads_live_role_not_token_claims(guarded_client, make_account, auth_headers) -> None:
    make_account('student@example.com', Role.STUDENT)

    response = guarded_client.get('/admin-only', headers=auth_headers('student@example.com', role='admin'))

    assert response.status_code == 403


def test_role_guard_admits_admin(guarded_client, make_account, auth_headers) -> None:
    make_account('admin@example.com', Role.ADMIN)

    response = guarded_client.get('/admin-only', headers=auth_headers('admin@example.com'))

    assert response.status_code == 200
    assert response.json() == {'ok': True}


def test_authenticated_claims_are_attached_to_request_state(guarded_client, auth_headers) -> None:
    response = guarded_client.get('/whoami', headers=auth_headers('ada@example.com'))

    assert response.json() == {'email': 'ada@example.com', 'same': True}


def test_non_bearer_authorization_header_counts_as_missing(guarded_client) -> None:
    response = guarded_client.get('/whoami', headers={'Authorization': 'Basic YWRhOnNlY3JldA=='})

    assert response.status_code == 401


def test_self_guard_rejects_lookup_of_another_identity(guarded_client, auth_headers) -> None:
    response = guarded_client.get('/profile/bob@example.com', headers=auth_headers('ada@example.com'))

    assert response.status_code == 403


def test_self_guard_admits_own_identity(guarded_client, auth_headers) -> None:
    response = guarded_client.get('/profile/ada@example.com', headers=auth_headers('ada@example.com'))

    assert response.status_code == 200
