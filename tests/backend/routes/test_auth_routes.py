import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.routes import auth_routes
from backend.services.gateway import AuthGateway, get_gateway

STUDENT = {
    'email': 'a@b.com',
    'password': 'pw123456',
    'displayName': 'A',
    'role': 'STUDENT',
    'firstName': 'A',
    'lastName': 'B',
}


@pytest.fixture
def client(gateway: AuthGateway) -> TestClient:
    app = FastAPI()
    app.include_router(auth_routes.router, prefix='/api/auth')
    app.dependency_overrides[get_gateway] = lambda: gateway
    return TestClient(app)


def _set_cookie_headers(response) -> list[str]:
    return response.headers.get_list('set-cookie')


def test_register_then_duplicate(client: TestClient) -> None:
    first = client.post('/api/auth', json=STUDENT)
    second = client.post('/api/auth', json=STUDENT)

    assert first.status_code == 200
    assert first.json()['user']['role'] == 'STUDENT'
    assert 'passwordHash' not in first.json()['user']
    assert second.status_code == 409
    assert second.json() == {'message': 'A user with this email already exists'}


def test_register_with_invalid_json_is_bad_request(client: TestClient) -> None:
    response = client.post('/api/auth', content=b'{not json', headers={'Content-Type': 'application/json'})

    assert response.status_code == 400


def test_login_and_session_check_with_bearer_header(client: TestClient) -> None:
    client.post('/api/auth', json=STUDENT)
    login = client.post('/api/auth/login', json={'email': 'a@b.com', 'password': 'pw123456', 'role': 'STUDENT'})
    token = login.json()['token']

    response = client.get('/api/auth', headers={'Authorization': f'Bearer {token}'})

    assert login.status_code == 200
    assert response.status_code == 200
    assert response.json()['authenticated'] is True
    assert response.json()['user']['email'] == 'a@b.com'


def test_session_check_reads_token_cookie(client: TestClient) -> None:
    client.post('/api/auth', json=STUDENT)
    token = client.post(
        '/api/auth/login', json={'email': 'a@b.com', 'password': 'pw123456', 'role': 'STUDENT'}
    ).json()['token']
    client.cookies.set('token', token)

    assert client.get('/api/auth').status_code == 200


def test_session_check_without_token_is_unauthorized(client: TestClient) -> None:
    response = client.get('/api/auth')

    assert response.status_code == 401
    assert response.json()['reason'] == 'missing'


def test_login_failure_statuses(client: TestClient) -> None:
    client.post('/api/auth', json=STUDENT)

    missing = client.post('/api/auth/login', json={'email': 'a@b.com'})
    unknown = client.post('/api/auth/login', json={'email': 'x@b.com', 'password': 'pw123456', 'role': 'STUDENT'})

    assert missing.status_code == 400
    assert unknown.status_code == 401


def test_profile_update_is_partial(client: TestClient) -> None:
    client.post('/api/auth', json=STUDENT)
    token = client.post(
        '/api/auth/login', json={'email': 'a@b.com', 'password': 'pw123456', 'role': 'STUDENT'}
    ).json()['token']

    response = client.put(
        '/api/auth',
        json={'phone': '09121234567'},
        headers={'Authorization': f'Bearer {token}'},
    )

    profile = response.json()['user']['studentProfile']
    assert response.status_code == 200
    assert profile['phone'] == '09121234567'
    assert profile['firstName'] == 'A'


def test_profile_update_without_token_is_unauthorized(client: TestClient) -> None:
    assert client.put('/api/auth', json={'phone': '0912'}).status_code == 401


@pytest.mark.parametrize(('method', 'path'), [('DELETE', '/api/auth'), ('POST', '/api/auth/logout')])
def test_logout_clears_auth_cookies(client: TestClient, method: str, path: str) -> None:
    response = client.request(method, path)

    cookies = _set_cookie_headers(response)
    assert response.status_code == 200
    assert any(cookie.startswith('token=') and 'Max-Age=0' in cookie for cookie in cookies)
    assert any(cookie.startswith('userRole=') and 'Max-Age=0' in cookie for cookie in cookies)
    assert all('SameSite=strict' in cookie for cookie in cookies)
