from fastapi.testclient import TestClient

from backend.main import app


def test_entry_path_is_public() -> None:
    response = TestClient(app).get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'School Portal API Running'}


def test_role_pages_redirect_without_session() -> None:
    response = TestClient(app).get('/teacher/classes', follow_redirects=False)

    assert response.status_code == 307
    assert response.headers['location'] == '/'


def test_auth_routes_are_mounted_under_api() -> None:
    paths = set(app.openapi()['paths'])

    assert {'/api/auth', '/api/auth/login', '/api/auth/logout'} <= paths
