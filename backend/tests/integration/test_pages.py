"""
Integration tests for the HTML pages
"""
import pytest

from virtual_doctor.api.routes.pages import PROTECTED_PAGES, PUBLIC_PAGES


@pytest.fixture
def logged_in(client):
    client.post("/api/auth/signup", json={
        "role": "doctor",
        "name": "Dana Doctor",
        "email": "dana@example.com",
        "password": "stethoscope",
        "gender": "female",
        "phone": "555-0123",
        "dob": "1975-03-09",
        "specialty": "Cardiology",
    })
    response = client.post("/api/auth/login", json={"email": "dana@example.com", "password": "stethoscope"})
    assert response.status_code == 200
    return client


@pytest.mark.parametrize("path", ["/", "/index", "/login", "/signup", "/chat", *PUBLIC_PAGES])
def test_public_pages(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert "Virtual Doctor" in response.text


@pytest.mark.parametrize("path", list(PROTECTED_PAGES))
def test_protected_pages_redirect_to_login(client, path):
    response = client.get(path, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


@pytest.mark.parametrize("path", list(PROTECTED_PAGES))
def test_protected_pages_when_logged_in(logged_in, path):
    response = logged_in.get(path)

    assert response.status_code == 200
    assert PROTECTED_PAGES[path][1] in response.text


def test_dashboard_shows_user(logged_in):
    response = logged_in.get("/dashboard")

    assert "Dana Doctor" in response.text
    assert "Cardiology" in response.text


def test_logout_page_clears_login_and_chat(logged_in, store):
    logged_in.post("/chat", json={"message": "hi"})
    chat_id = logged_in.cookies.get("chat_session_id")
    assert store.get_state(chat_id) is not None

    response = logged_in.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert store.get_state(chat_id) is None
    assert logged_in.get("/dashboard", follow_redirects=False).status_code == 303


def test_static_assets(client):
    assert client.get("/css/style.css").status_code == 200
    assert client.get("/js/botscript.js").status_code == 200
    assert client.get("/images/logo.svg").status_code == 200
