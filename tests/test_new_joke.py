"""The /jokes/new loader, action, view and preview."""

import re

from conftest import JSON, VALID_CONTENT, post_joke, register

from jokester.schemas.joke import CONTENT_TOO_SHORT, FORM_NOT_SUBMITTED, NAME_TOO_SHORT


# ── Loader ──

def test_form_requires_a_session(client):
    response = client.get("/jokes/new")
    assert response.status_code == 401
    assert "You must be logged in to create a joke." in response.text
    assert 'href="/login"' in response.text


def test_form_401_as_json(client):
    response = client.get("/jokes/new", headers=JSON)
    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}


def test_forged_cookie_is_anonymous(client):
    client.cookies.set("access_token", "not-a-jwt")
    response = client.get("/jokes/new")
    assert response.status_code == 401


def test_form_renders_for_signed_in_user(signed_in):
    response = signed_in.get("/jokes/new")
    assert response.status_code == 200
    assert "Add your own hilarious joke" in response.text
    assert 'name="name"' in response.text
    assert 'name="content"' in response.text
    assert "aria-invalid" not in response.text


# ── Action ──

def test_valid_joke_is_created_and_redirects(signed_in):
    response = signed_in.post(
        "/jokes/new",
        data={"name": "Chuck", "content": VALID_CONTENT},
        follow_redirects=False,
    )
    assert response.status_code == 303
    location = response.headers["location"]
    assert re.fullmatch(r"/jokes/[0-9a-f-]{36}", location)

    joke = signed_in.get(location, headers=JSON).json()
    assert joke["id"] == location.rsplit("/", 1)[-1]
    assert joke["name"] == "Chuck"
    assert joke["content"] == VALID_CONTENT


def test_created_joke_is_owned_by_the_submitter(client):
    register(client)
    joke_id = post_joke(client)
    assert "Delete" in client.get(f"/jokes/{joke_id}").text

    client.cookies.clear()
    register(client)
    assert "Delete" not in client.get(f"/jokes/{joke_id}").text


def test_short_name_reports_only_the_name(signed_in):
    response = signed_in.post(
        "/jokes/new", data={"name": "A", "content": VALID_CONTENT}, headers=JSON
    )
    assert response.status_code == 400
    body = response.json()
    assert body["fieldErrors"] == {"name": NAME_TOO_SHORT}
    assert body["fields"] == {"name": "A", "content": VALID_CONTENT}
    assert "formError" not in body


def test_both_fields_too_short(signed_in):
    response = signed_in.post(
        "/jokes/new", data={"name": "A", "content": "short"}, headers=JSON
    )
    assert response.status_code == 400
    assert response.json()["fieldErrors"] == {
        "name": NAME_TOO_SHORT,
        "content": CONTENT_TOO_SHORT,
    }


def test_rejected_form_is_redisplayed_with_errors(signed_in):
    response = signed_in.post("/jokes/new", data={"name": "A", "content": VALID_CONTENT})
    assert response.status_code == 400
    html = response.text
    assert 'id="name-error"' in html
    assert 'aria-describedby="name-error"' in html
    assert 'value="A"' in html
    assert "Why did the chicken cross the road?" in html
    assert 'id="content-error"' not in html


def test_missing_content_is_a_form_error(signed_in):
    response = signed_in.post("/jokes/new", data={"name": "Chuck"}, headers=JSON)
    assert response.status_code == 400
    assert response.json() == {"formError": FORM_NOT_SUBMITTED}


def test_uploaded_file_is_not_text(signed_in):
    response = signed_in.post(
        "/jokes/new",
        data={"name": "Chuck"},
        files={"content": ("joke.txt", VALID_CONTENT.encode(), "text/plain")},
        headers=JSON,
    )
    assert response.status_code == 400
    assert response.json() == {"formError": FORM_NOT_SUBMITTED}


def test_missing_fields_render_form_error(signed_in):
    response = signed_in.post("/jokes/new", data={})
    assert response.status_code == 400
    assert FORM_NOT_SUBMITTED in response.text
    assert "aria-invalid" not in response.text


def test_anonymous_submit_goes_to_login(client):
    response = client.post(
        "/jokes/new", data={"name": "Chuck", "content": VALID_CONTENT}, follow_redirects=False
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/login?redirectTo=%2Fjokes%2Fnew"


# ── Preview ──

def test_preview_of_valid_values_shows_the_joke(signed_in):
    response = signed_in.post(
        "/jokes/new/preview", data={"name": "Chuck", "content": VALID_CONTENT}
    )
    assert response.status_code == 200
    assert 'class="joke-display"' in response.text
    assert "Chuck Permalink" in response.text
    assert "disabled" in response.text
    assert "Add your own hilarious joke" not in response.text


def test_preview_of_invalid_values_keeps_the_form(signed_in):
    response = signed_in.post("/jokes/new/preview", data={"name": "A", "content": VALID_CONTENT})
    assert response.status_code == 200
    assert "Add your own hilarious joke" in response.text
    assert 'class="joke-display"' not in response.text


def test_preview_requires_a_session(client):
    response = client.post("/jokes/new/preview", data={"name": "Chuck", "content": VALID_CONTENT})
    assert response.status_code == 401
    assert "You must be logged in to create a joke." in response.text
