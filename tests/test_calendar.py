import socket
from urllib.parse import parse_qs, urlparse

import httplib2
import pytest

from fakes import connect_calendar
from smartsync.errors import UpstreamError
from smartsync.services import google_calendar
from smartsync.utils.auth import read_oauth_state


def test_google_auth_url(client, register):
    register(client)
    r = client.get("/auth/google/url")
    assert r.status_code == 200
    url = urlparse(r.json()["url"])
    query = parse_qs(url.query)
    assert url.netloc == "accounts.google.com"
    assert query["client_id"] == ["test-client-id"]
    assert query["redirect_uri"] == ["https://testserver/auth/callback"]
    assert query["access_type"] == ["offline"]
    assert query["prompt"] == ["consent"]
    scopes = query["scope"][0].split()
    assert "https://www.googleapis.com/auth/calendar.events" in scopes
    assert "https://www.googleapis.com/auth/calendar.readonly" in scopes
    assert "https://www.googleapis.com/auth/userinfo.profile" in scopes

    status = client.get("/auth/status").json()
    assert read_oauth_state(query["state"][0]) == status["user"]["id"]


def test_google_auth_url_without_login(client):
    r = client.get("/auth/google/url")
    assert r.status_code == 200
    state = parse_qs(urlparse(r.json()["url"]).query).get("state", [None])[0]
    assert read_oauth_state(state) is None


def test_callback_page_signals_opener(client, register, google):
    register(client)
    r = connect_calendar(client)
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "OAUTH_AUTH_SUCCESS" in r.text
    assert "window.close()" in r.text


def test_callback_failure(client, monkeypatch):
    def boom(code):
        raise UpstreamError("invalid_grant")

    monkeypatch.setattr(google_calendar, "exchange_code", boom)
    r = client.get("/auth/callback", params={"code": "bad"})
    assert r.status_code == 500
    assert r.text == "Authentication failed"
    assert client.get("/calendar/events").status_code == 401


def test_callback_without_code(client):
    r = client.get("/auth/callback", params={"error": "access_denied"})
    assert r.status_code == 400


def test_events_require_delegated_credential(client, register, google):
    register(client)
    r = client.get("/calendar/events")
    assert r.status_code == 401
    r = client.post("/calendar/events", json={
        "summary": "x", "startDateTime": "2026-10-20T09:00:00", "endDateTime": "2026-10-20T10:00:00",
    })
    assert r.status_code == 401
    assert google.list_calls == [] and google.insert_calls == []


def test_list_upcoming_events(client, register, google):
    register(client)
    google.items.append({"id": "e1", "summary": "Standup", "start": {"dateTime": "2026-10-20T09:00:00Z"}})
    connect_calendar(client)

    r = client.get("/calendar/events")
    assert r.status_code == 200
    assert [e["id"] for e in r.json()] == ["e1"]

    call = google.list_calls[-1]
    assert call["calendarId"] == "primary"
    assert call["maxResults"] == 20
    assert call["singleEvents"] is True
    assert call["orderBy"] == "startTime"
    assert call["timeMin"].endswith("Z")
    assert google.credentials[-1].token == "token-for-auth-code"


def test_create_event_requests_conference(client, register, google):
    register(client)
    connect_calendar(client)
    r = client.post("/calendar/events", json={
        "summary": "Dentist",
        "description": "Priority: high",
        "startDateTime": "2026-10-20T09:00:00",
        "endDateTime": "2026-10-20T10:00:00",
    })
    assert r.status_code == 200
    assert r.json()["id"] == "evt-1"

    call = google.insert_calls[-1]
    assert call["calendarId"] == "primary"
    assert call["conferenceDataVersion"] == 1
    body = call["body"]
    assert body["summary"] == "Dentist"
    assert body["description"] == "Priority: high"
    assert body["start"] == {"dateTime": "2026-10-20T09:00:00Z", "timeZone": "UTC"}
    assert body["end"] == {"dateTime": "2026-10-20T10:00:00Z", "timeZone": "UTC"}
    create = body["conferenceData"]["createRequest"]
    assert create["conferenceSolutionKey"] == {"type": "hangoutsMeet"}
    assert create["requestId"]


def test_create_event_converts_offsets_to_utc(client, register, google):
    register(client)
    connect_calendar(client)
    client.post("/calendar/events", json={
        "summary": "Call",
        "startDateTime": "2026-10-20T09:00:00-03:00",
        "endDateTime": "2026-10-20T10:00:00-03:00",
    })
    assert google.insert_calls[-1]["body"]["start"]["dateTime"] == "2026-10-20T12:00:00Z"


def test_create_event_rejects_inverted_range(client, register, google):
    register(client)
    connect_calendar(client)
    r = client.post("/calendar/events", json={
        "summary": "x", "startDateTime": "2026-10-20T10:00:00", "endDateTime": "2026-10-20T09:00:00",
    })
    assert r.status_code == 400


def test_upstream_failure_is_500(client, register, google):
    register(client)
    connect_calendar(client)
    google.fail_with_http_error()
    r = client.get("/calendar/events")
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to fetch events"


@pytest.mark.parametrize("error", [
    httplib2.ServerNotFoundError("Unable to find the server at www.googleapis.com"),
    socket.timeout("timed out"),
    ConnectionResetError("connection reset"),
])
def test_transport_failure_is_upstream_error(client, register, google, error):
    register(client)
    connect_calendar(client)
    google.error = error
    r = client.get("/calendar/events")
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to fetch events"

    r = client.post("/calendar/events", json={
        "summary": "x", "startDateTime": "2026-10-20T09:00:00", "endDateTime": "2026-10-20T10:00:00",
    })
    assert r.json()["detail"] == "Failed to create event"


def test_grants_are_keyed_per_user(client, register, google):
    register(client, name="Ana", email="ana@x.com")
    connect_calendar(client)
    assert client.get("/calendar/events").status_code == 200

    # same browser session, different user: ana's grant is not shared
    register(client, name="Bob", email="bob@x.com")
    assert client.get("/calendar/events").status_code == 401

    client.post("/auth/login", json={"email": "ana@x.com", "password": "secret"})
    assert client.get("/calendar/events").status_code == 200


def test_anonymous_grant(client, google):
    connect_calendar(client)
    assert client.get("/calendar/events").status_code == 200


def test_refreshed_token_written_back(client, register, google):
    register(client)
    connect_calendar(client)
    google.refresh_to = "refreshed-token"
    client.get("/calendar/events")

    google.refresh_to = None
    client.get("/calendar/events")
    assert google.credentials[-1].token == "refreshed-token"


class _FakeCredentials:
    token = "tok"
    refresh_token = "ref"
    expiry = None
    scopes = None


class _FakeFlow:
    def __init__(self, error=None):
        self.error = error
        self.credentials = _FakeCredentials()
        self.fetched = None

    def fetch_token(self, **kwargs):
        self.fetched = kwargs
        if self.error:
            raise self.error


def test_exchange_code(monkeypatch):
    flow = _FakeFlow()
    monkeypatch.setattr(google_calendar, "_flow", lambda state=None: flow)
    info = google_calendar.exchange_code("the-code")
    assert flow.fetched == {"code": "the-code"}
    assert info["token"] == "tok"
    assert info["refresh_token"] == "ref"
    assert info["scopes"] == google_calendar.SCOPES


def test_exchange_code_failure(monkeypatch):
    flow = _FakeFlow(error=ValueError("invalid_grant"))
    monkeypatch.setattr(google_calendar, "_flow", lambda state=None: flow)
    with pytest.raises(UpstreamError):
        google_calendar.exchange_code("bad")


def test_credentials_round_trip():
    info = {
        "token": "t",
        "refresh_token": "r",
        "expiry": "2026-10-20T09:00:00",
        "scopes": ["https://www.googleapis.com/auth/calendar.events"],
    }
    creds = google_calendar.credentials_from_info(info)
    assert creds.client_id == "test-client-id"
    assert google_calendar.credentials_to_info(creds) == info
