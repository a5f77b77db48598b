import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from smartsync.deps import get_optional_user_id
from smartsync.errors import AppError, AuthError
from smartsync.schemas.calendar import EventCreate
from smartsync.services import google_calendar
from smartsync.utils.auth import create_oauth_state, read_oauth_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar"])

GRANTS_KEY = "google_tokens"
# slot for sessions that connect a calendar before logging in
ANONYMOUS = "_anonymous"

CALLBACK_PAGE = """
<html>
  <body>
    <script>
      if (window.opener) {
        window.opener.postMessage({ type: 'OAUTH_AUTH_SUCCESS' }, '*');
        window.close();
      } else {
        window.location.href = '/';
      }
    </script>
    <p>Authentication successful. This window should close automatically.</p>
  </body>
</html>
"""


def _grant_owner(request: Request) -> str:
    return get_optional_user_id(request) or ANONYMOUS


def load_grant(request: Request, owner: str) -> Optional[dict]:
    return (request.session.get(GRANTS_KEY) or {}).get(owner)


def store_grant(request: Request, owner: str, info: dict) -> None:
    grants = dict(request.session.get(GRANTS_KEY) or {})
    grants[owner] = info
    request.session[GRANTS_KEY] = grants


def _open_calendar(request: Request):
    owner = _grant_owner(request)
    info = load_grant(request, owner)
    if not info:
        raise AuthError("Unauthorized")
    calendar = google_calendar.GoogleCalendar(google_calendar.credentials_from_info(info))
    return owner, info, calendar


def _keep_refreshed(request: Request, owner: str, info: dict, calendar) -> None:
    refreshed = google_calendar.credentials_to_info(calendar.credentials)
    if refreshed["token"] != info.get("token"):
        store_grant(request, owner, refreshed)


@router.get("/auth/google/url")
def google_auth_url(request: Request):
    user_id = get_optional_user_id(request)
    state = create_oauth_state(user_id) if user_id else None
    return {"url": google_calendar.authorization_url(state)}


@router.get("/auth/callback")
def google_auth_callback(request: Request, code: Optional[str] = None, state: Optional[str] = None, error: Optional[str] = None):
    if error or not code:
        logger.warning("Google authorization did not return a code: %s", error or "missing code")
        return PlainTextResponse("Authentication failed", status_code=400)
    try:
        info = google_calendar.exchange_code(code)
    except AppError:
        logger.exception("Error exchanging code for tokens")
        return PlainTextResponse("Authentication failed", status_code=500)

    # the popup redirect carries no bearer header, so the state names the user
    owner = read_oauth_state(state) or _grant_owner(request)
    store_grant(request, owner, info)
    logger.info("Stored Google calendar grant for %s", owner)
    return HTMLResponse(CALLBACK_PAGE)


@router.get("/calendar/events")
def list_events(request: Request):
    owner, info, calendar = _open_calendar(request)
    events = calendar.list_upcoming()
    _keep_refreshed(request, owner, info, calendar)
    return events


@router.post("/calendar/events")
def create_event(body: EventCreate, request: Request):
    owner, info, calendar = _open_calendar(request)
    event = calendar.create_event(body.summary, body.description, body.start, body.end)
    _keep_refreshed(request, owner, info, calendar)
    return event
