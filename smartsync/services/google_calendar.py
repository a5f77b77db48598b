from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
import httplib2

from smartsync import config
from smartsync.errors import AuthError, UpstreamError

logger = logging.getLogger(__name__)

SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
]

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
UPCOMING_PAGE_SIZE = 20


# ---------- OAuth ----------
def _flow(state: Optional[str] = None) -> Flow:
    client_config = {
        "web": {
            "client_id": config.GOOGLE_CLIENT_ID,
            "client_secret": config.GOOGLE_CLIENT_SECRET,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": [config.GOOGLE_REDIRECT_URI],
        }
    }
    # the callback builds a fresh Flow, so there is no code verifier to carry over
    return Flow.from_client_config(
        client_config,
        scopes=SCOPES,
        redirect_uri=config.GOOGLE_REDIRECT_URI,
        state=state,
        autogenerate_code_verifier=False,
    )


def authorization_url(state: Optional[str] = None) -> str:
    url, _ = _flow(state).authorization_url(
        access_type="offline",
        prompt="consent",
        state=state,
    )
    return url


def exchange_code(code: str) -> Dict[str, Any]:
    """Trade an authorization code for credentials, returned in session form."""
    flow = _flow()
    try:
        flow.fetch_token(code=code)
    except Exception as exc:
        # oauthlib raises a family of unrelated exception types here
        raise UpstreamError(f"Failed to exchange authorization code: {exc}") from exc
    return credentials_to_info(flow.credentials)


def credentials_to_info(creds: Credentials) -> Dict[str, Any]:
    """Serializable subset of the credentials; the client secret stays in config."""
    return {
        "token": creds.token,
        "refresh_token": creds.refresh_token,
        "expiry": creds.expiry.isoformat() if creds.expiry else None,
        "scopes": list(creds.scopes or SCOPES),
    }


def credentials_from_info(info: Dict[str, Any]) -> Credentials:
    expiry = info.get("expiry")
    return Credentials(
        token=info.get("token"),
        refresh_token=info.get("refresh_token"),
        token_uri=TOKEN_URI,
        client_id=config.GOOGLE_CLIENT_ID,
        client_secret=config.GOOGLE_CLIENT_SECRET,
        scopes=info.get("scopes") or SCOPES,
        # google-auth keeps expiry as naive UTC
        expiry=datetime.fromisoformat(expiry) if expiry else None,
    )


# ---------- time in RFC3339 ----------
def _to_utc_rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ---------- calendar ----------
class GoogleCalendar:
    """Primary-calendar access on behalf of one delegated credential."""

    def __init__(self, credentials: Credentials, calendar_id: str = "primary"):
        self.credentials = credentials
        self.calendar_id = calendar_id
        self.service = build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def list_upcoming(self, max_results: int = UPCOMING_PAGE_SIZE) -> List[Dict[str, Any]]:
        request = self.service.events().list(
            calendarId=self.calendar_id,
            timeMin=_to_utc_rfc3339(datetime.now(timezone.utc)),
            maxResults=max_results,
            singleEvents=True,
            orderBy="startTime",
        )
        return self._execute(request, "fetch events").get("items", [])

    def create_event(self, summary: str, description: Optional[str], start: datetime, end: datetime) -> Dict[str, Any]:
        body = {
            "summary": summary,
            "description": description or "",
            "start": {"dateTime": _to_utc_rfc3339(start), "timeZone": "UTC"},
            "end": {"dateTime": _to_utc_rfc3339(end), "timeZone": "UTC"},
            "conferenceData": {
                "createRequest": {
                    "requestId": secrets.token_hex(8),
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                },
            },
        }
        request = self.service.events().insert(
            calendarId=self.calendar_id,
            conferenceDataVersion=1,
            body=body,
        )
        return self._execute(request, "create event")

    def _execute(self, request, action: str) -> Dict[str, Any]:
        try:
            return request.execute()
        except RefreshError as exc:
            logger.warning("Google credential refresh failed during %s: %s", action, exc)
            raise AuthError("Google authorization expired") from exc
        except (HttpError, TransportError, httplib2.HttpLib2Error, OSError) as exc:
            logger.exception("Error trying to %s in Google Calendar", action)
            raise UpstreamError(f"Failed to {action}") from exc
