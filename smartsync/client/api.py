from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from smartsync.errors import error_for_status

logger = logging.getLogger(__name__)


class SmartSyncClient:
    """
    HTTP client for the SmartSync API.

    Keeps the token returned by login/register and sends it as a bearer
    header; the ``httpx.Client`` cookie jar carries the session cookie as the
    fallback channel. Works with ``fastapi.testclient.TestClient`` too.
    """

    def __init__(self, http: httpx.Client, token: Optional[str] = None):
        self.http = http
        self.token = token

    # ----- transport -----
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, delegated: bool = False, **kwargs) -> Any:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        if response.status_code >= 400:
            message = self._error_message(response)
            # a 401 from the calendar means the Google grant is missing, not our token
            if response.status_code == 401 and not delegated:
                # cached token is useless now; caller should send the user to login
                if self.token:
                    logger.info("Discarding cached token after 401 on %s %s", method, path)
                self.token = None
            raise error_for_status(response.status_code, message)
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            detail = response.json().get("detail")
        except ValueError:
            return response.text
        return detail if isinstance(detail, str) else str(detail)

    # ----- auth -----
    def register(self, name: str, email: str, password: str) -> str:
        data = self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})
        self.token = data.get("token")
        return data["userId"]

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data.get("token")
        return data["userId"]

    def status(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/status")

    def logout(self) -> None:
        try:
            self._request("POST", "/auth/logout")
        finally:
            self.token = None

    # ----- tasks -----
    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks")

    def create_task(self, task: Dict[str, Any]) -> None:
        self._request("POST", "/tasks", json=task)

    def set_completed(self, task_id: str, completed: bool) -> None:
        self._request("PUT", f"/tasks/{task_id}", json={"completed": completed})

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    # ----- premium -----
    def pix_qr(self) -> Dict[str, str]:
        return self._request("GET", "/finance/pix-qr")

    def confirm_payment(self) -> None:
        self._request("POST", "/finance/confirm-payment")

    def update_branding(self, **fields: Optional[str]) -> None:
        self._request("PUT", "/user/branding", json=fields)

    # ----- calendar -----
    def google_auth_url(self) -> str:
        return self._request("GET", "/auth/google/url")["url"]

    def calendar_events(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/calendar/events", delegated=True)

    def create_calendar_event(self, summary: str, description: str, start: datetime, end: datetime) -> Dict[str, Any]:
        return self._request("POST", "/calendar/events", delegated=True, json={
            "summary": summary,
            "description": description,
            "startDateTime": start.isoformat(),
            "endDateTime": end.isoformat(),
        })
