from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable
from urllib.parse import quote

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from studio_booking.application.exceptions import CalendarEventNotFound, CalendarUpstreamError
from studio_booking.application.ports.calendar import CalendarEvent, CalendarPort

CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class ServiceAccountToken:
    """Bearer token source backed by a service account, refreshed on expiry."""

    def __init__(self, credentials: service_account.Credentials) -> None:
        self._credentials = credentials

    @classmethod
    def from_key(cls, client_email: str, private_key: str) -> ServiceAccountToken:
        info = {
            "type": "service_account",
            "client_email": client_email,
            # keys pasted into env vars usually carry literal \n sequences
            "private_key": private_key.replace("\\n", "\n"),
            "token_uri": GOOGLE_TOKEN_URI,
        }
        credentials = service_account.Credentials.from_service_account_info(info, scopes=CALENDAR_SCOPES)
        return cls(credentials)

    def __call__(self) -> str:
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token


class GoogleCalendar(CalendarPort):
    def __init__(
        self,
        calendar_id: str,
        token_provider: Callable[[], str],
        base_url: str = "https://www.googleapis.com/calendar/v3",
        client: httpx.Client | None = None,
    ) -> None:
        if not calendar_id:
            raise ValueError("GOOGLE_CALENDAR_ID is required for Google Calendar")
        self._calendar_id = calendar_id
        self._token_provider = token_provider
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    @property
    def _events_url(self) -> str:
        return f"{self._base_url}/calendars/{quote(self._calendar_id, safe='')}/events"

    def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            headers = {"Authorization": f"Bearer {self._token_provider()}"}
            response = self._client.request(method, url, params=params, json=json, headers=headers)
        except Exception as e:
            self._logger.error("Calendar request failed", extra={"error": str(e), "reason": f"{method} {url}"})
            raise CalendarUpstreamError("Calendar request failed", detail=str(e)) from e

        if response.status_code >= 400:
            self._logger.error(
                "Calendar responded with an error",
                extra={"status": response.status_code, "error": response.text, "reason": f"{method} {url}"},
            )
            error_cls = CalendarEventNotFound if response.status_code in (404, 410) else CalendarUpstreamError
            raise error_cls("Calendar responded with an error", status=response.status_code, detail=response.text)

        if not response.content:
            return {}
        return response.json()

    def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str | None = None,
        max_results: int | None = None,
    ) -> list[CalendarEvent]:
        params: dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": max_results or 2500,
        }
        if time_zone:
            params["timeZone"] = time_zone

        items: list[CalendarEvent] = []
        while True:
            data = self._request("GET", self._events_url, params=params)
            items.extend(data.get("items") or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                return items
            params["pageToken"] = page_token

    def get_event(self, event_id: str) -> CalendarEvent:
        return self._request("GET", f"{self._events_url}/{quote(event_id, safe='')}")

    def insert_event(self, fields: CalendarEvent) -> CalendarEvent:
        event = self._request("POST", self._events_url, params={"sendUpdates": "none"}, json=fields)
        if not event.get("id"):
            raise CalendarUpstreamError("No event id returned from Google Calendar")
        self._logger.info("Calendar event created", extra={"event_id": event["id"]})
        return event

    def patch_event(self, event_id: str, fields: CalendarEvent) -> CalendarEvent:
        return self._request(
            "PATCH",
            f"{self._events_url}/{quote(event_id, safe='')}",
            params={"sendUpdates": "none"},
            json=fields,
        )

    def delete_event(self, event_id: str) -> None:
        # service accounts cannot e-mail attendees, so updates are never sent
        self._request("DELETE", f"{self._events_url}/{quote(event_id, safe='')}", params={"sendUpdates": "none"})
        self._logger.info("Calendar event deleted", extra={"event_id": event_id})

    def query_freebusy(self, time_min: datetime, time_max: datetime) -> list[dict[str, str]]:
        body = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": str(time_min.tzinfo) if time_min.tzinfo else "UTC",
            "items": [{"id": self._calendar_id}],
        }
        data = self._request("POST", f"{self._base_url}/freeBusy", json=body)
        calendar = (data.get("calendars") or {}).get(self._calendar_id) or {}
        if calendar.get("errors"):
            self._logger.error("Free/busy query reported errors", extra={"error": str(calendar["errors"])})
            raise CalendarUpstreamError("Free/busy query failed", detail=str(calendar["errors"]))
        return list(calendar.get("busy") or [])
