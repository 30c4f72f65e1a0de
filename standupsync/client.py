"""HTTP client for the StandupSync API.

Tokens live in an explicit :class:`ClientSession` passed to the client
rather than in module state, so several sessions can coexist in one process.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union
from uuid import UUID

import httpx

from standupsync.days import to_utc_day, week_bounds

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/api/auth/"
REFRESH_PATH = "/api/auth/refresh"
DayLike = Union[date, str]


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class SessionExpiredError(ApiError):
    """The refresh token was rejected; the user must log in again."""


@dataclass
class ClientSession:
    """Access and refresh tokens for one signed-in user."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.access_token is not None

    def update(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        self.access_token = access_token
        if refresh_token is not None:
            self.refresh_token = refresh_token

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


def _day(value: DayLike) -> str:
    return value.isoformat() if isinstance(value, date) else value


def _error_from(response: httpx.Response) -> ApiError:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    message = payload.get("message") or payload.get("detail") or response.reason_phrase
    return ApiError(response.status_code, str(message), payload)


class StandupSyncClient:
    """Async client that refreshes an expired access token once per request.

    A 401 from any endpoint outside /api/auth/ triggers a single refresh;
    auth endpoints report their 401 directly. The original request is retried with the new access token. A
    failed refresh clears the session and raises SessionExpiredError.

    Args:
        base_url: API root, e.g. "http://localhost:3000".
        session: Token holder, updated in place on login and refresh.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[ClientSession] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self.session = session or ClientSession()
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "StandupSyncClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if self.session.access_token:
            return {"Authorization": f"Bearer {self.session.access_token}"}
        return {}

    async def _refresh(self) -> None:
        if not self.session.refresh_token:
            self.session.clear()
            raise SessionExpiredError(401, "No refresh token available")

        response = await self._http.post(
            REFRESH_PATH, json={"refreshToken": self.session.refresh_token}
        )
        if response.status_code >= 400:
            logger.warning(f"client_refresh_failed: status={response.status_code}")
            self.session.clear()
            error = _error_from(response)
            raise SessionExpiredError(error.status_code, error.message, error.payload)

        tokens = response.json()
        self.session.update(tokens["accessToken"], tokens.get("refreshToken"))
        logger.debug("client_refresh_success")

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request, refreshing and retrying once on 401.

        Returns:
            The decoded JSON body.

        Raises:
            ApiError: For any non-2xx final response.
            SessionExpiredError: If the refresh itself fails.
        """
        response = await self._http.request(method, path, headers=self._headers(), **kwargs)

        if (
            response.status_code == 401
            and not path.startswith(AUTH_PREFIX)
            and self.session.refresh_token
        ):
            await self._refresh()
            response = await self._http.request(method, path, headers=self._headers(), **kwargs)

        if response.status_code >= 400:
            raise _error_from(response)
        return response.json()

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def register(self, email: str, password: str, name: Optional[str] = None) -> dict:
        data = await self.request(
            "POST", "/api/auth/register", json={"email": email, "password": password, "name": name}
        )
        self.session.update(data["accessToken"], data["refreshToken"])
        return data["user"]

    async def login(self, email: str, password: str) -> dict:
        data = await self.request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.session.update(data["accessToken"], data["refreshToken"])
        return data["user"]

    async def logout(self) -> None:
        try:
            await self.request("POST", "/api/auth/logout")
        finally:
            self.session.clear()

    async def me(self) -> dict:
        return (await self.request("GET", "/api/auth/me"))["user"]

    # ------------------------------------------------------------------
    # Standups
    # ------------------------------------------------------------------

    async def list_standups(
        self, day: Optional[DayLike] = None, user_id: Optional[UUID] = None
    ) -> list[dict]:
        params: dict[str, str] = {}
        if day is not None:
            params["date"] = _day(day)
        if user_id is not None:
            params["userId"] = str(user_id)
        return (await self.request("GET", "/api/standups", params=params))["standups"]

    async def list_standups_in_range(
        self, start: DayLike, end: DayLike, user_id: Optional[UUID] = None
    ) -> list[dict]:
        params = {"startDate": _day(start), "endDate": _day(end)}
        if user_id is not None:
            params["userId"] = str(user_id)
        return (await self.request("GET", "/api/standups/range", params=params))["standups"]

    async def list_standups_for_week(
        self, day: DayLike, user_id: Optional[UUID] = None
    ) -> list[dict]:
        """Standups for the Monday-to-Sunday week containing ``day``."""
        monday, sunday = week_bounds(to_utc_day(day))
        return await self.list_standups_in_range(monday, sunday, user_id=user_id)

    async def list_team_standups(self, day: DayLike) -> list[dict]:
        return (await self.request("GET", f"/api/standups/team/{_day(day)}"))["standups"]

    async def create_standup(
        self,
        day: DayLike,
        yesterday_work: Optional[list[str]] = None,
        today_plan: Optional[list[str]] = None,
        blockers: Optional[list[str]] = None,
    ) -> dict:
        body = {
            "date": _day(day),
            "yesterdayWork": yesterday_work or [],
            "todayPlan": today_plan or [],
            "blockers": blockers or [],
        }
        return (await self.request("POST", "/api/standups", json=body))["standup"]

    async def update_standup(self, standup_id: UUID, **changes: list[str]) -> dict:
        """Update lists by snake_case name, e.g. ``today_plan=[...]``."""
        keys = {"yesterday_work": "yesterdayWork", "today_plan": "todayPlan", "blockers": "blockers"}
        body = {keys[name]: value for name, value in changes.items()}
        return (await self.request("PUT", f"/api/standups/{standup_id}", json=body))["standup"]

    async def delete_standup(self, standup_id: UUID) -> None:
        await self.request("DELETE", f"/api/standups/{standup_id}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_team_members(self) -> list[dict]:
        return (await self.request("GET", "/api/users/team"))["users"]

    async def invite_user(self, email: str, name: Optional[str] = None, role: str = "user") -> dict:
        data = await self.request(
            "POST", "/api/users/invite", json={"email": email, "name": name, "role": role}
        )
        return data["user"]

    async def update_user_role(self, user_id: UUID, role: str) -> dict:
        return (await self.request("PUT", f"/api/users/{user_id}/role", json={"role": role}))["user"]

    async def update_user_status(self, user_id: UUID, is_active: bool) -> dict:
        data = await self.request(
            "PUT", f"/api/users/{user_id}/status", json={"isActive": is_active}
        )
        return data["user"]

    async def delete_user(self, user_id: UUID) -> None:
        await self.request("DELETE", f"/api/users/{user_id}")
