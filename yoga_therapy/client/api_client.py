"""HTTP client for the Yoga Therapy API.

The bearer token lives on the client instance and is attached per request;
nothing global is patched. Failed responses are raised as the errors in
``yoga_therapy.errors``.
"""

import logging
from typing import Optional

import httpx

from ..errors import AuthenticationError, TransientError, error_for_status
from ..schemas.auth import AuthResponse, UserBrief
from ..schemas.catalog import PostureOut, TherapyTypeOut
from ..schemas.patient import PatientOut
from ..schemas.series import AssignmentOut, SeriesCreate, SeriesOut
from ..schemas.session import SessionCreate, SessionOut

logger = logging.getLogger("yoga_therapy")


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self) -> None:
        self._http.close()

    # ═══ Transport ═══

    def _request(self, method: str, path: str, *, json=None, params=None, auth: bool = True) -> httpx.Response:
        headers = {}
        if auth:
            if not self.token:
                raise AuthenticationError("Not logged in")
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self._http.request(method, path, json=json, params=params, headers=headers)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TransientError(f"Could not reach the server: {e}") from e

        if response.is_error:
            raise self._error(response)
        return response

    @staticmethod
    def _error(response: httpx.Response):
        message, errors = response.reason_phrase, None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("error")
            if isinstance(detail, str):
                message = detail
            errors = body.get("errors")
        return error_for_status(response.status_code, message, errors)

    # ═══ Auth ═══

    def _store(self, response: httpx.Response) -> UserBrief:
        auth = AuthResponse.model_validate(response.json())
        self.token = auth.token
        return auth.user

    def login(self, email: str, password: str) -> UserBrief:
        response = self._request("POST", "/api/auth/login", json={"email": email, "password": password}, auth=False)
        return self._store(response)

    def register(
        self,
        email: str,
        password: str,
        name: str,
        role: str,
        instructor_id: Optional[str] = None,
    ) -> UserBrief:
        body = {
            "email": email,
            "password": password,
            "confirmPassword": password,
            "name": name,
            "role": role,
        }
        if instructor_id:
            body["instructorId"] = instructor_id
        return self._store(self._request("POST", "/api/auth/register", json=body, auth=False))

    def logout(self) -> None:
        self.token = None

    def me(self) -> UserBrief:
        return UserBrief.model_validate(self._request("GET", "/api/auth/me").json())

    # ═══ Catalog ═══

    def therapy_types(self) -> list[TherapyTypeOut]:
        return [TherapyTypeOut.model_validate(t) for t in self._request("GET", "/api/therapy-types").json()]

    def postures(self, therapy_type_id: Optional[int] = None) -> list[PostureOut]:
        params = {"therapyTypeId": therapy_type_id} if therapy_type_id is not None else None
        return [PostureOut.model_validate(p) for p in self._request("GET", "/api/postures", params=params).json()]

    # ═══ Instructor ═══

    def patients(self) -> list[PatientOut]:
        return [PatientOut.model_validate(p) for p in self._request("GET", "/api/patients").json()]

    def series(self) -> list[SeriesOut]:
        return [SeriesOut.model_validate(s) for s in self._request("GET", "/api/series").json()]

    def create_series(self, body: SeriesCreate) -> SeriesOut:
        response = self._request("POST", "/api/series", json=body.model_dump(by_alias=True, mode="json"))
        return SeriesOut.model_validate(response.json())

    def assign_series(self, patient_id: str, series_id: str) -> AssignmentOut:
        response = self._request("POST", f"/api/patients/{patient_id}/assign-series", json={"seriesId": series_id})
        return AssignmentOut.model_validate(response.json())

    # ═══ Patient ═══

    def my_series(self) -> Optional[AssignmentOut]:
        response = self._request("GET", "/api/my-series")
        if response.status_code == 204 or not response.content:
            return None
        return AssignmentOut.model_validate(response.json())

    def my_sessions(self) -> list[SessionOut]:
        return [SessionOut.model_validate(s) for s in self._request("GET", "/api/my-sessions").json()]

    def create_session(self, body: SessionCreate) -> SessionOut:
        response = self._request("POST", "/api/sessions", json=body.model_dump(by_alias=True, mode="json"))
        return SessionOut.model_validate(response.json())
