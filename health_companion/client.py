"""
HTTP client for the Health Companion API.

Authenticated calls take the bearer token as an explicit argument and build
their headers per request; the underlying ``httpx.Client`` never carries a
default Authorization header, so one client can be shared between users.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class HealthCompanionAPIError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        message = body.get("error") if isinstance(body, dict) else None
        super().__init__(f"HTTP {status_code}: {message or body}")


class HealthCompanionClient:
    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10.0,
                 http: Optional[httpx.Client] = None):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "HealthCompanionClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def _headers(token: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, token: Optional[str] = None,
                 json: Optional[Dict[str, Any]] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._http.request(method, path, json=json, params=params, headers=self._headers(token))
        try:
            body = response.json()
        except ValueError:
            body = response.text
        if response.is_error:
            logger.debug(f"{method} {path} failed with {response.status_code}")
            raise HealthCompanionAPIError(response.status_code, body)
        return body

    # Auth
    def register(self, name: str, phone: str, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/register", json={
            "name": name, "phone": phone, "email": email, "password": password,
        })

    def verify_otp(self, phone: str, otp: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/verify-otp", json={"phone": phone, "otp": otp})

    def login(self, identifier: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", json={"identifier": identifier, "password": password})

    def resend_otp(self, phone: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/resend-otp", json={"phone": phone})

    def me(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me", token=token)

    def refresh(self, token: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/refresh", token=token)

    def logout(self, token: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/logout", token=token)

    # User
    def get_profile(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/api/user/profile", token=token)

    def update_profile(self, token: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", "/api/user/profile", token=token, json=fields)

    def update_health_profile(self, token: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", "/api/user/health-profile", token=token, json=fields)

    def dashboard(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/api/user/dashboard", token=token)

    # Quiz
    def start_quiz(self, token: str, primary_symptom: str, severity: str, duration: str) -> Dict[str, Any]:
        return self._request("POST", "/api/quiz/start", token=token, json={
            "primarySymptom": primary_symptom, "severity": severity, "duration": duration,
        })

    def answer(self, token: str, quiz_id: str, question_id: str, answer: Any,
               question: Optional[str] = None, category: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"quizId": quiz_id, "questionId": question_id, "answer": answer}
        if question is not None:
            payload["question"] = question
        if category is not None:
            payload["category"] = category
        return self._request("POST", "/api/quiz/answer", token=token, json=payload)

    def quiz_history(self, token: str, page: int = 1, limit: int = 10,
                     status: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self._request("GET", "/api/quiz/history", token=token, params=params)

    def get_quiz(self, token: str, quiz_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/quiz/{quiz_id}", token=token)

    def delete_quiz(self, token: str, quiz_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/quiz/{quiz_id}", token=token)

    # Contact
    def submit_contact(self, name: str, email: str, subject: str, message: str,
                       category: str = "general", token: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/api/contact/submit", token=token, json={
            "name": name, "email": email, "subject": subject, "message": message, "category": category,
        })
