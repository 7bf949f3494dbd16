"""
Backend API Client

Thin httpx client for the backend collaborators the core consumes:

- GET/PUT /user/profile     the user's Sections document
- GET /resumes/:id          a resume (data, sections, sectionOrder)
- GET /public/resumes/:id   the public read-only variant
- GET /templates            the template catalog records

Transport failures and server errors are logged and raised as the retryable
UpstreamUnavailable; a 404 becomes NotFound.
"""

import os
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv

from folio.contexts.sections.exceptions import FolioError, NotFound, UpstreamUnavailable, ValidationFailed
from folio.contexts.sections.logger import _log_debug, _log_error
from folio.contexts.sections.section_data_structure import ResumeDocument, Sections

load_dotenv()
FOLIO_BACKEND_URL = os.getenv("FOLIO_BACKEND_URL", "http://localhost:5000/api")
FOLIO_BACKEND_TOKEN = os.getenv("FOLIO_BACKEND_TOKEN", "")
DEFAULT_TIMEOUT_S = 10.0


class BackendClient:
    """
    Client for the backend profile, resume and template APIs.

    Args:
        base_url: API root (default: FOLIO_BACKEND_URL)
        token: Bearer token (default: FOLIO_BACKEND_TOKEN)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        token = FOLIO_BACKEND_TOKEN if token is None else token
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=base_url or FOLIO_BACKEND_URL,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            _log_error(f"Backend unreachable: {method} {path}: {e}")
            raise UpstreamUnavailable(
                "Backend is unreachable, please retry", {"method": method, "path": path}
            ) from e

        _log_debug(f"{method} {path} -> {response.status_code}")

        if response.status_code >= 500:
            _log_error(f"Backend error {response.status_code}: {method} {path}")
            raise UpstreamUnavailable(
                f"Backend error ({response.status_code}), please retry",
                {"method": method, "path": path, "status": response.status_code},
            )
        if response.status_code == 404:
            raise NotFound(f"Not found: {path}", {"path": path})
        if response.status_code in (400, 422):
            raise ValidationFailed(_error_message(response), {"path": path, "status": response.status_code})
        if response.status_code >= 400:
            raise FolioError(_error_message(response), {"path": path, "status": response.status_code})

        return response.json()

    def get_profile(self) -> Sections:
        """Fetch the user's Sections document (defaults when the user has none)."""
        payload = self._request("GET", "/user/profile")
        return Sections.from_dict(payload.get("sections"))

    def update_profile(self, sections: Sections) -> Sections:
        """Replace the user's Sections document and return the stored version."""
        payload = self._request("PUT", "/user/profile", json={"sections": sections.to_dict()})
        return Sections.from_dict(payload.get("sections"))

    def get_resume(self, resume_id: str) -> ResumeDocument:
        """Fetch a resume owned by the authenticated user."""
        return _to_document(self._request("GET", f"/resumes/{resume_id}"), resume_id)

    def get_public_resume(self, share_id: str) -> ResumeDocument:
        """Fetch a resume through its public share link."""
        return _to_document(self._request("GET", f"/public/resumes/{share_id}"), share_id)

    def list_templates(self) -> List[Dict[str, Any]]:
        """Fetch template catalog records (id, name, thumbnail, styles)."""
        return list(self._request("GET", "/templates"))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


def _to_document(payload: Dict[str, Any], fallback_id: str) -> ResumeDocument:
    payload = dict(payload)
    payload.setdefault("id", payload.get("_id") or fallback_id)
    payload.setdefault("user", "")
    return ResumeDocument.from_dict(payload)
