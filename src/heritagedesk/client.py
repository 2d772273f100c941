"""
Heritage Site Client - Request/response access to the heritage-site backend.

Wraps the backend's REST endpoints:
- GET    /heritage-sites                 list with search/status/experience/type filters
- GET    /heritage-sites/{id}/details    site detail aggregate (used by hydration)
- POST   /heritage-sites                 create from a serialized request
- PUT    /heritage-sites/{id}            full replace from a serialized request
- PATCH  /heritage-sites/{id}/status     toggle is_active
- DELETE /heritage-sites/{id}

Every call returns an ApiResult; transport errors are logged and reported as
failures, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests.exceptions import RequestException

from heritagedesk.utils.config import config

logger = logging.getLogger('HeritageDesk')


@dataclass
class ApiResult:
    """Outcome of one backend call."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None


@dataclass
class SiteFilters:
    """Filters of the site manager list screen."""
    search: str = ""
    status: Optional[str] = None  # 'active' | 'inactive'
    experience: Optional[str] = None
    site_type: Optional[str] = None

    def to_params(self) -> dict[str, str]:
        params = {}
        if self.search:
            params["search"] = self.search
        if self.status:
            params["is_active"] = "true" if self.status == "active" else "false"
        if self.experience and self.experience != "all":
            params["experience"] = self.experience
        if self.site_type and self.site_type != "all":
            params["site_type"] = self.site_type
        return params


class HeritageSiteClient:
    """
    HTTP client for heritage-site endpoints.

    Calls are made one at a time; there is no retry or cancellation.
    """

    RESOURCE = "heritage-sites"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root (None = use config)
            api_key: Bearer token (None = use config / environment)
            timeout: Request timeout in seconds (None = use config)
            session: Pre-built session, mainly for tests
        """
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.http_timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        })
        token = api_key if api_key is not None else config.api_key
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        self.session.close()

    def _url(self, *parts: Any) -> str:
        return "/".join([self.base_url, self.RESOURCE, *(str(part) for part in parts)])

    def _request(self, method: str, url: str, **kwargs: Any) -> ApiResult:
        """
        Perform a request and normalize the outcome.

        Bodies shaped as {"success", "data", "error"} are unwrapped; any
        other JSON body is returned as data.
        """
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            return ApiResult(success=False, error=str(e))

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if not response.ok:
            message = _error_message(body) or f"HTTP {response.status_code} {response.reason}"
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            return ApiResult(success=False, error=message, status_code=response.status_code)

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                message = _error_message(body) or "Request was rejected"
                logger.warning(f"{method} {url} rejected: {message}")
                return ApiResult(success=False, error=message, status_code=response.status_code)
            return ApiResult(success=True, data=body.get("data"), status_code=response.status_code)

        return ApiResult(success=True, data=body, status_code=response.status_code)

    def list_sites(self, filters: Optional[SiteFilters] = None) -> ApiResult:
        """
        List heritage sites, most recently updated first.

        Args:
            filters: Optional list filters

        Returns:
            ApiResult with a list of core site records
        """
        params = (filters or SiteFilters()).to_params()
        params["ordering"] = "-updated_at"
        result = self._request("GET", self._url(), params=params)
        if result.success and result.data is None:
            result.data = []
        return result

    def get_site_detail(self, site_id: int) -> ApiResult:
        """
        Fetch the detail aggregate of one site.

        Args:
            site_id: Site identifier

        Returns:
            ApiResult with {site, visitingHours, media, ticketTypes, transportation}
        """
        logger.info(f"Loading heritage site {site_id}")
        return self._request("GET", self._url(site_id, "details"))

    def create_site(self, payload: dict) -> ApiResult:
        logger.info(f"Creating heritage site: {payload.get('site', {}).get('name_default', '')}")
        return self._request("POST", self._url(), json=payload)

    def update_site(self, site_id: int, payload: dict) -> ApiResult:
        logger.info(f"Updating heritage site {site_id}")
        return self._request("PUT", self._url(site_id), json=payload)

    def set_site_status(self, site_id: int, is_active: bool) -> ApiResult:
        return self._request("PATCH", self._url(site_id, "status"), json={"is_active": is_active})

    def delete_site(self, site_id: int) -> ApiResult:
        logger.info(f"Deleting heritage site {site_id}")
        return self._request("DELETE", self._url(site_id))


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    error = body.get("error") or body.get("message") or body.get("detail")
    if isinstance(error, dict):
        return error.get("message") or str(error)
    return str(error) if error else None
