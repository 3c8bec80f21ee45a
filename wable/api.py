"""Workable SPI v3 client.

All authenticated requests go through a shared RequestScheduler so the
per-minute quota is respected no matter how many threads use the client.
"""

from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import quote, urlencode

import requests

from .logger import get_logger
from .pager import PAGE_SIZE, collect_pages, stream_pages
from .scheduler import RequestScheduler

logger = get_logger()

REQUEST_TIMEOUT = 30


class WorkableAPIError(Exception):
    """Raised when the Workable API answers with a non-success status."""

    def __init__(self, status: Optional[int], reason: str = "", url: str = ""):
        self.status = status
        self.reason = reason
        self.url = url
        super().__init__(f"Workable API error: {status} {reason}".rstrip())


class RateLimitError(WorkableAPIError):
    """HTTP 429 that got past the scheduler's proactive wait. Not retried."""


class WorkableAPI:
    """Thin client over the endpoints the sync needs."""

    def __init__(
        self,
        subdomain: str,
        api_token: str,
        scheduler: Optional[RequestScheduler] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = f"https://{subdomain}.workable.com/spi/v3"
        self.scheduler = scheduler or RequestScheduler()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        })

    def _url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.base_url}{path}"
        if params:
            query = {k: v for k, v in params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"
        return url

    def _get_json(self, url: str) -> Dict[str, Any]:
        """GET an API URL through the scheduler and decode the JSON body."""
        response = self.scheduler.schedule(lambda: self.session.get(url, timeout=self.timeout))
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = response.status_code
            reason = response.reason or ""
            if status == 429:
                logger.error("Workable rate limit exceeded", url=url, status=status)
                raise RateLimitError(status, reason, url) from e
            logger.error("Workable request failed", url=url, status=status)
            raise WorkableAPIError(status, reason, url) from e
        return response.json()

    def list_jobs(self, updated_after: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return every job, following pagination to the end."""
        url = self._url("/jobs", {"limit": PAGE_SIZE, "updated_after": updated_after})
        return collect_pages(self._get_json, url, "jobs")

    def generate_candidates(
        self,
        job_shortcode: str,
        updated_after: Optional[str] = None,
    ) -> Iterator[List[Dict[str, Any]]]:
        """Yield pages of candidates for a job as they arrive."""
        url = self._url(
            f"/jobs/{quote(job_shortcode, safe='')}/candidates",
            {"limit": PAGE_SIZE, "updated_after": updated_after},
        )
        return stream_pages(self._get_json, url, "candidates")

    def get_candidate_by_id(self, candidate_id: str) -> Dict[str, Any]:
        """Fetch the full candidate record (unwrapped from the "candidate" key)."""
        payload = self._get_json(self._url(f"/candidates/{quote(str(candidate_id), safe='')}"))
        return payload["candidate"]

    def get_job_stages(self, job_shortcode: str) -> Dict[str, Any]:
        return self._get_json(self._url(f"/jobs/{quote(job_shortcode, safe='')}/stages"))

    def download_file(self, url: str) -> bytes:
        """Download an attachment from a pre-signed URL.

        Attachments are served from storage outside the API, so the request
        skips the scheduler and carries no Authorization header.
        """
        response = requests.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content
