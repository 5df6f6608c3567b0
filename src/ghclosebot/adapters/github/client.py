from __future__ import annotations

import logging
from typing import Any, Iterator

import httpx

# Repository roles that may close or reopen items on someone else's behalf.
WRITE_PERMISSIONS = frozenset({"admin", "maintain", "write"})


class GitHubRestClient:
    """GitHub REST implementation of the platform client.

    This adapter contains no decision logic; every call reports success as a
    boolean and logs the details of anything that went wrong.
    """

    def __init__(self, token: str, api_base: str = "https://api.github.com", timeout: float = 20.0) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = httpx.Client(
            base_url=api_base,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubRestClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def create_issue_comment(self, org: str, repo: str, number: int, text: str) -> bool:
        return self._send("POST", f"/repos/{org}/{repo}/issues/{number}/comments", {"body": text})

    def create_pr_comment(self, org: str, repo: str, number: int, text: str) -> bool:
        # Pull request conversation comments live on the issues endpoint.
        return self._send("POST", f"/repos/{org}/{repo}/issues/{number}/comments", {"body": text})

    def update_issue(self, org: str, repo: str, number: int, state: str) -> bool:
        return self._send("PATCH", f"/repos/{org}/{repo}/issues/{number}", {"state": state})

    def update_pr(self, org: str, repo: str, number: int, state: str) -> bool:
        return self._send("PATCH", f"/repos/{org}/{repo}/pulls/{number}", {"state": state})

    def check_permission(self, org: str, repo: str, username: str) -> tuple[bool, bool]:
        path = f"/repos/{org}/{repo}/collaborators/{username}/permission"
        response = self._request("GET", path)
        if response is None:
            return False, False
        if response.status_code == 404:
            # Not a collaborator at all.
            return False, True
        if response.status_code != 200:
            self._log_failure(path, response)
            return False, False
        try:
            data = response.json()
        except ValueError:
            self._logger.warning("GitHub returned invalid JSON", extra={"path": path})
            return False, False
        permission = data.get("permission") if isinstance(data, dict) else None
        role_name = data.get("role_name") if isinstance(data, dict) else None
        return (permission in WRITE_PERMISSIONS or role_name in WRITE_PERMISSIONS), True

    def get_issue_linked_pr_count(self, org: str, repo: str, number: int) -> tuple[int, bool]:
        """Count distinct pull requests that cross-reference the issue."""
        path = f"/repos/{org}/{repo}/issues/{number}/timeline"
        linked: set[str] = set()
        pages = self._paginate(path, {"per_page": 100})
        try:
            for page in pages:
                for event in page:
                    pr_url = _linked_pr_url(event)
                    if pr_url:
                        linked.add(pr_url)
        except _PaginationError:
            return 0, False
        return len(linked), True

    def _paginate(self, path: str, params: dict) -> Iterator[list]:
        page = 1
        while True:
            response = self._request("GET", path, params={**params, "page": page})
            if response is None:
                raise _PaginationError(path)
            if response.status_code != 200:
                self._log_failure(path, response)
                raise _PaginationError(path)
            try:
                data = response.json()
            except ValueError as exc:
                raise _PaginationError(path) from exc
            if not isinstance(data, list) or not data:
                return
            yield data
            if not _has_next_page(response.headers.get("Link")):
                return
            page += 1

    def _send(self, method: str, path: str, payload: dict[str, Any]) -> bool:
        response = self._request(method, path, json=payload)
        if response is None:
            return False
        if response.status_code >= 300:
            self._log_failure(path, response)
            return False
        return True

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        try:
            return self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            self._logger.warning("GitHub request failed", extra={"path": path, "error": str(exc)})
            return None

    def _log_failure(self, path: str, response: httpx.Response) -> None:
        message = (
            "GitHub permission or visibility issue"
            if response.status_code in {401, 403}
            else "GitHub request failed"
        )
        self._logger.warning(
            message,
            extra={
                "path": path,
                "status_code": response.status_code,
                "response_message": response.text[:200],
            },
        )


class _PaginationError(RuntimeError):
    pass


def _linked_pr_url(event: Any) -> str | None:
    if not isinstance(event, dict) or event.get("event") != "cross-referenced":
        return None
    source = event.get("source") or {}
    source_issue = source.get("issue") or {}
    if not source_issue.get("pull_request"):
        return None
    return source_issue.get("html_url") or source_issue.get("url")


def _has_next_page(link_header: str | None) -> bool:
    if not link_header:
        return False
    return 'rel="next"' in link_header
