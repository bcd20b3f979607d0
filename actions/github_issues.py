# Folder: issuewatch/actions/github_issues.py
#
# Thin client over the three GitHub REST calls we need:
#   search issues by fingerprint marker, create issue, comment on issue.
#
# Every call is single shot - no retries, no backoff.
# The reporter decides what a failure means.

import logging
from typing import Optional, Sequence

import requests

import config

logger = logging.getLogger(__name__)

# Embedded as an HTML comment in every issue body so searches can find it.
FINGERPRINT_MARKER = "issuewatch:fingerprint"
GITHUB_API_VERSION = "2022-11-28"


class TrackerAPIError(Exception):
    """GitHub answered a create/comment call with a non-2xx status"""

    def __init__(self, action: str, status_code: int, body: str):
        self.action = action
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"GitHub API failed to {action} (HTTP {status_code}): {body}"
        )


class GithubIssueClient:

    def __init__(self, token: str, repository: str,
                 api_base: str = config.GITHUB_API_BASE,
                 timeout: float = config.REQUEST_TIMEOUT_SEC):
        self.token = token
        self.repository = repository
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def find_issue(self, fingerprint: str) -> Optional[int]:
        """
        Open issue whose body carries this fingerprint, or None.
        A bad status or a weird payload just means "not found".
        """
        query = (
            f"repo:{self.repository} is:issue is:open "
            f"\"{FINGERPRINT_MARKER}:{fingerprint}\" in:body"
        )
        resp = requests.get(
            f"{self.api_base}/search/issues",
            params={"q": query, "per_page": 1},
            headers=self._headers(),
            timeout=self.timeout
        )

        if not resp.ok:
            logger.debug(f"Issue search returned HTTP {resp.status_code}")
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.debug("Issue search returned non-JSON body")
            return None

        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            return None

        first = items[0]
        return first.get("number") if isinstance(first, dict) else None

    def create_issue(self, title: str, body: str,
                     labels: Sequence[str] = (),
                     assignees: Sequence[str] = ()) -> int:
        payload = {"title": title, "body": body}
        # GitHub treats an explicit [] differently from a missing key
        if labels:
            payload["labels"] = list(labels)
        if assignees:
            payload["assignees"] = list(assignees)

        data = self._post(
            f"/repos/{self.repository}/issues", payload, "create issue"
        )
        logger.info(f"Created issue #{data.get('number')} in {self.repository}")
        return data.get("number")

    def add_comment(self, issue_number: int, body: str) -> int:
        data = self._post(
            f"/repos/{self.repository}/issues/{issue_number}/comments",
            {"body": body},
            "add comment"
        )
        logger.info(f"Commented on issue #{issue_number} in {self.repository}")
        return data.get("id")

    def check_access(self) -> str:
        """
        GET the repository itself. Unlike find_issue, a bad token or an
        unknown repo raises instead of looking like "no match".
        """
        resp = requests.get(
            f"{self.api_base}/repos/{self.repository}",
            headers=self._headers(),
            timeout=self.timeout
        )

        if not resp.ok:
            raise TrackerAPIError("read repository", resp.status_code, resp.text)

        return resp.json().get("full_name", self.repository)

    def _post(self, path: str, payload: dict, action: str) -> dict:
        resp = requests.post(
            f"{self.api_base}{path}",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout
        )

        if not resp.ok:
            raise TrackerAPIError(action, resp.status_code, resp.text)

        return resp.json()

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "Content-Type": "application/json",
            "User-Agent": f"issuewatch/{config.VERSION}",
        }
