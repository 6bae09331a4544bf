"""GitHub REST client for installation-scoped operations.

Uses httpx for async HTTP calls. Every call except the token exchange
needs an installation access token, obtained via the GitHub App JWT.

The bot only needs four issue operations:
1. Post a comment on an issue or pull request
2. Read an issue's state and title
3. Add an assignee
4. Remove an assignee

`InstallationClient` binds a token to those calls so the command and
build-event handlers can take it as a plain dependency (and tests can
swap in a mock that satisfies the same protocol).
"""

from typing import Protocol

import httpx

GITHUB_API_BASE = "https://api.github.com"


class IssueCommentingClient(Protocol):
    """What the mention-command dispatcher needs from GitHub."""

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict: ...

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> dict: ...


class IssueAssigningClient(Protocol):
    """What the build-event dispatcher needs from GitHub."""

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict: ...

    async def add_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> dict: ...

    async def remove_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> dict: ...


async def get_installation_token(
    app_jwt: str,
    installation_id: int,
    api_base: str = GITHUB_API_BASE,
) -> str:
    """Exchange a GitHub App JWT for an installation access token.

    Installation tokens are scoped to the repos the installation was
    granted and expire after 1 hour.
    """
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{api_base}/app/installations/{installation_id}/access_tokens",
            headers=_auth_headers(app_jwt),
        )
        response.raise_for_status()
        return response.json()["token"]


async def create_comment(
    token: str,
    owner: str,
    repo: str,
    issue_number: int,
    body: str,
    api_base: str = GITHUB_API_BASE,
) -> dict:
    """POST /repos/{owner}/{repo}/issues/{issue_number}/comments"""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{api_base}/repos/{owner}/{repo}/issues/{issue_number}/comments",
            headers=_auth_headers(token),
            json={"body": body},
        )
        response.raise_for_status()
        return response.json()


async def get_issue(
    token: str,
    owner: str,
    repo: str,
    issue_number: int,
    api_base: str = GITHUB_API_BASE,
) -> dict:
    """GET /repos/{owner}/{repo}/issues/{issue_number}

    Returns the full issue object; callers read ``state`` and ``title``.
    """
    async with httpx.AsyncClient() as client:
        response = await client.get(
            f"{api_base}/repos/{owner}/{repo}/issues/{issue_number}",
            headers=_auth_headers(token),
        )
        response.raise_for_status()
        return response.json()


async def add_assignees(
    token: str,
    owner: str,
    repo: str,
    issue_number: int,
    assignees: list[str],
    api_base: str = GITHUB_API_BASE,
) -> dict:
    """POST /repos/{owner}/{repo}/issues/{issue_number}/assignees"""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{api_base}/repos/{owner}/{repo}/issues/{issue_number}/assignees",
            headers=_auth_headers(token),
            json={"assignees": assignees},
        )
        response.raise_for_status()
        return response.json()


async def remove_assignees(
    token: str,
    owner: str,
    repo: str,
    issue_number: int,
    assignees: list[str],
    api_base: str = GITHUB_API_BASE,
) -> dict:
    """DELETE /repos/{owner}/{repo}/issues/{issue_number}/assignees

    DELETE with a JSON body needs ``client.request``; ``client.delete``
    does not accept one.
    """
    async with httpx.AsyncClient() as client:
        response = await client.request(
            "DELETE",
            f"{api_base}/repos/{owner}/{repo}/issues/{issue_number}/assignees",
            headers=_auth_headers(token),
            json={"assignees": assignees},
        )
        response.raise_for_status()
        return response.json()


class InstallationClient:
    """Issue operations bound to one installation access token."""

    def __init__(self, token: str, api_base: str = GITHUB_API_BASE) -> None:
        self._token = token
        self.api_base = api_base

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict:
        return await create_comment(
            self._token, owner, repo, issue_number, body, api_base=self.api_base
        )

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> dict:
        return await get_issue(
            self._token, owner, repo, issue_number, api_base=self.api_base
        )

    async def add_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> dict:
        return await add_assignees(
            self._token, owner, repo, issue_number, assignees, api_base=self.api_base
        )

    async def remove_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> dict:
        return await remove_assignees(
            self._token, owner, repo, issue_number, assignees, api_base=self.api_base
        )


def _auth_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
