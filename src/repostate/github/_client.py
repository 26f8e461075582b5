"""Async client for the GitHub primitives used by the fixtures.

Every method performs exactly one HTTP request and never retries: failures
surface to the caller as `GitHubAPIError` (non-success status) or as the
original `httpx.TransportError`.
"""

import base64
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Self, cast, final

import httpx

from repostate.config import GitHubSettings
from repostate.exceptions import (
    ContentEncodingError,
    GitHubAPIError,
    ReferenceNotFoundError,
)
from repostate.state import FILENAME
from repostate.utils import get_logger

from ._models import GitCommit
from ._refs import get_fully_qualified_ref, get_head_ref

API_VERSION = "2022-11-28"

#: Mode of a regular, non-executable file in a git tree.
FILE_MODE = "100644"

_log = get_logger(__name__)

type JSONObject = dict[str, object]


def build_headers(token: str | None = None) -> dict[str, str]:
    """Build the default request headers.

    Args:
        token: Access token, omitted from headers when None.

    Returns:
        Header mapping for httpx.
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
    }
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's error message from a response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "message" in body:
        return str(body["message"])  # pyright: ignore[reportUnknownArgumentType]
    return response.reason_phrase


@final
class GitHubClient:
    """Single-purpose calls against one GitHub repository.

    Attributes:
        owner: Owner of the repository.
        repo: Name of the repository.

    Example:
        >>> async with GitHubClient.from_settings(load_github_settings()) as client:
        ...     sha = await client.fetch_reference_sha("master")
    """

    __slots__ = ("_http", "_owns_http", "owner", "repo")

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        owner: str,
        repo: str,
        owns_http: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            http: HTTP client whose base_url points at the API root.
            owner: Owner of the repository.
            repo: Name of the repository.
            owns_http: Close `http` when this client is closed.
        """
        self._http = http
        self._owns_http = owns_http
        self.owner = owner
        self.repo = repo

    @classmethod
    def from_settings(
        cls,
        settings: GitHubSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Self:
        """Create a client owning its own HTTP connection pool.

        Args:
            settings: Target repository and credentials.
            transport: Optional transport override (e.g. a mock transport).

        Returns:
            A GitHubClient to be closed with `aclose()` or `async with`.
        """
        http = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=build_headers(settings.token.get_secret_value()),
            timeout=settings.timeout,
            transport=transport,
        )
        return cls(http, owner=settings.owner, repo=settings.repo, owns_http=True)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this client owns it."""
        if self._owns_http:
            await self._http.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    def _repo_path(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/{path}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: JSONObject | None = None,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        response = await self._http.request(method, url, json=json, params=params)
        if response.is_error:
            msg = (
                f"GitHub API {method} {response.request.url.path} failed with "
                f"{response.status_code}: {_error_message(response)}"
            )
            raise GitHubAPIError(
                msg,
                status_code=response.status_code,
                method=method,
                url=str(response.request.url),
            )
        return response

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        json: JSONObject | None = None,
        params: dict[str, str | int] | None = None,
    ) -> JSONObject:
        response = await self._request(
            method, self._repo_path(path), json=json, params=params
        )
        return cast("JSONObject", response.json())

    # =========================================================================
    # Git Objects
    # =========================================================================

    async def create_blob(self, content: str) -> str:
        """Store file content and return the blob SHA."""
        data = await self._request_json(
            "POST", "git/blobs", json={"content": content, "encoding": "utf-8"}
        )
        sha = str(data["sha"])
        _log.debug("blob_created", sha=sha)
        return sha

    async def create_tree(self, blob: str) -> str:
        """Create a tree holding only the tracked file and return its SHA.

        Args:
            blob: SHA of the tracked file's blob.
        """
        data = await self._request_json(
            "POST",
            "git/trees",
            json={
                "tree": [
                    {"mode": FILE_MODE, "path": FILENAME, "sha": blob, "type": "blob"}
                ]
            },
        )
        sha = str(data["sha"])
        _log.debug("tree_created", sha=sha, blob=blob)
        return sha

    async def create_commit(
        self, message: str, tree: str, parent: str | None = None
    ) -> str:
        """Create a commit and return its SHA.

        Args:
            message: Commit message.
            tree: SHA of the commit's tree.
            parent: SHA of the single parent, or None for a root commit.
        """
        parents = [] if parent is None else [parent]
        data = await self._request_json(
            "POST",
            "git/commits",
            json={"message": message, "parents": parents, "tree": tree},
        )
        sha = str(data["sha"])
        _log.debug("commit_created", sha=sha, parent=parent)
        return sha

    async def fetch_commit(self, sha: str) -> GitCommit:
        """Fetch the git data of a commit."""
        data = await self._request_json("GET", f"git/commits/{sha}")
        parents = cast("list[JSONObject]", data.get("parents", []))
        return GitCommit(
            sha=str(data["sha"]),
            message=str(data["message"]),
            tree=str(cast("JSONObject", data["tree"])["sha"]),
            parent_shas=tuple(str(parent["sha"]) for parent in parents),
        )

    async def fetch_content(self, ref: str) -> str:
        """Fetch the tracked file's content at a branch or commit.

        Args:
            ref: Branch name or commit SHA.

        Returns:
            The decoded UTF-8 file content.

        Raises:
            ContentEncodingError: If GitHub reports an encoding other than
                base64 or utf-8.
        """
        data = await self._request_json(
            "GET", f"contents/{FILENAME}", params={"ref": ref}
        )
        content = str(data["content"])
        encoding = str(data.get("encoding", "base64"))
        if encoding == "base64":
            return base64.b64decode(content).decode("utf-8")
        if encoding in {"utf-8", "utf8"}:
            return content
        msg = f"Unsupported content encoding '{encoding}' for {FILENAME} at {ref}"
        raise ContentEncodingError(msg, ref=ref, encoding=encoding)

    # =========================================================================
    # References
    # =========================================================================

    async def fetch_reference_sha(self, ref: str) -> str:
        """Return the SHA a branch points at.

        Raises:
            ReferenceNotFoundError: If the branch does not exist.
        """
        try:
            data = await self._request_json("GET", f"git/ref/{get_head_ref(ref)}")
        except GitHubAPIError as e:
            if e.status_code == 404:  # noqa: PLR2004
                msg = f"Reference not found: {ref}"
                raise ReferenceNotFoundError(msg, ref=ref, url=e.url) from e
            raise
        return str(cast("JSONObject", data["object"])["sha"])

    async def create_reference(self, ref: str, sha: str) -> None:
        """Create a branch pointing at `sha`."""
        _ = await self._request_json(
            "POST",
            "git/refs",
            json={"ref": get_fully_qualified_ref(ref), "sha": sha},
        )
        _log.debug("reference_created", ref=ref, sha=sha)

    async def update_reference(self, ref: str, sha: str, *, force: bool) -> None:
        """Move a branch to `sha`.

        Args:
            ref: Branch name.
            sha: New target commit.
            force: Allow a non fast-forward update.
        """
        _ = await self._request_json(
            "PATCH",
            f"git/refs/{get_head_ref(ref)}",
            json={"force": force, "sha": sha},
        )
        _log.debug("reference_updated", ref=ref, sha=sha, force=force)

    async def delete_reference(self, ref: str) -> None:
        """Delete a branch."""
        _ = await self._request(
            "DELETE", self._repo_path(f"git/refs/{get_head_ref(ref)}")
        )
        _log.debug("reference_deleted", ref=ref)

    # =========================================================================
    # Pull Requests
    # =========================================================================

    async def create_pull_request(
        self, base: str, head: str, *, title: str = "Untitled"
    ) -> int:
        """Open a pull request and return its number."""
        data = await self._request_json(
            "POST", "pulls", json={"base": base, "head": head, "title": title}
        )
        number = int(cast("int", data["number"]))
        _log.debug("pull_request_created", number=number, base=base, head=head)
        return number

    async def iter_pull_request_commit_pages(
        self, number: int, *, per_page: int | None = None
    ) -> AsyncIterator[list[JSONObject]]:
        """Yield the pull request's commits one API page at a time.

        Follows the ``Link: rel="next"`` header until GitHub stops sending it.

        Args:
            number: Pull request number.
            per_page: Page size, GitHub's default when None.
        """
        params: dict[str, str | int] | None = (
            None if per_page is None else {"per_page": per_page}
        )
        url: str | None = self._repo_path(f"pulls/{number}/commits")
        while url is not None:
            response = await self._request("GET", url, params=params)
            yield cast("list[JSONObject]", response.json())
            # The next link already carries the query string
            params = None
            url = response.links.get("next", {}).get("url")
