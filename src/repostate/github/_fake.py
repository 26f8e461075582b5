"""In-memory GitHub for testing.

This module provides FakeGitHub, a content-addressed double of the subset of
the GitHub REST API used by GitHubClient. It is served through
`httpx.MockTransport`, so the real client, builder and reader code paths run
unchanged against it. Objects are hashed with dulwich, so blob, tree and
commit SHAs are the ones git itself would compute.
"""

import base64
import re
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import orjson
from dulwich.object_store import MemoryObjectStore
from dulwich.objects import Blob, Commit, Tree

from ._client import GitHubClient, build_headers

#: Identity and time used for every commit, so SHAs are reproducible.
FAKE_IDENTITY = b"repostate <repostate@example.com>"
FAKE_TIMESTAMP = 1_500_000_000

#: GitHub's default page size for pull request commits.
DEFAULT_PER_PAGE = 30

type _Handler = Callable[[httpx.Request, re.Match[str]], httpx.Response]


@dataclass(slots=True)
class FailureRule:
    """Answer matching requests with an error instead of handling them.

    Attributes:
        method: HTTP method to match.
        path: Regular expression searched in the path below the repository.
        status_code: Status code to answer with.
        message: Error message returned in the body.
        remaining: Number of requests to fail, None for all of them.
    """

    method: str
    path: str
    status_code: int = 500
    message: str = "Injected failure"
    remaining: int | None = 1


@dataclass(slots=True)
class _PullRequest:
    number: int
    base: str
    head: str
    base_sha: str
    head_sha: str
    title: str


def _json_response(status_code: int, data: object) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=orjson.dumps(data),
        headers={"Content-Type": "application/json"},
    )


def _error(status_code: int, message: str) -> httpx.Response:
    return _json_response(status_code, {"message": message})


@dataclass(slots=True)
class FakeGitHub:
    """Fake GitHub hosting a single repository.

    Attributes:
        owner: Owner of the hosted repository.
        repo: Name of the hosted repository.
        token: When set, requests must carry it as a Bearer token.
        base_url: Base URL the fake answers on.
        refs: Branch name to commit SHA.
        requests: Method and path of every request received, in order.
        failures: Rules injecting error responses.

    Example:
        >>> github = FakeGitHub()
        >>> async with github.client() as client:
        ...     created = await create_references(client, state)
        >>> sorted(github.refs)
        ['feature-...', 'master-...']
    """

    owner: str = "octocat"
    repo: str = "fixtures"
    token: str | None = None
    base_url: str = "https://api.github.test"
    refs: dict[str, str] = field(default_factory=dict)
    requests: list[tuple[str, str]] = field(default_factory=list)
    failures: list[FailureRule] = field(default_factory=list)
    _store: MemoryObjectStore = field(default_factory=MemoryObjectStore)
    _pulls: dict[int, _PullRequest] = field(default_factory=dict)
    _routes: list[tuple[str, re.Pattern[str], _Handler]] = field(
        default_factory=list
    )

    def __post_init__(self) -> None:
        self._routes = [
            ("POST", re.compile(r"git/blobs"), self._create_blob),
            ("POST", re.compile(r"git/trees"), self._create_tree),
            ("POST", re.compile(r"git/commits"), self._create_commit),
            ("GET", re.compile(r"git/commits/(?P<sha>[0-9a-f]{40})"), self._get_commit),
            ("POST", re.compile(r"git/refs"), self._create_ref),
            ("GET", re.compile(r"git/ref/heads/(?P<name>.+)"), self._get_ref),
            ("PATCH", re.compile(r"git/refs/heads/(?P<name>.+)"), self._update_ref),
            ("DELETE", re.compile(r"git/refs/heads/(?P<name>.+)"), self._delete_ref),
            ("GET", re.compile(r"contents/(?P<path>.+)"), self._get_content),
            ("POST", re.compile(r"pulls"), self._create_pull),
            ("GET", re.compile(r"pulls/(?P<number>\d+)/commits"), self._pull_commits),
        ]

    # =========================================================================
    # Wiring
    # =========================================================================

    def transport(self) -> httpx.MockTransport:
        """Return a transport routing requests to this fake."""
        return httpx.MockTransport(self.handle)

    def client(self) -> GitHubClient:
        """Return a GitHubClient bound to this fake (close it after use)."""
        http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=build_headers(self.token),
            transport=self.transport(),
        )
        return GitHubClient(http, owner=self.owner, repo=self.repo, owns_http=True)

    def fail(
        self,
        method: str,
        path: str,
        *,
        status_code: int = 500,
        message: str = "Injected failure",
        times: int | None = 1,
    ) -> FailureRule:
        """Make the next `times` matching requests fail.

        Args:
            method: HTTP method to match.
            path: Regular expression searched in the path below the repository.
            status_code: Status code to answer with.
            message: Error message returned in the body.
            times: Number of requests to fail, None for all of them.

        Returns:
            The registered rule.
        """
        rule = FailureRule(method, path, status_code, message, times)
        self.failures.append(rule)
        return rule

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Answer one request."""
        prefix = f"/repos/{self.owner}/{self.repo}/"
        path = request.url.path
        self.requests.append((request.method, path))

        if self.token is not None:
            if request.headers.get("Authorization") != f"Bearer {self.token}":
                return _error(401, "Bad credentials")

        if not path.startswith(prefix):
            return _error(404, "Not Found")
        subpath = path[len(prefix) :]

        for rule in self.failures:
            if rule.remaining == 0:
                continue
            if rule.method == request.method and re.search(rule.path, subpath):
                if rule.remaining is not None:
                    rule.remaining -= 1
                return _error(rule.status_code, rule.message)

        for method, pattern, handler in self._routes:
            if method != request.method:
                continue
            match = pattern.fullmatch(subpath)
            if match is not None:
                return handler(request, match)
        return _error(404, "Not Found")

    # =========================================================================
    # Inspection
    # =========================================================================

    def get_commit(self, sha: str) -> Commit:
        """Return the stored commit object for `sha`."""
        obj = self._store[sha.encode()]
        if not isinstance(obj, Commit):
            msg = f"{sha} is not a commit"
            raise KeyError(msg)
        return obj

    def history(self, sha: str) -> list[str]:
        """Return the first-parent chain ending at `sha`, oldest first."""
        chain: list[str] = []
        current: str | None = sha
        while current is not None:
            chain.append(current)
            parents = self.get_commit(current).parents
            current = parents[0].decode() if parents else None
        chain.reverse()
        return chain

    def read_file(self, sha: str, path: str) -> str | None:
        """Return a file's content at a commit, None if absent."""
        tree = self._store[self.get_commit(sha).tree]
        assert isinstance(tree, Tree)
        try:
            _, blob_sha = tree[path.encode()]
        except KeyError:
            return None
        blob = self._store[blob_sha]
        assert isinstance(blob, Blob)
        return blob.data.decode("utf-8")

    # =========================================================================
    # Git Data
    # =========================================================================

    def _has(self, sha: object, type_name: bytes) -> bool:
        if not isinstance(sha, str) or not re.fullmatch(r"[0-9a-f]{40}", sha):
            return False
        key = sha.encode()
        return key in self._store and self._store[key].type_name == type_name

    def _create_blob(self, request: httpx.Request, _: re.Match[str]) -> httpx.Response:
        body = orjson.loads(request.content)
        content = str(body["content"])
        if body.get("encoding", "utf-8") == "base64":
            data = base64.b64decode(content)
        else:
            data = content.encode("utf-8")
        blob = Blob.from_string(data)
        self._store.add_object(blob)
        return _json_response(201, {"sha": blob.id.decode()})

    def _create_tree(self, request: httpx.Request, _: re.Match[str]) -> httpx.Response:
        body = orjson.loads(request.content)
        tree = Tree()
        for entry in body["tree"]:
            if entry.get("type") != "blob" or not self._has(entry.get("sha"), b"blob"):
                return _error(422, "tree.sha is not a valid blob")
            tree.add(
                entry["path"].encode(), int(entry["mode"], 8), entry["sha"].encode()
            )
        self._store.add_object(tree)
        return _json_response(201, {"sha": tree.id.decode()})

    def _create_commit(
        self, request: httpx.Request, _: re.Match[str]
    ) -> httpx.Response:
        body = orjson.loads(request.content)
        if not self._has(body.get("tree"), b"tree"):
            return _error(422, "Tree SHA does not exist")
        parents = body.get("parents", [])
        if not all(self._has(parent, b"commit") for parent in parents):
            return _error(422, "Parent SHA does not exist or is not a commit object")

        commit = Commit()
        commit.tree = body["tree"].encode()
        commit.parents = [parent.encode() for parent in parents]
        commit.author = commit.committer = FAKE_IDENTITY
        commit.author_time = commit.commit_time = FAKE_TIMESTAMP
        commit.author_timezone = commit.commit_timezone = 0
        commit.message = str(body["message"]).encode("utf-8")
        self._store.add_object(commit)
        return _json_response(201, self._commit_json(commit))

    def _commit_json(self, commit: Commit) -> dict[str, object]:
        identity = {"name": "repostate", "email": "repostate@example.com"}
        return {
            "sha": commit.id.decode(),
            "message": commit.message.decode("utf-8"),
            "tree": {"sha": commit.tree.decode()},
            "parents": [{"sha": parent.decode()} for parent in commit.parents],
            "author": {**identity, "date": "2017-07-14T02:40:00Z"},
            "committer": {**identity, "date": "2017-07-14T02:40:00Z"},
        }

    def _get_commit(self, _: httpx.Request, match: re.Match[str]) -> httpx.Response:
        sha = match["sha"]
        if not self._has(sha, b"commit"):
            return _error(404, "Not Found")
        return _json_response(200, self._commit_json(self.get_commit(sha)))

    # =========================================================================
    # References
    # =========================================================================

    def _ref_json(self, name: str) -> dict[str, object]:
        return {
            "ref": f"refs/heads/{name}",
            "object": {"sha": self.refs[name], "type": "commit"},
        }

    def _create_ref(self, request: httpx.Request, _: re.Match[str]) -> httpx.Response:
        body = orjson.loads(request.content)
        ref = str(body.get("ref", ""))
        if not ref.startswith("refs/heads/"):
            return _error(422, "Reference name must start with 'refs/heads/'")
        name = ref.removeprefix("refs/heads/")
        if name in self.refs:
            return _error(422, "Reference already exists")
        if not self._has(body.get("sha"), b"commit"):
            return _error(422, "Object does not exist")
        self.refs[name] = body["sha"]
        return _json_response(201, self._ref_json(name))

    def _get_ref(self, _: httpx.Request, match: re.Match[str]) -> httpx.Response:
        name = match["name"]
        if name not in self.refs:
            return _error(404, "Not Found")
        return _json_response(200, self._ref_json(name))

    def _update_ref(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        name = match["name"]
        if name not in self.refs:
            return _error(422, "Reference does not exist")
        body = orjson.loads(request.content)
        sha = body.get("sha")
        if not self._has(sha, b"commit"):
            return _error(422, "Object does not exist")
        if not body.get("force", False) and self.refs[name] not in self.history(sha):
            return _error(422, "Update is not a fast forward")
        self.refs[name] = sha
        return _json_response(200, self._ref_json(name))

    def _delete_ref(self, _: httpx.Request, match: re.Match[str]) -> httpx.Response:
        name = match["name"]
        if name not in self.refs:
            return _error(422, "Reference does not exist")
        del self.refs[name]
        return httpx.Response(204)

    # =========================================================================
    # Contents
    # =========================================================================

    def _get_content(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        ref = request.url.params.get("ref")
        if ref is None:
            return _error(422, "ref is required by this fake")
        sha = self.refs.get(ref, ref)
        if not self._has(sha, b"commit"):
            return _error(404, f"No commit found for the ref {ref}")
        content = self.read_file(sha, match["path"])
        if content is None:
            return _error(404, "Not Found")
        encoded = base64.encodebytes(content.encode("utf-8")).decode("ascii")
        return _json_response(
            200,
            {
                "type": "file",
                "path": match["path"],
                "encoding": "base64",
                "content": encoded,
            },
        )

    # =========================================================================
    # Pull Requests
    # =========================================================================

    def _create_pull(self, request: httpx.Request, _: re.Match[str]) -> httpx.Response:
        body = orjson.loads(request.content)
        base, head = str(body.get("base", "")), str(body.get("head", ""))
        if base not in self.refs or head not in self.refs:
            return _error(422, "Validation Failed")
        if self.refs[head] in self.history(self.refs[base]):
            return _error(422, f"No commits between {base} and {head}")
        number = len(self._pulls) + 1
        self._pulls[number] = _PullRequest(
            number=number,
            base=base,
            head=head,
            base_sha=self.refs[base],
            head_sha=self.refs[head],
            title=str(body.get("title", "")),
        )
        title = self._pulls[number].title
        return _json_response(201, {"number": number, "title": title})

    def _pull_commits(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        pull = self._pulls.get(int(match["number"]))
        if pull is None:
            return _error(404, "Not Found")

        base_history = set(self.history(pull.base_sha))
        commits = [
            sha for sha in self.history(pull.head_sha) if sha not in base_history
        ]

        per_page = int(request.url.params.get("per_page", DEFAULT_PER_PAGE))
        page = int(request.url.params.get("page", 1))
        start = (page - 1) * per_page
        entries = [
            {
                "sha": sha,
                "commit": self._commit_json(self.get_commit(sha)),
            }
            for sha in commits[start : start + per_page]
        ]

        headers: dict[str, str] = {}
        if start + per_page < len(commits):
            next_url = request.url.copy_merge_params(
                {"page": str(page + 1), "per_page": str(per_page)}
            )
            headers["Link"] = f'<{next_url}>; rel="next"'
        response = _json_response(200, entries)
        response.headers.update(headers)
        return response
