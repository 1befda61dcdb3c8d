"""
Shared fixtures: an in-memory GitHub served through httpx.MockTransport.
"""

import json
from typing import Dict, List, Optional, Set

import httpx
import pytest


class BrokenStream(httpx.AsyncByteStream):
    """Yields the first half of the body, then drops the connection."""

    def __init__(self, content: bytes):
        self.content = content

    async def __aiter__(self):
        yield self.content[: len(self.content) // 2]
        raise httpx.ReadError("connection reset")


class FakeGitHub:
    """
    Serves the contents API, raw downloads and archives for one repository.

    ``files`` maps remote paths to their bytes; directories are implied.
    """

    def __init__(
        self,
        files: Dict[str, bytes],
        owner: str = "acme",
        repo: str = "widgets",
        extra_entries: Optional[Dict[str, List[dict]]] = None
    ):
        self.files = files
        self.owner = owner
        self.repo = repo
        self.extra_entries = extra_entries or {}
        self.requests: List[httpx.Request] = []
        self.forbid_anonymous = False
        self.always_forbidden = False
        self.failing_paths: Set[str] = set()
        self.anonymous_forbidden_hosts: Set[str] = set()
        self.broken_streams: Set[str] = set()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def raw_url(self, path: str) -> str:
        return f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/main/{path}"

    def _file_entry(self, path: str) -> dict:
        return {
            "type": "file",
            "path": path,
            "name": path.rsplit("/", 1)[-1],
            "size": len(self.files[path]),
            "download_url": self.raw_url(path),
        }

    def _listing(self, remote: str) -> Optional[List[dict]]:
        entries: Dict[str, dict] = {}
        prefix = f"{remote}/" if remote else ""
        for path in self.files:
            if not path.startswith(prefix):
                continue
            rest = path[len(prefix):]
            if "/" in rest:
                child = prefix + rest.split("/", 1)[0]
                entries[child] = {"type": "dir", "path": child, "download_url": None}
            else:
                entries[path] = self._file_entry(path)
        for extra in self.extra_entries.get(remote, []):
            entries[extra["path"]] = extra
        if not entries and remote:
            return None
        return [entries[key] for key in sorted(entries)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.always_forbidden or (
            (self.forbid_anonymous or request.url.host in self.anonymous_forbidden_hosts)
            and "authorization" not in request.headers
        ):
            return httpx.Response(
                403,
                json={"message": "API rate limit exceeded"},
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1900000000"},
            )

        host = request.url.host
        path = request.url.path

        if host == "api.github.com":
            prefix = f"/repos/{self.owner}/{self.repo}/contents"
            if not path.startswith(prefix):
                return httpx.Response(404, json={"message": "Not Found"})
            remote = path[len(prefix):].strip("/")
            if remote in self.files:
                return httpx.Response(200, json=self._file_entry(remote))
            listing = self._listing(remote)
            if listing is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, content=json.dumps(listing).encode())

        if host == "raw.githubusercontent.com":
            remote = path.split("/", 4)[4]
            if remote in self.failing_paths:
                return httpx.Response(500, text="boom")
            if remote in self.broken_streams:
                return httpx.Response(200, stream=BrokenStream(self.files[remote]))
            return httpx.Response(200, content=self.files[remote])

        if host == "github.com" and "/archive/" in path:
            return httpx.Response(200, content=b"PK\x03\x04archive")

        return httpx.Response(404)


@pytest.fixture
def fake_github():
    """Repository with a docs directory (2 files) and a nested src tree."""

    return FakeGitHub({
        "README.md": b"# widgets\n",
        "docs/guide.md": b"guide",
        "docs/faq.md": b"faq",
        "src/widgets/__init__.py": b"",
        "src/widgets/core/engine.py": b"print('engine')\n",
        "src/widgets/core/parts/gear.py": b"GEAR = 1\n",
    })
