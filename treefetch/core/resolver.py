"""
Turns a GitHub web URL into a RepositoryDescriptor.
"""

from typing import Optional, Tuple, Union
from urllib.parse import quote, unquote, urlparse

from ..models import RepositoryDescriptor, RootDirectoryMode
from ..models.descriptor import GITHUB_API_ROOT
from ..infrastructure.error_handler import InvalidURLError


VALID_HOSTS = ("github.com", "www.github.com")
DEFAULT_BRANCH = "master"


def parse_root_directory(
    value: Optional[Union[str, bool]],
    repo: str
) -> Tuple[RootDirectoryMode, str]:
    """
    Interpret the root directory option.

    ``False``/``"false"`` omits nesting, ``None``/``""``/``True``/``"true"``
    nests under the repository name, anything else is used as the name.
    """

    if value is False or (isinstance(value, str) and value.lower() == "false"):
        return RootDirectoryMode.OMIT, ""
    if value is None or value is True or value == "" or (
        isinstance(value, str) and value.lower() == "true"
    ):
        return RootDirectoryMode.REPO_NAME, repo
    return RootDirectoryMode.EXPLICIT, str(value).strip("/")


def resolve(
    url: str,
    file_name: Optional[str] = None,
    root_directory: Optional[Union[str, bool]] = None
) -> RepositoryDescriptor:
    """
    Parse ``https://github.com/owner/repo[/tree/branch[/sub/path]]``.

    Raises:
        InvalidURLError: if the host is not GitHub or owner/repo are missing
    """

    if not url:
        raise InvalidURLError("A repository URL is required")

    if url.endswith("/"):
        url = url[:-1]

    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if parsed.scheme not in ("http", "https") or host not in VALID_HOSTS:
        raise InvalidURLError(f"Invalid URL: {url}. Expected a github.com repository URL.")

    # ['', owner, repo, 'tree'|'blob', branch, *sub_path]
    segments = parsed.path.split("/")
    if len(segments) < 3 or not segments[1] or not segments[2]:
        raise InvalidURLError(
            f"Invalid URL: {url}. Expected https://github.com/<owner>/<repo>[/tree/<branch>/<path>]"
        )

    owner = segments[1]
    repo = segments[2]
    if repo.endswith(".git"):
        repo = repo[:-4]

    if len(segments) > 4 and segments[4]:
        branch = unquote(segments[4])
    else:
        branch = DEFAULT_BRANCH

    sub_path = unquote("/".join(segments[5:])).strip("/")
    root_name = sub_path.rsplit("/", 1)[-1] if sub_path else repo

    mode, root_directory_name = parse_root_directory(root_directory, repo)

    return RepositoryDescriptor(
        owner = owner,
        repo = repo,
        branch = branch,
        sub_path = sub_path,
        root_name = root_name,
        download_file_name = file_name or root_name,
        root_directory_name = root_directory_name,
        api_url_prefix = f"{GITHUB_API_ROOT}/repos/{owner}/{repo}/contents/",
        api_url_postfix = f"?ref={quote(branch, safe='')}",
        root_directory_mode = mode,
    )


__all__ = [
    "DEFAULT_BRANCH",
    "parse_root_directory",
    "resolve",
]
