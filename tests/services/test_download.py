from unittest.mock import MagicMock

import pytest

from treefetch.infrastructure.auth_manager import AuthManager
from treefetch.infrastructure.error_handler import GenericTransferError, NotFoundError
from treefetch.models import LocalPathname, TransferStats
from treefetch.services import DownloadService, GitHubAPIService, build_client


@pytest.fixture
def discovered():
    stats = TransferStats()
    stats.discover()
    return stats


@pytest.mark.asyncio
async def test_download_creates_missing_directories(fake_github, tmp_path, discovered):
    pathname = LocalPathname(tmp_path / "a" / "b", "engine.py")

    async with build_client(fake_github.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()), chunk_size=4)
        written = await service.download(
            fake_github.raw_url("src/widgets/core/engine.py"), pathname, discovered
        )

    assert pathname.path.read_bytes() == b"print('engine')\n"
    assert written == len(b"print('engine')\n")
    assert discovered.completed == 1
    assert discovered.bytes_written == written
    assert service.written_files == [pathname.path]
    assert service.created_files == [pathname.path]


@pytest.mark.asyncio
async def test_download_overwrites_existing_file(fake_github, tmp_path, discovered):
    target = tmp_path / "guide.md"
    target.write_text("stale content that is longer")

    async with build_client(fake_github.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()))
        await service.download(
            fake_github.raw_url("docs/guide.md"), LocalPathname(tmp_path, "guide.md"), discovered
        )

    assert target.read_bytes() == b"guide"
    assert service.created_files == []


@pytest.mark.asyncio
async def test_progress_callback_receives_counts(fake_github, tmp_path):
    stats = TransferStats()
    stats.discover()
    stats.discover()
    callback = MagicMock()

    async with build_client(fake_github.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()), progress_callback=callback)
        await service.download(fake_github.raw_url("docs/faq.md"), LocalPathname(tmp_path, "faq.md"), stats)

    callback.assert_called_once_with(1, 2)


@pytest.mark.asyncio
async def test_failed_download_writes_nothing(tmp_path, discovered):
    from tests.conftest import FakeGitHub

    fake = FakeGitHub({})
    pathname = LocalPathname(tmp_path / "docs", "missing.md")

    async with build_client(fake.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()))
        with pytest.raises(NotFoundError):
            await service.download("https://github.com/acme/widgets/raw/main/missing.md", pathname, discovered)

    assert not (tmp_path / "docs").exists()
    assert discovered.completed == 0


def test_completing_an_undiscovered_file_is_rejected():
    with pytest.raises(RuntimeError):
        TransferStats().complete_file()


@pytest.mark.asyncio
async def test_interrupted_download_leaves_existing_file_untouched(fake_github, tmp_path, discovered):
    fake_github.broken_streams.add("docs/guide.md")
    target = tmp_path / "guide.md"
    target.write_text("earlier content")

    async with build_client(fake_github.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()))
        with pytest.raises(GenericTransferError):
            await service.download(
                fake_github.raw_url("docs/guide.md"), LocalPathname(tmp_path, "guide.md"), discovered
            )

    assert target.read_text() == "earlier content"
    assert [p.name for p in tmp_path.iterdir()] == ["guide.md"]
    assert service.written_files == []
    assert discovered.completed == 0


@pytest.mark.asyncio
async def test_created_directories_records_highest_new_ancestor(fake_github, tmp_path, discovered):
    (tmp_path / "a").mkdir()
    pathname = LocalPathname(tmp_path / "a" / "b" / "c", "faq.md")

    async with build_client(fake_github.transport) as client:
        service = DownloadService(GitHubAPIService(client, AuthManager()))
        await service.download(fake_github.raw_url("docs/faq.md"), pathname, discovered)

    assert service.created_directories == [tmp_path / "a" / "b"]
