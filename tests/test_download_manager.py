import asyncio

from conftest import FakeClient, FakeConverter, saved_files, video

from yt2mp3_cli.core.download_manager import DownloadManager
from yt2mp3_cli.core.item_processor import PathClaims
from yt2mp3_cli.models.config import DownloadConfig, DownloadKind, MediaKind


def make_config(tmp_path, **kwargs) -> DownloadConfig:
    kwargs.setdefault("media_kind", MediaKind.AUDIO)
    kwargs.setdefault("video_id", "abc")
    return DownloadConfig(output_dir=str(tmp_path), **kwargs)


def playlist_client(count: int, **kwargs) -> FakeClient:
    members = [f"https://www.youtube.com/watch?v=v{i}" for i in range(count)]
    videos = {url: video(f"v{i}") for i, url in enumerate(members)}
    return FakeClient(videos=videos, members=members, **kwargs)


def test_single_video_download_uses_native_container(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc", "My Song")})
    manager = DownloadManager(make_config(tmp_path), client, reporter)
    asyncio.run(manager.run())

    assert saved_files(tmp_path) == ["My Song.webm"]
    assert manager.stats.videos_downloaded == 1
    assert "DONE My Song" in output.getvalue()


def test_format_override_sets_extension_and_converts(tmp_path, reporter):
    client = FakeClient(videos={"abc": video("abc", "My Song")})
    converter = FakeConverter()
    config = make_config(tmp_path, target_format="mp3")
    manager = DownloadManager(config, client, reporter, converter)
    asyncio.run(manager.run())

    assert len(converter.calls) == 1
    source, destination = converter.calls[0]
    assert destination == tmp_path / "My Song.mp3"
    assert destination.suffix == ".mp3"
    assert not source.exists()
    assert (tmp_path / "My Song.mp3").exists()


def test_skip_existing_never_transfers(tmp_path, reporter, output):
    (tmp_path / "My Song.webm").write_bytes(b"old")
    client = FakeClient(videos={"abc": video("abc", "My Song")})
    config = make_config(tmp_path, skip_existing=True)
    manager = DownloadManager(config, client, reporter)
    asyncio.run(manager.run())

    assert client.transfers == []
    assert (tmp_path / "My Song.webm").read_bytes() == b"old"
    assert manager.stats.videos_skipped_exists == 1
    assert "SKIPPED" in output.getvalue()


def test_existing_file_is_overwritten_without_skip_flag(tmp_path, reporter):
    (tmp_path / "My Song.webm").write_bytes(b"old")
    client = FakeClient(videos={"abc": video("abc", "My Song")})
    manager = DownloadManager(make_config(tmp_path), client, reporter)
    asyncio.run(manager.run())

    assert saved_files(tmp_path) == ["My Song.webm"]
    assert (tmp_path / "My Song.webm").read_bytes() == b"x" * 10


def test_missing_stream_is_reported(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc")}, variants={"abc": []})
    manager = DownloadManager(make_config(tmp_path), client, reporter)
    asyncio.run(manager.run())

    assert client.transfers == []
    assert manager.stats.videos_failed == 1
    assert "Could not get stream information" in output.getvalue()


def test_missing_identifier_is_a_reported_error(tmp_path, reporter, output):
    client = FakeClient()
    config = DownloadConfig(output_dir=str(tmp_path), media_kind=MediaKind.AUDIO)
    asyncio.run(DownloadManager(config, client, reporter).run())

    assert client.resolved == []
    assert "No videoURL or videoID provided" in output.getvalue()


def test_missing_media_kind_is_a_reported_error(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc")})
    config = DownloadConfig(output_dir=str(tmp_path), video_id="abc")
    asyncio.run(DownloadManager(config, client, reporter).run())

    assert client.resolved == []
    assert "No valid media type provided" in output.getvalue()


def test_info_only_needs_no_media_kind(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc", "Shown Title")})
    config = DownloadConfig(output_dir=str(tmp_path), video_id="abc", show_info=True)
    asyncio.run(DownloadManager(config, client, reporter).run())

    assert client.transfers == []
    assert "Video information" in output.getvalue()
    assert "Shown Title" in output.getvalue()


def test_playlist_info_only(tmp_path, reporter, output):
    client = playlist_client(3)
    config = make_config(
        tmp_path, download_kind=DownloadKind.PLAYLIST, show_info=True
    )
    asyncio.run(DownloadManager(config, client, reporter).run())

    assert client.resolved == []
    assert "Playlist information" in output.getvalue()


def test_resolution_error_is_caught(tmp_path, reporter, output):
    client = FakeClient()
    asyncio.run(DownloadManager(make_config(tmp_path), client, reporter).run())

    assert "[ERROR] Video unavailable: abc" in output.getvalue()


def test_playlist_continues_after_member_failures(tmp_path, reporter, output):
    client = playlist_client(4)
    del client.videos["https://www.youtube.com/watch?v=v0"]
    client.variants["v2"] = []
    config = make_config(tmp_path, download_kind=DownloadKind.PLAYLIST)
    manager = DownloadManager(config, client, reporter)
    asyncio.run(manager.run())

    assert saved_files(tmp_path) == ["Video v1.webm", "Video v3.webm"]
    assert manager.stats.videos_failed == 2
    assert manager.stats.videos_downloaded == 2
    assert 'Downloading playlist "Mix"' in output.getvalue()


def test_parallel_playlist_respects_worker_limit(tmp_path, reporter):
    client = playlist_client(7, delay=0.02)
    config = make_config(
        tmp_path, download_kind=DownloadKind.PLAYLIST, parallel=True, max_workers=2
    )
    manager = DownloadManager(config, client, reporter)
    asyncio.run(manager.run())

    assert len(client.transfers) == 7
    assert client.peak_in_flight == 2


def test_parallel_playlist_isolates_failures(tmp_path, reporter):
    client = playlist_client(5, delay=0.01)
    del client.videos["https://www.youtube.com/watch?v=v1"]
    config = make_config(tmp_path, download_kind=DownloadKind.PLAYLIST, parallel=True)
    manager = DownloadManager(config, client, reporter)
    asyncio.run(manager.run())

    assert len(client.transfers) == 4
    assert manager.stats.videos_failed == 1


def test_parallel_duplicates_are_written_once_with_skip(tmp_path, reporter):
    client = playlist_client(3, delay=0.01)
    for url in client.members:
        client.videos[url].title = "Same Title"
    config = make_config(
        tmp_path,
        download_kind=DownloadKind.PLAYLIST,
        parallel=True,
        skip_existing=True,
    )
    manager = DownloadManager(config, client, reporter)
    asyncio.run(manager.run())

    assert len(client.transfers) == 1
    assert saved_files(tmp_path) == ["Same Title.webm"]
    assert manager.stats.videos_skipped_exists == 2


def test_summary_is_printed_after_downloads(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc")})
    asyncio.run(DownloadManager(make_config(tmp_path), client, reporter).run())

    assert "Download Complete!" in output.getvalue()


def test_failed_transfer_leaves_no_file_behind(tmp_path, reporter, output):
    client = FakeClient(videos={"abc": video("abc", "Song")})
    client.transfer_error = ConnectionError("connection reset")
    manager = DownloadManager(make_config(tmp_path), client, reporter)
    asyncio.run(manager.run())

    assert not (tmp_path / "Song.webm").exists()
    assert saved_files(tmp_path) == []
    assert manager.stats.videos_failed == 1
    assert "[ERROR] connection reset" in output.getvalue()

    client.transfer_error = None
    config = make_config(tmp_path, skip_existing=True)
    retry = DownloadManager(config, client, reporter)
    asyncio.run(retry.run())

    assert retry.stats.videos_downloaded == 1
    assert retry.stats.videos_skipped_exists == 0
    assert (tmp_path / "Song.webm").read_bytes() == b"x" * 10


def test_released_claim_can_be_taken_again(tmp_path):
    claims = PathClaims()
    target = tmp_path / "Song.webm"

    async def scenario():
        assert await claims.claim(target)
        assert not await claims.claim(target)
        await claims.release(target)
        return await claims.claim(target)

    assert asyncio.run(scenario())
