from conftest import make_variants

from yt2mp3_cli.core.selection import select_variant
from yt2mp3_cli.models.config import MediaKind
from yt2mp3_cli.models.media import StreamVariant


def test_audio_picks_highest_bitrate():
    chosen = select_variant(make_variants(), MediaKind.AUDIO)
    assert chosen.itag == 251


def test_video_picks_highest_resolution_then_bitrate():
    chosen = select_variant(make_variants(), MediaKind.VIDEO)
    assert chosen.itag == 137


def test_muxed_picks_highest_resolution():
    chosen = select_variant(make_variants(), MediaKind.MUXED)
    assert chosen.itag == 22


def test_resolution_beats_bitrate_for_video():
    variants = [
        StreamVariant(1, MediaKind.VIDEO, "mp4", bitrate=9_000_000, resolution=720),
        StreamVariant(2, MediaKind.VIDEO, "webm", bitrate=1_000_000, resolution=1440),
    ]
    assert select_variant(variants, MediaKind.VIDEO).itag == 2


def test_no_matching_kind():
    variants = [v for v in make_variants() if v.kind != MediaKind.AUDIO]
    assert select_variant(variants, MediaKind.AUDIO) is None
    assert select_variant([], MediaKind.VIDEO) is None
