"""
Parses the single-character flag grammar of the command line into a
DownloadConfig.

Flags are grouped in clusters (`-vIi`), applied left to right, and the value
flags of a cluster take the following arguments in order (`-uo <url> <dir>`).
"""

from dataclasses import dataclass, field
from typing import Callable, Sequence

from pydantic import ValidationError

from yt2mp3_cli.exceptions import EmptyArgumentsError
from yt2mp3_cli.models.config import (
    MAX_WORKERS,
    MIN_WORKERS,
    DownloadConfig,
    DownloadKind,
    MediaKind,
    media_kind_from_name,
)
from yt2mp3_cli.utils.path import is_video_url


@dataclass
class ParsedArgs:
    """Result of parsing: the configuration plus what the user should be told."""

    config: DownloadConfig = field(default_factory=DownloadConfig)
    help_requested: bool = False
    warnings: list[str] = field(default_factory=list)


# Flags that only toggle a setting
SWITCHES: dict[str, Callable[[DownloadConfig], None]] = {
    "v": lambda c: setattr(c, "download_kind", DownloadKind.VIDEO),
    "p": lambda c: setattr(c, "download_kind", DownloadKind.PLAYLIST),
    "I": lambda c: setattr(c, "show_info", True),
    "V": lambda c: setattr(c, "media_kind", MediaKind.VIDEO),
    "A": lambda c: setattr(c, "media_kind", MediaKind.AUDIO),
    "M": lambda c: setattr(c, "media_kind", MediaKind.MUXED),
    "s": lambda c: setattr(c, "skip_existing", True),
    "P": lambda c: setattr(c, "parallel", True),
    "d": lambda c: setattr(c, "verbose", True),
}


def _set_media_kind(config: DownloadConfig, value: str, warnings: list[str]) -> None:
    kind = media_kind_from_name(value)
    if kind is None:
        warnings.append(f"Unknown media type: '{value}'")
    config.media_kind = kind


def _set_workers(config: DownloadConfig, value: str, warnings: list[str]) -> None:
    try:
        config.max_workers = int(value)
    except (ValueError, ValidationError):
        warnings.append(
            f"Invalid worker count '{value}', expected a number between"
            f" {MIN_WORKERS} and {MAX_WORKERS}"
        )


# Flags that take the next unconsumed argument
VALUE_FLAGS: dict[str, Callable[[DownloadConfig, str, list[str]], None]] = {
    "u": lambda c, v, w: setattr(c, "url", v),
    "i": lambda c, v, w: setattr(c, "video_id", v),
    "o": lambda c, v, w: setattr(c, "output_dir", v),
    "m": _set_media_kind,
    "t": lambda c, v, w: setattr(c, "target_format", v),
    "w": _set_workers,
}


def is_help_token(token: str) -> bool:
    return token.startswith("-h") or token == "help"


def _normalize(token: str) -> str:
    return "-" + token[2:] if token.startswith("--") else token


def parse_args(tokens: Sequence[str]) -> ParsedArgs:
    """
    Walks the arguments once, building up the configuration.

    Raises:
        EmptyArgumentsError: If no arguments were given at all.
    """
    if not tokens:
        raise EmptyArgumentsError("Invalid amount of args")

    result = ParsedArgs()
    config = result.config
    index = 0
    while index < len(tokens):
        arg = _normalize(tokens[index])
        index += 1

        if is_help_token(arg):
            result.help_requested = True
            return result

        if not (arg.startswith("-") and len(arg) > 1):
            continue

        for flag in arg[1:]:
            if flag in SWITCHES:
                SWITCHES[flag](config)
            elif flag in VALUE_FLAGS:
                if index >= len(tokens):
                    result.warnings.append(f"Missing value for argument: -{flag}")
                    continue
                VALUE_FLAGS[flag](config, tokens[index], result.warnings)
                index += 1
            else:
                result.warnings.append(f"Unknown argument: --{flag}")

    # A lone watch URL downloads that video without any flags
    if len(tokens) == 1 and is_video_url(tokens[0]):
        config.url = tokens[0]
        config.download_kind = DownloadKind.VIDEO
        config.media_kind = MediaKind.VIDEO

    return result
