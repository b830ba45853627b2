"""Recognize URLs and file references in whitespace-delimited tokens.

Used to turn tokens inside inline code into links. A token that does not
match is simply left alone; nothing here raises.
"""

import re
from dataclasses import dataclass
from typing import Any

from .model import OPEN_URL_PREFIX, Range

WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[/\\]")

# Bytes encode_uri_component leaves untouched.
_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)


@dataclass(frozen=True)
class FileRef:
    path: str
    line: int | None = None  # 1-based
    col: int | None = None  # 1-based


def split_whitespace_token_ranges(text: str) -> list[Range]:
    """Ranges of the maximal non-whitespace runs of `text`, left to right."""
    ranges: list[Range] = []
    start: int | None = None
    for idx, ch in enumerate(text):
        if ch.isspace():
            if start is not None:
                ranges.append(Range(start, idx))
                start = None
        elif start is None:
            start = idx
    if start is not None:
        ranges.append(Range(start, len(text)))
    return ranges


def _is_windows_drive(path: str) -> bool:
    return WINDOWS_DRIVE_RE.match(path) is not None


def has_explicit_path_cue(path: str) -> bool:
    """
    True when a token clearly looks like a path.

    Bare words and things like `a:b` have no cue, so ordinary prose in
    code spans is not linkified.
    """
    if not path:
        return False
    if path in (".", "..", "~"):
        return True
    if "://" in path:
        return False
    if path.startswith(("./", "../", "~/", "/", "\\")):
        return True
    if _is_windows_drive(path):
        return True
    return "/" in path or "\\" in path


def _parse_digits(value: str | None) -> int | None:
    if not value or not (value.isascii() and value.isdigit()):
        return None
    number = int(value)
    return number if number > 0 else None


def _parse_line_col_suffix(raw: str) -> FileRef | None:
    # path#L12 or path#L12C3
    idx = raw.rfind("#L")
    if idx != -1:
        path = raw[:idx]
        if not has_explicit_path_cue(path):
            return None
        line_part, sep, col_part = raw[idx + 2:].partition("C")
        line = _parse_digits(line_part)
        if line is None:
            return None
        col = _parse_digits(col_part) if sep else None
        return FileRef(path, line=line, col=col)

    # path:12 or path:12:3
    before_last, sep, last_part = raw.rpartition(":")
    if not sep:
        return None
    last_num = _parse_digits(last_part)
    if last_num is None:
        return None
    path, sep, line_part = before_last.rpartition(":")
    if sep:
        line = _parse_digits(line_part)
        if line is not None:
            if not has_explicit_path_cue(path):
                return None
            return FileRef(path, line=line, col=last_num)
    if not has_explicit_path_cue(before_last):
        return None
    return FileRef(before_last, line=last_num)


def parse_file_ref_token(raw: str) -> FileRef | None:
    if not raw or "://" in raw:
        return None
    file_ref = _parse_line_col_suffix(raw)
    if file_ref is not None:
        return file_ref
    if not has_explicit_path_cue(raw):
        return None
    return FileRef(raw)


def parse_url_token(raw: str) -> str | None:
    lower = raw.lower()
    if not lower.startswith(("http://", "https://")):
        return None
    return raw


def is_absolute_path(path: str) -> bool:
    if not path:
        return False
    if path == "~" or path.startswith("~/"):
        return True
    if path.startswith(("/", "\\")):
        return True
    return _is_windows_drive(path)


def encode_uri_component(value: str) -> str:
    """Percent-encode every UTF-8 byte outside [A-Za-z0-9-_.~]."""
    out = []
    for b in value.encode("utf-8"):
        if b in _UNRESERVED:
            out.append(chr(b))
        else:
            out.append(f"%{b:02X}")
    return "".join(out)


def build_open_url(file_ref: FileRef, workspace_id: str | None = None) -> str | None:
    """
    Build the `ctx://open?...` URL the host uses to jump to a file.

    Absolute paths are sent as `path=`; relative ones need a workspace
    and are sent as `worktreeId=...&file=...`. `line` then `col` follow
    when known.
    """
    params: list[str] = []
    if is_absolute_path(file_ref.path):
        params.append(f"path={encode_uri_component(file_ref.path)}")
    else:
        if workspace_id is None:
            return None
        params.append(f"worktreeId={encode_uri_component(workspace_id)}")
        params.append(f"file={encode_uri_component(file_ref.path)}")
    if file_ref.line is not None:
        params.append(f"line={file_ref.line}")
    if file_ref.col is not None:
        params.append(f"col={file_ref.col}")
    return OPEN_URL_PREFIX + "&".join(params)


def link_url_for_token(token: str, workspace_id: str | None = None) -> str | None:
    """URL a code token should link to, or None to leave it as plain code."""
    url = parse_url_token(token)
    if url is not None:
        return url
    file_ref = parse_file_ref_token(token)
    if file_ref is None:
        return None
    if workspace_id is None and not is_absolute_path(file_ref.path):
        return None
    return build_open_url(file_ref, workspace_id)


def classify_token(token: str, workspace_id: str | None = None) -> dict[str, Any]:
    """Describe how a single code token would be treated, for tooling output."""
    url = parse_url_token(token)
    if url is not None:
        return {"token": token, "kind": "url", "url": url}

    file_ref = parse_file_ref_token(token)
    if file_ref is None:
        return {"token": token, "kind": "text", "url": None}

    return {
        "token": token,
        "kind": "file",
        "path": file_ref.path,
        "line": file_ref.line,
        "col": file_ref.col,
        "url": link_url_for_token(token, workspace_id),
    }
