"""Small helpers shared across gitcore: hashing, hex checks, atomic writes, timezones."""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Tuple

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_TZ_RE = re.compile(r"([+-])(\d{2})(\d{2})")


def sha1_hash(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def is_hex(s: str) -> bool:
    return bool(_HEX_RE.fullmatch(s))


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write data next to path under a temporary name, then rename it into place.

    Readers never see a partially written file; the temporary file is removed
    if anything fails before the rename.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp_")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_text_atomic(path: Path, text: str) -> None:
    write_bytes_atomic(path, text.encode("utf-8"))


def format_tz_offset(offset: timedelta) -> str:
    """timedelta(hours=-8) -> '-0800'."""
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def timestamp_with_tz(timestamp: Optional[int] = None) -> Tuple[int, str]:
    """(unix time, local offset at that time). Defaults to now."""
    ts = int(time.time()) if timestamp is None else timestamp
    local = datetime.fromtimestamp(ts, timezone.utc).astimezone()
    return ts, format_tz_offset(local.utcoffset() or timedelta(0))


def parse_tz_offset(tz: str) -> timezone:
    """'+0530' -> timezone(+5:30). Unparsable offsets map to UTC."""
    m = _TZ_RE.fullmatch(tz)
    if m is None:
        return timezone.utc
    sign = -1 if m.group(1) == "-" else 1
    delta = timedelta(hours=int(m.group(2)), minutes=int(m.group(3)))
    return timezone(sign * delta)
