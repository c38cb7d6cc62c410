from __future__ import annotations
import ipaddress
import re
import uuid
from datetime import date, datetime, time
from typing import Callable, Dict, Iterator, Optional

# A format check returns None when the string is acceptable, otherwise a message.
FormatCheck = Callable[[str], Optional[str]]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}:\d{2}(\.\d+)?([zZ]|[+-]\d{2}:\d{2})$")
_DATE_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[tT ]\d{2}:\d{2}:\d{2}(\.\d+)?([zZ]|[+-]\d{2}:\d{2})$")

def _iso_offset(s: str) -> str:
    # fromisoformat only learned "Z" in 3.11
    return s[:-1] + "+00:00" if s[-1:] in ("z", "Z") else s

def _fraction_to_micros(s: str) -> str:
    # fromisoformat wants 3 or 6 fractional digits before 3.11
    m = re.search(r"\.(\d+)", s)
    if not m:
        return s
    digits = (m.group(1) + "000000")[:6]
    return s[:m.start()] + "." + digits + s[m.end():]

def check_date(s: str) -> Optional[str]:
    if not _DATE_RE.match(s):
        return f"[{s}] is not a valid date. Expected yyyy-MM-dd"
    try:
        date.fromisoformat(s)
    except ValueError:
        return f"[{s}] is not a valid date. Expected yyyy-MM-dd"
    return None

def check_time(s: str) -> Optional[str]:
    if not _TIME_RE.match(s):
        return f"[{s}] is not a valid time. Expected HH:mm:ss with an offset"
    try:
        time.fromisoformat(_fraction_to_micros(_iso_offset(s)))
    except ValueError:
        return f"[{s}] is not a valid time. Expected HH:mm:ss with an offset"
    return None

def check_date_time(s: str) -> Optional[str]:
    if not _DATE_TIME_RE.match(s):
        return f"[{s}] is not a valid date-time. Expected yyyy-MM-dd'T'HH:mm:ssZ"
    try:
        datetime.fromisoformat(_fraction_to_micros(_iso_offset(s.replace("t", "T"))))
    except ValueError:
        return f"[{s}] is not a valid date-time. Expected yyyy-MM-dd'T'HH:mm:ssZ"
    return None

def check_ipv4(s: str) -> Optional[str]:
    try:
        ipaddress.IPv4Address(s)
    except ValueError:
        return f"[{s}] is not a valid ipv4 address"
    return None

def check_ipv6(s: str) -> Optional[str]:
    try:
        ipaddress.IPv6Address(s)
    except ValueError:
        return f"[{s}] is not a valid ipv6 address"
    return None

def check_regex(s: str) -> Optional[str]:
    try:
        re.compile(s)
    except re.error:
        return f"[{s}] is not a valid regular expression"
    return None

def check_email(s: str) -> Optional[str]:
    if not _EMAIL_RE.match(s):
        return f"[{s}] is not a valid email address"
    return None

def check_uuid(s: str) -> Optional[str]:
    try:
        uuid.UUID(s)
    except ValueError:
        return f"[{s}] is not a valid uuid"
    return None

_BUILTINS: Dict[str, FormatCheck] = {
    "date": check_date,
    "time": check_time,
    "date-time": check_date_time,
    "ipv4": check_ipv4,
    "ipv6": check_ipv6,
    "regex": check_regex,
    "email": check_email,
    "uuid": check_uuid,
}

class FormatRegistry:
    """Named format checks. Registries are per-validator; ``copy()`` before customizing a shared one."""

    def __init__(self, checks: Optional[Dict[str, FormatCheck]] = None, builtins: bool = True):
        self._checks: Dict[str, FormatCheck] = dict(_BUILTINS) if builtins else {}
        if checks:
            self._checks.update(checks)

    def register(self, name: str, check: FormatCheck) -> None:
        if not callable(check):
            raise TypeError(f"format check for {name!r} is not callable")
        self._checks[name] = check

    def get(self, name: str) -> Optional[FormatCheck]:
        return self._checks.get(name)

    def copy(self) -> "FormatRegistry":
        return FormatRegistry(self._checks, builtins=False)

    def __contains__(self, name: object) -> bool:
        return name in self._checks

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._checks))
