"""Decide who a browser landing on the builder is editing as.

A ``locationId`` query parameter opens the builder for that external
account; anything else opens the builder for a guest whose id is kept in a
cookie. Published apps are served read-only under ``/customer-apps/{id}`` by
the viewer router and never reach this module.
"""

import secrets
import string
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

GUEST_COOKIE = "appBuilderGuestId"

_BASE36 = string.digits + string.ascii_lowercase


class EntryMode(StrEnum):
    BUILDER = "builder"
    GUEST = "guest"


@dataclass(frozen=True)
class EntryRoute:
    mode: EntryMode
    user_id: str
    # Guest id to store (or None to clear the stored one)
    guest_id: str | None = None


def generate_guest_id(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"guest_{now_ms}_{suffix}"


def resolve_entry(query: Mapping[str, str], guest_id: str | None = None) -> EntryRoute:
    location_id = (query.get("locationId") or "").strip()
    if location_id:
        return EntryRoute(EntryMode.BUILDER, location_id, None)

    if not guest_id:
        guest_id = generate_guest_id()
    return EntryRoute(EntryMode.GUEST, guest_id, guest_id)
