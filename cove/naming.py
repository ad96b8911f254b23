"""Container id disambiguation."""

import re
from collections.abc import Iterable


def generate_bis(container_id: str, existing_ids: Iterable[str]) -> int:
    """Return the numeric suffix needed to make ``container_id`` unique.

    An existing id matches when it is ``container_id`` itself or
    ``container_id-N`` for a positive integer N. With no match the result is
    0 (use the id as-is); otherwise it is one more than the larger of the
    match count and the highest suffix in use.

    Examples:
        generate_bis("ubuntu", []) → 0
        generate_bis("ubuntu", ["ubuntu"]) → 2
        generate_bis("ubuntu", ["ubuntu", "ubuntu-2"]) → 3
        generate_bis("ubuntu", ["ubuntu-7"]) → 8
    """
    pattern = re.compile(rf"^{re.escape(container_id)}(?:-(\d+))?$")
    bis = 0
    highest = 0
    for existing in existing_ids:
        m = pattern.match(existing)
        if not m:
            continue
        bis += 1
        if m.group(1):
            highest = max(highest, int(m.group(1)))
    if bis > 0:
        bis = max(bis, highest) + 1
    return bis


def disambiguate(container_id: str, name: str, bis: int) -> tuple[str, str]:
    """Apply a suffix from generate_bis to an id and its display name."""
    if bis <= 0:
        return container_id, name
    return f"{container_id}-{bis}", f"{name} ({bis})"
