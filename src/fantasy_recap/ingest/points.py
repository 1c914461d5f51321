"""Recover a fantasy point value from a player node."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from fantasy_recap.ingest.xml_tree import ATTRIBUTES_KEY, TEXT_KEY


POINTS_KEY = "player_points"
TOTAL_KEY = "total"
# Sits beside ``total`` in the points container and holds the week number.
COVERAGE_KEYS = frozenset({"week", "coverage_value"})


def _parse(value: Any) -> Optional[float]:
    if isinstance(value, Mapping):
        value = value.get(TEXT_KEY)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def extract_points(player: Any) -> Optional[float]:
    """Return the player's fantasy points, or ``None`` when no usable value exists.

    Preference order: a scalar points container, a direct ``total`` field, then
    ``total`` nested under the attributes object. An unusable direct ``total``
    falls through to the attribute. The week/coverage fields are
    never read, so a container holding only those yields ``None``. ``None``
    means "no data" and must not be treated as zero.
    """

    if not isinstance(player, Mapping):
        return None
    container = player.get(POINTS_KEY)
    if container is None:
        return None
    if not isinstance(container, Mapping):
        return _parse(container)
    direct = _parse(container.get(TOTAL_KEY))
    if direct is not None:
        return direct
    attributes = container.get(ATTRIBUTES_KEY)
    if isinstance(attributes, Mapping):
        return _parse(attributes.get(TOTAL_KEY))
    return None
