"""Hot water level estimate from tank stratification.

Approximate only: each sensor contributes a fixed share of the tank when it
reads above the usable temperature. It is not a volume calculation.
"""

from ..const import (
    HOT_WATER_SHARE_S2,
    HOT_WATER_SHARE_S3,
    HOT_WATER_SHARE_S4,
    HOT_WATER_USABLE_TEMP,
)


def estimate_hot_water_level(
    s2: float,
    s3: float,
    s4: float,
    usable_temp: float = HOT_WATER_USABLE_TEMP,
) -> int:
    """Estimate the percentage (0-100) of the tank holding usable hot water."""
    level = 0
    if s4 > usable_temp:
        level += HOT_WATER_SHARE_S4
    if s3 > usable_temp:
        level += HOT_WATER_SHARE_S3
    if s2 > usable_temp:
        level += HOT_WATER_SHARE_S2
    return level
