"""Catalog query parameters and their validation."""

import math
from dataclasses import dataclass

from channel_scout.core.exceptions import ParameterValidationError


def parse_bound(value: str | None, fallback: int) -> int:
    """Parse a non-negative numeric query value.

    Missing or blank values return ``fallback``. Fractional values are floored.

    Raises:
        ParameterValidationError: If the value is not a finite, non-negative number
    """
    if value is None or value.strip() == "":
        return fallback
    try:
        number = float(value)
    except ValueError:
        raise ParameterValidationError("Invalid numeric parameter") from None
    if not math.isfinite(number) or number < 0:
        raise ParameterValidationError("Invalid numeric parameter")
    return math.floor(number)


def parse_page(value: str | None) -> int:
    """Parse the 1-based page number; values below 1 clamp to 1."""
    if value is None or value.strip() == "":
        return 1
    try:
        number = float(value)
    except ValueError:
        raise ParameterValidationError("Invalid page parameter") from None
    if not math.isfinite(number):
        raise ParameterValidationError("Invalid page parameter")
    return max(1, math.floor(number))


@dataclass(frozen=True)
class ChannelQuery:
    """Validated subscriber range and page window for a catalog read."""

    min_subscribers: int
    max_subscribers: int
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_params(
        cls,
        min_subscribers: str | None,
        max_subscribers: str | None,
        page: str | None,
        page_size: int,
        ceiling: int,
    ) -> "ChannelQuery":
        """Validate raw query-string values.

        ``maxSubscribers`` above the ceiling is clamped, ``minSubscribers`` above
        it is rejected.

        Args:
            min_subscribers: Raw ``minSubscribers`` value
            max_subscribers: Raw ``maxSubscribers`` value
            page: Raw ``page`` value
            page_size: Items per page for this deployment
            ceiling: Largest allowed subscriber bound

        Returns:
            ChannelQuery

        Raises:
            ParameterValidationError: If any value is invalid
        """
        minimum = parse_bound(min_subscribers, 0)
        maximum = parse_bound(max_subscribers, ceiling)

        if minimum > ceiling:
            raise ParameterValidationError(
                f"minSubscribers must be less than or equal to {ceiling}"
            )

        maximum = min(maximum, ceiling)

        if minimum > maximum:
            raise ParameterValidationError(
                "minSubscribers must be less than or equal to maxSubscribers"
            )

        return cls(
            min_subscribers=minimum,
            max_subscribers=maximum,
            page=parse_page(page),
            page_size=page_size,
        )
