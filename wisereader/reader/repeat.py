"""Pending numeric repeat count typed ahead of a motion."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RepeatBuffer:
    """Decimal digits accumulated before the next motion key."""

    digits: str = ""

    def push(self, digit: str) -> RepeatBuffer:
        if not is_digit_key(digit):
            raise ValueError(f"not a digit: {digit!r}")
        return RepeatBuffer(self.digits + digit)

    @property
    def count(self) -> int:
        """Parsed repeat count; ``1`` when empty or zero."""
        if not self.digits:
            return 1
        return max(1, int(self.digits))

    @property
    def pending(self) -> bool:
        return bool(self.digits)

    def cleared(self) -> RepeatBuffer:
        return EMPTY_REPEAT if self.digits else self


EMPTY_REPEAT = RepeatBuffer()


def is_digit_key(key: str) -> bool:
    return len(key) == 1 and key in "0123456789"
