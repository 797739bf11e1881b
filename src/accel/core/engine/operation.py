from __future__ import annotations

from enum import Enum


class Operation(Enum):
    """
    Direction of a run through the motion catalog.

    Each member carries:
      - unit: signed cursor step (+1 / -1)
      - selector: attribute name of the motion half to invoke
      - index_shift: offset from cursor value to catalog index
        (stepping backward from cursor v invokes motion v-1)
    """

    FORWARD = ("forward", +1, 0)
    BACKWARD = ("backward", -1, -1)

    def __init__(self, selector: str, unit: int, index_shift: int) -> None:
        self.selector = selector
        self.unit = unit
        self.index_shift = index_shift

    def __str__(self) -> str:
        return self.selector


def resolve(delta: int) -> Operation:
    # zero resolves forward
    return Operation.FORWARD if delta >= 0 else Operation.BACKWARD
