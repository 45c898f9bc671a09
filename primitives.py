# primitives.py
import re
from dataclasses import dataclass, field
from typing import Union

import numpy as np

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(inf|infinity|nan|([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)

@dataclass(frozen=True, order=True)
class Addr:
    """
    Memory address used as the cache key.
    Ordered by its numeric value; parity decides which end of the
    eviction queue is used when the cache is full.
    """
    value: int

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"address must be non-negative, got {self.value}")

    @property
    def is_even(self):
        return self.value % 2 == 0

    def __int__(self):
        return self.value

    def __str__(self):
        return str(self.value)

@dataclass(frozen=True)
class Float:
    value: np.float32

    def __post_init__(self):
        object.__setattr__(self, "value", np.float32(self.value))

    def __str__(self):
        return str(self.value)

@dataclass(frozen=True)
class Int:
    value: int

    def __post_init__(self):
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"integer out of 32-bit range: {self.value}")

    def __str__(self):
        return str(self.value)

@dataclass(frozen=True)
class Bool:
    value: bool

    def __str__(self):
        return "true" if self.value else "false"

@dataclass(frozen=True)
class AddrRef:
    """Data value that points at another address."""
    addr: Addr

    def __str__(self):
        return f"{self.addr}*"

Data = Union[Float, Int, Bool, AddrRef]

@dataclass(eq=False)
class Entry:
    """
    One cache line. Compared by identity: the cache keeps exactly one
    Entry per resident address.
    """
    addr: Addr
    data: Data
    # a freshly created line matches main memory
    in_sync: bool = field(default=True)

    def desync(self):
        self.in_sync = False

def parse_addr(token: str) -> Addr:
    if not _UNSIGNED_RE.fullmatch(token):
        raise ValueError(f"invalid address literal: {token!r}")
    return Addr(int(token))

def parse_data(token: str) -> Data:
    """
    Parse a data literal, trying in order: boolean, 32-bit integer,
    float, and finally an address reference written as digits followed
    by one marker character (e.g. "12*").
    """
    if token in ("true", "false"):
        return Bool(token == "true")
    if _SIGNED_RE.fullmatch(token):
        value = int(token)
        if INT32_MIN <= value <= INT32_MAX:
            return Int(value)
    if _FLOAT_RE.fullmatch(token):
        return Float(float(token))
    if not token:
        raise ValueError("empty data literal")
    try:
        return AddrRef(parse_addr(token[:-1]))
    except ValueError:
        raise ValueError(f"invalid data literal: {token!r}") from None
