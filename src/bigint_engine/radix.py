"""2〜36進数の文字列とLimb配列の相互変換"""

from __future__ import annotations

import numpy as np

from .core import LimbArithmetic
from .errors import InvalidArgument, ParseError
from .utils import LIMB_BITS, empty_limbs

MIN_BASE = 2
MAX_BASE = 36

DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_DIGIT_VALUES = {c: i for i, c in enumerate(DIGITS)}
_DIGIT_VALUES.update({c.lower(): i for i, c in enumerate(DIGITS) if c.isalpha()})


def check_base(base: int) -> None:
    if not MIN_BASE <= base <= MAX_BASE:
        raise InvalidArgument("base", base)


def chunk_width(base: int) -> int:
    """base**k が1 Limbに収まる最大の k"""
    k = 1
    while base ** (k + 1) < (1 << LIMB_BITS):
        k += 1
    return k


def parse(text: str, base: int, arithmetic: LimbArithmetic) -> tuple[bool, np.ndarray]:
    """[+-]数字列 を解析して (負か, 絶対値) を返す

    先頭のゼロは許す。base の数字でない文字 (2文字目以降の符号を含む) は
    その位置を持つ ParseError になる。
    """
    check_base(base)
    pos = 0
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        pos = 1
    if pos == len(text):
        raise ParseError(text, base, pos)

    values = []
    for offset, ch in enumerate(text[pos:]):
        value = _DIGIT_VALUES.get(ch)
        if value is None or value >= base:
            raise ParseError(text, base, pos + offset)
        values.append(value)

    k = chunk_width(base)
    first = len(values) % k or k
    magnitude = empty_limbs()
    start = 0
    end = first
    while start < len(values):
        chunk = 0
        for value in values[start:end]:
            chunk = chunk * base + value
        scale = np.array([base ** (end - start)], dtype=np.uint32)
        chunk_limbs = np.array([chunk], dtype=np.uint32) if chunk else empty_limbs()
        magnitude = arithmetic.add(arithmetic.mul(magnitude, scale), chunk_limbs)
        start, end = end, end + k
    return negative, magnitude


def _render_chunk(value: int, base: int) -> str:
    out = []
    while value:
        value, d = divmod(value, base)
        out.append(DIGITS[d])
    return "".join(reversed(out))


def format_magnitude(magnitude: np.ndarray, base: int, arithmetic: LimbArithmetic) -> str:
    """絶対値を先頭ゼロなしで文字列にする"""
    check_base(base)
    if len(magnitude) == 0:
        return "0"

    k = chunk_width(base)
    divisor = np.array([base ** k], dtype=np.uint32)
    chunks = []
    while len(magnitude):
        magnitude, rem = arithmetic.divmod(magnitude, divisor)
        chunks.append(int(rem[0]) if len(rem) else 0)

    head = _render_chunk(chunks[-1], base)
    tail = [_render_chunk(c, base).rjust(k, "0") for c in reversed(chunks[:-1])]
    return head + "".join(tail)
