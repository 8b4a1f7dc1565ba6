from __future__ import annotations

import enum

import numpy as np

from . import radix
from .core import LimbArithmetic
from .errors import DivideByZero, InvalidArgument
from .utils import CELL_BITS, LIMB_BITS, int_to_limbs, limbs_to_int, wrap_to_cell

_shared_limb_arithmetic = LimbArithmetic()


class Sign(enum.IntEnum):
    NEGATIVE = -1
    ZERO = 0
    POSITIVE = 1


class Ordering(enum.IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


class Mode(enum.IntEnum):
    """RETURN_NEW は新しい値を返し、SET_DIRECT はレシーバを書き換える"""

    RETURN_NEW = 0
    SET_DIRECT = 1


def _as_big(value) -> BigInteger | None:
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return BigInteger(value)
    return None


class BigInteger:
    """符号 + 絶対値 (uint32 limb, 下位limbが先頭) で表す任意精度整数"""

    __slots__ = ("_sign", "_mag")

    def __init__(self, value: int | np.ndarray = 0, sign: int = 1):
        if isinstance(value, np.ndarray):
            # 末尾のゼロlimbを落とし、呼び出し元の配列とは共有しない
            mag = _shared_limb_arithmetic._trim(np.asarray(value, dtype=np.uint32).copy())
            self._mag = mag
            self._sign = Sign(sign) if len(mag) else Sign.ZERO
        else:
            self._mag = int_to_limbs(value)
            if value == 0:
                self._sign = Sign.ZERO
            else:
                self._sign = Sign.NEGATIVE if value < 0 else Sign.POSITIVE

    @classmethod
    def from_int(cls, value: int) -> BigInteger:
        return cls(value)

    @classmethod
    def from_string(cls, text: str, base: int = 10) -> BigInteger:
        negative, magnitude = radix.parse(text, base, _shared_limb_arithmetic)
        return cls(magnitude, Sign.NEGATIVE if negative else Sign.POSITIVE)

    def to_int(self, bits: int = CELL_BITS) -> int:
        """下位 bits ビットを符号付きセルに収める"""
        return wrap_to_cell(self._mag, self._sign == Sign.NEGATIVE, bits)

    def to_string(self, base: int = 10) -> str:
        """10進数のみ符号を付ける"""
        digits = radix.format_magnitude(self._mag, base, _shared_limb_arithmetic)
        if base == 10 and self._sign == Sign.NEGATIVE:
            return "-" + digits
        return digits

    def __int__(self) -> int:
        val = limbs_to_int(self._mag)
        return -val if self._sign == Sign.NEGATIVE else val

    def __str__(self) -> str:
        return self.to_string(10)

    def __repr__(self) -> str:
        return f"BigInteger({self.to_string(10)})"

    @property
    def sign(self) -> Sign:
        return self._sign

    @property
    def magnitude(self) -> np.ndarray:
        return self._mag.copy()

    @property
    def block_count(self) -> int:
        return len(self._mag)

    def block(self, index: int) -> int:
        if index < 0:
            raise InvalidArgument("block index", index)
        if index >= len(self._mag):
            return 0
        return int(self._mag[index])

    def bit_length(self) -> int:
        return _shared_limb_arithmetic.bit_length(self._mag)

    def test_bit(self, index: int) -> bool:
        word, bit = divmod(index, LIMB_BITS)
        return bool((self.block(word) >> bit) & 1)

    def is_zero(self) -> bool:
        return self._sign == Sign.ZERO

    def __bool__(self) -> bool:
        return self._sign != Sign.ZERO

    def __hash__(self) -> int:
        return hash(int(self))

    def compare(self, other: BigInteger) -> Ordering:
        if self._sign != other._sign:
            return Ordering.GREATER if self._sign > other._sign else Ordering.LESS
        cmp = _shared_limb_arithmetic.compare(self._mag, other._mag)
        if self._sign == Sign.NEGATIVE:
            cmp = -cmp
        return Ordering(cmp)

    def __eq__(self, other: object) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) == Ordering.EQUAL

    def __ne__(self, other: object) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) != Ordering.EQUAL

    def __lt__(self, other) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other) -> bool:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.compare(other) >= 0

    def _assign(self, parts: tuple[Sign, np.ndarray]) -> BigInteger:
        # 結果を計算し終えてから書き換えるので、失敗時はレシーバが変わらない
        self._sign, self._mag = parts
        return self

    def _negate_parts(self):
        return Sign(-self._sign), self._mag.copy()

    def _add_parts(self, b_sign, b_mag):
        calc = _shared_limb_arithmetic
        if b_sign == Sign.ZERO:
            return self._sign, self._mag.copy()
        if self._sign == Sign.ZERO:
            return b_sign, b_mag.copy()
        if self._sign == b_sign:
            return self._sign, calc.add(self._mag, b_mag)
        cmp = calc.compare(self._mag, b_mag)
        if cmp == 0:
            return Sign.ZERO, calc.sub(self._mag, b_mag)
        if cmp > 0:
            return self._sign, calc.sub(self._mag, b_mag)
        return b_sign, calc.sub(b_mag, self._mag)

    def _mul_parts(self, other: BigInteger):
        result = _shared_limb_arithmetic.mul(self._mag, other._mag)
        if len(result) == 0:
            return Sign.ZERO, result
        return Sign(self._sign * other._sign), result

    def _divrem_parts(self, other: BigInteger):
        if other._sign == Sign.ZERO:
            raise DivideByZero(int(self))
        q_mag, r_mag = _shared_limb_arithmetic.divmod(self._mag, other._mag)
        q_sign = Sign(self._sign * other._sign) if len(q_mag) else Sign.ZERO
        r_sign = self._sign if len(r_mag) else Sign.ZERO
        return (q_sign, q_mag), (r_sign, r_mag)

    def negate(self) -> BigInteger:
        sign, mag = self._negate_parts()
        return BigInteger(mag, sign)

    def add(self, other: BigInteger) -> BigInteger:
        sign, mag = self._add_parts(other._sign, other._mag)
        return BigInteger(mag, sign)

    def subtract(self, other: BigInteger) -> BigInteger:
        sign, mag = self._add_parts(Sign(-other._sign), other._mag)
        return BigInteger(mag, sign)

    def multiply(self, other: BigInteger) -> BigInteger:
        sign, mag = self._mul_parts(other)
        return BigInteger(mag, sign)

    def divide(self, other: BigInteger) -> BigInteger:
        """0方向への切り捨て"""
        (sign, mag), _ = self._divrem_parts(other)
        return BigInteger(mag, sign)

    def remainder(self, other: BigInteger) -> BigInteger:
        """余りは被除数の符号を持つ"""
        _, (sign, mag) = self._divrem_parts(other)
        return BigInteger(mag, sign)

    def divrem(self, other: BigInteger) -> tuple[BigInteger, BigInteger]:
        (q_sign, q_mag), (r_sign, r_mag) = self._divrem_parts(other)
        return BigInteger(q_mag, q_sign), BigInteger(r_mag, r_sign)

    def negate_in_place(self) -> BigInteger:
        return self._assign(self._negate_parts())

    def add_in_place(self, other: BigInteger) -> BigInteger:
        return self._assign(self._add_parts(other._sign, other._mag))

    def subtract_in_place(self, other: BigInteger) -> BigInteger:
        return self._assign(self._add_parts(Sign(-other._sign), other._mag))

    def multiply_in_place(self, other: BigInteger) -> BigInteger:
        return self._assign(self._mul_parts(other))

    def divide_in_place(self, other: BigInteger) -> BigInteger:
        quotient, _ = self._divrem_parts(other)
        return self._assign(quotient)

    def remainder_in_place(self, other: BigInteger) -> BigInteger:
        _, rem = self._divrem_parts(other)
        return self._assign(rem)

    def _unsigned(self, mag: np.ndarray) -> BigInteger:
        return BigInteger(mag, Sign.POSITIVE)

    def bit_and(self, other: BigInteger) -> BigInteger:
        return self._unsigned(_shared_limb_arithmetic.bit_and(self._mag, other._mag))

    def bit_or(self, other: BigInteger) -> BigInteger:
        return self._unsigned(_shared_limb_arithmetic.bit_or(self._mag, other._mag))

    def bit_xor(self, other: BigInteger) -> BigInteger:
        return self._unsigned(_shared_limb_arithmetic.bit_xor(self._mag, other._mag))

    def shift_left(self, n: int) -> BigInteger:
        return self._unsigned(_shared_limb_arithmetic.shl(self._mag, n))

    def shift_right(self, n: int) -> BigInteger:
        return self._unsigned(_shared_limb_arithmetic.shr(self._mag, n))

    def __neg__(self) -> BigInteger:
        return self.negate()

    def __pos__(self) -> BigInteger:
        return BigInteger(self._mag.copy(), self._sign)

    def __abs__(self) -> BigInteger:
        return self._unsigned(self._mag.copy())

    def __add__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    def __radd__(self, other) -> BigInteger:
        return self.__add__(other)

    def __iadd__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.add_in_place(other)

    def __sub__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return other.subtract(self)

    def __isub__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.subtract_in_place(other)

    def __mul__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other) -> BigInteger:
        return self.__mul__(other)

    def __imul__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.multiply_in_place(other)

    # //, %, divmod は int と同じ床除算
    def __divmod__(self, other) -> tuple[BigInteger, BigInteger]:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        q, r = self.divrem(other)
        if r._sign != Sign.ZERO and r._sign != other._sign:
            q.subtract_in_place(BigInteger(1))
            r.add_in_place(other)
        return q, r

    def __floordiv__(self, other) -> BigInteger:
        q, _ = divmod(self, other)
        return q

    def __mod__(self, other) -> BigInteger:
        _, r = divmod(self, other)
        return r

    def __rdivmod__(self, other) -> tuple[BigInteger, BigInteger]:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return divmod(other, self)

    def __rfloordiv__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return other // self

    def __rmod__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return other % self

    def __pow__(self, exponent, modulus=None) -> BigInteger:
        from . import number_theory

        exponent = _as_big(exponent)
        if exponent is None:
            return NotImplemented
        if modulus is not None:
            modulus = _as_big(modulus)
            if modulus is None:
                return NotImplemented
            return number_theory.mod_exp(self, exponent, modulus)
        return number_theory.power(self, exponent)

    def __rpow__(self, base) -> BigInteger:
        base = _as_big(base)
        if base is None:
            return NotImplemented
        return base ** self

    def __and__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.bit_and(other)

    def __or__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.bit_or(other)

    def __xor__(self, other) -> BigInteger:
        other = _as_big(other)
        if other is None:
            return NotImplemented
        return self.bit_xor(other)

    def __rand__(self, other) -> BigInteger:
        return self.__and__(other)

    def __ror__(self, other) -> BigInteger:
        return self.__or__(other)

    def __rxor__(self, other) -> BigInteger:
        return self.__xor__(other)

    def __lshift__(self, n: int) -> BigInteger:
        return self.shift_left(int(n))

    def __rshift__(self, n: int) -> BigInteger:
        return self.shift_right(int(n))
