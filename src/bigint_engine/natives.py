"""スクリプトホスト向けのハンドル経由の呼び出し口

ホストは BigInteger をハンドル (整数) でしか扱わない。ValueSink はホスト側の
オブジェクト登録に求めるもの、HandleTable はそのメモリ上の実装。
失敗は errors の例外としてそのまま送出する。
"""

from __future__ import annotations

import logging
from typing import Protocol

from . import number_theory
from .big_integer import BigInteger, Mode
from .errors import InvalidArgument, InvalidReference

logger = logging.getLogger(__name__)

BAD_HANDLE = 0


class ValueSink(Protocol):
    def register(self, value: BigInteger) -> int:
        """value を引き取りハンドルを返す (失敗時は BAD_HANDLE)"""

    def read(self, handle: int) -> BigInteger:
        """ハンドルを解決する (不正なら InvalidReference)"""


class HandleTable:
    def __init__(self, max_handles: int | None = None):
        self.max_handles = max_handles
        self._values: dict[int, BigInteger] = {}
        self._next = 1

    def __len__(self) -> int:
        return len(self._values)

    def register(self, value: BigInteger) -> int:
        if self.max_handles is not None and len(self._values) >= self.max_handles:
            logger.debug("handle table full (%d), dropping value", self.max_handles)
            return BAD_HANDLE
        handle = self._next
        self._next += 1
        self._values[handle] = value
        logger.debug("registered handle %#x", handle)
        return handle

    def read(self, handle: int) -> BigInteger:
        try:
            return self._values[handle]
        except KeyError:
            raise InvalidReference(handle) from None

    def destroy(self, handle: int) -> None:
        if self._values.pop(handle, None) is None:
            raise InvalidReference(handle)
        logger.debug("destroyed handle %#x", handle)


class Natives:
    def __init__(self, registry: ValueSink | None = None):
        self.registry = registry if registry is not None else HandleTable()
        self._table = {
            "BigInt_Create": self.create,
            "BigInt_CreateFromString": self.create_from_string,
            "BigInt_ToInt": self.to_int,
            "BigInt_ToString": self.to_string,
            "BigInt_GetSign": self.get_sign,
            "BigInt_CompareTo": self.compare_to,
            "BigInt_GetLength": self.get_length,
            "BigInt_GetBlock": self.get_block,
            "BigInt_Negate": self.negate,
            "BigInt_Add": self.add,
            "BigInt_Subtract": self.subtract,
            "BigInt_Multiply": self.multiply,
            "BigInt_Divide": self.divide,
            "BigInt_DivideRemainder": self.divide_remainder,
            "BigInt_BitAnd": self.bit_and,
            "BigInt_BitOr": self.bit_or,
            "BigInt_BitXor": self.bit_xor,
            "BigInt_BitShiftLeft": self.bit_shift_left,
            "BigInt_BitShiftRight": self.bit_shift_right,
            "BigInt_GCD": self.gcd,
            "BigInt_Euclidean": self.euclidean,
            "BigInt_ModInv": self.mod_inv,
            "BigInt_ModExp": self.mod_exp,
        }

    @property
    def names(self) -> list[str]:
        return list(self._table)

    def call(self, name: str, *args):
        try:
            native = self._table[name]
        except KeyError:
            raise InvalidArgument("native", name) from None
        logger.debug("dispatch %s%r", name, args)
        return native(*args)

    def _read(self, handle: int) -> BigInteger:
        if handle == BAD_HANDLE:
            raise InvalidReference(handle)
        return self.registry.read(handle)

    def _store(self, value: BigInteger) -> int:
        # 登録に失敗した値はそのまま捨てる
        return self.registry.register(value)

    def _mode(self, mode) -> Mode:
        try:
            return Mode(mode)
        except ValueError:
            raise InvalidArgument("mode", mode) from None

    def _binary(self, handle: int, other: int, mode: Mode, copy_op, in_place_op) -> int:
        a = self._read(handle)
        b = self._read(other)
        if self._mode(mode) == Mode.RETURN_NEW:
            return self._store(copy_op(a, b))
        in_place_op(a, b)
        return handle

    def create(self, value: int) -> int:
        return self._store(BigInteger.from_int(value))

    def create_from_string(self, text: str, base: int = 10) -> int:
        return self._store(BigInteger.from_string(text, base))

    def to_int(self, handle: int) -> int:
        return self._read(handle).to_int()

    def to_string(self, handle: int, base: int = 10) -> str:
        return self._read(handle).to_string(base)

    def get_sign(self, handle: int) -> int:
        return int(self._read(handle).sign)

    def compare_to(self, handle: int, other: int) -> int:
        return int(self._read(handle).compare(self._read(other)))

    def get_length(self, handle: int) -> int:
        return self._read(handle).block_count

    def get_block(self, handle: int, index: int) -> int:
        return self._read(handle).block(index)

    def negate(self, handle: int, mode: Mode = Mode.RETURN_NEW) -> int:
        value = self._read(handle)
        if self._mode(mode) == Mode.RETURN_NEW:
            return self._store(value.negate())
        value.negate_in_place()
        return handle

    def add(self, handle: int, other: int, mode: Mode = Mode.RETURN_NEW) -> int:
        return self._binary(handle, other, mode, BigInteger.add, BigInteger.add_in_place)

    def subtract(self, handle: int, other: int, mode: Mode = Mode.RETURN_NEW) -> int:
        return self._binary(handle, other, mode, BigInteger.subtract, BigInteger.subtract_in_place)

    def multiply(self, handle: int, other: int, mode: Mode = Mode.RETURN_NEW) -> int:
        return self._binary(handle, other, mode, BigInteger.multiply, BigInteger.multiply_in_place)

    def divide(self, handle: int, other: int, mode: Mode = Mode.RETURN_NEW) -> int:
        return self._binary(handle, other, mode, BigInteger.divide, BigInteger.divide_in_place)

    def divide_remainder(self, handle: int, other: int, mode: Mode = Mode.RETURN_NEW) -> int:
        return self._binary(handle, other, mode, BigInteger.remainder, BigInteger.remainder_in_place)

    def bit_and(self, handle: int, other: int) -> int:
        return self._store(self._read(handle).bit_and(self._read(other)))

    def bit_or(self, handle: int, other: int) -> int:
        return self._store(self._read(handle).bit_or(self._read(other)))

    def bit_xor(self, handle: int, other: int) -> int:
        return self._store(self._read(handle).bit_xor(self._read(other)))

    def bit_shift_left(self, handle: int, bits: int) -> int:
        return self._store(self._read(handle).shift_left(bits))

    def bit_shift_right(self, handle: int, bits: int) -> int:
        return self._store(self._read(handle).shift_right(bits))

    def gcd(self, handle: int, other: int) -> int:
        return self._store(number_theory.gcd(self._read(handle), self._read(other)))

    def euclidean(self, handle: int, other: int,
                  want_g: bool = True, want_r: bool = True, want_s: bool = True) -> tuple[int, int, int]:
        """(g, r, s) のうち要求されたものだけ登録する (残りは BAD_HANDLE)"""
        g, r, s = number_theory.extended_euclidean(self._read(handle), self._read(other))
        return tuple(
            self._store(value) if wanted else BAD_HANDLE
            for value, wanted in ((g, want_g), (r, want_r), (s, want_s))
        )

    def mod_inv(self, handle: int, modulus: int) -> int:
        return self._store(number_theory.mod_inverse(self._read(handle), self._read(modulus)))

    def mod_exp(self, handle: int, exponent: int, modulus: int) -> int:
        return self._store(number_theory.mod_exp(
            self._read(handle), self._read(exponent), self._read(modulus)))
