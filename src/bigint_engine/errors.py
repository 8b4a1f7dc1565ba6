from __future__ import annotations


class BigIntError(Exception):
    """このパッケージが送出する例外の基底クラス"""


class ParseError(BigIntError, ValueError):
    def __init__(self, text: str, base: int, position: int):
        self.text = text
        self.base = base
        self.position = position
        super().__init__(f"cannot parse {text!r} in base {base} at position {position}")


class DivideByZero(BigIntError, ZeroDivisionError):
    def __init__(self, dividend: int):
        self.dividend = dividend
        super().__init__("division by zero")


class InvalidArgument(BigIntError, ValueError):
    def __init__(self, argument: str, value):
        self.argument = argument
        self.value = value
        super().__init__(f"invalid {argument}: {value!r}")


class NoInverseExists(BigIntError, ArithmeticError):
    def __init__(self, value, modulus):
        self.value = value
        self.modulus = modulus
        super().__init__(f"{value!r} has no inverse modulo {modulus!r}")


class InvalidReference(BigIntError, LookupError):
    def __init__(self, handle: int):
        self.handle = handle
        super().__init__(f"invalid handle {handle:#x}")
