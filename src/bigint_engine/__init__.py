from .big_integer import BigInteger, Mode, Ordering, Sign
from .core import LimbArithmetic
from .errors import (
    BigIntError,
    DivideByZero,
    InvalidArgument,
    InvalidReference,
    NoInverseExists,
    ParseError,
)
from .natives import BAD_HANDLE, HandleTable, Natives, ValueSink
from .number_theory import extended_euclidean, gcd, mod_exp, mod_inverse

__all__ = [
    "BAD_HANDLE",
    "BigIntError",
    "BigInteger",
    "DivideByZero",
    "HandleTable",
    "InvalidArgument",
    "InvalidReference",
    "LimbArithmetic",
    "Mode",
    "Natives",
    "NoInverseExists",
    "Ordering",
    "ParseError",
    "Sign",
    "ValueSink",
    "extended_euclidean",
    "gcd",
    "mod_exp",
    "mod_inverse",
]
