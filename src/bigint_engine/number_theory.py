"""最大公約数, 拡張ユークリッド, モジュラ逆元, べき剰余"""

from __future__ import annotations

import logging

from .big_integer import BigInteger, Sign
from .errors import InvalidArgument, NoInverseExists

logger = logging.getLogger(__name__)


def _mod_floor(x: BigInteger, m: BigInteger) -> BigInteger:
    """正の m について x を [0, m) に収める"""
    r = x.remainder(m)
    if r.sign == Sign.NEGATIVE:
        r.add_in_place(m)
    return r


def gcd(x: BigInteger, y: BigInteger) -> BigInteger:
    """絶対値どうしの最大公約数 (gcd(0, 0) == 0)"""
    a, b = abs(x), abs(y)
    while not b.is_zero():
        a, b = b, a.remainder(b)
    return a


def extended_euclidean(x: BigInteger, y: BigInteger) -> tuple[BigInteger, BigInteger, BigInteger]:
    """g == r*x + s*y かつ g == gcd(x, y) となる (g, r, s) を返す

    切り捨て除算による2行の漸化式。入力が負だと g が負で終わることがあり、
    その場合は3つとも符号を反転する。
    """
    m, n = +x, +y
    r1, s1 = BigInteger(1), BigInteger(0)
    r2, s2 = BigInteger(0), BigInteger(1)
    while True:
        if n.is_zero():
            g, r, s = m, r1, s1
            break
        q = m.divide(n)
        m.subtract_in_place(q * n)
        r1.subtract_in_place(q * r2)
        s1.subtract_in_place(q * s2)
        if m.is_zero():
            g, r, s = n, r2, s2
            break
        q = n.divide(m)
        n.subtract_in_place(q * m)
        r2.subtract_in_place(q * r1)
        s2.subtract_in_place(q * s1)

    if g.sign == Sign.NEGATIVE:
        g.negate_in_place()
        r.negate_in_place()
        s.negate_in_place()
    return g, r, s


def mod_inverse(x: BigInteger, m: BigInteger) -> BigInteger:
    """x*v == 1 (mod m) となる [0, m) の v

    m == 1 では [0, 1) に 0 しかないので 0 を返す。
    """
    if m.sign != Sign.POSITIVE:
        logger.debug("mod_inverse: modulus %s admits no inverse", m)
        raise NoInverseExists(x, m)
    g, r, _ = extended_euclidean(_mod_floor(x, m), m)
    if g != 1:
        logger.debug("mod_inverse: gcd(%s, %s) = %s", x, m, g)
        raise NoInverseExists(x, m)
    return _mod_floor(r, m)


def mod_exp(base: BigInteger, exponent: BigInteger, modulus: BigInteger) -> BigInteger:
    """base**exponent mod modulus を左から右へのバイナリ法で計算する

    積を取るたびに剰余を取るので、途中の値は modulus**2 を超えない。
    """
    if modulus.sign != Sign.POSITIVE:
        raise InvalidArgument("modulus", modulus)
    if exponent.sign == Sign.NEGATIVE:
        raise InvalidArgument("exponent", exponent)

    b = _mod_floor(base, modulus)
    result = BigInteger(1).remainder(modulus)
    for i in range(exponent.bit_length() - 1, -1, -1):
        result.multiply_in_place(result)
        result.remainder_in_place(modulus)
        if exponent.test_bit(i):
            result.multiply_in_place(b)
            result.remainder_in_place(modulus)
    return result


def power(base: BigInteger, exponent: BigInteger) -> BigInteger:
    if exponent.sign == Sign.NEGATIVE:
        raise InvalidArgument("exponent", exponent)
    result = BigInteger(1)
    for i in range(exponent.bit_length() - 1, -1, -1):
        result.multiply_in_place(result)
        if exponent.test_bit(i):
            result.multiply_in_place(base)
    return result
