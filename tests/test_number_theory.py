import math
import random

import pytest
from bigint_engine import (
    BigInteger,
    InvalidArgument,
    NoInverseExists,
    Sign,
    extended_euclidean,
    gcd,
    mod_exp,
    mod_inverse,
)


class TestGCD:
    def test_basic(self):
        assert gcd(BigInteger(12), BigInteger(18)) == 6
        assert gcd(BigInteger(-12), BigInteger(18)) == 6
        assert gcd(BigInteger(-12), BigInteger(-18)) == 6
        assert gcd(BigInteger(17), BigInteger(5)) == 1

    def test_zero(self):
        assert gcd(BigInteger(0), BigInteger(0)) == 0
        assert gcd(BigInteger(0), BigInteger(-9)) == 9
        assert gcd(BigInteger(9), BigInteger(0)) == 9

    def test_small_exhaustive(self):
        for a in range(-30, 31):
            for b in range(-30, 31):
                result = gcd(BigInteger(a), BigInteger(b))
                assert result == math.gcd(a, b)
                assert result.sign != Sign.NEGATIVE

    def test_large(self):
        p = 2**127 - 1
        a, b = p * (3**80), p * (5**60)
        assert gcd(BigInteger(a), BigInteger(b)) == p


class TestExtendedEuclidean:
    def check(self, x, y):
        g, r, s = extended_euclidean(BigInteger(x), BigInteger(y))
        assert g == math.gcd(x, y)
        assert int(r) * x + int(s) * y == int(g)

    def test_textbook(self):
        g, r, s = extended_euclidean(BigInteger(240), BigInteger(46))
        assert g == 2
        assert int(r) * 240 + int(s) * 46 == 2

    def test_zero_inputs(self):
        g, r, s = extended_euclidean(BigInteger(0), BigInteger(0))
        assert g == 0
        self.check(0, 7)
        self.check(7, 0)
        self.check(-7, 0)
        self.check(0, -7)

    def test_negative_inputs(self):
        for x, y in [(-4, 6), (4, -6), (-4, -6), (-35, 15), (99, -78)]:
            self.check(x, y)

    def test_small_exhaustive(self):
        for x in range(-25, 26):
            for y in range(-25, 26):
                self.check(x, y)

    def test_large(self):
        random.seed(3)
        for _ in range(20):
            self.check(random.randint(-(1 << 400), 1 << 400), random.randint(-(1 << 300), 1 << 300))

    def test_inputs_unchanged(self):
        x, y = BigInteger(240), BigInteger(46)
        extended_euclidean(x, y)
        assert x == 240
        assert y == 46


class TestModInverse:
    def test_basic(self):
        assert mod_inverse(BigInteger(3), BigInteger(11)) == 4
        assert mod_inverse(BigInteger(10), BigInteger(17)) == 12

    def test_negative_value(self):
        v = mod_inverse(BigInteger(-3), BigInteger(11))
        assert v == 7
        assert ((-3) * int(v)) % 11 == 1

    def test_value_larger_than_modulus(self):
        v = mod_inverse(BigInteger(3 + 11 * 10**20), BigInteger(11))
        assert v == 4

    def test_range_and_identity(self):
        for m in range(2, 40):
            for x in range(-40, 41):
                if math.gcd(x, m) != 1:
                    with pytest.raises(NoInverseExists):
                        mod_inverse(BigInteger(x), BigInteger(m))
                    continue
                v = mod_inverse(BigInteger(x), BigInteger(m))
                assert 0 <= int(v) < m
                assert (x * int(v)) % m == 1

    def test_large_prime_modulus(self):
        p = 2**521 - 1
        x = 3**300
        v = mod_inverse(BigInteger(x), BigInteger(p))
        assert int(v) == pow(x, -1, p)

    def test_no_inverse(self):
        with pytest.raises(NoInverseExists) as excinfo:
            mod_inverse(BigInteger(6), BigInteger(9))
        assert excinfo.value.value == 6
        assert excinfo.value.modulus == 9

    @pytest.mark.parametrize("m", [0, -11])
    def test_bad_modulus(self, m):
        with pytest.raises(NoInverseExists):
            mod_inverse(BigInteger(3), BigInteger(m))

    @pytest.mark.parametrize("x", [0, 1, 3, -8, 10**40])
    def test_modulus_one(self, x):
        # [0, 1) には 0 しかない
        v = mod_inverse(BigInteger(x), BigInteger(1))
        assert v == 0
        assert v.sign == Sign.ZERO


class TestModExp:
    def test_known_value(self):
        assert mod_exp(BigInteger(4), BigInteger(13), BigInteger(497)) == 445

    def test_against_repeated_multiplication(self):
        for b in range(0, 12):
            for e in range(0, 12):
                for m in (1, 2, 7, 13, 100):
                    expected = BigInteger(1)
                    for _ in range(e):
                        expected = expected * BigInteger(b)
                    expected = expected.remainder(BigInteger(m))
                    assert mod_exp(BigInteger(b), BigInteger(e), BigInteger(m)) == expected

    def test_negative_base(self):
        assert mod_exp(BigInteger(-2), BigInteger(3), BigInteger(5)) == pow(-2, 3, 5)
        for b in range(-15, 0):
            assert mod_exp(BigInteger(b), BigInteger(5), BigInteger(11)) == pow(b, 5, 11)

    def test_zero_exponent(self):
        assert mod_exp(BigInteger(9), BigInteger(0), BigInteger(7)) == 1
        assert mod_exp(BigInteger(9), BigInteger(0), BigInteger(1)) == 0

    def test_large(self):
        b, e, m = 3**200 + 1, 2**255 - 19, 2**521 - 1
        assert int(mod_exp(BigInteger(b), BigInteger(e), BigInteger(m))) == pow(b, e, m)

    @pytest.mark.parametrize("m", [0, -5])
    def test_bad_modulus(self, m):
        with pytest.raises(InvalidArgument) as excinfo:
            mod_exp(BigInteger(2), BigInteger(3), BigInteger(m))
        assert excinfo.value.argument == "modulus"

    def test_negative_exponent(self):
        with pytest.raises(InvalidArgument) as excinfo:
            mod_exp(BigInteger(2), BigInteger(-1), BigInteger(7))
        assert excinfo.value.argument == "exponent"
