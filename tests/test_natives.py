import pytest
from bigint_engine import (
    BAD_HANDLE,
    BigInteger,
    DivideByZero,
    HandleTable,
    InvalidArgument,
    InvalidReference,
    Mode,
    Natives,
    NoInverseExists,
    ParseError,
)


@pytest.fixture
def natives():
    return Natives()


def value(natives, handle):
    return int(natives.registry.read(handle))


def test_create_and_read(natives):
    h = natives.create(-42)
    assert h != BAD_HANDLE
    assert natives.to_int(h) == -42
    assert natives.to_string(h) == "-42"
    assert natives.get_sign(h) == -1


def test_create_from_string(natives):
    h = natives.create_from_string("123456789012345678901234567890")
    assert natives.to_string(h) == "123456789012345678901234567890"
    assert natives.to_string(natives.create_from_string("ff", 16), 2) == "11111111"
    with pytest.raises(ParseError):
        natives.create_from_string("12x")


def test_to_string_non_decimal_is_unsigned(natives):
    assert natives.to_string(natives.create(-255), 16) == "FF"


def test_to_int_wraps(natives):
    h = natives.create_from_string(str(2**32 + 5))
    assert natives.to_int(h) == 5


def test_compare_to(natives):
    a, b = natives.create(3), natives.create(5)
    assert natives.compare_to(a, b) == -1
    assert natives.compare_to(b, a) == 1
    assert natives.compare_to(a, a) == 0


def test_length_and_blocks(natives):
    h = natives.create_from_string(str(2**32 * 3 + 1))
    assert natives.get_length(h) == 2
    assert natives.get_block(h, 0) == 1
    assert natives.get_block(h, 1) == 3
    assert natives.get_length(natives.create(0)) == 0


def test_return_new_registers_result(natives):
    a, b = natives.create(7), natives.create(5)
    c = natives.add(a, b, Mode.RETURN_NEW)
    assert c not in (a, b)
    assert value(natives, c) == 12
    assert value(natives, a) == 7
    assert value(natives, b) == 5


def test_set_direct_overwrites_receiver(natives):
    a, b = natives.create(7), natives.create(5)
    before = len(natives.registry)
    assert natives.multiply(a, b, Mode.SET_DIRECT) == a
    assert value(natives, a) == 35
    assert value(natives, b) == 5
    assert len(natives.registry) == before


@pytest.mark.parametrize("name,expected", [
    ("subtract", -9),
    ("divide", -3),
    ("divide_remainder", -1),
])
def test_arithmetic_modes(natives, name, expected):
    op = getattr(natives, name)
    a, b = natives.create(-7), natives.create(2)
    assert value(natives, op(a, b, Mode.RETURN_NEW)) == expected
    assert value(natives, a) == -7
    assert op(a, b, Mode.SET_DIRECT) == a
    assert value(natives, a) == expected


def test_negate_modes(natives):
    a = natives.create(9)
    assert value(natives, natives.negate(a)) == -9
    assert natives.negate(a, Mode.SET_DIRECT) == a
    assert value(natives, a) == -9


def test_set_direct_failure_leaves_receiver(natives):
    a, zero = natives.create(10), natives.create(0)
    with pytest.raises(DivideByZero):
        natives.divide(a, zero, Mode.SET_DIRECT)
    assert value(natives, a) == 10


def test_bad_mode(natives):
    a = natives.create(1)
    with pytest.raises(InvalidArgument):
        natives.add(a, a, 7)


def test_bitwise(natives):
    a, b = natives.create(-7), natives.create(3)
    assert value(natives, natives.bit_and(a, b)) == 3
    assert value(natives, natives.bit_or(a, b)) == 7
    assert value(natives, natives.bit_xor(a, b)) == 4
    assert value(natives, natives.bit_shift_left(a, 3)) == 56
    assert value(natives, natives.bit_shift_right(a, 1)) == 3
    with pytest.raises(InvalidArgument):
        natives.bit_shift_left(a, -1)


def test_number_theory(natives):
    assert value(natives, natives.gcd(natives.create(-12), natives.create(18))) == 6
    assert value(natives, natives.mod_inv(natives.create(3), natives.create(11))) == 4
    assert value(natives, natives.mod_inv(natives.create(3), natives.create(1))) == 0
    h = natives.mod_exp(natives.create(4), natives.create(13), natives.create(497))
    assert value(natives, h) == 445


def test_euclidean_selected_outputs(natives):
    x, y = natives.create(240), natives.create(46)
    g, r, s = natives.euclidean(x, y)
    assert value(natives, g) == 2
    assert value(natives, r) * 240 + value(natives, s) * 46 == 2

    before = len(natives.registry)
    g, r, s = natives.euclidean(x, y, want_r=False, want_s=False)
    assert value(natives, g) == 2
    assert r == BAD_HANDLE
    assert s == BAD_HANDLE
    assert len(natives.registry) == before + 1


def test_failed_operation_registers_nothing(natives):
    a, m = natives.create(6), natives.create(9)
    before = len(natives.registry)
    with pytest.raises(NoInverseExists):
        natives.mod_inv(a, m)
    with pytest.raises(DivideByZero):
        natives.divide(a, natives.create(0))
    assert len(natives.registry) == before + 1


def test_invalid_handles(natives):
    with pytest.raises(InvalidReference):
        natives.to_int(BAD_HANDLE)
    with pytest.raises(InvalidReference) as excinfo:
        natives.add(natives.create(1), 9999)
    assert excinfo.value.handle == 9999


def test_destroyed_handle():
    table = HandleTable()
    natives = Natives(table)
    h = natives.create(5)
    table.destroy(h)
    with pytest.raises(InvalidReference):
        natives.to_int(h)
    with pytest.raises(InvalidReference):
        table.destroy(h)


def test_registration_failure_returns_bad_handle():
    natives = Natives(HandleTable(max_handles=2))
    a = natives.create(1)
    b = natives.create(2)
    assert natives.create(3) == BAD_HANDLE
    assert natives.add(a, b) == BAD_HANDLE
    assert natives.add(a, b, Mode.SET_DIRECT) == a
    assert natives.to_int(a) == 3


def test_call_by_native_name(natives):
    a = natives.call("BigInt_Create", 20)
    b = natives.call("BigInt_CreateFromString", "22")
    c = natives.call("BigInt_Add", a, b, Mode.RETURN_NEW)
    assert natives.call("BigInt_ToString", c, 10) == "42"
    assert "BigInt_ModExp" in natives.names
    with pytest.raises(InvalidArgument):
        natives.call("BigInt_Sqrt", a)


def test_custom_registry():
    class ListSink:
        def __init__(self):
            self.values = [None]

        def register(self, value):
            self.values.append(value)
            return len(self.values) - 1

        def read(self, handle):
            if not 0 < handle < len(self.values):
                raise InvalidReference(handle)
            return self.values[handle]

    sink = ListSink()
    natives = Natives(sink)
    h = natives.multiply(natives.create(6), natives.create(7))
    assert sink.values[h] == BigInteger(42)
