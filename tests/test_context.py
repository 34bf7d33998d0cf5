from sys import float_info

import pytest

from radixfloat import *


point_one = Num(2, 1, 7205759403792794, -56)


@pytest.fixture
def small_decimal():
    return decimal_context(3, -5, 5)


class TestContext:

    @pytest.mark.parametrize('kwargs, exception', (
        ({'radix': 1}, ValueError),
        ({'radix': 10.0}, TypeError),
        ({'precision': 0}, ValueError),
        ({'precision': True}, TypeError),
        ({'rounding': 'ROUND_SIDEWAYS'}, ValueError),
        ({'emin': 5, 'emax': 4}, ValueError),
        ({'emax': '10'}, TypeError),
    ))
    def test_invalid(self, kwargs, exception):
        with pytest.raises(exception):
            Context(**kwargs)

    def test_keyword_only(self):
        with pytest.raises(TypeError):
            Context(10)

    def test_defaults(self):
        context = Context()
        assert context.radix == 10
        assert context.precision == 28
        assert context.rounding == ROUND_HALF_EVEN
        assert not context.exact
        assert not context.flags
        assert not context.traps
        assert context.flags.values == CONDITIONS

    def test_exact_context(self):
        context = exact_context(16)
        assert context.exact and context.precision == 0
        assert context.radix == 16
        assert exact_context(emin=-10).emin == -10

    @pytest.mark.parametrize('value, result', (
        ([Inexact], ['Inexact']),
        ([Overflow, InvalidOperation], ['InvalidOperation', 'Overflow']),
        (1, ['InvalidOperation']),
        (0, []),
        (None, []),
        (Flags(Subnormal), ['Subnormal']),
    ))
    def test_flags_conversion(self, value, result):
        context = Context(flags=value, traps=value)
        for flags in (context.flags, context.traps):
            assert flags.values == CONDITIONS
            assert [flag.__name__ for flag in flags.to_list()] == result

    def test_flags_shared(self):
        flags = Flags(values=CONDITIONS)
        context = Context(flags=flags)
        assert context.flags is flags
        context.working_context(5).flags.set(Inexact)
        assert flags[Inexact]

    def test_unknown_flag(self):
        with pytest.raises(InvalidFlag):
            Context(traps=['Inexact'])

    def test_copy(self):
        context = double_context(traps=[Overflow])
        copy = context.copy(rounding=ROUND_UP)
        assert copy.rounding == ROUND_UP
        assert copy.precision == 53
        assert copy.traps[Overflow]
        copy.flags.set(Inexact)
        copy.traps.clear(Overflow)
        assert not context.flags
        assert context.traps[Overflow]

    def test_working_context(self, small_decimal):
        small_decimal.traps.set(Underflow)
        work = small_decimal.working_context(10)
        assert work.precision == 10 and not work.exact
        assert work.emin == -5 and work.emax == 5
        assert work.traps is small_decimal.traps

    @pytest.mark.parametrize('context, etiny, etop', (
        (double_context(), -1074, 971),
        (single_context(), -149, 104),
        (quad_context(), -16494, 16271),
        (decimal64_context(), -398, 369),
        (decimal128_context(), -6176, 6111),
        (decimal_context(3, -5, 5), -7, 3),
    ))
    def test_exponent_range(self, context, etiny, etop):
        assert context.etiny == etiny
        assert context.etop == etop

    def test_double_limits(self):
        context = double_context()
        assert to_float(context.largest_finite()) == float_info.max
        assert to_float(context.largest_finite(-1)) == -float_info.max
        assert to_float(context.smallest_normal()) == float_info.min
        assert to_float(context.smallest_subnormal()) == 5e-324

    def test_constructors(self, small_decimal):
        assert small_decimal.infinity(-1) == Num.infinity(10, -1)
        assert small_decimal.nan(1, 5) == Num.nan(10, 1, 5)
        assert small_decimal.snan(-1) == Num.snan(10, -1)
        assert small_decimal.largest_finite() == Num(10, 1, 999, 3)
        assert small_decimal.smallest_subnormal(-1) == Num(10, -1, 1, -7)
        assert small_decimal.smallest_normal() == Num(10, 1, 100, -7)

    @pytest.mark.parametrize('context, exponent', (
        (double_context(), 0),
        (decimal_context(3, 5, 10), 3),
        (decimal_context(3, -10, -5), -7),
    ))
    def test_zero(self, context, exponent):
        assert context.zero(-1) == Num(context.radix, -1, 0, exponent)

    @pytest.mark.parametrize('sign, coefficient, exponent, rounding, result', (
        (1, 123, 1, None, Num(10, 1, 123, 1)),
        (1, 123, 4, None, Num.infinity(10)),
        (1, 123, 4, ROUND_DOWN, Num(10, 1, 999, 3)),
        (-1, 123, 4, ROUND_CEILING, Num(10, -1, 999, 3)),
        (-1, 123, 4, ROUND_FLOOR, Num.infinity(10, -1)),
        (1, 0, 10, None, Num(10, 1, 0, 10)),
    ))
    def test_make(self, small_decimal, sign, coefficient, exponent, rounding, result):
        assert small_decimal.make(sign, coefficient, exponent, rounding) == result
        assert not small_decimal.flags

    @pytest.mark.parametrize('value, result', (
        (Num(10, 1, 999, -2), Num(10, 1, 100, -1)),
        (Num(10, 1, 5, 0), Num(10, 1, 501, -2)),
        (Num(10, 1, 0, 0), Num(10, 1, 1, -7)),
        (Num(10, -1, 0, 0), Num(10, 1, 1, -7)),
        (Num(10, 1, 999, 3), Num.infinity(10)),
        (Num.infinity(10), Num.infinity(10)),
        (Num.infinity(10, -1), Num(10, -1, 999, 3)),
        (Num(10, -1, 1, -7), Num(10, -1, 0, -7)),
        (Num(10, -1, 100, -1), Num(10, -1, 999, -2)),
        (Num(10, 1, 12, -7), Num(10, 1, 13, -7)),
        (Num(10, 1, 99, -7), Num(10, 1, 100, -7)),
        (Num.nan(10, -1, 3), Num.nan(10, -1, 3)),
    ))
    def test_next_plus(self, small_decimal, value, result):
        assert small_decimal.next_plus(value) == result
        # next_minus is its mirror image
        assert small_decimal.next_minus(value.copy_negate()) == result.copy_negate()
        assert not small_decimal.flags

    def test_next_snan(self, small_decimal):
        value = Num.snan(10, -1, 4)
        assert small_decimal.next_plus(value) == Num.nan(10, -1, 4)
        assert small_decimal.flags.to_list() == [InvalidOperation]
        small_decimal.traps.set(InvalidOperation)
        with pytest.raises(InvalidOperation) as e:
            small_decimal.next_minus(value)
        assert e.value.op_tuple == ('next_minus', value)

    def test_next_walk(self, small_decimal):
        # Stepping up and down through the subnormals and normals is consistent
        value = small_decimal.smallest_subnormal()
        seen = []
        while value.adjusted_exponent() < -3:
            seen.append(value)
            value = small_decimal.next_plus(value)
        for previous in reversed(seen):
            value = small_decimal.next_minus(value)
            assert value == previous
        assert len(seen) == 1899

    def test_convert_decimal64(self):
        context = decimal64_context()
        assert context.convert(point_one) == Num(10, 1, 10 ** 15, -16)
        assert context.flags.to_list() == [Inexact]

    def test_convert_decimal128(self):
        context = decimal128_context()
        assert context.convert(point_one) == Num(10, 1, 1000000000000000055511151231257827, -34)

    def test_convert_to_binary(self):
        context = double_context()
        assert context.convert(Num(10, 1, 1, -1)) == point_one
        assert context.convert(Num(10, -1, 25, -1)).normalize() == Num(2, -1, 5, -1)

    def test_convert_shortest(self):
        context = decimal128_context()
        assert context.convert_shortest(point_one, double_context()) == Num(10, 1, 10 ** 33, -34)
        assert not context.flags

    def test_convert_shortest_binary(self):
        context = double_context()
        value = decimal64_context().from_string('0.5')
        result = context.convert_shortest(value, decimal64_context())
        assert result.normalize() == Num(2, 1, 1, -1)

    @pytest.mark.parametrize('value', (
        Num.infinity(2, -1), Num.nan(2, 1, 9),
    ))
    def test_convert_specials(self, value):
        context = decimal128_context()
        result = context.convert_shortest(value, double_context())
        assert result == value._replace(radix=10)
        assert context.convert(value) == result

    def test_plus_snan(self):
        context = double_context()
        assert context.plus(Num.snan(10, -1, 3)) == Num.nan(2, -1, 3)
        assert context.flags[InvalidOperation]
        context = double_context(traps=[InvalidOperation])
        with pytest.raises(InvalidOperation) as e:
            context.plus(Num.snan(10))
        assert e.value.default_result == Num.nan(2)

    def test_plus_rounds(self, small_decimal):
        assert small_decimal.plus(Num(10, -1, 12345, -4)) == Num(10, -1, 123, -2)
        assert small_decimal.flags.to_list() == [Inexact]

    def test_exact_plus(self):
        context = exact_context(10)
        value = context.plus(Num(2, 1, 1, -3))
        assert value.normalize() == Num(10, 1, 125, -3)
        assert not context.flags

    def test_create(self, small_decimal):
        assert small_decimal.create(1, 1, -1) == Num(10, 1, 100, -3)
        assert small_decimal.create(1, 1, -1, 2) == Num(10, 1, 500, -3)
        assert small_decimal.create(1, 2, -3, 3, ROUND_DOWN) == Num(10, 1, 740, -4)

    def test_to_digits(self):
        context = double_context()
        assert context.to_digits(point_one) == DigitSequence(0, [1], False, 10)
        assert context.to_digits(point_one, 16) == DigitSequence(
            0, [1, 9, 9, 9, 9, 9, 9, 9, 9, 9, 9, 9, 9, 10], False, 16)

    @pytest.mark.parametrize('value', (Num.infinity(2), Num.nan(2), Num.snan(2)))
    def test_to_digits_special(self, value):
        with pytest.raises(ValueError):
            double_context().to_digits(value)

    def test_formatting_leaves_flags(self):
        context = double_context(traps=[Subnormal, Underflow, Inexact])
        value = context.smallest_subnormal()
        assert context.to_string(value) == '5E-324'
        assert context.to_digits(value) == DigitSequence(-323, [5], False, 10)
        # Values are rounded to the context first
        assert context.to_string(Num(10, 1, 1, -1)) == '0.1'
        assert context.to_string(Num(10, -1, 1, -400)) == '-0'
        assert not context.flags

    @pytest.mark.parametrize('value, text', (
        (Num(3, 1, 26, 3), '702'),
        (Num(2, 1, 5, -3), '0.625'),
        (Num(2, 1, 7, 7), '896'),
        (Num(16, -1, 255, -2), '-0.99609375'),
        (Num(10, 1, 1200, -2), '12'),
    ))
    def test_exact_to_string(self, value, text):
        context = exact_context(value.radix)
        assert context.to_string(value) == text
        assert str(value) == text
        assert context.from_string(text).normalize() == value.normalize()
        assert not context.flags

    def test_exact_to_string_recurring(self):
        # A third has no terminating decimal expansion
        context = exact_context(3)
        assert context.to_string(Num(3, 1, 1, -1)) == '0.3'
        assert context.to_string(Num(2, 1, 3, 0), 3) == '10'


class TestRoundingHelpers:

    @pytest.mark.parametrize('rounding, sign, result', (
        (ROUND_CEILING, -1, ROUND_FLOOR),
        (ROUND_FLOOR, -1, ROUND_CEILING),
        (ROUND_CEILING, 1, ROUND_CEILING),
        (ROUND_UP, -1, ROUND_UP),
        (ROUND_HALF_EVEN, -1, ROUND_HALF_EVEN),
    ))
    def test_swap_directed(self, rounding, sign, result):
        assert swap_directed(rounding, sign) == result

    @pytest.mark.parametrize('rounding', ROUNDINGS)
    def test_round_to_nearest(self, rounding):
        assert round_to_nearest(rounding) == rounding.startswith('ROUND_HALF')

    @pytest.mark.parametrize('rounding, sign, result', (
        (ROUND_HALF_EVEN, 1, True),
        (ROUND_HALF_DOWN, -1, True),
        (ROUND_UP, -1, True),
        (ROUND_DOWN, 1, False),
        (ROUND_CEILING, 1, True),
        (ROUND_CEILING, -1, False),
        (ROUND_FLOOR, 1, False),
        (ROUND_FLOOR, -1, True),
    ))
    def test_rounds_away(self, rounding, sign, result):
        assert rounds_away(rounding, sign) is result
