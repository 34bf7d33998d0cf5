import random

import pytest

from radixfloat import *


all_roundings = (ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP,
                 ROUND_HALF_EVEN, ROUND_HALF_UP, ROUND_HALF_DOWN)


def read_digits(context, sign, sequence):
    coefficient = 0
    for digit in sequence.digits:
        coefficient = coefficient * sequence.radix + digit
    return context.create(sign, coefficient, sequence.scale - len(sequence.digits),
                          sequence.radix)


def random_values(rng, context, count):
    for _ in range(count):
        coefficient = rng.randrange(context.radix ** context.precision)
        exponent = rng.randrange(context.etiny, context.etop + 1)
        value = Num(context.radix, rng.choice((1, -1)), coefficient, exponent)
        if coefficient:
            yield value


@pytest.mark.parametrize('rounding', all_roundings)
@pytest.mark.parametrize('output_radix', (2, 10, 16))
def test_double_round_trip(rounding, output_radix):
    context = double_context(rounding=rounding)
    rng = random.Random(f'{rounding}{output_radix}')
    for value in random_values(rng, context, 200):
        sequence = context.to_digits(value, output_radix)
        assert read_digits(context, value.sign, sequence) == context.plus(value)


@pytest.mark.parametrize('rounding', all_roundings)
def test_decimal_binary_round_trip(rounding):
    # Decimal values through the shortest binary digits and back
    context = decimal_context(7, -30, 30, rounding=rounding)
    rng = random.Random(rounding)
    for value in random_values(rng, context, 200):
        sequence = context.to_digits(value, 2)
        assert read_digits(context, value.sign, sequence) == context.plus(value)


@pytest.mark.parametrize('rounding', all_roundings)
def test_same_radix(rounding):
    # Shortest digits in the value's own radix are its digits without trailing zeroes
    context = decimal64_context(rounding=rounding)
    rng = random.Random(rounding)
    for value in random_values(rng, context, 200):
        value = context.plus(value)
        sequence = context.to_digits(value)
        coefficient = int(''.join(str(digit) for digit in sequence.digits))
        exponent = sequence.scale - len(sequence.digits)
        assert Num(10, value.sign, coefficient, exponent) == value.normalize()


@pytest.mark.parametrize('rounding', all_roundings)
def test_text_round_trip(rounding):
    context = single_context(rounding=rounding)
    rng = random.Random(rounding)
    for value in random_values(rng, context, 200):
        value = context.plus(value)
        assert context.from_string(context.to_string(value)) == value


def test_float_repr_agrees():
    # Python's repr() produces the shortest round-tripping digits too
    context = double_context()
    rng = random.Random(1)
    for _ in range(500):
        value = rng.uniform(-1e10, 1e10) * 10.0 ** rng.randrange(-300, 290)
        digits = context.to_digits(from_float(value))
        text = ''.join(str(digit) for digit in digits.digits)
        mantissa = repr(abs(value)).split('e')[0].replace('.', '').lstrip('0').rstrip('0')
        assert text == mantissa
