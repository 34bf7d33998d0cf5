#
# Conversions between Python floats and Num values.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from math import copysign, frexp, inf, isinf, isnan, ldexp, nan
from sys import float_info

from .num import Num
from .signals import (
    ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP, ROUND_HALF_EVEN, ROUND_HALF_UP,
    ROUND_HALF_DOWN,
)

__all__ = ('from_float', 'to_float', 'detect_float_rounding')


def from_float(value):
    '''Return a binary Num exactly equal to the Python float value.'''
    if not isinstance(value, float):
        raise TypeError('from_float requires a float')
    sign = -1 if copysign(1.0, value) < 0 else 1
    if isnan(value):
        return Num.nan(2, sign)
    if isinf(value):
        return Num.infinity(2, sign)
    if value == 0:
        return Num.zero(2, sign)
    fraction, exponent = frexp(abs(value))
    coefficient = int(ldexp(fraction, float_info.mant_dig))
    return Num(2, sign, coefficient, exponent - float_info.mant_dig).normalize()


def to_float(value):
    '''Return the Python float nearest to value, which can be of any radix.  Values beyond
    the float range become infinities.'''
    if value.is_nan():
        return copysign(nan, value.sign)
    if value.is_infinite():
        return value.sign * inf
    if value.is_zero():
        return copysign(0.0, value.sign)
    try:
        if value.radix == 2 and value.coefficient.bit_length() <= float_info.mant_dig:
            return ldexp(value.sign * value.coefficient, value.exponent)
        n, d = value.as_integer_ratio()
        # Integer true division is correctly rounded
        return n / d
    except OverflowError:
        return value.sign * inf


def detect_float_rounding():
    '''Return the rounding mode of the addition of Python floats.  On IEEE hosts this is
    ROUND_HALF_EVEN.'''
    radix = float_info.radix
    x = ldexp(1.0, float_info.mant_dig + 1)     # radix^(mant_dig + 1)
    y = x + ldexp(1.0, 2)                       # its successor
    half = radix // 2
    b = half * radix
    z = radix ** 2 - 1
    if x + 1 == y:
        if -x - 1 == -y:
            return ROUND_UP
        return ROUND_CEILING
    # x + 1 == x
    if x + z == x:
        if -x - z == -x:
            return ROUND_DOWN
        return ROUND_FLOOR
    # x + z == y; round to nearest
    if x + b == x:
        if y + b == y:
            return ROUND_HALF_DOWN
        return ROUND_HALF_EVEN
    return ROUND_HALF_UP
