#
# Arbitrary precision floating point values of any radix: correctly rounded reading and
# shortest output.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from .flags import *
from .signals import *
from .num import *
from .reader import *
from .formatter import *
from .text import *
from .context import *
from .floats import *

__all__ = ('FlagValues', 'Flags', 'flag_values', 'flags',
           'FlagError', 'InvalidFlagType', 'InvalidFlag', 'InvalidFlagValue', 'InvalidBits',
           'ROUND_CEILING', 'ROUND_FLOOR', 'ROUND_DOWN', 'ROUND_UP',
           'ROUND_HALF_EVEN', 'ROUND_HALF_UP', 'ROUND_HALF_DOWN', 'ROUNDINGS',
           'RadixFloatError', 'Condition', 'InvalidOperation', 'Overflow', 'Underflow',
           'Subnormal', 'Inexact', 'DigitLimitExceeded', 'CONDITIONS',
           'swap_directed', 'round_to_nearest', 'rounds_away',
           'Num', 'FINITE', 'INFINITE', 'QNAN', 'SNAN',
           'Reader', 'Formatter', 'DigitSequence',
           'TextFormat', 'DefaultTextFormat', 'parse_literal',
           'Context', 'binary_context', 'decimal_context', 'exact_context', 'single_context',
           'double_context', 'quad_context', 'decimal64_context', 'decimal128_context',
           'from_float', 'to_float', 'detect_float_rounding')
