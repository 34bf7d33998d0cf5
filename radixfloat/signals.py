#
# Rounding modes and the conditions that operations signal.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from .flags import FlagValues

__all__ = ('ROUND_CEILING', 'ROUND_FLOOR', 'ROUND_DOWN', 'ROUND_UP',
           'ROUND_HALF_EVEN', 'ROUND_HALF_UP', 'ROUND_HALF_DOWN', 'ROUNDINGS',
           'RadixFloatError', 'Condition', 'InvalidOperation', 'Overflow', 'Underflow',
           'Subnormal', 'Inexact', 'DigitLimitExceeded', 'CONDITIONS',
           'swap_directed', 'round_to_nearest', 'rounds_away')


# Rounding modes
ROUND_CEILING   = 'ROUND_CEILING'       # Towards +infinity
ROUND_FLOOR     = 'ROUND_FLOOR'         # Towards -infinity
ROUND_DOWN      = 'ROUND_DOWN'          # Towards zero
ROUND_UP        = 'ROUND_UP'            # Away from zero
ROUND_HALF_EVEN = 'ROUND_HALF_EVEN'     # To nearest with ties towards even
ROUND_HALF_DOWN = 'ROUND_HALF_DOWN'     # To nearest with ties towards zero
ROUND_HALF_UP   = 'ROUND_HALF_UP'       # To nearest with ties away from zero

ROUNDINGS = (ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP,
             ROUND_HALF_EVEN, ROUND_HALF_DOWN, ROUND_HALF_UP)

# Operation names
OP_READ = 'read'
OP_NEXT_PLUS = 'next_plus'
OP_NEXT_MINUS = 'next_minus'
OP_PLUS = 'plus'


def swap_directed(rounding, sign):
    '''Return the rounding mode that rounds the magnitude of a value of the given sign as
    rounding rounds the value.  Only ceiling and floor care about the sign.'''
    if sign < 0:
        if rounding == ROUND_CEILING:
            return ROUND_FLOOR
        if rounding == ROUND_FLOOR:
            return ROUND_CEILING
    return rounding


def round_to_nearest(rounding):
    '''Return True if the rounding mode rounds to nearest (ignoring ties).'''
    return rounding in {ROUND_HALF_EVEN, ROUND_HALF_DOWN, ROUND_HALF_UP}


def rounds_away(rounding, sign):
    '''Return True if, for a value of the given sign that lies beyond the largest finite
    value, rounding delivers an infinity.'''
    rounding = swap_directed(rounding, sign)
    return rounding not in {ROUND_DOWN, ROUND_FLOOR}


#
# Signals
#

class RadixFloatError(ArithmeticError):
    '''All arithmetic exceptions raised by this package subclass from this.'''


class Condition(RadixFloatError):
    '''Base class of the conditions an operation can signal.

    A Condition expects two arguments:

         def __init__(self, op_tuple, result):

    op_tuple is a tuple of the operation name and operands causing the signal.  result is
    the result that is delivered if the condition is not trapped.
    '''

    @property
    def op_tuple(self):
        return self.args[0]

    @property
    def default_result(self):
        return self.args[1]

    @classmethod
    def flag(cls):
        '''The flag in CONDITIONS that this condition raises.'''
        for base in cls.__mro__:
            if base in CONDITIONS:
                return base
        raise RuntimeError(f'{cls.__name__} has no condition flag')

    def signal(self, context):
        '''Call to signal the condition.  Raises the condition's flag in the context, and then
        raises this exception if the context traps it.  Otherwise returns the default
        result.'''
        flag = self.flag()
        context.flags.set(flag)
        if context.traps[flag]:
            raise self
        return self.default_result


class InvalidOperation(Condition):
    '''Signalled when an operation has no usefully definable result, e.g. when a signalling NaN
    is an operand.  The default result is a quiet NaN.'''


class Inexact(Condition):
    '''Signalled when the infinitely precise result cannot be represented.'''


class Overflow(Condition):
    '''Signalled when, after rounding, the result would have an exponent exceeding emax.  The
    default result is either infinity, or the finite value of the greatest magnitude,
    depending on the rounding mode and sign.'''

    def signal(self, context):
        '''Defer to the base class for standard handling; then signal inexact.'''
        result = super().signal(context)
        return Inexact(self.op_tuple, result).signal(context)


class Subnormal(Condition):
    '''Signalled when a result is subnormal or zero because it lies below the smallest normal
    value of the context.'''


class Underflow(Condition):
    '''Signalled when a tiny result is also inexact.'''

    def signal(self, context):
        '''Defer to the base class for standard handling; then signal inexact.'''
        result = super().signal(context)
        return Inexact(self.op_tuple, result).signal(context)


class DigitLimitExceeded(RadixFloatError):
    '''Raised when generating all the digits of a value needs more digits than permitted, which
    happens when the value has no terminating expansion in the output radix.'''


CONDITIONS = FlagValues(InvalidOperation, Overflow, Underflow, Subnormal, Inexact)
