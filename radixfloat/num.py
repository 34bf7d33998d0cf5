#
# Floating point values of arbitrary radix.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from collections import namedtuple
from fractions import Fraction
from math import log

__all__ = ('Num', 'FINITE', 'INFINITE', 'QNAN', 'SNAN')


# Kinds of value
FINITE = 'F'
INFINITE = 'I'
QNAN = 'Q'
SNAN = 'S'


class Num(namedtuple('Num', 'radix sign coefficient exponent kind')):
    '''A floating point value in a given radix.

    Finite values have the magnitude coefficient * radix^exponent, where the coefficient
    is a non-negative integer and the exponent is an integer.  sign is +1 or -1, and is
    meaningful for zeroes, infinities and NaNs too.

    Infinities have a coefficient and exponent of zero.  NaNs keep their payload in the
    coefficient and have an exponent of zero.

    Values do not know their precision; that, the exponent range and the rounding mode
    are properties of the Context an operation is performed in.
    '''

    __slots__ = ()

    def __new__(cls, radix, sign, coefficient, exponent=0, kind=FINITE):
        '''Validate and create a value with the given radix, sign, coefficient and exponent.'''
        if not isinstance(radix, int) or radix < 2:
            raise ValueError(f'radix must be an integer of at least 2: {radix!r}')
        if sign not in (1, -1):
            raise ValueError(f'sign must be +1 or -1: {sign!r}')
        if not isinstance(coefficient, int):
            raise TypeError('coefficient must be an integer')
        if not isinstance(exponent, int):
            raise TypeError('exponent must be an integer')
        if coefficient < 0:
            raise ValueError(f'coefficient {coefficient:,d} cannot be negative')
        if kind not in (FINITE, INFINITE, QNAN, SNAN):
            raise ValueError(f'invalid kind: {kind!r}')
        if kind != FINITE:
            if exponent:
                raise ValueError('non-finite values have a zero exponent')
            if kind == INFINITE and coefficient:
                raise ValueError('infinities have a zero coefficient')
        return super().__new__(cls, radix, int(sign), coefficient, exponent, kind)

    @classmethod
    def infinity(cls, radix, sign=1):
        return cls(radix, sign, 0, 0, INFINITE)

    @classmethod
    def nan(cls, radix, sign=1, payload=0):
        return cls(radix, sign, payload, 0, QNAN)

    @classmethod
    def snan(cls, radix, sign=1, payload=0):
        return cls(radix, sign, payload, 0, SNAN)

    @classmethod
    def zero(cls, radix, sign=1, exponent=0):
        return cls(radix, sign, 0, exponent)

    ##
    ## Non-computational operations
    ##

    def is_finite(self):
        return self.kind == FINITE

    def is_zero(self):
        return self.kind == FINITE and self.coefficient == 0

    def is_infinite(self):
        return self.kind == INFINITE

    def is_nan(self):
        '''Return True if this is a NaN of any kind.'''
        return self.kind in (QNAN, SNAN)

    def is_qnan(self):
        return self.kind == QNAN

    def is_snan(self):
        return self.kind == SNAN

    def is_special(self):
        '''Return True for infinities and NaNs.'''
        return self.kind != FINITE

    def is_negative(self):
        '''Return True if the sign is negative, including for zeroes and NaNs.'''
        return self.sign < 0

    def number_of_digits(self):
        '''The number of radix digits of the coefficient; zero has one digit.'''
        coefficient = self.coefficient
        radix = self.radix
        if coefficient == 0:
            return 1
        if radix == 2:
            return coefficient.bit_length()
        # Estimate from the bit length and correct; the estimate is never too large
        count = max(1, int((coefficient.bit_length() - 1) * log(2) / log(radix)))
        power = radix ** count
        while power <= coefficient:
            power *= radix
            count += 1
        while count > 1 and power // radix > coefficient:
            power //= radix
            count -= 1
        return count

    def adjusted_exponent(self):
        '''The exponent of the most significant digit, i.e. the exponent the value has when
        written with a radix point after its leading digit.'''
        if not self.is_finite():
            raise RuntimeError('adjusted_exponent called on a non-finite value')
        return self.exponent + self.number_of_digits() - 1

    def number_class(self):
        '''Return a string describing the class of the number.'''
        prefix = '-' if self.sign < 0 else '+'
        if self.kind == FINITE:
            return prefix + ('Zero' if self.coefficient == 0 else 'Finite')
        if self.kind == INFINITE:
            return prefix + 'Infinity'
        return 'NaN' if self.kind == QNAN else 'sNaN'

    def as_integer_ratio(self):
        '''Return a pair (n, d) of integers that represent the value as a fraction in lowest
        terms and with a positive denominator.'''
        if not self.is_finite():
            if self.is_infinite():
                raise OverflowError('cannot convert an infinity to an integer ratio')
            raise ValueError('cannot convert a NaN to an integer ratio')
        if self.exponent >= 0:
            return self.sign * self.coefficient * self.radix ** self.exponent, 1
        ratio = Fraction(self.sign * self.coefficient, self.radix ** -self.exponent)
        return ratio.numerator, ratio.denominator

    def normalize(self):
        '''Return the same value with trailing zero digits of the coefficient removed.
        Zeroes get an exponent of zero.'''
        if not self.is_finite():
            return self
        coefficient, exponent = self.coefficient, self.exponent
        if coefficient == 0:
            return self._replace(exponent=0)
        while coefficient % self.radix == 0:
            coefficient //= self.radix
            exponent += 1
        return self._replace(coefficient=coefficient, exponent=exponent)

    ##
    ## Quiet computational operations
    ##

    def copy_sign(self, sign):
        '''Return this value with the given sign, which can be +1, -1 or another Num.'''
        if isinstance(sign, Num):
            sign = sign.sign
        if sign == self.sign:
            return self
        return self._replace(sign=sign)

    def copy_abs(self):
        return self.copy_sign(1)

    def copy_negate(self):
        return self.copy_sign(-self.sign)

    def next_plus(self, context):
        '''The smallest representable value in context that compares greater.'''
        return context.next_plus(self)

    def next_minus(self, context):
        '''The greatest representable value in context that compares less.'''
        return context.next_minus(self)

    ##
    ## Conversions
    ##

    def to_string(self, context=None, output_radix=10, all_digits=False, text_format=None):
        '''Return the shortest text that reads back as this value in context.  Without a
        context the value is output exactly if its expansion in output_radix terminates.'''
        if context is None:
            from .context import exact_context
            context = exact_context(self.radix)
        return context.to_string(self, output_radix, all_digits, text_format)

    def __str__(self):
        return self.to_string()

    def __float__(self):
        from .floats import to_float
        return to_float(self)

