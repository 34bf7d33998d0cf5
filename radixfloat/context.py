#
# Contexts: the precision, exponent range, rounding mode, flags and traps that operations
# are performed under.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from math import gcd

import attr

from .flags import Flags
from .formatter import Formatter
from .num import Num, INFINITE, QNAN, SNAN
from .reader import Reader
from .signals import (
    ROUND_DOWN, ROUND_HALF_EVEN, ROUNDINGS, OP_NEXT_PLUS, OP_NEXT_MINUS, OP_PLUS, CONDITIONS,
    InvalidOperation, rounds_away,
)
from .text import DefaultTextFormat, parse_literal

__all__ = ('Context', 'binary_context', 'decimal_context', 'exact_context', 'single_context',
           'double_context', 'quad_context', 'decimal64_context', 'decimal128_context')


def _condition_flags(value):
    '''Convert a list of conditions, a bit-vector or a Flags object to Flags over CONDITIONS.
    Flags objects over CONDITIONS are shared, not copied.'''
    if isinstance(value, Flags):
        if value.values == CONDITIONS:
            return value
        return Flags(value.to_list(), values=CONDITIONS)
    if value is None:
        return Flags(values=CONDITIONS)
    return Flags(value, values=CONDITIONS)


def _no_conditions():
    return Flags(values=CONDITIONS)


def _check_int(instance, attribute, value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f'{attribute.name} must be an integer: {value!r}')


@attr.s(slots=True, kw_only=True, eq=False)
class Context:
    '''The context operations are performed in.

    radix, precision, emin and emax describe the floating point format: values have at most
    precision digits in the radix, and the exponent of their leading digit lies in
    [emin, emax].  An exact context has no fixed precision; reading into it uses as many
    digits as the value needs and signals Inexact if that is not enough.

    rounding is one of the ROUND_ constants.  flags holds the conditions raised so far;
    traps the conditions that raise their exception when signalled.  Both are Flags over
    CONDITIONS, and can be given as a list of conditions or a bit-vector.
    '''
    radix = attr.ib(default=10, validator=_check_int)
    precision = attr.ib(default=28, validator=_check_int)
    rounding = attr.ib(default=ROUND_HALF_EVEN)
    emin = attr.ib(default=-999999, validator=_check_int)
    emax = attr.ib(default=999999, validator=_check_int)
    exact = attr.ib(default=False)
    flags = attr.ib(factory=_no_conditions, converter=_condition_flags)
    traps = attr.ib(factory=_no_conditions, converter=_condition_flags)

    def __attrs_post_init__(self):
        if self.radix < 2:
            raise ValueError(f'radix must be at least 2: {self.radix}')
        if self.precision < (0 if self.exact else 1):
            raise ValueError(f'precision out of range: {self.precision}')
        if self.rounding not in ROUNDINGS:
            raise ValueError(f'invalid rounding mode: {self.rounding!r}')
        if self.emin > self.emax:
            raise ValueError(f'emin {self.emin:,d} exceeds emax {self.emax:,d}')

    @property
    def etiny(self):
        '''The exponent of the smallest subnormal coefficient.'''
        return self.emin - self.precision + 1

    @property
    def etop(self):
        '''The largest exponent of a coefficient with precision digits.'''
        return self.emax - self.precision + 1

    def copy(self, **changes):
        '''Return a copy of the context with independent flags and traps, and with the given
        attributes changed.'''
        changes.setdefault('flags', self.flags.copy())
        changes.setdefault('traps', self.traps.copy())
        return attr.evolve(self, **changes)

    def working_context(self, precision):
        '''A context of fixed precision sharing this context's exponent range, rounding, flags
        and traps.'''
        return attr.evolve(self, precision=precision, exact=False)

    ##
    ## Value constructors
    ##

    def make(self, sign, coefficient, exponent, rounding=None):
        '''Return a finite value.  If its leading digit lies beyond emax the result is the
        overflow value of the rounding mode instead: infinity or the largest finite value.
        Nothing is signalled.'''
        value = Num(self.radix, sign, coefficient, exponent)
        if coefficient and value.adjusted_exponent() > self.emax:
            if rounds_away(rounding or self.rounding, sign):
                return self.infinity(sign)
            return self.largest_finite(sign)
        return value

    def zero(self, sign=1):
        # An exponent of zero, or the nearest one in range
        return Num.zero(self.radix, sign, min(max(0, self.etiny), self.etop))

    def infinity(self, sign=1):
        return Num.infinity(self.radix, sign)

    def nan(self, sign=1, payload=0):
        return Num.nan(self.radix, sign, payload)

    def snan(self, sign=1, payload=0):
        return Num.snan(self.radix, sign, payload)

    def largest_finite(self, sign=1):
        return Num(self.radix, sign, self.radix ** self.precision - 1, self.etop)

    def smallest_subnormal(self, sign=1):
        return Num(self.radix, sign, 1, self.etiny)

    def smallest_normal(self, sign=1):
        return Num(self.radix, sign, self.radix ** (self.precision - 1), self.etiny)

    ##
    ## Adjacent values
    ##

    def _normalized(self, value):
        # Widen the coefficient to precision digits as far as the exponent range permits
        coefficient, exponent = value.coefficient, value.exponent
        if coefficient == 0:
            return coefficient, exponent
        low = self.radix ** (self.precision - 1)
        while coefficient < low and exponent > self.etiny:
            coefficient *= self.radix
            exponent -= 1
        return coefficient, exponent

    def _next_up(self, value):
        # The next value of greater magnitude; value is finite and non-zero
        coefficient, exponent = self._normalized(value)
        coefficient += 1
        if coefficient == self.radix ** self.precision:
            coefficient //= self.radix
            exponent += 1
            if exponent > self.etop:
                return self.infinity(value.sign)
        return Num(self.radix, value.sign, coefficient, exponent)

    def _next_down(self, value):
        # The next value of smaller magnitude; value is finite and non-zero
        coefficient, exponent = self._normalized(value)
        coefficient -= 1
        if coefficient < self.radix ** (self.precision - 1) and exponent > self.etiny:
            coefficient = coefficient * self.radix + self.radix - 1
            exponent -= 1
        return Num(self.radix, value.sign, coefficient, exponent)

    def next_plus(self, value):
        '''Return the smallest representable value that compares greater than value.'''
        if value.is_nan():
            if value.is_snan():
                return InvalidOperation((OP_NEXT_PLUS, value),
                                        self.nan(value.sign, value.coefficient)).signal(self)
            return value
        if value.is_infinite():
            return value if value.sign > 0 else self.largest_finite(-1)
        if value.is_zero():
            return self.smallest_subnormal(1)
        if value.sign > 0:
            return self._next_up(value)
        result = self._next_down(value)
        if result.coefficient == 0:
            return Num.zero(self.radix, -1, self.etiny)
        return result

    def next_minus(self, value):
        '''Return the largest representable value that compares less than value.'''
        if value.is_nan():
            if value.is_snan():
                return InvalidOperation((OP_NEXT_MINUS, value),
                                        self.nan(value.sign, value.coefficient)).signal(self)
            return value
        if value.is_infinite():
            return value if value.sign < 0 else self.largest_finite(1)
        if value.is_zero():
            return self.smallest_subnormal(-1)
        if value.sign < 0:
            return self._next_up(value)
        result = self._next_down(value)
        if result.coefficient == 0:
            return Num.zero(self.radix, 1, self.etiny)
        return result

    ##
    ## Conversions
    ##

    def read(self, sign, f, e, input_radix=10, rounding=None):
        '''Read sign * f * input_radix^e into this context.  Returns a pair (value, exact)
        where exact is True if no rounding took place.'''
        reader = Reader()
        value = reader.read(self, rounding, sign, f, e, input_radix)
        return value, reader.exact

    def create(self, sign, f, e, input_radix=10, rounding=None):
        '''Return sign * f * input_radix^e correctly rounded to this context.'''
        return self.read(sign, f, e, input_radix, rounding)[0]

    def plus(self, value):
        '''Return value rounded to this context.  It can be of any radix.'''
        if value.is_special():
            if value.is_snan():
                return InvalidOperation((OP_PLUS, value),
                                        self.nan(value.sign, value.coefficient)).signal(self)
            return Num(self.radix, value.sign, value.coefficient, 0, value.kind)
        return self.create(value.sign, value.coefficient, value.exponent, value.radix)

    convert = plus

    def convert_shortest(self, value, source_context):
        '''Convert value, a value of source_context, to this context through the shortest
        sequence of digits in this context's radix that reads back as value in
        source_context.  Unlike convert() this does not give the closest value in this
        context, but the simplest one: in a decimal128 context the double 0.1 converts to
        0.1, not to 0.1000000000000000055511151231257827.'''
        if value.is_special():
            return self.plus(value)
        digits = source_context.to_digits(value, self.radix)
        coefficient = 0
        for digit in digits.digits:
            coefficient = coefficient * self.radix + digit
        return self.create(value.sign, coefficient, digits.scale - len(digits.digits), self.radix)

    def _representable(self, value):
        # True if value is a finite value of this context as it stands
        return (value.radix == self.radix and value.coefficient < self.radix ** self.precision
                and self.etiny <= value.exponent <= self.etop)

    def _quietly_rounded(self, value):
        # value rounded to this context on a copy, so no flag is raised and nothing traps
        if self._representable(value):
            return value
        return self.copy(flags=None, traps=None).plus(value)

    def _format(self, value, output_radix, all_digits):
        rounding = self.rounding
        if self.exact:
            precision, min_e = value.number_of_digits(), None
            f, e = value.coefficient, value.exponent
            if _terminates(value, output_radix):
                # Reading is exact, so only the exact expansion reads back as value
                rounding, all_digits = ROUND_DOWN, True
        else:
            precision, min_e = self.precision, self.etiny
            f, e = self._normalized(value)
        formatter = Formatter(self.radix, min_e, output_radix)
        result = formatter.format(value, f, e, rounding, precision, all_digits).adjusted()
        if self.exact:
            # The rounding range of the expansion can put a zero before its first digit,
            # and the expansion can end in zeroes
            scale, digits = result.scale, result.digits
            while len(digits) > 1 and digits[0] == 0:
                scale, digits = scale - 1, digits[1:]
            while len(digits) > 1 and digits[-1] == 0:
                digits = digits[:-1]
            result = result._replace(scale=scale, digits=digits)
        return result

    def to_digits(self, value, output_radix=10, all_digits=False):
        '''Return a DigitSequence, with round_up applied, of the shortest digits in
        output_radix that read back in this context as value.  Unless the context is exact,
        value is first rounded to it; that rounding raises no flags.  With all_digits every
        significant digit is produced.

        Exact contexts produce the exact expansion of value if it terminates in
        output_radix, and otherwise the shortest digits at value's own precision.'''
        if value.is_finite() and not self.exact:
            value = self._quietly_rounded(value)
        if value.is_special():
            raise ValueError(f'cannot produce digits of {value.number_class()}')
        return self._format(value, output_radix, all_digits)

    def from_string(self, text, input_radix=10):
        '''Convert a numeric literal in the input radix to a value of this context.  Raises
        SyntaxError if the literal is malformed.'''
        sign, kind, coefficient, exponent = parse_literal(text, input_radix)
        if kind == INFINITE:
            return self.infinity(sign)
        if kind == QNAN:
            return self.nan(sign, coefficient)
        if kind == SNAN:
            return self.snan(sign, coefficient)
        return self.create(sign, coefficient, exponent, input_radix)

    def to_string(self, value, output_radix=10, all_digits=False, text_format=None):
        '''Return the shortest text in output_radix that reads back in this context as
        value.  Formatting never changes the context's flags.'''
        text_format = text_format or DefaultTextFormat
        if value.is_finite() and not self.exact:
            value = self._quietly_rounded(value)
        if value.is_special():
            return text_format.format_non_finite(value)
        digits = self._format(value, output_radix, all_digits)
        return text_format.format_digits(value.sign, digits.scale, digits.digits, output_radix)


def _terminates(value, radix):
    '''Return True if the finite value has a terminating expansion in radix.'''
    denominator = value.as_integer_ratio()[1]
    while denominator > 1:
        factor = gcd(denominator, radix)
        if factor == 1:
            return False
        denominator //= factor
    return True


def binary_context(precision, emin, emax, **kwargs):
    return Context(radix=2, precision=precision, emin=emin, emax=emax, **kwargs)


def decimal_context(precision=28, emin=-999999, emax=999999, **kwargs):
    return Context(radix=10, precision=precision, emin=emin, emax=emax, **kwargs)


def exact_context(radix=10, **kwargs):
    '''A context of the given radix whose precision adapts to the values read into it.'''
    kwargs.setdefault('emin', -999999999)
    kwargs.setdefault('emax', 999999999)
    return Context(radix=radix, precision=0, exact=True, **kwargs)


def single_context(**kwargs):
    return binary_context(24, -126, 127, **kwargs)


def double_context(**kwargs):
    return binary_context(53, -1022, 1023, **kwargs)


def quad_context(**kwargs):
    return binary_context(113, -16382, 16383, **kwargs)


def decimal64_context(**kwargs):
    return decimal_context(16, -383, 384, **kwargs)


def decimal128_context(**kwargs):
    return decimal_context(34, -6143, 6144, **kwargs)
