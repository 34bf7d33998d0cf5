#
# Shortest correctly-rounding digit strings of floating point values.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import decimal
import logging
from collections import namedtuple
from math import ceil, gcd, log, log10
from sys import float_info

from .signals import (
    ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP, ROUND_HALF_EVEN, ROUND_HALF_UP,
    ROUND_HALF_DOWN, DigitLimitExceeded, swap_directed,
)

__all__ = ('Formatter', 'DigitSequence')

logger = logging.getLogger(__name__)


class DigitSequence(namedtuple('DigitSequence', 'scale digits round_up radix')):
    '''The output of the formatter: the value is 0.d1d2d3... * radix^scale where digits is the
    list [d1, d2, d3, ...].  If round_up is True the caller must increment the last digit,
    which adjusted() does.'''

    __slots__ = ()

    def adjusted(self):
        '''Return the digit sequence with round_up applied to its digits.  A carry out of the
        leading digit prepends a 1 and increments the scale.'''
        if not self.round_up:
            return self
        digits = list(self.digits)
        scale = self.scale
        pos = len(digits) - 1
        while pos >= 0:
            digits[pos] += 1
            if digits[pos] != self.radix:
                break
            digits[pos] = 0
            pos -= 1
        if pos < 0:
            digits.insert(0, 1)
            scale += 1
        return DigitSequence(scale, digits, False, self.radix)


class Formatter:
    '''Burger and Dybvig free-format printing, from "Printing Floating-Point Numbers Quickly
    and Accurately" (Robert G. Burger, R. Kent Dybvig).

    A fixed-precision floating point value v = f * b^e is formatted as the shortest string
    of output-radix digits that reads back, with the same precision and rounding mode, as
    v.  v is treated as an approximate value standing for any value of its rounding range,
    the interval of values that round to v.

    Quotients of integers hold the magnitudes; s is the common denominator:

       r / s       is v
       m_minus / s is the distance from the lower limit of the rounding range to v
       m_plus / s  is the distance from v to the upper limit of the rounding range

    round_l (round_h) is True if the lower (upper) limit of the rounding range is closed,
    i.e. if the limit itself rounds to v.  k is the scale that puts the first significant
    digit right after the radix point: output_radix^k is the first power of the output
    radix greater than the upper limit (or equal to it if round_h is False).
    '''

    def __init__(self, input_radix, input_min_e, output_radix, max_digits=None,
                 estimate=True):
        '''input_min_e is the smallest exponent of an integer significand of the input format,
        or None if the exponent is unbounded.

        max_digits bounds the number of digits produced in all-digits mode; None computes
        a bound from the value.  If estimate is False the scale is found by exact integer
        arithmetic alone.
        '''
        self.b = input_radix
        self.min_e = input_min_e
        self.output_b = output_radix
        self.max_digits = max_digits
        self.estimate = estimate
        self.k = None
        self.round_up = None
        self._digits = None

    def format(self, v, f, e, rounding, precision, all_digits=False):
        '''Convert v = f * b^e into a sequence of output radix digits such that, if they are
        read back as a floating point value of precision p (correctly rounded with rounding),
        the result is v.  v supplies the sign.  Returns a DigitSequence.  Zero is the digit 0
        at scale 0.

        If rounding is None the digits read back as v under any round-to-nearest mode, at
        the cost of sometimes producing more digits than strictly necessary.  rounding is
        the rounding that, on reading, preserves the value; it is not a rounding applied to
        the output.

        If all_digits is True all significant digits are generated without rounding, i.e.
        all digits that cannot be arbitrarily changed while preserving the value read.  The
        last digit may then need rounding up, which the round_up flag indicates.  If v has
        no terminating expansion in the output radix under a directed rounding this would
        never end; DigitLimitExceeded is raised once the digit bound is passed.
        '''
        f = abs(f)
        self.f = f
        self.e = e
        self.all_digits = all_digits
        # Adjust the rounding mode to work only with positive numbers
        rounding = swap_directed(rounding, v.sign)
        self.rounding = rounding
        if f == 0:
            # The single digit 0 whatever the exponent
            self.k, self._digits, self.round_up = 0, [0], False
            return DigitSequence(0, [0], False, self.output_b)
        b = self.b

        # Determine the inclusion flags of the rounding range limits
        if rounding == ROUND_HALF_EVEN:
            # The rounding range is (v-m_minus, v+m_plus) if v is odd and
            # [v-m_minus, v+m_plus] if even
            self.round_l = self.round_h = f % 2 == 0
        elif rounding in (ROUND_UP, ROUND_CEILING):
            # (v-, v]
            self.round_l, self.round_h = False, True
        elif rounding in (ROUND_DOWN, ROUND_FLOOR):
            # [v, v+)
            self.round_l, self.round_h = True, False
        elif rounding == ROUND_HALF_UP:
            # [v-m_minus, v+m_plus)
            self.round_l, self.round_h = True, False
        elif rounding == ROUND_HALF_DOWN:
            # (v-m_minus, v+m_plus]
            self.round_l, self.round_h = False, True
        else:
            # Only assume some round-to-nearest will be used, not which variant of it
            self.round_l = self.round_h = False

        # Now compute r/s = v, m_plus/s = (v+ - v)/2 and m_minus/s = (v - v-)/2.  If f is
        # the smallest significand of its exponent the lower neighbour is closer.
        boundary = f == b ** (precision - 1) and e != self.min_e
        if e >= 0:
            be = b ** e
            if not boundary:
                self.r, self.s, self.m_plus, self.m_minus = f * be * 2, 2, be, be
            else:
                be1 = be * b
                self.r, self.s, self.m_plus, self.m_minus = f * be1 * 2, b * 2, be1, be
        else:
            if not boundary:
                self.r, self.s, self.m_plus, self.m_minus = f * 2, b ** -e * 2, 1, 1
            else:
                self.r, self.s, self.m_plus, self.m_minus = f * b * 2, b ** (1 - e) * 2, b, 1

        self.k = 0
        if not self.estimate:
            self.scale()
        else:
            self.scale_optimized(v)

        # Now adjust m_minus and m_plus so that they define the rounding range
        if rounding in (ROUND_UP, ROUND_CEILING):
            # The rounding range is (v-, v]
            self.m_minus, self.m_plus = self.m_minus * 2, 0
        elif rounding in (ROUND_DOWN, ROUND_FLOOR):
            # The rounding range is [v, v+)
            self.m_minus, self.m_plus = 0, self.m_plus * 2

        if self.r and rounding in (ROUND_UP, ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR):
            # The upper limit moved; at most one step to correct k
            self.scale()

        if all_digits:
            self.generate_max()
        else:
            self.generate()
        return DigitSequence(self.k, self._digits, self.round_up, self.output_b)

    def digits(self):
        '''The result of the last format: a pair (scale, digits).'''
        return self.k, self._digits

    def adjusted_digits(self):
        '''The result of the last format with round_up applied: a pair (scale, digits).'''
        result = DigitSequence(self.k, self._digits, self.round_up, self.output_b).adjusted()
        return result.scale, result.digits

    def _too_low(self, r, m_plus, s):
        return r + m_plus >= s if self.round_h else r + m_plus > s

    def scale(self):
        '''Scale the fractions so that the first significant digit is right after the radix
        point, i.e. find the smallest integer k such that (r + m_plus) / s <= B^k (or < if
        round_h), B being the output radix.  If k >= 0 s is multiplied by B^k, otherwise
        r, m_plus and m_minus are multiplied by B^-k.

        This is a general iterative method using only exact integer arithmetic.
        '''
        r, s, m_plus, m_minus, k = self.r, self.s, self.m_plus, self.m_minus, self.k
        output_b = self.output_b
        while True:
            if self._too_low(r, m_plus, s):
                s *= output_b
                k += 1
            elif not self._too_low((r + m_plus) * output_b, 0, s):
                r *= output_b
                m_plus *= output_b
                m_minus *= output_b
                k -= 1
            else:
                break
        self.r, self.s, self.m_plus, self.m_minus, self.k = r, s, m_plus, m_minus, k

    def scale_optimized(self, v):
        '''An optimized scale().  Estimate k from a logarithm of v and scale by a power of the
        output radix in one step.  The estimate is at most one too low, and fixup() makes a
        single correcting step.  If no logarithm can be computed a rough estimate from the
        exponent of v is made and scale() finishes the job.
        '''
        estimate, fixup = self.estimate_scale(v)
        output_b = self.output_b
        if estimate >= 0:
            self.s *= output_b ** estimate
        else:
            power = output_b ** -estimate
            self.r *= power
            self.m_plus *= power
            self.m_minus *= power
        self.k = estimate

        if fixup:
            self.fixup()
        else:
            self.scale()

    def fixup(self):
        '''The final step of scale_optimized(): scale up while the estimate is too low.'''
        while self._too_low(self.r, self.m_plus, self.s):
            self.s *= self.output_b
            self.k += 1

    def estimate_scale(self, v):
        '''Return a pair (estimate, fixup).  estimate is an estimate of ceil(log_B(r / s)).  If
        fixup is True the estimate is either exact or one too low.'''
        r, s, output_b = self.r, self.s, self.output_b

        # Float logarithms, if r / s is a normal float
        try:
            ratio = r / s
        except OverflowError:
            ratio = 0.0
        if ratio >= float_info.min:
            if output_b == 10:
                value = log10(ratio)
            else:
                value = log(ratio) / log(output_b)
            return ceil(value - 1e-10), True

        # Decimal logarithms with enough precision for the magnitude
        logger.debug('float logarithm of v out of range; using decimal logarithms')
        try:
            magnitude = abs(r.bit_length() - s.bit_length()) + 1
            context = decimal.Context(prec=30 + len(str(magnitude)), Emax=decimal.MAX_EMAX,
                                      Emin=decimal.MIN_EMIN)
            ratio = context.divide(decimal.Decimal(r), decimal.Decimal(s))
            if output_b == 10:
                value = context.log10(ratio)
            else:
                value = context.divide(context.ln(ratio),
                                       context.ln(decimal.Decimal(output_b)))
            value = context.subtract(value, decimal.Decimal('1e-10'))
            return int(value.to_integral_value(rounding=decimal.ROUND_CEILING)), True
        except decimal.DecimalException:
            logger.debug('decimal logarithm failed; using a rough estimate')

        # A rough estimate from the exponent of v
        return ceil(v.adjusted_exponent() * log(self.b) / log(output_b)), False

    def _rounding_range_done(self, r, s, m_plus, m_minus):
        # Is the lower (upper) limit of the rounding range reached?
        low = r <= m_minus if self.round_l else r < m_minus
        high = r + m_plus >= s if self.round_h else r + m_plus > s
        return low, high

    def generate(self):
        '''Generate the shortest digit sequence that preserves the value.'''
        digits = []
        r, s, m_plus, m_minus = self.r, self.s, self.m_plus, self.m_minus
        output_b = self.output_b
        while True:
            d, r = divmod(r * output_b, s)
            m_plus *= output_b
            m_minus *= output_b
            low, high = self._rounding_range_done(r, s, m_plus, m_minus)

            if not low:
                if not high:
                    digits.append(d)
                    continue
                digits.append(d + 1)
            elif not high:
                digits.append(d)
            elif r * 2 < s:
                digits.append(d)
            elif r * 2 > s:
                digits.append(d + 1)
            else:
                # Both d and d + 1 are equally close
                if self.rounding == ROUND_HALF_EVEN:
                    digits.append(d + d % 2)
                elif self.rounding == ROUND_HALF_DOWN:
                    digits.append(d)
                else:
                    digits.append(d + 1)
            break

        self.round_up = False
        self._digits = digits

    def generate_max(self):
        '''Generate all significant digits, without rounding the last one.  round_up is set if
        the last digit should be rounded up.'''
        self.round_up = False
        digits = []
        r, s, m_plus, m_minus = self.r, self.s, self.m_plus, self.m_minus
        output_b = self.output_b
        max_digits = self.max_digits
        if max_digits is None:
            max_digits = self.digit_bound()
        while True:
            if len(digits) == max_digits:
                logger.debug('digit limit %d reached formatting %d * %d^%d',
                             max_digits, self.f, self.b, self.e)
                raise DigitLimitExceeded(f'more than {max_digits:,d} digits needed to '
                                         f'format {self.f} * {self.b}^{self.e} '
                                         f'in radix {output_b}')
            d, r = divmod(r * output_b, s)
            m_plus *= output_b
            m_minus *= output_b
            digits.append(d)

            low, high = self._rounding_range_done(r, s, m_plus, m_minus)
            # With a directed rounding one limit is v itself; the digits are exhausted
            # when the remainder is zero
            if low and (high or (r == 0 and not m_plus)):
                if r * 2 >= s:
                    self.round_up = True
                break

        self._digits = digits

    def digit_bound(self):
        '''The number of digits generate_max() produces at most when it terminates: enough
        for both half-widths of the rounding range to exceed the remaining fraction, or for
        the exact expansion of v in the output radix, if there is one.'''
        s, output_b = self.s, self.output_b
        width = min(m for m in (self.m_plus, self.m_minus, s) if m)
        count = 0
        while width <= s:
            width *= output_b
            count += 1

        # Length of the exact expansion
        denominator = s // gcd(self.r, s)
        exact_count = 0
        while denominator > 1:
            factor = gcd(denominator, output_b)
            if factor == 1:
                # Non-terminating
                exact_count = 0
                break
            denominator //= factor
            exact_count += 1
        return max(count, exact_count) + 1
