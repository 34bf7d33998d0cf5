#
# Correctly-rounded reading of free-format numbers into floating point values.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging

from .signals import (
    ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP, ROUND_HALF_EVEN, ROUND_HALF_DOWN,
    OP_READ, Inexact, Overflow, Underflow, Subnormal, swap_directed,
)

__all__ = ('Reader', )

logger = logging.getLogger(__name__)


class Reader:
    '''Reads free-format numbers, i.e. exact values f * b^e for integers f and e and any
    radix b, as correctly-rounded floating point values of a context.

    This is Clinger's Algorithm M from "How to Read Floating Point Numbers Accurately"
    (William D. Clinger), modified to handle subnormal numbers and to cope with overflow.
    Only exact integer arithmetic is used.

    The exactness of the most recent read is available as the exact attribute.
    '''

    def __init__(self):
        self.exact = None

    def read(self, context, rounding, sign, f, e, input_radix=10):
        '''Return the value of context closest to sign * f * input_radix^e, rounded as
        directed by rounding (the context's rounding mode if None).

        f must be a non-negative integer.  Inexact, Underflow, Subnormal and Overflow are
        signalled on the context as appropriate.

        If the context is exact a precision sufficient for the value is used, and if that
        still loses information Inexact is signalled, which the context can trap.
        '''
        if f < 0:
            raise ValueError('f must be non-negative')
        if rounding is None:
            rounding = context.rounding
        op_tuple = (OP_READ, sign, f, e, input_radix)

        if f == 0:
            self.exact = True
            return context.zero(sign)

        # The magnitude is handled; ceiling and floor are not symmetrical
        rounding = swap_directed(rounding, sign)

        if e < 0:
            u, v = f, input_radix ** -e
        else:
            u, v = f * input_radix ** e, 1
        k = 0

        if context.exact:
            # This is very rough; enough digits for terminating expansions of u / v
            work = context.working_context(u.bit_length() + v.bit_length())
        else:
            work = context

        min_e = work.etiny
        max_e = work.etop
        radix = work.radix
        rp_n = radix ** work.precision
        rp_n_1 = rp_n // radix

        # Start within the exponent range
        if k > max_e:
            u *= radix ** (k - max_e)
            k = max_e
        elif k < min_e:
            v *= radix ** (min_e - k)
            k = min_e

        # Scale u / v by the radix until its quotient has precision digits, or we hit the
        # limits of the exponent range
        while True:
            # This division is the bottleneck
            x = u // v
            if x < rp_n_1 and k > min_e:
                u *= radix
                k -= 1
            elif x >= rp_n and k < max_e:
                v *= radix
                k += 1
            else:
                break

        z, exact = self.ratio_float(work, u, v, k, rounding)
        self.exact = exact
        z = z.copy_sign(sign)

        if (k == max_e and x >= rp_n) or z.is_infinite():
            logger.debug('overflow reading %s', op_tuple)
            self.exact = False
            return Overflow(op_tuple, z).signal(context)

        if z.is_zero() or z.adjusted_exponent() < work.emin:
            if k == min_e:
                logger.debug('exponent clamped to %d reading %s', min_e, op_tuple)
            z = Subnormal(op_tuple, z).signal(context)
            if not exact:
                z = Underflow(op_tuple, z).signal(context)
            return z

        if not exact:
            z = Inexact(op_tuple, z).signal(context)
        return z

    @staticmethod
    def ratio_float(context, u, v, k, rounding):
        '''Given exact positive integers u and v with radix^(p-1) <= u/v < radix^p (unless the
        exponent is clamped) and an exact integer k, return a pair (z, exact) where z is
        the floating point number closest to u/v * radix^k under rounding, and exact is
        True if no rounding was necessary.

        This handles positive numbers only; as ceiling and floor are not symmetrical the
        caller must swap them for negative numbers.
        '''
        q, r = divmod(u, v)
        v_r = v - r
        z = context.make(1, q, k, rounding)
        exact = r == 0

        if rounding in (ROUND_DOWN, ROUND_FLOOR):
            pass
        elif rounding in (ROUND_UP, ROUND_CEILING):
            if r > 0:
                z = context.next_plus(z)
        elif r < v_r:
            pass
        elif r > v_r:
            z = context.next_plus(z)
        elif rounding == ROUND_HALF_DOWN or (rounding == ROUND_HALF_EVEN and q % 2 == 0):
            # A tie
            pass
        else:
            z = context.next_plus(z)

        return z, exact
