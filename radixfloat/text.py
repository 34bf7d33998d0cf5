#
# Parsing of numeric literals and output of digit sequences as text.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import re
from functools import lru_cache

import attr

from .num import FINITE, INFINITE, QNAN, SNAN

__all__ = ('TextFormat', 'DefaultTextFormat', 'parse_literal')


DIGIT_CHARS = '0123456789abcdefghijklmnopqrstuvwxyz'
SPECIAL_REGEX = re.compile(
    # sign[opt]
    '([-+]?)('
    # inf or infinity
    '(inf(inity)?)|'
    # nan-or-snan dec-payload[opt]
    '((s?)nan([0-9]+)?))$',
    re.ASCII | re.IGNORECASE
)


@lru_cache()
def literal_regex(radix):
    '''Return the compiled regular expression of finite literals of the given radix.  Radices
    up to 10 accept 'e' and '@' to introduce the exponent; higher radices only '@'.'''
    if not 2 <= radix <= len(DIGIT_CHARS):
        raise ValueError(f'text in radix {radix} is not supported')
    digits = DIGIT_CHARS[:radix]
    if radix > 10:
        digits += digits[10:].upper()
        exp_chars = '@'
    else:
        exp_chars = 'eE@'
    return re.compile(
        # sign[opt]
        '([-+]?)'
        # (integer[opt].fraction or integer.[opt])
        f'(([{digits}]*)\\.([{digits}]+)|([{digits}]+)\\.?)'
        # exponent-char sign[opt]dec-exponent   [opt]
        f'([{exp_chars}]([-+]?[0-9]+))?$',
        re.ASCII
    )


def parse_literal(text, radix=10):
    '''Parse a numeric literal in the given radix.  Return a tuple (sign, kind, coefficient,
    exponent) where the value is sign * coefficient * radix^exponent.  For NaNs the
    coefficient is the payload.  Raises SyntaxError if the text is not a valid literal.

    The exponent is always a decimal number and is a power of the radix.
    '''
    if not isinstance(text, str):
        raise TypeError('parse_literal requires a string')
    text = text.strip()

    match = literal_regex(radix).match(text)
    if match:
        sign = -1 if match.group(1) == '-' else 1
        exponent = int(match.group(7) or '0')
        # If a fraction was specified, the integer and fraction parts are in groups 3 and 4.
        # If no fraction was specified the integer is in group 5.
        if match.group(4) is None:
            coefficient = int(match.group(5), radix)
        else:
            fraction = match.group(4)
            coefficient = int(match.group(3) + fraction, radix)
            exponent -= len(fraction)
        return sign, FINITE, coefficient, exponent

    match = SPECIAL_REGEX.match(text)
    if match:
        sign = -1 if match.group(1) == '-' else 1
        if match.group(3):
            return sign, INFINITE, 0, 0
        kind = SNAN if match.group(6) else QNAN
        return sign, kind, int(match.group(7) or '0'), 0

    raise SyntaxError(f'invalid numeric literal in radix {radix}: {text!r}')


@attr.s(slots=True, kw_only=True, eq=False)
class TextFormat:
    '''Controls the output of digit sequences and special values as text.'''

    # The string output for infinity
    inf = attr.ib(default='Infinity')
    # The string output for quiet NaNs
    qnan = attr.ib(default='NaN')
    # The string output for signalling NaNs
    snan = attr.ib(default='sNaN')
    # If True non-zero NaN payloads follow the NaN text in decimal
    nan_payload = attr.ib(default=True)
    # The exponent character for output radices up to 10.  Higher radices use '@' as 'E'
    # is a digit.
    exp_char = attr.ib(default='E')
    # If True, digits above 9 are in upper case
    upper_case = attr.ib(default=False)
    # If True positive exponents display a '+'.
    force_exp_sign = attr.ib(default=False)
    # If True, numbers with a positive sign are preceded with a '+'.
    force_leading_sign = attr.ib(default=False)
    # Values below 1 are output without an exponent, with leading zeroes after the point,
    # if their scale is at least this and they have at most max_fixed_digits digits.
    min_fixed_scale = attr.ib(default=-4)
    max_fixed_digits = attr.ib(default=15)
    # Integers are padded with trailing zeroes, rather than output with an exponent, if
    # their scale is at most this.
    max_fixed_scale = attr.ib(default=20)

    def leading_sign(self, sign):
        '''Return the leading sign string.'''
        return '-' if sign < 0 else '+' if self.force_leading_sign else ''

    def exponent_str(self, exponent, radix):
        '''Return the formatted exponent including the exponent character.'''
        exp_char = self.exp_char if radix <= 10 else '@'
        sign = '-' if exponent < 0 else '+' if self.force_exp_sign else ''
        return f'{exp_char}{sign}{abs(exponent)}'

    def format_non_finite(self, value):
        '''Return the output text for infinities and NaNs.'''
        if value.is_infinite():
            special = self.inf
        else:
            special = self.snan if value.is_snan() else self.qnan
            if self.nan_payload and value.coefficient:
                special += str(value.coefficient)
        return self.leading_sign(value.sign) + special

    def format_digits(self, sign, scale, digits, radix):
        '''Return the text of the value 0.d1d2d3... * radix^scale where digits is the list
        [d1, d2, d3, ...] of digit values.  scale is the position of the radix point
        relative to the leading digit.  Fixed notation is used for values of moderate size,
        scientific notation otherwise.'''
        chars = DIGIT_CHARS.upper() if self.upper_case else DIGIT_CHARS
        text = ''.join(chars[digit] for digit in digits)
        result = self.leading_sign(sign)

        if not any(digits):
            return result + '0'

        count = len(text)
        if scale <= 0:
            if scale >= self.min_fixed_scale and count <= self.max_fixed_digits:
                return result + '0.' + '0' * -scale + text
        elif scale > count:
            if scale <= self.max_fixed_scale:
                return result + text + '0' * (scale - count)
        elif scale == count:
            return result + text
        else:
            return result + text[:scale] + '.' + text[scale:]

        # Scientific notation
        if count > 1:
            text = text[0] + '.' + text[1:]
        return result + text + self.exponent_str(scale - 1, radix)


DefaultTextFormat = TextFormat()
