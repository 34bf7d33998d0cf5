#
# Named flags stored as bit-vectors.  Used by contexts for status flags and traps.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from collections.abc import Mapping

__all__ = ('FlagValues', 'Flags', 'flag_values', 'flags',
           'FlagError', 'InvalidFlagType', 'InvalidFlag', 'InvalidFlagValue', 'InvalidBits')


class FlagError(Exception):
    '''Base class of the errors of this module.  They all indicate a bug in the caller.'''


class InvalidFlagType(FlagError, TypeError):
    '''Signalled when something that is neither an identifier nor a class is used as a flag.'''


class InvalidFlag(FlagError, ValueError):
    '''Signalled when a flag is not one of the flags of the associated FlagValues.'''


class InvalidFlagValue(FlagError, ValueError):
    '''Signalled when a flag is assigned something other than a boolean.'''


class InvalidBits(FlagError, ValueError):
    '''Signalled when a bit-vector has bits set that do not correspond to a flag.'''


def flag_name(flag):
    '''The display name of a flag; classes are named by their (unqualified) class name.'''
    if isinstance(flag, type):
        return flag.__name__
    return str(flag)


def check_flag_type(flag):
    if isinstance(flag, type) or (isinstance(flag, str) and flag.isidentifier()):
        return flag
    raise InvalidFlagType(f'flags must be identifiers or classes; invalid flag: {flag!r}')


class FlagValues(Mapping):
    '''Assigns bit values to a set of flags so that a set of them can be stored as an integer.

    The flags are identifier strings or classes; the i-th flag given is assigned the bit
    value 1 << i.

        >>> values = FlagValues('A', 'B', 'C')
        >>> values['C']
        4
    '''

    __slots__ = ('_flags', )

    def __init__(self, *flags):
        bits = {}
        for flag in flags:
            check_flag_type(flag)
            if flag in bits:
                raise InvalidFlag(f'duplicate flag: {flag_name(flag)}')
            bits[flag] = 1 << len(bits)
        self._flags = bits

    def __getitem__(self, flag):
        try:
            return self._flags[flag]
        except (KeyError, TypeError):
            raise InvalidFlag(f'invalid flag: {flag!r}') from None

    def __contains__(self, flag):
        try:
            return flag in self._flags
        except TypeError:
            return False

    def __iter__(self):
        # Dictionaries preserve insertion order, which is bit order
        return iter(self._flags)

    def __len__(self):
        return len(self._flags)

    def __eq__(self, other):
        if not isinstance(other, FlagValues):
            return NotImplemented
        return list(self._flags) == list(other._flags)

    def __hash__(self):
        return hash(tuple(self._flags))

    def __repr__(self):
        return f'FlagValues({", ".join(flag_name(flag) for flag in self._flags)})'

    @property
    def all_flags_value(self):
        '''The bit-vector with every flag set.'''
        return (1 << len(self._flags)) - 1


class Flags:
    '''A set of flags, each either set or clear.

    If a FlagValues is associated (passed to the constructor or assigned to values) the
    flags are validated against it and the set can be read and written as an integer.

        Flags('A', 'C', FlagValues('A', 'B', 'C'))
        Flags(5, values=FlagValues('A', 'B', 'C'))
    '''

    __slots__ = ('_values', '_flags')

    def __init__(self, *flags, values=None):
        self._values = values
        self._flags = {}
        bits = 0

        for flag in _flatten(flags):
            if isinstance(flag, FlagValues):
                self._values = flag
            elif isinstance(flag, Flags):
                self._values = flag._values
                self._flags = dict(flag._flags)
            elif isinstance(flag, bool):
                raise InvalidFlagType(f'invalid flag type for: {flag!r}')
            elif isinstance(flag, int):
                bits |= flag
            elif isinstance(flag, (str, type)):
                self._flags[check_flag_type(flag)] = True
            else:
                raise InvalidFlagType(f'invalid flag type for: {flag!r}')

        if bits:
            if self._values is None:
                raise InvalidFlagType('integer flag values need flag bit values to be defined')
            # Flags given by name are kept alongside those given by bits
            named = [flag for flag, value in self._flags.items() if value]
            self.bits = bits
            for flag in named:
                self._flags[flag] = True

        if self._values is not None:
            for flag in self._flags:
                self._check(flag)

    def copy(self):
        return Flags(self)

    @property
    def values(self):
        '''The associated FlagValues, or None.'''
        return self._values

    @values.setter
    def values(self, values):
        self._values = values

    def _check(self, flag):
        check_flag_type(flag)
        if self._values is not None:
            # Raises InvalidFlag if the flag is unknown
            self._values[flag]
        return flag

    def _require_values(self):
        if self._values is None:
            raise FlagError('no flag values defined')
        return self._values

    @property
    def bits(self):
        '''The flags as a bit-vector integer.'''
        values = self._require_values()
        result = 0
        for flag, value in self._flags.items():
            if value:
                result |= values[flag]
        return result

    @bits.setter
    def bits(self, bits):
        values = self._require_values()
        if not isinstance(bits, int) or isinstance(bits, bool):
            raise InvalidBits(f'bits must be an integer: {bits!r}')
        if not 0 <= bits <= values.all_flags_value:
            raise InvalidBits(f'invalid bits value {bits:#x}')
        self._flags = {flag: True for flag, value in values.items() if bits & value}

    def __int__(self):
        return self.bits

    def to_dict(self):
        '''Return the flags as a dictionary of flag to boolean.'''
        return dict(self._flags)

    def __getitem__(self, flag):
        self._check(flag)
        return self._flags.get(flag, False)

    get = __getitem__

    def __setitem__(self, flag, value):
        self._check(flag)
        if value is True or (value == 1 and isinstance(value, int)):
            value = True
        elif value is None or value is False or (value == 0 and isinstance(value, int)):
            value = False
        else:
            raise InvalidFlagValue(f'invalid value: {value!r}')
        self._flags[flag] = value

    def set(self, *flags):
        '''Set one or more flags.  Lists of flags and other Flags objects are accepted.'''
        for flag in _expand(flags):
            self._flags[self._check(flag)] = True

    def clear(self, *flags):
        '''Clear one or more flags.  Lists of flags and other Flags objects are accepted.'''
        for flag in _expand(flags):
            self._flags[self._check(flag)] = False

    def set_all(self):
        self.bits = self._require_values().all_flags_value

    def clear_all(self):
        self._flags = {}

    def items(self):
        '''Yield (flag, is_set) pairs; in bit order if values are known.'''
        if self._values is not None:
            for flag in self._values:
                yield flag, self._flags.get(flag, False)
        else:
            yield from self._flags.items()

    def iter_set(self):
        return (flag for flag, value in self.items() if value)

    def iter_clear(self):
        return (flag for flag, value in self.items() if not value)

    def to_list(self):
        '''Return the set flags as a list.'''
        return list(self.iter_set())

    def __bool__(self):
        return any(self._flags.values())

    def __str__(self):
        return f'[{", ".join(flag_name(flag) for flag in self.iter_set())}]'

    def __repr__(self):
        text = f'Flags{self}'
        if self._values is not None:
            text += f' ({self.bits:#x})'
        return text

    def __eq__(self, other):
        if not isinstance(other, Flags):
            return NotImplemented
        if self._values is not None and self._values == other._values:
            return self.bits == other.bits
        return (sorted(flag_name(flag) for flag in self.iter_set())
                == sorted(flag_name(flag) for flag in other.iter_set()))

    __hash__ = None


def _flatten(items):
    for item in items:
        if isinstance(item, (list, tuple)):
            yield from _flatten(item)
        else:
            yield item


def _expand(items):
    for item in _flatten(items):
        if isinstance(item, Flags):
            yield from item.iter_set()
        else:
            yield item


def flag_values(*params):
    '''Return a FlagValues of the given flags; a single FlagValues argument is returned as is.'''
    if len(params) == 1 and isinstance(params[0], FlagValues):
        return params[0]
    return FlagValues(*params)


def flags(*params, values=None):
    '''Return a Flags of the given flags; a single Flags argument is returned as is.'''
    if len(params) == 1 and isinstance(params[0], Flags) and values is None:
        return params[0]
    return Flags(*params, values=values)
