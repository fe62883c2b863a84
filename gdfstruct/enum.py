'''
This module contains the constant values used throughout the GDF format.

Note: use Enum for value that cannot ORed together, Flag for the others.
'''
from enum import Enum, Flag


class GdfType(Enum):
    '''Primitive element type, stored in the low byte of the block type word.'''
    ASCII  = 0x01
    INT32  = 0x02
    DOUBLE = 0x03
    NULL   = 0x10
    UINT8  = 0x20
    INT8   = 0x30
    UINT16 = 0x40
    INT16  = 0x50
    UINT32 = 0x60
    UINT64 = 0x70
    INT64  = 0x80
    FLOAT  = 0x90


class GdfFlag(Flag):
    '''The higher bits of the block type word.'''
    NONE         = 0
    START_GROUP  = 0x0100
    END_GROUP    = 0x0200
    SINGLE_VALUE = 0x0400
    ARRAY        = 0x0800
    END_OF_FILE  = 0x1000


TYPE_MASK = 0xff
FLAG_MASK = 0x1f00


class GroupKind(Enum):
    TIME       = 'time'
    POSITION   = 'position'
    TRAJECTORY = 'trajectory'
    UNKNOWN    = 'unknown'

    @classmethod
    def from_field_name(cls, name: str) -> "GroupKind":
        '''The kind of a directory depends on the name of its first field.'''
        prefix = name[:2]
        if prefix == 'ti':
            return cls.TIME
        if prefix == 'po':
            return cls.POSITION
        if prefix == 'ID':
            return cls.TRAJECTORY

        return cls.UNKNOWN


class FieldRetention(Enum):
    '''Which fields of a directory end up in the record.'''
    STRICT_VOCABULARY = 0
    RETAIN_ALL        = 1

    @classmethod
    def from_creator(cls, creator: str) -> "FieldRetention":
        return cls.RETAIN_ALL if creator == 'GDFA' else cls.STRICT_VOCABULARY


class Severity(Enum):
    RECOVERABLE   = 'recoverable'
    INFORMATIONAL = 'informational'
