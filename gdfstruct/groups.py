'''
# Directories

A run of blocks between a START_GROUP and an END_GROUP marker is a directory:
one time slice, one position slice or the whole trajectory of one particle,
depending on the name of the opening field.

Once a directory is closed a few quantities are derived from the fields
read, only when the fields they need are there:

 - xp = atan2(Bx, Bz)
 - yp = atan2(By, Bz)
 - E  = m (G - 1) c^2 / e
'''
import logging
from typing import Callable, Optional, Tuple

import numpy

from .blocks import BlockHeader, BlockReader
from .enum import FieldRetention, GroupKind
from .reporting import Reporter


logger = logging.getLogger(__name__)

VOCABULARY = frozenset([
    'x', 'y', 'z',
    'Bx', 'By', 'Bz',
    'G', 'rxy',
    'fEx', 'fEy', 'fEz', 'fBx', 'fBy', 'fBz',
    'm', 'q', 'nmacro', 'rmacro',
    'ID', 'time', 'position',
    'xp', 'yp', 'E',
])


class PhysicalConstants(object):
    '''Constants needed by the derived fields, in SI units.'''

    __slots__ = ('speed_of_light', 'elementary_charge')

    def __init__(self, speed_of_light: float, elementary_charge: float):
        object.__setattr__(self, 'speed_of_light', float(speed_of_light))
        object.__setattr__(self, 'elementary_charge', float(elementary_charge))

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is read-only')

    def __repr__(self):
        return f'<{self.__class__.__name__}(c={self.speed_of_light}, e={self.elementary_charge})>'


class Record(dict):
    '''Field name -> value for one closed directory, in arrival order.'''

    def __init__(self, kind=GroupKind.UNKNOWN, offset=None):
        super().__init__()
        self.kind = kind
        self.offset = offset
        self.closed = False

    def __repr__(self):
        return '<%s(%s, %s)>' % (
            self.__class__.__name__,
            self.kind.value,
            ', '.join('%s%s' % (name, numpy.shape(value)) for name, value in self.items()),
        )


def compute_derived_fields(record: Record, constants: PhysicalConstants) -> Record:
    '''Add xp, yp and E where their prerequisites are present, silently skip otherwise.'''
    if 'Bx' in record and 'Bz' in record:
        record['xp'] = numpy.arctan2(record['Bx'], record['Bz'])

    if 'By' in record and 'Bz' in record:
        record['yp'] = numpy.arctan2(record['By'], record['Bz'])

    if 'm' in record and 'G' in record:
        record['E'] = (
            numpy.multiply(record['m'], numpy.subtract(record['G'], 1))
            * constants.speed_of_light ** 2
            / constants.elementary_charge
        )

    return record


class GroupAssembler(object):
    '''Consume the blocks of one directory and build the corresponding Record.'''

    def __init__(self, reader: BlockReader, constants: PhysicalConstants,
                 retention: FieldRetention = FieldRetention.STRICT_VOCABULARY,
                 reporter: Optional[Reporter] = None,
                 on_block: Optional[Callable[[], None]] = None):
        self.reader = reader
        self.constants = constants
        self.retention = retention
        self.reporter = reporter or Reporter(logger=logger)
        self.on_block = on_block

    def is_retained(self, name: str) -> bool:
        return self.retention == FieldRetention.RETAIN_ALL or name in VOCABULARY

    def _block_consumed(self):
        if self.on_block is not None:
            self.on_block()

    def assemble(self, opening: BlockHeader, value) -> Tuple[Record, GroupKind]:
        '''The opening block has already been read together with its payload:
        go on reading until the directory is closed or the stream ends.'''
        name = opening.field_name
        kind = GroupKind.from_field_name(name)

        if kind == GroupKind.UNKNOWN:
            self.reporter.warning('Unknown directory type %s...' % name, offset=opening.offset)

        record = Record(kind=kind, offset=opening.offset)
        # stored even without a payload, it names the directory
        record[name] = value

        while True:
            header = self.reader.read_header()
            if header.end_of_stream:
                if not header.synthetic:
                    self._block_consumed()
                break

            if header.ends_group:
                record.closed = True
                self._block_consumed()
                break

            value = self.reader.read_payload(header)
            self._block_consumed()

            if value is None:
                continue

            if self.is_retained(header.field_name):
                record[header.field_name] = value
            else:
                self.reporter.info('dropping field \'%s\' of %s directory' % (header.field_name, kind.value))

        if record.closed:
            compute_derived_fields(record, self.constants)
        else:
            self.reporter.warning('%s directory opened by \'%s\' is not closed before the end of stream' % (
                kind.value, name), offset=opening.offset)

        logger.debug('assembled %r' % record)

        return record, kind
