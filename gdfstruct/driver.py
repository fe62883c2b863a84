'''
Top level loop decoding a whole GDF stream into records.

    from gdfstruct import decode, PhysicalConstants

    result = decode('beam.gdf', PhysicalConstants(299792458.0, 1.602176634e-19))

    for record in result.trajectory:
        print(record['ID'], record['E'])
'''
import logging
import time
from typing import Callable, Dict, List, Optional

import numpy

from .blocks import BlockReader
from .enum import FieldRetention, GroupKind
from .exceptions import DecodeCancelled
from .groups import GroupAssembler, PhysicalConstants, Record
from .header import FileHeader, read_header
from .meta import Endianess
from .reporting import Reporter
from .streams import Stream


logger = logging.getLogger(__name__)

# bare values written by GPT at the end of a run
STATISTICS = {
    'cputime':   'CPU Time   : %0.6f',
    'numderivs': 'Num. Derivs: %0.0f',
}


class DecodeResult(object):
    '''What a successful decode returns: the three series in arrival order.'''

    def __init__(self, header: FileHeader):
        self.header = header
        self.time: List[Record] = []
        self.position: List[Record] = []
        self.trajectory: List[Record] = []
        self.counts: Dict[GroupKind, int] = {kind: 0 for kind in GroupKind}
        self.warnings = []

    def __iter__(self):
        return iter((self.time, self.position, self.trajectory))

    def __repr__(self):
        return '<%s(%s)>' % (
            self.__class__.__name__,
            ', '.join('%s=%d' % (kind.value, count) for kind, count in self.counts.items()),
        )

    def add(self, record: Record, kind: GroupKind):
        self.counts[kind] += 1

        collection = {
            GroupKind.TIME:       self.time,
            GroupKind.POSITION:   self.position,
            GroupKind.TRAJECTORY: self.trajectory,
        }.get(kind)

        if collection is not None:
            collection.append(record)


class StreamDriver(object):
    '''Read blocks until the end of the stream, handing each directory to the GroupAssembler.

    The progress callable receives the fraction of bytes consumed after each block,
    should_cancel is asked once per block and aborts the decoding when it returns True.'''

    def __init__(self, stream, constants: PhysicalConstants,
                 progress: Optional[Callable[[float], None]] = None,
                 log: Optional[Callable] = None,
                 should_cancel: Optional[Callable[[], bool]] = None,
                 endianess: Endianess = Endianess.NATIVE,
                 retention: Optional[FieldRetention] = None):
        self.stream = stream if isinstance(stream, Stream) else Stream(stream)
        self.constants = constants
        self.progress = progress
        self.should_cancel = should_cancel
        self.endianess = endianess
        self.retention = retention
        self.reporter = Reporter(log=log, logger=logger)
        self.length = self.stream.length() if progress is not None else None
        self.statistics = {}

    def report_progress(self):
        if self.progress is None or not self.length:
            return

        self.progress(min(1.0, max(0.0, self.stream.tell() / self.length)))

    def check_cancel(self):
        if self.should_cancel is not None and self.should_cancel():
            raise DecodeCancelled(offset=self.stream.tell())

    def block_consumed(self):
        self.report_progress()
        self.check_cancel()

    def keep_statistic(self, name, value):
        '''Remember the last value seen, GPT may write them more than once.'''
        if name not in STATISTICS or value is None:
            return

        try:
            value = float(numpy.ravel(value)[0]) if numpy.size(value) == 1 else None
        except (TypeError, ValueError):
            return

        if value is not None:
            self.statistics[name] = value

    def report_statistics(self):
        for name, template in STATISTICS.items():
            value = self.statistics.get(name)
            if value is not None and value > 0:
                self.reporter.info(template % value)

    def run(self) -> DecodeResult:
        start = time.perf_counter()

        header = read_header(self.stream, endianess=self.endianess, reporter=self.reporter)
        retention = self.retention if self.retention is not None else header.retention
        logger.debug('using %s for creator \'%s\'' % (retention, header.creator.value))

        reader = BlockReader(self.stream, endianess=self.endianess)
        assembler = GroupAssembler(
            reader,
            self.constants,
            retention=retention,
            reporter=self.reporter,
            on_block=self.block_consumed,
        )

        result = DecodeResult(header)

        while True:
            self.check_cancel()

            block = reader.read_header()
            if block.end_of_stream:
                if not block.synthetic:
                    self.report_progress()
                break

            value = reader.read_payload(block)
            self.report_progress()

            if block.starts_group:
                record, kind = assembler.assemble(block, value)
                result.add(record, kind)
            else:
                # a bare value outside any directory: only framing
                logger.debug('skipping top level block %r' % block)
                self.keep_statistic(block.field_name, value)

        result.warnings = list(self.reporter.warnings)

        self.report_statistics()
        self.reporter.info('Load time  : %0.6f secs' % (time.perf_counter() - start))

        return result


def decode(source, constants: PhysicalConstants, progress=None, log=None, should_cancel=None,
           endianess=Endianess.NATIVE, retention=None) -> DecodeResult:
    '''Decode a GDF stream: "source" is a path, some bytes or an open binary file.

    Either the complete result is returned or a FormatError is raised.'''
    with Stream(source) as stream:
        driver = StreamDriver(
            stream,
            constants,
            progress=progress,
            log=log,
            should_cancel=should_cancel,
            endianess=endianess,
            retention=retention,
        )

        return driver.run()
