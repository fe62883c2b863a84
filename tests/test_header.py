import io
import logging
from datetime import datetime, timezone

import pytest

from gdfstruct.enum import FieldRetention, Severity
from gdfstruct.exceptions import FormatError
from gdfstruct.header import FileHeader, read_header, GDF_MAGIC
from gdfstruct.reporting import Reporter
from gdfstruct.streams import Stream


def test_header_size():
    assert FileHeader().size == 46


def test_read_header(gdf):
    data = gdf(creator='GPT', destination='beamline', version=(1, 1), creator_version=(3, 42),
               creation_time=86400).getvalue()
    stream = Stream(data)
    reporter = Reporter()

    header = read_header(stream, reporter=reporter)

    assert header.magic.value == GDF_MAGIC
    assert header.is_valid()
    assert header.creator.value == 'GPT'
    assert header.destination_name == 'beamline'
    assert header.format_version == (1, 1)
    assert header.creator_version == (3, 42)
    assert header.created == datetime(1970, 1, 2, tzinfo=timezone.utc)
    assert header.retention == FieldRetention.STRICT_VOCABULARY
    assert reporter.warnings == []
    # positioned at the first block
    assert stream.tell() == 46


def test_default_destination(gdf):
    header = read_header(Stream(gdf(destination='').getvalue()))

    assert header.destination.value == ''
    assert header.destination_name == 'General'


def test_retain_all_creator(gdf):
    header = read_header(Stream(gdf(creator='GDFA').getvalue()))

    assert header.retention == FieldRetention.RETAIN_ALL


def test_creator_without_terminator(gdf):
    header = read_header(Stream(gdf(creator='A' * 16).getvalue()))

    assert header.creator.value == 'A' * 16


def test_wrong_magic_is_recoverable(gdf):
    events = []
    reporter = Reporter(log=lambda severity, text: events.append((severity, text)))

    header = read_header(Stream(gdf(magic=0xcafe).getvalue()), reporter=reporter)

    assert not header.is_valid()
    assert len(reporter.warnings) == 1
    assert 'should be 94325877' in reporter.warnings[0].text
    assert [_ for _ in events if _[0] == Severity.RECOVERABLE] == [
        (Severity.RECOVERABLE, reporter.warnings[0].text),
    ]


def test_truncated_header(gdf):
    data = gdf().getvalue()[:30]

    with pytest.raises(FormatError) as e:
        read_header(Stream(data))

    assert e.value.reason == 'truncated header'
    assert e.value.offset == 30


def test_header_read_from_the_middle(gdf):
    '''reading the header doesn't disturb a cursor somewhere else'''
    data = gdf(creator='GPT').array('x', [1.0, 2.0]).getvalue()
    stream = Stream(data)
    stream.seek(50)

    header = read_header(stream)

    assert header.creator.value == 'GPT'
    assert stream.tell() == 50


def test_header_read_not_seekable(gdf):
    class Pipe(io.RawIOBase):
        def __init__(self, data):
            super().__init__()
            self._data = io.BytesIO(data)

        def readable(self):
            return True

        def seekable(self):
            return False

        def read(self, size=-1):
            return self._data.read(size)

        def tell(self):
            return self._data.tell()

    pipe = Pipe(gdf().getvalue())
    pipe.read(4)

    with pytest.raises(FormatError) as e:
        read_header(Stream(pipe))

    assert e.value.reason == 'stream not seekable'


def test_wrong_magic_is_logged_once(gdf, caplog):
    with caplog.at_level(logging.DEBUG, logger='gdfstruct'):
        read_header(Stream(gdf(magic=0xcafe).getvalue()))

    assert len([_ for _ in caplog.records if _.levelno == logging.WARNING]) == 1
