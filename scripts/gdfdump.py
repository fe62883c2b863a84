#!/usr/bin/env python3
'''
Dump the content of a GDF file produced by GPT, a little like readelf(1) does.

 $ gdfdump.py [--records] <gdf file>

The physical constants used for the derived quantities can be overridden with
the environment variables GDF_SPEED_OF_LIGHT and GDF_ELEMENTARY_CHARGE.
'''
import logging
import os
import sys

import numpy

from gdfstruct import decode, PhysicalConstants, FormatError


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.WARNING)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} [--records] <gdf file>')
    sys.exit(1)


def get_constants():
    return PhysicalConstants(
        speed_of_light=float(os.environ.get('GDF_SPEED_OF_LIGHT', 299792458.0)),
        elementary_charge=float(os.environ.get('GDF_ELEMENTARY_CHARGE', 1.602176634e-19)),
    )


def dump_header(hdr):
    print(f'''GDF Header:
  Magic:                             {hdr.magic.value}
  Created:                           {hdr.created.isoformat()}
  Creator:                           {hdr.creator.value} {hdr.creator_major.value}.{hdr.creator_minor.value:02d}
  Destination:                       {hdr.destination_name}
  Format version:                    {hdr.format_major.value}.{hdr.format_minor.value:02d}
  Field retention:                   {hdr.retention.name}''')


def dump_counts(result):
    print('Directories:')
    for kind, count in result.counts.items():
        print(f'  {kind.value:<33}  {count}')


def dump_records(name, records):
    for idx, record in enumerate(records):
        description = ' '.join(f'{field}{numpy.shape(value)}' for field, value in record.items())
        print(f'[{name} {idx:04d}] {description}')


if __name__ == '__main__':
    args = sys.argv[1:]
    show_records = '--records' in args
    args = [_ for _ in args if _ != '--records']

    if len(args) != 1:
        usage(sys.argv[0])

    path = args[0]

    try:
        result = decode(path, get_constants())
    except FormatError as e:
        print(f'{path}: {e}', file=sys.stderr)
        sys.exit(2)

    dump_header(result.header)
    dump_counts(result)

    for warning in result.warnings:
        print(f'warning: {warning.text}')

    if show_records:
        dump_records('time', result.time)
        dump_records('position', result.position)
        dump_records('trajectory', result.trajectory)
