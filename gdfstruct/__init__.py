"""
# gdfstruct: GDF files for humans.

GDF is the self-describing binary format written by the General Particle
Tracer (GPT) simulator. A file is a fixed preamble followed by a flat
sequence of blocks, each one carrying its name, its type and the number of
elements it contains. Blocks are grouped into directories, and a directory
is one of

 1. a time slice, opened by a field named "time"
 2. a position slice, opened by a field named "position"
 3. the trajectory of a particle, opened by a field named "ID"

The only operation defined is decode(): it reads the whole stream and
returns the directories as records (field name -> numpy array) collected
in three series, adding the derived quantities xp, yp and E where possible.

Fixed layout structures (the preamble and the block headers) are described
declaratively with Chunk and the fields in gdfstruct.fields.
"""
from .driver import decode, DecodeResult, StreamDriver
from .enum import FieldRetention, GroupKind, Severity
from .exceptions import FormatError, DecodeCancelled, RecoverableWarning
from .groups import PhysicalConstants, Record
from .header import read_header, FileHeader
from .meta import Endianess
