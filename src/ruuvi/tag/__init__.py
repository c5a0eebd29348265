"""RuuviTag advertisement frame codecs.

Every supported data format has a stateless ``decode_formatN`` /
``encode_formatN`` pair working on one fixed-length frame. :func:`decode`
detects the format from the tag byte and dispatches; :func:`encode` picks
the codec from the reading's type. Slots that the frame marks as "not
available" come back as ``None``.

This package only converts bytes to readings and back. JSON mapping, frame
logs and the command-line tool live in :mod:`ruuvi.dataio` and
:mod:`ruuvi.tools`.
"""

from .decoder import (
    CODECS,
    DataFormat,
    DecodedData,
    Reading,
    decode,
    decode_format,
    detect_format,
    encode,
    format_of,
)
from .envelope import (
    MANUFACTURER_ID,
    decode_manufacturer_data,
    encode_format5_manufacturer_data,
    strip_manufacturer_data,
    wrap_manufacturer_data,
)
from .errors import (
    EmptyInputError,
    InvalidLengthError,
    NilInputError,
    RuuviError,
    UnknownFormatError,
    ValueOutOfRangeError,
    WrongFormatTagError,
)
from .format2_4 import (
    Format2Reading,
    Format4Reading,
    decode_format2,
    decode_format4,
    encode_format2,
    encode_format4,
)
from .format3 import Format3Reading, decode_format3, encode_format3
from .format5 import Format5Reading, decode_format5, encode_format5

__all__ = [
    "CODECS",
    "DataFormat",
    "DecodedData",
    "EmptyInputError",
    "Format2Reading",
    "Format3Reading",
    "Format4Reading",
    "Format5Reading",
    "InvalidLengthError",
    "MANUFACTURER_ID",
    "NilInputError",
    "Reading",
    "RuuviError",
    "UnknownFormatError",
    "ValueOutOfRangeError",
    "WrongFormatTagError",
    "decode",
    "decode_format",
    "decode_format2",
    "decode_format3",
    "decode_format4",
    "decode_format5",
    "decode_manufacturer_data",
    "detect_format",
    "encode",
    "encode_format2",
    "encode_format3",
    "encode_format4",
    "encode_format5",
    "encode_format5_manufacturer_data",
    "format_of",
    "strip_manufacturer_data",
    "wrap_manufacturer_data",
]
