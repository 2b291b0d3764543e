"""Reading and writing uncompressed 24-bit BMP images."""

import struct
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import List, NamedTuple, Union

MAGIC = 19778
HEADER_SIZE = 54

_MAGIC_FORMAT = struct.Struct("<H")
_HEADER_FORMAT = struct.Struct("<IIIIiiHHIIiiII")

PathLike = Union[str, Path]


class BmpError(Exception):
    """Raised when a BMP file cannot be opened, recognised or fully read."""


@dataclass
class BmpHeader:
    """The file and info headers that follow the two magic bytes."""

    file_size: int
    reserved: int
    offset_bits: int
    info_size: int
    width: int
    height: int
    planes: int
    bit_count: int
    compression: int
    image_size: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    colors_used: int
    colors_important: int


class Pixel(NamedTuple):
    """One 24-bit colour; stored on disk as blue, green, red."""

    red: int = 0
    green: int = 0
    blue: int = 0


@dataclass
class BmpImage:
    """A header and its pixel rows, the first row being the top of the picture."""

    header: BmpHeader
    pixels: List[List[Pixel]]

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return abs(self.header.height)


def row_padding(width: int) -> int:
    """Return the number of zero bytes that end each stored row."""
    return width % 4


def default_header(width: int, height: int) -> BmpHeader:
    """Return the header of a 24-bit image; a negative height means top-down rows."""
    if width < 0:
        raise ValueError("width must not be negative")
    return BmpHeader(
        file_size=(3 * width + row_padding(width)) * abs(height),
        reserved=0,
        offset_bits=HEADER_SIZE,
        info_size=40,
        width=width,
        height=height,
        planes=1,
        bit_count=24,
        compression=0,
        image_size=0,
        x_pels_per_meter=0,
        y_pels_per_meter=0,
        colors_used=0,
        colors_important=0,
    )


def pack_header(header: BmpHeader) -> bytes:
    """Return the magic number followed by the packed header."""
    try:
        return _MAGIC_FORMAT.pack(MAGIC) + _HEADER_FORMAT.pack(*astuple(header))
    except struct.error as exc:
        raise BmpError(f"header cannot be packed: {exc}") from exc


def unpack_header(data: bytes) -> BmpHeader:
    """Parse the magic number and header from the start of data."""
    if len(data) < _MAGIC_FORMAT.size or _MAGIC_FORMAT.unpack_from(data)[0] != MAGIC:
        raise BmpError("not a BMP file")
    if len(data) < HEADER_SIZE:
        raise BmpError("BMP header is truncated")
    return BmpHeader(*_HEADER_FORMAT.unpack_from(data, _MAGIC_FORMAT.size))


def new_image(width: int, height: int) -> BmpImage:
    """Return a black image of the given size with a default header."""
    header = default_header(width, height)
    pixels = [[Pixel() for _ in range(width)] for _ in range(abs(height))]
    return BmpImage(header, pixels)


def _stored_rows(image_height: int, rows: list) -> list:
    # A positive height means rows are stored bottom-up.
    return list(reversed(rows)) if image_height > 0 else list(rows)


def read_image(path: PathLike) -> BmpImage:
    """Read a 24-bit BMP file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise BmpError(f"cannot open {path}: {exc}") from exc
    header = unpack_header(data)
    width = header.width
    if width < 0:
        raise BmpError(f"invalid image width {width}")
    row_bytes = 3 * width
    stride = row_bytes + row_padding(width)
    rows = []
    for y in range(abs(header.height)):
        start = HEADER_SIZE + y * stride
        chunk = data[start:start + row_bytes]
        if len(chunk) != row_bytes:
            raise BmpError("pixel data is truncated")
        rows.append([
            Pixel(red=chunk[x + 2], green=chunk[x + 1], blue=chunk[x])
            for x in range(0, row_bytes, 3)
        ])
    return BmpImage(header, _stored_rows(header.height, rows))


def write_image(image: BmpImage, path: PathLike) -> None:
    """Write image as a 24-bit BMP file."""
    header = image.header
    if len(image.pixels) != abs(header.height):
        raise ValueError("number of pixel rows does not match the header height")
    if any(len(row) != header.width for row in image.pixels):
        raise ValueError("a pixel row does not match the header width")
    padding = bytes(row_padding(header.width))
    body = bytearray(pack_header(header))
    for row in _stored_rows(header.height, image.pixels):
        for pixel in row:
            body += bytes((pixel.blue, pixel.green, pixel.red))
        body += padding
    try:
        Path(path).write_bytes(bytes(body))
    except OSError as exc:
        raise BmpError(f"cannot open {path}: {exc}") from exc