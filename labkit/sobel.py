"""Sobel edge detection over 24-bit BMP images."""

from pathlib import Path
from typing import Sequence, Union

from labkit.bmp import BmpImage, Pixel, new_image, read_image, write_image

SOBEL = ((-1, 0, 1), (-2, 0, 2), (-1, 0, 1))
SUFFIX = "_sobel.bmp"


def sobel_value(pixels: Sequence[Sequence[Pixel]], row: int, col: int) -> int:
    """Return the clamped, doubled horizontal gradient around (row, col)."""
    if row < 1 or col < 1:
        raise IndexError("the 3x3 neighbourhood leaves the image")
    res = 0
    for di, kernel_row in enumerate(SOBEL):
        source_row = pixels[row - 1 + di]
        for dj, weight in enumerate(kernel_row):
            pxl = source_row[col - 1 + dj]
            res += (pxl.blue + pxl.green + pxl.red) * weight
    res *= 2  # brighten the result a little
    return max(0, min(255, res))


def sobel_filter(image: BmpImage) -> BmpImage:
    """Return a grey edge image; the one-pixel border stays black."""
    result = new_image(image.width, image.header.height)
    for row in range(1, image.height - 1):
        for col in range(1, image.width - 1):
            value = sobel_value(image.pixels, row, col)
            result.pixels[row][col] = Pixel(value, value, value)
    return result


def output_name(filename: str) -> str:
    """Return the name the filtered image is written to."""
    stem = filename[: len(filename) - 4] if len(filename) >= 4 else filename
    return stem + SUFFIX


def image_proc(filename: Union[str, Path]) -> str:
    """Filter a BMP file, write the result beside it and return the new file's name.

    Raises BmpError if the input cannot be read.
    """
    filename = str(filename)
    image = read_image(filename)
    out = output_name(filename)
    write_image(sobel_filter(image), out)
    return out