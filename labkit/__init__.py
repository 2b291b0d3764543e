"""Small systems-programming exercises: linked lists, an LFSR, matrices, threaded sums, BMP images and a tiny web server."""

__version__ = "0.1.0"

__all__ = [
    "basics",
    "bmp",
    "http",
    "lfsr",
    "linked",
    "matrix",
    "parallel",
    "server",
    "simd",
    "sobel",
]