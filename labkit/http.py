"""A minimal HTTP/1.0 request parser and response writer."""

import re
from dataclasses import dataclass
from typing import BinaryIO, Union

REQUEST_MAX_SIZE = 8192

_REQUEST_LINE = re.compile(rb"([A-Z]+) ([^ \n]+)[^\n]*\n")

_MESSAGES = {
    100: "100 Continue",
    200: "200 OK",
    301: "Redirection 301: Moved Permanently",
    400: "Error 400: Bad Request",
    401: "Error 401: Unauthorized",
    403: "Error 403: Forbidden",
    404: "Error 404: Not Found",
}
_DEFAULT_MESSAGE = "Error 500: Internal Server Error"

_MIME_TYPES = {
    ".html": "text/html",
    ".htm": "text/html",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".bmp": "image/bmp",
    ".png": "image/png",
    ".css": "text/css",
    ".js": "application/javascript",
    ".pdf": "application/pdf",
}
_DEFAULT_MIME = "text/plain"


@dataclass(frozen=True)
class HttpRequest:
    """The method and path of a request line."""

    method: str
    path: str


def parse_request(data: bytes) -> HttpRequest:
    """Parse the request line at the start of data.

    Only the first 8192 bytes are looked at, and a NUL byte ends the input.
    Raises ValueError if there is no complete request line.
    """
    buffer = bytes(data[:REQUEST_MAX_SIZE]).split(b"\0", 1)[0]
    match = _REQUEST_LINE.match(buffer)
    if match is None:
        raise ValueError("malformed HTTP request line")
    return HttpRequest(match[1].decode("ascii"), match[2].decode("latin-1"))


def response_message(status_code: int) -> str:
    """Return the reason text sent with a status code."""
    return _MESSAGES.get(status_code, _DEFAULT_MESSAGE)


def start_response(stream: BinaryIO, status_code: int) -> None:
    """Write the status line."""
    send_string(stream, f"HTTP/1.0 {status_code} {response_message(status_code)}\r\n")


def send_header(stream: BinaryIO, key: str, value: str) -> None:
    """Write one header line."""
    send_string(stream, f"{key}: {value}\r\n")


def end_headers(stream: BinaryIO) -> None:
    """Write the blank line that ends the headers."""
    send_string(stream, "\r\n")


def send_string(stream: BinaryIO, data: Union[str, bytes]) -> None:
    """Write data to the stream; text is sent as UTF-8."""
    stream.write(data.encode("utf-8") if isinstance(data, str) else bytes(data))


def mime_type(file_name: str) -> str:
    """Return the Content-Type for a file name, judged by its last dot."""
    dot = file_name.rfind(".")
    if dot == -1:
        return _DEFAULT_MIME
    return _MIME_TYPES.get(file_name[dot:], _DEFAULT_MIME)