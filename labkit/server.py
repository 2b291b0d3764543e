"""A small single-process HTTP file server with an edge-detection endpoint."""

import contextlib
import os
import re
import signal
import socket
import sys
import time
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from labkit.bmp import BmpError
from labkit.http import (
    REQUEST_MAX_SIZE,
    HttpRequest,
    end_headers,
    mime_type,
    parse_request,
    response_message,
    send_header,
    send_string,
    start_response,
)
from labkit.parallel import compute_dotp
from labkit.sobel import image_proc

USAGE = "--files directory/ [--port 8000 --concurrency 5]\n"
HEADER_TAG_LEFT = "<center><h1>"
HEADER_TAG_RIGHT = "</h1><hr></center>"
CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"
FILTER_PREFIX = "/filter"

_CHUNK = 8192

_TEMPLATE = (
    "<!DOCTYPE html> "
    '<html lang="en"> '
    "<head> "
    '    <meta charset="UTF-8"> '
    "    <title>Sobel Edge Detector Result</title> "
    "</head> "
    "<body> "
    "<h1>Image Filter</h1> "
    "<h3>Original</h3> "
    '<img src=".%s"> '
    "<h3>Sobel-Edge-Detectored</h3> "
    '<img src=".%s"> '
    "</body> "
    "</html>"
)


@dataclass
class ServerConfig:
    """Settings given on the command line."""

    port: int = 8000
    files_directory: str = "./files/"
    dotp_size: int = 100000
    delay: float = 5.0


class UsageError(Exception):
    """Raised for bad command-line arguments; an empty message means help was asked for."""


def make_header(stream: BinaryIO, ftype: str, status_code: int,
                size: Optional[int] = None) -> None:
    """Write the status line and headers; Content-Length is left out when size is None or -1.

    The status line always reports 200 OK, whatever status_code says.
    """
    start_response(stream, 200)
    send_header(stream, CONTENT_TYPE, ftype)
    if size is not None and size != -1:
        send_header(stream, CONTENT_LENGTH, str(size))
    end_headers(stream)


def make_error(stream: BinaryIO, status_code: int) -> None:
    """Write a short HTML page naming the error."""
    body = (HEADER_TAG_LEFT + response_message(status_code) + HEADER_TAG_RIGHT).encode("utf-8")
    make_header(stream, "text/html", status_code, len(body))
    send_string(stream, body)


def serve_file(stream: BinaryIO, path: str) -> None:
    """Send the file at path with its type and length."""
    make_header(stream, mime_type(os.path.basename(path)), 200, os.path.getsize(path))
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK), b""):
            send_string(stream, chunk)


def serve_directory(stream: BinaryIO, path: str) -> None:
    """Send an HTML list of links to the entries of a directory."""
    make_header(stream, "text/html", 200, None)
    send_string(stream, '<a href="../">Parent directory</a>')
    for name in [".", ".."] + sorted(os.listdir(path)):
        send_string(stream, f'<a href=".{path}{name}">{name}</a>\n')


def _handle_bmp_request(stream: BinaryIO, path: str) -> None:
    try:
        result = image_proc(path)
    except BmpError:
        print("Error occurred reading bmp image. ")
        return
    make_header(stream, "text/html", 200, None)
    send_string(stream, _TEMPLATE % (path, result))


def handle_files_request(stream: BinaryIO, request: HttpRequest) -> None:
    """Answer a GET relative to the current directory.

    A BMP under /filter is run through the edge detector; a file is sent as is;
    a directory sends its index.html or else a listing; anything else is a 404.
    """
    if request.path.startswith(FILTER_PREFIX) and mime_type(request.path) == "image/bmp":
        _handle_bmp_request(stream, "." + request.path[len(FILTER_PREFIX):])
        return
    path = "." + request.path
    if os.path.isfile(path):
        serve_file(stream, path)
    elif os.path.isdir(path):
        index = path + "//index.html"
        if os.path.exists(index):
            serve_file(stream, index)
        else:
            serve_directory(stream, path)
    else:
        make_error(stream, 404)


def handle_report_request(stream: BinaryIO, size: int) -> None:
    """Run the dot-product benchmark and send its report."""
    body = compute_dotp(size).encode("utf-8")
    make_header(stream, "text/html", 200, len(body))
    send_string(stream, body)


def dispatch(stream: BinaryIO, data: bytes, config: ServerConfig) -> bool:
    """Answer one raw request.

    Returns True when a file request was served, after which the server
    pretends to do some heavy work.
    """
    try:
        request = parse_request(data)
    except ValueError:
        make_error(stream, 400)
        return False
    if not request.path.startswith("/"):
        make_error(stream, 400)
        return False
    if ".." in request.path:
        make_error(stream, 403)
        return False

    print(request.path)
    if request.path == "/report":
        handle_report_request(stream, config.dotp_size)
        return False
    if request.method != "GET":
        print(f"Sorry we only support GET method so far... {request.method}")
        return False
    handle_files_request(stream, request)
    return True


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match[1]) if match else 0


def parse_args(argv: List[str]) -> ServerConfig:
    """Build the configuration from the arguments that follow the program name."""
    config = ServerConfig()
    args = iter(argv)
    for arg in args:
        if arg in ("--files", "--dotp-size", "--port"):
            value = next(args, None)
            if value is None:
                raise UsageError(f"Expected argument after {arg}")
            if arg == "--files":
                config.files_directory = value
            elif arg == "--dotp-size":
                config.dotp_size = _atoi(value)
            else:
                config.port = _atoi(value)
        elif arg == "--help":
            raise UsageError("")
        else:
            raise UsageError(f"Unrecognized option: {arg}")
    return config


def serve_forever(config: ServerConfig) -> None:
    """Listen on all interfaces and answer connections one at a time until interrupted."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind(("", config.port))
        server.listen(1024)
        print(f"Listening on port {config.port}...")
        try:
            while True:
                try:
                    conn, (host, port) = server.accept()
                except OSError as exc:
                    print(f"Error accepting socket: {exc}", file=sys.stderr)
                    continue
                print(f"Accepted connection from {host} on port {port}")
                with conn:
                    data = conn.recv(REQUEST_MAX_SIZE)
                    with conn.makefile("wb") as stream:
                        busy = dispatch(stream, data, config)
                if busy:
                    time.sleep(config.delay)
        except KeyboardInterrupt:
            signum = signal.SIGINT
            print(f"Caught signal {int(signum)}: {signal.strsignal(signum)}")
            print(f"Closing socket {server.fileno()}")


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, change to the files directory and serve."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        config = parse_args(args)
    except UsageError as exc:
        if str(exc):
            print(exc, file=sys.stderr)
        print(f"Usage: server {USAGE}", end="", file=sys.stderr)
        return 0
    with contextlib.suppress(OSError):
        os.chdir(config.files_directory)
    try:
        serve_forever(config)
    except OSError as exc:
        print(f"Failed to set up socket: {exc}", file=sys.stderr)
        return exc.errno or 1
    return 0


if __name__ == "__main__":
    sys.exit(main())