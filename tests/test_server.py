import io
from unittest.mock import patch

import pytest

from labkit.bmp import Pixel, new_image, write_image
from labkit.http import HttpRequest
from labkit.server import (
    ServerConfig,
    UsageError,
    dispatch,
    handle_files_request,
    handle_report_request,
    main,
    make_error,
    make_header,
    parse_args,
    serve_directory,
    serve_file,
)


def _split(raw):
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.split(b"\r\n")
    headers = dict(line.split(b": ", 1) for line in lines[1:])
    return lines[0], headers, body


def _config():
    return ServerConfig(delay=0.0)


def test_make_header_with_length():
    stream = io.BytesIO()
    make_header(stream, "text/html", 200, 5)
    assert stream.getvalue() == (
        b"HTTP/1.0 200 OK\r\nContent-Type: text/html\r\nContent-Length: 5\r\n\r\n"
    )


def test_make_header_without_length():
    stream = io.BytesIO()
    make_header(stream, "text/plain", 200, None)
    _, headers, _ = _split(stream.getvalue())
    assert b"Content-Length" not in headers
    assert headers[b"Content-Type"] == b"text/plain"


def test_make_error_page():
    stream = io.BytesIO()
    make_error(stream, 404)
    status, headers, body = _split(stream.getvalue())
    assert body == b"<center><h1>Error 404: Not Found</h1><hr></center>"
    assert int(headers[b"Content-Length"]) == len(body)


def test_serve_file(tmp_path):
    page = tmp_path / "page.html"
    page.write_bytes(b"<p>content</p>")
    stream = io.BytesIO()
    serve_file(stream, str(page))
    _, headers, body = _split(stream.getvalue())
    assert body == b"<p>content</p>"
    assert headers[b"Content-Type"] == b"text/html"
    assert int(headers[b"Content-Length"]) == len(body)


def test_serve_directory_lists_entries(tmp_path):
    (tmp_path / "a.txt").write_text("x")
    stream = io.BytesIO()
    serve_directory(stream, str(tmp_path) + "/")
    _, headers, body = _split(stream.getvalue())
    assert body.startswith(b'<a href="../">Parent directory</a>')
    assert b">a.txt</a>\n" in body
    assert b"Content-Length" not in headers


def test_files_request_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.txt").write_bytes(b"hello")
    stream = io.BytesIO()
    handle_files_request(stream, HttpRequest("GET", "/notes.txt"))
    _, headers, body = _split(stream.getvalue())
    assert body == b"hello"
    assert headers[b"Content-Type"] == b"text/plain"


def test_files_request_directory_index(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "site").mkdir()
    (tmp_path / "site" / "index.html").write_bytes(b"<p>index</p>")
    stream = io.BytesIO()
    handle_files_request(stream, HttpRequest("GET", "/site"))
    assert _split(stream.getvalue())[2] == b"<p>index</p>"


def test_files_request_directory_listing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "b.txt").write_text("y")
    stream = io.BytesIO()
    handle_files_request(stream, HttpRequest("GET", "/docs"))
    body = _split(stream.getvalue())[2]
    assert b"Parent directory" in body
    assert b">b.txt</a>" in body


def test_files_request_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    stream = io.BytesIO()
    handle_files_request(stream, HttpRequest("GET", "/nothing.html"))
    assert b"Error 404: Not Found" in _split(stream.getvalue())[2]


def test_dispatch_bad_request():
    stream = io.BytesIO()
    assert dispatch(stream, b"garbage", _config()) is False
    assert b"Error 400: Bad Request" in stream.getvalue()


def test_dispatch_relative_path_is_bad_request():
    stream = io.BytesIO()
    assert dispatch(stream, b"GET index.html HTTP/1.0\n", _config()) is False
    assert b"Error 400: Bad Request" in stream.getvalue()


def test_dispatch_forbidden():
    stream = io.BytesIO()
    assert dispatch(stream, b"GET /../secret HTTP/1.0\n", _config()) is False
    assert b"Error 403: Forbidden" in stream.getvalue()


def test_dispatch_non_get_sends_nothing():
    stream = io.BytesIO()
    assert dispatch(stream, b"POST /x HTTP/1.0\n", _config()) is False
    assert stream.getvalue() == b""


def test_dispatch_get_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "style.css").write_bytes(b"body{}")
    stream = io.BytesIO()
    assert dispatch(stream, b"GET /style.css HTTP/1.0\r\n", _config()) is True
    _, headers, body = _split(stream.getvalue())
    assert body == b"body{}"
    assert headers[b"Content-Type"] == b"text/css"


def test_dispatch_filter_bmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    image = new_image(4, 4)
    for row in image.pixels:
        row[2:] = [Pixel(200, 200, 200)] * 2
    write_image(image, tmp_path / "pic.bmp")
    stream = io.BytesIO()
    assert dispatch(stream, b"GET /filter/pic.bmp HTTP/1.0\n", _config()) is True
    body = _split(stream.getvalue())[2]
    assert b'<img src="../pic.bmp">' in body
    assert b'<img src="../pic_sobel.bmp">' in body
    assert (tmp_path / "pic_sobel.bmp").exists()


def test_dispatch_filter_missing_bmp_sends_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    stream = io.BytesIO()
    assert dispatch(stream, b"GET /filter/none.bmp HTTP/1.0\n", _config()) is True
    assert stream.getvalue() == b""


def test_report_request():
    stream = io.BytesIO()
    with patch("os.cpu_count", return_value=1):
        handle_report_request(stream, 10)
    _, headers, body = _split(stream.getvalue())
    assert int(headers[b"Content-Length"]) == len(body)
    assert b"Naive: 1 thread(s) took" in body
    assert body.count(b"\n") == 3


def test_parse_args_defaults():
    config = parse_args([])
    assert (config.port, config.files_directory, config.dotp_size) == (8000, "./files/", 100000)


def test_parse_args_options():
    config = parse_args(["--files", "www/", "--port", "9090", "--dotp-size", "42"])
    assert (config.port, config.files_directory, config.dotp_size) == (9090, "www/", 42)


def test_parse_args_non_numeric_port_is_zero():
    assert parse_args(["--port", "abc"]).port == 0


@pytest.mark.parametrize("argv", [["--help"], ["--bogus"], ["--port"], ["--files"]])
def test_parse_args_usage_errors(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_parse_args_messages():
    with pytest.raises(UsageError, match="Expected argument after --port"):
        parse_args(["--port"])
    with pytest.raises(UsageError, match="Unrecognized option: --bogus"):
        parse_args(["--bogus"])


def test_main_usage(capsys):
    assert main(["--bogus"]) == 0
    err = capsys.readouterr().err
    assert "Unrecognized option: --bogus" in err
    assert "--files directory/ [--port 8000 --concurrency 5]" in err