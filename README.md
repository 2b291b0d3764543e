# labkit

A collection of small, self-contained exercises in low-level programming
ideas, written as an ordinary Python package: control-flow warm-ups, linked
lists, a 16-bit linear-feedback shift register, matrix multiplication in every
loop order and cache-blocked transposition, threshold sums in scalar and
vectorized styles, threaded dot products and vector additions, 24-bit BMP
reading and writing, a Sobel edge detector and a minimal HTTP/1.0 file server.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Library overview

| Module            | What it offers |
|-------------------|----------------|
| `labkit.basics`   | `eccentric`, `farewell`, `greet`, `fun`, `sum_transformed` |
| `labkit.linked`   | `Node`, `has_cycle`, `append_node`, `reverse_list`, `iter_values`, `list_size` |
| `labkit.lfsr`     | `lfsr_calculate`, `lfsr_numbers`, `cycle_length` |
| `labkit.matrix`   | `multiply` in the six loop orders, `transpose_naive`, `transpose_blocking`, `benchmark_orderings`, `benchmark_transpose` |
| `labkit.simd`     | `sum_threshold`, `sum_unrolled`, `sum_vectorized`, `sum_vectorized_unrolled` |
| `labkit.parallel` | `gen_array`, `dotp_naive`, `dotp_manual`, `dotp_reduction`, `compute_dotp`, `v_add_naive`, `v_add_adjacent`, `v_add_chunks`, `hello_threads` |
| `labkit.bmp`      | `BmpImage`, `BmpHeader`, `Pixel`, `BmpError`, `read_image`, `write_image`, `new_image`, `default_header`, `pack_header`, `unpack_header`, `row_padding` |
| `labkit.sobel`    | `sobel_value`, `sobel_filter`, `output_name`, `image_proc` |
| `labkit.http`     | `HttpRequest`, `parse_request`, `response_message`, `mime_type`, `start_response`, `send_header`, `end_headers`, `send_string` |
| `labkit.server`   | `ServerConfig`, `UsageError`, `parse_args`, `dispatch`, `serve_forever` and the request handlers |

### Examples

```python
from labkit.basics import fun, sum_transformed

fun(3)                                   # -12
sum_transformed([3, 1, 4, 1, 5, 9, 0])   # -156 (stops at the first zero)
```

```python
from labkit.linked import Node, append_node, reverse_list, iter_values, has_cycle

head = Node(1)
for value in range(2, 6):
    head = append_node(head, value)
head = reverse_list(head)
list(iter_values(head))     # [5, 4, 3, 2, 1]
has_cycle(head)             # False
```

```python
from labkit.lfsr import lfsr_calculate, cycle_length

lfsr_calculate(1)           # 32768
cycle_length(1, 32)         # 65535
```

Matrices are flat, column-major lists of `n * n` numbers. `multiply` returns
`c + a*b` and leaves its arguments unchanged:

```python
from labkit.matrix import multiply, transpose_blocking

multiply(2, [1, 0, 0, 1], [1, 2, 3, 4], [0, 0, 0, 0], "kji")  # [1, 2, 3, 4]
transpose_blocking(2, 1, [1, 2, 3, 4])                        # [1, 3, 2, 4]
```

```python
from labkit.simd import sum_threshold

sum_threshold([100, 200, 128], 2)   # 656: values >= 128, summed over 2 passes
```

```python
from labkit.bmp import new_image, write_image, read_image, Pixel
from labkit.sobel import image_proc

image = new_image(4, 2)
image.pixels[0][0] = Pixel(red=255, green=0, blue=0)
write_image(image, "picture.bmp")
read_image("picture.bmp").pixels[0][0]   # Pixel(red=255, green=0, blue=0)
image_proc("picture.bmp")                # 'picture_sobel.bmp'
```

Failures to open, recognise or fully read a BMP file raise `BmpError`.

```python
from labkit.http import parse_request, mime_type, response_message

parse_request(b"GET /index.html HTTP/1.0\r\n")  # HttpRequest(method='GET', path='/index.html')
mime_type("photo.jpeg")                         # 'image/jpeg'
response_message(404)                           # 'Error 404: Not Found'
```

`parse_request` raises `ValueError` when the data holds no complete request
line.

## Commands

- `labkit-matrix multiply [n]` times the six multiplication loop orders on
  random `n`-by-`n` matrices (default 1000) and prints Gflop/s for each.
- `labkit-matrix transpose <n> <blocksize>` times the naive and blocked
  transposes, checks their results and prints milliseconds for each.
- `labkit-simd [--iterations N] [--size N] [--seed N]` sums a random array of
  bytes with every threshold-sum variant, prints each result and time, and
  reports any variant that disagrees with the plain sum.
- `labkit-parallel dotp [--size N] [--repeat N]` prints timings of the
  threaded dot products for 1 up to the number of CPUs.
- `labkit-parallel vadd [--size N] [--repeat N]` times and checks the threaded
  vector additions.
- `labkit-parallel hello [--threads N]` prints one greeting line per thread.
- `labkit-server` serves a directory over HTTP:

  ```
  labkit-server --files ./files/ --port 8000 --dotp-size 100000
  ```

  The defaults are `./files/`, port 8000 and a dot-product size of 100000;
  `labkit-server --help` prints the usage. The server changes into the files
  directory and then answers:

  - `/report` with the dot-product timing report;
  - `/filter/<name>.bmp` with a page showing `<name>.bmp` next to its
    Sobel-filtered copy, which is written beside it as `<name>_sobel.bmp`;
  - a file path with the file, its type judged by its extension;
  - a directory with its `index.html`, or else a list of links to its entries;
  - anything else with a 404 page.

  Paths that do not start with `/` get a 400 page and paths containing `..`
  get a 403 page.

## Limitations

- The server handles one connection at a time in a single process, and after
  each file request it pauses for `ServerConfig.delay` seconds (5 by default)
  to stand in for heavy work.
- Only `GET` is answered for files; other methods are logged and left without
  a reply.
- The status line of every response reads `200 OK`; error pages name the
  actual error only in their body.
- `/report` runs the full dot-product benchmark (100 repetitions for each
  thread count), so it can take a long time for large sizes.
- Only uncompressed 24-bit BMP images are read and written.