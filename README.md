# ubw

`ubw` sends a steady stream of HTTP/1.1 requests to one URL from a
configurable number of concurrent workers. Once a second it prints how many
requests fell into each status class:

```
2xx: 812, 3xx: 0, 4xx: 3, 5xx: 0, failure: 1, total: 816
```

The per-class counts are reset after every line. The total keeps growing.
Status codes outside 200–599 and transport errors are counted as `failure`.

## Installation

```
pip install .
```

## Usage

Before any traffic is sent, `ubw` asks you to recite its incantation on
standard input, one phrase per line, in order. Lines that do not hold the next
phrase are ignored. Pass `--instant-cast` to skip that step. Running `ubw` with
no arguments at all only asks for the incantation and then exits.

```
ubw -u https://example.com/ -c 16 -t 30s --instant-cast
```

Options:

| Option | Meaning |
| --- | --- |
| `-u URL` | The URL to request, `http` (plain) or `https` (TLS). Required. |
| `-c N` | Number of concurrent workers, 0 to 65535. The default is 1. |
| `-t DURATION` | Stop after this long, for example `250ms`, `30s`, `5m` or `1h 30m`. |
| `-i ADDRESS` | An IP address to connect to when looking up the URL's host gives no address. |
| `-H, --header "Name: value"` | Add a request header. May be repeated; a later header with the same name replaces an earlier one. |
| `-X METHOD` | `GET` (the default) or `POST`. Other methods are rejected. |
| `-d, --data TEXT` | Request body for `POST`. |
| `-D, --data-binary FILE` | Read the `POST` body from a file. |
| `-T, --content-type TYPE` | `Content-Type` for the `POST` body. |
| `-4`, `-6` | Accepted; IPv6 and IPv4 lookups are always both enabled. |
| `-A, --accept-header`, `--proxy-header` | Accepted and stored, but not sent. |
| `--instant-cast` | Start immediately without the incantation. |
| `-V, --version` | Print the version and exit. |

A `POST` request needs exactly one of `-d` and `-D`. Duration units are
`ns`, `us`, `ms`, `s`, `m`, `h`, `d`, `w`, `M` (months) and `y`, along with
their longer spellings such as `secs` or `minutes`.

A host name is looked up for an IPv6 address first and an IPv4 address
second. An IP address written in the URL is used as it is.

Without `-t`, the run continues until the process gets Ctrl+C (SIGINT) or
SIGTERM. It then prints `Shutting down gracefully...`, stops the workers and
prints `All tasks completed, goodbye!`.

Problems with the options (an unknown method, a missing body, an unreadable
body file, an invalid header, a host that cannot be resolved) are printed as
`Error: ...` and the command exits with status 1.

## How requests are sent

Each request opens a new connection, which is closed once the response has
been read in full. If connecting fails, the request is counted as a failure
straight away. If the request fails on an open connection, it is retried on a
new one with exponential backoff (2 ms, 4 ms, 8 ms, ...), up to ten attempts,
and then counted as a failure.

## Using it from Python

- `ubw.opts.parse_args(argv)` returns an `Opts`; `ubw.opts.parse_duration`
  and `ubw.opts.build_header_map` are available on their own.
- `ubw.before_request.prepare_work_instance(opts)` resolves the target and
  returns a `ubw.client.WorkInstance`.
- `ubw.client.request_loop(work_instance, shutdown_event)` keeps sending until
  the `asyncio.Event` is set; counts are in `work_instance.request_counter`.
- `ubw.cli.run(opts)` does the whole run; `ubw.cli.main(argv)` is the command.
- `ubw.pcg64si.Pcg64Si` is a small seedable 64-bit PCG random generator.

## What it does not do

`ubw` speaks HTTP/1.1 only and has no HTTP/2. It does not follow redirects,
does not go through a proxy, and keeps no record of latencies or response
bodies: it only counts status classes.