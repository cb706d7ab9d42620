# imgate

Building blocks for an instant-messaging gateway, in plain Python with no
third-party dependencies.

## What is inside

- `imgate.core`: the frame op codes (`OpCode`), the `Frame` and `DialerContext`
  dataclasses, and default timings in seconds (`DEFAULT_READ_WAIT`,
  `DEFAULT_WRITE_WAIT`, `DEFAULT_LOGIN_WAIT`, `DEFAULT_HEARTBEAT`).
- `imgate.event`: `Event`, a one-shot signal. `fire()` returns `True` only for
  the call that fired it; `wait(timeout)` and `has_fired()` observe it.
- `imgate.channel`: `Channel`, which wraps a framed connection. `readloop(listener)`
  reads frames, answers pings with pongs, skips empty payloads and hands every
  other payload to `listener.receive(channel, payload)` through an executor;
  `push(payload)` queues data for a background writer. Misuse raises
  `ChannelError`.
- `imgate.channels`: `ChannelMap`, a thread-safe registry of channels by id.
- `imgate.naming`: the abstract `Naming` interface for service discovery,
  `DefaultService` with `dial_url()`, `new_entry(...)` and `ServiceNotFoundError`.
- `imgate.net`: `get_local_ip()`, `is_private_address(address)` (raises
  `ValueError` for an invalid address) and `real_ip(headers, remote_addr)`,
  which picks the first public address from `X-Forwarded-For`, then
  `X-Real-Ip`, then the host part of the remote address.
- `imgate.selector`: `hash_code(key)` (CRC-32) and `HashSelector`, which maps a
  channel id to the same service while the service list is unchanged.
- `imgate.clients`: `ClientMap`, a registry of service clients; `services()`
  returns all of them and `services(key, value)` those whose `meta[key]` equals
  `value`.
- `imgate.router`: `Router`, `FuncTree` and `Context` for running commands
  through middleware and handler chains.
- `imgate.logger`: `with_field`, `with_fields`, `with_error`, `set_level`,
  `init` with `Settings`, and `init_daily_rolling` for files rotated at midnight.
- `imgate.report`: `Report`, which collects `Result` records from a load test
  and prints a summary.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Routing a command

```python
from imgate.router import Context, Router

def handle_talk(ctx):
    ctx.resp("Success", {"echo": ctx.request})

router = Router()
router.use(lambda ctx: ctx.next())          # middleware runs first
router.handle("chat.user.talk", handle_talk)

replies = []
ctx = Context(request="hello", responder=lambda status, body: replies.append((status, body)))
router.serve("chat.user.talk", ctx)
```

Middlewares added with `use` apply to commands registered after them. A
command with no handlers is answered with status `"NotImplemented"` and body
`{"message": "NotImplemented"}`.

## Picking a service instance

```python
from imgate.naming import new_entry
from imgate.selector import HashSelector

services = [
    new_entry("chat-1", "chat", "tcp", "10.0.0.1", 8000),
    new_entry("chat-2", "chat", "tcp", "10.0.0.2", 8000),
]
service_id = HashSelector().lookup("channel-42", services)
```

`lookup` raises `ValueError` when the list is empty.

## Logging

```python
from imgate import logger

logger.set_level("debug")
logger.with_fields({"module": "gateway"}).info("started")
logger.init(logger.Settings(filename="logs/gateway.log", format="json"))
```

Level names are `trace`, `debug`, `info`, `warn`/`warning`, `error`, `fatal`
and `panic`; an unknown name raises `ValueError` from `set_level`.

## Load-test reports

```python
import sys
from imgate.report import Report, Result

report = Report(sys.stdout)
report.add(Result(status_code=200, duration=0.12))
snapshot = report.finalize(1.5)
```

`finalize` prints the total time, slowest, fastest and average latency,
requests per second, a response-time histogram, latency percentiles (10, 50,
75, 90, 99) and the status code and error distributions, and returns the
figures as a `Snapshot`.

## What it does not do

The package holds the parts of a gateway, not a running one. It has no
network listener or websocket/tcp transport, so `Channel` needs a connection
object you supply (with `read_frame`, `write_frame`, `flush` and
`set_read_deadline`). `Naming` is an interface only: no registry backend is
included. There is no packet format, no command-line tool and no server to
start.