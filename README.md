# vzporedni

Small, self-contained programs that show the classic problems and tools of
concurrent and distributed programming, built on Python's own threads, locks,
conditions, semaphores, queues and sockets. Only the standard library is used.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

Each demonstration is a command of its own. Pass `--help` to any of them to see
its options.

| Command | What it shows | Main options |
| --- | --- | --- |
| `vzporedni-greetings` | starting threads, joining them, sending through a queue, reading until the sender closes | mode `sequential`, `concurrent`, `channel`, `closed`; `-n`, `-b`, `-w` |
| `vzporedni-channels` | reading two writers at once with an optional timeout, a broadcast to listeners, a letter pipeline | subcommands `select`, `announce`, `caps`, `value` |
| `vzporedni-philosophers` | the dining philosophers | `-d` dishes; `-s` `uncontrolled`, `naive`, `picking`, `backoff`, `ordered`, `channels`; `--seats`, `--delay` |
| `vzporedni-contention` | a polite worker starved by a greedy one; two people in a livelock | subcommands `starvation -t`, `livelock -a --period` |
| `vzporedni-readers-writers` | readers and writers sharing a book | `-w`, `-r`, `-c`; `-p` `none`, `mutex`, `counting`, `semaphore`, `rwlock`; `--unit` |
| `vzporedni-pi` | estimating π by the Monte Carlo method, with thirteen ways of sharing the work | `-i`, `-g`, `-s`, `-m` |
| `vzporedni-clock` | wall-clock time against monotonic time | `--warmup`, `--duration` |
| `vzporedni-barrier` | barriers from a condition variable, from two semaphore gates, and from spinning on a lock | `-g`, `-p`; `-b` `none`, `cond`, `gates`, `spin`; `--jitter` |
| `vzporedni-producer-consumer` | producers and consumers sharing a bounded buffer or a queue | `-p`, `-c`, `-b`, `-n`, `--queue` |
| `vzporedni-shared-map` | many threads writing and reading one dictionary, with or without a lock | `-gw`, `-gr`, `-s`, `--unlocked` |
| `vzporedni-storage` | create, read, update and delete on the local to-do store | none |
| `vzporedni-tcp` | a TCP server and client exchanging stamped greetings | `-s`, `-p`, `-m`, `--structured`, `--delay` |
| `vzporedni-rpc` | the to-do store served by remote calls | `-s`, `-p`, `-c http` or `-c tcp` |
| `vzporedni-rest` | the to-do store served over HTTP with JSON bodies | `-s`, `-p` |
| `vzporedni-ntp` | one NTP query and the estimated round-trip delay and clock offset | `-s` |

Some choices are broken on purpose and may hang or give wrong results: the
`uncontrolled` and `naive` philosophers, the `race` and `spin` methods of
`vzporedni-pi`, the `none` policy of the readers and writers, and
`vzporedni-shared-map --unlocked`.

### Networked commands

`vzporedni-tcp`, `vzporedni-rpc` and `vzporedni-rest` start a server on port
9876 (change it with `-p`) when no `-s` is given, and a client that talks to
the server named by `-s` when one is.

- `vzporedni-tcp` sends plain text by default; `--structured` sends a message
  and a timestamp as one line of JSON. The server waits `--delay` seconds
  (5 by default) before it answers, so several clients can be seen being served
  at once.
- `vzporedni-rpc -c http` uses XML-RPC over HTTP; `-c tcp` uses one JSON
  request and reply per line over a plain TCP connection. Server and client
  must use the same kind. Methods are `TodoStorage.Create`, `TodoStorage.Read`,
  `TodoStorage.Update` and `TodoStorage.Delete`.
- `vzporedni-rest` serves `/todos` and `/todos/<task>`: `POST` creates, `GET`
  reads one or all, `PUT` updates, `DELETE` removes. Any other path shows a
  short usage page.

The clients of `vzporedni-rpc` and `vzporedni-rest` run a fixed sequence:
create `predavanja`, read it, create `vaje`, read all, mark `predavanja` done,
delete `vaje`, read again.

## Using it from Python

```python
from vzporedni.storage import Todo, TodoStorage, TodoNotFound

store = TodoStorage()
store.create(Todo("predavanja", False))
store.create(Todo("vaje", False))
store.update(Todo("predavanja", True))
store.delete(Todo("vaje", False))
print(store.read(Todo("", False)))   # every task

try:
    store.read(Todo("izpit", False))
except TodoNotFound:
    print("no such task")
```

```python
from vzporedni.montecarlo import Method, estimate_pi

result = estimate_pi(1_000_000, 4, Method.SEEDED, seed=0)
print(result.shots, result.hits, result.value)
```

```python
from vzporedni.barrier import CyclicBarrier, run

events = run(workers=4, printouts=3, barrier_factory=CyclicBarrier)
```

```python
from vzporedni.gpu_arch import arch_name, cores_per_sm

print(arch_name(8, 0), cores_per_sm(8, 0))   # Ampere 64
```

```python
from vzporedni.ntp import ntp_to_unix_ns, unix_ns_to_ntp

sec, frac = unix_ns_to_ntp(0)
print(sec)                       # 2208988800, the NTP value of the Unix epoch
print(ntp_to_unix_ns(sec, frac)) # 0
```

The servers can also be started from code: `vzporedni.tcp_messaging.serve`,
`vzporedni.rpc.make_server` and `vzporedni.rest.make_server` return a bound
server to run with `serve_forever()`; `RpcClient` and `RestClient` talk to them.

## What it does not do

- It does not talk to a GPU. `vzporedni.gpu_arch` only maps a compute
  capability to an architecture name and a number of cores per multiprocessor;
  there is no command that queries a device.
- There is no gRPC service; the to-do store is served only by XML-RPC, JSON
  lines over TCP, and REST.
- Messages are not logged with vector clocks.