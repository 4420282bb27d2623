# godis

Building blocks for a Redis-style in-memory key-value server, written in pure
Python with no third-party dependencies.

## Installation

```
pip install godis
```

Install the test dependencies with `pip install "godis[test]"`.

## What is inside

| Module | Contents |
| --- | --- |
| `godis.dicts` | `SimpleDict` and the sharded, thread-safe `ConcurrentDict`, both with `scan` |
| `godis.linkedlist` | the `List` interface and `LinkedList`, a doubly linked list |
| `godis.strset` | `StrSet` plus `intersect`, `union` and `diff` |
| `godis.skiplist`, `godis.sortedset`, `godis.border` | a skiplist-backed `SortedSet` with score and lexicographic range borders |
| `godis.bitmap` | `BitMap`, a growable bit array |
| `godis.wildcard` | glob patterns (`*`, `?`, `[...]`, `[^...]`, `\` escapes) |
| `godis.geohash` | encoding, decoding, distance and neighbour ranges |
| `godis.consistenthash` | `HashRing` with hash-tag support (`{tag}`) |
| `godis.idgenerator` | snowflake-style `IDGenerator` |
| `godis.lockmap` | `RWLock` and `Locks`, a table of read-write locks keyed by string |
| `godis.pool` | `Pool`, a bounded object pool |
| `godis.syncutil` | `AtomicBool` and `WaitGroup` |
| `godis.timewheel` | `TimeWheel`, plus `delay`, `at` and `cancel` on a shared wheel |
| `godis.logger` | an asynchronous leveled logger writing to stdout and, after `setup`, a dated log file |
| `godis.utils` | command-line helpers, `equals`, `convert_range` and `remove_duplicates` |

## Examples

Sorted sets and range borders:

```python
from godis.sortedset import SortedSet
from godis.border import parse_score_border

zset = SortedSet()
zset.add("s1", 1)
zset.add("s2", 2)
zset.add("s3", 3)

low, high = parse_score_border("(1"), parse_score_border("+inf")
print([e.member for e in zset.range(low, high, 0, -1, False)])  # ['s2', 's3']
print([e.member for e in zset.pop_min(1)])                        # ['s1']
```

Scanning a concurrent dict with a pattern:

```python
from godis.dicts import ConcurrentDict

d = ConcurrentDict(16)
for i in range(100):
    d.put(f"key{i}", i)

cursor, found = 0, []
while True:
    keys, cursor = d.scan(cursor, 20, "key1*")
    found.extend(keys)
    if cursor == 0:
        break
```

Glob patterns:

```python
from godis.wildcard import compile_pattern

pattern = compile_pattern("h[^ab]llo")
pattern.is_match("hcllo")  # True
pattern.is_match("hallo")  # False
```

Geohash:

```python
from godis import geohash

code = geohash.encode(48.669, -4.32913)
geohash.to_string(geohash.from_int(code))  # 'gbsuv7zt7zntw'
geohash.decode(code)                        # (48.669..., -4.32913...)
```

Consistent hashing:

```python
from godis.consistenthash import HashRing

ring = HashRing(3, None)
ring.add_node("a", "b", "c", "d")
ring.pick_node("123{abc}")  # 'b', same node as "abc"
```

Delayed jobs:

```python
from godis.timewheel import delay, cancel

delay(5.0, "reminder", lambda: print("five seconds later"))
cancel("reminder")
```

## What this package does not do

It is a library of parts, not a server. There is no command to start, no
network listener, no protocol parser or reply encoder, no command dispatch,
no configuration loading and no persistence to append-only or snapshot files.
The only list type is `LinkedList`; there is no paged list.

## Running the tests

```
pytest
```