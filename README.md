# iavl

Building blocks for a versioned AVL+ key-value store: the byte encodings,
node cache, in-memory database, write batching and the compressed form of
exported node streams.

## Modules

- `iavl.encoding`: unsigned and zig-zag signed varints and varint
  length-prefixed bytes: `encode_uvarint`, `decode_uvarint`, `encode_varint`,
  `decode_varint`, `encode_bytes`, `decode_bytes`, `encode_32bytes_hash`, and
  the size helpers `encode_uvarint_size`, `encode_varint_size`,
  `encode_bytes_size`. Decoders return the value and the number of bytes read;
  malformed or truncated input raises `DecodeError`, whose `consumed`
  attribute tells how many bytes were read before the failure.
- `iavl.byteutil`: `HexBytes`, a `bytes` subclass whose `str()` is upper-case
  hex and which converts to and from a JSON string literal with `to_json()`
  and `HexBytes.from_json()`; `cp_incr(bz)` returns the same-length
  big-endian increment of a key, or `None` when every byte is `0xFF`.
- `iavl.color`: ANSI helpers `green`, `blue`, `cyan` and `treat`, which leave
  already coloured strings alone, and `colored_bytes`. `colored_bytes`
  renders printable bytes as text and other bytes as hex only when the
  `TENDERMINT_IAVL_COLORS_ON` environment variable is non-empty; otherwise it
  returns just the first byte as a character.
- `iavl.cache`: `LRUCache(max_element_count)`, a least-recently-used cache of
  objects that have a `key` attribute. `add` returns the node it replaced or
  evicted, `get` marks an entry as recently used, `has` does not, and
  `remove` returns the removed node or `None`.
- `iavl.memdb`: `MemDB`, an in-memory database kept in key order. Keys must be
  non-empty (`KeyEmptyError`) and values not `None` (`ValueNilError`).
  `iterator(start, end)` and `reverse_iterator(start, end)` cover `[start,
  end)`, with `None` meaning open; the iterators take a snapshot of the range,
  offer `valid`/`key`/`value`/`next`, and can also be used in a `for` loop
  yielding `(key, value)` pairs. `new_batch()` returns a `MemDBBatch` whose
  operations are applied on `write()`; a written or closed batch raises
  `BatchClosedError`. All errors derive from `DBError`.
- `iavl.fastnode`: `FastNode(key, version_last_updated_at, value)`, with
  `to_bytes()`, `FastNode.deserialize(key, buf)` and `encoded_size()`.
- `iavl.batch`: `BatchWithFlusher(db, flush_threshold)`, which writes the
  queued operations to the database and starts a new batch whenever the next
  set or delete would take the estimated batch size (plus 100 bytes of
  overhead) past the threshold.
- `iavl.rand`: `Rand`, a thread-safe pseudo-random generator seeded from OS
  randomness or from a given seed, and the module-level helpers `seed`,
  `rand_str`, `rand_int`, `rand_int31`, `rand_bytes` and `rand_perm`. Not for
  cryptographic use.
- `iavl.compress`: `ExportNode` and the compression of post-order node
  streams. `CompressExporter` wraps any iterable of `ExportNode`s, drops branch
  keys, delta-encodes leaf keys against the previous leaf and stores branch
  versions relative to the highest child version; it raises `ExportDone` (a
  `StopIteration`) at the end. `CompressImporter` wraps any object with an
  `add(node)` method and reverses the compression. `delta_encode`,
  `delta_decode` and `diff_offset` are available directly.

## Installation

```
pip install .
```

## Examples

Encoding:

```python
from iavl.encoding import encode_bytes, decode_bytes

data = encode_bytes(b"hello")
value, consumed = decode_bytes(data)
assert value == b"hello" and consumed == len(data)
```

In-memory database and batches:

```python
from iavl.memdb import MemDB
from iavl.batch import BatchWithFlusher

db = MemDB()
batch = BatchWithFlusher(db, 100_000)
batch.set(b"a", b"1")
batch.set(b"b", b"2")
batch.write()

for key, value in db.iterator(None, None):
    print(key, value)
```

LRU cache of fast nodes:

```python
from iavl.cache import LRUCache
from iavl.fastnode import FastNode

cache = LRUCache(2)
cache.add(FastNode(b"k", 1, b"v"))
assert cache.has(b"k")
```

Compressed export streams:

```python
from iavl.compress import delta_encode, delta_decode

encoded = delta_encode(b"abc", b"a")   # b"\x01bc"
assert delta_decode(encoded, b"a") == b"abc"
```

## What this package does not do

It holds the supporting pieces only. There is no AVL+ tree itself: no
mutable or immutable tree, no node hashing, versioning, proofs or pruning, no
exporter or importer that reads or rebuilds a tree (the compression classes
work on any stream of `ExportNode`s), no on-disk database backend (`MemDB` is
the only storage), and no command-line tool.

## Running the tests

```
pip install ".[test]"
pytest
```