# dicekv

Pure-Python building blocks for an in-memory key-value server that speaks
the RESP wire protocol.

## Modules

- `dicekv.resp`: `encode(value, is_simple)` turns strings, integers, floats,
  exceptions and lists or tuples into RESP; anything else becomes the nil
  reply (`RESP_NIL`). `RespParser` decodes values incrementally from any
  object with a `read` (or `read1`) method, through `decode_one()` and
  `decode_multiple()`. A bulk string of length -1 decodes as `"(nil)"`.
  It raises `ConnectionClosedError` when a read returns no bytes and
  `CrossProtocolError` for data that is not RESP; both derive from
  `RespError`.
- `dicekv.varint`: little-endian base-128 varints (`encode_uint`,
  `decode_uint`), zig-zag signed varints (`encode_int`, `decode_int`) and
  reversed varints (`encode_uint_rev`, `decode_uint_rev`,
  `encoded_uint_size`).
- `dicekv.deque`: `BasicDeque` (one contiguous buffer) and `Deque` (a linked
  list of 256-byte buffers), both holding strings as compact entries, with
  `lpush`, `rpush`, `lpop`, `rpop` and `len()`. Popping an empty deque
  raises `DequeEmptyError`. The entry codec is exposed as `encode_entry`,
  `encode_str`, `encode_int`, `decode_entry` and the `encoded_*_size`
  helpers.
- `dicekv.bytelist`: `ByteList` and `ByteListNode`, the doubly linked list of
  byte buffers used by `Deque`, with `append`, `prepend`, `delete`,
  `deep_copy` and iteration over nodes.
- `dicekv.bitmap`: `ByteArray`, a bit array where bit 0 is the most
  significant bit of the first byte, with `set_bit`, `get_bit`, `bit_count`,
  `increase_size`, `resize_if_necessary` and `deep_copy`; plus `popcount`
  and `reverse_byte`.
- `dicekv.bitpos`: the BITPOS command. `eval_bitpos(args, value)` takes the
  arguments after the command name and the value the key holds (or `None`)
  and returns the RESP reply; `get_bit_pos` and the parsing helpers are
  available on their own.
- `dicekv.murmur`: `murmur3_64(data, seed)` and the incremental
  `Murmur3Hash64` hasher (first 64 bits of MurmurHash3 x64-128).
- `dicekv.bloom`: `BloomOptions`, `BloomFilter` (`add`, `exists`, `info`,
  `deep_copy`) and the commands `bf_init`, `bf_add`, `bf_exists` and
  `bf_info`, which work on any mutable mapping used as the key space and
  return RESP replies. Failures inside the filter raise `BloomError`.
- `dicekv.session`: `User` (bcrypt-hashed passwords via `set_password`),
  the thread-safe `Users` registry and `Session` with `is_active`,
  `activate`, `validate` and `expire`. `validate` raises `AuthError` on an
  unknown user or a wrong password. A session whose `auth_password` is empty
  counts as active.
- `dicekv.client`: `RedisCmd` and `Client`, per-connection state on a file
  descriptor with `read`, `write` and a transaction queue (`txn_begin`,
  `txn_queue`, `txn_discard`).
- `dicekv.errors`: building error replies, e.g. `new_err_arity("GET")`
  gives `b"-ERR wrong number of arguments for 'get' command\r\n"`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import io

from dicekv.resp import RespParser, encode
from dicekv.deque import Deque
from dicekv.bloom import bf_add, bf_exists

wire = encode(["SET", "k", "v"], False)
parser = RespParser(io.BytesIO(wire))
assert parser.decode_one() == ["SET", "k", "v"]

dq = Deque()
dq.rpush("hello")
dq.lpush("42")
assert dq.lpop() == "42"
assert len(dq) == 1

store = {}
assert bf_add(["bf", "hello"], store) == b":1\r\n"
assert bf_exists(["bf", "hello"], store) == b":1\r\n"
```

## What this package does not do

It is a set of components, not a running server. There is no network
listener, no command table or dispatcher tying the commands together, no
key store with expiry, and no persistence. The BITPOS and bloom filter
functions take the stored value or a plain mapping from the caller, and no
command-line program is installed.