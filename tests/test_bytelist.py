import pytest

from dicekv.bytelist import NODE_SIZE, ByteList, ByteListNode


def _new_node(bl: ByteList, value: int) -> ByteListNode:
    node = bl.new_node()
    node.buf.append(value)
    return node


def _to_bytes(bl: ByteList) -> bytes:
    return bytes(node.buf[0] for node in bl)


def _get_node(bl: ByteList, value: int) -> ByteListNode:
    for node in bl:
        if node.buf[0] == value:
            return node
    raise AssertionError(f"node {value} not found")


def test_operations_sequence():
    bl = ByteList(1)
    steps = [
        ("a1", b"1"),
        ("a2", b"12"),
        ("p0", b"012"),
        ("a3", b"0123"),
        ("p4", b"40123"),
        ("d0", b"4123"),
        ("d4", b"123"),
        ("d3", b"12"),
        ("d1", b"2"),
        ("d2", b""),
    ]
    for op, expected in steps:
        value = ord(op[1])
        if op[0] == "a":
            bl.append(_new_node(bl, value))
        elif op[0] == "p":
            bl.prepend(_new_node(bl, value))
        else:
            bl.delete(_get_node(bl, value))
        assert _to_bytes(bl) == expected
    assert bl.head is None
    assert bl.tail is None


def test_prev_links_match_forward_order():
    bl = ByteList(4)
    for value in b"abc":
        bl.append(_new_node(bl, value))
    bl.prepend(_new_node(bl, ord("z")))

    backwards = []
    node = bl.tail
    while node is not None:
        backwards.append(node.buf[0])
        node = node.prev
    assert bytes(backwards) == b"cbaz"


def test_size_accounting():
    bl = ByteList(8)
    first = bl.new_node()
    second = bl.new_node_with_capacity(100)
    assert bl.size == 2 * NODE_SIZE
    assert first.capacity == 8
    assert second.capacity == 100
    bl.append(first)
    bl.append(second)
    bl.delete(first)
    assert bl.size == NODE_SIZE
    assert bl.head is second


def test_deep_copy_is_independent():
    original = ByteList(4)
    original.size = 8

    node1 = original.new_node()
    node1.buf.extend([1, 2, 3, 4])
    node2 = original.new_node()
    node2.buf.extend([5, 6, 7, 8])
    node1.next = node2
    node2.prev = node1
    original.head = node1
    original.tail = node2

    clone = original.deep_copy()

    assert clone.buf_len == original.buf_len
    assert clone.size == original.size
    assert clone.head.buf[0] == original.head.buf[0]
    assert [bytes(n.buf) for n in clone] == [bytes(n.buf) for n in original]
    assert clone.tail.buf == bytearray([5, 6, 7, 8])
    assert clone.tail.prev is clone.head

    clone.head.buf[0] = 9
    assert original.head.buf[0] != clone.head.buf[0]

    original.head.buf[1] = 8
    assert original.head.buf[1] != clone.head.buf[1]


@pytest.mark.parametrize("count", [0, 1, 5])
def test_deep_copy_preserves_order(count):
    bl = ByteList(2)
    for value in range(count):
        bl.append(_new_node(bl, value))
    clone = bl.deep_copy()
    assert [n.buf[0] for n in clone] == list(range(count))
    assert all(a is not b for a, b in zip(clone, bl))