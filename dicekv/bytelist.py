"""Doubly linked list whose nodes each hold a byte buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

# Bookkeeping cost charged to the list for every node it allocates.
NODE_SIZE = 40


@dataclass(eq=False)
class ByteListNode:
    """A list node owning a byte buffer with a nominal capacity."""

    buf: bytearray = field(default_factory=bytearray)
    capacity: int = 0
    next: Optional[ByteListNode] = field(default=None, repr=False)
    prev: Optional[ByteListNode] = field(default=None, repr=False)


class ByteList:
    """A doubly linked list of byte-buffer nodes.

    ``size`` tracks the bookkeeping cost of the nodes created through the
    list and not yet deleted from it.
    """

    def __init__(self, buf_len: int):
        self.buf_len = buf_len
        self.size = 0
        self.head: Optional[ByteListNode] = None
        self.tail: Optional[ByteListNode] = None

    def new_node(self) -> ByteListNode:
        """Create a detached node with the list's default buffer capacity."""
        return self.new_node_with_capacity(self.buf_len)

    def new_node_with_capacity(self, capacity: int) -> ByteListNode:
        """Create a detached node whose buffer has the given capacity."""
        self.size += NODE_SIZE
        return ByteListNode(bytearray(), capacity)

    def append(self, node: ByteListNode) -> None:
        """Attach ``node`` at the tail of the list."""
        node.prev = self.tail
        if self.tail is not None:
            self.tail.next = node
        self.tail = node
        if self.head is None:
            self.head = node

    def prepend(self, node: ByteListNode) -> None:
        """Attach ``node`` at the head of the list."""
        node.next = self.head
        if self.head is not None:
            self.head.prev = node
        self.head = node
        if self.tail is None:
            self.tail = node

    def delete(self, node: ByteListNode) -> None:
        """Unlink ``node`` from the list."""
        if node is self.head:
            self.head = node.next
        if node is self.tail:
            self.tail = node.prev
        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        node.next = node.prev = None
        self.size -= NODE_SIZE

    def deep_copy(self) -> ByteList:
        """Return an independent copy of the list and all its buffers."""
        clone_list = ByteList(self.buf_len)
        clone_list.size = self.size
        prev: Optional[ByteListNode] = None
        for node in self:
            clone = ByteListNode(bytearray(node.buf), node.capacity, prev=prev)
            if prev is None:
                clone_list.head = clone
            else:
                prev.next = clone
            prev = clone
        clone_list.tail = prev
        return clone_list

    def __iter__(self) -> Iterator[ByteListNode]:
        node = self.head
        while node is not None:
            yield node
            node = node.next