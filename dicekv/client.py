"""Connected clients and the commands they queue in transactions."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .session import Session


@dataclass
class RedisCmd:
    """A parsed command: its name and arguments."""

    id: int = 0
    cmd: str = ""
    args: list[str] = field(default_factory=list)


@dataclass(eq=False)
class Client:
    """A client connection on a file descriptor."""

    fd: int
    cqueue: list[RedisCmd] = field(default_factory=list)
    is_txn: bool = False
    session: Session = field(default_factory=Session)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the connection."""
        return os.read(self.fd, size)

    def write(self, data: bytes) -> int:
        """Write ``data`` to the connection; return the bytes written."""
        return os.write(self.fd, data)

    def txn_begin(self) -> None:
        """Start a transaction."""
        self.is_txn = True

    def txn_discard(self) -> None:
        """Drop the queued commands and end the transaction."""
        self.cqueue = []
        self.is_txn = False

    def txn_queue(self, cmd: RedisCmd) -> None:
        """Queue ``cmd`` for execution when the transaction runs."""
        self.cqueue.append(cmd)