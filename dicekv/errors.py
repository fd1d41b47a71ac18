"""Error messages in the wire form used by the server."""

from __future__ import annotations

ARITY_ERR = "wrong number of arguments for '%s' command"
SYNTAX_ERR = "syntax error"
EXPIRY_ERR = "invalid expire time in '%s' command"
AUTH_ERR = "AUTH failed"
INT_OR_OUT_OF_RANGE_ERR = "value is not an integer or out of range"
VAL_OUT_OF_RANGE_ERR = "value is out of range"
ELEMENT_PEEK_ERR = "number of elements to peek should be a positive number less than %d"
NO_KEY_ERR = "no such key"
ERR_DEFAULT = "-ERR %s"
WRONG_TYPE_ERR = "-WRONGTYPE Operation against a key holding the wrong kind of value"
WRONG_TYPE_HLL_ERR = "-WRONGTYPE Key is not a valid HyperLogLog string value."
INVALID_HLL_ERR = "-INVALIDOBJ Corrupted HLL object detected"
WORKER_NOT_FOUND_ERR = "worker with ID %s not found"
JSON_PATH_NOT_EXIST_ERR = "-ERR Path '%s' does not exist"
JSON_PATH_VALUE_TYPE_ERR = "-WRONGTYPE wrong type of path value - expected string but found integer"
INVALID_EXPIRE_TIME = "-ERR invalid expire time"


def new_err_with_message(message: str) -> bytes:
    """Return ``message`` as an encoded error reply.

    A message that already starts with ``-`` carries its own error code;
    any other message gets the generic ``-ERR`` code. The message must not
    end with CRLF.
    """
    if not message.startswith("-"):
        message = ERR_DEFAULT % message
    return f"{message}\r\n".encode("utf-8", "surrogateescape")


def new_err_with_formatted_message(fmt: str, *args) -> bytes:
    """Format ``fmt`` with ``args`` (if any) and encode it as an error reply."""
    if args:
        fmt = fmt % args
    return new_err_with_message(fmt)


def new_err_arity(cmd_name: str) -> bytes:
    """Error reply for a command called with the wrong number of arguments."""
    return new_err_with_formatted_message(ARITY_ERR, cmd_name.lower())


def new_err_expire_time(cmd_name: str) -> bytes:
    """Error reply for a command given an invalid expire time."""
    return new_err_with_formatted_message(EXPIRY_ERR, cmd_name.lower())