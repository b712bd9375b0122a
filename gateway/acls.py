"""
gateway.acls
~~~~~~~~~~~~
Per-client ACL entries built from the ``acl`` array of the config file.

Each entry restricts clients by source network (CIDR) and carries the
command allow/deny lists and Basic-Auth credential the HTTP layer
enforces.  Entries are immutable; the chain keeps declaration order and
leaves the choice of which entry applies to the caller.
"""

from __future__ import annotations

import re
import socket
import struct
from dataclasses import dataclass, field
from typing import Any, Tuple

from .auth import encode_credential
from .logger import get_logger

FULL_MASK = 0xFFFFFFFF
INADDR_NONE = 0xFFFFFFFF

_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)", re.ASCII)


def _inet_addr(text: str) -> int | None:
    """Dotted-quad (or any form inet_aton accepts) -> host-order int."""
    try:
        packed = socket.inet_aton(text)
    except (OSError, UnicodeError, ValueError):
        return None
    return struct.unpack("!I", packed)[0]


def _prefix_bits(text: str) -> int:
    # leading decimal digits only, like atoi; anything else reads as 0
    m = _LEADING_INT.match(text)
    if not m:
        return 0
    sign, digits = m.groups()
    if len(digits) > 10:  # out of range for a C int; the clamp to 32 applies
        return 0xFFFF
    return int(sign + digits) & 0xFFFF


def address_value(text: str) -> int:
    """Convert a client address such as ``"10.0.0.5"`` for :meth:`CidrRule.matches`."""
    addr = _inet_addr(text)
    if addr is None:
        raise ValueError(f"not an IPv4 address: {text!r}")
    return addr


@dataclass(frozen=True, slots=True)
class CidrRule:
    enabled: bool = False
    subnet: int = 0
    mask: int = 0

    @classmethod
    def parse(cls, expression: str) -> "CidrRule":
        """
        Build a rule from ``a.b.c.d[/bits]``.

        A missing prefix length counts as ``/0``: the mask is empty and the
        rule matches every address, whatever address was written.
        """
        ip, sep, tail = expression.partition("/")
        bits = _prefix_bits(tail) if sep else 0
        if bits > 32:
            get_logger().cidr_warning(expression, f"prefix length {bits} clamped to 32")
            bits = 32

        mask = 0 if bits == 0 else (FULL_MASK << (32 - bits)) & FULL_MASK

        addr = _inet_addr(ip)
        if addr is None:
            get_logger().cidr_warning(expression, "unparseable address, using 255.255.255.255")
            addr = INADDR_NONE

        return cls(enabled=True, subnet=addr & mask, mask=mask)

    @property
    def prefix_length(self) -> int:
        return bin(self.mask).count("1")

    def matches(self, address: int) -> bool:
        """True if *address* (host-order int) falls inside this rule."""
        if not self.enabled:  # no restriction given
            return True
        return (address & self.mask) == (self.subnet & self.mask)

    def __str__(self) -> str:
        return f"{socket.inet_ntoa(struct.pack('!I', self.subnet))}/{self.prefix_length}"


def matches(rule: CidrRule, address: int) -> bool:
    return rule.matches(address)


@dataclass(frozen=True, slots=True)
class AclEntry:
    cidr: CidrRule = field(default_factory=CidrRule)
    http_basic_auth: str | None = None
    enabled: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()

    def matches(self, address: int) -> bool:
        # TODO: require http_basic_auth once the HTTP layer passes the Authorization header
        return self.cidr.matches(address)


def read_commands(value: Any) -> Tuple[str, ...]:
    """Command names from a JSON array; non-string elements are skipped."""
    return tuple(item for item in value if isinstance(item, str))


def build_entry(value: Any) -> AclEntry:
    if not isinstance(value, dict):
        return AclEntry()

    ip = value.get("ip")
    basic = value.get("http_basic_auth")
    enabled = value.get("enabled")
    disabled = value.get("disabled")

    return AclEntry(
        cidr=CidrRule.parse(ip) if isinstance(ip, str) else CidrRule(),
        http_basic_auth=encode_credential(basic) if isinstance(basic, str) else None,
        enabled=read_commands(enabled) if isinstance(enabled, list) else (),
        disabled=read_commands(disabled) if isinstance(disabled, list) else (),
    )


def build_chain(value: Any) -> Tuple[AclEntry, ...]:
    """One entry per array element, first declared first."""
    return tuple(build_entry(item) for item in value)
