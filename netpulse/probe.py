"""Simulated ping probe for NetPulse nodes."""

import math
import random
from dataclasses import dataclass

from netpulse.models import LinkStatus

LOOPBACK_ADDRESSES = ("127.0.0.1", "localhost")
PRIVATE_PREFIXES = ("192.168.", "10.")


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one simulated probe, before it is stamped into a record."""

    latency_ms: int
    status: LinkStatus
    packet_loss: bool


def address_hash(address: str) -> int:
    """Return a stable non-negative hash of an address string.

    Classic ``h = h * 31 + c`` string hash with 32-bit signed wrap-around,
    so the same address always gets the same baseline.

    Examples:
        >>> address_hash("a")
        97
        >>> address_hash("ab")
        3105
    """
    h = 0
    for char in address:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def base_latency(address: str) -> int:
    """Baseline latency in ms for an address."""
    if address in LOOPBACK_ADDRESSES:
        return 1
    if address.startswith(PRIVATE_PREFIXES):
        return 5
    return 5 + address_hash(address) % 75


class ProbeSimulator:
    """Generates simulated ping results biased by node address."""

    def __init__(self, rng=None, seed: int | None = None):
        """Initialize with an injected random source or an optional seed.

        Args:
            rng: Object with a ``random()`` method returning floats in [0, 1).
                Takes precedence over ``seed``.
            seed: Seed for a private ``random.Random`` instance
        """
        # Isolated random instance so callers never share global state
        self._random = rng if rng is not None else random.Random(seed)

        self.spike_probability = 0.02
        self.spike_ms = 150
        self.jitter_probability = 0.20
        self.jitter_max_ms = 30
        self.down_probability = 0.0005
        self.loss_probability = 0.005
        self.noise_ms = 10

    def simulate(self, address: str) -> ProbeResult:
        """Simulate one probe against the given address."""
        if not address or not address.strip():
            raise ValueError("Address cannot be empty")

        latency = float(base_latency(address))

        # Occasional large spike
        if self._random.random() < self.spike_probability:
            latency += self.spike_ms

        # Occasional medium jitter
        if self._random.random() < self.jitter_probability:
            latency += self._random.random() * self.jitter_max_ms

        if self._random.random() < self.down_probability:
            return ProbeResult(latency_ms=0, status=LinkStatus.DOWN, packet_loss=True)

        if self._random.random() < self.loss_probability:
            return ProbeResult(latency_ms=0, status=LinkStatus.UP, packet_loss=True)

        latency += self._random.random() * self.noise_ms
        return ProbeResult(
            latency_ms=math.floor(latency), status=LinkStatus.UP, packet_loss=False
        )

