"""Runtime settings and node configuration for NetPulse."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from zoneinfo import ZoneInfoNotFoundError

from netpulse.models import Node, NodeCategory
from netpulse.timefmt import DEFAULT_TIMEZONE, load_zone

logger = logging.getLogger(__name__)


class NodeConfigError(ValueError):
    """Raised when a node configuration cannot be used for a session."""


DEFAULT_NODES = (
    Node("1", "kubernetes.docker.internal", "127.0.0.1", NodeCategory.LOCAL),
    Node("2", "Local Gateway", "192.168.10.1", NodeCategory.GATEWAY),
    Node("3", "SMB SHARE", "61.169.142.33", NodeCategory.WAN),
    Node("4", "Aliyun DNS", "223.5.5.5", NodeCategory.WAN),
    Node("5", "Google DNS", "8.8.8.8", NodeCategory.WAN),
    Node("6", "Google Meet", "142.250.197.14", NodeCategory.SERVICE),
    Node("7", "Zoom Meeting", "170.114.52.2", NodeCategory.SERVICE),
)


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_timezone(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        load_zone(raw)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Ignoring unknown time zone %s=%r, using %s", name, raw, default)
        return default
    return raw


@dataclass
class Settings:
    """Settings read from NETPULSE_* environment variables.

    Environment Variables:
        NETPULSE_INTERVAL_MS: Sampling period in milliseconds (default 1000)
        NETPULSE_LIVE_WINDOW_S: Live window length in seconds (default 60)
        NETPULSE_TIMEZONE: Display time zone (default Asia/Shanghai)
        NETPULSE_NODES_FILE: JSON file with the node list (default: built-in nodes)
        NETPULSE_SEED: Seed for the probe simulator (default: unseeded)
    """

    interval_ms: int = 1000
    live_window_s: int = 60
    timezone: str = DEFAULT_TIMEZONE
    nodes_file: Path | None = None
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        interval_ms = _env_int("NETPULSE_INTERVAL_MS", cls.interval_ms)
        if interval_ms <= 0:
            logger.warning("NETPULSE_INTERVAL_MS must be positive, using %d", cls.interval_ms)
            interval_ms = cls.interval_ms

        live_window_s = _env_int("NETPULSE_LIVE_WINDOW_S", cls.live_window_s)
        if live_window_s <= 0:
            logger.warning("NETPULSE_LIVE_WINDOW_S must be positive, using %d", cls.live_window_s)
            live_window_s = cls.live_window_s

        nodes_file = os.environ.get("NETPULSE_NODES_FILE", "").strip()

        return cls(
            interval_ms=interval_ms,
            live_window_s=live_window_s,
            timezone=_env_timezone("NETPULSE_TIMEZONE", cls.timezone),
            nodes_file=Path(nodes_file) if nodes_file else None,
            seed=_env_int("NETPULSE_SEED", None),
        )


def validate_nodes(nodes: Iterable[Node]) -> tuple[Node, ...]:
    """Check node ids are unique and ids and addresses are non-empty.

    Returns:
        The nodes as a tuple, in the given order

    Raises:
        NodeConfigError: On a blank id or address, or a duplicate id
    """
    nodes = tuple(nodes)
    seen = set()
    for node in nodes:
        if not node.id or not node.id.strip():
            raise NodeConfigError(f"Node {node.name!r} has an empty id")
        if not node.address or not node.address.strip():
            raise NodeConfigError(f"Node {node.id!r} has an empty address")
        if node.id in seen:
            raise NodeConfigError(f"Duplicate node id: {node.id!r}")
        seen.add(node.id)
    return nodes


def node_from_dict(data: dict) -> Node:
    """Build a Node from a config entry (``address`` or legacy ``ip`` key)."""
    try:
        node_id = str(data["id"])
        address = data.get("address", data.get("ip"))
        if address is None:
            raise KeyError("address")
        category = NodeCategory(data.get("category", NodeCategory.WAN.value))
    except KeyError as e:
        raise NodeConfigError(f"Node entry missing field {e}: {data!r}") from e
    except ValueError as e:
        raise NodeConfigError(f"Unknown node category in {data!r}") from e
    return Node(id=node_id, name=str(data.get("name", node_id)), address=str(address), category=category)


def load_nodes(path: Path) -> tuple[Node, ...]:
    """Load and validate a JSON list of node entries."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise NodeConfigError(f"{path}: expected a list of nodes")
    nodes = validate_nodes(node_from_dict(entry) for entry in data)
    logger.info("Loaded %d nodes from %s", len(nodes), path)
    return nodes


def resolve_nodes(settings: Settings) -> tuple[Node, ...]:
    if settings.nodes_file is None:
        return DEFAULT_NODES
    return load_nodes(settings.nodes_file)


def next_node_id(nodes: Iterable[Node]) -> str:
    """Next free numeric id: one past the largest integer id (non-numeric ids count as 0)."""
    highest = 0
    for node in nodes:
        try:
            highest = max(highest, int(node.id))
        except ValueError:
            continue
    return str(highest + 1)
