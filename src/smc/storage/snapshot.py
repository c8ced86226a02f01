"""Chain snapshots: msgpack files holding just enough to rebuild a chain."""

import logging
from pathlib import Path

import msgpack

from ..engine.chain import MarkovChain

logger = logging.getLogger(__name__)


def dumps(chain):
    """Encode a chain to msgpack bytes."""
    return msgpack.packb(chain.to_dict(), use_bin_type=True)


def loads(data, rng=None):
    """Decode msgpack bytes produced by dumps() back into a chain."""
    payload = msgpack.unpackb(data, raw=False)
    if not isinstance(payload, dict):
        raise ValueError("Chain snapshot is not a mapping")
    return MarkovChain.from_dict(payload, rng=rng)


def save_chain(chain, path):
    """Write a chain snapshot to path, replacing any existing file."""
    path = Path(path)
    path.write_bytes(dumps(chain))
    logger.info("Saved chain (%d textlets, %d edges) to %s",
                chain.num_textlets(), chain.num_edges(), path)


def load_chain(path, rng=None):
    """Read a chain snapshot written by save_chain()."""
    path = Path(path)
    chain = loads(path.read_bytes(), rng=rng)
    logger.info("Loaded chain (%d textlets, %d edges) from %s",
                chain.num_textlets(), chain.num_edges(), path)
    return chain
