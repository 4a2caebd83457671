"""
Key Requirement Analyzer.

For a route produced by A*, derive the minimum key inventory that must be held
on arrival at every position (before picking up a key lying there) so that all
remaining forced doors can be opened.

Per edge i (path[i] -> path[i+1]):
    need_i  = 1 if a door was forced to reach path[i+1]
    grant_i = 1 if an uncollected key lies on path[i]

Suffix sum walking end -> start, clamped at zero:
    owed[last] = 0
    owed[i]    = max(0, owed[i+1] + need_i - grant_i)
"""

import logging
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)


def key_cumsum(path: Sequence[int], forced: Sequence[bool], keys: np.ndarray) -> List[int]:
    """
    Keys still owed at every position of `path`.

    Args:
        path: Node route (start and end inclusive)
        forced: Per-node flag, True when a door was forced to reach the node
        keys: Uncollected-key vector

    Returns:
        One non-negative requirement per path position
    """
    if not path:
        return []

    owed = [0] * len(path)
    for i in range(len(path) - 2, -1, -1):
        need = int(bool(forced[path[i + 1]]))
        grant = int(bool(keys[path[i]]))
        owed[i] = max(0, owed[i + 1] + need - grant)

    logger.debug(f"Key requirement along {len(path)}-node path: start owes {owed[0]}")
    return owed
