"""
Key Acquisition Planner
=======================

Walks an A* route position by position and splices key-collection detours
into it wherever the inventory falls short of the analyzed requirement.

Per position i:
    1. Note the inventory on arrival, collect a key lying on the node.
    2. Enough keys (arrival inventory >= requirement[i], and the next edge,
       if still a locked door, can be paid for) -> advance along the route.
    3. Otherwise fetch keys one at a time until enough:
         a. nearest key reachable without crossing any door
         b. else keys ranked by BFS discovery order with doors ignored,
            skipping those whose route crosses more doors than we hold
       Each detour is walked for real: doors on it are paid and opened,
       keys on it are collected.
    4. A detour ends the plan: the walked prefix plus detours is returned so
       the orchestrator can re-run A* from where we now stand.
    5. No key reachable, the requirement still unmet and the next edge a
       locked door -> the plan fails (KeyUnreachable) before that door is
       opened.

The maze matrix and key vector passed in are mutated: opened doors become
open edges and collected keys are cleared.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from keymaze.core.definitions import DOOR_EDGE, NO_EDGE, OPEN_EDGE
from keymaze.simulation.bfs_utility import (
    BfsHit,
    nearest_key,
    ranked_keys,
    shortest_path_ignoring_doors,
)

logger = logging.getLogger(__name__)


@dataclass
class PickupPlan:
    """Walked route with detours (empty when the route needed none)."""
    path: List[int]
    inventory: int
    keys_collected: int = 0
    doors_opened: int = 0

    @property
    def has_detour(self) -> bool:
        return bool(self.path)


class KeyWalker:
    """
    Moves through the maze for real, keeping the key/door bookkeeping.

    Net key balance = keys collected - doors opened; a door is only opened
    while the balance (the inventory) is strictly positive.
    """

    def __init__(self, maze: np.ndarray, keys: np.ndarray, inventory: int, start: int):
        self.maze = maze
        self.keys = keys
        self.inventory = inventory
        self.position = start
        self.trail = [start]
        self.keys_collected = 0
        self.doors_opened = 0

    def collect(self) -> int:
        """Pick up the key on the current node. Returns keys gained."""
        if self.keys[self.position]:
            self.keys[self.position] = False
            self.inventory += 1
            self.keys_collected += 1
            logger.debug(f"Collected key at node {self.position} (inventory={self.inventory})")
            return 1
        return 0

    def is_locked(self, node: int) -> bool:
        return self.maze[self.position, node] == DOOR_EDGE

    def step(self, node: int) -> bool:
        """Move to an adjacent node, opening a door if needed."""
        edge = self.maze[self.position, node]
        if edge == NO_EDGE:
            raise ValueError(f"Nodes {self.position} and {node} are not adjacent")
        if edge == DOOR_EDGE:
            if self.inventory <= 0:
                return False
            self.maze[self.position, node] = OPEN_EDGE
            self.maze[node, self.position] = OPEN_EDGE
            self.inventory -= 1
            self.doors_opened += 1
            logger.debug(f"Opened door {self.position}->{node} (inventory={self.inventory})")
        self.position = node
        self.trail.append(node)
        return True

    def walk(self, route: Sequence[int]) -> bool:
        """Follow a route starting at the current node, collecting keys on the way."""
        for node in route[1:]:
            if not self.step(node):
                return False
            self.collect()
        return True


def _next_key(walker: KeyWalker) -> Optional[BfsHit]:
    hit = nearest_key(walker.maze, walker.position, walker.keys, ignore_doors=False)
    if hit is not None:
        return hit

    for candidate in ranked_keys(walker.maze, walker.position, walker.keys) or []:
        if candidate.doors_crossed > walker.inventory:
            continue
        route = shortest_path_ignoring_doors(walker.maze, walker.position, candidate.node)
        if route is not None and route.doors_crossed <= walker.inventory:
            return route
    return None


def key_pickup(
    path: Sequence[int],
    requirement: Sequence[int],
    maze: np.ndarray,
    keys: np.ndarray,
    inventory: int,
) -> Optional[PickupPlan]:
    """
    Splice key detours into `path` until every forced door can be paid for.

    Args:
        path: A* route
        requirement: Keys owed on arrival at each position (key_cumsum)
        maze: Working adjacency matrix (mutated)
        keys: Working uncollected-key vector (mutated)
        inventory: Keys held before walking the route

    Returns:
        PickupPlan (empty path = route walked without detours),
        or None when a needed key is unreachable
    """
    if not path:
        return PickupPlan(path=[], inventory=inventory)

    walker = KeyWalker(maze, keys, inventory, path[0])

    for i, node in enumerate(path):
        gained = walker.collect()
        next_node = path[i + 1] if i + 1 < len(path) else None
        next_locked = next_node is not None and walker.is_locked(next_node)

        # Inventory on arrival must cover requirement[i]; a locked next edge needs one key
        target = requirement[i] + gained
        if next_locked:
            target = max(target, 1)

        if walker.inventory < target:
            detoured = False
            while walker.inventory < target:
                hit = _next_key(walker)
                if hit is None:
                    break
                logger.debug(f"Detour from {walker.position} to key at {hit.node} "
                             f"({hit.distance} hops, {hit.doors_crossed} door(s))")
                walked = walker.walk(hit.path)
                detoured = True
                if not walked:
                    break

            if detoured:
                return PickupPlan(path=walker.trail, inventory=walker.inventory,
                                  keys_collected=walker.keys_collected,
                                  doors_opened=walker.doors_opened)

            if next_locked:
                logger.info(f"Key unreachable: stuck at node {node} before door to {next_node} "
                            f"(holding {walker.inventory}, need {target})")
                return None

        if next_node is not None and not walker.step(next_node):
            logger.info(f"Key unreachable: cannot open door {node}->{next_node}")
            return None

    return PickupPlan(path=[], inventory=walker.inventory,
                      keys_collected=walker.keys_collected,
                      doors_opened=walker.doors_opened)
