"""
Edge-seeded region growing.

Pixels reachable from a detected edge are visited breadth first. A visited
pixel that passes the near-white test has its alpha cleared. Work is split into
fixed size chunks and the generator returned by `RegionGrower.grow` suspends
between chunks so the caller can interleave other work or abandon the strip.
"""
from collections import deque

import numpy as np

from ..errors import InvalidDimensions
from .pixel_metrics import BACKGROUND_LEVEL, is_near_white
from .raster_utils import as_pixel_array

CHUNK_SIZE = 1000


class RegionGrower:
    """
    Breadth-first flood fill over a single RGBA buffer.

    Attributes:
    -----------
        pixels (np.ndarray): RGBA buffer of shape (H, W, 4), mutated in place.
        edges (np.ndarray): Boolean edge mask of shape (H, W).
        chunk_size (int): Queue entries handled between two suspension points.
        background_level (int): Channel value a background pixel must exceed.
        expand_through_foreground (bool): When False the fill only spreads out
            of pixels that are background themselves.
    """
    def __init__(self, pixels, edges, chunk_size=CHUNK_SIZE, background_level=BACKGROUND_LEVEL,
                 expand_through_foreground=False):
        self.pixels = as_pixel_array(pixels)
        if not self.pixels.flags.c_contiguous:
            raise ValueError("Pixel array must be C-contiguous to be updated in place")
        self.height, self.width = self.pixels.shape[:2]
        edges = np.asarray(edges, dtype=bool)
        if edges.shape != (self.height, self.width):
            raise InvalidDimensions(
                f"Edge mask shape {edges.shape} does not match image shape {(self.height, self.width)}"
            )
        if chunk_size < 1:
            raise ValueError("'chunk_size' must be a positive integer")

        self.edges = edges
        self.chunk_size = int(chunk_size)
        self.background_level = background_level
        self.expand_through_foreground = expand_through_foreground

        self.visited = np.zeros(self.width * self.height, dtype=bool)
        self.queue = deque()
        self.processed = 0
        self.cleared = 0
        self.chunks = 0
        self._seeded = False

    def seed(self):
        """Queue every interior edge pixel in row-major order."""
        interior = np.zeros_like(self.edges)
        interior[1:-1, 1:-1] = self.edges[1:-1, 1:-1]
        seeds = np.flatnonzero(interior)
        self.queue.extend(int(p) for p in seeds)
        self._seeded = True
        return len(seeds)

    def grow(self):
        """
        Run the fill, yielding after every chunk that leaves work in the queue.

        Yields:
            int: Number of queue entries still waiting.
        """
        if not self._seeded:
            self.seed()

        width, height = self.width, self.height
        rgba = self.pixels.reshape(-1, 4)
        visited = self.visited
        queue = self.queue
        level = self.background_level

        while queue:
            # Entries appended during this chunk wait for the next one
            for _ in range(min(self.chunk_size, len(queue))):
                p = queue.popleft()
                if visited[p]:
                    continue
                visited[p] = True
                self.processed += 1

                if is_near_white((int(rgba[p, 0]), int(rgba[p, 1]), int(rgba[p, 2])), level):
                    rgba[p, 3] = 0
                    self.cleared += 1
                elif not self.expand_through_foreground:
                    continue

                y, x = divmod(p, width)
                if y > 0 and not visited[p - width]:
                    queue.append(p - width)
                if y < height - 1 and not visited[p + width]:
                    queue.append(p + width)
                if x > 0 and not visited[p - 1]:
                    queue.append(p - 1)
                if x < width - 1 and not visited[p + 1]:
                    queue.append(p + 1)

            self.chunks += 1
            if queue:
                yield len(queue)

    def run(self):
        """Drive `grow` to completion and return the mutated buffer."""
        for _ in self.grow():
            pass
        return self.pixels

    @property
    def visited_count(self):
        return int(self.visited.sum())


def remove_background(pixels, edges, **kwargs):
    """Clear the alpha of background pixels reachable from `edges`."""
    return RegionGrower(pixels, edges, **kwargs).run()
