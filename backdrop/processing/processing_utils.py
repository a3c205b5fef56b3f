"""
Processing utilities and helper functions.
"""
import time


class ProcessingMetrics:
    """
    Utilities for tracking and reporting processing metrics.
    """

    def __init__(self):
        self.timings = {}
        self.strips = []

    def start_timer(self, operation_name):
        """Start timing an operation."""
        self.timings[operation_name] = {'start': time.time()}

    def end_timer(self, operation_name):
        """End timing an operation and store the duration."""
        if operation_name in self.timings:
            self.timings[operation_name]['end'] = time.time()
            self.timings[operation_name]['duration'] = (
                self.timings[operation_name]['end'] - self.timings[operation_name]['start']
            )

    def get_duration(self, operation_name):
        """Get the duration of an operation."""
        if operation_name in self.timings and 'duration' in self.timings[operation_name]:
            return self.timings[operation_name]['duration']
        return None

    def record_strip(self, response, rows):
        """Keep the counters reported by the worker for one strip."""
        self.strips.append({
            'index': response.index,
            'start_row': response.start_row,
            'rows': rows,
            'edges': response.edge_count,
            'visited': response.visited_count,
            'cleared': response.cleared_count,
            'chunks': response.chunks,
            'duration': response.duration,
        })

    def totals(self):
        """Sum the per-strip counters."""
        keys = ('rows', 'edges', 'visited', 'cleared', 'chunks')
        return {key: sum(strip[key] for strip in self.strips) for key in keys}

    def print_summary(self):
        """Print a summary of all timing measurements."""
        print("\n=== Processing Performance Summary ===")
        for operation, timing in self.timings.items():
            if 'duration' in timing:
                print(f"{operation}: {timing['duration']:.2f} seconds")
        if self.strips:
            totals = self.totals()
            print(f"strips: {len(self.strips)}, rows: {totals['rows']}, edges: {totals['edges']}, "
                  f"visited: {totals['visited']}, cleared: {totals['cleared']}")
        print("=" * 40)
