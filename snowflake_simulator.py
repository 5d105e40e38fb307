import time
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from collections import defaultdict
from tabulate import tabulate

from snowflake_id_generator import (
    MAX_DATACENTER_ID,
    MAX_WORKER_ID,
    SequencingDomain,
    SnowflakeIDGenerator,
    parse_id,
)

logger = logging.getLogger(__name__)


class DistributedSystemSimulator:
    """Drives one generator per (datacenter, worker) pair from a thread pool.

    All generators share a single sequencing domain, as generators living in
    the same process do.
    """

    def __init__(self, num_datacenters=2, num_workers_per_dc=3, domain=None):
        """
        Args:
            num_datacenters (int): Number of datacenters to simulate (1-32)
            num_workers_per_dc (int): Number of workers per datacenter (1-32)
            domain (SequencingDomain, optional): Shared sequencing state
        """
        if not 1 <= num_datacenters <= MAX_DATACENTER_ID + 1:
            raise ValueError(f"num_datacenters must be between 1 and {MAX_DATACENTER_ID + 1}")
        if not 1 <= num_workers_per_dc <= MAX_WORKER_ID + 1:
            raise ValueError(f"num_workers_per_dc must be between 1 and {MAX_WORKER_ID + 1}")

        self.num_datacenters = num_datacenters
        self.num_workers_per_dc = num_workers_per_dc
        self.domain = domain or SequencingDomain()
        self.generators = {}
        self.generated_ids = []
        self.id_lock = threading.Lock()
        self.elapsed = 0.0

        for dc_id in range(num_datacenters):
            for worker_id in range(num_workers_per_dc):
                self.generators[(dc_id, worker_id)] = SnowflakeIDGenerator(
                    dc_id, worker_id, domain=self.domain
                )

    def generate_id(self, dc_id, worker_id):
        """Generate and record an ID from a specific datacenter and worker.

        Returns:
            int: A unique ID
        """
        generator = self.generators.get((dc_id, worker_id))
        if generator is None:
            raise ValueError(f"No generator found for datacenter {dc_id}, worker {worker_id}")

        snowflake_id = generator.next_id()
        parsed = parse_id(snowflake_id)
        with self.id_lock:
            self.generated_ids.append(parsed)
        return snowflake_id

    def _worker(self, work_item):
        dc_id, worker_id, count = work_item
        return [self.generate_id(dc_id, worker_id) for _ in range(count)]

    def simulate_load(self, ids_per_worker=100, max_workers=None):
        """Generate IDs from every worker concurrently.

        Args:
            ids_per_worker (int): Number of IDs to generate per worker
            max_workers (int, optional): Maximum number of threads

        Returns:
            list: All IDs generated by this run
        """
        work_items = [
            (dc_id, worker_id, ids_per_worker)
            for dc_id, worker_id in sorted(self.generators)
        ]
        logger.info(f"Simulating {len(work_items)} workers x {ids_per_worker} IDs")

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            batches = list(executor.map(self._worker, work_items))
        self.elapsed += time.perf_counter() - start

        return [id_val for batch in batches for id_val in batch]

    def summary(self):
        """Statistics over every ID recorded so far.

        Returns:
            dict: totals, duplicates, per-worker and per-millisecond counts
        """
        with self.id_lock:
            records = list(self.generated_ids)

        seen = set()
        duplicates = []
        by_worker = defaultdict(int)
        by_timestamp = defaultdict(int)
        for record in records:
            if record["id"] in seen:
                duplicates.append(record["id"])
            seen.add(record["id"])
            by_worker[(record["datacenter_id"], record["worker_id"])] += 1
            by_timestamp[record["timestamp"]] += 1

        return {
            "total": len(records),
            "unique": len(seen),
            "duplicates": duplicates,
            "by_worker": dict(by_worker),
            "by_timestamp": dict(by_timestamp),
            "max_sequence": max((r["sequence"] for r in records), default=0),
            "rate": len(records) / self.elapsed if self.elapsed else 0.0,
        }

    def display_results(self, limit=10):
        """Print sample IDs and statistics as tables.

        Args:
            limit (int): Maximum number of IDs to display
        """
        with self.id_lock:
            sample = sorted(self.generated_ids, key=lambda x: x["id"])[:limit]
        stats = self.summary()

        print("\n=== Sample Generated IDs ===")
        print(tabulate(
            [[r["id"], r["generated_time"], r["datacenter_id"], r["worker_id"], r["sequence"]]
             for r in sample],
            headers=["ID", "Generated Time (UTC)", "DC ID", "Worker ID", "Sequence"],
            tablefmt="grid",
        ))

        print("\n=== Statistics ===")
        print(tabulate(
            [
                ["Total IDs generated", stats["total"]],
                ["Unique IDs", stats["unique"]],
                ["Duplicate IDs", len(stats["duplicates"])],
                ["Highest sequence", stats["max_sequence"]],
                ["IDs/sec", f"{stats['rate']:.0f}"],
            ],
            tablefmt="simple",
        ))
        if stats["duplicates"]:
            print(f"WARNING: {len(stats['duplicates'])} duplicate IDs found!")
        else:
            print("SUCCESS: All IDs are unique!")

        busiest = sorted(stats["by_timestamp"].items(), key=lambda x: x[1], reverse=True)[:5]
        print("\n=== Busiest Milliseconds ===")
        print(tabulate(busiest, headers=["Timestamp", "IDs"], tablefmt="grid"))

        print("\n=== Distribution by Datacenter and Worker ===")
        print(tabulate(
            [[dc, wk, count] for (dc, wk), count in sorted(stats["by_worker"].items())],
            headers=["DC ID", "Worker ID", "IDs"],
            tablefmt="grid",
        ))
