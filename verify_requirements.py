import time
import concurrent.futures

from snowflake_id_generator import (
    ConfigurationError,
    SequencingDomain,
    SnowflakeIDGenerator,
    parse_id,
)


def check_uniqueness(num_ids=10000):
    """Check that generated IDs are unique.

    Args:
        num_ids (int): Number of IDs to generate

    Returns:
        bool: True if all IDs are unique, False otherwise
    """
    print(f"Checking uniqueness of {num_ids} IDs...")
    generator = SnowflakeIDGenerator(1, 1, domain=SequencingDomain())

    ids = set()
    for _ in range(num_ids):
        id_val = generator.next_id()
        if id_val in ids:
            print(f"FAILURE: Duplicate ID found: {id_val}")
            return False
        ids.add(id_val)

    print(f"SUCCESS: All {num_ids} IDs are unique")
    return True


def check_64bit_values(num_ids=1000):
    """Check that IDs are non-negative integers fitting in a signed 64-bit value.

    Returns:
        bool: True if every ID fits, False otherwise
    """
    print("Checking that IDs are numeric and fit into 64 bits...")
    generator = SnowflakeIDGenerator(31, 31, domain=SequencingDomain())

    for _ in range(num_ids):
        id_val = generator.next_id()
        if not isinstance(id_val, int) or not 0 <= id_val < 2 ** 63:
            print(f"FAILURE: ID doesn't fit into a signed 64-bit integer: {id_val}")
            return False
        parsed = parse_id(id_val)
        if (parsed["datacenter_id"], parsed["worker_id"]) != (31, 31):
            print(f"FAILURE: ID {id_val} decodes to the wrong coordinates: {parsed}")
            return False

    print("SUCCESS: All IDs are 64-bit integers with the expected coordinates")
    return True


def check_time_ordering(pause=0.05):
    """Check that IDs generated later are larger.

    Returns:
        bool: True if IDs are ordered by time, False otherwise
    """
    print("Checking that IDs are ordered by time...")
    generator = SnowflakeIDGenerator(1, 1, domain=SequencingDomain())

    id1 = generator.next_id()
    time.sleep(pause)
    id2 = generator.next_id()
    time.sleep(pause)
    id3 = generator.next_id()

    if not (id1 < id2 < id3):
        print(f"FAILURE: IDs are not ordered by time: {id1}, {id2}, {id3}")
        return False

    print("SUCCESS: IDs are ordered by time")
    return True


def check_construction_validation():
    """Check that out-of-range coordinates never yield an ID.

    Returns:
        bool: True if every invalid generator refuses to produce IDs
    """
    print("Checking coordinate validation...")
    for coords in [(-1, 0), (32, 0), (0, -1), (0, 32)]:
        generator = SnowflakeIDGenerator(*coords, domain=SequencingDomain())
        for _ in range(2):
            try:
                id_val = generator.next_id()
            except ConfigurationError:
                continue
            print(f"FAILURE: Generator {coords} produced ID {id_val}")
            return False

    print("SUCCESS: Invalid coordinates are rejected on every call")
    return True


def check_generation_rate(target_rate=10000, duration=1, num_threads=8):
    """Check that the system can generate IDs at the required rate.

    Args:
        target_rate (int): Target IDs per second
        duration (int): Test duration in seconds
        num_threads (int): Concurrent generators sharing one domain

    Returns:
        bool: True if the system meets the rate requirement, False otherwise
    """
    print(f"Checking generation rate (target: {target_rate} IDs/sec)...")
    domain = SequencingDomain()
    generators = [SnowflakeIDGenerator(i % 2, i, domain=domain) for i in range(num_threads)]
    batch_size = max(1, target_rate // 100)

    def generate_batch(gen):
        return [gen.next_id() for _ in range(batch_size)]

    generated_ids = set()
    count = 0
    start_time = time.time()
    end_time = start_time + duration

    with concurrent.futures.ThreadPoolExecutor(max_workers=num_threads) as executor:
        while time.time() < end_time:
            futures = [executor.submit(generate_batch, gen) for gen in generators]
            for future in concurrent.futures.as_completed(futures):
                ids = future.result()
                count += len(ids)
                generated_ids.update(ids)

    if len(generated_ids) != count:
        print(f"FAILURE: {count - len(generated_ids)} duplicate IDs found")
        return False

    actual_duration = time.time() - start_time
    rate = count / actual_duration
    print(f"Generated {count} unique IDs in {actual_duration:.2f} seconds ({rate:.2f} IDs/sec)")

    if rate < target_rate:
        print(f"FAILURE: Generation rate {rate:.2f} IDs/sec is below target {target_rate} IDs/sec")
        return False

    print(f"SUCCESS: Generation rate exceeds target {target_rate} IDs/sec")
    return True


def run_all_checks():
    """Run every check; stops at the first failure."""
    print("===== VERIFYING SNOWFLAKE ID GENERATOR REQUIREMENTS =====\n")

    checks = [
        check_uniqueness,
        check_64bit_values,
        check_time_ordering,
        check_construction_validation,
        check_generation_rate,
    ]
    for check in checks:
        if not check():
            return False
        print()

    print("===== ALL REQUIREMENTS VERIFIED SUCCESSFULLY =====")
    return True


if __name__ == "__main__":
    raise SystemExit(0 if run_all_checks() else 1)
