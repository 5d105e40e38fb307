#!/usr/bin/env python3
"""
Unified entry point for the Snowflake ID Generator project.
Allows running all components from a single script.
"""

import sys
import logging
import argparse

import config
from snowflake_id_generator import SnowflakeError, get_instance, from_config, parse_id

logger = logging.getLogger("run_all")


def print_header(title):
    """Print a section header.

    Args:
        title (str): The title to print
    """
    width = 80
    print("\n" + "=" * width)
    print(f"{title:^{width}}")
    print("=" * width + "\n")


def run_id_generator():
    """Run a basic demonstration of the ID generator."""
    print_header("BASIC ID GENERATOR DEMONSTRATION")

    generator = from_config()
    print(f"Using datacenter_id={generator.datacenter_id}, worker_id={generator.worker_id}")

    print("\nGenerating 5 IDs...")
    for i in range(5):
        id_val = generator.next_id()
        parsed = parse_id(id_val)
        print(f"ID {i+1}: {id_val}")
        print(f"  Generated at: {parsed['generated_time']} UTC")
        print(f"  Datacenter: {parsed['datacenter_id']}")
        print(f"  Worker: {parsed['worker_id']}")
        print(f"  Sequence: {parsed['sequence']}\n")


def run_generate(count, datacenter_id=None, worker_id=None):
    """Print count IDs, one per line.

    Args:
        count (int): Number of IDs to generate
        datacenter_id (int, optional): Overrides the configured datacenter ID
        worker_id (int, optional): Overrides the configured worker ID
    """
    generator = get_instance(
        config.DATACENTER_ID if datacenter_id is None else datacenter_id,
        config.WORKER_ID if worker_id is None else worker_id,
    )
    for _ in range(count):
        print(generator.next_id())


def run_parse(id_val):
    """Print the decoded fields of an ID."""
    for key, value in parse_id(id_val).items():
        print(f"{key}: {value}")


def run_visualizer(id_val=None):
    """Run the ID visualizer.

    Args:
        id_val (int, optional): The ID to visualize
    """
    import snowflake_visualizer

    print_header("SNOWFLAKE ID VISUALIZER")

    if id_val is None:
        print("No ID provided. Generating a new ID...")
        id_val = from_config().next_id()
        print(f"Generated ID: {id_val}")

    snowflake_visualizer.visualize_binary(id_val)


def run_simulator(datacenters=2, workers=3, ids_per_worker=100):
    """Run the distributed system simulator."""
    import snowflake_simulator

    print_header("DISTRIBUTED SYSTEM SIMULATOR")
    print(f"Simulating {datacenters} datacenters with {workers} workers each")

    simulator = snowflake_simulator.DistributedSystemSimulator(
        num_datacenters=datacenters, num_workers_per_dc=workers
    )
    simulator.simulate_load(ids_per_worker=ids_per_worker)
    simulator.display_results(limit=5)


def run_verification():
    """Run the requirements verification checks."""
    import verify_requirements

    print_header("REQUIREMENTS VERIFICATION")
    return verify_requirements.run_all_checks()


def build_parser():
    parser = argparse.ArgumentParser(description="Snowflake ID Generator Runner")
    subparsers = parser.add_subparsers(dest="component", help="Component to run")

    subparsers.add_parser("basic", help="Run basic ID generator demo")

    gen_parser = subparsers.add_parser("generate", help="Print new IDs")
    gen_parser.add_argument("-n", "--count", type=int, default=1, help="Number of IDs")
    gen_parser.add_argument("--datacenter", type=int, help="Datacenter ID (0-31)")
    gen_parser.add_argument("--worker", type=int, help="Worker ID (0-31)")

    parse_parser = subparsers.add_parser("parse", help="Decode an existing ID")
    parse_parser.add_argument("id", type=int, help="ID to decode")

    vis_parser = subparsers.add_parser("visualizer", help="Run ID visualizer")
    vis_parser.add_argument("--id", type=int, help="Specific ID to visualize")

    sim_parser = subparsers.add_parser("simulator", help="Run distributed system simulator")
    sim_parser.add_argument("--datacenters", type=int, default=2)
    sim_parser.add_argument("--workers", type=int, default=3)
    sim_parser.add_argument("--ids", type=int, default=100, help="IDs per worker")

    subparsers.add_parser("verify", help="Run requirements verification")
    return parser


def main(argv=None):
    """Main entry point.

    Returns:
        int: Process exit code
    """
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.component == "basic":
            run_id_generator()
        elif args.component == "generate":
            run_generate(args.count, args.datacenter, args.worker)
        elif args.component == "parse":
            run_parse(args.id)
        elif args.component == "visualizer":
            run_visualizer(args.id)
        elif args.component == "simulator":
            run_simulator(args.datacenters, args.workers, args.ids)
        elif args.component == "verify":
            return 0 if run_verification() else 1
        else:
            parser.print_help()
    except SnowflakeError as e:
        logger.error(f"ID generation failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
