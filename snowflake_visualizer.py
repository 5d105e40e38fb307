import sys

from snowflake_id_generator import (
    TIMESTAMP_BITS,
    DATACENTER_ID_BITS,
    WORKER_ID_BITS,
    SEQUENCE_BITS,
    SnowflakeError,
    from_config,
    parse_id,
)


def split_bits(snowflake_id):
    """Split an ID into its binary fields, most significant first.

    Args:
        snowflake_id (int): The snowflake ID to split

    Returns:
        list: (label, bit count, bit string) per field
    """
    binary = format(snowflake_id, "064b")
    fields = [
        ("Sign bit", 1),
        ("Timestamp", TIMESTAMP_BITS),
        ("Datacenter ID", DATACENTER_ID_BITS),
        ("Worker ID", WORKER_ID_BITS),
        ("Sequence", SEQUENCE_BITS),
    ]
    result = []
    offset = 0
    for label, width in fields:
        result.append((label, width, binary[offset:offset + width]))
        offset += width
    return result


def visualize_binary(snowflake_id):
    """Print a snowflake ID's bit fields and decoded values.

    Args:
        snowflake_id (int): The snowflake ID to visualize
    """
    parsed = parse_id(snowflake_id)

    print(f"\n=== Binary Representation of ID: {snowflake_id} ===\n")
    for label, width, bits in split_bits(snowflake_id):
        print(f"{label:<14} ({width:>2}): {bits}")

    print("\n=== Visual Bit Allocation ===\n")
    print("MSB                                                                LSB")
    print("┌─┬─────────────────────────────────────┬─────┬─────┬─────────────┐")
    print("│0│           Timestamp (41)            │DC(5)│WK(5)│Sequence (12)│")
    print("└─┴─────────────────────────────────────┴─────┴─────┴─────────────┘")
    print(" ↑                   ↑                     ↑     ↑         ↑")
    print(" 63                  22                   17    12         0")

    print("\n=== Parsed ID ===\n")
    for key, value in parsed.items():
        print(f"{key.replace('_', ' ').title()}: {value}")


def main():
    """Visualize the ID given on the command line, or a freshly generated one."""
    if len(sys.argv) > 1:
        try:
            visualize_binary(int(sys.argv[1]))
        except ValueError:
            print(f"Error: '{sys.argv[1]}' is not a valid snowflake ID")
            sys.exit(1)
        return

    print("No ID provided. Generating a new ID...")
    generator = from_config()
    try:
        snowflake_id = generator.next_id()
    except SnowflakeError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"Generated ID: {snowflake_id}")
    visualize_binary(snowflake_id)

    print("\n=== Usage ===")
    print(f"python {sys.argv[0]} <snowflake_id>")


if __name__ == "__main__":
    main()
