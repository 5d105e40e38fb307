import time
import logging
import threading
from datetime import datetime, timezone

import config

logger = logging.getLogger(__name__)

# Custom epoch, 1704038400000 ms since the Unix epoch (2024-01-01 00:00:00 UTC+8)
EPOCH = 1704038400000

# Bit lengths for each section
TIMESTAMP_BITS = 41
DATACENTER_ID_BITS = 5
WORKER_ID_BITS = 5
SEQUENCE_BITS = 12

# Maximum values for each section
# Clock readings before EPOCH or past EPOCH + MAX_TIMESTAMP are refused by next_id()
MAX_TIMESTAMP = -1 ^ (-1 << TIMESTAMP_BITS)
MAX_DATACENTER_ID = -1 ^ (-1 << DATACENTER_ID_BITS)  # 31
MAX_WORKER_ID = -1 ^ (-1 << WORKER_ID_BITS)          # 31
MAX_SEQUENCE = -1 ^ (-1 << SEQUENCE_BITS)            # 4095

# Bit shifts for each section
WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = WORKER_ID_SHIFT + WORKER_ID_BITS
TIMESTAMP_SHIFT = DATACENTER_ID_SHIFT + DATACENTER_ID_BITS


class SnowflakeError(Exception):
    """Base class for errors raised by the ID generator"""


class ConfigurationError(SnowflakeError, ValueError):
    """Datacenter or worker ID outside of the supported range"""


class ClockRegressionError(SnowflakeError, RuntimeError):
    """The wall clock moved backward relative to the last emitted ID"""

    def __init__(self, last_timestamp, current_timestamp):
        self.last_timestamp = last_timestamp
        self.current_timestamp = current_timestamp
        self.drift = last_timestamp - current_timestamp
        super().__init__(
            f"Clock moved backward by {self.drift} ms "
            f"(last timestamp {last_timestamp}, current {current_timestamp}). "
            f"Refusing to generate IDs"
        )


class TimestampRangeError(SnowflakeError):
    """The clock reads outside the span the 41-bit timestamp can encode"""


def system_millis():
    """Current wall-clock time in milliseconds since the Unix epoch"""
    return time.time_ns() // 1_000_000


class SequencingDomain:
    """Shared millisecond/sequence bookkeeping for a group of generators.

    Every generator built on the same domain serializes on one lock and
    draws from one 4096-per-millisecond sequence budget, so IDs minted by
    any of them never collide with each other.

    Args:
        clock (callable, optional): Returns the current time in milliseconds
            since the Unix epoch. Defaults to the system wall clock.
        spin_sleep (float, optional): Seconds to sleep between clock samples
            while waiting for the next millisecond. 0 re-samples in a tight loop.
    """

    def __init__(self, clock=None, spin_sleep=0.0):
        if spin_sleep < 0:
            raise ValueError("spin_sleep must not be negative")
        self.clock = clock or system_millis
        self.spin_sleep = spin_sleep
        self.lock = threading.Lock()
        self.last_timestamp = -1
        self.sequence = 0

    def current_millis(self):
        return self.clock()

    def wait_next_millis(self, last_timestamp):
        """Block until the clock moves past last_timestamp.

        Args:
            last_timestamp (int): The millisecond whose sequence is exhausted

        Returns:
            int: The first observed millisecond after last_timestamp
        """
        timestamp = self.current_millis()
        while timestamp <= last_timestamp:
            if self.spin_sleep:
                time.sleep(self.spin_sleep)
            timestamp = self.current_millis()
        return timestamp

    def snapshot(self):
        """Return (last_timestamp, sequence) as seen under the lock"""
        with self.lock:
            return self.last_timestamp, self.sequence


_default_domain = None
_default_domain_lock = threading.Lock()


def default_domain():
    """The process-wide domain used by generators built without one"""
    global _default_domain
    with _default_domain_lock:
        if _default_domain is None:
            _default_domain = SequencingDomain(spin_sleep=config.SPIN_SLEEP)
        return _default_domain


class SnowflakeIDGenerator:
    """Snowflake ID Generator

    64-bit ID broken down into:
    - 1 bit: sign bit, always 0
    - 41 bits: timestamp (milliseconds since EPOCH)
    - 5 bits: datacenter ID
    - 5 bits: worker ID
    - 12 bits: sequence number

    Construction never raises. Out-of-range coordinates leave the generator
    poisoned with a ConfigurationError, raised from every next_id() call.
    A detected clock regression poisons it the same way; build a new
    generator once the clock has been fixed.
    """

    def __init__(self, datacenter_id, worker_id, domain=None):
        """Initialize the ID generator with datacenter and worker IDs

        Args:
            datacenter_id (int): ID of the datacenter (0-31)
            worker_id (int): ID of the worker (0-31)
            domain (SequencingDomain, optional): Sequencing state shared with
                other generators. Defaults to the process-wide domain.
        """
        self._datacenter_id = datacenter_id
        self._worker_id = worker_id
        self._domain = domain if domain is not None else default_domain()
        self._error = None

        if (datacenter_id < 0 or datacenter_id > MAX_DATACENTER_ID
                or worker_id < 0 or worker_id > MAX_WORKER_ID):
            self._error = ConfigurationError(
                f"Coordinate out of range: datacenter ID {datacenter_id} and worker ID "
                f"{worker_id} must be between 0 and {MAX_DATACENTER_ID} "
                f"and between 0 and {MAX_WORKER_ID}"
            )
            logger.warning(f"Generator rejected: {self._error}")
        else:
            logger.info(
                f"Initialized ID generator with datacenter ID {datacenter_id}, "
                f"worker ID {worker_id}"
            )

    @property
    def datacenter_id(self):
        return self._datacenter_id

    @property
    def worker_id(self):
        return self._worker_id

    @property
    def domain(self):
        return self._domain

    @property
    def error(self):
        """The latched error, or None while the generator is usable"""
        return self._error

    @property
    def healthy(self):
        return self._error is None

    def next_id(self):
        """Generate the next unique ID

        Returns:
            int: A 64-bit unique ID

        Raises:
            ConfigurationError: The generator was built with invalid coordinates
            ClockRegressionError: The clock moved backward, now or on an earlier call
            TimestampRangeError: The clock reads before EPOCH or past the 41-bit range
        """
        if self._error is not None:
            raise self._error

        domain = self._domain
        with domain.lock:
            timestamp = domain.current_millis()

            if timestamp < domain.last_timestamp:
                self._error = ClockRegressionError(domain.last_timestamp, timestamp)
                logger.error(
                    f"Clock moved backward by {self._error.drift} ms; "
                    f"generator ({self._datacenter_id}, {self._worker_id}) disabled"
                )
                raise self._error

            offset = timestamp - EPOCH
            if offset < 0 or offset > MAX_TIMESTAMP:
                raise TimestampRangeError(
                    f"Clock reading {timestamp} is outside the encodable range "
                    f"{EPOCH}..{EPOCH + MAX_TIMESTAMP}"
                )

            if timestamp == domain.last_timestamp:
                domain.sequence = (domain.sequence + 1) & MAX_SEQUENCE

                # Sequence exhausted for this millisecond
                if domain.sequence == 0:
                    logger.debug(f"Sequence exhausted at {timestamp}, waiting for next millisecond")
                    timestamp = domain.wait_next_millis(domain.last_timestamp)
                    if timestamp - EPOCH > MAX_TIMESTAMP:
                        domain.sequence = MAX_SEQUENCE
                        raise TimestampRangeError(
                            f"Clock reading {timestamp} is past the encodable range"
                        )
            else:
                domain.sequence = 0

            domain.last_timestamp = timestamp

            snowflake_id = (
                ((timestamp - EPOCH) << TIMESTAMP_SHIFT) |
                (self._datacenter_id << DATACENTER_ID_SHIFT) |
                (self._worker_id << WORKER_ID_SHIFT) |
                domain.sequence
            )

        logger.debug(f"Generated ID: {snowflake_id}")
        return snowflake_id

    def __repr__(self):
        state = "healthy" if self.healthy else type(self._error).__name__
        return (f"SnowflakeIDGenerator(datacenter_id={self._datacenter_id}, "
                f"worker_id={self._worker_id}, {state})")


def get_instance(datacenter_id, worker_id, domain=None):
    """Build a generator for a coordinate pair; errors surface from next_id()"""
    return SnowflakeIDGenerator(datacenter_id, worker_id, domain=domain)


def from_config(domain=None):
    """Build a generator for the coordinate pair assigned in config"""
    return SnowflakeIDGenerator(config.DATACENTER_ID, config.WORKER_ID, domain=domain)


_default_generator = None
_default_generator_lock = threading.Lock()


def generate_id():
    """
    Generate a unique ID using the default generator

    Errors latched by the default generator keep being raised until
    reset_default_generator() is called; nothing is retried here.

    Returns:
        int: A unique 64-bit ID
    """
    global _default_generator
    with _default_generator_lock:
        if _default_generator is None:
            _default_generator = from_config()
        generator = _default_generator
    return generator.next_id()


def reset_default_generator():
    """Discard the default generator so the next generate_id() builds a fresh one"""
    global _default_generator
    with _default_generator_lock:
        _default_generator = None


def parse_id(snowflake_id, epoch=EPOCH):
    """Parse a snowflake ID back into its components

    Args:
        snowflake_id (int): The snowflake ID to parse
        epoch (int): Epoch the ID was generated against

    Returns:
        dict: A dictionary with the components of the ID
    """
    if snowflake_id < 0 or snowflake_id >> (TIMESTAMP_SHIFT + TIMESTAMP_BITS):
        raise ValueError(f"{snowflake_id} is not a valid 64-bit snowflake ID")

    timestamp = snowflake_id >> TIMESTAMP_SHIFT
    datacenter_id = (snowflake_id >> DATACENTER_ID_SHIFT) & MAX_DATACENTER_ID
    worker_id = (snowflake_id >> WORKER_ID_SHIFT) & MAX_WORKER_ID
    sequence = snowflake_id & MAX_SEQUENCE

    unix_millis = timestamp + epoch
    generated = datetime.fromtimestamp(unix_millis / 1000, tz=timezone.utc)

    return {
        "id": snowflake_id,
        "timestamp": timestamp,
        "unix_millis": unix_millis,
        "datacenter_id": datacenter_id,
        "worker_id": worker_id,
        "sequence": sequence,
        "generated_time": generated.strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
    }
