"""
State of a single resolution pass over a template: memoization cache, path stack, generated ids and the
pseudo parameters of the (simulated) deployment target.
"""
import logging
import random
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

from cfneval import config
from cfneval.constants import PLACEHOLDER_AWS_NO_VALUE
from cfneval.engine.errors import (
    CircularReferenceError,
    DuplicateParameterError,
    ParameterNotFoundError,
    ResolvingContextError,
)
from cfneval.engine.types import Template
from cfneval.utils.aws.arns import cloudformation_stack_arn, get_partition
from cfneval.utils.strings import is_blank

LOG = logging.getLogger(__name__)

# how often id generation is retried before giving up on finding an unused id
MAX_ID_GENERATION_ATTEMPTS = 10

# zones of a few well-known regions, all other regions get fabricated "<region>a/b/c" zones
DEFAULT_AVAILABILITY_ZONES = {
    "us-east-1": ["us-east-1a", "us-east-1b", "us-east-1c", "us-east-1d", "us-east-1e", "us-east-1f"],
    "us-east-2": ["us-east-2a", "us-east-2b", "us-east-2c"],
    "us-west-1": ["us-west-1a", "us-west-1c"],
    "us-west-2": ["us-west-2a", "us-west-2b", "us-west-2c", "us-west-2d"],
    "eu-west-1": ["eu-west-1a", "eu-west-1b", "eu-west-1c"],
    "eu-central-1": ["eu-central-1a", "eu-central-1b", "eu-central-1c"],
    "ap-southeast-2": ["ap-southeast-2a", "ap-southeast-2b", "ap-southeast-2c"],
}

PathSegment = Union[str, int]


class AvailabilityZoneTable:
    """
    Deterministic, region-keyed table of availability zones. Lookups without a region (or with a blank one)
    return the zones of the default region.
    """

    zones: Dict[str, List[str]]
    default_region: str

    def __init__(self, default_region: str, zones: Dict[str, List[str]] = None):
        self.default_region = default_region
        self.zones = dict(DEFAULT_AVAILABILITY_ZONES)
        if zones:
            self.zones.update(zones)

    def get(self, region: Optional[str] = None) -> List[str]:
        if is_blank(region):
            region = self.default_region
        zones = self.zones.get(region)
        if zones is None:
            zones = [f"{region}{suffix}" for suffix in ("a", "b", "c")]
        return list(zones)


class ResolvingContext:
    """
    Mutable state of one resolution pass. A context must not be shared between passes that run concurrently.

    The cache is seeded with the pseudo parameters (``AWS::Region``, ``AWS::AccountId``, ...) and the given
    template parameter values, so ``Ref`` to those names is a cache hit.
    """

    template: Template
    cache: Dict[str, Any]
    generated_ids: Set[str]
    physical_ids: Dict[Tuple[str, str], Any]
    random: random.Random

    def __init__(
        self,
        template: Template,
        region: str = None,
        partition: str = None,
        account_id: str = None,
        az_table: AvailabilityZoneTable = None,
        parameters: Dict[str, Any] = None,
        stack_name: str = None,
        url_suffix: str = None,
        seed: int = None,
        detect_cycles: bool = None,
    ):
        self.template = template
        self._region = region or config.DEFAULT_REGION
        self._partition = partition or get_partition(self._region)
        self._account_id = account_id or config.ACCOUNT_ID
        self.stack_name = stack_name or config.STACK_NAME
        self.url_suffix = url_suffix or config.URL_SUFFIX
        self.az_table = az_table or AvailabilityZoneTable(self._region)
        self.detect_cycles = config.DETECT_CYCLES if detect_cycles is None else detect_cycles
        self.random = random.Random(config.RANDOM_SEED if seed is None else seed)

        self.cache = {}
        self.generated_ids = set()
        self.physical_ids = {}
        self._path: List[PathSegment] = []
        self._resources_in_progress: List[str] = []

        for key, value in self._pseudo_parameters().items():
            self.cache[key] = value
        for key, value in (parameters or {}).items():
            self.cache[key] = value

    def _pseudo_parameters(self) -> Dict[str, Any]:
        stack_uuid = "%08x-%04x-4%03x-%04x-%012x" % (
            self.random.getrandbits(32),
            self.random.getrandbits(16),
            self.random.getrandbits(12),
            self.random.getrandbits(16),
            self.random.getrandbits(48),
        )
        return {
            "AWS::AccountId": self._account_id,
            "AWS::NotificationARNs": [],
            "AWS::NoValue": PLACEHOLDER_AWS_NO_VALUE,
            "AWS::Partition": self._partition,
            "AWS::Region": self._region,
            "AWS::StackName": self.stack_name,
            "AWS::StackId": cloudformation_stack_arn(
                self.stack_name, stack_uuid, self._account_id, self._region, self._partition
            ),
            "AWS::URLSuffix": self.url_suffix,
        }

    #
    # memoization cache
    #

    def has_key(self, key: str) -> bool:
        return key in self.cache

    def get(self, key: str) -> Any:
        """
        Returns the cached value. Callers must check ``has_key`` first.

        :raises ParameterNotFoundError: if the key has not been cached
        """
        if key not in self.cache:
            raise ParameterNotFoundError(key)
        return self.cache[key]

    def put(self, key: str, value: Any) -> None:
        self.cache[key] = value

    def add(self, key: str, value: Any) -> None:
        """
        Caches a value under a key that must not be cached yet.

        :raises DuplicateParameterError: if the key is already cached
        """
        if key in self.cache:
            raise DuplicateParameterError(key)
        self.cache[key] = value

    #
    # path tracking
    #

    def push_path(self, segment: PathSegment) -> None:
        self._path.append(segment)

    def pop_path(self) -> PathSegment:
        if not self._path:
            raise ResolvingContextError("Unbalanced path stack: pop on empty path")
        return self._path.pop()

    @contextmanager
    def path_segment(self, segment: PathSegment) -> Iterator[None]:
        self.push_path(segment)
        try:
            yield
        finally:
            self.pop_path()

    @property
    def path(self) -> List[PathSegment]:
        return list(self._path)

    @property
    def current_path(self) -> str:
        result = ""
        for segment in self._path:
            if isinstance(segment, int):
                result += f"[{segment}]"
            else:
                result += f"{'.' if result else ''}{segment}"
        return result

    #
    # pseudo parameters
    #

    @property
    def region(self) -> str:
        return self._region

    @property
    def partition(self) -> str:
        return self._partition

    @property
    def account_id(self) -> str:
        return self._account_id

    def availability_zones(self, region: str = None) -> List[str]:
        return self.az_table.get(region)

    #
    # generated ids
    #

    def has_generated_id(self, generated_id: str) -> bool:
        return generated_id in self.generated_ids

    def register_generated_id(self, generated_id: str) -> None:
        self.generated_ids.add(generated_id)

    def generate_unique_id(self, generator: Callable[[random.Random], str]) -> str:
        """
        Calls the generator until it returns an id that has not been generated before in this pass, and
        registers it.
        """
        for _ in range(MAX_ID_GENERATION_ATTEMPTS):
            candidate = generator(self.random)
            if not self.has_generated_id(candidate):
                self.register_generated_id(candidate)
                return candidate
        raise ResolvingContextError(
            f"Unable to generate a unique id after {MAX_ID_GENERATION_ATTEMPTS} attempts"
        )

    def physical_id(self, logical_id: str, kind: str, factory: Callable[[], Any]) -> Any:
        """
        Returns the memoized identifier of the given kind (e.g., "name", "id") for a resource, creating it with
        ``factory`` on first access. The template itself is never modified.
        """
        key = (logical_id, kind)
        if key not in self.physical_ids:
            self.physical_ids[key] = factory()
        return self.physical_ids[key]

    #
    # cycle detection
    #

    @contextmanager
    def resolving_resource(self, logical_id: str) -> Iterator[None]:
        """Marks the resource as being resolved, so a reference chain returning to it can be reported."""
        if self.detect_cycles and logical_id in self._resources_in_progress:
            start = self._resources_in_progress.index(logical_id)
            chain = self._resources_in_progress[start:] + [logical_id]
            raise CircularReferenceError(chain)
        self._resources_in_progress.append(logical_id)
        try:
            yield
        finally:
            self._resources_in_progress.pop()
