"""Branch name parsing and classification.

Branch names follow the convention ``<YYMMDD><type>-<description>``, where the
type is ``r`` (release), ``f`` (feature) or ``b`` (bug fix). A branch made from
another one appends ``--<description>`` to its parent's name, so
``220622f-parent--child`` is a child of ``220622f-parent``.
"""

import calendar
import logging
import re
from dataclasses import dataclass, replace
from datetime import date as _date
from enum import Enum
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

BRANCH_PATTERN = re.compile(
    r"(?P<date>\d{6})"  # six digit date, e.g. 220622 for June 22, 2022
    r"(?P<type>[rfb])-"  # branch type followed by a hyphen
    r"(?P<description>[-\w]+)",  # description, may include more hyphens
    re.ASCII,
)

CHILD_SEPARATOR = "--"
MIN_YEAR = 22


class BranchType(Enum):
    """Branch type."""

    RELEASE = "r"
    FEATURE = "f"
    BUGFIX = "b"
    UNKNOWN = "?"  # Name didn't follow the convention


class BranchError(Exception):
    """Branch name error."""


class InvalidBranchName(BranchError):
    """Branch name doesn't match the naming convention."""

    def __init__(self, raw: str) -> None:
        """Initialize error.

        Args:
            raw: The branch name that failed to parse
        """
        super().__init__(f"Invalid branch name: {raw!r}")
        self.raw = raw


class InvalidDate(BranchError):
    """Branch date is out of range."""

    def __init__(self, date: object, reason: str) -> None:
        """Initialize error.

        Args:
            date: The rejected date value
            reason: Which component was out of range
        """
        super().__init__(f"Invalid date {date!r}: {reason}")
        self.date = date
        self.reason = reason


class InvalidType(BranchError):
    """Branch type is not one of the known types."""

    def __init__(self, value: object) -> None:
        """Initialize error.

        Args:
            value: The rejected type value
        """
        valid = ", ".join(repr(t.value) for t in BranchType)
        super().__init__(f"Invalid branch type {value!r}, expected one of {valid}")
        self.value = value


def today() -> int:
    """Return the current local date as a YYMMDD integer."""
    return int(_date.today().strftime("%y%m%d"))


def validate_date(date: int) -> int:
    """Check that a YYMMDD integer is a real date in 2022 or later.

    Returns:
        The date, unchanged

    Raises:
        InvalidDate: If the year, month or day is out of range
    """
    if isinstance(date, bool) or not isinstance(date, int) or not 0 <= date <= 999999:
        raise InvalidDate(date, "expected a six digit YYMMDD integer")

    year, month, day = date // 10000, date // 100 % 100, date % 100
    if year < MIN_YEAR:
        raise InvalidDate(date, f"year must be {MIN_YEAR} or later")
    if not 1 <= month <= 12:
        raise InvalidDate(date, "month must be between 1 and 12")

    _, days_in_month = calendar.monthrange(2000 + year, month)
    if not 1 <= day <= days_in_month:
        raise InvalidDate(date, f"day must be between 1 and {days_in_month}")
    return date


def validate_type(value: object) -> BranchType:
    """Coerce a type character or BranchType to a BranchType.

    Raises:
        InvalidType: If the value isn't one of the known types
    """
    if isinstance(value, BranchType):
        return value
    try:
        return BranchType(value)
    except (ValueError, TypeError) as err:
        raise InvalidType(value) from err


@dataclass(frozen=True)
class Branch:
    """The information encoded into a branch name."""

    date: int
    type: BranchType
    description: str
    name: str

    def __post_init__(self) -> None:
        validate_date(self.date)
        # Frozen, so coerce through object.__setattr__
        object.__setattr__(self, "type", validate_type(self.type))

    def __str__(self) -> str:
        return self.name

    @property
    def parent(self) -> str:
        """Name of the branch this one was made from, or empty."""
        head, separator, _ = self.name.rpartition(CHILD_SEPARATOR)
        return head if separator else ""

    def replace(self, **changes: object) -> "Branch":
        """Return a copy with some fields changed, validated like a new branch."""
        return replace(self, **changes)

    def is_release(self) -> bool:
        return self.type is BranchType.RELEASE

    def is_feature(self) -> bool:
        return self.type is BranchType.FEATURE

    def is_bugfix(self) -> bool:
        return self.type is BranchType.BUGFIX

    def is_type_unknown(self) -> bool:
        return self.type is BranchType.UNKNOWN

    def is_child(self) -> bool:
        """Check if this branch was made from a branch other than main."""
        return CHILD_SEPARATOR in self.name

    def is_parent(self, all_branch_names: Iterable[str]) -> bool:
        """Check if other branches have been made with this one as a starting point.

        A branch is a parent when another branch's name starts with its name.
        Names that share a prefix by coincidence count too.
        """
        return bool(children_of(self, all_branch_names))


def children_of(branch: Branch, all_branch_names: Iterable[str]) -> list[str]:
    """Get the names in the list that start with the branch's name, in order."""
    return [name for name in all_branch_names if name != branch.name and name.startswith(branch.name)]


def parse_branch(raw: str, strict: bool = True) -> Branch:
    """Parse a branch name.

    Args:
        raw: The branch name
        strict: Raise on names that don't follow the convention. Otherwise
            they get an unknown type, today's date and the whole name as the
            description.

    Raises:
        InvalidBranchName: If strict and the name doesn't follow the convention
        InvalidDate: If the name's date isn't a real date in 2022 or later
    """
    match = BRANCH_PATTERN.fullmatch(raw)
    if match is None:
        if strict:
            raise InvalidBranchName(raw)
        logger.info("Branch %r doesn't follow the naming convention, type is unknown", raw)
        return Branch(date=today(), type=BranchType.UNKNOWN, description=raw, name=raw)

    return Branch(
        date=int(match["date"]),
        type=BranchType(match["type"]),
        description=match["description"],
        name=raw,
    )


BranchFactory = Callable[[str, bool], Branch]


def make_branch(raw: str, strict: bool = False, factory: BranchFactory = parse_branch) -> Branch:
    """Build a branch through a factory.

    Repositories with a different naming grammar pass their own factory.
    """
    logger.debug("Building branch %r with %s", raw, getattr(factory, "__name__", factory))
    return factory(raw, strict)
