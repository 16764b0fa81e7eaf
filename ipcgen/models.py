"""Core data models shared across ipcgen components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Tuple, Union


@dataclass(frozen=True)
class SourceFile:
    """A source file loaded for a single pass."""

    path: Path
    text: str


@dataclass(frozen=True)
class MethodDeclaration:
    """A `@route()` method with its raw parameter text."""

    name: str
    raw_params: str


@dataclass(frozen=True)
class AnnotationMatch:
    """Everything extracted from one annotated source file."""

    group: str
    type_name: str
    methods: Tuple[MethodDeclaration, ...] = ()


class SkipReason(str, Enum):
    """Why a file contributed nothing to the registry."""

    NO_GROUP_MARKER = "no group marker"
    NO_TYPE_DECLARATION = "no type declaration"


@dataclass(frozen=True)
class Matched:
    match: AnnotationMatch


@dataclass(frozen=True)
class Skipped:
    reason: SkipReason


MatchResult = Union[Matched, Skipped]


@dataclass(frozen=True)
class ParsedParam:
    """A single `name: type` parameter."""

    name: str
    annotation: str

    def render(self) -> str:
        return f"{self.name}: {self.annotation}"


@dataclass(frozen=True)
class Parsed:
    param: ParsedParam


@dataclass(frozen=True)
class Dropped:
    raw: str


ParamResult = Union[Parsed, Dropped]


@dataclass(frozen=True)
class ParamSignature:
    """Parameters of one method, rendered for the emitter."""

    params: Tuple[ParsedParam, ...] = ()
    dropped: Tuple[str, ...] = ()

    @property
    def definitions(self) -> str:
        return ", ".join(param.render() for param in self.params)

    @property
    def names(self) -> str:
        return ", ".join(param.name for param in self.params)


@dataclass(frozen=True)
class RegistryEntry:
    """Generated call metadata for one (group, method) pair."""

    group: str
    method: str
    param_definitions: str
    param_names: str

    @property
    def route(self) -> str:
        return f"{self.group}-{self.method}"


class PassState(str, Enum):
    """Lifecycle of a single generation pass."""

    IDLE = "idle"
    WALKING = "walking"
    VALIDATING = "validating"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PassResult:
    """Summary of a completed generation pass."""

    output: Path
    duration: float
    groups: int = 0
    methods: int = 0
    files_scanned: int = 0
    files_matched: int = 0
    skipped: List[Tuple[str, SkipReason]] = field(default_factory=list)
