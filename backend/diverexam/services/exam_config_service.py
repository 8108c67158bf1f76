"""
Per-exam timer, passing score and title tables.

Every table is an explicit mapping with a documented default; an identifier
missing from a table is not an error, it resolves to that table's default.
The full-mode and spaced-repetition time limits are independent literals.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, Mapping, TypeVar

from ..schemas.exam_schema import ExamCatalogEntry, ExamConfiguration
from ..schemas.question_schema import ExamMode

T = TypeVar("T")


@dataclass(frozen=True)
class LookupTable(Generic[T]):
    values: Mapping[str, T]
    default: T
    name: str = field(default="table", compare=False)

    def get(self, exam_identifier: str) -> T:
        return self.values.get(exam_identifier, self.default)

    def __contains__(self, exam_identifier: str) -> bool:
        return exam_identifier in self.values


# seconds
SRS_TIME_LIMITS: LookupTable[int] = LookupTable(
    MappingProxyType({
        "ndt-inspection": 1800,
        "diver-medic": 1500,
        "commercial-supervisor": 1800,
        "saturation-diving": 1800,
        "underwater-welding": 1500,
        "hyperbaric-operations": 1500,
        "alst": 1800,
        "lst": 1500,
        "client-representative": 1800,
    }),
    default=1800,
    name="srs_time_limits",
)

FULL_TIME_LIMITS: LookupTable[int] = LookupTable(
    MappingProxyType({
        "ndt-inspection": 7200,
        "diver-medic": 5400,
        "commercial-supervisor": 9000,
        "saturation-diving": 8100,
        "underwater-welding": 6000,
        "hyperbaric-operations": 5400,
        "alst": 7200,
        "lst": 6000,
        "client-representative": 5400,
    }),
    default=5400,
    name="full_time_limits",
)

PASSING_PERCENTAGES: LookupTable[int] = LookupTable(
    MappingProxyType({
        "ndt-inspection": 80,
        "diver-medic": 80,
        "commercial-supervisor": 80,
        "saturation-diving": 80,
        "underwater-welding": 80,
        "hyperbaric-operations": 80,
        "alst": 80,
        "lst": 80,
        "client-representative": 75,
    }),
    default=80,
    name="passing_percentages",
)

EXAM_TITLES: LookupTable[str] = LookupTable(
    MappingProxyType({
        "ndt-inspection": "NDT Inspection & Testing Practice Test",
        "diver-medic": "Diver Medic Technician Practice Test",
        "commercial-supervisor": "Commercial Dive Supervisor Practice Test",
        "saturation-diving": "Saturation Diving Systems Practice Test",
        "underwater-welding": "Advanced Underwater Welding Practice Test",
        "hyperbaric-operations": "Hyperbaric Chamber Operations Practice Test",
        "alst": "Assistant Life Support Technician Practice Test",
        "lst": "Life Support Technician (LST) Practice Test",
        "client-representative": "Client Representative Practice Test",
    }),
    default="Professional Diving Practice Test",
    name="exam_titles",
)

# Not enforced by grading. Shown next to the result only.
COMPONENT_THRESHOLDS: Mapping[str, Mapping[str, int]] = MappingProxyType({
    "client-representative": MappingProxyType({
        "multiple-choice": 65,
        "short-answer": 65,
        "scenario": 65,
    }),
})

SRS_QUESTION_COUNT = 15


def resolve_time_limit(exam_identifier: str, mode: ExamMode) -> int:
    if mode == ExamMode.spaced_repetition:
        return SRS_TIME_LIMITS.get(exam_identifier)
    return FULL_TIME_LIMITS.get(exam_identifier)


def resolve_passing_percentage(exam_identifier: str) -> int:
    return PASSING_PERCENTAGES.get(exam_identifier)


def resolve_title(exam_identifier: str) -> str:
    return EXAM_TITLES.get(exam_identifier)


def resolve_advisory_note(exam_identifier: str) -> str | None:
    components = COMPONENT_THRESHOLDS.get(exam_identifier)
    if not components:
        return None
    parts = ", ".join(f"{name} {threshold}%" for name, threshold in components.items())
    return (
        f"Pass mark is {resolve_passing_percentage(exam_identifier)}% overall "
        f"and at least {parts} per component. Only the overall mark is scored here."
    )


def resolve_exam_configuration(exam_identifier: str, mode: ExamMode) -> ExamConfiguration:
    return ExamConfiguration(
        exam_identifier=exam_identifier,
        mode=mode,
        title=resolve_title(exam_identifier),
        time_limit_seconds=resolve_time_limit(exam_identifier, mode),
        passing_percentage=resolve_passing_percentage(exam_identifier),
        advisory_note=resolve_advisory_note(exam_identifier),
    )


def known_exam_identifiers() -> list[str]:
    return list(EXAM_TITLES.values.keys())


def _catalog_entry(exam_identifier: str) -> ExamCatalogEntry:
    return ExamCatalogEntry(
        exam_identifier=exam_identifier,
        title=resolve_title(exam_identifier),
        passing_percentage=resolve_passing_percentage(exam_identifier),
        full_time_limit_seconds=resolve_time_limit(exam_identifier, ExamMode.full),
        srs_time_limit_seconds=resolve_time_limit(exam_identifier, ExamMode.spaced_repetition),
        advisory_note=resolve_advisory_note(exam_identifier),
    )


def exam_catalog() -> list[ExamCatalogEntry]:
    return [_catalog_entry(slug) for slug in known_exam_identifiers()]
