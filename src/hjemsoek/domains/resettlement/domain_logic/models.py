"""Resettlement scoring models and domain constants.

Inputs are frozen dataclasses validated once at construction (``from_dict``
parses raw mappings coming from a UI or fixture). Results share the
``ModuleResult`` base and are tagged with their module name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Literal


# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------

PersonType = Literal[
    "baby",
    "child",
    "high_school_pupil",
    "student",
    "adult_working",
    "adult_not_working",
    "senior",
]
PERSON_TYPES: tuple[str, ...] = (
    "baby",
    "child",
    "high_school_pupil",
    "student",
    "adult_working",
    "adult_not_working",
    "senior",
)

ConnectionRelation = Literal["friend", "close_family", "relative", "workplace", "school_place"]
CONNECTION_RELATIONS: tuple[str, ...] = (
    "friend",
    "close_family",
    "relative",
    "workplace",
    "school_place",
)

EducationFacility = Literal["primary_school", "high_school", "university", "adult_language"]
EDUCATION_FACILITIES: tuple[str, ...] = (
    "primary_school",
    "high_school",
    "university",
    "adult_language",
)

SPECIALIST_TREATMENT_TYPES: tuple[str, ...] = (
    "dialysis",
    "rehabilitation",
    "physical_therapy",
    "mental_health",
    "oncology",
    "cardiology",
    "maternity",
    "pediatrics",
    "substance_abuse",
    "trauma",
    "orthopedic",
    "respiratory",
)

ScoreMode = Literal["feasible", "overflow_penalty", "infeasible", "missing_data"]
Direction = Literal["higher_better", "lower_better"]

ModuleName = Literal["capacity", "work_opportunity", "connection", "healthcare", "education"]
MODULE_NAMES: tuple[str, ...] = (
    "capacity",
    "work_opportunity",
    "connection",
    "healthcare",
    "education",
)

# ---------------------------------------------------------------------------
# Subweight ids per module (order is the reporting order)
# ---------------------------------------------------------------------------

CAPACITY_SUBWEIGHT_IDS: tuple[str, ...] = ("capacity.core",)
WORK_SUBWEIGHT_IDS: tuple[str, ...] = ("work.chance", "work.growth")
CONNECTION_SUBWEIGHT_IDS: tuple[str, ...] = tuple(f"connection.{r}" for r in CONNECTION_RELATIONS)
HEALTHCARE_SUBWEIGHT_IDS: tuple[str, ...] = ("healthcare.hospital", "healthcare.specialist")
EDUCATION_SUBWEIGHT_IDS: tuple[str, ...] = tuple(f"education.{f}" for f in EDUCATION_FACILITIES)

SUBWEIGHT_IDS_BY_MODULE: dict[str, tuple[str, ...]] = {
    "capacity": CAPACITY_SUBWEIGHT_IDS,
    "work_opportunity": WORK_SUBWEIGHT_IDS,
    "connection": CONNECTION_SUBWEIGHT_IDS,
    "healthcare": HEALTHCARE_SUBWEIGHT_IDS,
    "education": EDUCATION_SUBWEIGHT_IDS,
}

# ---------------------------------------------------------------------------
# Tier scores
# ---------------------------------------------------------------------------

TIER_SELF = 100.0
TIER_NEIGHBOR = 50.0
TIER_REGION = 25.0

CONNECTION_TIER_EXACT = 100.0
CONNECTION_TIER_NEIGHBOR = 50.0
CONNECTION_TIER_SAME_REGION = 10.0

# Base score when a person declares a whole region that contains the target.
REGION_RELATION_BASE: dict[str, float] = {
    "friend": 10.0,
    "close_family": 75.0,
    "relative": 25.0,
    "workplace": 25.0,
    "school_place": 25.0,
}


def _opt_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _opt_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Group composition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Subweight:
    """Relative weight for one sub-criterion inside a module."""

    id: str
    weight: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Subweight:
        return cls(id=str(data["id"]), weight=float(data.get("weight") or 0.0))


@dataclass(frozen=True)
class PersonConnection:
    """A single declared tie: a municipality OR a region, plus a relation."""

    municipality_id: str | None = None
    region_id: str | None = None
    relation: str | None = None

    def __post_init__(self) -> None:
        if self.municipality_id and self.region_id:
            raise ValueError("connection must name a municipality or a region, not both")
        if self.relation is not None and self.relation not in CONNECTION_RELATIONS:
            raise ValueError(f"Unknown connection relation: {self.relation!r}")

    @property
    def has_location(self) -> bool:
        return bool(self.municipality_id or self.region_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PersonConnection:
        return cls(
            municipality_id=_opt_str(data.get("municipality_id")),
            region_id=_opt_str(data.get("region_id")),
            relation=_opt_str(data.get("relation")),
        )


@dataclass(frozen=True)
class Person:
    """One person in the group to be settled."""

    id: str
    person_type: str
    profession: str | None = None
    connection: PersonConnection | None = None
    needs_hospital: bool = False
    specialist_need: str | None = None
    education_need: str | None = None

    def __post_init__(self) -> None:
        if self.person_type not in PERSON_TYPES:
            raise ValueError(f"Unknown person type: {self.person_type!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Person:
        connection = data.get("connection")
        return cls(
            id=str(data["id"]),
            person_type=data.get("person_type") or data.get("personType") or "",
            profession=_opt_str(data.get("profession")),
            connection=PersonConnection.from_dict(connection) if connection else None,
            needs_hospital=bool(data.get("needs_hospital", False)),
            specialist_need=_opt_str(data.get("specialist_need")),
            education_need=_opt_str(data.get("education_need")),
        )


@dataclass(frozen=True)
class Group:
    """Ordered persons to be settled together.

    ``size`` is optional; when given alongside persons it must match.
    """

    persons: tuple[Person, ...] = ()
    size: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "persons", tuple(self.persons))
        if self.size is not None and self.persons and self.size != len(self.persons):
            raise ValueError(
                f"group size {self.size} does not match {len(self.persons)} persons"
            )

    @property
    def effective_size(self) -> int:
        return self.size if self.size is not None else len(self.persons)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Group:
        size = data.get("size")
        return cls(
            persons=tuple(Person.from_dict(p) for p in data.get("persons") or ()),
            size=int(size) if size is not None else None,
        )


def _subweights(items: Iterable[Any] | None) -> tuple[Subweight, ...] | None:
    if items is None:
        return None
    return tuple(s if isinstance(s, Subweight) else Subweight.from_dict(s) for s in items)


# ---------------------------------------------------------------------------
# Municipality facts (one record per module)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CapacityFacts:
    capacity_total: float | None = None
    settled_current: float | None = None
    tentative_claim: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CapacityFacts:
        return cls(
            capacity_total=_opt_float(data.get("capacity_total")),
            settled_current=_opt_float(data.get("settled_current")),
            tentative_claim=_opt_float(data.get("tentative_claim")),
        )


@dataclass(frozen=True)
class ProfessionHistory:
    """Workforce history for one profession in one municipality."""

    employees_5y_ago: float | None = None     # P0 (raw, may be 0)
    employees_now: float | None = None        # P1
    pct_workforce_5y_ago: float | None = None  # share0, 0-100
    pct_workforce_now: float | None = None     # share1, 0-100

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProfessionHistory:
        return cls(
            employees_5y_ago=_opt_float(
                data.get("employees_5y_ago", data.get("number_of_employees_in_profession_5_years_ago"))
            ),
            employees_now=_opt_float(
                data.get("employees_now", data.get("number_of_employees_in_profession_now"))
            ),
            pct_workforce_5y_ago=_opt_float(
                data.get(
                    "pct_workforce_5y_ago",
                    data.get("percentage_of_municipality_workforce_5_years_ago"),
                )
            ),
            pct_workforce_now=_opt_float(
                data.get("pct_workforce_now", data.get("percentage_of_municipality_workforce_now"))
            ),
        )


@dataclass(frozen=True)
class WorkFacts:
    unemployment_rate: float | None = None
    profession_history: Mapping[str, ProfessionHistory] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkFacts:
        history = data.get("profession_history") or {}
        return cls(
            unemployment_rate=_opt_float(data.get("unemployment_rate")),
            profession_history={
                prof: row if isinstance(row, ProfessionHistory) else ProfessionHistory.from_dict(row)
                for prof, row in history.items()
            },
        )


@dataclass(frozen=True)
class HealthcareFacts:
    has_hospital: bool = False
    specialist_facilities: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "specialist_facilities", frozenset(self.specialist_facilities))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HealthcareFacts:
        return cls(
            has_hospital=bool(data.get("has_hospital", False)),
            specialist_facilities=frozenset(data.get("specialist_facilities") or ()),
        )


@dataclass(frozen=True)
class EducationFacts:
    has_primary_school: bool = False
    has_high_school: bool = False
    has_university: bool = False
    has_adult_language: bool = False

    def has(self, facility: str) -> bool:
        return bool(getattr(self, f"has_{facility}", False))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EducationFacts:
        return cls(**{f"has_{f}": bool(data.get(f"has_{f}", False)) for f in EDUCATION_FACILITIES})


# ---------------------------------------------------------------------------
# Growth normalization configuration
# ---------------------------------------------------------------------------

# Scale keywords accepted instead of a literal number.
SCALE_TH_ABS = "TH_abs"
SCALE_TH_SHARE_OR_5PP = "TH_share_or_5pp"
SHARE_SCALE_FLOOR_PP = 5.0

# camelCase key used by existing weight exports -> field name
_GROWTH_KEY_ALIASES = {"tinyBaseThreshold": "tiny_base_threshold"}


@dataclass(frozen=True)
class GrowthNormalizationConfig:
    """Parameters for the scenario-based growth dampening/boosting."""

    tiny_base_threshold: float = 2.0
    beta_boost_s1: float = 0.4
    damp_s4: float = 0.5
    gamma_share: float = 0.3
    cap_factor: float = 1.5
    final_cap: float = 200.0
    k_abs_scale: str | float = SCALE_TH_ABS
    k_boost_scale: str | float = SCALE_TH_ABS
    share_scale_mode: str | float = SCALE_TH_SHARE_OR_5PP

    def __post_init__(self) -> None:
        for name, keyword in (
            ("k_abs_scale", SCALE_TH_ABS),
            ("k_boost_scale", SCALE_TH_ABS),
            ("share_scale_mode", SCALE_TH_SHARE_OR_5PP),
        ):
            value = getattr(self, name)
            if value == keyword:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(
                    f"{name} must be {keyword!r} or a number, got {value!r}"
                )
            object.__setattr__(self, name, float(value))

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None) -> GrowthNormalizationConfig:
        """Merge a partial override mapping onto the defaults.

        Raises:
            ValueError: for keys that are not configuration fields.
        """
        if not overrides:
            return cls()
        known = set(cls.__dataclass_fields__)
        values: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _GROWTH_KEY_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown growth normalization parameter: {key!r}")
            if value is None:
                continue
            if name in ("k_abs_scale", "k_boost_scale", "share_scale_mode") and isinstance(value, str):
                values[name] = value
            else:
                values[name] = float(value)
        return cls(**values)


# ---------------------------------------------------------------------------
# Input envelopes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CapacityOptions:
    include_tentative: bool = False
    allow_overflow: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> CapacityOptions:
        data = data or {}
        return cls(
            include_tentative=bool(data.get("include_tentative", False)),
            allow_overflow=bool(data.get("allow_overflow", False)),
        )


@dataclass(frozen=True)
class CapacityInput:
    group: Group
    municipality: CapacityFacts
    options: CapacityOptions = field(default_factory=CapacityOptions)
    subweights: tuple[Subweight, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CapacityInput:
        return cls(
            group=Group.from_dict(data.get("group") or {}),
            municipality=CapacityFacts.from_dict(data.get("municipality") or {}),
            options=CapacityOptions.from_dict(data.get("options")),
            subweights=_subweights(data.get("subweights")),
        )


@dataclass(frozen=True)
class WorkOpportunityInput:
    group: Group
    municipality: WorkFacts
    subweights: tuple[Subweight, ...] | None = None
    growth_normalization: GrowthNormalizationConfig | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkOpportunityInput:
        municipality = data.get("municipality") or {}
        # Accept the nested {"work_opportunity": {...}} shape as well.
        municipality = municipality.get("work_opportunity", municipality)
        return cls(
            group=Group.from_dict(data.get("group") or {}),
            municipality=WorkFacts.from_dict(municipality),
            subweights=_subweights(data.get("subweights")),
            growth_normalization=GrowthNormalizationConfig.from_overrides(
                data.get("growth_normalization")
            ),
        )


@dataclass(frozen=True)
class _GeoInput:
    group: Group
    target_municipality_id: str
    municipality_region_map: Mapping[str, str] = field(default_factory=dict)
    adjacency_map: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


def _geo_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "group": Group.from_dict(data.get("group") or {}),
        "target_municipality_id": str(data["target_municipality_id"]),
        "municipality_region_map": dict(data.get("municipality_region_map") or {}),
        "adjacency_map": {k: tuple(v) for k, v in (data.get("adjacency_map") or {}).items()},
        "subweights": _subweights(data.get("subweights")),
    }


@dataclass(frozen=True)
class ConnectionInput(_GeoInput):
    subweights: tuple[Subweight, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionInput:
        return cls(**_geo_kwargs(data))


@dataclass(frozen=True)
class HealthcareInput(_GeoInput):
    municipality_healthcare_map: Mapping[str, HealthcareFacts] = field(default_factory=dict)
    subweights: tuple[Subweight, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HealthcareInput:
        facts = data.get("municipality_healthcare_map") or {}
        return cls(
            **_geo_kwargs(data),
            municipality_healthcare_map={
                mid: f if isinstance(f, HealthcareFacts) else HealthcareFacts.from_dict(f)
                for mid, f in facts.items()
            },
        )


@dataclass(frozen=True)
class EducationInput(_GeoInput):
    municipality_education_map: Mapping[str, EducationFacts] = field(default_factory=dict)
    subweights: tuple[Subweight, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EducationInput:
        facts = data.get("municipality_education_map") or {}
        return cls(
            **_geo_kwargs(data),
            municipality_education_map={
                mid: f if isinstance(f, EducationFacts) else EducationFacts.from_dict(f)
                for mid, f in facts.items()
            },
        )


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Subscore:
    """One weighted sub-criterion row in a module result."""

    id: str
    weight: float
    normalized_weight: float
    score: float = 0.0
    contribution: float = 0.0
    formula: str = ""
    values: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class ModuleResult:
    """Fields shared by every module result."""

    module: ClassVar[str] = ""

    effective_score: float
    max_possible: float
    score: float | None = None
    confidence: int | None = None
    mode: ScoreMode = "feasible"
    direction: Direction = "higher_better"
    explanation: str = ""
    trace: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["module"] = self.module
        return data


@dataclass(frozen=True, kw_only=True)
class CapacityResult(ModuleResult):
    module: ClassVar[str] = "capacity"

    capacity_score: float
    allow_overflow: bool
    include_tentative: bool
    available_effect: float = 0.0
    remaining_after: float = 0.0
    overflow_units: float = 0.0
    subscores: tuple[Subscore, ...] = ()


@dataclass(frozen=True)
class GrowthThresholds:
    """Robust (median + MAD) thresholds over a municipality's professions."""

    th_abs: float
    th_pct: float
    th_share: float


@dataclass(frozen=True)
class GrowthFactors:
    """Every intermediate of one growth normalization, for tracing."""

    p0_raw: float
    p0_eff: float
    p1: float
    delta_n: float
    recomputed_pct: float
    positive_pct: float
    share0: float
    share1: float
    delta_share_raw: float
    delta_share: float
    thresholds: GrowthThresholds
    tiny_base: bool
    negative_growth: bool
    f_scen: float
    f_abs: float
    f_base: float
    f_share_raw: float
    f_struct: float
    f_total_raw: float
    f_total: float
    params: GrowthNormalizationConfig


@dataclass(frozen=True)
class WorkPersonTrace:
    person_id: str
    profession: str | None
    chance: float
    growth: float
    weights: dict[str, float]
    composite: float
    max_possible: float = 100.0
    growth_adjusted_raw: float | None = None
    growth_scenario: int | None = None
    growth_factors: GrowthFactors | None = None
    explanation: str = ""
    flags: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class WorkOpportunityResult(ModuleResult):
    module: ClassVar[str] = "work_opportunity"

    coverage: float = 0.0
    thresholds: GrowthThresholds | None = None
    subscores: tuple[Subscore, ...] = ()
    persons: tuple[WorkPersonTrace, ...] = ()


@dataclass(frozen=True)
class ConnectionPersonTrace:
    person_id: str
    relation: str | None
    declared: PersonConnection | None
    match_level: Literal["exact", "neighbor", "region", "none"]
    base_score: float
    counted: bool = False
    explanation: str = ""


@dataclass(frozen=True, kw_only=True)
class ConnectionResult(ModuleResult):
    module: ClassVar[str] = "connection"

    subscores: tuple[Subscore, ...] = ()
    persons: tuple[ConnectionPersonTrace, ...] = ()


@dataclass(frozen=True)
class HealthcarePersonTrace:
    person_id: str
    needs_hospital: bool
    specialist_need: str | None
    hospital_score: float | None
    specialist_score: float | None
    composite: float
    explanation: str = ""


@dataclass(frozen=True, kw_only=True)
class HealthcareResult(ModuleResult):
    module: ClassVar[str] = "healthcare"

    subscores: tuple[Subscore, ...] = ()
    persons: tuple[HealthcarePersonTrace, ...] = ()


@dataclass(frozen=True)
class EducationPersonTrace:
    person_id: str
    education_need: str | None
    valid: bool
    tier_level: str
    tier_score: float
    explanation: str = ""


@dataclass(frozen=True, kw_only=True)
class EducationResult(ModuleResult):
    module: ClassVar[str] = "education"

    subscores: tuple[Subscore, ...] = ()
    persons: tuple[EducationPersonTrace, ...] = ()
