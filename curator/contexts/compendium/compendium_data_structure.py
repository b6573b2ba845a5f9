"""
Compendium Data Structure

Immutable representation of the full resume corpus: companies -> positions -> bullets.
Order is significant at every level ("resume order", newest first) and is the
authority for chronological presentation.

Records are addressed by stable string ids. Ancestry is never stored on a bullet;
traversal helpers yield (company, position, bullet) triples instead.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

from loguru import logger

from curator.contexts.compendium.exceptions import InvalidCompendiumError

DEFAULT_PRIORITY = 5


def _field(data: Mapping[str, Any], camel: str, snake: Optional[str] = None, default=None):
    """Read a field that may be spelled camelCase (JSON export) or snake_case (YAML)."""
    if camel in data:
        return data[camel]
    if snake and snake in data:
        return data[snake]
    return default


def _require(data: Mapping[str, Any], key: str, kind: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise InvalidCompendiumError(f"{kind} is missing required field '{key}': {dict(data)}")
    return value


@dataclass(frozen=True)
class Bullet:
    """
    A single achievement statement, the atomic selectable unit.

    Attributes:
        id: Unique, stable identifier within the compendium
        description: Achievement text shown on the resume
        priority: Author-assigned importance 1-10 (tie-break only)
        tags: Category labels, in authored order
    """

    id: str
    description: str
    priority: int = DEFAULT_PRIORITY
    tags: Tuple[str, ...] = ()
    name: Optional[str] = None
    summary: Optional[str] = None
    location: Optional[str] = None
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    link: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Bullet":
        return cls(
            id=str(_require(data, "id", "Bullet")),
            description=str(_require(data, "description", "Bullet")),
            priority=int(_field(data, "priority", default=DEFAULT_PRIORITY)),
            tags=tuple(_field(data, "tags", default=()) or ()),
            name=_field(data, "name"),
            summary=_field(data, "summary"),
            location=_field(data, "location"),
            date_start=_field(data, "dateStart", "date_start"),
            date_end=_field(data, "dateEnd", "date_end"),
            link=_field(data, "link"),
        )


@dataclass(frozen=True)
class Position:
    """A role held at a company; owns an ordered sequence of bullets."""

    id: str
    name: str
    date_start: str
    children: Tuple[Bullet, ...] = ()
    date_end: Optional[str] = None
    priority: int = DEFAULT_PRIORITY
    tags: Tuple[str, ...] = ()
    description: Optional[str] = None
    summary: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Position":
        return cls(
            id=str(_require(data, "id", "Position")),
            name=str(_require(data, "name", "Position")),
            date_start=str(_field(data, "dateStart", "date_start", default="")),
            children=tuple(Bullet.from_dict(b) for b in _field(data, "children", default=[])),
            date_end=_field(data, "dateEnd", "date_end"),
            priority=int(_field(data, "priority", default=DEFAULT_PRIORITY)),
            tags=tuple(_field(data, "tags", default=()) or ()),
            description=_field(data, "description"),
            summary=_field(data, "summary"),
            location=_field(data, "location"),
            link=_field(data, "link"),
        )


@dataclass(frozen=True)
class Company:
    """An employer; owns an ordered sequence of positions."""

    id: str
    date_start: str
    children: Tuple[Position, ...] = ()
    name: Optional[str] = None
    date_end: Optional[str] = None
    priority: int = DEFAULT_PRIORITY
    tags: Tuple[str, ...] = ()
    description: Optional[str] = None
    summary: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Company":
        return cls(
            id=str(_require(data, "id", "Company")),
            date_start=str(_field(data, "dateStart", "date_start", default="")),
            children=tuple(Position.from_dict(p) for p in _field(data, "children", default=[])),
            name=_field(data, "name"),
            date_end=_field(data, "dateEnd", "date_end"),
            priority=int(_field(data, "priority", default=DEFAULT_PRIORITY)),
            tags=tuple(_field(data, "tags", default=()) or ()),
            description=_field(data, "description"),
            summary=_field(data, "summary"),
            location=_field(data, "location"),
            link=_field(data, "link"),
        )


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights for heuristic role-profile scoring.

    Attributes:
        tag_relevance: Weight for tag relevance (0.0-1.0)
        priority: Weight for author priority (0.0-1.0)
    """

    tag_relevance: float
    priority: float

    def validate(self) -> None:
        """Raise InvalidCompendiumError for negative or all-zero weights."""
        if self.tag_relevance < 0 or self.priority < 0:
            raise InvalidCompendiumError(
                f"Scoring weights cannot be negative "
                f"(tag_relevance: {self.tag_relevance:.2f}, priority: {self.priority:.2f})"
            )
        if self.tag_relevance + self.priority == 0:
            raise InvalidCompendiumError("Scoring weights cannot both be zero")

    def normalize(self) -> "ScoringWeights":
        """Return weights scaled to sum to 1.0 (logs a warning when scaling was needed)."""
        self.validate()
        total = self.tag_relevance + self.priority
        if abs(total - 1.0) < 0.001:
            return self

        normalized = ScoringWeights(
            tag_relevance=self.tag_relevance / total,
            priority=self.priority / total,
        )
        logger.warning(
            f"Normalized scoring weights from {total:.3f} to 1.0 "
            f"(tag_relevance: {self.tag_relevance:.2f} -> {normalized.tag_relevance:.2f}, "
            f"priority: {self.priority:.2f} -> {normalized.priority:.2f})"
        )
        return normalized


@dataclass(frozen=True)
class RoleProfile:
    """Named tag weighting used for deterministic, provider-free scoring."""

    id: str
    name: str
    tag_weights: Mapping[str, float] = field(default_factory=dict)
    scoring_weights: ScoringWeights = ScoringWeights(tag_relevance=0.6, priority=0.4)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoleProfile":
        weights = _field(data, "scoringWeights", "scoring_weights", default={}) or {}
        return cls(
            id=str(_require(data, "id", "RoleProfile")),
            name=str(_require(data, "name", "RoleProfile")),
            tag_weights={
                str(tag): float(w)
                for tag, w in (_field(data, "tagWeights", "tag_weights", default={}) or {}).items()
            },
            scoring_weights=ScoringWeights(
                tag_relevance=float(_field(weights, "tagRelevance", "tag_relevance", default=0.6)),
                priority=float(_field(weights, "priority", default=0.4)),
            ),
            description=_field(data, "description"),
        )


class BulletEntry(NamedTuple):
    """A bullet together with its owning company and position, plus corpus order."""

    company: Company
    position: Position
    bullet: Bullet
    index: int


@dataclass(frozen=True)
class Compendium:
    """
    The full, read-only resume corpus.

    Attributes:
        experience: Companies in resume order (newest first)
        role_profiles: Optional heuristic scoring profiles
        personal: Contact/personal block, passed through untouched
        summary: Optional professional summary
    """

    experience: Tuple[Company, ...]
    role_profiles: Tuple[RoleProfile, ...] = ()
    personal: Mapping[str, Any] = field(default_factory=dict)
    summary: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Compendium":
        """
        Build a compendium from parsed JSON/YAML data.

        Accepts the camelCase keys of the JSON export as well as snake_case.

        Raises:
            InvalidCompendiumError: If the structure is malformed
        """
        if not isinstance(data, Mapping):
            raise InvalidCompendiumError(
                f"Compendium root must be a mapping, got {type(data).__name__}"
            )
        experience = data.get("experience")
        if not isinstance(experience, list):
            raise InvalidCompendiumError("Compendium must contain an 'experience' list")

        try:
            return cls(
                experience=tuple(Company.from_dict(c) for c in experience),
                role_profiles=tuple(
                    RoleProfile.from_dict(p)
                    for p in (_field(data, "roleProfiles", "role_profiles", default=[]) or [])
                ),
                personal=dict(data.get("personal") or {}),
                summary=data.get("summary"),
            )
        except (TypeError, AttributeError) as e:
            raise InvalidCompendiumError(f"Malformed compendium entry: {e}") from e

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def iter_bullets(self) -> Iterator[BulletEntry]:
        """Yield every bullet in resume order with its ancestry."""
        index = 0
        for company in self.experience:
            for position in company.children:
                for bullet in position.children:
                    yield BulletEntry(company, position, bullet, index)
                    index += 1

    def bullet_ids(self) -> set[str]:
        return {entry.bullet.id for entry in self.iter_bullets()}

    def bullet_hierarchy(self) -> Dict[str, Tuple[str, str]]:
        """Map bullet id -> (company id, position id)."""
        return {
            entry.bullet.id: (entry.company.id, entry.position.id)
            for entry in self.iter_bullets()
        }

    def company_index(self) -> Dict[str, int]:
        """Map company id -> position in resume order."""
        return {company.id: i for i, company in enumerate(self.experience)}

    @property
    def total_bullets(self) -> int:
        return sum(1 for _ in self.iter_bullets())

    def get_role_profile(self, profile_id: str) -> RoleProfile:
        for profile in self.role_profiles:
            if profile.id == profile_id:
                return profile
        available = [p.id for p in self.role_profiles]
        raise KeyError(f"Role profile not found: {profile_id}. Available: {available}")

    def find_duplicate_ids(self) -> List[str]:
        """Ids used by more than one company/position/bullet, in first-seen order."""
        seen = set()
        duplicates = []
        for company in self.experience:
            nodes = [company]
            for position in company.children:
                nodes.append(position)
                nodes.extend(position.children)
            for node in nodes:
                if node.id in seen and node.id not in duplicates:
                    duplicates.append(node.id)
                seen.add(node.id)
        return duplicates
