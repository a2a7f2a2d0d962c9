"""Canonical skill dictionary: the single writer of versioned snapshots.

Every mutation reads the current snapshot, builds a new immutable one and
publishes it under the next ``YYYY.N`` version while holding one lock, so
concurrent writers always observe each other's effects.
"""

import logging
import re
import threading
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from models.schemas import (
    CanonicalSkill,
    DictionaryExport,
    ExportedSkill,
    ImportResult,
    SkillDictionary,
    TechLayer,
    normalize_key,
)
from services.errors import (
    DuplicateSkillError,
    DuplicateVariationError,
    NotFoundError,
    ValidationError,
    VersionConflictError,
)
from services.repositories import DictionaryRepository

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^(\d{4})\.(\d+)$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_version(version: str) -> tuple[int, int]:
    """Split a ``YYYY.N`` version into comparable ``(year, n)``."""
    match = _VERSION_RE.match(version.strip()) if isinstance(version, str) else None
    if not match:
        raise ValidationError(f"Invalid dictionary version '{version}', expected YYYY.N")
    return int(match.group(1)), int(match.group(2))


def next_version(current: str, today: date) -> str:
    """Version published after ``current``: restarts at 1 when the year rolls over."""
    year, n = parse_version(current)
    if today.year > year:
        return f"{today.year}.1"
    return f"{year}.{n + 1}"


class SkillDictionaryService:
    def __init__(
        self,
        repository: DictionaryRepository,
        clock: Callable[[], datetime] = utcnow,
        max_name_length: int = 100,
        initial_skills: Mapping[str, tuple[TechLayer, Sequence[str]]] | None = None,
    ):
        self._repository = repository
        self._clock = clock
        self._max_name_length = max_name_length
        self._lock = threading.RLock()
        if repository.get_current() is None:
            self._publish_initial(initial_skills or {})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def current(self) -> SkillDictionary:
        snapshot = self._repository.get_current()
        if snapshot is None:
            raise NotFoundError("Dictionary", "current")
        return snapshot

    def get_version(self, version: str) -> SkillDictionary:
        snapshot = self._repository.get_version(version)
        if snapshot is None:
            raise NotFoundError("Dictionary version", version)
        return snapshot

    def list_versions(self) -> list[str]:
        return sorted(self._repository.list_versions(), key=parse_version)

    def list_skills(self, category: TechLayer | str | None = None) -> list[CanonicalSkill]:
        snapshot = self.current()
        if category is None:
            return list(snapshot.skills)
        return snapshot.skills_in(self._validate_category(category))

    def get_variations(self, name: str) -> list[str]:
        skill = self.current().get_skill(name)
        if skill is None:
            raise NotFoundError("Canonical skill", name)
        return list(skill.variations)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_canonical_skill(self, name: str, category: TechLayer | str) -> SkillDictionary:
        name = self._validate_name(name, "Skill name")
        category = self._validate_category(category)
        with self._lock:
            current = self.current()
            if current.has_term(name):
                raise DuplicateSkillError(name)
            skill = CanonicalSkill(name=name, category=category, created_at=self._clock())
            snapshot = self._publish(current, current.skills + (skill,))
        logger.info("Added canonical skill '%s' (%s) -> v%s", name, category.value, snapshot.version)
        return snapshot

    def remove_canonical_skill(self, name: str) -> SkillDictionary:
        with self._lock:
            current = self.current()
            skill = current.get_skill(name)
            if skill is None:
                raise NotFoundError("Canonical skill", name)
            remaining = tuple(s for s in current.skills if s.key != skill.key)
            snapshot = self._publish(current, remaining)
        logger.info("Removed canonical skill '%s' -> v%s", skill.name, snapshot.version)
        return snapshot

    def add_variation(self, variation: str, canonical_name: str) -> SkillDictionary:
        variation = self._validate_name(variation, "Variation")
        with self._lock:
            current = self.current()
            target = current.get_skill(canonical_name)
            if target is None:
                raise NotFoundError("Canonical skill", canonical_name)
            existing = current.lookup(variation)
            if existing is not None:
                raise DuplicateVariationError(variation, existing.name)
            updated = target.model_copy(update={"variations": target.variations + (variation,)})
            snapshot = self._publish(current, _replace_skill(current.skills, target, updated))
        logger.info("Linked variation '%s' -> '%s' (v%s)", variation, target.name, snapshot.version)
        return snapshot

    def update_canonical_skill(
        self,
        name: str,
        new_name: str | None = None,
        category: TechLayer | str | None = None,
    ) -> SkillDictionary:
        """Rename and/or recategorize a canonical skill, keeping its variations."""
        if new_name is None and category is None:
            raise ValidationError("Nothing to update: provide new_name and/or category")
        if new_name is not None:
            new_name = self._validate_name(new_name, "Skill name")
        if category is not None:
            category = self._validate_category(category)

        with self._lock:
            current = self.current()
            skill = current.get_skill(name)
            if skill is None:
                raise NotFoundError("Canonical skill", name)

            variations = skill.variations
            if new_name is not None and normalize_key(new_name) != skill.key:
                owner = current.lookup(new_name)
                if owner is not None and owner.key != skill.key:
                    raise DuplicateSkillError(new_name)
                # promoting one of its own variations to the canonical name
                variations = tuple(v for v in variations if normalize_key(v) != normalize_key(new_name))

            updated = skill.model_copy(update={
                "name": new_name if new_name is not None else skill.name,
                "category": category if category is not None else skill.category,
                "variations": variations,
            })
            if updated == skill:
                return current
            snapshot = self._publish(current, _replace_skill(current.skills, skill, updated))
        logger.info(
            "Updated canonical skill '%s' -> '%s' (%s), v%s",
            skill.name, updated.name, updated.category.value, snapshot.version,
        )
        return snapshot

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_version(self, version: str | None = None) -> DictionaryExport:
        snapshot = self.current() if version is None else self.get_version(version)
        return DictionaryExport(
            version=snapshot.version,
            created_at=snapshot.created_at,
            updated_at=snapshot.updated_at,
            exported_at=self._clock(),
            skills=[
                ExportedSkill(
                    name=s.name,
                    category=s.category,
                    variations=list(s.variations),
                    created_at=s.created_at,
                )
                for s in snapshot.skills
            ],
        )

    def import_version(
        self,
        data: DictionaryExport | Mapping,
        mode: str = "merge",
        allow_older_version: bool = False,
    ) -> ImportResult:
        if mode not in ("replace", "merge"):
            raise ValidationError(f"Unknown import mode '{mode}', expected 'replace' or 'merge'")
        if isinstance(data, DictionaryExport):
            document = data
        else:
            try:
                document = DictionaryExport.model_validate(data)
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"Malformed dictionary export ({exc.error_count()} errors)"
                ) from exc
        imported = parse_version(document.version)

        with self._lock:
            current = self.current()
            if imported < parse_version(current.version) and not allow_older_version:
                raise VersionConflictError(document.version, current.version)
            if mode == "replace":
                return self._import_replace(current, document)
            return self._import_merge(current, document)

    def _import_replace(self, current: SkillDictionary, document: DictionaryExport) -> ImportResult:
        now = self._clock()
        skills: list[CanonicalSkill] = []
        seen: dict[str, str] = {}
        variation_count = 0
        for item in document.skills:
            name = self._validate_name(item.name, "Skill name")
            if normalize_key(name) in seen:
                raise ValidationError(
                    f"Imported skill '{name}' collides with '{seen[normalize_key(name)]}'"
                )
            seen[normalize_key(name)] = name
            variations = []
            for raw in item.variations:
                variation = self._validate_name(raw, "Variation")
                if seen.get(normalize_key(variation)) == name:
                    continue
                if normalize_key(variation) in seen:
                    raise ValidationError(
                        f"Imported variation '{variation}' collides with '{seen[normalize_key(variation)]}'"
                    )
                seen[normalize_key(variation)] = name
                variations.append(variation)
            variation_count += len(variations)
            skills.append(CanonicalSkill(
                name=name,
                category=item.category,
                variations=tuple(variations),
                created_at=item.created_at or now,
            ))

        # Keep published versions monotonic even when an older export is forced in.
        if parse_version(document.version) > parse_version(current.version):
            version = document.version
        else:
            version = next_version(current.version, now.date())
        snapshot = SkillDictionary(
            version=version,
            skills=tuple(skills),
            created_at=document.created_at or now,
            updated_at=now,
        )
        self._repository.publish(snapshot)
        logger.info(
            "Replaced dictionary v%s with import v%s (%d skills) -> v%s",
            current.version, document.version, len(skills), snapshot.version,
        )
        return ImportResult(
            mode="replace",
            previous_version=current.version,
            version=snapshot.version,
            skills_added=len(skills),
            variations_added=variation_count,
        )

    def _import_merge(self, current: SkillDictionary, document: DictionaryExport) -> ImportResult:
        now = self._clock()
        skills: dict[str, CanonicalSkill] = {s.key: s for s in current.skills}
        owners: dict[str, str] = {}  # term key -> canonical key
        for skill in current.skills:
            owners[skill.key] = skill.key
            for variation in skill.variations:
                owners.setdefault(normalize_key(variation), skill.key)

        skills_added = 0
        variations_added = 0
        conflicts: list[str] = []

        for item in document.skills:
            try:
                name = self._validate_name(item.name, "Skill name")
            except ValidationError as exc:
                conflicts.append(str(exc))
                continue
            key = normalize_key(name)
            owner = owners.get(key)
            if owner is None:
                skills[key] = CanonicalSkill(
                    name=name, category=item.category, created_at=item.created_at or now,
                )
                owners[key] = key
                skills_added += 1
            elif owner != key:
                conflicts.append(f"'{name}' is already a variation of '{skills[owner].name}'")
                continue
            elif skills[key].category != item.category:
                conflicts.append(
                    f"'{name}' is '{skills[key].category.value}' locally but "
                    f"'{item.category.value}' in the import"
                )
                continue

            for raw in item.variations:
                try:
                    variation = self._validate_name(raw, "Variation")
                except ValidationError as exc:
                    conflicts.append(str(exc))
                    continue
                v_owner = owners.get(normalize_key(variation))
                if v_owner == key:
                    continue
                if v_owner is not None:
                    conflicts.append(
                        f"Variation '{variation}' of '{name}' already resolves to '{skills[v_owner].name}'"
                    )
                    continue
                skills[key] = skills[key].model_copy(
                    update={"variations": skills[key].variations + (variation,)}
                )
                owners[normalize_key(variation)] = key
                variations_added += 1

        for conflict in conflicts:
            logger.warning("Dictionary import conflict: %s", conflict)

        version = current.version
        if skills_added or variations_added:
            snapshot = self._publish(current, tuple(skills.values()))
            version = snapshot.version
        logger.info(
            "Merged import v%s into v%s: %d skills, %d variations added, %d conflicts -> v%s",
            document.version, current.version, skills_added, variations_added, len(conflicts), version,
        )
        return ImportResult(
            mode="merge",
            previous_version=current.version,
            version=version,
            skills_added=skills_added,
            variations_added=variations_added,
            conflicts=conflicts,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _publish(self, current: SkillDictionary, skills: tuple[CanonicalSkill, ...]) -> SkillDictionary:
        now = self._clock()
        snapshot = SkillDictionary(
            version=next_version(current.version, now.date()),
            skills=skills,
            created_at=current.created_at,
            updated_at=now,
        )
        self._repository.publish(snapshot)
        return snapshot

    def _publish_initial(self, initial_skills: Mapping[str, tuple[TechLayer, Sequence[str]]]) -> None:
        now = self._clock()
        skills = tuple(
            CanonicalSkill(name=name, category=category, variations=tuple(variations), created_at=now)
            for name, (category, variations) in initial_skills.items()
        )
        self._repository.publish(
            SkillDictionary(version=f"{now.year}.1", skills=skills, created_at=now, updated_at=now)
        )
        logger.info("Initialized skill dictionary v%s.1 with %d skills", now.year, len(skills))

    def _validate_name(self, text: str, label: str) -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(f"{label} must not be blank")
        text = text.strip()
        if len(text) > self._max_name_length:
            raise ValidationError(f"{label} exceeds {self._max_name_length} characters")
        return text

    @staticmethod
    def _validate_category(category: TechLayer | str) -> TechLayer:
        try:
            return TechLayer(category)
        except ValueError as exc:
            raise ValidationError(f"Unknown layer '{category}'") from exc


def _replace_skill(
    skills: tuple[CanonicalSkill, ...], old: CanonicalSkill, new: CanonicalSkill
) -> tuple[CanonicalSkill, ...]:
    return tuple(new if s.key == old.key else s for s in skills)
