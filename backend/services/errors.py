"""Domain errors raised by the skill matching services.

The HTTP layer maps these onto status codes in main.py; services never
catch and retry them.
"""


class SkillEngineError(Exception):
    """Base class for every error the engine raises on purpose."""


class ValidationError(SkillEngineError, ValueError):
    """Input failed shape or range validation."""


class WeightSumError(ValidationError):
    """A set of weights does not sum to 1.0 within tolerance."""

    def __init__(self, message: str, total: float):
        super().__init__(message)
        self.total = total


class LayerWeightSumError(WeightSumError):
    pass


class SkillWeightSumError(WeightSumError):
    def __init__(self, message: str, total: float, layer: str):
        super().__init__(message, total)
        self.layer = layer


class EmptyLayerError(ValidationError):
    """A layer carries weight but lists no skills."""

    def __init__(self, layer: str):
        super().__init__(f"Layer '{layer}' has a positive weight but no skills")
        self.layer = layer


class DuplicateSkillError(SkillEngineError):
    def __init__(self, name: str):
        super().__init__(f"Skill '{name}' already exists in the dictionary")
        self.name = name


class DuplicateVariationError(SkillEngineError):
    def __init__(self, variation: str, existing: str):
        super().__init__(f"'{variation}' already resolves to '{existing}'")
        self.variation = variation
        self.existing = existing


class NotFoundError(SkillEngineError, LookupError):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' not found")
        self.kind = kind
        self.key = key


class VersionConflictError(SkillEngineError):
    def __init__(self, imported: str, current: str):
        super().__init__(
            f"Imported dictionary version {imported} is older than current version {current}"
        )
        self.imported = imported
        self.current = current
