"""Scoring weights loaded from the packaged YAML template."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from larder.errors import ConfigurationError

logger = logging.getLogger(__name__)

SCORING_RESOURCE = "scoring.yaml"


@dataclass(frozen=True)
class FrequencyTier:
    min_count: int
    penalty: float


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights for the additive suggestion score.

    Factor impact is strictly ordered: meal-type fit, then each matching
    filter tag, then variety, then a search match.
    """

    base_score: float = 100.0
    meal_type_bonus: float = 100.0
    tag_match_bonus: float = 25.0
    variety_bonus: float = 10.0
    search_bonus: float = 5.0
    recency_window_days: int = 7
    recency_penalty: float = 8.0
    variety_window_days: int = 14
    long_absence_days: int = 30
    frequency_penalties: tuple[FrequencyTier, ...] = (
        FrequencyTier(min_count=1, penalty=2.0),
        FrequencyTier(min_count=3, penalty=4.0),
        FrequencyTier(min_count=5, penalty=6.0),
    )

    def __post_init__(self) -> None:
        if not (self.meal_type_bonus > self.tag_match_bonus > self.variety_bonus > self.search_bonus > 0):
            raise ConfigurationError(
                "Scoring weights must satisfy meal_type_bonus > tag_match_bonus > variety_bonus > search_bonus > 0"
            )
        if self.recency_penalty < 0 or any(t.penalty < 0 for t in self.frequency_penalties):
            raise ConfigurationError("Penalties must be non-negative")
        if self.recency_window_days > self.variety_window_days:
            raise ConfigurationError("recency_window_days cannot exceed variety_window_days")
        if self.max_variety_swing >= self.tag_match_bonus:
            raise ConfigurationError(
                f"Variety swing {self.max_variety_swing:g} (variety_bonus + recency_penalty + top frequency "
                f"penalty) must stay below tag_match_bonus {self.tag_match_bonus:g}"
            )

    @property
    def max_variety_swing(self) -> float:
        """Distance between the best and the worst variety adjustment."""
        top_penalty = max((t.penalty for t in self.frequency_penalties), default=0.0)
        return self.variety_bonus + self.recency_penalty + top_penalty

    def frequency_penalty(self, plan_count: int) -> float:
        penalty = 0.0
        for tier in sorted(self.frequency_penalties, key=lambda t: t.min_count):
            if plan_count >= tier.min_count:
                penalty = tier.penalty
        return penalty


def _load_yaml(path: Path | None, resource_name: str) -> dict[str, Any]:
    if path:
        file_path = path / resource_name
        if not file_path.exists():
            return {}
        with file_path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    try:
        resource = resources.files("larder.templates").joinpath(resource_name)
        with resource.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}


def load_scoring_weights(templates_path: str | Path | None = None) -> ScoringWeights:
    """
    Load scoring weights.

    Args:
        templates_path: Directory holding a replacement scoring.yaml. When
            omitted, the packaged template is used. Keys missing from the file
            keep their defaults.

    Returns:
        Validated ScoringWeights

    Raises:
        ConfigurationError: If the file is malformed or the weights are inconsistent
    """
    base_path = Path(templates_path) if templates_path else None
    source = str(base_path / SCORING_RESOURCE) if base_path else f"larder.templates/{SCORING_RESOURCE}"
    try:
        data = _load_yaml(base_path, SCORING_RESOURCE)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML: {exc}", source) from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Scoring configuration must be a mapping", source)

    known = {f.name for f in fields(ScoringWeights)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown scoring keys in {source}: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    try:
        for name in known - {"frequency_penalties"}:
            if name in data:
                value = data[name]
                kwargs[name] = int(value) if name.endswith("_days") else float(value)
        if "frequency_penalties" in data:
            kwargs["frequency_penalties"] = tuple(
                FrequencyTier(min_count=int(entry["min_count"]), penalty=float(entry["penalty"]))
                for entry in data["frequency_penalties"] or []
            )
    except (TypeError, ValueError, KeyError) as exc:
        raise ConfigurationError(f"Invalid scoring value: {exc}", source) from exc

    try:
        return ScoringWeights(**kwargs)
    except ConfigurationError as exc:
        raise ConfigurationError(str(exc), source) from exc
