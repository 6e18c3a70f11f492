from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

MIN_HEADING_DEPTH = 1
MAX_HEADING_DEPTH = 6


def normalize_paths(value: Any) -> Optional[Tuple[str, ...]]:
    """
    Normalize the ``paths`` option into a tuple of page names.

    Accepts a comma separated string, a list/tuple, or a single value.
    ``None`` stays ``None`` so an absent option can still fall back to a
    summary document.
    """
    if value is None:
        return None
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, (list, tuple)):
        candidates = value
    elif isinstance(value, (int, float)):
        candidates = [value]
    else:
        raise ValueError(f"paths must be a string or a list, got {type(value).__name__}")
    return tuple(text for text in (str(item).strip() for item in candidates) if text)


@dataclass(frozen=True)
class TocSearchOptions:
    """Immutable snapshot of the settings one index build runs with."""

    paths: Optional[Tuple[str, ...]] = None
    summary: Optional[str] = None
    min_depth: int = MIN_HEADING_DEPTH
    max_depth: int = MAX_HEADING_DEPTH

    def __post_init__(self):
        object.__setattr__(self, "paths", normalize_paths(self.paths))
        summary = self.summary.strip() if isinstance(self.summary, str) else self.summary
        object.__setattr__(self, "summary", summary or None)
        for key in ("min_depth", "max_depth"):
            depth = getattr(self, key)
            if isinstance(depth, bool) or not isinstance(depth, int):
                raise ValueError(f"{key} must be an integer, got {depth!r}")
            if not MIN_HEADING_DEPTH <= depth <= MAX_HEADING_DEPTH:
                raise ValueError(
                    f"{key} must be between {MIN_HEADING_DEPTH} and {MAX_HEADING_DEPTH}, got {depth}"
                )
        if self.min_depth > self.max_depth:
            raise ValueError(
                f"min_depth ({self.min_depth}) cannot be greater than max_depth ({self.max_depth})"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TocSearchOptions":
        return cls(
            paths=config.get("paths"),
            summary=config.get("summary"),
            min_depth=config.get("min_depth", MIN_HEADING_DEPTH),
            max_depth=config.get("max_depth", MAX_HEADING_DEPTH),
        )

    @property
    def enabled(self) -> bool:
        return self.paths is not None or self.summary is not None
