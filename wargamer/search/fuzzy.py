"""wargamer.search.fuzzy

Approximate name matching over catalog listings, backed by rapidfuzz.

Scores run from 0.0 (perfect) to 1.0 (unrelated). Lower is better.

rapidfuzz reports similarity on a 0..100 scale; ``score = 1 - similarity / 100``.
Text is normalized with ``utils.default_process`` (lower-cased, punctuation to
spaces) on both sides. The default scorer is ``fuzz.WRatio``, which blends whole
string, partial and token-set matching, so "tiger" finds "Tiger I" and typos
still land.

Ties keep listing order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from rapidfuzz import fuzz, process, utils

DEFAULT_THRESHOLD = 0.4

Scorer = Callable[..., float]


def similarity_to_score(similarity: float) -> float:
    """Map a rapidfuzz similarity (0..100, higher is better) to a 0..1 score (lower is better)."""

    return min(1.0, max(0.0, 1.0 - similarity / 100.0))


def _prepare(value: Any) -> str | None:
    if value is None:
        return None
    text = utils.default_process(str(value))
    return text or None


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    record: Mapping[str, Any]
    score: float
    position: int
    field: str


class FuzzyIndex:
    """Search structure over a snapshot of labeled records.

    Rebuilding replaces everything; there are no incremental updates.

    Args:
        records: Listing rows, in listing order.
        keys: Fields searched on every row. A row's score is its best field score.
        threshold: Highest score still counted as a match.
        scorer: Any rapidfuzz scorer.
    """

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]] = (),
        *,
        keys: Sequence[str],
        threshold: float = DEFAULT_THRESHOLD,
        scorer: Scorer = fuzz.WRatio,
    ) -> None:
        if not keys:
            raise ValueError("FuzzyIndex needs at least one searchable key")
        self.keys = tuple(keys)
        self.threshold = float(threshold)
        self.scorer = scorer
        self._records: list[Mapping[str, Any]] = []
        self._choices: dict[str, list[str | None]] = {key: [] for key in self.keys}
        self.rebuild(records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[Mapping[str, Any]]:
        return list(self._records)

    def rebuild(self, records: Iterable[Mapping[str, Any]]) -> FuzzyIndex:
        new_records = [record for record in records if isinstance(record, Mapping)]
        # choices are positional: index i in every list is record i
        self._choices = {key: [_prepare(record.get(key)) for record in new_records] for key in self.keys}
        self._records = new_records
        return self

    def search(self, query: str, limit: int | None = None) -> list[FuzzyMatch]:
        processed = utils.default_process(query)
        if not processed:
            return []

        cutoff = 100.0 * (1.0 - self.threshold)
        best: dict[int, tuple[float, str]] = {}
        for key in self.keys:
            hits = process.extract(
                processed,
                self._choices[key],
                scorer=self.scorer,
                processor=None,
                limit=None,
                score_cutoff=cutoff,
            )
            for _choice, similarity, position in hits:
                score = similarity_to_score(similarity)
                current = best.get(position)
                if current is None or score < current[0]:
                    best[position] = (score, key)

        matches = [
            FuzzyMatch(record=self._records[position], score=score, position=position, field=key)
            for position, (score, key) in best.items()
        ]
        matches.sort(key=lambda m: (m.score, m.position))
        if limit is not None:
            return matches[:limit]
        return matches

    def best(self, query: str) -> FuzzyMatch | None:
        found = self.search(query, limit=1)
        return found[0] if found else None
