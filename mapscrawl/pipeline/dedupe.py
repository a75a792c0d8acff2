from __future__ import annotations

from typing import List, Tuple

from ..schemas import BusinessCandidate


def dedupe_key(candidate: BusinessCandidate) -> Tuple[str, str]:
    return (candidate.name.lower(), (candidate.address or "").lower())


def dedupe_candidates(candidates: List[BusinessCandidate]) -> List[BusinessCandidate]:
    """Keep the first candidate per case-insensitive (name, address).

    Only exact string equality after lower-casing collapses records;
    differently formatted addresses stay separate. Returns a new list.
    """
    seen = set()
    kept: List[BusinessCandidate] = []
    for c in candidates:
        key = dedupe_key(c)
        if key in seen:
            continue
        seen.add(key)
        kept.append(c)
    removed = len(candidates) - len(kept)
    if removed > 0:
        print(f"🧹 Dedupe: kept {len(kept)} of {len(candidates)}")
    return kept
