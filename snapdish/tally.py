"""Vote aggregation for the results screen."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from snapdish.models import Vote


@dataclass
class Tally:
    counts: Dict[str, int] = field(default_factory=dict)
    ranking: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def winner_id(self) -> Optional[str]:
        if not self.ranking:
            return None
        return self.ranking[0][0]

    def votes_for(self, recipe_id: str) -> int:
        return self.counts.get(recipe_id, 0)


def tally_votes(votes: Iterable[Vote]) -> Tally:
    """Count "right" votes per recipe.

    Only approvals are counted; "left" votes never create an entry. The
    ranking is ordered by count, highest first, and recipes with equal
    counts keep the order in which they first appear in ``votes``.
    """
    counts: Dict[str, int] = {}
    for vote in votes:
        if not vote.is_approval:
            continue
        counts[vote.recipe_id] = counts.get(vote.recipe_id, 0) + 1
    ranking = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return Tally(counts=counts, ranking=ranking)
