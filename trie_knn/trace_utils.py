from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


# Simple alias for trace events
Event = Dict[str, Any]


@dataclass
class Trace:
    enabled: bool = True
    features: Optional[List[Any]] = None
    events: List[Event] = field(default_factory=list)

    def set_features(self, features: Sequence[Any]) -> None:
        if self.enabled:
            self.features = list(features)

    def add(self, event: Event) -> None:
        if self.enabled:
            self.events.append(event)

    def actions(self) -> List[str]:
        return [str(ev.get("action")) for ev in self.events]


ICONS = {
    "keep": "✓",
    "skip": "·",
    "evict": "×",
    "vote": "★",
}

DASH = "—"


def _fmt_tally(tally: Optional[Dict[Any, int]]) -> str:
    if not tally:
        return DASH
    return ",".join(f"{label}:{count}" for label, count in sorted(tally.items()))


def build_vote_table(events: List[Event]) -> Dict[str, List[str]]:
    """
    Build a column-aligned table with one column per scored candidate, in the
    order the comparator produced them.

    Returns a dict with equal-length lists:
      - "candidate": running candidate number (1-based)
      - "score":     score of the candidate
      - "action":    icon per column (✓ kept, · skipped, × kept then evicted)
      - "tally":     label counts stored with the candidate
      - "reason":    short reason labels
    A final "★" column summarises the vote when a VOTE event is present.
    """
    candidate: List[str] = []
    score: List[str] = []
    action: List[str] = []
    tally: List[str] = []
    reason: List[str] = []

    # CANDIDATE events carry an `index`; KEEP/SKIP/EVICT refer back to it
    col_of: Dict[int, int] = {}
    for ev in events:
        a = ev.get("action")
        if a == "CANDIDATE":
            idx = int(ev["index"])
            col_of[idx] = len(candidate)
            candidate.append(str(idx + 1))
            score.append(str(ev.get("score")))
            action.append(ICONS["skip"])
            tally.append(_fmt_tally(ev.get("tally")))
            reason.append("")
        elif a == "KEEP":
            j = col_of[int(ev["index"])]
            action[j] = ICONS["keep"]
            reason[j] = "best" if ev.get("mode") == "best" else "k-best"
        elif a == "SKIP":
            j = col_of[int(ev["index"])]
            action[j] = ICONS["skip"]
            held = ev.get("held_score")
            reason[j] = f"≤ {held}" if held is not None else "skip"
        elif a == "EVICT":
            j = col_of[int(ev["index"])]
            action[j] = ICONS["evict"]
            by = ev.get("by_index")
            reason[j] = f"evicted by {int(by) + 1}" if by is not None else "evicted"
        elif a == "REPLACED":
            j = col_of[int(ev["index"])]
            action[j] = ICONS["evict"]
            reason[j] = "replaced"

    for ev in events:
        if ev.get("action") == "VOTE":
            candidate.append(ICONS["vote"])
            score.append(DASH)
            action.append(ICONS["vote"])
            tally.append(_fmt_tally(ev.get("tally")))
            reason.append(f"label={ev.get('label')}")
            break  # only one vote per classification

    return {
        "candidate": candidate,
        "score": score,
        "action": action,
        "tally": tally,
        "reason": reason,
    }


def render_vote_text(table: Dict[str, List[str]]) -> str:
    rows = [
        ("Candidate:", table["candidate"]),
        ("Score:", table["score"]),
        ("Action:", table["action"]),
        ("Tally:", table["tally"]),
        ("Reason:", table["reason"]),
    ]

    cols = len(table["candidate"])
    widths = [0] * cols
    for _, values in rows:
        for i, v in enumerate(values):
            widths[i] = max(widths[i], len(str(v)))

    lines: List[str] = []
    for label, values in rows:
        parts = [label.ljust(11)]
        for i, v in enumerate(values):
            parts.append(str(v).rjust(widths[i] + 2))
        lines.append("".join(parts))
    return "\n".join(lines)
