from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        # clamp to the four-line entry
        return self.line_clear_scores[min(lines, len(self.line_clear_scores)) - 1]
