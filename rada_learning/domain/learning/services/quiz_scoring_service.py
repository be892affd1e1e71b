"""
Domain service for quiz scoring arithmetic.

This is a pure domain service with no infrastructure dependencies.
"""

from collections.abc import Mapping, Sequence

from rada_learning.domain.common.exceptions import ValidationError


def round_half_up_percent(correct: int, total: int) -> int:
    """
    Return round(100 * correct / total) with halves rounded up.

    Integer arithmetic keeps the result exact: floor(100c/t + 1/2) equals
    floor((200c + t) / 2t).
    """
    if total <= 0:
        raise ValidationError("Cannot score a quiz without questions", field="total")
    if not 0 <= correct <= total:
        raise ValidationError("Correct answers must be within 0..total", field="correct")
    return (200 * correct + total) // (2 * total)


class QuizScoringService:
    """Counts correct answers and converts them to a percentage."""

    def count_correct(
        self,
        answer_key: Mapping[int, int],
        answers: Mapping[int, int],
    ) -> int:
        """
        Count answers matching the key.

        Args:
            answer_key: question id -> correct option index
            answers: question id -> chosen option index (unanswered ids are wrong)
        """
        return sum(
            1
            for question_id, correct_index in answer_key.items()
            if answers.get(question_id) == correct_index
        )

    def score_percent(self, answer_key: Mapping[int, int], answers: Mapping[int, int]) -> int:
        """Deterministic score: the same answers always produce the same percentage."""
        return round_half_up_percent(self.count_correct(answer_key, answers), len(answer_key))

    def is_passing(self, score_percent: int, passing_score_percent: int) -> bool:
        return score_percent >= passing_score_percent

    def tier_xp(self, tiers: Sequence[tuple[int, int]], score_percent: int) -> int:
        """
        Look up the XP of the first tier whose min_score <= score_percent.

        Tiers must be ordered by min_score descending; the boundary is
        inclusive, and a score below every tier earns nothing.
        """
        for min_score, xp in tiers:
            if score_percent >= min_score:
                return xp
        return 0
