import pytest
from pydantic import ValidationError

from app_types import TOO_SHORT_WARNING, EssayScore
from config import ScoringConfig
from errors import ModelUnavailable, ScoringFailure
from feedback import COHERENCE_FEEDBACK, GRAMMAR_FEEDBACK, STRUCTURE_FEEDBACK
from score import (
    EssayScorer,
    aggregate_scores,
    ainitialize_model,
    ascore_essay,
    initialize_model,
    score_essay,
)


class TestAggregateScores:
    def test_weighted_overall_and_feedback(self):
        result = aggregate_scores(0.9, 0.7, 0.5)
        assert result.overall == pytest.approx(0.72)
        assert result.feedback == " ".join(
            [COHERENCE_FEEDBACK.strong, GRAMMAR_FEEDBACK.medium, STRUCTURE_FEEDBACK.weak],
        )

    def test_values_are_rounded(self):
        result = aggregate_scores(0.66666, 0.12345, 0.98765)
        assert result.coherence == 0.67
        assert result.grammar == 0.12
        assert result.structure == 0.99

    def test_exact_ties_round_up(self):
        result = aggregate_scores(0.5, 0.625, 0.125)
        assert result.grammar == 0.63
        assert result.structure == 0.13

    def test_feedback_uses_unrounded_values(self):
        result = aggregate_scores(0.799, 1.0, 1.0)
        assert result.coherence == 0.8
        assert COHERENCE_FEEDBACK.medium in result.feedback

    def test_record_is_immutable(self):
        result = aggregate_scores(0.5, 0.5, 0.5)
        with pytest.raises(ValidationError):
            result.overall = 1.0  # type: ignore[misc]

    def test_percentages_and_bands(self):
        result = aggregate_scores(0.85, 0.65, 0.45)
        assert result.as_percentages() == {"overall": 67, "coherence": 85, "grammar": 65, "structure": 45}
        assert result.bands() == {"overall": "good", "coherence": "excellent", "grammar": "good", "structure": "fair"}

    def test_percentages_round_ties_up(self):
        record = EssayScore(overall=0.5, coherence=0.125, grammar=0.625, structure=0.5, feedback="")
        assert record.as_percentages() == {"overall": 50, "coherence": 13, "grammar": 63, "structure": 50}


class TestEssayScorer:
    def test_single_sentence_has_zero_coherence(self, scorer: EssayScorer):
        assert scorer.score("Short.").coherence == 0.0

    def test_short_essay_has_half_structure(self, scorer: EssayScorer):
        assert scorer.score("One paragraph. Two sentences.").structure == 0.5

    def test_overall_is_weighted_sum(self, scorer: EssayScorer, well_formed_essay: str):
        result = scorer.score(well_formed_essay)
        expected = 0.4 * result.coherence + 0.3 * result.grammar + 0.3 * result.structure
        assert result.overall == pytest.approx(expected, abs=0.011)
        assert result.structure == pytest.approx(1.0)

    def test_scoring_is_idempotent(self, scorer: EssayScorer, well_formed_essay: str):
        assert scorer.score(well_formed_essay) == scorer.score(well_formed_essay)

    def test_grammar_issues_lower_the_score(self, scorer: EssayScorer):
        assert scorer.score("I dont like this.  It has  issues.").grammar < 1.0

    def test_grammar_tie_rounds_up(self, scorer: EssayScorer):
        # 3 issues in 80 words: 1 - 3 / 8 = 0.625
        words = ["dont"] * 3 + ["word"] * 77
        text = " ".join(" ".join(words[start : start + 20]) + "." for start in range(0, 80, 20))
        assert scorer.score(text).grammar == 0.63

    def test_empty_text(self, scorer: EssayScorer):
        result = scorer.score("")
        assert result.coherence == 0.0
        assert result.grammar == 1.0
        assert result.structure == 0.5
        assert result.overall == pytest.approx(0.45)

    def test_short_text_gets_advisory_warning(self, scorer: EssayScorer, well_formed_essay: str):
        assert scorer.score("Too short to judge.").warnings == (TOO_SHORT_WARNING,)
        assert scorer.score(well_formed_essay).warnings == ()

    def test_uses_injected_config(self, loaded_service):
        config = ScoringConfig(coherence_weight=0.0, grammar_weight=1.0, structure_weight=0.0)
        result = EssayScorer(loaded_service, config).score("The plan worked well.")
        assert result.overall == result.grammar == 1.0

    def test_requires_loaded_model(self, unloaded_service, fake_encoder):
        with pytest.raises(ModelUnavailable):
            EssayScorer(unloaded_service).score("Short.")
        assert unloaded_service.load_count == 0
        assert fake_encoder.encode_calls == []

    def test_rejects_non_string_input(self, scorer: EssayScorer):
        with pytest.raises(ScoringFailure):
            scorer.score(42)  # type: ignore[arg-type]

    def test_unexpected_errors_become_scoring_failure(self, scorer: EssayScorer, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("regex engine exploded")

        monkeypatch.setattr("score.score_grammar", broken)
        with pytest.raises(ScoringFailure) as exc_info:
            scorer.score("Some text. More text.")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_ascore_matches_score(self, scorer: EssayScorer, well_formed_essay: str):
        assert await scorer.ascore(well_formed_essay) == scorer.score(well_formed_essay)


class TestEntryPoints:
    def test_initialize_then_score(self, unloaded_service):
        initialize_model(unloaded_service)
        initialize_model(unloaded_service)
        result = score_essay("The cat sat on the mat. The feline rested on the rug.", service=unloaded_service)
        assert isinstance(result, EssayScore)
        assert unloaded_service.load_count == 1

    def test_related_sentences_score_higher(self, loaded_service):
        related = score_essay("The cat sat on the mat. The feline rested on the rug.", service=loaded_service)
        unrelated = score_essay("The cat sat on the mat. Stock markets fell sharply today.", service=loaded_service)
        assert related.coherence > unrelated.coherence

    @pytest.mark.asyncio
    async def test_async_entry_points(self, unloaded_service):
        await ainitialize_model(unloaded_service)
        result = await ascore_essay("Short.", service=unloaded_service)
        assert result.coherence == 0.0
