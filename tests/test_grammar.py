import pytest

from config import ScoringConfig
from grammar import analyze_grammar, find_grammar_issues, long_sentence_penalty, score_grammar


class TestFindGrammarIssues:
    def test_detects_missing_apostrophe_and_double_spaces(self):
        issues = find_grammar_issues("I dont like this.  It has  issues.")
        assert issues["missing_apostrophe"] == 1
        assert issues["multiple_spaces"] == 2
        assert sum(issues.values()) == 3

    def test_detects_spacing_and_lowercase_pronoun(self):
        issues = find_grammar_issues("i think its fine , really .")
        assert issues["lowercase_i"] == 1
        assert issues["its_it_s"] == 1
        assert issues["space_before_comma"] == 1
        assert issues["space_before_period"] == 1

    def test_uppercase_pronoun_is_not_an_issue(self):
        assert find_grammar_issues("I agree.")["lowercase_i"] == 0

    def test_confused_words_count_correct_usage_too(self):
        issues = find_grammar_issues("Their house is over there. Your idea is good.")
        assert issues["their_there_theyre"] == 2
        assert issues["your_youre"] == 1

    def test_missing_apostrophe_is_case_insensitive(self):
        assert find_grammar_issues("Dont. CANT. wont.")["missing_apostrophe"] == 3

    def test_accented_letters_do_not_join_words(self):
        assert find_grammar_issues("éi")["lowercase_i"] == 1
        assert find_grammar_issues("cafédont")["missing_apostrophe"] == 1


class TestLongSentencePenalty:
    @pytest.mark.parametrize(
        ("avg", "expected"),
        [(0.0, 0), (25.0, 0), (29.9, 0), (30.0, 1), (40.0, 3), (44.9, 3)],
    )
    def test_penalty_steps(self, avg: float, expected: int):
        assert long_sentence_penalty(avg) == expected


class TestAnalyzeGrammar:
    def test_issue_count_is_reproducible(self):
        text = "I dont like this.  It has  issues."
        first = analyze_grammar(text)
        second = analyze_grammar(text)
        assert first.issue_count == second.issue_count == 3
        assert first.word_count == 7
        assert first.sentence_count == 2
        assert first.score < 1.0

    def test_rate_is_capped(self):
        report = analyze_grammar("I dont like this.  It has  issues.")
        assert report.issue_rate == 1.0
        assert report.score == 0.0

    def test_clean_text_scores_one(self):
        assert score_grammar("The results were clear. Everyone agreed with the plan.") == 1.0

    def test_long_sentences_are_penalized(self):
        text = " ".join(["word"] * 40) + "."
        report = analyze_grammar(text)
        assert report.long_sentence_penalty == 3
        assert report.issue_count == 3
        assert report.score == pytest.approx(0.25)

    def test_empty_text_scores_one(self):
        report = analyze_grammar("")
        assert report.word_count == 0
        assert report.issue_count == 0
        assert report.score == 1.0

    def test_whitespace_only_text_with_issue_scores_zero(self):
        assert score_grammar("     ") == 0.0

    def test_uses_configured_density(self):
        text = "i went home after the long and tiring day at work."
        default = score_grammar(text)
        lenient = score_grammar(text, ScoringConfig(issue_density=0.5))
        assert lenient > default

    @pytest.mark.parametrize(
        "text",
        ["", "x", "dont dont dont", "Word , word .  word", "A sentence. " * 50, "no terminators at all " * 40],
    )
    def test_score_stays_in_unit_interval(self, text: str):
        assert 0.0 <= score_grammar(text) <= 1.0
