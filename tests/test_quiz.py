from __future__ import annotations

import pytest

from skillalign.catalog import load_domains, load_quiz_banks
from skillalign.quiz import QuizError, QuizSession, apply_quiz_level, questions_for_skill, score_to_level


def _answer_all(quiz: QuizSession, choices) -> QuizSession:
    for choice in choices:
        quiz = quiz.answer(choice)
    return quiz


def test_score_to_level_mapping():
    assert [score_to_level(s) for s in range(6)] == [0, 1, 1, 2, 3, 4]


def test_score_to_level_is_monotonic_and_saturates():
    levels = [score_to_level(s) for s in range(-2, 9)]
    assert levels == sorted(levels)
    assert score_to_level(-3) == 0
    assert score_to_level(12) == 4


def test_specific_bank_is_used_when_present():
    questions = questions_for_skill("python", load_quiz_banks())
    assert len(questions) == 5
    assert questions[0].id == "py1"
    assert questions[4].correct_option_index == 0


def test_generic_bank_substitutes_skill_label():
    questions = questions_for_skill("react-native", load_quiz_banks())
    assert len(questions) == 5
    assert all("{skill}" not in q.text for q in questions)
    assert "react native" in questions[0].text


def test_four_correct_answers_give_advanced():
    quiz = QuizSession.start(questions_for_skill("docker", load_quiz_banks()))
    assert quiz.current_index == 0
    quiz = _answer_all(quiz, [1, 1, 1, 1, 0])
    assert quiz.complete
    assert quiz.current_question is None
    assert quiz.score == 4
    assert quiz.level == 3


def test_answers_follow_each_question_key():
    questions = questions_for_skill("react", load_quiz_banks())
    quiz = _answer_all(QuizSession.start(questions), [q.correct_option_index for q in questions])
    assert quiz.score == 5
    assert quiz.level == 4


def test_skip_counts_unanswered_as_wrong():
    quiz = QuizSession.start(questions_for_skill("git", load_quiz_banks()))
    quiz = quiz.answer(1).answer(1).skip()
    assert quiz.complete
    assert quiz.score == 2
    assert quiz.level == 1


def test_answering_a_complete_quiz_raises():
    quiz = QuizSession.start(questions_for_skill("git", load_quiz_banks())).skip()
    with pytest.raises(QuizError):
        quiz.answer(0)


def test_quiz_session_is_immutable():
    quiz = QuizSession.start(questions_for_skill("git", load_quiz_banks()))
    quiz.answer(1)
    assert quiz.answers == ()


def test_apply_quiz_level_returns_new_vault():
    domains = load_domains()
    updated = apply_quiz_level(domains, "devops", "docker", 3)
    devops = next(d for d in updated if d.id == "devops")
    assert devops.find("docker").level == 3
    assert next(d for d in domains if d.id == "devops").find("docker").level == 0


def test_apply_quiz_level_rejects_unknown_ids():
    domains = load_domains()
    with pytest.raises(KeyError):
        apply_quiz_level(domains, "devops", "cobol", 2)
    with pytest.raises(KeyError):
        apply_quiz_level(domains, "gardening", "docker", 2)
