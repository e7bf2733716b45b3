"""
成就评估器测试
"""
from datetime import datetime, timedelta, UTC

import pytest

from tutorx.core.exceptions import UserNotFoundError
from tutorx.schemas.achievement import Achievement, RequirementKind, UserAchievement
from tutorx.schemas.user import User
from tutorx.schemas.user_progress import UserProgress
from tutorx.services.achievement_evaluator import (
    PREDICATES,
    completions_within_window,
    evaluate_unlocks,
    is_requirement_met,
)

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

WEEK_WARRIOR = Achievement(
    id="week-warrior", title="Week Warrior", description="7-day study streak achieved!",
    requirement=RequirementKind.STREAK_7_DAYS, points_reward=100,
)
QUIZ_MASTER = Achievement(
    id="quiz-master", title="Quiz Master", description="Scored 90%+ on 5 quizzes",
    requirement=RequirementKind.QUIZ_90_PERCENT_5_TIMES, points_reward=150,
)
SPEED_LEARNER = Achievement(
    id="speed-learner", title="Speed Learner", description="Completed 3 lessons in 1 hour",
    requirement=RequirementKind.LESSONS_3_IN_1_HOUR, points_reward=75,
)
ALL = [WEEK_WARRIOR, QUIZ_MASTER, SPEED_LEARNER]


def make_user(streak=0) -> User:
    return User(id="u1", username="learner", email="learner@example.com", name="Learner", streak=streak)


def completed_at(*minutes, score=None, user_id="u1"):
    return [
        UserProgress(
            id=f"p{i}", user_id=user_id, topic_id="quadratic", lesson_id=f"quadratic-{i}",
            is_completed=True, score=score, completed_at=T0 + timedelta(minutes=m),
        )
        for i, m in enumerate(minutes)
    ]


def scored(*scores):
    return [
        UserProgress(id=f"s{i}", user_id="u1", topic_id="functions", is_completed=True, score=s)
        for i, s in enumerate(scores)
    ]


def unlocked(achievement: Achievement) -> UserAchievement:
    return UserAchievement(id=f"ua-{achievement.id}", user_id="u1", achievement_id=achievement.id, unlocked_at=T0)


def test_every_requirement_has_a_predicate():
    assert set(PREDICATES) == set(RequirementKind)


class TestStreak:
    def test_streak_of_seven_unlocks(self):
        assert evaluate_unlocks(make_user(streak=7), [], [WEEK_WARRIOR], []) == [WEEK_WARRIOR]

    def test_streak_of_six_does_not_unlock(self):
        assert evaluate_unlocks(make_user(streak=6), [], [WEEK_WARRIOR], []) == []


class TestQuizScores:
    def test_five_high_scores_unlock(self):
        progress = scored(90, 95, 100, 91, 90)
        assert is_requirement_met(RequirementKind.QUIZ_90_PERCENT_5_TIMES, make_user(), progress)

    def test_four_high_scores_are_not_enough(self):
        progress = scored(90, 95, 100, 91, 89, 50)
        assert not is_requirement_met(RequirementKind.QUIZ_90_PERCENT_5_TIMES, make_user(), progress)

    def test_records_without_score_do_not_count(self):
        progress = scored(95, 95, 95, 95, None)
        assert not is_requirement_met(RequirementKind.QUIZ_90_PERCENT_5_TIMES, make_user(), progress)


class TestLessonsWithinAnHour:
    def test_three_completions_within_sixty_minutes(self):
        assert is_requirement_met(RequirementKind.LESSONS_3_IN_1_HOUR, make_user(), completed_at(0, 20, 50))

    def test_completions_spread_over_seventy_minutes(self):
        assert not is_requirement_met(RequirementKind.LESSONS_3_IN_1_HOUR, make_user(), completed_at(0, 20, 70))

    def test_window_end_is_inclusive(self):
        assert completions_within_window(completed_at(0, 30, 60), 3, timedelta(hours=1))

    def test_window_slides_over_history(self):
        """较早的零散记录不影响后面出现的密集时段"""
        assert completions_within_window(completed_at(0, 100, 110, 150), 3, timedelta(hours=1))

    def test_input_order_does_not_matter(self):
        assert completions_within_window(completed_at(50, 0, 20), 3, timedelta(hours=1))

    def test_untimed_and_incomplete_records_are_ignored(self):
        progress = completed_at(0, 10)
        progress.append(UserProgress(id="x", user_id="u1", topic_id="quadratic", is_completed=True))
        progress.append(UserProgress(
            id="y", user_id="u1", topic_id="quadratic", is_completed=False, completed_at=T0 + timedelta(minutes=5),
        ))
        assert not completions_within_window(progress, 3, timedelta(hours=1))


class TestEvaluateUnlocks:
    def test_already_unlocked_achievements_are_never_returned(self):
        user = make_user(streak=30)
        progress = completed_at(0, 1, 2, score=100) + scored(95, 95)
        assert evaluate_unlocks(user, progress, ALL, [unlocked(a) for a in ALL]) == []

    def test_returns_all_newly_eligible_in_definition_order(self):
        user = make_user(streak=7)
        progress = completed_at(0, 1, 2, score=100) + scored(95, 95)
        result = evaluate_unlocks(user, progress, ALL, [unlocked(QUIZ_MASTER)])
        assert result == [WEEK_WARRIOR, SPEED_LEARNER]

    def test_other_users_progress_is_ignored(self):
        progress = completed_at(0, 1, 2, user_id="someone-else")
        assert evaluate_unlocks(make_user(), progress, [SPEED_LEARNER], []) == []

    def test_missing_user(self):
        with pytest.raises(UserNotFoundError):
            evaluate_unlocks(None, [], ALL, [])
