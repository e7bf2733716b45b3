"""
示例课程数据

马来西亚 Form 4 附加数学的固定课程：示例用户、四个主题、九个课时、
三个测验、三个成就，以及示例用户的成就与学习进度。
"""
import logging
from datetime import datetime, timedelta, UTC

from tutorx.storage.base import Storage
from tutorx.schemas.user import UserCreate
from tutorx.schemas.topic import Difficulty, TopicCreate, LessonCreate
from tutorx.schemas.quiz import QuizCreate, QuizQuestion
from tutorx.schemas.user_progress import UserProgressCreate
from tutorx.schemas.achievement import AchievementCreate, RequirementKind, UserAchievementCreate

logger = logging.getLogger(__name__)

SAMPLE_USER_ID = "user-1"

TOPICS = [
    TopicCreate(
        id="functions",
        title="Functions and Graphs",
        description="Master function notation, domain, range and graph transformations",
        difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=150,
        lessons_count=8,
        rating=48,
        icon_class="fas fa-function",
        color_class="blue",
        order=1,
    ),
    TopicCreate(
        id="quadratic",
        title="Quadratic Functions",
        description="Explore parabolas, vertex form, and solving quadratic equations",
        difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=180,
        lessons_count=6,
        rating=49,
        icon_class="fas fa-wave-square",
        color_class="primary",
        order=2,
    ),
    TopicCreate(
        id="logarithmic",
        title="Logarithmic Functions",
        description="Understanding logs, exponential growth and natural logarithms",
        difficulty=Difficulty.ADVANCED,
        estimated_minutes=80,
        lessons_count=5,
        rating=47,
        icon_class="fas fa-chart-line",
        color_class="purple",
        order=3,
        is_locked=True,
    ),
    TopicCreate(
        id="coordinate",
        title="Coordinate Geometry",
        description="Lines, circles, and geometric transformations in 2D space",
        difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=130,
        lessons_count=7,
        rating=46,
        icon_class="fas fa-vector-square",
        color_class="green",
        order=4,
        is_locked=True,
    ),
]

LESSONS = [
    LessonCreate(
        id="quadratic-1",
        topic_id="quadratic",
        title="Introduction to Quadratic Functions",
        description="Understanding the basic form and properties of quadratic functions",
        video_url="https://www.youtube.com/embed/g7ZCp0OpA9s",
        video_duration=612,
        content=(
            "A quadratic function is a function of the form f(x) = ax² + bx + c where a ≠ 0. "
            "Its graph is a parabola with a vertex, an axis of symmetry, a y-intercept and, "
            "possibly, x-intercepts. The sign of 'a' decides whether the parabola opens upward or downward."
        ),
        order=1,
    ),
    LessonCreate(
        id="quadratic-2",
        topic_id="quadratic",
        title="Graphing Parabolas and Finding Vertex",
        description="Learn to graph quadratic functions and identify key features like vertex and intercepts",
        video_url="https://www.youtube.com/embed/YNz79dKYtM8",
        video_duration=738,
        content=(
            "To graph a quadratic function identify the vertex, the axis of symmetry, the y-intercept "
            "and the x-intercepts. The vertex lies at x = -b/2a; substitute back to find its y-coordinate."
        ),
        order=2,
    ),
    LessonCreate(
        id="quadratic-3",
        topic_id="quadratic",
        title="Vertex Form and Transformations",
        description="Understanding vertex form f(x) = a(x-h)² + k and graph transformations",
        video_url="https://www.youtube.com/embed/JJGWHt_KoqM",
        video_duration=564,
        content=(
            "In vertex form f(x) = a(x-h)² + k the vertex is (h, k). h shifts the graph horizontally, "
            "k shifts it vertically and |a| stretches or compresses it."
        ),
        order=3,
    ),
    LessonCreate(
        id="quadratic-4",
        topic_id="quadratic",
        title="Solving Quadratic Equations",
        description="Methods for solving quadratic equations: factoring, completing the square, and quadratic formula",
        video_url="https://www.youtube.com/embed/VOCNWpg7YcE",
        video_duration=678,
        content=(
            "Solve ax² + bx + c = 0 by factoring, by completing the square, or with the quadratic formula "
            "x = (-b ± √(b²-4ac))/2a. The discriminant b²-4ac gives the number of real roots."
        ),
        order=4,
    ),
    LessonCreate(
        id="quadratic-5",
        topic_id="quadratic",
        title="Applications and Word Problems",
        description="Real-world applications of quadratic functions in physics, economics, and geometry",
        video_url="https://www.youtube.com/embed/Dx1J1e4-2-E",
        video_duration=542,
        content=(
            "Quadratics model projectile motion, profit optimisation and area problems. Define the variable, "
            "build the equation, solve it and check the answer makes sense in context."
        ),
        order=5,
    ),
    LessonCreate(
        id="quadratic-6",
        topic_id="quadratic",
        title="Sum and Product of Roots",
        description="Relationship between coefficients and roots of quadratic equations",
        video_url="https://www.youtube.com/embed/3DArK8dJKx0",
        video_duration=467,
        content=(
            "For ax² + bx + c = 0 with roots α and β: α + β = -b/a and αβ = c/a. These relations let you "
            "form new equations and find unknown coefficients without solving."
        ),
        order=6,
    ),
    LessonCreate(
        id="functions-1",
        topic_id="functions",
        title="Introduction to Functions",
        description="Understanding function notation, domain, and range",
        video_url="https://www.youtube.com/embed/52tpYl2tTqk",
        video_duration=534,
        content=(
            "A function maps each input to exactly one output. f(x) denotes the output for input x; "
            "the domain is the set of inputs and the range the set of outputs."
        ),
        order=1,
    ),
    LessonCreate(
        id="functions-2",
        topic_id="functions",
        title="Function Operations",
        description="Adding, subtracting, multiplying, and dividing functions",
        video_url="https://www.youtube.com/embed/EIhJ5Q0PW3w",
        video_duration=612,
        content=(
            "Functions combine pointwise: (f+g)(x) = f(x) + g(x), (f-g)(x) = f(x) - g(x), "
            "(f·g)(x) = f(x)·g(x) and (f/g)(x) = f(x)/g(x) where g(x) ≠ 0."
        ),
        order=2,
    ),
    LessonCreate(
        id="functions-3",
        topic_id="functions",
        title="Composite Functions",
        description="Function composition and finding (f∘g)(x)",
        video_url="https://www.youtube.com/embed/UWLs0-zEVaI",
        video_duration=445,
        content=(
            "(f∘g)(x) = f(g(x)). Evaluate from the inside out. The domain of f∘g is every x where g(x) "
            "is defined and lies in the domain of f."
        ),
        order=3,
    ),
]

QUIZZES = [
    QuizCreate(
        id="quadratic-quiz-1",
        lesson_id="quadratic-3",
        topic_id="quadratic",
        title="Vertex Form and Transformations Quiz",
        description="Test your understanding of vertex form and graph transformations",
        questions=[
            QuizQuestion(id="q1", question="What is the vertex of the parabola y = 2(x - 3)² + 5?",
                         options=["(3, 5)", "(-3, 5)", "(3, -5)", "(-3, -5)"], correct_answer=0),
            QuizQuestion(id="q2", question="Which direction does the parabola y = -0.5(x + 2)² - 1 open?",
                         options=["Upward", "Downward", "Left", "Right"], correct_answer=1),
            QuizQuestion(id="q3", question="If f(x) = (x - 4)² + 1, what transformation moves the basic parabola y = x²?",
                         options=["Right 4, up 1", "Left 4, down 1", "Right 4, down 1", "Left 4, up 1"], correct_answer=0),
            QuizQuestion(id="q4", question="What is the axis of symmetry for y = 3(x + 1)² - 2?",
                         options=["x = 1", "x = -1", "x = 3", "x = -2"], correct_answer=1),
            QuizQuestion(id="q5", question="Which value of 'a' makes the parabola y = a(x - 2)² wider than y = x²?",
                         options=["a = 2", "a = 0.5", "a = -1", "a = 3"], correct_answer=1),
        ],
        points_reward=75,
        time_limit=450,
    ),
    QuizCreate(
        id="functions-quiz-1",
        lesson_id="functions-1",
        topic_id="functions",
        title="Functions Basics Quiz",
        description="Test your understanding of functions, domain, and range",
        questions=[
            QuizQuestion(id="q1", question="If f(x) = 2x + 3, what is f(5)?",
                         options=["13", "10", "8", "15"], correct_answer=0),
            QuizQuestion(id="q2", question="What is the domain of f(x) = √(x - 2)?",
                         options=["x ≥ 2", "x ≤ 2", "x > 2", "All real numbers"], correct_answer=0),
            QuizQuestion(id="q3", question="If g(x) = x² - 4x + 3, what is g(-1)?",
                         options=["8", "0", "-2", "6"], correct_answer=0),
            QuizQuestion(id="q4", question="Which relation represents a function?",
                         options=["{(1,2), (2,3), (1,4)}", "{(1,2), (2,2), (3,2)}",
                                  "{(1,2), (1,3), (2,4)}", "{(1,2), (2,1), (1,3)}"], correct_answer=1),
        ],
        points_reward=60,
        time_limit=360,
    ),
    QuizCreate(
        id="quadratic-solving-quiz",
        lesson_id="quadratic-4",
        topic_id="quadratic",
        title="Solving Quadratic Equations Quiz",
        description="Practice different methods of solving quadratic equations",
        questions=[
            QuizQuestion(id="q1", question="Solve x² - 5x + 6 = 0 using factoring.",
                         options=["x = 2, 3", "x = -2, -3", "x = 1, 6", "x = -1, -6"], correct_answer=0),
            QuizQuestion(id="q2", question="What is the discriminant of 2x² - 4x + 5 = 0?",
                         options=["-24", "24", "16", "-16"], correct_answer=0),
            QuizQuestion(id="q3", question="How many real solutions does x² - 6x + 9 = 0 have?",
                         options=["0", "1", "2", "Infinite"], correct_answer=1),
            QuizQuestion(id="q4", question="Using the quadratic formula, solve x² + 2x - 3 = 0.",
                         options=["x = 1, -3", "x = -1, 3", "x = 1, 3", "x = -1, -3"], correct_answer=0),
        ],
        points_reward=80,
        time_limit=480,
    ),
]

ACHIEVEMENTS = [
    AchievementCreate(
        id="week-warrior",
        title="Week Warrior",
        description="7-day study streak achieved!",
        icon_class="fas fa-fire",
        color_class="accent",
        requirement=RequirementKind.STREAK_7_DAYS,
        points_reward=100,
    ),
    AchievementCreate(
        id="quiz-master",
        title="Quiz Master",
        description="Scored 90%+ on 5 quizzes",
        icon_class="fas fa-graduation-cap",
        color_class="secondary",
        requirement=RequirementKind.QUIZ_90_PERCENT_5_TIMES,
        points_reward=150,
    ),
    AchievementCreate(
        id="speed-learner",
        title="Speed Learner",
        description="Completed 3 lessons in 1 hour",
        icon_class="fas fa-clock",
        color_class="purple",
        requirement=RequirementKind.LESSONS_3_IN_1_HOUR,
        points_reward=75,
    ),
]


async def seed_sample_data(storage: Storage) -> bool:
    """写入示例课程数据

    示例用户已存在时不做任何操作，返回 False。
    """
    if await storage.get_user(SAMPLE_USER_ID) is not None:
        logger.info("Sample data already present, skipping seed")
        return False

    now = datetime.now(UTC)
    async with storage.transaction():
        await storage.create_user(UserCreate(
            id=SAMPLE_USER_ID,
            username="ahmad",
            email="ahmad@example.com",
            name="Ahmad",
            level=12,
            points=1250,
            streak=7,
            study_time_minutes=165,
        ))
        for topic_in in TOPICS:
            await storage.create_topic(topic_in)
        for lesson_in in LESSONS:
            await storage.create_lesson(lesson_in)
        for quiz_in in QUIZZES:
            await storage.create_quiz(quiz_in)
        for achievement_in in ACHIEVEMENTS:
            await storage.create_achievement(achievement_in)

        for minutes_ago, achievement_in in zip((30, 20, 10), ACHIEVEMENTS):
            await storage.create_user_achievement(UserAchievementCreate(
                user_id=SAMPLE_USER_ID,
                achievement_id=achievement_in.id,
                unlocked_at=now - timedelta(minutes=minutes_ago),
            ))

        for minutes_ago, topic_id, lesson_id, score, time_spent in (
            (50, "functions", None, 95, 5400),
            (25, "quadratic", "quadratic-1", 88, 2700),
            (5, "quadratic", "quadratic-2", 92, 3100),
        ):
            await storage.create_user_progress(UserProgressCreate(
                user_id=SAMPLE_USER_ID,
                topic_id=topic_id,
                lesson_id=lesson_id,
                is_completed=True,
                score=score,
                time_spent=time_spent,
                completed_at=now - timedelta(minutes=minutes_ago),
            ))

    logger.info(
        "Seeded sample data: %d topics, %d lessons, %d quizzes, %d achievements",
        len(TOPICS), len(LESSONS), len(QUIZZES), len(ACHIEVEMENTS),
    )
    return True
