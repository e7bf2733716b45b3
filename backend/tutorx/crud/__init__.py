from .crud_user import user
from .crud_topic import topic
from .crud_lesson import lesson
from .crud_quiz import quiz
from .crud_progress import progress
from .crud_achievement import achievement, user_achievement
