# This file makes the 'models' directory a Python package.

from .user import User
from .topic import Topic
from .lesson import Lesson
from .quiz import Quiz
from .user_progress import UserProgress
from .achievement import Achievement, UserAchievement
