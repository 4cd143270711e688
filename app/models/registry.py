# Imported for its side effect: every model registered on Base.metadata.
from app.models.organization import Organization  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.category import Category  # noqa: F401
from app.models.course import Course  # noqa: F401
from app.models.lesson import Lesson  # noqa: F401
from app.models.lesson_item import LessonItem  # noqa: F401
from app.models.enrollment import Enrollment  # noqa: F401
from app.models.lesson_item_progress import LessonItemProgress  # noqa: F401
from app.models.quiz_submission import QuizSubmission  # noqa: F401
from app.models.review import Review  # noqa: F401
from app.models.learning_path import LearningPath, LearningPathSection, LearningPathCourse  # noqa: F401
from app.models.learning_path_progress import LearningPathProgress  # noqa: F401
