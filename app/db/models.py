# Imports every model so Base.metadata knows all tables (create_all, tests).
from app.db.base import Base  # noqa: F401
from app.modules.users.models import User  # noqa: F401
from app.modules.mentors.models import Mentor  # noqa: F401
from app.modules.requests.models import TrainingRequest  # noqa: F401
from app.modules.learnings.models import LearningProcess  # noqa: F401
