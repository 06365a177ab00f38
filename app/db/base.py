# /app/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic or `create_all` inspects the metadata.

# Import the Base class that all models inherit from.
from .base_class import Base

# Import all of our model classes from their respective files.
from .models.user_models import User
from .models.course_models import Course, Class, course_instructors
from .models.ledger_models import Enrollment, Attendance
from .models.assignment_models import Assignment
from .models.notification_models import Notification
