from .module import Module
from .exercise import Exercise
from .alternative import Alternative

MODULES = Module.__tablename__
EXERCISES = Exercise.__tablename__
ALTERNATIVES = Alternative.__tablename__

__all__ = ["Module", "Exercise", "Alternative", "MODULES", "EXERCISES", "ALTERNATIVES"]
