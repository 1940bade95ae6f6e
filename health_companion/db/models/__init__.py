# Models package (re-export feature modules for stable imports)
from .users.user import User
from .health.quiz import QuizSession
from .contact.message import ContactMessage

__all__ = [
    "User",
    "QuizSession",
    "ContactMessage",
]
