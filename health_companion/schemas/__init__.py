# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .users.user import *
from .quiz.quiz import *
from .contact.contact import *
from .common.common import *
