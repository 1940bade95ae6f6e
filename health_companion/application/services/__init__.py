# Services package (re-export feature modules for stable imports)
from .auth_service import AuthService
from .auth_gate import AuthGate
from .contact_service import ContactService
from .otp_service import OTPService
from .profile_service import ProfileService
from .quiz_service import QuizService
from .token_service import TokenService
