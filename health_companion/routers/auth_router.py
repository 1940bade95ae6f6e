from fastapi import APIRouter, Depends, HTTPException, Request, status
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service, get_current_user
from ..exceptions import ServerError
from ..schemas.common.common import ErrorResponse, MessageResponse
from ..schemas.auth.auth import LoginRequest, RegisterRequest, ResendOTPRequest, VerifyOTPRequest
from ..utils import get_client_info

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
):
    client = get_client_info(request)
    try:
        user = auth.register(
            name=body.name,
            phone=body.phone,
            email=body.email,
            password=body.password,
            ip_address=client["ip_address"],
        )
        return {
            "message": "User registered successfully. Please verify your phone number.",
            "userId": user.id,
            "phone": user.phone,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise ServerError("Server error during registration")


@router.post("/verify-otp")
def verify_otp(
    body: VerifyOTPRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
):
    client = get_client_info(request)
    try:
        token, user = auth.verify_otp(body.phone, body.otp, ip_address=client["ip_address"])
        return {
            "message": "Phone number verified successfully",
            "token": token,
            "user": user.public_dict(),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"OTP verification error: {e}")
        raise ServerError("Server error during OTP verification")


@router.post("/login")
def login(
    body: LoginRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
):
    client = get_client_info(request)
    try:
        token, user = auth.login(body.identifier, body.password, ip_address=client["ip_address"])
        return {
            "message": "Login successful",
            "token": token,
            "user": user.public_dict(),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise ServerError("Server error during login")


@router.post("/resend-otp")
def resend_otp(
    body: ResendOTPRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
):
    client = get_client_info(request)
    try:
        user = auth.resend_otp(body.phone, ip_address=client["ip_address"])
        return {"message": "OTP sent successfully", "phone": user.phone}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Resend OTP error: {e}")
        raise ServerError("Server error while resending OTP")


@router.get("/me")
def me(current_user: UserDto = Depends(get_current_user)):
    return {"user": current_user.public_dict()}


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: UserDto = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy.
    logger.info(f"User {current_user.id} logged out")
    return {"message": "Logged out successfully"}


@router.post("/refresh")
def refresh(
    current_user: UserDto = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        token = auth.refresh(current_user.id)
        return {"message": "Token refreshed successfully", "token": token}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Token refresh error: {e}")
        raise ServerError("Server error during token refresh")
