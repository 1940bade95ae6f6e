import logging
from typing import Optional
from twilio.rest import Client
from twilio.http.http_client import TwilioHttpClient
from twilio.base.exceptions import TwilioException, TwilioRestException

from ...core.config import settings
from ...application.ports.otp_provider import OTPSender
from ...utils import hash_phone_number

logger = logging.getLogger(__name__)

OTP_MESSAGE = "Your AI Health Companion verification code is {code}. It expires in {minutes} minutes."


class TwilioSmsSender(OTPSender):
    def __init__(self, client: Optional[Client] = None, from_number: Optional[str] = None):
        self.client = client or Client(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            http_client=TwilioHttpClient(timeout=15, max_retries=3),
        )
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER

    def send_code(self, phone: str, code: str) -> bool:
        if not self.from_number:
            logger.error("Twilio sender number not configured")
            return False
        body = OTP_MESSAGE.format(code=code, minutes=settings.OTP_EXPIRY_MINUTES)
        try:
            message = self.client.messages.create(to=phone, from_=self.from_number, body=body)
        except TwilioRestException as e:
            logger.error(f"Twilio rejected OTP SMS to {hash_phone_number(phone)}: {e.code} {e.msg}")
            return False
        except TwilioException as e:
            logger.error(f"Twilio error sending OTP SMS to {hash_phone_number(phone)}: {e}")
            return False
        logger.info(f"OTP SMS queued to {hash_phone_number(phone)} (sid={message.sid})")
        return True


class LoggingOtpSender(OTPSender):
    """Development sender used when Twilio is not configured."""

    def send_code(self, phone: str, code: str) -> bool:
        logger.info(f"OTP delivery (no SMS provider configured) to {hash_phone_number(phone)}")
        logger.debug(f"OTP {code} for {phone}")
        return True


def build_otp_sender() -> OTPSender:
    if settings.twilio_configured:
        return TwilioSmsSender()
    logger.warning("Twilio not configured; OTP codes will only be logged at DEBUG level")
    return LoggingOtpSender()
