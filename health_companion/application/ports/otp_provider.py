from typing import Protocol


class OTPSender(Protocol):
    def send_code(self, phone: str, code: str) -> bool:
        ...
