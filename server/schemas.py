from typing import Optional
from pydantic import BaseModel

# =========================================================
# PYDANTIC SCHEMAS
# =========================================================

# Field names follow the web client's camelCase payloads
class OtpSendRequest(BaseModel):
    phoneNumber: Optional[str] = None
    otp: Optional[str] = None

class OtpVerifyRequest(BaseModel):
    phoneNumber: Optional[str] = None
    otp: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class ChannelStatusResponse(BaseModel):
    connected: bool
    logged_out: bool = False
    scheduler_armed: bool = False
