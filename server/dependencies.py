from fastapi import HTTPException, Request
from server.otp import OtpService


def get_otp_service(request: Request) -> OtpService:
    service = getattr(request.app.state, "otp_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="OTP service not ready")
    return service


def get_channel(request: Request):
    channel = getattr(request.app.state, "channel", None)
    if channel is None:
        raise HTTPException(status_code=503, detail="Socket belum siap")
    return channel


def get_reminder_scheduler(request: Request):
    return getattr(request.app.state, "reminder_scheduler", None)
