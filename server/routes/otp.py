from fastapi import APIRouter, Depends, HTTPException
from server.schemas import OtpSendRequest, OtpVerifyRequest, MessageResponse
from server.otp import OtpService, OtpDeliveryError
from server.enums import VerificationResult
from server.dependencies import get_otp_service

router = APIRouter()

VERIFY_ERRORS = {
    VerificationResult.not_found: "Nomor belum dikirim OTP",
    VerificationResult.expired: "Kode OTP kadaluarsa",
    VerificationResult.mismatch: "Kode OTP salah",
}

# =========================================================
# OTP ENDPOINTS
# =========================================================
@router.post("/send-otp", response_model=MessageResponse)
def send_otp(payload: OtpSendRequest, service: OtpService = Depends(get_otp_service)):
    if not payload.phoneNumber:
        raise HTTPException(status_code=400, detail="phoneNumber wajib diisi")

    try:
        service.issue(payload.phoneNumber, payload.otp)
    except OtpDeliveryError:
        raise HTTPException(status_code=500, detail="Gagal kirim pesan WhatsApp")

    return {"message": "OTP berhasil dikirim via WA"}


@router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(payload: OtpVerifyRequest, service: OtpService = Depends(get_otp_service)):
    if not payload.phoneNumber or not payload.otp:
        raise HTTPException(status_code=400, detail="phoneNumber dan otp wajib diisi")

    result = service.verify(payload.phoneNumber, payload.otp)
    if result != VerificationResult.valid:
        raise HTTPException(status_code=400, detail=VERIFY_ERRORS[result])

    return {"message": "Verifikasi berhasil"}
