from fastapi import APIRouter
from . import otp, status, prometheus

router = APIRouter()

router.include_router(status.router, tags=["Status"])
router.include_router(otp.router, tags=["OTP"])
router.include_router(prometheus.router, prefix="/metrics", tags=["Metrics"])
