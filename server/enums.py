import enum
# =========================================================
# ENUMS
# =========================================================
class VerificationResult(str, enum.Enum):
    valid = "valid"
    expired = "expired"
    mismatch = "mismatch"
    not_found = "not_found"
