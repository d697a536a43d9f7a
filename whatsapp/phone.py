import re

COUNTRY_CODE = "62"


def normalize_phone_number(number: str) -> str:
    """
    Normalize an Indonesian phone number to WhatsApp's digits-only form.

    "0812-3456" -> "628123456", "+62 812" -> "62812", "812" -> "62812".
    Numbers with any other prefix are returned as bare digits.
    """
    digits = re.sub(r"\D", "", number or "")
    if digits.startswith("08"):
        return COUNTRY_CODE + digits[1:]
    if digits.startswith(COUNTRY_CODE):
        return digits
    if digits.startswith("8"):
        return COUNTRY_CODE + digits
    return digits
