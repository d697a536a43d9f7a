from .config import WhatsAppConfig
from .client import send_whatsapp_text, check_phone_number
from .phone import normalize_phone_number
from .channel import WhatsAppChannel
