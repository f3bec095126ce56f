import hashlib
import hmac
import secrets
from typing import Optional
from ..config import Config

API_KEY_TAG = "wsk_"
API_KEY_BYTES = 24
API_KEY_PREFIX_LENGTH = 14

def generate_api_key() -> str:
    """تولید کلید API"""
    return f"{API_KEY_TAG}{secrets.token_hex(API_KEY_BYTES)}"

def hash_api_key(plain_key: str) -> str:
    """هش یک‌طرفه کلید برای ذخیره"""
    return hashlib.sha256(plain_key.encode()).hexdigest()

def get_api_key_prefix(plain_key: str) -> str:
    """پیشوند قابل نمایش کلید"""
    return plain_key[:API_KEY_PREFIX_LENGTH]

def sign_payload(body: bytes, secret: Optional[str] = None) -> str:
    """امضای بدنه وب‌هوک"""
    key = secret if secret is not None else Config.WEBHOOK_SECRET
    return hmac.new(key.encode(), body, hashlib.sha256).hexdigest()

def verify_signature(body: bytes, signature: Optional[str], secret: Optional[str] = None) -> bool:
    """بررسی امضای وب‌هوک"""
    key = secret if secret is not None else Config.WEBHOOK_SECRET
    if not signature or not key:
        return False
    return hmac.compare_digest(signature.encode(), sign_payload(body, key).encode())
