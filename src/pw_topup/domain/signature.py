"""Razorpay checkout signature: HMAC-SHA256(key_secret, "order_id|payment_id"), hex."""

import hashlib
import hmac


def expected_signature(key_secret: str, order_id: str, payment_id: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(key_secret.encode(), message, hashlib.sha256).hexdigest()


def verify_signature(key_secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    expected = expected_signature(key_secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode(), signature.encode())
