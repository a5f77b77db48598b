"""Simulated PIX payment for the premium tier.

There is no payment provider: the QR code encodes a static payload and
confirmation flips the premium flag unconditionally.
"""
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends

from smartsync import config
from smartsync.deps import get_current_user_id
from smartsync.repositories import UserRepository, get_users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/finance", tags=["finance"])


def _emv(tag: str, value: str) -> str:
    return f"{tag}{len(value):02d}{value}"


def _crc16(data: str) -> str:
    # CRC-16/CCITT-FALSE, as required for the EMV "63" field
    crc = 0xFFFF
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else crc << 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def pix_payload(cnpj: str = None, merchant: str = None, city: str = None) -> str:
    """Static PIX "copia e cola" string for the merchant key."""
    cnpj = cnpj or config.PIX_CNPJ
    merchant = merchant or config.PIX_MERCHANT_NAME
    city = city or config.PIX_MERCHANT_CITY
    account = _emv("00", "BR.GOV.BCB.PIX") + _emv("01", cnpj)
    body = "".join([
        _emv("00", "01"),
        _emv("26", account),
        _emv("52", "0000"),
        _emv("53", "986"),
        _emv("58", "BR"),
        _emv("59", merchant),
        _emv("60", city),
        _emv("62", _emv("05", "***")),
        "6304",
    ])
    return body + _crc16(body)


@router.get("/pix-qr")
def pix_qr(user_id: str = Depends(get_current_user_id)):
    payload = pix_payload()
    qr_code = f"{config.QR_SERVICE_URL}?{urlencode({'size': '150x150', 'data': payload})}"
    return {"qrCode": qr_code, "payload": payload}


@router.post("/confirm-payment")
def confirm_payment(user_id: str = Depends(get_current_user_id), users: UserRepository = Depends(get_users)):
    users.set_premium(user_id)
    logger.info("User %s upgraded to premium", user_id)
    return {"success": True}
