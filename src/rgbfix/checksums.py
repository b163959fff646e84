import logging

from .header import GLOBAL_CHECKSUM, HEADER_CHECKSUM, HEADER_CHECKSUM_RANGE, LOGO, NINTENDO_LOGO

_logger = logging.getLogger(__name__)


def header_checksum(data: bytes) -> int:
    x = 0
    for i in HEADER_CHECKSUM_RANGE:
        x = (x - data[i] - 1) & 0xFF
    return x


def global_checksum(data: bytes) -> int:
    # 16-bit sum over all bytes except the two that store it
    stored = data[GLOBAL_CHECKSUM.slice()]
    return (sum(data) - sum(stored)) & 0xFFFF


def fix_logo(data: bytearray) -> bytes:
    data[LOGO.slice()] = NINTENDO_LOGO
    _logger.info("Fixed Nintendo logo in ROM header")
    return NINTENDO_LOGO


def fix_header_checksum(data: bytearray) -> int:
    value = header_checksum(data)
    data[HEADER_CHECKSUM.offset] = value
    _logger.info(f"Fixed header checksum at 0x{HEADER_CHECKSUM.offset:03X}: 0x{value:02X}")
    return value


def fix_global_checksum(data: bytearray) -> int:
    value = global_checksum(data)
    data[GLOBAL_CHECKSUM.slice()] = value.to_bytes(2, "big")
    _logger.info(f"Fixed global checksum at 0x{GLOBAL_CHECKSUM.offset:03X}: 0x{value:04X}")
    return value


# Fix letters in run order; the global checksum includes the byte at 0x14D
# and the logo, so it goes last.
FIXES = {
    "l": fix_logo,
    "h": fix_header_checksum,
    "g": fix_global_checksum,
}
