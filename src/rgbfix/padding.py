"""Pads ROM images to a size the cartridge header can describe."""
import logging

from .header import ROM_SIZE

_logger = logging.getLogger(__name__)

BASE_ROM_SIZE = 32 * 1024

# 32 KiB to 8 MiB, code 0x00 to 0x08 at 0x148
VALID_ROM_SIZES = tuple(BASE_ROM_SIZE << code for code in range(9))


def target_size(length: int) -> int:
    """Smallest valid size that fits length, or length itself past 8 MiB."""
    for size in VALID_ROM_SIZES:
        if length <= size:
            return size
    return length


def size_code(length: int) -> int:
    code = 0
    while BASE_ROM_SIZE << code < length:
        code += 1
    return code


def pad_rom(data: bytearray, pad_value: int) -> bytearray:
    """Pad data up to the next valid ROM size and update the size code.

    Returns a new buffer when padding happened, otherwise data itself.
    The size code is rewritten in both cases.
    """
    new_size = target_size(len(data))
    if new_size == len(data):
        _logger.info(f"ROM is already at a valid size ({new_size // 1024} KiB), no padding needed")
        out = data
    else:
        out = bytearray([pad_value]) * new_size
        out[:len(data)] = data
        _logger.info(
            f"Padded ROM from {len(data) // 1024} KiB to {new_size // 1024} KiB with value 0x{pad_value:02X}"
        )
    out[ROM_SIZE.offset] = size_code(new_size)
    return out
