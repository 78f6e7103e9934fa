from __future__ import annotations

import base58
from solders.pubkey import Pubkey

from solfind.domain.errors import MalformedPayload
from solfind.domain.models import TradeFields
from solfind.domain.value_types import DecodeMode, PubkeyStr


# pump.fun TradeEvent (anchor event CPI), 137 bytes, no length prefixes or tags
#   [0:16)    discriminator (unchecked)
#   [16:48)   mint pubkey
#   [48:56)   sol_amount            u64 LE
#   [56:64)   token_amount          u64 LE
#   [64]      is_buy                1 => buy
#   [65:97)   user pubkey           (unused)
#   [97:105)  timestamp             i64 LE
#   [105:113) virtual_sol_reserves  (unused)
#   [113:121) virtual_token_reserves(unused)
#   [121:137) trailing fields       (unused)
DISCRIMINATOR_OFF = 0
DISCRIMINATOR_LEN = 16
MINT_OFF          = 16
PUBKEY_LEN        = 32
SOL_AMOUNT_OFF    = 48
TOKEN_AMOUNT_OFF  = 56
IS_BUY_OFF        = 64
USER_OFF          = 65
TIMESTAMP_OFF     = 97
VIRTUAL_SOL_OFF   = 105
VIRTUAL_TOKEN_OFF = 113
TRAILING_OFF      = 121
U64_LEN           = 8

FULL_EVENT_LEN    = 137
MINIMAL_EVENT_LEN = IS_BUY_OFF + 1   # 65: last byte read in minimal mode

DECODE_MODES: tuple[DecodeMode, ...] = ("full", "minimal")

# --------- fixed-offset readers -----------------------------------------------

def _u64(b: bytes, off: int) -> int:
    return int.from_bytes(b[off:off + U64_LEN], "little", signed=False)

def _i64(b: bytes, off: int) -> int:
    return int.from_bytes(b[off:off + U64_LEN], "little", signed=True)

def _pubkey(b: bytes, off: int) -> PubkeyStr:
    return PubkeyStr(str(Pubkey.from_bytes(b[off:off + PUBKEY_LEN])))

def _check_length(data: bytes, mode: DecodeMode) -> None:
    n = len(data)
    if mode == "full":
        if n != FULL_EVENT_LEN:
            raise MalformedPayload(f"full trade event must be {FULL_EVENT_LEN} bytes, got {n}")
    elif mode == "minimal":
        if n < MINIMAL_EVENT_LEN:
            raise MalformedPayload(f"trade event truncated: need >= {MINIMAL_EVENT_LEN} bytes, got {n}")
    else:
        raise ValueError(f"Unknown decode mode: {mode!r}")

# ---------------------------- public API --------------------------------------

def decode_trade(data: bytes, mode: DecodeMode = "full") -> TradeFields:
    """
    Decode a raw pump.fun trade event.

    "full" requires exactly 137 bytes and also returns mint + timestamp.
    "minimal" skips the overall length check and reads only the amounts and
    the is_buy flag, so anything of at least 65 bytes is accepted.
    """
    _check_length(data, mode)

    sol_amount   = _u64(data, SOL_AMOUNT_OFF)
    token_amount = _u64(data, TOKEN_AMOUNT_OFF)
    is_buy       = data[IS_BUY_OFF] == 1

    if mode == "minimal":
        return TradeFields(is_buy=is_buy, sol_amount=sol_amount, token_amount=token_amount)

    return TradeFields(
        is_buy=is_buy,
        sol_amount=sol_amount,
        token_amount=token_amount,
        timestamp=_i64(data, TIMESTAMP_OFF),
        mint=_pubkey(data, MINT_OFF),
    )

def decode_trade_b58(data_b58: str, mode: DecodeMode = "full") -> TradeFields:
    """Same as decode_trade, for the base58 `data` string of an instruction."""
    try:
        raw = base58.b58decode(data_b58)
    except ValueError as e:
        raise MalformedPayload(f"invalid base58 instruction data: {e}") from e
    return decode_trade(raw, mode)
