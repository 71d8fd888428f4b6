from .jamo import compose, decompose, h2j, hangul_to_jamo
from .normalizer import normalize_korean, prosody_pause, prosody_split
from .rules import G2p
from .symbols import SYMBOLS, save_symbols

__all__ = [
    "G2p",
    "SYMBOLS",
    "compose",
    "decompose",
    "h2j",
    "hangul_to_jamo",
    "normalize_korean",
    "prosody_pause",
    "prosody_split",
    "save_symbols",
]
