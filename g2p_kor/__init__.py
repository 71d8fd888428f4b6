"""
g2p_kor public API.

Exports:
- G2pConfig / SequencerConfig: 설정 dataclass
- G2p: 한국어 발음 규칙 변환기
- PhonemeSequencer / SequenceResult: 텍스트 -> 음소 ID 시퀀스
- build_model_inputs: 음향 모델 입력 dict
"""

from .config import G2pConfig, SequencerConfig
from .errors import AlignmentError, ConfigurationError, G2pError, InvalidJamoError
from .inference import build_model_inputs
from .sequencer import PhonemeSequencer, SequenceResult
from .text.rules import G2p

__all__ = [
    "AlignmentError",
    "ConfigurationError",
    "G2p",
    "G2pConfig",
    "G2pError",
    "InvalidJamoError",
    "PhonemeSequencer",
    "SequenceResult",
    "SequencerConfig",
    "build_model_inputs",
]
