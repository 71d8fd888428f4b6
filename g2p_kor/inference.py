"""
음향 모델 입력 경계

SequenceResult 를 ONNX/VITS 계열 그래프가 받는 numpy 입력 dict 로 바꾼다.
음향 모델 자체는 AcousticModel 프로토콜만 만족하면 된다. (세션 생성/가중치 로드는 호출 측 책임)
"""

import logging
from typing import Protocol

import numpy as np

from .errors import AlignmentError
from .sequencer import PhonemeSequencer, SequenceResult, check_alignment
from .text.normalizer import prosody_pause

logger = logging.getLogger(__name__)

BERT_DIM = 1024
JA_BERT_DIM = 768


class AcousticModel(Protocol):
    def synthesize(self, inputs: dict[str, np.ndarray]) -> tuple[np.ndarray, int]:
        """입력 dict 를 받아 (PCM float 샘플, 샘플레이트) 를 돌려준다."""
        ...


def zero_bert(n_phones: int, dim: int) -> np.ndarray:
    """BERT 를 쓰지 않는 모델용 0 특징 [dim, n_phones]."""
    return np.zeros((dim, n_phones), dtype=np.float32)


def expand_to_phone_level(features: np.ndarray, word2ph: list[int]) -> np.ndarray:
    """
    토큰 단위 특징 [T, H] 를 word2ph 만큼 반복해 음소 단위 [H, sum(word2ph)] 로 늘린다.

    T 는 len(word2ph) 와 같아야 한다. ([CLS]/[SEP] 포함)
    """
    if features.shape[0] != len(word2ph):
        raise AlignmentError(f"token feature len mismatch: {features.shape[0]} vs {len(word2ph)}")
    if not word2ph:
        return np.zeros((features.shape[1], 0), dtype=features.dtype)

    phone_level = [np.repeat(features[i : i + 1], word2ph[i], axis=0) for i in range(len(word2ph))]
    phone_level = np.concatenate(phone_level, axis=0)  # [sum(word2ph), H]
    return phone_level.T


def build_model_inputs(
    result: SequenceResult,
    speaker_id: int = 0,
    noise_scale: float = 0.6,
    noise_scale_w: float = 0.8,
    length_scale: float = 1.0,
    bert: np.ndarray | None = None,
    ja_bert: np.ndarray | None = None,
) -> dict[str, np.ndarray]:
    """
    SequenceResult 를 모델 입력 dict 로 만든다.

    - 정수 입력은 int64, 특징/스칼라는 float32.
    - bert/ja_bert 가 없으면 0 특징을 쓴다. 한국어 BERT 특징은 ja_bert 자리에 넣는다.
    - 넘기기 전에 sum(word2ph) == len(phones) 를 다시 확인한다.
    """
    check_alignment(result.phones, result.word2ph)

    n = len(result.phones)
    bert = zero_bert(n, BERT_DIM) if bert is None else bert
    ja_bert = zero_bert(n, JA_BERT_DIM) if ja_bert is None else ja_bert

    if bert.shape[1] != n:
        raise AlignmentError(f"bert len mismatch: {bert.shape[1]} vs {n}")
    if ja_bert.shape[1] != n:
        raise AlignmentError(f"ja_bert len mismatch: {ja_bert.shape[1]} vs {n}")

    x = np.array(result.phones, dtype=np.int64)[None, :]
    return {
        "x": x,
        "x_lengths": np.array([x.shape[1]], dtype=np.int64),
        "sid": np.array([speaker_id], dtype=np.int64),
        "tone": np.array(result.tones, dtype=np.int64)[None, :],
        "language": np.array(result.languages, dtype=np.int64)[None, :],
        "bert": bert[None, :, :].astype(np.float32),
        "ja_bert": ja_bert[None, :, :].astype(np.float32),
        "noise_scale": np.array(noise_scale, dtype=np.float32),
        "length_scale": np.array(length_scale, dtype=np.float32),
        "noise_scale_w": np.array(noise_scale_w, dtype=np.float32),
    }


def synthesize(
    model: AcousticModel,
    sequencer: PhonemeSequencer,
    text: str,
    speaker_id: int = 0,
    speed: float = 1.0,
    noise_scale: float = 0.6,
    noise_scale_w: float = 0.8,
    insert_pauses: bool = True,
) -> tuple[np.ndarray, int]:
    """
    텍스트를 문장 단위로 합성해 하나의 오디오로 이어 붙인다.

    speed 는 length_scale = 1 / speed 로 넘긴다. insert_pauses 가 켜져 있으면
    문장 사이에 prosody_pause 길이만큼 무음을 넣는다. (마지막 문장 뒤는 제외)
    """
    if speed <= 0:
        raise ValueError(f"speed must be > 0, got {speed}")

    results = sequencer.sequence_chunks(text)
    audio_chunks = []
    sr = 0
    for i, result in enumerate(results):
        inputs = build_model_inputs(
            result,
            speaker_id=speaker_id,
            noise_scale=noise_scale,
            noise_scale_w=noise_scale_w,
            length_scale=1.0 / speed,
        )
        audio, sr = model.synthesize(inputs)
        audio_chunks.append(np.asarray(audio, dtype=np.float32).reshape(-1))

        if insert_pauses and i < len(results) - 1:
            pause = prosody_pause(result.norm_text)
            audio_chunks.append(np.zeros(int(round(sr * pause)), dtype=np.float32))

    if not audio_chunks:
        raise ValueError("no text chunks to synthesize")

    logger.info("synthesized %d chunk(s) at %d Hz", len(results), sr)
    return np.concatenate(audio_chunks, axis=0), sr
