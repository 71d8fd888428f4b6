"""
음소 심볼 vocab 과 언어별 톤/언어 ID 테이블

- 음향 모델 입력은 "심볼 ID" 시퀀스다. 심볼 리스트의 순서가 곧 ID다.
- 학습에 쓴 모델 설정(config.json)에 `symbols`가 있으면 그것을 써야 한다.
  여기 정의한 리스트는 설정이 없을 때 쓰는 최소 내장 vocab이다.
- 이미 학습한 모델이 있으면 심볼 순서를 절대 바꾸면 안 된다.
  (바꾸면 같은 음소가 다른 ID로 바뀌어 모델이 망가진다.)
"""

import logging
from pathlib import Path
from types import MappingProxyType

logger = logging.getLogger(__name__)

# 패딩/경계 심볼. 발화 앞뒤에 하나씩 붙고, [UNK] 토큰의 음소로도 쓴다.
PAD = "_"

# 단독 음소로 취급하는 문장부호
PUNCTUATION = ["!", "?", "…", ",", ".", "'", "-"]

# 단어 사이 띄어쓰기 심볼
SPACE_SYMBOL = "SP"
# vocab에 없는 심볼의 대체 심볼
UNK_SYMBOL = "UNK"

PU_SYMBOLS = PUNCTUATION + [SPACE_SYMBOL, UNK_SYMBOL]

# 초성(Choseong): U+1100 ~ U+1112 (19개)
CHOSEONG = [chr(c) for c in range(0x1100, 0x1113)]
# 중성(Jungseong): U+1161 ~ U+1175 (21개)
JUNGSEONG = [chr(c) for c in range(0x1161, 0x1176)]
# 종성(Jongseong): U+11A8 ~ U+11C2 (27개). 받침 없음은 심볼을 두지 않는다.
JONGSEONG = [chr(c) for c in range(0x11A8, 0x11C3)]

KR_SYMBOLS = CHOSEONG + JUNGSEONG + JONGSEONG

SYMBOLS = [PAD] + KR_SYMBOLS + PU_SYMBOLS

SYMBOL_TO_ID = MappingProxyType({s: i for i, s in enumerate(SYMBOLS)})

# 언어별 톤 개수. 톤 ID는 언어마다 시작점(offset)을 더해 전역 톤 공간에 놓인다.
NUM_ZH_TONES = 6
NUM_JA_TONES = 2
NUM_EN_TONES = 4
NUM_KR_TONES = 1
NUM_ES_TONES = 1

LANGUAGE_ID_MAP = MappingProxyType({
    "ZH": 0,
    "JP": 1,
    "EN": 2,
    "ZH_MIX_EN": 3,
    "KR": 4,
    "ES": 5,
    "FR": 6,
})

LANGUAGE_TONE_START_MAP = MappingProxyType({
    "ZH": 0,
    "ZH_MIX_EN": 0,
    "JP": NUM_ZH_TONES,
    "EN": NUM_ZH_TONES + NUM_JA_TONES,
    "KR": NUM_ZH_TONES + NUM_JA_TONES + NUM_EN_TONES,
    "ES": NUM_ZH_TONES + NUM_JA_TONES + NUM_EN_TONES + NUM_KR_TONES,
    "FR": NUM_ZH_TONES + NUM_JA_TONES + NUM_EN_TONES + NUM_KR_TONES + NUM_ES_TONES,
})


def symbol_to_id_map(symbols: list[str] | None = None) -> MappingProxyType:
    """
    심볼 리스트로 읽기 전용 symbol -> id 사전을 만든다.

    같은 심볼이 두 번 나오면 처음 위치를 ID로 쓴다.
    """
    if symbols is None:
        return SYMBOL_TO_ID
    mapping: dict[str, int] = {}
    for i, s in enumerate(symbols):
        mapping.setdefault(s, i)
    return MappingProxyType(mapping)


def save_symbols(path: Path | None = None, symbols: list[str] | None = None) -> Path:
    """
    심볼 리스트를 1줄 1심볼 텍스트 파일로 저장한다.

    Args:
        path: 저장 경로. 기본값은 이 모듈 옆의 "symbols.txt".
        symbols: 저장할 심볼 리스트. 기본값은 내장 SYMBOLS.

    Returns:
        Path: 저장한 파일 경로.
    """
    if path is None:
        path = Path(__file__).resolve().parent / "symbols.txt"
    symbols = SYMBOLS if symbols is None else symbols

    with open(path, "w", encoding="utf-8") as f:
        for s in symbols:
            f.write(s + "\n")

    # 모델 config의 n_vocab과 일치하는지 점검할 때 쓴다.
    logger.info("saved symbols: %s | total=%d", path, len(symbols))
    return Path(path)
