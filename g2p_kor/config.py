from dataclasses import dataclass, field
from pathlib import Path
import json


@dataclass(frozen=True)
class G2pConfig:
    """
    발음 규칙 엔진(G2p) 설정.

    네 가지 옵션만 인식한다. verbose는 로그 출력에만 영향을 주며
    변환 결과에는 영향을 주지 않는다.
    """

    # 구어체 발음 변형(의 -> 에, 계 -> 게) 적용 여부.
    descriptive: bool = False
    # 현대 구어 모음 단순화(ㅒ -> ㅖ, ㅘ -> ㅗ, ㅙ -> ㅞ) 적용 여부.
    group_vowels: bool = False
    # True면 음절(완성형) 문자열, False면 자모(U+11xx) 문자열을 반환.
    to_syllables: bool = True
    # 규칙 적용 과정을 로그로 남길지 여부.
    verbose: bool = False


@dataclass(frozen=True)
class SequencerConfig:
    """
    텍스트 -> 음소/톤/언어 ID 시퀀스 변환 설정.

    모델 설정 파일(config.json)을 지정하면 그 안의 `symbols`,
    `data.add_blank` 값이 아래 기본값보다 우선한다.
    """

    # 언어 코드. language_id_map / language_tone_start_map에 없으면 ConfigurationError.
    language: str = "KR"
    # 음소 ID 사이사이에 blank ID를 끼워 넣을지 여부.
    add_blank: bool = True
    # intersperse에 사용하는 blank ID.
    blank_id: int = 0

    # BERT vocab.txt 경로. None이면 bert_model_id 또는 내장 문자 단위 vocab을 사용.
    bert_vocab_path: Path | None = None
    # Hugging Face 토크나이저 ID. use_pretrained_vocab=True일 때만 로드한다.
    bert_model_id: str = "kykim/bert-kor-base"
    # bert_model_id에서 vocab을 내려받을지 여부.
    use_pretrained_vocab: bool = False

    # 모델 설정 파일(config.json) 경로.
    model_config_path: Path | None = None

    # 발음 규칙 엔진 설정.
    g2p: G2pConfig = field(default_factory=G2pConfig)


def load_model_config(config_path: Path) -> dict:
    """
    모델 설정 파일(config.json)을 dict로 읽는다.

    Args:
        config_path: UTF-8 JSON 파일 경로.

    Returns:
        dict: 파싱된 설정. 필요한 키가 없으면 호출 측에서 기본값을 사용한다.

    Raises:
        FileNotFoundError: 파일이 없는 경우.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"model config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)
