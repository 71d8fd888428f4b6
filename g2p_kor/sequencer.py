"""
텍스트 -> 음소 ID 시퀀스 변환기 (음향 모델 입력 준비)

처리 순서:
1. normalize_korean 으로 입력 정규화
2. WordPiece 토큰화 (단어 사이 SP, 이어지는 조각은 "##")
3. 토큰 그룹(한 단어)마다 발음 규칙 적용 후 조합형 자모로 분해
4. 그룹의 음소 수를 하위 토큰들에 distribute_phone 으로 나눠 word2ph 작성
5. 심볼 -> ID, 톤 offset, 언어 ID
6. (add_blank) blank ID 끼워 넣기와 word2ph 보정

정렬 규칙:
- sum(word2ph) == len(phones)
- len(word2ph) == len(tokens) + 2   (blank 전, 앞뒤 경계 포함)
어긋나면 AlignmentError 를 던진다. 임의로 채우거나 자르지 않는다.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping

from .config import SequencerConfig, load_model_config
from .errors import AlignmentError, ConfigurationError
from .text.jamo import hangul_to_jamo
from .text.normalizer import normalize_korean, prosody_split
from .text.rules import G2p
from .text.symbols import (
    LANGUAGE_ID_MAP,
    LANGUAGE_TONE_START_MAP,
    PAD,
    PUNCTUATION,
    SPACE_SYMBOL,
    SYMBOL_TO_ID,
    SYMBOLS,
    UNK_SYMBOL,
    symbol_to_id_map,
)
from .tokenizer import CONTINUATION_PREFIX, UNK_TOKEN, WordPieceTokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class G2pResult:
    phones: list[str]
    tones: list[int]
    word2ph: list[int]
    tokens: list[str]


@dataclass(frozen=True)
class SequenceResult:
    """
    발화 하나의 모델 입력 시퀀스.

    phones/tones/languages 길이는 항상 같고 sum(word2ph) == len(phones) 이다.
    """

    phones: list[int]
    tones: list[int]
    languages: list[int]
    word2ph: list[int]
    norm_text: str


def distribute_phone(n_phone: int, n_word: int) -> list[int]:
    """
    음소 n_phone 개를 하위 토큰 n_word 개에 나눠 준다.

    한 개씩 현재 가장 적게 받은 토큰에 주고, 동률이면 앞 토큰이 먼저 받는다.
    예: distribute_phone(5, 2) -> [3, 2], distribute_phone(1, 3) -> [1, 0, 0]
    """
    if n_word < 1:
        raise ValueError(f"n_word must be >= 1, got {n_word}")
    if n_phone < 0:
        raise ValueError(f"n_phone must be >= 0, got {n_phone}")

    phones_per_word = [0] * n_word
    for _ in range(n_phone):
        min_tasks = min(phones_per_word)
        min_index = phones_per_word.index(min_tasks)
        phones_per_word[min_index] += 1
    return phones_per_word


def korean_text_to_phonemes(text: str, engine: G2p | None = None) -> list[str]:
    """단어 하나를 조합형 자모 음소 리스트로 바꾼다. 공백은 음소로 치지 않는다."""
    engine = engine or G2p()
    text = re.sub(r"[<>]", "", text)
    text = normalize_korean(text)
    text = engine(text)
    return [ph for ph in hangul_to_jamo(text) if not ph.isspace()]


def _group_tokens(tokens: list[str]) -> list[list[str]]:
    # "##" 조각은 앞 그룹에 붙는다. [UNK] 는 항상 혼자 한 그룹이다.
    groups: list[list[str]] = []
    for token in tokens:
        if token.startswith(CONTINUATION_PREFIX) and groups and groups[-1] != [UNK_TOKEN]:
            groups[-1].append(token[len(CONTINUATION_PREFIX):])
        elif token.startswith(CONTINUATION_PREFIX):
            groups.append([token[len(CONTINUATION_PREFIX):]])
        else:
            groups.append([token])
    return groups


def check_alignment(phones: list, word2ph: list[int], n_tokens: int | None = None) -> None:
    """word2ph 정렬 규칙을 검사한다. 어긋나면 AlignmentError."""
    if sum(word2ph) != len(phones):
        raise AlignmentError(f"sum(word2ph)={sum(word2ph)} != len(phones)={len(phones)}")
    if n_tokens is not None and len(word2ph) != n_tokens + 2:
        raise AlignmentError(f"len(word2ph)={len(word2ph)} != len(tokens) + 2 = {n_tokens + 2}")
    if any(n < 0 for n in word2ph):
        raise AlignmentError(f"negative entry in word2ph: {word2ph}")


def g2p(norm_text: str, tokenizer: WordPieceTokenizer | None = None, engine: G2p | None = None) -> G2pResult:
    """
    정규화된 텍스트를 음소 문자열 리스트와 word2ph 로 바꾼다.

    - [UNK] 그룹은 "_" 음소 하나, SP 그룹은 "SP" 음소 하나, 문장부호는 그 자신 하나.
    - 나머지 그룹은 korean_text_to_phonemes 결과를 하위 토큰 수만큼 나눠 기록한다.
    - 앞뒤에 경계 음소 "_" 와 word2ph 1 을 붙인다.
    """
    tokenizer = tokenizer or WordPieceTokenizer()
    engine = engine or G2p()

    tokens = tokenizer.tokenize(norm_text)
    phs: list[str] = []
    word2ph: list[int] = []

    for group in _group_tokens(tokens):
        text = "".join(group)

        if text == UNK_TOKEN:
            phs.append(PAD)
            word2ph.append(1)
            continue
        if text == SPACE_SYMBOL:
            phs.append(SPACE_SYMBOL)
            word2ph.append(1)
            continue
        if text in PUNCTUATION:
            phs.append(text)
            word2ph.append(1)
            continue

        phonemes = korean_text_to_phonemes(text, engine)
        word2ph += distribute_phone(len(phonemes), len(group))
        phs += phonemes

    phones = [PAD] + phs + [PAD]
    tones = [0] * len(phones)
    word2ph = [1] + word2ph + [1]

    check_alignment(phones, word2ph, len(tokens))
    return G2pResult(phones, tones, word2ph, tokens)


def cleaned_text_to_sequence(
    phones: list[str],
    tones: list[int],
    language: str,
    symbol_to_id: Mapping[str, int] | None = None,
) -> tuple[list[int], list[int], list[int]]:
    """
    음소 문자열을 심볼 ID로 바꾸고 톤 offset 과 언어 ID 를 붙인다.

    Args:
        phones: 음소 문자열 리스트
        tones: 음소별 톤 (언어 offset 적용 전)
        language: "KR" 등 LANGUAGE_ID_MAP 의 키
        symbol_to_id: 심볼 -> ID. 기본값은 내장 SYMBOLS 순서.

    Returns:
        (phone_ids, tones, lang_ids)

    Raises:
        ConfigurationError: 알 수 없는 언어 이름
    """
    if language not in LANGUAGE_TONE_START_MAP or language not in LANGUAGE_ID_MAP:
        raise ConfigurationError(
            f"unknown language: {language!r} (available: {', '.join(LANGUAGE_ID_MAP)})"
        )
    symbol_to_id = SYMBOL_TO_ID if symbol_to_id is None else symbol_to_id
    unk_id = symbol_to_id.get(UNK_SYMBOL, 0)

    ids = []
    missing = []
    for ph in phones:
        if ph in symbol_to_id:
            ids.append(symbol_to_id[ph])
        else:
            ids.append(unk_id)
            missing.append(ph)
    if missing:
        logger.warning(
            "symbols not in vocab, using UNK id %d: %s",
            unk_id,
            " ".join(f"{s!r}(U+{ord(s[0]):04X})" for s in dict.fromkeys(missing)),
        )

    tone_start = LANGUAGE_TONE_START_MAP[language]
    tones = [t + tone_start for t in tones]
    lang_ids = [LANGUAGE_ID_MAP[language]] * len(ids)
    return ids, tones, lang_ids


def intersperse(lst: list, item) -> list:
    """[a, b] -> [item, a, item, b, item]"""
    result = [item] * (len(lst) * 2 + 1)
    result[1::2] = lst
    return result


class PhonemeSequencer:
    """
    원문 텍스트를 음향 모델 입력(SequenceResult)으로 바꾸는 진입점.

    사용 예:
        seq = PhonemeSequencer()
        out = seq("안녕하세요.")
        out.phones, out.tones, out.languages, out.word2ph

    테이블/토크나이저는 생성 시 한 번 준비하고 이후 바꾸지 않는다.
    """

    def __init__(self, config: SequencerConfig | None = None, tokenizer: WordPieceTokenizer | None = None):
        self.config = config or SequencerConfig()
        cfg = self.config

        if cfg.language not in LANGUAGE_ID_MAP or cfg.language not in LANGUAGE_TONE_START_MAP:
            raise ConfigurationError(
                f"unknown language: {cfg.language!r} (available: {', '.join(LANGUAGE_ID_MAP)})"
            )

        symbols = SYMBOLS
        add_blank = cfg.add_blank
        if cfg.model_config_path is not None:
            model_cfg = load_model_config(cfg.model_config_path)
            symbols = model_cfg.get("symbols") or symbols
            add_blank = model_cfg.get("data", {}).get("add_blank", add_blank)

        self.symbols = tuple(symbols)
        self.add_blank = bool(add_blank)
        self._symbol_to_id = symbol_to_id_map(list(self.symbols))
        self.engine = G2p(cfg.g2p)
        self.tokenizer = tokenizer or self._load_tokenizer()

    def _load_tokenizer(self) -> WordPieceTokenizer:
        cfg = self.config
        if cfg.bert_vocab_path is not None:
            return WordPieceTokenizer.from_file(cfg.bert_vocab_path)
        if cfg.use_pretrained_vocab:
            return WordPieceTokenizer.from_pretrained(cfg.bert_model_id)
        return WordPieceTokenizer()

    @property
    def symbol_to_id(self) -> Mapping[str, int]:
        return self._symbol_to_id

    def __call__(self, text: str) -> SequenceResult:
        cfg = self.config
        norm_text = normalize_korean(text)
        result = g2p(norm_text, self.tokenizer, self.engine)
        if cfg.g2p.verbose:
            logger.debug("norm_text=%s tokens=%s", norm_text, result.tokens)
            logger.debug("phones=%s word2ph=%s", result.phones, result.word2ph)

        phones, tones, languages = cleaned_text_to_sequence(
            result.phones, result.tones, cfg.language, self._symbol_to_id
        )
        word2ph = list(result.word2ph)

        if self.add_blank:
            phones = intersperse(phones, cfg.blank_id)
            tones = intersperse(tones, 0)
            languages = intersperse(languages, 0)
            word2ph = [n * 2 for n in word2ph]
            word2ph[0] += 1

        check_alignment(phones, word2ph)
        return SequenceResult(phones, tones, languages, word2ph, norm_text)

    def sequence_chunks(self, text: str) -> list[SequenceResult]:
        """긴 입력을 문장 단위로 나눠 각각 변환한다."""
        return [self(chunk) for chunk in prosody_split(text)]
