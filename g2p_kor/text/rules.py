"""
한국어 발음 규칙 엔진 (Grapheme-to-Phoneme)

완성형 음절 문자열을 한 글자씩 훑으며 다음 음절 하나를 미리 보고 규칙을 적용한다.

적용 우선순위 (음절 i, 다음 음절 i+1이 모두 한글일 때):
1. 연음: i의 받침이 있고 i+1의 초성이 ㅇ이면 받침이 다음 초성으로 넘어간다.
   겹받침은 한 글자만 넘어가고 나머지는 받침으로 남는다.
2. 자음 동화: 연음이 없고 받침이 있으면 (받침, 초성) 쌍을 테이블로 바꾼다.
3. 대표음: 받침이 남아 있고 i가 마지막 글자이거나 다음 글자가 한글이 아니면
   받침을 대표음(ㄱ/ㄴ/ㄷ/ㄹ/ㅁ/ㅂ/ㅇ)으로 바꾼다.

후처리 (설정으로 켜고 끔):
- descriptive: 구어체 음절 치환 (의 -> 에, 계 -> 게)
- group_vowels: 모음 단순화 (ㅒ -> ㅖ, ㅘ -> ㅗ, ㅙ -> ㅞ)
"""

import logging
from types import MappingProxyType

from ..config import G2pConfig
from .jamo import JamoTriple, compose, decompose, h2j
from .normalizer import spell_digits, spell_english

logger = logging.getLogger(__name__)

# 연음 시 겹받침/쌍받침 분리: 받침 -> (다음 초성으로 넘어가는 자음, 남는 받침)
# 여기 없는 홑받침은 통째로 넘어간다.
LIAISON_SPLITS = MappingProxyType({
    "ㅆ": ("ㅆ", ""),
    "ㄲ": ("ㄱ", "ㄱ"),
    "ㄳ": ("ㅅ", "ㄱ"),
    "ㄵ": ("ㅈ", "ㄴ"),
    "ㄶ": ("ㅎ", "ㄴ"),
    "ㄺ": ("ㄱ", "ㄹ"),
    "ㄻ": ("ㅁ", "ㄹ"),
    "ㄼ": ("ㅂ", "ㄹ"),
    "ㄽ": ("ㅅ", "ㄹ"),
    "ㄾ": ("ㅌ", "ㄹ"),
    "ㄿ": ("ㅍ", "ㄹ"),
    "ㅀ": ("ㅎ", "ㄹ"),
    "ㅄ": ("ㅅ", "ㅂ"),
})


# 된소리되기: 장애음 받침 뒤의 평음 초성
_TENSE = {"ㄱ": "ㄲ", "ㄷ": "ㄸ", "ㅂ": "ㅃ", "ㅅ": "ㅆ", "ㅈ": "ㅉ"}
_OBSTRUENT_TAILS = ("ㄱ", "ㄲ", "ㅋ", "ㄷ", "ㅅ", "ㅆ", "ㅈ", "ㅊ", "ㅌ", "ㅂ", "ㅍ")

_FORTITION = {(tail, lead): (tail, tense) for tail in _OBSTRUENT_TAILS for lead, tense in _TENSE.items()}

# 비음화/유음화/격음화
_NASAL_GROUPS = {
    "ㅇ": ("ㄱ", "ㄲ", "ㅋ", "ㄳ", "ㄺ"),
    "ㄴ": ("ㄷ", "ㅅ", "ㅆ", "ㅈ", "ㅊ", "ㅌ", "ㅎ"),
    "ㅁ": ("ㅂ", "ㅍ", "ㄼ", "ㄿ", "ㅄ"),
}
_NASALIZATION = {
    (tail, lead): (nasal, lead)
    for nasal, tails in _NASAL_GROUPS.items()
    for tail in tails
    for lead in ("ㄴ", "ㅁ")
}
_LIQUID = {
    ("ㄴ", "ㄹ"): ("ㄹ", "ㄹ"),
    ("ㄹ", "ㄴ"): ("ㄹ", "ㄹ"),
    ("ㅁ", "ㄹ"): ("ㅁ", "ㄴ"),
    ("ㅇ", "ㄹ"): ("ㅇ", "ㄴ"),
    ("ㄱ", "ㄹ"): ("ㅇ", "ㄴ"),
    ("ㅂ", "ㄹ"): ("ㅁ", "ㄴ"),
}
_ASPIRATION = {
    ("ㅎ", "ㄱ"): ("", "ㅋ"),
    ("ㅎ", "ㄷ"): ("", "ㅌ"),
    ("ㅎ", "ㅈ"): ("", "ㅊ"),
    ("ㄶ", "ㄱ"): ("ㄴ", "ㅋ"),
    ("ㄶ", "ㄷ"): ("ㄴ", "ㅌ"),
    ("ㄶ", "ㅈ"): ("ㄴ", "ㅊ"),
    ("ㅀ", "ㄱ"): ("ㄹ", "ㅋ"),
    ("ㅀ", "ㄷ"): ("ㄹ", "ㅌ"),
    ("ㅀ", "ㅈ"): ("ㄹ", "ㅊ"),
    ("ㄱ", "ㅎ"): ("", "ㅋ"),
    ("ㄷ", "ㅎ"): ("", "ㅌ"),
    ("ㅂ", "ㅎ"): ("", "ㅍ"),
    ("ㅈ", "ㅎ"): ("", "ㅊ"),
}

# (받침, 다음 초성) -> (받침, 다음 초성)
ASSIMILATION_RULES = MappingProxyType({**_FORTITION, **_NASALIZATION, **_LIQUID, **_ASPIRATION})

# 받침 -> 대표음. 단어 끝이나 한글이 아닌 문자 앞에서만 적용한다.
REPRESENTATIVE_SOUNDS = MappingProxyType({
    "ㄲ": "ㄱ", "ㅋ": "ㄱ", "ㄳ": "ㄱ", "ㄺ": "ㄱ",
    "ㅅ": "ㄷ", "ㅆ": "ㄷ", "ㅈ": "ㄷ", "ㅊ": "ㄷ", "ㅌ": "ㄷ", "ㅎ": "ㄷ",
    "ㅍ": "ㅂ", "ㄼ": "ㅂ", "ㄿ": "ㅂ", "ㅄ": "ㅂ",
    "ㄵ": "ㄴ", "ㄶ": "ㄴ",
    "ㄽ": "ㄹ", "ㄾ": "ㄹ", "ㅀ": "ㄹ",
    "ㄻ": "ㅁ",
})

DESCRIPTIVE_RULES = MappingProxyType({"의": "에", "계": "게"})

VOWEL_GROUPING = MappingProxyType({"ㅒ": "ㅖ", "ㅘ": "ㅗ", "ㅙ": "ㅞ"})

_DESCRIPTIVE_TABLE = str.maketrans(dict(DESCRIPTIVE_RULES))


def link_syllables(current: JamoTriple, following: JamoTriple, verbose: bool = False) -> tuple[JamoTriple, JamoTriple]:
    """
    인접한 두 음절에 연음 또는 자음 동화를 적용한다. 연음이 우선한다.

    Returns:
        tuple: 바뀐 (current, following). 적용할 규칙이 없으면 입력 그대로.
    """
    if not current.tail:
        return current, following

    if following.lead == "ㅇ":
        moving, remaining = LIAISON_SPLITS.get(current.tail, (current.tail, ""))
        linked = current._replace(tail=remaining), following._replace(lead=moving)
        if verbose:
            logger.info("liaison: %s + %s -> %s + %s", compose(current), compose(following), *map(compose, linked))
        return linked

    rewrite = ASSIMILATION_RULES.get((current.tail, following.lead))
    if rewrite is None:
        return current, following

    tail, lead = rewrite
    assimilated = current._replace(tail=tail), following._replace(lead=lead)
    if verbose:
        logger.info("assimilation: %s + %s -> %s + %s", compose(current), compose(following), *map(compose, assimilated))
    return assimilated


def neutralize(syllable: JamoTriple) -> JamoTriple:
    """받침을 대표음으로 바꾼다. 테이블에 없는 받침(ㄴ/ㄷ/ㄹ/ㅁ/ㅂ/ㅇ/ㄱ)은 그대로 둔다."""
    return syllable._replace(tail=REPRESENTATIVE_SOUNDS.get(syllable.tail, syllable.tail))


def apply_phonetic_rules(text: str, verbose: bool = False) -> str:
    """
    연음 -> 자음 동화 -> 대표음 순서로 문자열 전체에 한 번 적용한다.

    다음 음절에 적용된 변화(넘어간 초성 등)는 그 음절을 처리할 때 그대로 이어진다.
    한글이 아닌 문자는 건드리지 않는다.
    """
    units = [decompose(ch) for ch in text]
    out = []

    for i, current in enumerate(units):
        if not isinstance(current, JamoTriple):
            out.append(current)
            continue

        following = units[i + 1] if i + 1 < len(units) else None
        if isinstance(following, JamoTriple):
            current, units[i + 1] = link_syllables(current, following, verbose=verbose)
        elif current.tail:
            neutralized = neutralize(current)
            if verbose and neutralized != current:
                logger.info("representative sound: %s -> %s", compose(current), compose(neutralized))
            current = neutralized

        out.append(compose(current))

    return "".join(out)


def apply_descriptive_rules(text: str) -> str:
    return text.translate(_DESCRIPTIVE_TABLE)


def apply_vowel_grouping(text: str) -> str:
    out = []
    for ch in text:
        syllable = decompose(ch)
        if isinstance(syllable, JamoTriple) and syllable.vowel in VOWEL_GROUPING:
            ch = compose(syllable._replace(vowel=VOWEL_GROUPING[syllable.vowel]))
        out.append(ch)
    return "".join(out)


class G2p:
    """
    한국어 G2P 변환기.

    사용 예:
        g2p = G2p()
        g2p("있어요")  # -> "이써요"
        G2p(G2pConfig(to_syllables=False))("밖")  # -> U+1107 U+1161 U+11A8

    to_syllables=False 이면 호환 자모(U+31xx)가 아니라 조합형 자모(U+11xx)를 돌려준다.
    음소 심볼 테이블과 같은 형태이므로 바로 ID 로 바꿀 수 있다.

    인스턴스는 설정만 들고 있으며 호출 사이에 상태가 없다. 여러 스레드에서 공유해도 된다.
    """

    def __init__(self, config: G2pConfig | None = None):
        self.config = config or G2pConfig()

    def __call__(self, text: str) -> str:
        cfg = self.config
        if cfg.verbose:
            logger.info("g2p input: %s", text)

        # 숫자/영문은 읽는 형태로 먼저 바꾼다.
        result = spell_digits(text)
        result = spell_english(result)

        result = apply_phonetic_rules(result, verbose=cfg.verbose)

        if cfg.descriptive:
            result = apply_descriptive_rules(result)
        if cfg.group_vowels:
            result = apply_vowel_grouping(result)
        if not cfg.to_syllables:
            result = h2j(result)

        if cfg.verbose:
            logger.info("g2p output: %s", result)
        return result
