"""
한글 음절 <-> 자모 변환 모듈

유니코드 한글 음절 조합 규칙:
- '가'(U+AC00)부터 음절이 순서대로 배치되어 있다.
- 각 음절은 초성 19개 * 중성 21개 * 종성 28개(받침 없음 포함) 조합으로 인덱싱된다.
- 공식:
    code = HANGUL_BASE + (lead_index * 21 + vowel_index) * 28 + tail_index
  (21 * 28 = 588)

표기 형태:
- JamoTriple은 호환 자모(U+31xx, HCJ) 문자로 초/중/종성을 담는다. (발음 규칙 테이블용)
- hangul_to_jamo / h2j는 조합형 자모(U+11xx) 문자를 돌려준다. (음소 심볼용)
"""

import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Iterable, NamedTuple

from ..errors import InvalidJamoError

logger = logging.getLogger(__name__)

HANGUL_BASE = 0xAC00
HANGUL_LAST = 0xD7A3

JAMO_LEAD_OFFSET = 0x10FF
JAMO_VOWEL_OFFSET = 0x1160
JAMO_TAIL_OFFSET = 0x11A7

NUM_LEADS = 19
NUM_VOWELS = 21
NUM_TAILS = 28

# 초성 자음 (호환 자모)
LEADS = [
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
]

# 중성 모음 (호환 자모)
VOWELS = [
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ", "ㅗ", "ㅘ",
    "ㅙ", "ㅚ", "ㅛ", "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ", "ㅡ", "ㅢ", "ㅣ",
]

# 종성 자음 (호환 자모). 0번은 받침 없음.
TAILS = [
    "", "ㄱ", "ㄲ", "ㄳ", "ㄴ", "ㄵ", "ㄶ", "ㄷ", "ㄹ", "ㄺ",
    "ㄻ", "ㄼ", "ㄽ", "ㄾ", "ㄿ", "ㅀ", "ㅁ", "ㅂ", "ㅄ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
]

# 현대 조합형 자모 (U+1100~U+1112, U+1161~U+1175, U+11A8~U+11C2)
JAMO_LEADS_MODERN = [chr(c) for c in range(0x1100, 0x1113)]
JAMO_VOWELS_MODERN = [chr(c) for c in range(0x1161, 0x1176)]
JAMO_TAILS_MODERN = [chr(c) for c in range(0x11A8, 0x11C3)]

# 호환 자모와 조합형 자모 모두 같은 인덱스로 찾을 수 있게 한다.
_LEAD_INDEX = {**{c: i for i, c in enumerate(LEADS)}, **{c: i for i, c in enumerate(JAMO_LEADS_MODERN)}}
_VOWEL_INDEX = {**{c: i for i, c in enumerate(VOWELS)}, **{c: i for i, c in enumerate(JAMO_VOWELS_MODERN)}}
_TAIL_INDEX = {
    **{c: i for i, c in enumerate(TAILS)},
    **{c: i + 1 for i, c in enumerate(JAMO_TAILS_MODERN)},
}


class JamoTriple(NamedTuple):
    """한 음절의 초성/중성/종성. tail이 빈 문자열이면 받침 없음."""

    lead: str
    vowel: str
    tail: str = ""


class ComposeResult(NamedTuple):
    """
    조합 결과.

    fallback이 True면 초/중성 인덱스를 찾지 못해 자모를 그대로 이어 붙인 것이다.
    """

    text: str
    fallback: bool


# 문자 분류


def is_hangul_char(character: str) -> bool:
    """U+AC00 ~ U+D7A3 완성형 음절인지 검사한다."""
    if not character:
        return False
    return HANGUL_BASE <= ord(character[0]) <= HANGUL_LAST


def is_hcj(character: str) -> bool:
    """호환 자모(U+3131 ~ U+318E, U+3164 HANGUL FILLER 제외)인지 검사한다."""
    if not character:
        return False
    code = ord(character[0])
    return 0x3131 <= code <= 0x318E and code != 0x3164


def is_hcj_modern(character: str) -> bool:
    """현대 한글에서 쓰이는 호환 자모(U+3131 ~ U+3163)인지 검사한다."""
    if not character:
        return False
    return 0x3131 <= ord(character[0]) <= 0x3163


def is_jamo(character: str) -> bool:
    """조합형 자모(확장 블록 포함) 또는 호환 자모인지 검사한다."""
    if not character:
        return False
    code = ord(character[0])
    return (
        0x1100 <= code <= 0x11FF
        or 0xA960 <= code <= 0xA97C
        or 0xD7B0 <= code <= 0xD7C6
        or 0xD7CB <= code <= 0xD7FB
        or is_hcj(character)
    )


def is_jamo_modern(character: str) -> bool:
    """현대 한글 자모(조합형 또는 호환)인지 검사한다."""
    if not character:
        return False
    code = ord(character[0])
    return (
        0x1100 <= code <= 0x1112
        or 0x1161 <= code <= 0x1175
        or 0x11A8 <= code <= 0x11C2
        or is_hcj_modern(character)
    )


def get_jamo_class(jamo: str) -> str:
    """
    조합형 자모가 초성/중성/종성 중 무엇인지 판별한다.

    호환 자모 모음(ㅏ~ㅣ)은 위치가 모호하지 않으므로 "vowel"로 판별한다.

    Returns:
        str: "lead" / "vowel" / "tail"

    Raises:
        InvalidJamoError: 분류할 수 없는 문자인 경우.
    """
    if not jamo:
        raise InvalidJamoError("Invalid or classless jamo argument.", jamo)

    code = ord(jamo[0])
    if 0x1100 <= code <= 0x115F or 0xA960 <= code <= 0xA97C:
        return "lead"
    if 0x1160 <= code <= 0x11A7 or 0xD7B0 <= code <= 0xD7C6 or 0x314F <= code <= 0x3163:
        return "vowel"
    if 0x11A8 <= code <= 0x11FF or 0xD7CB <= code <= 0xD7FB:
        return "tail"
    raise InvalidJamoError("Invalid or classless jamo argument.", jamo)


# 음절 분해/조합


def decompose(syllable: str) -> JamoTriple | str:
    """
    완성형 음절 하나를 JamoTriple(호환 자모)로 분해한다.

    한글 음절이 아닌 입력은 그대로 돌려준다. 호출 측은 is_hangul_char로 분기하거나
    반환 타입으로 구분해야 한다.
    """
    if len(syllable) != 1 or not is_hangul_char(syllable):
        return syllable

    code = ord(syllable) - HANGUL_BASE
    lead_index, rem = divmod(code, NUM_VOWELS * NUM_TAILS)
    vowel_index, tail_index = divmod(rem, NUM_TAILS)
    return JamoTriple(LEADS[lead_index], VOWELS[vowel_index], TAILS[tail_index])


def compose_checked(lead: str, vowel: str, tail: str = "") -> ComposeResult:
    """
    초/중/종성을 완성형 음절로 조합한다. (호환 자모, 조합형 자모 모두 허용)

    초성이나 중성 인덱스를 찾지 못하면 세 요소를 그대로 이어 붙이고
    fallback=True를 표시한다. 종성을 찾지 못한 경우도 같다.
    """
    lead_index = _LEAD_INDEX.get(lead)
    vowel_index = _VOWEL_INDEX.get(vowel)
    tail_index = _TAIL_INDEX.get(tail or "")
    if lead_index is None or vowel_index is None or tail_index is None:
        return ComposeResult(lead + vowel + (tail or ""), True)

    code = HANGUL_BASE + (lead_index * NUM_VOWELS + vowel_index) * NUM_TAILS + tail_index
    return ComposeResult(chr(code), False)


def compose(triple: JamoTriple | Iterable[str]) -> str:
    """JamoTriple(또는 (lead, vowel[, tail]) 시퀀스)을 음절 문자열로 조합한다. 실패해도 예외는 없다."""
    return compose_checked(*triple).text


def hangul_to_jamo(text: str) -> list[str]:
    """
    문자열의 한글 음절을 조합형 자모(U+11xx) 리스트로 분해한다.

    - 받침이 없으면 종성 자모는 생략한다.
    - 한글 음절이 아닌 문자는 그대로 유지한다.

    예: "강!" -> ['ᄀ', 'ᅡ', 'ᆼ', '!']
    """
    out: list[str] = []
    for ch in text:
        if not is_hangul_char(ch):
            out.append(ch)
            continue

        code = ord(ch) - HANGUL_BASE
        tail = code % NUM_TAILS
        vowel = 1 + (code % (NUM_VOWELS * NUM_TAILS)) // NUM_TAILS
        lead = 1 + code // (NUM_VOWELS * NUM_TAILS)

        out.append(chr(lead + JAMO_LEAD_OFFSET))
        out.append(chr(vowel + JAMO_VOWEL_OFFSET))
        if tail:
            out.append(chr(tail + JAMO_TAIL_OFFSET))
    return out


def h2j(text: str) -> str:
    """hangul_to_jamo의 문자열 버전."""
    return "".join(hangul_to_jamo(text))


# 유니코드 이름 기반 변환 (조합형 자모 <-> 호환 자모)

_HANGUL_CLASS_RE = re.compile(r"(?<=HANGUL )\w+")
_POSITION_CLASS = {"lead": "CHOSEONG", "vowel": "JUNGSEONG", "tail": "JONGSEONG"}


class JamoNameTable:
    """
    자모 문자 <-> 유니코드 이름 테이블.

    외부 JSON 테이블(문자 -> 이름)을 주면 그것을 먼저 찾고, 없는 항목은
    인터프리터 내장 유니코드 이름 DB(unicodedata)로 해석한다.
    """

    def __init__(self, names: dict[str, str] | None = None):
        self._names = dict(names or {})
        self._reverse = {name: ch for ch, name in self._names.items()}

    @classmethod
    def from_json(cls, *paths: Path) -> "JamoNameTable":
        """
        U+11xx.json / U+31xx.json 형식의 파일들을 읽는다.

        파일이 없거나 파싱할 수 없으면 경고만 남기고 내장 이름 DB로 대체한다.
        """
        names: dict[str, str] = {}
        for path in paths:
            path = Path(path)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    names.update(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("jamo name table unavailable (%s): %s; using built-in names", path, e)
        return cls(names)

    def name(self, character: str) -> str | None:
        if character in self._names:
            return self._names[character]
        return unicodedata.name(character, None)

    def lookup(self, name: str) -> str | None:
        if name in self._reverse:
            return self._reverse[name]
        try:
            return unicodedata.lookup(name)
        except KeyError:
            return None


DEFAULT_NAME_TABLE = JamoNameTable()


def jamo_to_hcj(data: Iterable[str], table: JamoNameTable = DEFAULT_NAME_TABLE) -> list[str]:
    """조합형 자모를 호환 자모로 바꾼다. 변환할 수 없는 문자는 그대로 둔다."""
    out = []
    for ch in data:
        converted = ch
        if is_jamo(ch) and not is_hcj(ch):
            name = table.name(ch)
            if name:
                converted = table.lookup(_HANGUL_CLASS_RE.sub("LETTER", name, count=1)) or ch
        out.append(converted)
    return out


def j2hcj(jamo: str, table: JamoNameTable = DEFAULT_NAME_TABLE) -> str:
    """jamo_to_hcj의 문자열 버전."""
    return "".join(jamo_to_hcj(jamo, table))


def hcj_to_jamo(hcj_char: str, position: str = "vowel", table: JamoNameTable = DEFAULT_NAME_TABLE) -> str:
    """
    호환 자모 한 글자를 지정한 위치(lead/vowel/tail)의 조합형 자모로 바꾼다.

    해당 위치에 대응하는 조합형 자모가 없으면(예: 종성 자리의 ㅏ) 입력을 그대로 돌려준다.
    """
    jamo_class = _POSITION_CLASS.get(position)
    if jamo_class is None or not hcj_char:
        return hcj_char

    name = table.name(hcj_char)
    if not name:
        return hcj_char
    return table.lookup(_HANGUL_CLASS_RE.sub(jamo_class, name, count=1)) or hcj_char


hcj2j = hcj_to_jamo


def jamo_to_hangul(lead: str, vowel: str, tail: str = "") -> str:
    """
    자모(조합형 또는 호환)를 검증한 뒤 완성형 음절로 조합한다.

    compose와 달리 잘못된 입력에 대해 예외를 던진다.

    Raises:
        InvalidJamoError: 초/중/종성 위치가 맞지 않거나 현대 음절로 조합할 수 없는 경우.
    """
    jamo_lead = hcj_to_jamo(lead, "lead")
    jamo_vowel = hcj_to_jamo(vowel, "vowel")
    jamo_tail = hcj_to_jamo(tail, "tail") if tail else ""

    if not is_jamo(jamo_lead) or get_jamo_class(jamo_lead) != "lead":
        raise InvalidJamoError("Invalid lead consonant", lead)
    if not is_jamo(jamo_vowel) or get_jamo_class(jamo_vowel) != "vowel":
        raise InvalidJamoError("Invalid vowel", vowel)
    if jamo_tail and (not is_jamo(jamo_tail) or get_jamo_class(jamo_tail) != "tail"):
        raise InvalidJamoError("Invalid tail consonant", tail)

    result = compose_checked(jamo_lead, jamo_vowel, jamo_tail)
    if result.fallback:
        raise InvalidJamoError("Could not synthesize characters to Hangul.", jamo_lead)
    return result.text


j2h = jamo_to_hangul
