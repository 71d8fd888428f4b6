"""
한국어 TTS 입력 텍스트 정규화 모듈

이 모듈이 하는 일
- 발음 규칙을 적용하기 전에 "읽을 수 있는 한국어 문장"으로 텍스트를 바꿉니다.
  - 슬랭/줄임말(ㅇㅈ, ㄱㅅ ...) 풀어쓰기
  - 단독 자음/모음 글자 읽기 (ㅋㅋㅋ -> 크, ㄷ -> 디귿)
  - 영문 대문자 약어 분리, 괄호 내용 펼치기, 따옴표 제거
  - 숫자(소수/시각/분/콤마 정수) 한국어 읽기
  - 특수문자 제거, 공백 정리, 소문자화
  - 문장부호 앞뒤 띄어쓰기

단계 순서가 중요합니다. 뒤 단계는 앞 단계의 치환이 끝났다고 가정합니다.
모든 함수는 입력 문자열만 보고 결과를 돌려주는 순수 함수이며, 예외를 던지지 않습니다.
"""

import re

# 1. 슬랭/줄임말

SLANG_MAP = {
    "ㅇㅈ": "인정", "ㄹㅇ": "레알", "ㄴㄴ": "노노", "ㅂㅂ": "바이바이",
    "ㄱㅅ": "감사", "ㄱㅅㅇ": "감사요", "ㅈㅅ": "죄송", "ㅅㄱ": "수고",
    "ㅊㅋ": "축하", "ㅎㅇ": "하이", "ㅂㅇ": "바이", "ㄷㄷ": "덜덜",
    "ㅎㄷㄷ": "후덜덜", "ㅆㅇㅈ": "쌉인정", "ㄱㅊ": "괜찮", "ㅇㅋ": "오케이",
    "ㄱㄷ": "기달", "ㅈㄱㅊㅇ": "정글차이", "ㅈㄱㄴ": "제곧내", "ㅇㄷ": "어디",
    "ㅁㅊ": "미친", "ㅅㅂ": "시발", "ㅈㄴ": "존나", "ㅆㅂ": "씨발",
    "ㄲㅂ": "까비", "ㅄ": "병신", "ㅂㅅ": "병신", "ㅅㅌㅊ": "상타치",
    "ㅎㅌㅊ": "하타치", "ㄴㅇㅅ": "노양심", "ㅇㄱㄹㅇ": "이거레알",
    "ㅇㅉ": "어쩔", "ㅈㅇ": "존예", "ㅈㅈ": "지지", "ㅉㅉ": "쯧쯧",
    "ㄱㅇㄷ": "개이득", "ㅇㅅㅇ": "응슷응",
}

# 2. 단독 자음

# 반복되는 웃음/추임새 자음은 길이와 상관없이 음절 하나로 줄인다.
REPEATED_LETTER_MAP = {
    "ㅋ": "크", "ㅎ": "하", "ㅠ": "유", "ㅜ": "우", "ㅇ": "응", "ㄱ": "고",
}

CONSONANT_NAMES = {
    "ㄱ": "기역", "ㄴ": "니은", "ㄷ": "디귿", "ㄹ": "리을",
    "ㅁ": "미음", "ㅂ": "비읍", "ㅅ": "시옷", "ㅇ": "이응",
    "ㅈ": "지읒", "ㅊ": "치읓", "ㅋ": "키읔", "ㅌ": "티읕",
    "ㅍ": "피읖", "ㅎ": "히읗",
    "ㄲ": "쌍기역", "ㄸ": "쌍디귿", "ㅃ": "쌍비읍",
    "ㅆ": "쌍시옷", "ㅉ": "쌍지읒",
}

# 3. 단독 모음

VOWEL_NAMES = {
    "ㅏ": "아", "ㅑ": "야", "ㅓ": "어", "ㅕ": "여",
    "ㅗ": "오", "ㅛ": "요", "ㅜ": "우", "ㅠ": "유",
    "ㅡ": "으", "ㅣ": "이", "ㅐ": "애", "ㅒ": "얘",
    "ㅔ": "에", "ㅖ": "예", "ㅘ": "와", "ㅙ": "왜",
    "ㅚ": "외", "ㅝ": "워", "ㅞ": "웨", "ㅟ": "위", "ㅢ": "의",
}

# 영문 알파벳 -> 한국어 읽기 (발음 규칙 엔진 진입 시 사용)
ENGLISH_LETTER_NAMES = {
    "a": "에이", "b": "비", "c": "씨", "d": "디", "e": "이",
    "f": "에프", "g": "지", "h": "에이치", "i": "아이", "j": "제이",
    "k": "케이", "l": "엘", "m": "엠", "n": "엔", "o": "오",
    "p": "피", "q": "큐", "r": "알", "s": "에스", "t": "티",
    "u": "유", "v": "브이", "w": "더블유", "x": "엑스", "y": "와이", "z": "제트",
}

# 숫자 뒤에 붙는 단위 -> 한국어 읽기
UNIT_MAP = {
    "km": "킬로미터",
    "kg": "킬로그램",
    "cm": "센티미터",
    "mm": "밀리미터",
    "ml": "밀리리터",
    "%": "퍼센트",
}

# 한 자리 숫자 (한자어)
DIGIT_NAMES = ["영", "일", "이", "삼", "사", "오", "육", "칠", "팔", "구"]

# 10^i 자리 단위 (i=0..3)
_SMALL_UNITS = ["", "십", "백", "천"]

# 10,000 단위 블록에 붙는 큰 단위
_BIG_UNITS = ["", "만", "억", "조", "경"]

# 1~12시는 고유어 수사로 읽는다.
NATIVE_HOURS = {
    1: "한", 2: "두", 3: "세", 4: "네", 5: "다섯",
    6: "여섯", 7: "일곱", 8: "여덟", 9: "아홉", 10: "열",
    11: "열한", 12: "열두",
}

SENTENCE_PUNCTUATION = ".,!?"


def _alternation(keys) -> re.Pattern:
    # 긴 키가 먼저 시도되도록 정렬한다.
    return re.compile("|".join(re.escape(k) for k in sorted(keys, key=len, reverse=True)))


_SLANG_RE = _alternation(SLANG_MAP)
_REPEATED_LETTER_RE = re.compile("|".join(f"{re.escape(ch)}+" for ch in REPEATED_LETTER_MAP))
_CONSONANT_TABLE = str.maketrans({k: v for k, v in CONSONANT_NAMES.items() if k not in REPEATED_LETTER_MAP})
_VOWEL_TABLE = str.maketrans(VOWEL_NAMES)
_QUOTE_TABLE = str.maketrans("", "", "\"'“”‘’")
_UNIT_RE = re.compile(r"(\d)\s*(" + "|".join(re.escape(u) for u in UNIT_MAP) + r")(?![A-Za-z])")


def expand_slang(text: str) -> str:
    """슬랭/줄임말을 풀어쓴다. 같은 위치에서는 가장 긴 키가 우선한다."""
    return _SLANG_RE.sub(lambda m: SLANG_MAP[m.group()], text)


def spell_jamo_letters(text: str) -> str:
    """
    단독 자음/모음 글자를 읽는 형태로 바꾼다.

    - ㅋ/ㅎ/ㅠ/ㅜ/ㅇ/ㄱ 연속은 길이에 상관없이 음절 하나 (ㅋㅋㅋㅋ -> 크)
    - 나머지 자음은 이름으로 (ㄷ -> 디귿)
    - 모음은 1:1 음절로 (ㅏ -> 아)
    """
    text = _REPEATED_LETTER_RE.sub(lambda m: REPEATED_LETTER_MAP[m.group()[0]], text)
    text = text.translate(_CONSONANT_TABLE)
    return text.translate(_VOWEL_TABLE)


def split_case_boundary(text: str) -> str:
    """영문 소문자 바로 뒤에 대문자가 오면 사이를 띄운다. (iPhone -> i Phone)"""
    return re.sub(r"([a-z])([A-Z])", r"\1 \2", text)


def flatten_parentheses(text: str) -> str:
    """
    괄호 안 내용을 꺼내고 괄호는 지운다.

    내용이 전부 대문자(약어)면 글자 단위로 띄어 쓴다. 어느 쪽이든 뒤에 공백을 붙인다.
    """

    def repl(m: re.Match) -> str:
        content = m.group(1)
        if content.isupper():
            return " ".join(content) + " "
        return content + " "

    return re.sub(r"\(([^)]+)\)", repl, text)


def strip_quotes(text: str) -> str:
    return text.translate(_QUOTE_TABLE)


def split_acronyms(text: str) -> str:
    """연속된 영문 대문자 2개 이상을 한 글자씩 띄운다. (KBS -> K B S)"""
    return re.sub(r"[A-Z]{2,}", lambda m: " ".join(m.group()), text)


def _convert_under_10000(n: int) -> str:
    """
    0 <= n <= 9999 범위의 숫자를 한국어로 읽는다.

    천/백/십 자리의 1은 "일"을 생략한다.
    예: 1203 -> "천이백삼", 9000 -> "구천", 1010 -> "천십"
    """
    res = []
    for i, unit in enumerate(_SMALL_UNITS):
        digit = (n // (10 ** i)) % 10
        if digit == 0:
            continue
        if digit == 1 and i > 0:
            res.append(unit)
        else:
            res.append(DIGIT_NAMES[digit] + unit)
    return "".join(reversed(res))


def number_to_korean(num: int) -> str:
    """
    정수를 한자어 수사로 읽는다. 10,000 단위로 끊어 만/억/조/경을 붙인다.

    예:
    - 0 -> "영"
    - 1000 -> "천"
    - 10000 -> "만"
    - 123456789 -> "일억이천삼백사십오만육천칠백팔십구"

    경(10^16) 단위를 넘는 수는 자리별로 읽는다.
    """
    if num == 0:
        return "영"
    if num >= 10 ** (4 * len(_BIG_UNITS)):
        return "".join(DIGIT_NAMES[int(d)] for d in str(num))

    result = []
    idx = 0
    while num > 0:
        num, block = divmod(num, 10000)
        if block > 0:
            part = _convert_under_10000(block)
            # "일만"은 "만"으로 읽는다. 억 이상은 "일억"처럼 그대로 둔다.
            if block == 1 and idx == 1:
                part = ""
            result.append(part + _BIG_UNITS[idx])
        idx += 1
    return "".join(reversed(result))


def _read_decimal(m: re.Match) -> str:
    integer_part, decimal_part = m.group().split(".")
    converted = number_to_korean(int(integer_part))
    return converted + "쩜" + "".join(DIGIT_NAMES[int(d)] for d in decimal_part)


def _read_hour(m: re.Match) -> str:
    hour = int(m.group(1))
    if hour in NATIVE_HOURS:
        return NATIVE_HOURS[hour] + "시"
    if hour <= 24:
        return number_to_korean(hour) + "시"
    # 24를 넘으면 시각이 아니므로 일반 숫자 단계에 맡긴다.
    return m.group()


def expand_units(text: str) -> str:
    """숫자 바로 뒤의 단위를 한국어 읽기로 바꾼다. (3kg -> 3 킬로그램)"""
    return _UNIT_RE.sub(lambda m: f"{m.group(1)} {UNIT_MAP[m.group(2)]}", text)


def expand_numbers(text: str) -> str:
    """
    숫자를 한국어 읽기로 바꾼다.

    처리 순서:
    1. 단위 (3kg -> 3 킬로그램)
    2. 소수 (3.5 -> 삼쩜오)
    3. 시각 (3시 -> 세시, 13시 -> 십삼시)
    4. 분 (30분 -> 삼십분)
    5. 콤마 포함 정수 (1,000 -> 천)
    """
    text = expand_units(text)
    text = re.sub(r"\d+\.\d+", _read_decimal, text)
    text = re.sub(r"(\d+)시", _read_hour, text)
    text = re.sub(r"(\d+)분", lambda m: number_to_korean(int(m.group(1))) + "분", text)
    text = re.sub(r"\d+(?:,\d+)*", lambda m: number_to_korean(int(m.group().replace(",", ""))), text)
    return text


def clean_text(text: str) -> str:
    """
    소문자화 후 문자/숫자/한글/공백/문장부호(.,!?) 이외의 문자를 지우고 공백을 정리한다.

    두 번 적용해도 결과가 같다.
    """
    text = text.lower()
    text = re.sub(r"[^\w\s가-힣.,!?]", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def space_punctuation(text: str) -> str:
    """한글/영문/숫자와 문장부호가 붙어 있으면 사이를 띄운다. (좋아요! -> 좋아요 !)"""
    text = re.sub(r"([가-힣a-zA-Z0-9])([.,!?])", r"\1 \2", text)
    return re.sub(r"([.,!?])([가-힣a-zA-Z0-9])", r"\1 \2", text)


def normalize_korean(text: str) -> str:
    """
    발음 변환 전 텍스트 정규화. (추론/전처리 공용)

    단계 순서는 고정이다.
    """
    text = expand_slang(text)
    text = spell_jamo_letters(text)
    text = split_case_boundary(text)
    text = flatten_parentheses(text)
    text = strip_quotes(text)
    text = split_acronyms(text)
    text = expand_numbers(text)
    text = clean_text(text)
    return space_punctuation(text)


def spell_english(text: str) -> str:
    """남은 영문 알파벳을 한 글자씩 한국어 읽기로 바꾼다. (abc -> 에이비씨)"""
    return re.sub(
        r"[A-Za-z]+",
        lambda m: "".join(ENGLISH_LETTER_NAMES[ch] for ch in m.group().lower()),
        text,
    )


def spell_digits(text: str) -> str:
    """남은 아라비아 숫자를 한 자리씩 한자어로 읽는다. (2024 -> 이영이사)"""
    return re.sub(r"[0-9]+", lambda m: "".join(DIGIT_NAMES[int(d)] for d in m.group()), text)


# 문장 분할 / 쉼 길이 (추론 시)


def prosody_split(text: str) -> list[str]:
    """
    긴 입력을 문장부호(.!? 및 전각 부호) 기준으로 나눈다. 구분자는 앞 조각에 붙여 보존한다.

    - 긴 문장을 한 번에 넣으면 BERT 최대 길이를 넘거나 운율이 어색해질 수 있다.
    - 구두점 없이 끝나는 꼬리 구간도 버리지 않는다.
    - 나눌 것이 없으면 원문 하나만 담아 돌려준다.
    """
    parts = re.split(r"([.!?。！？]+)", text)
    chunks: list[str] = []
    buf = ""
    for part in parts:
        if not part:
            continue
        buf += part
        if re.fullmatch(r"[.!?。！？]+", part):
            if buf.strip():
                chunks.append(buf.strip())
            buf = ""
    if buf.strip():
        chunks.append(buf.strip())
    return chunks or [text]


def prosody_pause(segment: str) -> float:
    """
    segment 끝의 구두점에 따라 segment 뒤에 넣을 쉼 길이(초)를 돌려준다.

    휴리스틱 값이다. 모델이 쉼까지 생성하도록 학습하지 않은 경우에 쓴다.
    """
    segment = segment.rstrip()
    if segment.endswith("."):
        return 0.35
    if segment.endswith(","):
        return 0.22
    if segment.endswith("!") or segment.endswith("?"):
        return 0.45
    return 0.18
