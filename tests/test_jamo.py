"""
한글 음절 <-> 자모 변환 테스트.
"""
import json
import tempfile
import unittest
from pathlib import Path

from g2p_kor.errors import InvalidJamoError
from g2p_kor.text.jamo import (
    HANGUL_BASE,
    HANGUL_LAST,
    ComposeResult,
    JamoNameTable,
    JamoTriple,
    compose,
    compose_checked,
    decompose,
    get_jamo_class,
    h2j,
    hangul_to_jamo,
    hcj2j,
    hcj_to_jamo,
    is_hangul_char,
    is_hcj,
    is_hcj_modern,
    is_jamo,
    is_jamo_modern,
    j2h,
    j2hcj,
    jamo_to_hangul,
    jamo_to_hcj,
)


class TestDecomposeCompose(unittest.TestCase):
    """분해/조합 테스트."""

    def test_round_trip_all_syllables(self):
        """11,172개 음절 전체가 분해 후 조합하면 원래 음절로 돌아온다."""
        for code in range(HANGUL_BASE, HANGUL_LAST + 1):
            ch = chr(code)
            self.assertEqual(compose(decompose(ch)), ch)

    def test_decompose(self):
        self.assertEqual(decompose("한"), JamoTriple("ㅎ", "ㅏ", "ㄴ"))
        self.assertEqual(decompose("가"), JamoTriple("ㄱ", "ㅏ", ""))
        self.assertEqual(decompose("닭"), JamoTriple("ㄷ", "ㅏ", "ㄺ"))

    def test_decompose_passthrough(self):
        """한글 음절이 아닌 입력은 그대로 돌려준다."""
        self.assertEqual(decompose("a"), "a")
        self.assertEqual(decompose("ㄱ"), "ㄱ")
        self.assertEqual(decompose("가나"), "가나")
        self.assertEqual(decompose(""), "")

    def test_compose_accepts_both_forms(self):
        """호환 자모와 조합형 자모 모두 조합할 수 있다."""
        self.assertEqual(compose(("ㄱ", "ㅏ")), "가")
        self.assertEqual(compose(("ᄀ", "ᅡ", "ᆨ")), "각")

    def test_compose_fallback(self):
        """조합할 수 없으면 이어 붙이고 fallback 을 표시한다."""
        self.assertEqual(compose_checked("ㄱ", "ㅏ"), ComposeResult("가", False))
        self.assertEqual(compose_checked("x", "ㅏ"), ComposeResult("xㅏ", True))
        self.assertEqual(compose_checked("ㄱ", "ㄱ", "ㄱ"), ComposeResult("ㄱㄱㄱ", True))
        self.assertEqual(compose(("x", "ㅏ")), "xㅏ")


class TestJamoStream(unittest.TestCase):
    """조합형 자모 스트림 테스트."""

    def test_hangul_to_jamo(self):
        self.assertEqual(hangul_to_jamo("강!"), ["ᄀ", "ᅡ", "ᆼ", "!"])

    def test_no_tail_symbol_for_open_syllable(self):
        self.assertEqual(hangul_to_jamo("하"), ["ᄒ", "ᅡ"])

    def test_h2j(self):
        self.assertEqual(h2j("안녕"), "\u110b\u1161\u11ab\u1102\u1167\u11bc")
        self.assertEqual(h2j("a b"), "a b")


class TestClassification(unittest.TestCase):
    """문자 분류 테스트."""

    def test_is_hangul_char(self):
        self.assertTrue(is_hangul_char("가"))
        self.assertTrue(is_hangul_char("힣"))
        self.assertFalse(is_hangul_char("a"))
        self.assertFalse(is_hangul_char("ㄱ"))
        self.assertFalse(is_hangul_char(""))

    def test_is_hcj(self):
        self.assertTrue(is_hcj("ㄱ"))
        self.assertTrue(is_hcj("ㅣ"))
        self.assertFalse(is_hcj("\u3164"))
        self.assertFalse(is_hcj("ᄀ"))
        self.assertTrue(is_hcj_modern("ㅎ"))
        self.assertFalse(is_hcj_modern("ㅥ"))

    def test_is_jamo(self):
        self.assertTrue(is_jamo("ᄀ"))
        self.assertTrue(is_jamo("ᄓ"))
        self.assertTrue(is_jamo("ㄱ"))
        self.assertFalse(is_jamo("가"))
        self.assertTrue(is_jamo_modern("ᄀ"))
        self.assertFalse(is_jamo_modern("ᄓ"))

    def test_get_jamo_class(self):
        self.assertEqual(get_jamo_class("ᄀ"), "lead")
        self.assertEqual(get_jamo_class("ᅡ"), "vowel")
        self.assertEqual(get_jamo_class("ᆨ"), "tail")
        self.assertEqual(get_jamo_class("ㅏ"), "vowel")

    def test_get_jamo_class_invalid(self):
        with self.assertRaises(InvalidJamoError):
            get_jamo_class("a")
        with self.assertRaises(InvalidJamoError):
            get_jamo_class("")


class TestNameConversion(unittest.TestCase):
    """유니코드 이름 기반 변환 테스트."""

    def test_jamo_to_hcj(self):
        self.assertEqual(j2hcj("\u1100\u1161\u11a8"), "ㄱㅏㄱ")
        self.assertEqual(jamo_to_hcj(["ᄀ", "a"]), ["ㄱ", "a"])

    def test_hcj_to_jamo(self):
        self.assertEqual(hcj_to_jamo("ㄱ", "lead"), "ᄀ")
        self.assertEqual(hcj_to_jamo("ㅏ"), "ᅡ")
        self.assertEqual(hcj_to_jamo("ㄱ", "tail"), "ᆨ")
        self.assertIs(hcj2j, hcj_to_jamo)

    def test_hcj_to_jamo_no_counterpart(self):
        """해당 위치의 조합형 자모가 없으면 입력 그대로."""
        self.assertEqual(hcj_to_jamo("ㅏ", "tail"), "ㅏ")
        self.assertEqual(hcj_to_jamo("ㄱ", "unknown"), "ㄱ")

    def test_jamo_to_hangul(self):
        self.assertEqual(jamo_to_hangul("ㄱ", "ㅏ", "ㄴ"), "간")
        self.assertEqual(j2h("ᄀ", "ᅡ"), "가")

    def test_jamo_to_hangul_invalid(self):
        """엄격 모드는 잘못된 위치의 자모에 예외를 던진다."""
        with self.assertRaises(InvalidJamoError):
            jamo_to_hangul("ㅏ", "ㄱ")
        with self.assertRaises(ValueError):
            jamo_to_hangul("ㄱ", "ㄴ")

    def test_invalid_jamo_error_message(self):
        with self.assertRaises(InvalidJamoError) as cm:
            jamo_to_hangul("ㅏ", "ㄱ")
        self.assertIn("U+314F", str(cm.exception))


class TestJamoNameTable(unittest.TestCase):
    """이름 테이블 테스트."""

    def test_missing_file_falls_back(self):
        """테이블 파일이 없으면 경고 후 내장 이름 DB를 쓴다."""
        with self.assertLogs("g2p_kor.text.jamo", level="WARNING"):
            table = JamoNameTable.from_json(Path("/nonexistent/U+11xx.json"))
        self.assertEqual(table.name("ㄱ"), "HANGUL LETTER KIYEOK")
        self.assertEqual(j2hcj("ᄀ", table), "ㄱ")

    def test_json_table(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "U+31xx.json"
            path.write_text(json.dumps({"ㄱ": "HANGUL LETTER KIYEOK"}), encoding="utf-8")
            table = JamoNameTable.from_json(path)
        self.assertEqual(table.lookup("HANGUL LETTER KIYEOK"), "ㄱ")
        self.assertEqual(table.name("ㄴ"), "HANGUL LETTER NIEUN")
        self.assertIsNone(table.lookup("NOT A REAL NAME"))


if __name__ == "__main__":
    unittest.main()
