"""
발음 규칙 엔진 테스트.
"""
import unittest

from g2p_kor.config import G2pConfig
from g2p_kor.text.jamo import JamoTriple
from g2p_kor.text.rules import (
    ASSIMILATION_RULES,
    REPRESENTATIVE_SOUNDS,
    G2p,
    apply_descriptive_rules,
    apply_phonetic_rules,
    apply_vowel_grouping,
    link_syllables,
    neutralize,
)


class TestLiaison(unittest.TestCase):
    """연음 테스트."""

    def test_single_tail_moves(self):
        self.assertEqual(apply_phonetic_rules("있어요"), "이써요")
        self.assertEqual(apply_phonetic_rules("먹어"), "머거")

    def test_double_tail_splits(self):
        """겹받침은 뒤 자음만 넘어간다."""
        self.assertEqual(apply_phonetic_rules("앉아"), "안자")
        self.assertEqual(apply_phonetic_rules("읽어"), "일거")

    def test_link_syllables(self):
        current, following = link_syllables(JamoTriple("ㄱ", "ㅏ", "ㄺ"), JamoTriple("ㅇ", "ㅏ"))
        self.assertEqual(current, JamoTriple("ㄱ", "ㅏ", "ㄹ"))
        self.assertEqual(following, JamoTriple("ㄱ", "ㅏ"))

    def test_ieung_tail_moves(self):
        """받침 ㅇ도 다른 홑받침과 같이 넘어간다."""
        self.assertEqual(apply_phonetic_rules("강아지"), "가아지")
        current, following = link_syllables(JamoTriple("ㄱ", "ㅏ", "ㅇ"), JamoTriple("ㅇ", "ㅏ"))
        self.assertEqual(current, JamoTriple("ㄱ", "ㅏ"))
        self.assertEqual(following, JamoTriple("ㅇ", "ㅏ"))

    def test_no_tail_is_noop(self):
        pair = (JamoTriple("ㄱ", "ㅏ"), JamoTriple("ㅇ", "ㅏ"))
        self.assertEqual(link_syllables(*pair), pair)


class TestAssimilation(unittest.TestCase):
    """자음 동화 테스트."""

    def test_nasalization(self):
        self.assertEqual(apply_phonetic_rules("국물"), "궁물")
        self.assertEqual(apply_phonetic_rules("밥맛"), "밤맏")

    def test_lateralization(self):
        self.assertEqual(apply_phonetic_rules("신라"), "실라")
        self.assertEqual(apply_phonetic_rules("칼날"), "칼랄")

    def test_fortition(self):
        self.assertEqual(apply_phonetic_rules("학교"), "학꾜")

    def test_aspiration(self):
        self.assertEqual(apply_phonetic_rules("좋다"), "조타")
        self.assertEqual(apply_phonetic_rules("많다"), "만타")

    def test_table_is_readonly(self):
        with self.assertRaises(TypeError):
            ASSIMILATION_RULES[("ㄱ", "ㄱ")] = ("ㄱ", "ㄱ")


class TestNeutralization(unittest.TestCase):
    """대표음 테스트."""

    def test_word_final(self):
        cases = {
            "밖": "박",
            "부엌": "부억",
            "닭": "닥",
            "꽃": "꼳",
            "값": "갑",
            "삶": "삼",
            "앉": "안",
            "핥": "할",
        }
        for text, expected in cases.items():
            self.assertEqual(apply_phonetic_rules(text), expected, text)

    def test_before_non_hangul(self):
        self.assertEqual(apply_phonetic_rules("꽃!"), "꼳!")
        self.assertEqual(apply_phonetic_rules("부엌 안"), "부억 안")

    def test_ssangsiot_final_vs_medial(self):
        """ㅆ 받침은 어말에서 ㄷ, 모음 앞에서는 연음."""
        self.assertEqual(apply_phonetic_rules("갔"), "갇")
        self.assertEqual(apply_phonetic_rules("갔어"), "가써")

    def test_kieuk_final_vs_assimilation(self):
        """ㅋ 받침은 어말에서 ㄱ, 비음 앞에서는 동화."""
        self.assertEqual(apply_phonetic_rules("부엌"), "부억")
        self.assertEqual(apply_phonetic_rules("부엌문"), "부엉문")

    def test_neutralize(self):
        self.assertEqual(neutralize(JamoTriple("ㅂ", "ㅏ", "ㄲ")), JamoTriple("ㅂ", "ㅏ", "ㄱ"))
        self.assertEqual(neutralize(JamoTriple("ㅂ", "ㅏ", "ㄴ")), JamoTriple("ㅂ", "ㅏ", "ㄴ"))

    def test_representative_targets(self):
        self.assertTrue(set(REPRESENTATIVE_SOUNDS.values()) <= set("ㄱㄴㄷㄹㅁㅂㅇ"))


class TestPostPasses(unittest.TestCase):
    """후처리 테스트."""

    def test_descriptive(self):
        self.assertEqual(apply_descriptive_rules("시계"), "시게")
        self.assertEqual(apply_descriptive_rules("희망의"), "희망에")

    def test_vowel_grouping(self):
        self.assertEqual(apply_vowel_grouping("과자"), "고자")
        self.assertEqual(apply_vowel_grouping("얘기"), "예기")
        self.assertEqual(apply_vowel_grouping("왜 a"), "웨 a")


class TestG2p(unittest.TestCase):
    """G2p 호출 테스트."""

    def test_default(self):
        g2p = G2p()
        self.assertEqual(g2p("있어요"), "이써요")
        self.assertEqual(g2p("시계"), "시계")

    def test_options(self):
        self.assertEqual(G2p(G2pConfig(descriptive=True))("시계"), "시게")
        self.assertEqual(G2p(G2pConfig(group_vowels=True))("과자"), "고자")

    def test_to_syllables_false(self):
        self.assertEqual(G2p(G2pConfig(to_syllables=False))("밖"), "\u1107\u1161\u11a8")

    def test_digits_and_latin(self):
        g2p = G2p()
        self.assertEqual(g2p("2"), "이")
        self.assertEqual(g2p("ab"), "에이비")

    def test_verbose_logs(self):
        with self.assertLogs("g2p_kor.text.rules", level="INFO") as cm:
            result = G2p(G2pConfig(verbose=True))("있어요")
        self.assertEqual(result, "이써요")
        self.assertTrue(any("liaison" in line for line in cm.output))

    def test_verbose_does_not_change_output(self):
        text = "국물이 좋다"
        self.assertEqual(G2p(G2pConfig(verbose=True))(text), G2p()(text))


if __name__ == "__main__":
    unittest.main()
