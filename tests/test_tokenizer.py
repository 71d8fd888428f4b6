"""
WordPiece 토크나이저 / 음소 심볼 토크나이저 테스트.
"""
import tempfile
import unittest
from pathlib import Path

from g2p_kor.sequencer import cleaned_text_to_sequence
from g2p_kor.text.symbols import SYMBOL_TO_ID, SYMBOLS, UNK_SYMBOL, save_symbols, symbol_to_id_map
from g2p_kor.tokenizer import (
    UNK_TOKEN,
    WordPieceTokenizer,
    build_phone_tokenizer,
    default_vocab,
    load_vocab,
)


class TestVocab(unittest.TestCase):
    """vocab 로드 테스트."""

    def test_default_vocab(self):
        vocab = default_vocab()
        self.assertEqual(vocab["[PAD]"], 0)
        self.assertEqual(vocab[UNK_TOKEN], 1)
        self.assertIn("가", vocab)
        self.assertIn("##가", vocab)
        self.assertIn("##z", vocab)
        self.assertIs(default_vocab(), vocab)

    def test_default_vocab_readonly(self):
        with self.assertRaises(TypeError):
            default_vocab()["new"] = 0

    def test_load_vocab(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vocab.txt"
            path.write_text("[PAD]\n[UNK]\n안녕\n##하세요\n", encoding="utf-8")
            vocab = load_vocab(path)
        self.assertEqual(vocab, {"[PAD]": 0, "[UNK]": 1, "안녕": 2, "##하세요": 3})

    def test_load_vocab_missing(self):
        with self.assertRaises(FileNotFoundError):
            load_vocab(Path("/nonexistent/vocab.txt"))


class TestWordPieceTokenizer(unittest.TestCase):
    """WordPiece 분할 테스트."""

    def setUp(self):
        self.tokenizer = WordPieceTokenizer()

    def test_space_token_between_words(self):
        tokens = self.tokenizer.tokenize("가 나")
        self.assertEqual(tokens, ["가", "SP", "나"])

    def test_continuation_pieces(self):
        tokens = self.tokenizer.tokenize("안녕하세요")
        self.assertEqual(tokens, ["안", "##녕", "##하", "##세", "##요"])

    def test_whole_word_in_vocab(self):
        tokenizer = WordPieceTokenizer({"[UNK]": 0, "안녕": 1, "##하세요": 2})
        self.assertEqual(tokenizer.tokenize_word("안녕"), ["안녕"])
        self.assertEqual(tokenizer.tokenize_word("안녕하세요"), ["안녕", "##하세요"])

    def test_longest_prefix(self):
        tokenizer = WordPieceTokenizer({"가": 0, "가나": 1, "##다": 2, "##나다": 3})
        self.assertEqual(tokenizer.tokenize_word("가나다"), ["가나", "##다"])

    def test_unknown_character(self):
        """맞는 조각이 없는 글자는 글자마다 [UNK] 하나."""
        tokenizer = WordPieceTokenizer({"가": 0, "##나": 1})
        self.assertEqual(tokenizer.tokenize_word("가xy나"), ["가", UNK_TOKEN, UNK_TOKEN, "##나"])

    def test_empty(self):
        self.assertEqual(self.tokenizer.tokenize(""), [])
        self.assertEqual(self.tokenizer.tokenize("   "), [])


class TestSymbols(unittest.TestCase):
    """음소 심볼 vocab 테스트."""

    def test_symbol_order(self):
        self.assertEqual(SYMBOLS[0], "_")
        self.assertEqual(SYMBOL_TO_ID["\u1100"], 1)
        self.assertEqual(len(SYMBOL_TO_ID), len(SYMBOLS))

    def test_first_occurrence_wins(self):
        mapping = symbol_to_id_map(["_", "a", "a", "b"])
        self.assertEqual(mapping["a"], 1)
        self.assertEqual(mapping["b"], 3)

    def test_save_symbols(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = save_symbols(Path(tmp) / "symbols.txt")
            lines = path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines, SYMBOLS)


class TestPhoneTokenizer(unittest.TestCase):
    """WordLevel 음소 토크나이저 테스트."""

    def test_ids_match_symbols(self):
        tokenizer = build_phone_tokenizer()
        self.assertEqual(len(tokenizer.get_vocab()), len(SYMBOLS))
        self.assertEqual(tokenizer.convert_tokens_to_ids(["\u1100", "\u1161"]), [1, 20])

    def test_unknown_symbol(self):
        tokenizer = build_phone_tokenizer()
        self.assertEqual(tokenizer.convert_tokens_to_ids("é"), SYMBOL_TO_ID[UNK_SYMBOL])

    def test_custom_symbols_without_unk(self):
        """UNK 가 없으면 0번 심볼로 대체하고 vocab 크기는 그대로다."""
        symbols = ["_", "\u1100", "\u1161"]
        tokenizer = build_phone_tokenizer(symbols)
        self.assertEqual(len(tokenizer.get_vocab()), len(symbols))
        self.assertEqual(tokenizer.convert_tokens_to_ids("c"), 0)

        ids, _, _ = cleaned_text_to_sequence(["c"], [0], "KR", symbol_to_id_map(symbols))
        self.assertEqual(tokenizer.convert_tokens_to_ids("c"), ids[0])

    def test_save(self):
        with tempfile.TemporaryDirectory() as tmp:
            build_phone_tokenizer(output_dir=Path(tmp) / "tok")
            self.assertTrue((Path(tmp) / "tok" / "tokenizer.json").exists())


if __name__ == "__main__":
    unittest.main()
