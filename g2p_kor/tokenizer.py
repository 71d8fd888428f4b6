import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from tokenizers import Tokenizer
from tokenizers.models import WordLevel
from transformers import AutoTokenizer, PreTrainedTokenizerFast

from .text.symbols import PUNCTUATION, SPACE_SYMBOL, SYMBOLS, UNK_SYMBOL, symbol_to_id_map

logger = logging.getLogger(__name__)

UNK_TOKEN = "[UNK]"
CONTINUATION_PREFIX = "##"
SPECIAL_TOKENS = ["[PAD]", UNK_TOKEN, "[CLS]", "[SEP]", "[MASK]"]


def load_vocab(vocab_path: Path) -> dict[str, int]:
    """
    BERT vocab.txt(1줄 1토큰)를 token -> id 사전으로 읽는다. 줄 번호가 곧 ID다.

    Raises:
        FileNotFoundError: vocab 파일이 존재하지 않는 경우.
    """
    vocab_path = Path(vocab_path)
    if not vocab_path.exists():
        raise FileNotFoundError(f"bert vocab not found: {vocab_path}")

    vocab: dict[str, int] = {}
    for idx, tok in enumerate(vocab_path.read_text(encoding="utf-8").splitlines()):
        tok = tok.strip()
        if tok:
            vocab[tok] = idx
    return vocab


def load_pretrained_vocab(model_id: str) -> dict[str, int]:
    """Hugging Face 토크나이저(예: kykim/bert-kor-base)의 vocab을 가져온다."""
    return dict(AutoTokenizer.from_pretrained(model_id).get_vocab())


@lru_cache(maxsize=1)
def default_vocab() -> Mapping[str, int]:
    """
    vocab 파일이 없을 때 쓰는 내장 문자 단위 vocab.

    특수 토큰, 문장부호, 한글 음절/호환 자모/영문 소문자/숫자 각각의
    단독 토큰과 "##" 이어붙임 토큰을 담는다.
    """
    chars = list(PUNCTUATION)
    chars += [chr(c) for c in range(0xAC00, 0xD7A4)]
    chars += [chr(c) for c in range(0x3131, 0x3164)]
    chars += [chr(c) for c in range(ord("a"), ord("z") + 1)]
    chars += [str(d) for d in range(10)]

    tokens = list(SPECIAL_TOKENS)
    tokens += chars
    tokens += [CONTINUATION_PREFIX + ch for ch in chars]
    return MappingProxyType({tok: i for i, tok in enumerate(tokens)})


class WordPieceTokenizer:
    """
    BERT vocab 기반 greedy longest-prefix 토크나이저.

    - 공백으로 단어를 나누고 단어 사이에 SP 토큰을 하나씩 넣는다.
    - vocab에 통째로 있는 단어는 그대로 한 토큰이 된다.
    - 아니면 앞에서부터 가장 긴 vocab 항목을 잘라낸다. 두 번째 조각부터는 "##"를 붙인다.
    - 어떤 길이로도 맞지 않는 위치는 그 한 글자를 [UNK]로 바꾸고 다음 글자부터 다시 찾는다.
    """

    def __init__(self, vocab: Mapping[str, int] | None = None, unk_token: str = UNK_TOKEN):
        self.vocab = MappingProxyType(dict(vocab)) if vocab else default_vocab()
        self.unk_token = unk_token
        self._max_piece_len = max((len(tok) for tok in self.vocab), default=1)

    @classmethod
    def from_file(cls, vocab_path: Path) -> "WordPieceTokenizer":
        return cls(load_vocab(vocab_path))

    @classmethod
    def from_pretrained(cls, model_id: str) -> "WordPieceTokenizer":
        return cls(load_pretrained_vocab(model_id))

    def tokenize_word(self, word: str) -> list[str]:
        if word in self.vocab:
            return [word]

        pieces: list[str] = []
        start = 0
        while start < len(word):
            end = min(len(word), start + self._max_piece_len)
            piece = None
            while start < end:
                candidate = word[start:end]
                if start > 0:
                    candidate = CONTINUATION_PREFIX + candidate
                if candidate in self.vocab:
                    piece = candidate
                    break
                end -= 1

            if piece is None:
                pieces.append(self.unk_token)
                start += 1
            else:
                pieces.append(piece)
                start = end
        return pieces

    def tokenize(self, text: str) -> list[str]:
        tokens: list[str] = []
        for index, word in enumerate(text.split()):
            if index > 0:
                tokens.append(SPACE_SYMBOL)
            tokens.extend(self.tokenize_word(word))
        return tokens


def build_phone_tokenizer(
    symbols: list[str] | None = None,
    output_dir: Path | None = None,
) -> PreTrainedTokenizerFast:
    """
    음소 심볼 리스트로 Hugging Face fast tokenizer를 만든다.

    동작:
    1. 심볼 리스트 순서대로 symbol -> id 사전을 만든다.
    2. UNK 심볼을 unk_token으로 하는 `WordLevel` 토크나이저를 만든다.
    3. `output_dir`가 주어지면 `tokenizer.json`으로 저장한다.
    4. `PreTrainedTokenizerFast` 래퍼를 반환한다.

    음향 모델 쪽에서 같은 ID 체계를 재사용할 때 쓴다. 입력은 이미 음소 단위로
    나뉘어 있으므로 pre-tokenizer는 두지 않는다. (is_split_into_words=True로 인코딩)

    Args:
        symbols: 심볼 리스트. 기본값은 내장 SYMBOLS.
        output_dir: tokenizer.json 저장 디렉터리. None이면 저장하지 않는다.

    Returns:
        PreTrainedTokenizerFast: pad_token=symbols[0], unk_token="UNK" (없으면 symbols[0]).
    """
    symbols = SYMBOLS if symbols is None else symbols
    vocab = dict(symbol_to_id_map(symbols))
    # UNK 가 없는 심볼 리스트는 0번 심볼로 대체한다. (cleaned_text_to_sequence 와 같은 ID)
    unk_token = UNK_SYMBOL if UNK_SYMBOL in vocab else symbols[0]

    tk = Tokenizer(WordLevel(vocab=vocab, unk_token=unk_token))

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        tk.save(str(output_dir / "tokenizer.json"))
        logger.info("saved phone tokenizer: %s", output_dir / "tokenizer.json")

    return PreTrainedTokenizerFast(
        tokenizer_object=tk,
        unk_token=unk_token,
        pad_token=symbols[0],
    )
