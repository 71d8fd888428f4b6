"""
텍스트 -> 음소/ID/word2ph 확인용 CLI.

- 정규화 결과, 발음 변환 결과, 음소 ID, word2ph 를 출력한다.
- --export_tokenizer 를 주면 음소 심볼 vocab(symbols.txt)과 tokenizer.json 을 저장한다.

uv run scripts/g2p.py \
  --text "안녕하세요. 오늘은 3.5km를 걸었습니다!" \
  --split
"""

from pathlib import Path
import argparse
import logging

from g2p_kor import G2pConfig, PhonemeSequencer, SequencerConfig
from g2p_kor.errors import G2pError
from g2p_kor.sequencer import g2p
from g2p_kor.text.normalizer import prosody_pause, prosody_split
from g2p_kor.text.symbols import save_symbols
from g2p_kor.tokenizer import build_phone_tokenizer


def export_tokenizer(out_dir: Path, sequencer: PhonemeSequencer) -> None:
    """
    모델 학습/추론 측에서 재사용할 심볼 파일과 tokenizer.json 을 저장한다.

    Args:
        out_dir: 저장 디렉터리.
        sequencer: 심볼 리스트를 가진 시퀀서.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    symbols = list(sequencer.symbols)
    save_symbols(out_dir / "symbols.txt", symbols)
    tokenizer = build_phone_tokenizer(symbols, out_dir)
    print(f"[OK] symbols={len(symbols)} vocab={len(tokenizer.get_vocab())} -> {out_dir}")


def show(sequencer: PhonemeSequencer, text: str) -> None:
    result = sequencer(text)
    g2p_result = g2p(result.norm_text, sequencer.tokenizer, sequencer.engine)

    print(f"norm    : {result.norm_text}")
    print(f"g2p     : {sequencer.engine(result.norm_text)}")
    print(f"tokens  : {g2p_result.tokens}")
    print(f"phones  : {' '.join(g2p_result.phones)}")
    print(f"ids     : {result.phones}")
    print(f"tones   : {result.tones}")
    print(f"word2ph : {result.word2ph}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--text",
        type=str,
        default="안녕하세요. 오늘은 3.5km를 걸었습니다! 숫자와 단위 처리 테스트입니다.",
        help="변환할 텍스트",
    )
    parser.add_argument("--language", type=str, default="KR", help="언어 이름 (LANGUAGE_ID_MAP 키)")
    parser.add_argument("--model_config", type=Path, default=None, help="모델 config.json (symbols, data.add_blank)")
    parser.add_argument("--bert_vocab", type=Path, default=None, help="BERT vocab.txt 경로")
    parser.add_argument("--no_blank", action="store_true", help="blank ID 끼워 넣기 끄기")
    parser.add_argument("--descriptive", action="store_true", help="구어체 치환 (의->에, 계->게)")
    parser.add_argument("--group_vowels", action="store_true", help="모음 단순화 (ㅒ->ㅖ 등)")
    parser.add_argument("--split", action="store_true", help="문장 단위로 나눠 출력")
    parser.add_argument("--verbose", action="store_true", help="규칙 적용 로그 출력")
    parser.add_argument(
        "--export_tokenizer",
        type=Path,
        default=None,
        help="symbols.txt / tokenizer.json 저장 디렉터리",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = SequencerConfig(
        language=args.language,
        add_blank=not args.no_blank,
        bert_vocab_path=args.bert_vocab,
        model_config_path=args.model_config,
        g2p=G2pConfig(
            descriptive=args.descriptive,
            group_vowels=args.group_vowels,
            verbose=args.verbose,
        ),
    )
    try:
        sequencer = PhonemeSequencer(config)
    except (G2pError, FileNotFoundError) as e:
        raise SystemExit(f"[ERROR] {e}")

    if args.export_tokenizer is not None:
        export_tokenizer(args.export_tokenizer, sequencer)

    if not args.split:
        show(sequencer, args.text)
        return

    for seg in prosody_split(args.text):
        print(f"--- segment: {seg} (pause {prosody_pause(seg):.2f}s)")
        show(sequencer, seg)


if __name__ == "__main__":
    main()
