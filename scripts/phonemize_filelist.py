"""
JSONL 파일리스트의 text 를 음소 ID 시퀀스로 변환해 새 JSONL 로 저장한다.

입력 스키마: {"audio_path": "...", "speaker": "...", "language": "...", "text": "..."}
출력에는 norm_text / phones / tones / languages / word2ph 가 추가된다.

uv run scripts/phonemize_filelist.py \
  --input data/metadata.jsonl \
  --output data/metadata.phonemized.jsonl
"""

from pathlib import Path
import argparse
import json

from tqdm import tqdm

from g2p_kor import PhonemeSequencer, SequencerConfig
from g2p_kor.errors import G2pError


def phonemize_jsonl(jsonl_path: Path, out_path: Path, sequencer: PhonemeSequencer) -> tuple[int, list[str]]:
    """
    라인별로 text 를 변환한다. 읽을 수 없거나 변환에 실패한 라인은 건너뛰고 사유를 남긴다.

    처리 순서:
    1. 라인별 JSON 파싱
    2. text 키 검증
    3. PhonemeSequencer 변환
    4. 통과 레코드만 out_path 에 기록

    Returns:
        tuple: (저장한 레코드 수, 드롭 사유 라인 리스트)
    """
    with open(jsonl_path, encoding="utf-8") as f:
        lines = f.readlines()

    kept = 0
    dropped_lines: list[str] = []

    with open(out_path, "w", encoding="utf-8") as out:
        for lineno, raw_line in enumerate(tqdm(lines, desc="phonemize"), start=1):
            line = raw_line.strip()
            if not line:
                continue

            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                dropped_lines.append(f"line={lineno}  # JSON_DECODE_ERROR")
                continue

            if not isinstance(rec, dict) or "text" not in rec:
                dropped_lines.append(f"line={lineno}  # MISSING_KEYS:['text']")
                continue

            try:
                result = sequencer(str(rec["text"]))
            except G2pError as e:
                dropped_lines.append(f"line={lineno}  # {type(e).__name__}:{e}")
                continue

            rec["norm_text"] = result.norm_text
            rec["phones"] = result.phones
            rec["tones"] = result.tones
            rec["languages"] = result.languages
            rec["word2ph"] = result.word2ph
            out.write(json.dumps(rec, ensure_ascii=False) + "\n")
            kept += 1

    return kept, dropped_lines


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", type=Path, required=True, help="입력 JSONL 경로")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="출력 JSONL 경로 (기본: <input>.phonemized.jsonl)",
    )
    parser.add_argument("--model_config", type=Path, default=None, help="모델 config.json (symbols, data.add_blank)")
    parser.add_argument("--bert_vocab", type=Path, default=None, help="BERT vocab.txt 경로")
    parser.add_argument("--language", type=str, default="KR")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not args.input.exists():
        raise SystemExit(f"[ERROR] input not found: {args.input}")
    out_path = args.output or args.input.with_suffix(".phonemized.jsonl")

    sequencer = PhonemeSequencer(
        SequencerConfig(
            language=args.language,
            bert_vocab_path=args.bert_vocab,
            model_config_path=args.model_config,
        )
    )
    kept, dropped_lines = phonemize_jsonl(args.input, out_path, sequencer)

    if dropped_lines:
        drop_log = out_path.with_suffix(".dropped.txt")
        with open(drop_log, "w", encoding="utf-8") as f:
            for line in dropped_lines:
                f.write(line + "\n")
        print(f"[WARN] dropped {len(dropped_lines)} line(s) -> {drop_log.name}")

    print(f"[OK] {args.input.name} -> {out_path}")
    print(f"  kept: {kept}")
    print(f"  dropped: {len(dropped_lines)}")


if __name__ == "__main__":
    main()
