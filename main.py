"""Command-line claim analysis.

Usage:  python main.py policy.pdf "46-year-old male, knee surgery in Pune, 3-month-old insurance policy"
"""
import argparse
import mimetypes
import sys
from pathlib import Path

from claimlens.utils.config import AppConfig
from claimlens.utils.logger import setup_logging
from claimlens.utils.exceptions import ClaimLensError, UnreadableDocument
from claimlens.utils.types import SourceDocument
from claimlens.ingest.pdf_loader import resolve_media_kind, extract_text
from claimlens.llm.gemini import GeminiClient
from claimlens.analysis.claims import analyze_claim, PROMPT_VERSION
from claimlens.report.json_export import build_result_json


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Adjudicate a claim query against a policy document.")
    parser.add_argument("document", help="Path to a .txt or .pdf policy document")
    parser.add_argument("query", help="Free-text claim description")
    args = parser.parse_args(argv)

    config = AppConfig.from_env()
    setup_logging(config.log_level)
    path = Path(args.document)
    try:
        declared, _ = mimetypes.guess_type(path.name)
        kind = resolve_media_kind(declared, path.name)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise UnreadableDocument(f"Cannot read {path}") from exc
        source = SourceDocument(data=data, media_kind=kind, name=path.name)
        text = extract_text(source)
        result = analyze_claim(GeminiClient(config).configure(), args.query, text)
    except ClaimLensError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    meta = {"model": config.model_name, "prompt_version": PROMPT_VERSION, "document": path.name}
    print(build_result_json(result, meta))
    return 0


if __name__ == "__main__":
    sys.exit(main())
