import argparse
import json
import mimetypes
import sys

from dotenv import load_dotenv

from expense_tracker.agents.parser import parse_receipt
from expense_tracker.exception import ExtractionError, UnparseableResponse
from expense_tracker.llm.openai_client import OpenAIClient
from expense_tracker.models import RawReceipt

load_dotenv()


def main():
    arg_parser = argparse.ArgumentParser(description="Extract expense fields from one receipt image.")
    arg_parser.add_argument("image_path")
    arg_parser.add_argument("--model", default=None, help="Override the extraction model from config.yaml")
    args = arg_parser.parse_args()

    content_type, _ = mimetypes.guess_type(args.image_path)
    with open(args.image_path, "rb") as fh:
        raw = RawReceipt(file_name=args.image_path, content=fh.read(), content_type=content_type)

    llm = OpenAIClient(model=args.model)
    try:
        result = parse_receipt(raw, llm)
    except UnparseableResponse as e:
        print(f"Could not parse model reply: {e.raw_text}", file=sys.stderr)
        return 1
    except ExtractionError as e:
        print(f"Extraction failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(by_alias=True), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
