# athlete_intake/client/cli.py
"""
Submit the intake form from the command line.

    athlete-intake-submit --api http://localhost:8080 \
        --field playerFirstName=Jane --field playerLastName=Doe \
        --field videoCutInstructions="First half only" \
        --image jane.jpg --video game1.mp4
"""
import argparse
import sys
from typing import List, Optional

import httpx

from athlete_intake.client.form import INPUT_FIELDS, FormController
from athlete_intake.client.uploader import SubmissionError


def _parse_field(raw: str):
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {raw!r}")
    if name not in INPUT_FIELDS:
        raise argparse.ArgumentTypeError(f"unknown field {name!r}; choose from {', '.join(INPUT_FIELDS)}")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload media and submit the athlete intake form")
    parser.add_argument("--api", default="http://localhost:8080", help="Base URL of the intake service")
    parser.add_argument("--field", action="append", type=_parse_field, default=[], help="Form value as name=value")
    parser.add_argument("--image", action="append", default=[], help="Image file (repeatable)")
    parser.add_argument("--video", action="append", default=[], help="Video file (repeatable)")
    parser.add_argument("--timeout", type=float, default=60.0, help="API timeout in seconds")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    with httpx.Client(base_url=args.api, timeout=args.timeout) as api, httpx.Client(
        timeout=httpx.Timeout(300.0, connect=10.0)
    ) as storage:
        controller = FormController(api, storage)
        for name, value in args.field:
            controller.set_field(name, value)
        for path in args.image:
            controller.add_image(path)
        for path in args.video:
            controller.add_video(path)

        try:
            message_id = controller.submit()
        except SubmissionError as e:
            print(f"[intake] {controller.state.value}: {e}", file=sys.stderr)
            return 1

    print(f"[intake] {controller.message} (id={message_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
