"""Write the percent-encoding round-trip test module to standard output."""

import argparse
import sys

from wire_oracle.fixtures.corpus import build_corpus
from wire_oracle.fixtures.generator import DEFAULT_TARGET_MODULE, render_test_module


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate percent-encoding round-trip tests"
    )
    parser.add_argument(
        "--target-module",
        default=DEFAULT_TARGET_MODULE,
        help="Module providing the encode/decode functions under test",
    )
    parser.add_argument("--encode-name", default="encode")
    parser.add_argument("--decode-name", default="decode")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    try:
        source = render_test_module(
            build_corpus(),
            target_module=args.target_module,
            encode_name=args.encode_name,
            decode_name=args.decode_name,
        )
    except ValueError as error:
        print(f"make_fixtures: {error}", file=sys.stderr)
        return 2
    sys.stdout.write(source)
    return 0


if __name__ == "__main__":
    sys.exit(main())
