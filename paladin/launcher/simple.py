"""Simple paladin demonstrator.

Opens the file given on the command line, reads all of its contents (so do
not make it too big) and prints it ``--repeat`` times with ``--interval``
seconds between the prints. The file is closed in the end, even when the
program is interrupted with ^C.

Usage example:

    echo "hello world" > myfile.txt
    python -m paladin.launcher.simple myfile.txt
"""

import argparse
import sys
import time
from typing import BinaryIO, List, Optional

from paladin import Paladin, PaladinConfig, PaladinError


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser()

    parser.add_argument("path", type=str)
    parser.add_argument("--repeat", type=int, default=10)
    parser.add_argument("--interval", type=float, default=1.0)
    parser.add_argument("--log_mode", type=str, default="rich")
    parser.add_argument("--log_level", type=str, default="INFO")

    return parser.parse_args(argv)


def say(paladin: Paladin, text: str) -> None:
    with paladin.protect():
        print(text, end="", flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    paladin: Paladin[BinaryIO] = Paladin(
        PaladinConfig(log_mode=args.log_mode, log_level=args.log_level)
    )

    def opener() -> BinaryIO:
        return open(args.path, "rb")

    def closer(f: BinaryIO) -> None:
        f.close()
        print("closed")

    def runner(f: BinaryIO) -> None:
        try:
            with paladin.protect():
                data = f.read()

            text = data.decode("utf-8", errors="replace")

        except OSError as e:
            text = f"ERROR: {e}\n"

        for i in range(args.repeat):
            if i > 0:
                time.sleep(args.interval)

            say(paladin, text)

    try:
        paladin.run(opener, closer, runner)

    except PaladinError as e:
        print(e)

        return 1

    if paladin.signal is not None:
        print(f"Signal occurred: {paladin.signal.name}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
