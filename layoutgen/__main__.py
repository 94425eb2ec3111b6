"""
layoutgen — entry point.

Usage:
    python -m layoutgen serve                    # start web server on :8000
    python -m layoutgen serve --port 3000
    python -m layoutgen corelap request.json     # print the CORELAP result as JSON
    python -m layoutgen craft request.json --seed 7
"""

import json
import logging
import random
import sys
from pathlib import Path


USAGE = (
    "Usage: python -m layoutgen serve [--port PORT] [--host HOST]\n"
    "       python -m layoutgen corelap|craft REQUEST.json [--seed N] [-v]"
)


def _flag(args: list[str], name: str, default=None):
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _run_engine(cmd: str, args: list[str]) -> int:
    from layoutgen.pipeline.request import (
        RequestError, parse_corelap_request, parse_craft_request,
    )

    if not args or args[0].startswith("-"):
        print(USAGE)
        return 1
    data = json.loads(Path(args[0]).read_text(encoding="utf-8"))
    seed = _flag(args, "--seed")
    rng = random.Random(int(seed)) if seed is not None else None

    try:
        if cmd == "corelap":
            from layoutgen.pipeline.corelap import generate_layout, corelap_result_to_dict
            result = generate_layout(parse_corelap_request(data), rng=rng)
            out = corelap_result_to_dict(result)
        else:
            from layoutgen.pipeline.craft import optimize_layout, craft_result_to_dict
            result = optimize_layout(parse_craft_request(data), rng=rng)
            out = craft_result_to_dict(result)
    except RequestError as e:
        for err in e.errors:
            print(f"error: {err}", file=sys.stderr)
        return 2

    print(json.dumps(out, indent=2))
    return 0 if result.ok else 3


def main():
    args = sys.argv[1:]
    cmd = args[0] if args else "serve"

    logging.basicConfig(
        level=logging.DEBUG if "-v" in args else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if cmd == "serve":
        port = int(_flag(args, "--port", 8000))
        host = _flag(args, "--host", "127.0.0.1")

        from layoutgen.web.server import main as serve
        serve(host=host, port=port)
    elif cmd in ("corelap", "craft"):
        sys.exit(_run_engine(cmd, args[1:]))
    else:
        print(f"Unknown command: {cmd}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
