from __future__ import annotations
import argparse, json, logging, os, sys
from typing import Optional

from . import config as CFG
from .engine import Prompter
from .errors import PrompterError
from .models import CandidateSet

log = logging.getLogger("prompter")

def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR", "") == ""

CSI = "\033["
def _c(text: str, code: str) -> str:
    if not _supports_color(): return text
    return f"{CSI}{code}m{text}{CSI}0m"

def _print_prompts(cs: CandidateSet) -> None:
    if not cs:
        print(_c("(no prompts)", "2;37"))
    for i, p in enumerate(cs, start=1):
        print(f"{i:<2} {p}")
    if not cs.remote_ok:
        print(_c("(inference service unavailable: local prompts only)", "2;33"))

def _select(cmd: str, last: Optional[CandidateSet]) -> Optional[str]:
    """':N' picks prompt N of the last result; returns None if out of range."""
    try:
        n = int(cmd[1:])
    except ValueError:
        return None
    if last is None or not 1 <= n <= len(last):
        return None
    return last[n - 1]

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Movie search prompter (terminal session)")
    parser.add_argument("--dataset", default=CFG.DATASET_PATH, help="Movie CSV (title col 2, rating col 9)")
    parser.add_argument("--host", default=CFG.REMOTE_HOST, help="Inference service host[:port]")
    parser.add_argument("--timeout", type=float, default=CFG.REQUEST_TIMEOUT, help="Request timeout (s)")
    parser.add_argument("--interval", type=float, default=CFG.PING_INTERVAL, help="Readiness probe interval (s)")
    parser.add_argument("--ready-timeout", type=float, default=None, help="Give up waiting for readiness after N s")
    parser.add_argument("--no-wait", action="store_true", help="Skip the readiness gate")
    parser.add_argument("--no-ratings", action="store_true", help="Do not capture ratings")
    parser.add_argument("-k", "--capacity", type=int, default=CFG.MAX_PROMPTS, help="Max prompts per query")
    parser.add_argument("--degraded", action="store_true", help="Fall back to local prompts when the service fails")
    parser.add_argument("--q", default=None, help="Single query to run once, then exit")
    parser.add_argument("--json", action="store_true", help="Emit JSON for --q")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    pr = Prompter()
    try:
        pr.build(
            args.dataset,
            with_ratings=not args.no_ratings,
            host=args.host,
            timeout=args.timeout,
            capacity=args.capacity,
            remote_mode="degraded" if args.degraded else CFG.REMOTE_MODE,
            verbose=args.verbose or CFG.VERBOSE,
        )
        if not args.no_wait:
            print(f"Waiting for {args.host} ...", file=sys.stderr)
            if not pr.wait_until_ready(args.ready_timeout, interval=args.interval):
                log.error("inference service at %s never became ready", args.host)
                return 1

        if args.q is not None:
            cs = pr.complete(args.q)
            if args.json:
                print(json.dumps({"items": list(cs), "status": cs.status}, ensure_ascii=False, indent=2))
            else:
                _print_prompts(cs)
            return 0

        print("Search for movie: type a query and press Enter (empty to quit).")
        print(_c("Commands: :N selects prompt N and searches it", "2;37"))
        last: Optional[CandidateSet] = None
        while True:
            try:
                raw = input("> ")
            except (EOFError, KeyboardInterrupt):
                print(); break
            if raw == "":
                print("Goodbye!"); break
            query = raw
            if raw.startswith(":"):
                picked = _select(raw.strip(), last)
                if picked is None:
                    print(_c("(no such prompt)", "2;36")); continue
                print(f"> {picked}")
                query = picked
            last = pr.complete(query)
            _print_prompts(last)
        return 0
    except PrompterError as exc:
        logging.basicConfig()
        log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        pr.shutdown()

if __name__ == "__main__":
    sys.exit(main())
