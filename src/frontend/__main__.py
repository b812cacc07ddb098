from __future__ import annotations
import argparse, json, sys
from backend import Engine, BadQuery, IndexBuildError
from backend import config as CFG

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="ShakeSearch CLI (Engine-backed)")
    p.add_argument("--corpus", default=CFG.CORPUS_PATH, help="Text file to index")
    p.add_argument("--cache", default=None, help="Suffix array cache file (optional)")
    p.add_argument("--context", type=int, default=CFG.MAX_CONTEXT, help="Context bytes on each side of a match")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    try:
        eng = Engine.from_file(args.corpus, cache=args.cache, half_width=args.context, verbose=args.verbose)
    except IndexBuildError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        def run_query(q: str) -> bool:
            try:
                rows = eng.search(q)
            except BadQuery as e:
                print(f"error: {e}", file=sys.stderr)
                return False
            if args.json:
                print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
            else:
                if not rows:
                    print("(no matches)"); return True
                print("#    Offset     Snippet")
                for i, r in enumerate(rows, 1):
                    text = r.text.replace("\r", " ").replace("\n", " ")
                    print(f"{i:<4} {r.offset:<10} {text}")
            return True

        if args.q is not None and not run_query(args.q):
            return 2

        if args.repl:
            print("Type a query (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
