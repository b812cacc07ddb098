from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response, current_app
from backend.engine import Engine
from backend.errors import BadQuery, IndexBuildError
from backend import config as CFG

log = logging.getLogger(__name__)


def create_app(engine: Engine) -> Flask:
    """Flask app bound to one already-built Engine (shared read-only by all requests)."""
    app = Flask(__name__)
    app.extensions["engine"] = engine
    app.add_url_rule("/search", view_func=handle_search, methods=["GET"])
    app.add_url_rule("/api/health", view_func=health, methods=["GET"])
    app.add_url_rule("/", view_func=home, methods=["GET"])
    return app


def _engine() -> Engine:
    return current_app.extensions["engine"]


# ---------- API ----------
def handle_search():
    q = request.args.get("q", None, type=str)
    try:
        rows = _engine().search(q)
    except BadQuery as e:
        return Response(str(e), status=400, mimetype="text/plain")
    try:
        return jsonify([r.text for r in rows])
    except (TypeError, ValueError):
        log.exception("encoding failure for query %r", q)
        return Response("encoding failure", status=500, mimetype="text/plain")


def health():
    return jsonify({"ok": True, "corpus_bytes": _engine().corpus_size})


# ---------- UI ----------
def home():
    # A tiny page: CSS variables + minimal JS, no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>ShakeSearch</title>
<style>
:root{
  --bg:#0b0f14;
  --panel:#0f141b;
  --ink:#cfd8e3;
  --muted:#8a94a6;
  --accent:#6ee7ff;
  --border:#1c2530;
  --mark-bg:rgba(110,231,255,.2);
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:980px; margin:24px auto; padding:0 16px }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px;
}
h1{ font-size:20px; margin:0 0 8px 0 }
form{ display:flex; gap:12px }
form input{
  flex:1; padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:16px;
}
form input:focus{ border-color:var(--accent) }
button{
  padding:10px 14px; border-radius:10px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); cursor:pointer;
}
#stats{ color:var(--muted); font-size:13px; margin-top:8px }
#err{ display:none; margin-top:12px; color:#ffb0b0 }
table{ width:100%; border-collapse:collapse; margin-top:16px }
td{ padding:10px 12px; border-top:1px solid var(--border); white-space:pre-wrap;
    font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace; font-size:14px }
.mark{ background:var(--mark-bg); border-bottom:1px solid var(--accent) }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>ShakeSearch</h1>
      <form id="form">
        <input id="q" type="text" name="query" placeholder="Search the complete works…" autocomplete="off" autofocus />
        <button type="submit">Search</button>
      </form>
      <div id="stats">Ready.</div>
      <div id="err"></div>
      <table><tbody id="out"></tbody></table>
    </div>
  </div>

<script>
const $ = (sel) => document.querySelector(sel);
const q = $("#q"), out = $("#out"), err = $("#err"), stats = $("#stats");

function escapeHtml(s){ return s.replace(/[&<>"']/g, (c)=>({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;","'":"&#39;"}[c])); }
function escapeRegExp(s){ return s.replace(/[.*+?^${}()|[\]\\]/g,'\\$&'); }
function highlight(text, query){
  const safe = escapeHtml(text);
  try{
    const re = new RegExp(escapeRegExp(escapeHtml(query)), "ig");
    return safe.replace(re, (m)=>`<span class="mark">${m}</span>`);
  }catch(e){ return safe; }
}

$("#form").addEventListener("submit", async (ev)=>{
  ev.preventDefault();
  const query = q.value.trim();
  err.style.display = "none";
  const t0 = performance.now();
  const resp = await fetch(`/search?q=${encodeURIComponent(query)}`);
  if(!resp.ok){
    err.style.display = "block";
    err.textContent = await resp.text();
    out.innerHTML = "";
    stats.textContent = "Error.";
    return;
  }
  const data = await resp.json();
  stats.textContent = `Results: ${data.length} • ~${Math.max(1, Math.round(performance.now() - t0))} ms`;
  out.innerHTML = data.map((s)=>`<tr><td>${highlight(s, query)}</td></tr>`).join("");
});
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Serve ShakeSearch over HTTP")
    ap.add_argument("--corpus", default=CFG.CORPUS_PATH, help="Text file to index")
    ap.add_argument("--cache", default=None, help="Suffix array cache file (optional)")
    ap.add_argument("--host", default=CFG.DEFAULT_HOST)
    ap.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 3001")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if (args.verbose or CFG.VERBOSE) else logging.WARNING)

    try:
        engine = Engine.from_file(args.corpus, cache=args.cache)
    except IndexBuildError as e:
        log.error("%s", e)
        return 1

    port = CFG.resolve_port(args.port)
    app = create_app(engine)
    print(f"Listening on port {port}...")
    try:
        app.run(host=args.host, port=port, debug=args.verbose, use_reloader=False, threaded=True)
    finally:
        engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
