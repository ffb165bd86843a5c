from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response
from prompter import config as CFG
from prompter.engine import Prompter
from prompter.errors import PrompterError, RemoteServiceError

log = logging.getLogger(__name__)

app = Flask(__name__)
_prompter: Prompter | None = None

# ---------- API ----------
@app.get("/api/prompts")
def api_prompts():
    q = request.args.get("q", "", type=str)
    if _prompter is None or _prompter.engine is None:
        return jsonify({"error": "prompter not built"}), 503
    if _prompter.coordinator is not None and not _prompter.ready:
        return jsonify({"error": "inference service not ready"}), 503
    try:
        cs = _prompter.complete(q)
    except RemoteServiceError as exc:
        log.error("prompt request failed: %s", exc)
        return jsonify({"error": str(exc)}), 502
    return jsonify({"items": list(cs), "status": cs.status})

@app.get("/health")
def health():
    return jsonify({"ok": True, "ready": bool(_prompter and _prompter.ready)})

# ---------- UI ----------
@app.get("/")
def home():
    # Single page, no external deps. Clicking a prompt searches it (terminal ":N").
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Movie search prompter</title>
<style>
body{ margin:0; background:#0b0f14; color:#cfd8e3; font:16px/1.45 system-ui,sans-serif }
.card{ max-width:720px; margin:32px auto; padding:18px; background:#0f141b; border:1px solid #1c2530; border-radius:14px }
input{ width:100%; box-sizing:border-box; padding:12px; border-radius:10px; border:1px solid #1c2530; background:#0b1117; color:inherit; font-size:16px }
ol{ padding-left:1.6rem } li{ padding:4px 0; cursor:pointer } li:hover{ color:#6ee7ff }
.muted{ color:#8a94a6; font-size:13px }
</style>
</head>
<body>
  <div class="card">
    <h1>Search for movie</h1>
    <form onsubmit="search(); return false;">
      <input id="q" type="text" placeholder="Movie.." autocomplete="off" autofocus />
    </form>
    <div id="stats" class="muted">Ready.</div>
    <ol id="out"></ol>
  </div>
<script>
const q = document.querySelector("#q"), out = document.querySelector("#out"), stats = document.querySelector("#stats");
let t;
async function search(){
  try{
    const resp = await fetch(`/api/prompts?q=${encodeURIComponent(q.value)}`);
    const data = await resp.json();
    if(!resp.ok) throw new Error(data.error ?? `HTTP ${resp.status}`);
    stats.textContent = data.status === "ok" ? `${data.items.length} prompts` : "Inference service unavailable: local prompts only";
    out.innerHTML = "";
    for(const p of data.items){
      const li = document.createElement("li");
      li.textContent = p;
      li.onclick = () => { q.value = p; search(); };
      out.appendChild(li);
    }
  }catch(e){
    stats.textContent = `Error: ${e.message ?? e}`;
  }
}
q.addEventListener("input", () => { clearTimeout(t); t = setTimeout(search, 150); });
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the Flask search session on top of Prompter")
    ap.add_argument("--dataset", default=CFG.DATASET_PATH)
    ap.add_argument("--remote", default=CFG.REMOTE_HOST, help="Inference service host[:port]")
    ap.add_argument("--no-ratings", action="store_true")
    ap.add_argument("--degraded", action="store_true")
    ap.add_argument("--no-wait", action="store_true", help="Serve before the inference service is ready")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _prompter
    _prompter = Prompter()
    try:
        _prompter.build(
            args.dataset, with_ratings=not args.no_ratings, host=args.remote,
            remote_mode="degraded" if args.degraded else CFG.REMOTE_MODE,
            verbose=args.verbose,
        )
        coordinator = _prompter.start_probing()
        if not args.no_wait:
            coordinator.wait()
        app.run(host=args.host, port=args.port, debug=args.verbose)
    except PrompterError as exc:
        logging.basicConfig()
        log.error("%s", exc)
        return 1
    finally:
        _prompter.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
