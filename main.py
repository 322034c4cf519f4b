"""
main.py — Edge Cut Viewer Flask App
===================================
The web server in front of the cut backend.

Routes:
  GET  /                    – main UI (re-fetches graph and cart)
  GET  /api/view            – current view (polled while a hover preview is in flight)
  POST /api/hover/start     – pointer entered an edge line or list row
  POST /api/hover/end       – pointer left it
  POST /api/edge/remove     – Remove button: cut the edge into the shopping cart
  POST /api/edge/return     – Return button: put the edge back
  POST /api/reset           – Reset button

State management:
  One Orchestrator owns the rendered graph, both lists and the hover
  highlight.  It lives on the UI loop thread; request handlers hand it
  coroutines through UiLoop.call() and never touch it directly.  Every
  endpoint answers with the same view payload:
    • svg           – the rendered graph
    • edgeList      – rows of live edges
    • shoppingCart  – rows of cut edges
    • generation    – hover generation (changes on every hover start/end)
    • revision      – render revision (changes on every reconciliation)
    • error         – last backend failure, or null
"""

import logging
from typing import Optional

from flask import Flask, jsonify, render_template_string, request

from settings import Settings
from cartui import EDGE_LIST_ID, SHOPPING_CART_ID, ActionOutcome, CanvasConfig
from cutclient import BackendClient
from cutengine import GRAPH_ORIGIN, Orchestrator, UiLoop


logger = logging.getLogger(__name__)

ORIGINS = (GRAPH_ORIGIN, EDGE_LIST_ID, SHOPPING_CART_ID)


class ViewerRuntime:
    """The UI loop plus the orchestrator that lives on it."""

    def __init__(self, ui_loop: UiLoop, orchestrator: Orchestrator, call_timeout: float):
        self.ui_loop = ui_loop
        self.orchestrator = orchestrator
        self.call_timeout = call_timeout

    def call(self, coro):
        return self.ui_loop.call(coro, timeout=self.call_timeout)

    def close(self) -> None:
        if self.ui_loop.running:
            self.call(self.orchestrator.close())
            self.ui_loop.stop()


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, client: Optional[BackendClient] = None) -> Flask:
    settings = settings or Settings()
    client = client or BackendClient(settings.backend_url, timeout=settings.request_timeout)

    canvas_config = CanvasConfig()
    canvas_config.initial_scale = settings.initial_scale

    ui_loop = UiLoop()
    ui_loop.start()
    orchestrator = Orchestrator(
        client,
        guard_stale_previews=settings.stale_preview_guard,
        canvas_config=canvas_config,
    )
    runtime = ViewerRuntime(ui_loop, orchestrator, settings.call_timeout)

    app = Flask(__name__)
    app.extensions["cutviewer"] = runtime

    # -----------------------------------------------------------------------
    # Request helpers
    # -----------------------------------------------------------------------
    def edge_from_request():
        """(source, target, origin) from the JSON body, or None if malformed."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return None
        source, target = data.get("from"), data.get("to")
        origin = data.get("origin", GRAPH_ORIGIN)
        if not isinstance(source, str) or not isinstance(target, str) or origin not in ORIGINS:
            return None
        return source, target, origin

    def view_response(status: int = 200):
        return jsonify(runtime.call(orchestrator.view())), status

    # -----------------------------------------------------------------------
    # Main UI Route
    # -----------------------------------------------------------------------
    @app.route("/")
    def index():
        runtime.call(orchestrator.load())
        view = runtime.call(orchestrator.view())
        return render_template_string(INDEX_TEMPLATE,
            svg=view["svg"],
            edge_list=view["edgeList"],
            shopping_cart=view["shoppingCart"],
            error=view["error"],
        )

    @app.route("/api/view")
    def api_view():
        return view_response()

    # -----------------------------------------------------------------------
    # API: Hover
    # -----------------------------------------------------------------------
    @app.route("/api/hover/start", methods=["POST"])
    def api_hover_start():
        edge = edge_from_request()
        if edge is None:
            return jsonify({"error": "Expected {from, to, origin}"}), 400
        runtime.call(orchestrator.hover_start(*edge))
        return view_response()

    @app.route("/api/hover/end", methods=["POST"])
    def api_hover_end():
        edge = edge_from_request()
        if edge is None:
            return jsonify({"error": "Expected {from, to, origin}"}), 400
        runtime.call(orchestrator.hover_end(*edge))
        return view_response()

    # -----------------------------------------------------------------------
    # API: Edge mutations
    # -----------------------------------------------------------------------
    def mutate(action):
        edge = edge_from_request()
        if edge is None:
            return jsonify({"error": "Expected {from, to}"}), 400
        source, target, _ = edge
        outcome = runtime.call(action(source, target))
        if outcome is ActionOutcome.NO_ROW:
            return jsonify({"error": f"No such edge ({source}, {target})"}), 404
        if outcome is ActionOutcome.FAILED:
            return view_response(502)
        return view_response()

    @app.route("/api/edge/remove", methods=["POST"])
    def api_edge_remove():
        return mutate(orchestrator.remove_edge)

    @app.route("/api/edge/return", methods=["POST"])
    def api_edge_return():
        return mutate(orchestrator.return_edge)

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        ok = runtime.call(orchestrator.reset())
        return view_response(200 if ok else 502)

    return app


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Edge Cut Viewer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif; padding: 16px; }
    #canvas-svg { border: 1px solid #d0d7de; margin-bottom: 16px; }
    #lists { display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }
    h3 { margin-bottom: 8px; }
    .edgeRow { display: flex; gap: 12px; padding: 4px 8px; border-bottom: 1px solid #eee; }
    .edgeRow .edge { flex: 1; font-family: 'JetBrains Mono', monospace; font-size: 13px; }
    .edgeRow .size, .edgeRow .usages { color: #57606a; font-size: 13px; }
    #error { color: #cf222e; margin-bottom: 8px; }
  </style>
</head>
<body>
  <div id="error">{{ error or '' }}</div>
  <button id="reset" type="button">Reset</button>
  <div id="canvas-svg">{{ svg|safe }}</div>
  <div id="lists">
    <div>
      <h3>Edges</h3>
      <div id="edgeList">{{ edge_list|safe }}</div>
    </div>
    <div>
      <h3>Shopping cart</h3>
      <div id="shoppingCart">{{ shopping_cart|safe }}</div>
    </div>
  </div>

  <script>
    let hovering = false;
    let current = null;
    let pollTimer = null;

    // API helpers.  Gesture POSTs go out one at a time, in the order the
    // gestures happened, so a hover-end never overtakes the next hover-start.
    let outbox = Promise.resolve();
    function post(url, data) {
      const sent = outbox.then(async () => {
        const res = await fetch(url, {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify(data),
        });
        return await res.json();
      });
      outbox = sent.catch(() => null);
      return sent;
    }

    function paint(view) {
      if (view.svg !== undefined) {
        document.getElementById('canvas-svg').innerHTML = view.svg;
        applyZoom();
      }
      if (view.edgeList !== undefined) document.getElementById('edgeList').innerHTML = view.edgeList;
      if (view.shoppingCart !== undefined) document.getElementById('shoppingCart').innerHTML = view.shoppingCart;
      document.getElementById('error').textContent = view.error || '';
    }

    // While hovering, poll so the hypothetical-cut preview shows up once it lands.
    function startPolling() {
      stopPolling();
      pollTimer = setInterval(async () => {
        if (!hovering) return stopPolling();
        const res = await fetch('/api/view');
        paint(await res.json());
      }, 250);
    }
    function stopPolling() {
      if (pollTimer) clearInterval(pollTimer);
      pollTimer = null;
    }

    async function hoverStart(from, to, origin) {
      const key = JSON.stringify([origin, from, to]);
      if (hovering && current === key) return;  // same element, repainted under the pointer
      hovering = true;
      current = key;
      paint(await post('/api/hover/start', {from: from, to: to, origin: origin}));
      startPolling();
    }
    async function hoverEnd(from, to, origin) {
      hovering = false;
      current = null;
      stopPolling();
      paint(await post('/api/hover/end', {from: from, to: to, origin: origin}));
    }

    const canvas = document.getElementById('canvas-svg');

    // Pan and zoom: wheel zooms around the pointer, drag pans.  The transform
    // is reapplied every time a repaint replaces the SVG.
    let zoom = null;
    let drag = null;
    function currentZoom() {
      if (zoom) return zoom;
      const svg = canvas.querySelector('svg');
      return {x: parseFloat(svg.dataset.offsetX), y: 0, k: parseFloat(svg.dataset.scale)};
    }
    function applyZoom() {
      const g = canvas.querySelector('g.output');
      if (g && zoom) g.setAttribute('transform', `translate(${zoom.x},${zoom.y}) scale(${zoom.k})`);
    }
    canvas.addEventListener('wheel', (e) => {
      const svg = canvas.querySelector('svg');
      if (!svg) return;
      e.preventDefault();
      const z = currentZoom();
      const rect = svg.getBoundingClientRect();
      const px = e.clientX - rect.left, py = e.clientY - rect.top;
      const k = Math.min(8, Math.max(0.05, z.k * Math.exp(-e.deltaY * 0.002)));
      zoom = {x: px - (px - z.x) * k / z.k, y: py - (py - z.y) * k / z.k, k: k};
      applyZoom();
    }, {passive: false});
    canvas.addEventListener('mousedown', (e) => {
      if (e.button !== 0 || !canvas.querySelector('svg')) return;
      drag = {x: e.clientX, y: e.clientY, from: currentZoom()};
    });
    window.addEventListener('mousemove', (e) => {
      if (!drag) return;
      zoom = {x: drag.from.x + e.clientX - drag.x, y: drag.from.y + e.clientY - drag.y, k: drag.from.k};
      applyZoom();
    });
    window.addEventListener('mouseup', () => { drag = null; });

    // Edge lines in the graph
    canvas.addEventListener('mouseover', (e) => {
      const el = e.target.closest('.edgePath');
      if (el && !el.contains(e.relatedTarget)) hoverStart(el.dataset.from, el.dataset.to, 'graph');
    });
    canvas.addEventListener('mouseout', (e) => {
      const el = e.target.closest('.edgePath');
      if (el && !el.contains(e.relatedTarget)) hoverEnd(el.dataset.from, el.dataset.to, 'graph');
    });

    // Rows in both lists
    ['edgeList', 'shoppingCart'].forEach(listId => {
      const list = document.getElementById(listId);
      list.addEventListener('mouseover', (e) => {
        const row = e.target.closest('.edgeRow');
        if (row && !row.contains(e.relatedTarget)) hoverStart(row.dataset.from, row.dataset.to, listId);
      });
      list.addEventListener('mouseout', (e) => {
        const row = e.target.closest('.edgeRow');
        if (row && !row.contains(e.relatedTarget)) hoverEnd(row.dataset.from, row.dataset.to, listId);
      });
      list.addEventListener('click', async (e) => {
        const button = e.target.closest('button');
        if (!button) return;
        const row = button.closest('.edgeRow');
        const url = button.dataset.action === 'remove' ? '/api/edge/remove' : '/api/edge/return';
        paint(await post(url, {from: row.dataset.from, to: row.dataset.to}));
      });
    });

    document.getElementById('reset').addEventListener('click', async () => {
      paint(await post('/api/reset', {}));
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
def main() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(message)s")

    app = create_app(settings)
    print("=" * 60)
    print("  Edge Cut Viewer")
    print(f"  Cut backend: {settings.backend_url}")
    print(f"  Open http://{settings.viewer_host}:{settings.viewer_port}")
    print("=" * 60)
    try:
        app.run(host=settings.viewer_host, port=settings.viewer_port,
                debug=False, use_reloader=False, threaded=True)
    finally:
        app.extensions["cutviewer"].close()


if __name__ == "__main__":
    main()
