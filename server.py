import logging
import re
import secrets
import threading
from pathlib import Path

from flask import Flask, jsonify, render_template_string, abort, request, make_response
import markdown
from markdown.extensions import Extension

from echofield.config import load_config, layout_params
from echofield.forest import build_forest, find_path, forest_to_dicts, iter_forest, search_roots
from echofield.interaction import ExpansionState, Interaction
from echofield.radial import layout, layout_forest
from echofield.store import NoteStore
from echofield.viewport import ViewTransform

app = Flask(__name__)

HOME = Path(__file__).resolve().parent

_CONFIG_PATH = HOME / "echofield.config.json"
_cfg = load_config(_CONFIG_PATH)

PORT = _cfg["port"]
HOST = _cfg["host"]
ALLOW_POSTING = bool(_cfg["allow_posting"])
POLL_INTERVAL = max(1, int(_cfg["poll_interval"]))
FEED_LIMIT = max(1, int(_cfg["feed_limit"]))
MAX_SESSIONS = max(1, int(_cfg["max_sessions"]))
ROOT_LABEL = _cfg["virtual_root_label"]
VIEW_WIDTH = _cfg["viewport"]["width"]
VIEW_HEIGHT = _cfg["viewport"]["height"]
MIN_SCALE = float(_cfg["viewport"]["min_scale"])
MAX_SCALE = float(_cfg["viewport"]["max_scale"])
LAYOUT_PARAMS = layout_params(_cfg)

STORE = NoteStore(HOME / _cfg["store"])

_SESSION_COOKIE = "echo_sid"
_sessions: dict = {}
_sessions_lock = threading.Lock()

_MENTION_RE = re.compile(r'nostr:([0-9a-f]{64})\b')


class _ViewSession:
    def __init__(self):
        self.transform = ViewTransform(MIN_SCALE, MAX_SCALE)
        self.expansion = ExpansionState()
        self.hovered = None
        self.lock = threading.Lock()

    def to_dict(self) -> dict:
        return {**self.transform.to_dict(), "expanded": self.expansion.ids(), "hovered": self.hovered}


def _get_or_create_session() -> tuple:
    sid = request.cookies.get(_SESSION_COOKIE)
    with _sessions_lock:
        if sid and sid in _sessions:
            # Re-insert so the dict stays ordered least recently used first
            session = _sessions.pop(sid)
            _sessions[sid] = session
            return sid, session, False
        while len(_sessions) >= MAX_SESSIONS:
            _sessions.pop(next(iter(_sessions)))
        sid = secrets.token_urlsafe(32)
        session = _sessions[sid] = _ViewSession()
        return sid, session, True


def _session_response(sid: str, needs_set: bool, payload: dict):
    resp = make_response(jsonify(payload))
    if needs_set:
        resp.set_cookie(_SESSION_COOKIE, sid, samesite="Lax", httponly=True)
    return resp


def _float_arg(source, name: str, default: float) -> float:
    try:
        return float(source.get(name, default))
    except (TypeError, ValueError):
        abort(400)


def process_mentions(text: str) -> str:
    return _MENTION_RE.sub(lambda m: f'[{m.group(1)[:8]}…](#note:{m.group(1)})', text)


def auto_link_urls(text: str) -> str:
    return re.sub(
        r'(?<!\]\()(?<!\()(https?://[^\s<>\)\]]+)',
        lambda m: f'[{m.group(1)}]({m.group(1)})',
        text,
    )


class _EscapeRawHtml(Extension):
    """Treat raw HTML in note content as text so it comes out escaped."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")


def render_markdown(text: str) -> str:
    text = process_mentions(text)
    text = auto_link_urls(text)
    html = markdown.markdown(text, extensions=["fenced_code", "sane_lists", "nl2br", _EscapeRawHtml()])
    html = re.sub(
        r'<a href="(https?://[^"]+)"',
        r'<a href="\1" target="_blank" rel="noopener noreferrer"',
        html,
    )
    return html


def current_forest(promote_id=None) -> list:
    notes = sorted(STORE.load(), key=lambda n: n.created_at)
    return build_forest(notes, promote_id=promote_id)


def current_layout(forest: list, root_id, width: float, height: float):
    if root_id:
        for node, _depth in iter_forest(forest):
            if node.id == root_id:
                return layout(node, width, height, LAYOUT_PARAMS)
        abort(404)
    return layout_forest(forest, width, height, LAYOUT_PARAMS, root_label=ROOT_LABEL)


@app.route("/")
def index():
    return render_template_string(MAIN_TEMPLATE)


@app.route("/api/config")
def api_config():
    return jsonify({
        "allow_posting": ALLOW_POSTING,
        "poll_interval": POLL_INTERVAL,
        "width": VIEW_WIDTH,
        "height": VIEW_HEIGHT,
        "min_scale": MIN_SCALE,
        "max_scale": MAX_SCALE,
    })


@app.route("/api/check")
def api_check():
    return jsonify({"store_hash": STORE.state_hash()})


@app.route("/api/forest")
def api_forest():
    forest = current_forest(request.args.get("promote") or None)
    forest = search_roots(forest, request.args.get("q", ""))
    return jsonify(forest_to_dicts(forest, render=render_markdown))


@app.route("/api/feed")
def api_feed():
    notes = STORE.fetch_posts(FEED_LIMIT)
    return jsonify([n.to_record() for n in notes])


@app.route("/api/thread/<root_id>")
def api_thread(root_id):
    notes = STORE.fetch_thread(root_id)
    if not notes:
        abort(404)
    forest = build_forest(notes, promote_id=root_id)
    return jsonify(forest_to_dicts(forest, render=render_markdown))


@app.route("/api/path/<note_id>")
def api_path(note_id):
    path = find_path(current_forest(), note_id)
    if path is None:
        abort(404)
    return jsonify({"id": note_id, "path": path})


@app.route("/api/layout")
def api_layout():
    width = _float_arg(request.args, "width", VIEW_WIDTH)
    height = _float_arg(request.args, "height", VIEW_HEIGHT)
    result = current_layout(current_forest(), request.args.get("root"), width, height)
    return jsonify(result.to_dict())


@app.route("/api/notes", methods=["POST"])
def api_notes_new():
    if not ALLOW_POSTING:
        return jsonify({"ok": False, "error": "Posting is disabled"}), 403
    body = request.get_json(silent=True) or {}
    content = body.get("content", "")
    parent_id = body.get("parent_id") or None
    if parent_id is not None and not isinstance(parent_id, str):
        return jsonify({"ok": False, "error": "Invalid parent"}), 400
    try:
        note = STORE.publish(content, parent_id=parent_id)
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    except LookupError as e:
        return jsonify({"ok": False, "error": str(e)}), 404
    return jsonify({"ok": True, "note": note.to_record()}), 201


@app.route("/api/view")
def api_view():
    sid, session, new = _get_or_create_session()
    with session.lock:
        payload = session.to_dict()
    return _session_response(sid, new, payload)


@app.route("/api/view/pan", methods=["POST"])
def api_view_pan():
    body = request.get_json(silent=True) or {}
    sid, session, new = _get_or_create_session()
    dx, dy = _float_arg(body, "dx", 0.0), _float_arg(body, "dy", 0.0)
    with session.lock:
        session.transform.pan(dx, dy)
        payload = session.to_dict()
    return _session_response(sid, new, payload)


@app.route("/api/view/zoom", methods=["POST"])
def api_view_zoom():
    body = request.get_json(silent=True) or {}
    sid, session, new = _get_or_create_session()
    around = None
    if "x" in body and "y" in body:
        around = (_float_arg(body, "x", 0.0), _float_arg(body, "y", 0.0))
    factor = _float_arg(body, "factor", 1.0)
    with session.lock:
        session.transform.zoom_by(factor, around)
        payload = session.to_dict()
    return _session_response(sid, new, payload)


@app.route("/api/view/reset", methods=["POST"])
def api_view_reset():
    sid, session, new = _get_or_create_session()
    with session.lock:
        session.transform.reset()
        payload = session.to_dict()
    return _session_response(sid, new, payload)


def _pointer_context(body: dict):
    forest = current_forest()
    width = _float_arg(body, "width", VIEW_WIDTH)
    height = _float_arg(body, "height", VIEW_HEIGHT)
    result = current_layout(forest, body.get("root"), width, height)
    point = (_float_arg(body, "x", 0.0), _float_arg(body, "y", 0.0))
    return forest, result, point


def _focus_dict(focus):
    if focus is None:
        return None
    return {"id": focus.target_id, "path": list(focus.path)}


@app.route("/api/view/hover", methods=["POST"])
def api_view_hover():
    body = request.get_json(silent=True) or {}
    sid, session, new = _get_or_create_session()
    forest, result, point = _pointer_context(body)
    with session.lock:
        interaction = Interaction(forest, session.expansion)
        session.hovered = interaction.hover(result.nodes, point, session.transform)
        links = [l.to_dict() for l in interaction.highlighted_links(result.links)]
        payload = {**session.to_dict(), "links": links}
    return _session_response(sid, new, payload)


@app.route("/api/view/click", methods=["POST"])
def api_view_click():
    body = request.get_json(silent=True) or {}
    sid, session, new = _get_or_create_session()
    forest, result, point = _pointer_context(body)
    with session.lock:
        focus = Interaction(forest, session.expansion).click(result.nodes, point, session.transform)
        payload = session.to_dict()
    payload["focus"] = _focus_dict(focus)
    return _session_response(sid, new, payload)


@app.route("/api/view/focus/<note_id>", methods=["POST"])
def api_view_focus(note_id):
    forest = current_forest()
    sid, session, new = _get_or_create_session()
    with session.lock:
        focus = Interaction(forest, session.expansion).on_node_activate(note_id)
        payload = session.to_dict()
    if focus is None:
        abort(404)
    payload["focus"] = _focus_dict(focus)
    return _session_response(sid, new, payload)


@app.route("/api/view/toggle/<note_id>", methods=["POST"])
def api_view_toggle(note_id):
    sid, session, new = _get_or_create_session()
    with session.lock:
        session.expansion.toggle(note_id)
        payload = session.to_dict()
    return _session_response(sid, new, payload)


MAIN_TEMPLATE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Echo Field</title>
<style>
*, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

:root {
  --bg-primary: #1a1a2e;
  --bg-secondary: #16162a;
  --bg-hover: rgba(134,112,255,.08);
  --bg-active: rgba(134,112,255,.15);
  --text: #e0def4;
  --text-muted: #908caa;
  --text-faint: #6e6a86;
  --accent: #8673ff;
  --accent-hover: #a48fff;
  --accent-dim: rgba(134,112,255,.35);
  --border: rgba(255,255,255,.06);
  --border-strong: rgba(255,255,255,.1);
  --font: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Inter', Roboto, Oxygen, Ubuntu, sans-serif;
  --radius: 4px;
}

html, body { background: var(--bg-primary); color: var(--text); font-family: var(--font); font-size: 16px; line-height: 1.6; }
.container { max-width: 860px; margin: 0 auto; padding: 24px 16px; }
.toolbar { display: flex; gap: 8px; margin-bottom: 16px; }
.toolbar input { flex: 1; background: var(--bg-secondary); color: var(--text); border: 1px solid var(--border-strong); border-radius: var(--radius); padding: 4px 10px; }
.btn { background: none; border: 1px solid var(--border-strong); border-radius: var(--radius); color: var(--text-faint); cursor: pointer; font-size: 12px; padding: 3px 10px; }
.btn:hover { background: var(--bg-hover); color: var(--text); border-color: var(--accent-dim); }
.graph-canvas-wrap { position: relative; height: 500px; overflow: hidden; background: #0e0e1e; border: 1px solid var(--border); border-radius: var(--radius); margin-bottom: 24px; }
.graph-tooltip { position: absolute; pointer-events: none; background: var(--bg-secondary); border: 1px solid var(--border-strong); border-radius: var(--radius); padding: 2px 8px; font-size: 12px; display: none; }
.graph-tooltip.visible { display: block; }
.note { border: 1px solid var(--border); border-radius: var(--radius); padding: 10px 14px; margin-bottom: 10px; background: var(--bg-secondary); }
.note .children { margin-left: 20px; border-left: 2px solid var(--border-strong); padding-left: 14px; margin-top: 10px; }
.note .meta { font-size: 11px; color: var(--text-faint); }
.note.highlight-flash { border-color: var(--accent); background: var(--bg-active); }
.reply-box { display: flex; gap: 6px; margin-top: 8px; }
.reply-box textarea { flex: 1; min-height: 40px; background: var(--bg-primary); color: var(--text); border: 1px solid var(--border-strong); border-radius: var(--radius); padding: 4px 8px; resize: vertical; }
.markdown-body a { color: var(--accent); }
</style>
</head>
<body>
<div class="container">
  <div class="toolbar">
    <input id="searchInput" type="text" placeholder="Search threads...">
    <button class="btn" id="graphReset">Reset view</button>
  </div>
  <div class="graph-canvas-wrap" id="graphWrap">
    <canvas id="graphCanvas"></canvas>
    <div class="graph-tooltip" id="graphTooltip"></div>
  </div>
  <div id="composer"></div>
  <div id="threads"></div>
</div>
<script>
const STATIC_MODE = false;
const $ = s => document.querySelector(s);
const wrap = $('#graphWrap');
const canvas = $('#graphCanvas');
const ctx = canvas.getContext('2d');
const tooltip = $('#graphTooltip');
const threadsEl = $('#threads');

let cfg = { allow_posting: false, poll_interval: 15, min_scale: 0.1, max_scale: 5 };
let forest = [];
let graph = { nodes: [], links: [] };
let view = { panX: 0, panY: 0, scale: 1, expanded: [], hovered: null };
let paths = {};
let lastStoreHash = null;

function esc(s) {
  const d = document.createElement('div');
  d.textContent = s == null ? '' : String(s);
  return d.innerHTML;
}

async function post(url, body) {
  const res = await fetch(url, {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify(body || {})
  });
  return res.json();
}

function size() {
  return { width: wrap.clientWidth, height: wrap.clientHeight };
}

function localInvert(x, y) {
  return { x: (x - view.panX) / view.scale, y: (y - view.panY) / view.scale };
}

function localHit(x, y) {
  const m = localInvert(x, y);
  let best = null;
  graph.nodes.forEach(n => {
    const dx = m.x - n.x, dy = m.y - n.y;
    if (dx * dx + dy * dy > n.radius * n.radius) return;
    if (!best || n.depth > best.depth) best = n;
  });
  return best;
}

async function loadGraph() {
  const s = size();
  const url = STATIC_MODE ? 'data/layout.json' : '/api/layout?width=' + s.width + '&height=' + s.height;
  graph = await (await fetch(url)).json();
  draw();
}

async function loadForest(q) {
  const url = STATIC_MODE ? 'data/forest.json' : '/api/forest' + (q ? '?q=' + encodeURIComponent(q) : '');
  forest = await (await fetch(url)).json();
  if (STATIC_MODE && q) {
    const ql = q.toLowerCase();
    const hit = forest.find(r => r.content.toLowerCase().includes(ql));
    forest = hit ? [hit] : [];
  }
  renderThreads();
}

function renderNote(item) {
  const expanded = view.expanded.includes(item.id);
  const el = document.createElement('div');
  el.className = 'note';
  el.id = 'note-' + item.id;
  el.innerHTML =
    '<div class="meta">' + esc(item.author) + '</div>' +
    '<div class="markdown-body">' + (item.html || esc(item.content)) + '</div>';
  const toggle = document.createElement('button');
  toggle.className = 'btn';
  toggle.textContent = (expanded ? 'Hide' : 'Show') + ' replies (' + item.children.length + ')';
  toggle.addEventListener('click', () => toggleNote(item.id));
  el.appendChild(toggle);
  if (expanded) {
    const kids = document.createElement('div');
    kids.className = 'children';
    item.children.forEach(c => kids.appendChild(renderNote(c)));
    if (cfg.allow_posting && !STATIC_MODE) kids.appendChild(replyBox(item.id));
    el.appendChild(kids);
  }
  return el;
}

function replyBox(parentId) {
  const box = document.createElement('div');
  box.className = 'reply-box';
  box.innerHTML = '<textarea placeholder="' + (parentId ? 'Write a reply...' : 'Share your thoughts...') + '"></textarea>';
  const btn = document.createElement('button');
  btn.className = 'btn';
  btn.textContent = parentId ? 'Reply' : 'Post';
  btn.addEventListener('click', async () => {
    const content = box.querySelector('textarea').value;
    const data = await post('/api/notes', { content: content, parent_id: parentId });
    if (!data.ok) { alert(data.error); return; }
    await refresh();
  });
  box.appendChild(btn);
  return box;
}

function renderThreads() {
  threadsEl.innerHTML = '';
  forest.forEach(root => threadsEl.appendChild(renderNote(root)));
  threadsEl.querySelectorAll('a[href^="#note:"]').forEach(a => {
    a.addEventListener('click', e => {
      e.preventDefault();
      openNote(a.getAttribute('href').slice(6));
    });
  });
}

async function openNote(id) {
  if (STATIC_MODE) {
    if (!paths[id]) return;
    paths[id].forEach(p => { if (!view.expanded.includes(p)) view.expanded.push(p); });
  } else {
    const res = await fetch('/api/view/focus/' + encodeURIComponent(id), { method: 'POST' });
    if (!res.ok) return;
    view = Object.assign(view, await res.json());
  }
  renderThreads();
  focusNote(id);
}

async function toggleNote(id) {
  if (STATIC_MODE) {
    const i = view.expanded.indexOf(id);
    if (i >= 0) view.expanded.splice(i, 1); else view.expanded.push(id);
  } else {
    view = await post('/api/view/toggle/' + encodeURIComponent(id));
  }
  renderThreads();
}

function focusNote(id) {
  const el = document.getElementById('note-' + id);
  if (!el) return;
  el.scrollIntoView({ behavior: 'smooth', block: 'center' });
  el.classList.add('highlight-flash');
  setTimeout(() => el.classList.remove('highlight-flash'), 2000);
}

function resize() {
  const dpr = window.devicePixelRatio || 1;
  canvas.width = wrap.clientWidth * dpr;
  canvas.height = wrap.clientHeight * dpr;
  canvas.style.width = wrap.clientWidth + 'px';
  canvas.style.height = wrap.clientHeight + 'px';
  loadGraph();
}

function draw() {
  const dpr = window.devicePixelRatio || 1;
  ctx.setTransform(dpr, 0, 0, dpr, 0, 0);
  ctx.clearRect(0, 0, wrap.clientWidth, wrap.clientHeight);
  ctx.save();
  ctx.translate(view.panX, view.panY);
  ctx.scale(view.scale, view.scale);
  const pos = {};
  graph.nodes.forEach(n => pos[n.id] = n);
  graph.links.forEach(l => {
    const a = pos[l.source], b = pos[l.target];
    if (!a || !b) return;
    const isHover = view.hovered && (l.source === view.hovered || l.target === view.hovered);
    ctx.beginPath();
    ctx.moveTo(a.x, a.y);
    ctx.lineTo(b.x, b.y);
    ctx.strokeStyle = isHover ? 'rgba(134,112,255,.6)' : 'rgba(224,222,244,.15)';
    ctx.lineWidth = isHover ? 1.5 : 1;
    ctx.stroke();
  });
  graph.nodes.forEach(n => {
    const isHover = n.id === view.hovered;
    ctx.beginPath();
    ctx.arc(n.x, n.y, n.radius + (isHover ? 2 : 0), 0, Math.PI * 2);
    ctx.fillStyle = n.virtual ? '#1a1a2e' : (isHover ? '#8673ff' : '#8673ffaa');
    ctx.fill();
    ctx.strokeStyle = '#e0def4';
    ctx.lineWidth = n.virtual ? 3 : 1;
    ctx.stroke();
    if (n.virtual || isHover) {
      ctx.font = (n.virtual ? '600 14px ' : '10px ') + getComputedStyle(document.body).fontFamily;
      ctx.fillStyle = '#fff';
      ctx.textAlign = 'center';
      ctx.fillText(n.label, n.x, n.y - n.radius - 5);
    }
  });
  ctx.restore();
}

let panning = false, moved = false, panStartX = 0, panStartY = 0, basePanX = 0, basePanY = 0;
let hoverPending = false;

function pointer(e) {
  const rect = canvas.getBoundingClientRect();
  return { x: e.clientX - rect.left, y: e.clientY - rect.top };
}

canvas.addEventListener('mousedown', e => {
  panning = true; moved = false;
  panStartX = e.clientX; panStartY = e.clientY;
  basePanX = view.panX; basePanY = view.panY;
});

canvas.addEventListener('mousemove', async e => {
  const p = pointer(e);
  if (panning) {
    const dx = e.clientX - panStartX, dy = e.clientY - panStartY;
    if (Math.abs(dx) + Math.abs(dy) > 3) moved = true;
    view.panX = basePanX + dx; view.panY = basePanY + dy;
    draw();
    return;
  }
  let hovered;
  if (STATIC_MODE) {
    const n = localHit(p.x, p.y);
    hovered = n ? n.id : null;
  } else {
    if (hoverPending) return;
    hoverPending = true;
    const s = size();
    const data = await post('/api/view/hover', { x: p.x, y: p.y, width: s.width, height: s.height });
    hoverPending = false;
    hovered = data.hovered;
  }
  if (hovered !== view.hovered) {
    view.hovered = hovered;
    draw();
  }
  const n = graph.nodes.find(n => n.id === hovered);
  if (n && !n.virtual) {
    tooltip.innerHTML = esc(n.label);
    tooltip.style.left = (p.x + 12) + 'px';
    tooltip.style.top = (p.y - 10) + 'px';
    tooltip.classList.add('visible');
    canvas.style.cursor = 'pointer';
  } else {
    tooltip.classList.remove('visible');
    canvas.style.cursor = 'default';
  }
});

document.addEventListener('mouseup', async e => {
  if (!panning) return;
  panning = false;
  if (moved) {
    if (!STATIC_MODE) {
      const data = await post('/api/view/pan', { dx: view.panX - basePanX, dy: view.panY - basePanY });
      view = Object.assign(view, data);
    }
    return;
  }
  const p = pointer(e);
  let focus = null;
  if (STATIC_MODE) {
    const n = localHit(p.x, p.y);
    if (n && paths[n.id]) {
      paths[n.id].forEach(id => { if (!view.expanded.includes(id)) view.expanded.push(id); });
      focus = { id: n.id };
    }
  } else {
    const s = size();
    const data = await post('/api/view/click', { x: p.x, y: p.y, width: s.width, height: s.height });
    focus = data.focus;
    view = Object.assign(view, data);
  }
  if (focus) {
    renderThreads();
    focusNote(focus.id);
  }
});

canvas.addEventListener('wheel', async e => {
  e.preventDefault();
  const factor = e.deltaY > 0 ? 0.9 : 1.1;
  const p = pointer(e);
  if (STATIC_MODE) {
    const m = localInvert(p.x, p.y);
    view.scale = Math.min(Math.max(view.scale * factor, cfg.min_scale), cfg.max_scale);
    view.panX = p.x - m.x * view.scale;
    view.panY = p.y - m.y * view.scale;
  } else {
    view = Object.assign(view, await post('/api/view/zoom', { factor: factor, x: p.x, y: p.y }));
  }
  draw();
}, { passive: false });

$('#graphReset').addEventListener('click', async () => {
  if (STATIC_MODE) {
    view.panX = 0; view.panY = 0; view.scale = 1;
  } else {
    view = Object.assign(view, await post('/api/view/reset'));
  }
  draw();
});

$('#searchInput').addEventListener('keydown', e => {
  if (e.key === 'Enter') loadForest(e.target.value.trim());
});

async function refresh() {
  await loadForest($('#searchInput').value.trim());
  await loadGraph();
}

async function pollCheck() {
  try {
    const data = await (await fetch('/api/check')).json();
    if (lastStoreHash !== null && data.store_hash !== lastStoreHash) await refresh();
    lastStoreHash = data.store_hash;
  } catch (e) {  }
}

(async function init() {
  if (STATIC_MODE) {
    paths = await (await fetch('data/paths.json')).json();
  } else {
    cfg = await (await fetch('/api/config')).json();
    view = await (await fetch('/api/view')).json();
    if (cfg.allow_posting) $('#composer').appendChild(replyBox(null));
    setInterval(pollCheck, cfg.poll_interval * 1000);
  }
  new ResizeObserver(resize).observe(wrap);
  await loadForest('');
})();
</script>
</body>
</html>
"""


if __name__ == "__main__":
    import socket
    logging.basicConfig(level=logging.INFO)
    hostname = socket.gethostname()
    local_ip = socket.gethostbyname(hostname)
    print(f"Serving notes: {STORE.path}")
    print(f"Open http://localhost:{PORT}    (this machine)")
    print(f"     http://{local_ip}:{PORT}  (other devices on network)")
    app.run(host=HOST, port=PORT)
