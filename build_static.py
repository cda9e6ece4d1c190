import json
import shutil
from pathlib import Path

from echofield.forest import find_path, forest_to_dicts, iter_forest
from echofield.radial import layout_forest

from server import (
    HOME,
    LAYOUT_PARAMS,
    MAIN_TEMPLATE,
    ROOT_LABEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    current_forest,
    render_markdown,
)

README = """\
# Echo Field (frozen)

A read-only snapshot of the Echo Field conversation space: every thread as a
nested list plus the radial reply map, served as plain files.

Posting, live reload and per-visitor view state need the Flask server; this
copy keeps browsing, search, pan/zoom and click-to-expand, all done in the
browser from the pre-computed data in `data/`.
"""

OUTPUT = HOME / "_site"


def generate_forest(forest):
    return forest_to_dicts(forest, render=render_markdown)


def generate_layout(forest, width=VIEW_WIDTH, height=VIEW_HEIGHT):
    return layout_forest(forest, width, height, LAYOUT_PARAMS, root_label=ROOT_LABEL).to_dict()


def generate_paths(forest):

    return {node.id: find_path(forest, node.id) for node, _depth in iter_forest(forest)}


def patch_template(html):

    html = html.replace("const STATIC_MODE = false;", "const STATIC_MODE = true;")
    html = html.replace("--accent: #8673ff;", "--accent: #6b9fce;")
    html = html.replace("--accent-dim: rgba(134,112,255,.35);", "--accent-dim: rgba(107,159,206,.30);")
    return html


def build(output: Path = OUTPUT):

    print("Building static site...")

    if output.exists():
        for item in output.iterdir():
            if item.name == ".git":
                continue
            if item.is_dir():
                shutil.rmtree(item)
            else:
                item.unlink()
    data = output / "data"
    data.mkdir(parents=True, exist_ok=True)

    forest = current_forest()

    tree = generate_forest(forest)
    (data / "forest.json").write_text(json.dumps(tree), encoding="utf-8")
    print(f"  forest.json ({len(tree)} threads)")

    graph = generate_layout(forest)
    (data / "layout.json").write_text(json.dumps(graph), encoding="utf-8")
    print(f"  layout.json ({len(graph['nodes'])} nodes, {len(graph['links'])} links)")

    paths = generate_paths(forest)
    (data / "paths.json").write_text(json.dumps(paths), encoding="utf-8")
    print(f"  paths.json ({len(paths)} notes)")

    (output / "index.html").write_text(patch_template(MAIN_TEMPLATE), encoding="utf-8")
    print("  index.html generated")

    (output / ".nojekyll").write_text("", encoding="utf-8")
    (output / "README.md").write_text(README, encoding="utf-8")

    print(f"\nDone! Static site is in: {output}")
    print("To test locally:  cd _site && python3 -m http.server 8080")


if __name__ == "__main__":
    build()
