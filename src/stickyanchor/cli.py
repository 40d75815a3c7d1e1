from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer

from .config import OverlayConfig
from .geometry.coords import Rect
from .geometry.placement import calculate_best_position, clamp_to_viewport, slot_origin
from .models import AUTO_SLOT, VALID_SLOTS
from .sync.markers import DEFAULT_GRACE_PERIOD_MS, purge_expired
from .sync.reconciler import calculate_note_diff

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Positioning and sync tools for page-attached sticky notes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _floats(value: str, count: int, name: str) -> list[float]:
    try:
        parts = [float(p) for p in value.split(",")]
    except ValueError:
        raise typer.BadParameter(f"{name} must be {count} comma-separated numbers, got {value!r}")
    if len(parts) != count:
        raise typer.BadParameter(f"{name} must be {count} comma-separated numbers, got {value!r}")
    return parts


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read JSON from {path}: {e}")


def _local_notes(data: Any) -> dict[str, Any]:
    """Accept either {id: {content, theme}} or a list of notes with ids."""
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {str(n["id"]): n for n in data if isinstance(n, dict) and "id" in n}
    raise typer.BadParameter("Local notes must be an object keyed by id or a list of notes")


@app.command()
def init(out: str = typer.Option("config.toml", help="Write example config to this path")):
    """Write a starter config.toml."""
    outp = Path(out)
    outp.write_text("""[placement]
padding = 10
slot_gap = 10

[stacking]
# Leave headroom below 2147483647 for bring-to-front calls
base_z_index = 2147480000

[sync]
grace_period_ms = 15000
purge_interval_ms = 5000

[widget]
default_slot = "top-right"
highlight_class = "sn-anchor-highlight"
""", encoding="utf-8")
    typer.echo(f"Wrote {outp}")


@app.command()
def place(
    anchor: str = typer.Option(..., help="Anchor rect as LEFT,TOP,WIDTH,HEIGHT (viewport)"),
    note: str = typer.Option(..., help="Note size as WIDTH,HEIGHT"),
    viewport: str = typer.Option(..., help="Viewport size as WIDTH,HEIGHT"),
    slot: str = typer.Option(AUTO_SLOT, help="Named slot, or auto to pick the best one"),
    clamp: bool = typer.Option(False, help="Clamp the result into the padded viewport"),
    config: str = typer.Option("", help="Optional config.toml for padding/gap"),
):
    """Compute where a note would be placed around an anchor."""
    cfg = OverlayConfig.from_toml(config) if config else OverlayConfig()
    if slot not in VALID_SLOTS:
        raise typer.BadParameter(f"Unknown slot {slot!r}. Choose from {sorted(VALID_SLOTS)}")

    left, top, width, height = _floats(anchor, 4, "anchor")
    note_w, note_h = _floats(note, 2, "note")
    vw, vh = _floats(viewport, 2, "viewport")
    anchor_rect = Rect(left, top, width, height)

    chosen = slot
    if slot == AUTO_SLOT:
        chosen = calculate_best_position(
            anchor_rect, note_w, note_h, viewport_width=vw, viewport_height=vh, gap=cfg.slot_gap
        )
    x, y = slot_origin(chosen, anchor_rect, note_w, note_h, cfg.slot_gap)
    if clamp:
        x, y = clamp_to_viewport(x, y, note_w, note_h, viewport_width=vw, viewport_height=vh, padding=cfg.padding)

    typer.echo(json.dumps({"slot": chosen, "x": x, "y": y}, indent=2))


@app.command()
def diff(
    local: Path = typer.Argument(..., help="Local notes JSON"),
    remote: Path = typer.Argument(..., help="Remote snapshot JSON (list of notes)"),
    markers: Path = typer.Option(None, help="Session markers JSON ({id: createdAtMs})"),
):
    """Reconcile local notes against a remote snapshot."""
    current = _local_notes(_load_json(local))
    remote_list = _load_json(remote)
    if not isinstance(remote_list, list):
        raise typer.BadParameter("Remote snapshot must be a JSON list")
    marker_table = _load_json(markers) if markers else {}

    result = calculate_note_diff(current, remote_list, marker_table)
    typer.echo(json.dumps({
        "toCreate": [{"noteData": c.note.to_dict(), "isNewNote": c.is_new_note} for c in result.to_create],
        "toUpdate": [s.to_dict() for s in result.to_update],
        "toRemove": result.to_remove,
    }, indent=2))


@app.command()
def purge(
    markers: Path = typer.Argument(..., help="Session markers JSON ({id: createdAtMs})"),
    now: float = typer.Option(..., help="Current monotonic time in ms"),
    grace: float = typer.Option(DEFAULT_GRACE_PERIOD_MS, help="Grace period in ms"),
    write: bool = typer.Option(False, help="Write the purged table back to MARKERS"),
):
    """Expire session markers older than the grace period."""
    table = _load_json(markers)
    if not isinstance(table, dict):
        raise typer.BadParameter("Markers must be a JSON object")
    expired = purge_expired(table, now, grace)
    if write:
        markers.write_text(json.dumps(table, indent=2), encoding="utf-8")
    typer.echo(json.dumps({"expired": expired, "remaining": table}, indent=2))


if __name__ == "__main__":
    app()
