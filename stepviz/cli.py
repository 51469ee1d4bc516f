"""Command line interface for the workflow visualizer."""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional

import typer

from stepviz import WorkflowVisualization, get_transport, load_config
from stepviz.dispatch import EventDispatcher
from stepviz.graph import GraphState
from stepviz.layout import calculate_layout
from stepviz.progress import ProgressTracker
from stepviz.renderer import Renderer
from stepviz.scene import SvgScene
from stepviz.scheduling import AsyncioScheduler
from stepviz.simulation import ScriptedWorkflow

app = typer.Typer(help="Live visualization of externally driven workflows")


@app.callback()
def main(
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """stepviz CLI entry point."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("watch")
def watch(
    output: Path = typer.Option(Path("workflow.svg"), help="SVG snapshot to keep updated"),
    host: Optional[str] = typer.Option(None, help="Workflow server host"),
    port: Optional[int] = typer.Option(None, help="Workflow server port"),
    width: Optional[float] = typer.Option(None, help="Viewport width"),
    height: Optional[float] = typer.Option(None, help="Viewport height"),
    lifespan: Optional[float] = typer.Option(
        None, help="Stop after this many seconds (default: run until interrupted)"
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """
    Follow a live workflow and render it to an SVG file.

    Connects to the workflow server's event stream, reconnecting every few
    seconds while it is unavailable, and rewrites the SVG after every change.
    Send SIGHUP (``kill -HUP <pid>``) to force a reconnect.

    Example:
        stepviz watch --output run.svg
        stepviz watch --host 10.0.0.5 --port 9000 --lifespan 600
    """
    config = load_config(config_path)
    if host:
        config.transport.connection.host = host
    if port:
        config.transport.connection.port = port

    scene = SvgScene(
        width=width or config.render.viewport_width,
        height=height or config.render.viewport_height,
        output_path=output,
    )
    visualization = WorkflowVisualization(get_transport(config=config), scene, config=config)
    conn = config.transport.connection
    typer.echo(f"Watching ws://{conn.host}:{conn.port}{conn.path} -> {output}")
    # SIGHUP does not exist on Windows
    reconnect_signal = getattr(signal, "SIGHUP", None)
    if reconnect_signal is not None:
        typer.echo("Send SIGHUP to reconnect")
    try:
        asyncio.run(visualization.run(lifespan=lifespan, reconnect_signal=reconnect_signal))
    except KeyboardInterrupt:
        typer.echo("Stopped")


@app.command("simulate")
def simulate(
    output: Path = typer.Option(Path("workflow.svg"), help="SVG file to write"),
    speed: float = typer.Option(1.0, help="Playback speed multiplier"),
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """
    Play the built-in demo workflow without a server.

    Example:
        stepviz simulate --output demo.svg --speed 4
    """
    if speed <= 0:
        typer.secho("Speed must be positive", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    config = load_config(config_path)
    scene = SvgScene(
        width=config.render.viewport_width,
        height=config.render.viewport_height,
        output_path=output,
    )

    async def _play() -> int:
        state = GraphState()
        tracker = ProgressTracker(state, scene)
        renderer = Renderer(state, scene, AsyncioScheduler(), config.render)
        dispatcher = EventDispatcher(state, renderer, tracker)
        script = ScriptedWorkflow(step_delay=0.8 / speed, pause=0.6 / speed)
        sent = await script.play(dispatcher)
        # let entrance and info-reveal timers settle before the final snapshot
        settle = config.render.info_reveal_delay
        settle += len(script.steps) * config.render.stagger_interval
        await asyncio.sleep(settle)
        return sent

    sent = asyncio.run(_play())
    scene.write()
    typer.echo(f"Played {sent} events; {scene.progress.text}. Wrote {output}")


@app.command("layout")
def layout(
    count: int,
    width: float = typer.Option(1200, help="Viewport width"),
    height: float = typer.Option(800, help="Viewport height"),
) -> None:
    """
    Print node positions for a workflow of COUNT steps.

    Example:
        stepviz layout 5 --width 1440 --height 900
    """
    if count < 0:
        typer.secho("COUNT must not be negative", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if count == 0:
        typer.echo("No steps")
        return
    for index, position in enumerate(calculate_layout(count, width, height)):
        typer.echo(f"{index}\t{position.x:.1f}\t{position.y:.1f}")


if __name__ == "__main__":
    app()
