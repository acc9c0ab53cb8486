"""Command-line interface for meshops."""

from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from meshops.core import Config, ConfigurationError, Mesh, load_config
from meshops.core.builder import MeshBuilder
from meshops.processing import validate_mesh
from meshops.utils import OperationLog, get_logger, log_mesh_result, setup_logging

app = typer.Typer(
    name="meshops",
    help="Consolidate mesh files into canonical indexed triangle meshes",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


def _load(config_path: Optional[Path]) -> Config:
    """Load configuration and set up logging."""
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    setup_logging(cfg.logging)
    return cfg


def _mesh_table(mesh: Mesh, title: str) -> Table:
    """Summarize a mesh and its validation report."""
    report = validate_mesh(mesh)

    table = Table(title=title, show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Vertices", f"{report.vertex_count:,}")
    table.add_row("Triangles", f"{report.triangle_count:,}")
    bounds_min, bounds_max = report.bounds_min, report.bounds_max
    table.add_row(
        "Bounding Box",
        f"[{bounds_min[0]:.3f}, {bounds_min[1]:.3f}, {bounds_min[2]:.3f}] to "
        f"[{bounds_max[0]:.3f}, {bounds_max[1]:.3f}, {bounds_max[2]:.3f}]",
    )
    table.add_row(
        "Size",
        f"{report.extents[0]:.3f} x {report.extents[1]:.3f} x {report.extents[2]:.3f}",
    )
    table.add_row("Surface Area", f"{report.surface_area:.4f}")
    table.add_row("Watertight", "yes" if report.is_watertight else "no")
    if report.volume is not None:
        table.add_row("Volume", f"{report.volume:.4f}")
    table.add_row("Degenerate Triangles", f"{report.degenerate_triangles:,}")
    table.add_row("Unreferenced Vertices", f"{report.unreferenced_vertices:,}")
    table.add_row("Zero Vertex Normals", f"{report.zero_vertex_normals:,}")
    return table


@app.command()
def info(
    resource: str = typer.Argument(
        ...,
        help="Path or file:// URI of the mesh to load",
    ),
    scale: Tuple[float, float, float] = typer.Option(
        (1.0, 1.0, 1.0),
        "--scale",
        "-s",
        help="Per-axis scale applied after scene transforms",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file",
    ),
) -> None:
    """Load a mesh resource and display information about it."""
    cfg = _load(config)
    builder = MeshBuilder(cfg)

    with console.status(f"Loading {resource}..."):
        mesh = builder.from_resource(resource, scale=scale)
    log_mesh_result(logger, mesh, resource)

    if mesh is None:
        console.print(f"[red]No mesh could be produced from {resource}[/red]")
        raise typer.Exit(1)

    console.print(_mesh_table(mesh, "Mesh Information"))


@app.command()
def box(
    x: float = typer.Argument(..., help="Extent along x"),
    y: float = typer.Argument(..., help="Extent along y"),
    z: float = typer.Argument(..., help="Extent along z"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file",
    ),
) -> None:
    """Create a box mesh and display information about it."""
    cfg = _load(config)
    mesh = MeshBuilder(cfg).from_box((x, y, z))
    log_mesh_result(logger, mesh, "box")

    if mesh is None:
        console.print("[red]Box extents must be positive[/red]")
        raise typer.Exit(1)

    console.print(_mesh_table(mesh, "Box Mesh"))


@app.command()
def export(
    resource: str = typer.Argument(
        ...,
        help="Path or file:// URI of the mesh to load",
    ),
    output: Path = typer.Argument(
        ...,
        help="Output file; the format follows the extension (stl, ply, obj, ...)",
    ),
    scale: Tuple[float, float, float] = typer.Option(
        (1.0, 1.0, 1.0),
        "--scale",
        "-s",
        help="Per-axis scale applied after scene transforms",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file",
    ),
) -> None:
    """Consolidate a mesh resource and write it to a file."""
    cfg = _load(config)
    builder = MeshBuilder(cfg)

    mesh = builder.from_resource(resource, scale=scale)
    if mesh is None:
        console.print(f"[red]No mesh could be produced from {resource}[/red]")
        raise typer.Exit(1)

    try:
        with OperationLog(logger, "export", resource=resource, output=str(output)):
            output.parent.mkdir(parents=True, exist_ok=True)
            mesh.to_trimesh().export(output)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"✅ Wrote {mesh.vertex_count:,} vertices and {mesh.triangle_count:,} "
        f"triangles to [cyan]{output}[/cyan]"
    )


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
