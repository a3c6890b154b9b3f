"""
Command Line Interface

CLI for the FHIR builder service.
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from fhir_builder.builder.config import BuilderConfig, configure_logging, load_config
from fhir_builder.builder.models import BuildRequest
from fhir_builder.builder.orchestrator import BuildOrchestrator
from fhir_builder.errors import BuilderError, UnsupportedResourcesError
from fhir_builder.scaffold.stacks import DEFAULT_STACK, Stack

app = typer.Typer(
    name="fhir-builder",
    help="FHIR capability analyzer and application scaffold generator",
    add_completion=False,
)
console = Console()


def _orchestrator(config: Optional[Path]) -> BuildOrchestrator:
    builder_config = load_config(config) if config else BuilderConfig.from_env()
    configure_logging(builder_config.log_level)
    return BuildOrchestrator(builder_config)


def _fail(error: BuilderError) -> None:
    console.print(f"[red]Error: {escape(error.user_message)}[/red]")
    if isinstance(error, UnsupportedResourcesError) and error.suggestions:
        console.print(f"[yellow]Suggested alternatives: {', '.join(error.suggestions)}[/yellow]")
    raise typer.Exit(1)


@app.command()
def analyze(
    url: str = typer.Argument(..., help="Capability statement URL"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON analysis"),
) -> None:
    """Analyze a FHIR server's capability statement."""
    orchestrator = _orchestrator(config)

    try:
        analysis = orchestrator.analyze_url(url)
    except BuilderError as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(analysis.to_dict()))
        return

    console.print(f"[bold]Server:[/bold] {analysis.server_url}")
    console.print(f"[bold]FHIR version:[/bold] {analysis.version}")

    table = Table(title=f"{len(analysis.supported_resources)} supported resources")
    table.add_column("Resource")
    table.add_column("Interactions")
    table.add_column("Search parameters")
    for resource in analysis.supported_resources:
        table.add_row(
            resource,
            ", ".join(analysis.interactions.get(resource, [])),
            ", ".join(analysis.search_parameters.get(resource, [])),
        )
    console.print(table)

    console.print(
        f"\n[green]Recommended:[/green] {', '.join(analysis.recommended_resources) or '-'}"
    )


@app.command()
def check(
    url: str = typer.Argument(..., help="Capability statement URL"),
    resources: List[str] = typer.Argument(..., help="Requested resource types"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Check requested resources against a FHIR server."""
    orchestrator = _orchestrator(config)

    try:
        _, result, estimate = orchestrator.check_resources(url, resources)
    except BuilderError as e:
        _fail(e)

    if result.valid:
        console.print("[green]All requested resources are supported[/green]")
    else:
        console.print(
            f"[red]Unsupported: {', '.join(result.unsupported_resources)}[/red]"
        )
        if result.suggestions:
            console.print(f"[yellow]Suggestions: {', '.join(result.suggestions)}[/yellow]")

    console.print(
        f"Complexity: {estimate.complexity.value} (~{estimate.estimated_hours} hours)"
    )

    if not result.valid:
        raise typer.Exit(1)


@app.command()
def estimate(
    resources: List[str] = typer.Argument(..., help="Resource types"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Estimate implementation complexity for a resource set."""
    orchestrator = _orchestrator(config)
    result = orchestrator.validator.estimate_complexity(resources)

    console.print(f"[bold]Complexity:[/bold] {result.complexity.value}")
    console.print(f"[bold]Estimated hours:[/bold] {result.estimated_hours}")
    for factor in result.factors:
        console.print(f"  - {factor}")


@app.command()
def generate(
    url: str = typer.Argument(..., help="Capability statement URL"),
    resources: List[str] = typer.Argument(..., help="Requested resource types"),
    stack: Stack = typer.Option(DEFAULT_STACK, "--stack", "-s", help="Target stack"),
    app_name: Optional[str] = typer.Option(None, "--app-name", "-n", help="Application name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    feature: Optional[List[str]] = typer.Option(None, "--feature", "-f", help="Feature flag"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the zip here"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Generate an application scaffold."""
    orchestrator = _orchestrator(config)

    try:
        request = BuildRequest(
            capability_statement_url=url,
            stack=stack,
            resources=resources,
            app_name=app_name,
            description=description,
            features=feature or None,
        )
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Generating scaffold...", total=None)
            record = orchestrator.create_build(request)
    except BuilderError as e:
        _fail(e)

    console.print(f"[green]Build ready: {record.build_id}[/green]")
    console.print(f"[dim]Expires: {record.expires_at.isoformat()}[/dim]")

    if output:
        output.write_bytes(orchestrator.get_build(record.build_id))
        console.print(f"[green]Scaffold saved to: {output}[/green]")


@app.command()
def sweep(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Delete expired build archives."""
    orchestrator = _orchestrator(config)
    deleted = orchestrator.sweep_expired()
    console.print(f"Removed {len(deleted)} expired builds")


@app.command()
def status(
    build_id: str = typer.Argument(..., help="Build ID"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show whether a build is ready or expired."""
    orchestrator = _orchestrator(config)

    try:
        build_status = orchestrator.build_status(build_id)
    except BuilderError as e:
        _fail(e)

    console.print(f"{build_id}: {build_status.value}")


@app.command()
def serve(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
) -> None:
    """Run the HTTP API server."""
    import uvicorn

    from fhir_builder.server import create_app

    orchestrator = _orchestrator(config)
    server_config = orchestrator.config.server
    uvicorn.run(
        create_app(orchestrator),
        host=host or server_config.host,
        port=port or server_config.port,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from fhir_builder import __version__

    console.print(f"fhir-builder version {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
