# -*- coding: utf-8 -*-
"""
命令行入口

    fortnight create-agent --name "Alpha Trader" --type trading
    fortnight deploy-agent --name "Alpha Trader" --env devnet
    fortnight serve --port 8000
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from fortnight.agents import AGENT_TYPES
from fortnight.chain import ENVIRONMENTS
from fortnight.deployment import (
    DEFAULT_AGENTS_DIR,
    DEFAULT_DEPLOYMENTS_DIR,
    create_agent_definition,
    deploy_agent,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
):
    """MultiversX DeFi agents: definitions, deployments and the HTTP service."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@app.command("create-agent")
def create_agent(
    name: str = typer.Option("", "--name", "-n", help="Agent name."),
    agent_type: str = typer.Option(
        "trading", "--type", "-t", help=f"Agent type: {', '.join(AGENT_TYPES)}."
    ),
    agents_dir: Path = typer.Option(
        DEFAULT_AGENTS_DIR, "--agents-dir", help="Directory for agent definitions."
    ),
):
    """Write an agent definition file with the type's default configuration."""
    if not name.strip():
        _fail('Agent name is required. Use --name "YourAgentName"')
    if agent_type not in AGENT_TYPES:
        _fail(f"Invalid agent type. Valid types are: {', '.join(AGENT_TYPES)}")

    try:
        path = create_agent_definition(name, agent_type, agents_dir)
    except (FileExistsError, ValueError) as e:
        _fail(str(e))

    typer.echo(f"✓ Created {agent_type} agent: {name}")
    typer.echo(f"  File created: {path}")


@app.command("deploy-agent")
def deploy(
    name: str = typer.Option("", "--name", "-n", help="Agent name."),
    env: str = typer.Option(
        "devnet", "--env", "-e", help=f"Environment: {', '.join(ENVIRONMENTS)}."
    ),
    agents_dir: Path = typer.Option(
        DEFAULT_AGENTS_DIR, "--agents-dir", help="Directory for agent definitions."
    ),
    output_dir: Path = typer.Option(
        DEFAULT_DEPLOYMENTS_DIR, "--output-dir", help="Directory for deployment configs."
    ),
):
    """Write the deployment descriptor for an existing agent definition."""
    if not name.strip():
        _fail('Agent name is required. Use --name "YourAgentName"')
    if env not in ENVIRONMENTS:
        _fail(f"Invalid environment. Valid environments are: {', '.join(ENVIRONMENTS)}")

    try:
        path = deploy_agent(name, env, agents_dir=agents_dir, output_dir=output_dir)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(
            f'Create the agent first using: fortnight create-agent --name "{name}"', err=True
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        _fail(str(e))

    typer.echo(f"✓ Deployed agent: {name} to {env}")
    typer.echo(f"  Deployment config: {path}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: API_PORT)."),
):
    """Run the HTTP service."""
    from fortnight_api.main import run

    run(host=host, port=port)


def main() -> None:
    """Entry point for the fortnight command."""
    app()


if __name__ == "__main__":
    main()
