"""Main CLI entry point for the agency-leaderboard command."""

import json
import logging
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Optional
from datetime import datetime

from ..core.config import LeaderboardConfigManager, ScoreWeights
from ..core.errors import LeaderboardError
from ..core.records import LeaderboardCategory
from ..core.scorer import METRIC_LABELS, MetricKey
from ..storage.store import EntityStore
from ..team.aggregator import compare_to_team, team_averages
from ..team.categories import CATEGORY_LABELS, category_leaderboard, record_ranks
from ..team.leaderboard import compute_leaderboard, generate_leaderboard_report, score_agents
from ..team.onboarding import onboarding_leaderboard
from ..team.ranker import SortDirection
from ..team.training import training_leaderboard

console = Console()

BADGE_ICONS = {"gold": "🥇", "silver": "🥈", "bronze": "🥉"}
TREND_STYLES = {"up": "green", "down": "red", "same": "dim"}


def get_config() -> LeaderboardConfigManager:
    """Get config manager instance."""
    return LeaderboardConfigManager()


def get_store(data_path: Optional[str], manager: LeaderboardConfigManager) -> EntityStore:
    """Get entity store, falling back to the configured snapshot path."""
    path = data_path or manager.config.data_path
    return EntityStore(Path(path) if path else None)


def data_option(f):
    return click.option("--data", "data_path", type=click.Path(dir_okay=False),
                        help="Snapshot JSON file with agents and related records")(f)


def as_of_option(f):
    return click.option("--as-of", "as_of", type=click.DateTime(),
                        help="Reference time for the engagement window (default: now)")(f)


@click.group()
@click.version_option(version="1.0.0", prog_name="agency-leaderboard")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Agency Leaderboard - agent scoring and rankings for insurance agencies.

    \b
    Quick Start:
      agency-leaderboard show --data snapshot.json              # Overall board
      agency-leaderboard show -m retention --status completed   # Filtered board
      agency-leaderboard agent AGENT_ID                         # Drill-down
      agency-leaderboard categories -c sales --record           # Category board
      agency-leaderboard training                               # Training board
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.option("--metric", "-m", type=click.Choice([m.value for m in MetricKey]),
              help="Metric to rank by")
@click.option("--direction", "-d", type=click.Choice([d.value for d in SortDirection]),
              help="Sort direction")
@click.option("--status", "-s", help="Onboarding status to show, or 'all'")
@click.option("--limit", "-n", type=int, help="Number of agents to show")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@as_of_option
@data_option
def show(metric: Optional[str], direction: Optional[str], status: Optional[str],
         limit: Optional[int], as_json: bool, as_of: Optional[datetime], data_path: Optional[str]):
    """Display the agent leaderboard with team averages."""
    manager = get_config()
    config = manager.config
    store = get_store(data_path, manager)

    try:
        result = compute_leaderboard(
            **store.snapshot.scoring_collections,
            status_filter=status or config.status_filter,
            sort_metric=metric or config.sort_metric,
            sort_direction=direction or config.sort_direction,
            as_of=as_of,
            weights=config.weights,
            engagement_window_days=config.engagement_window_days,
            limit=limit if limit is not None else config.display_limit,
        )
    except LeaderboardError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.ranked_agents:
        console.print("[yellow]No agents found matching criteria.[/yellow]")
        return

    sort_metric = result.sort_metric
    average = result.team_averages.get(sort_metric, 0)

    table = Table(title=f"{METRIC_LABELS[sort_metric]} ({result.sort_direction.value})")
    table.add_column("Rank", justify="right")
    table.add_column("Agent", style="cyan", max_width=28)
    table.add_column("Status")
    table.add_column(METRIC_LABELS[sort_metric], justify="right", style="bold")
    table.add_column("vs Team", justify="right")
    table.add_column("Overall", justify="right")
    table.add_column("Commissions", justify="right")

    for ranked in result.ranked_agents:
        value = ranked.metrics.value(sort_metric)
        style = "green" if result.is_above_average(ranked) else "red"
        table.add_row(
            f"{BADGE_ICONS.get(ranked.badge, '')} {ranked.rank}".strip(),
            ranked.agent.full_name or ranked.agent.id,
            ranked.agent.onboarding_status or "-",
            f"{value}%",
            f"[{style}]{value - average:+d}[/{style}]",
            str(ranked.metrics.overall),
            f"${ranked.metrics.total_commissions:,.2f}",
        )

    console.print(table)
    _print_team_averages(result.team_averages)


@cli.command()
@click.argument("agent_id")
@as_of_option
@data_option
def agent(agent_id: str, as_of: Optional[datetime], data_path: Optional[str]):
    """Show one agent's metrics against the team averages."""
    manager = get_config()
    config = manager.config
    store = get_store(data_path, manager)

    result = compute_leaderboard(
        **store.snapshot.scoring_collections,
        as_of=as_of,
        weights=config.weights,
        engagement_window_days=config.engagement_window_days,
    )
    ranked = result.find(agent_id)
    if not ranked:
        console.print(f"[red]Agent {agent_id} not found[/red]")
        return

    m = ranked.metrics
    console.print(Panel.fit(
        f"[bold]Rank:[/bold] #{ranked.rank} overall\n"
        f"[bold]Email:[/bold] {ranked.agent.email or 'N/A'}\n"
        f"[bold]Status:[/bold] {ranked.agent.onboarding_status or 'N/A'}\n\n"
        f"[bold]Clients:[/bold] {m.total_clients} ({m.active_clients} active, {m.churned} churned)\n"
        f"[bold]Outbound (recent):[/bold] {m.proactive_interactions}   "
        f"[bold]Successful outreach:[/bold] {m.successful_outreach}\n"
        f"[bold]Resolved risks:[/bold] {m.resolved_risks}   "
        f"[bold]Opportunities won:[/bold] {m.completed_opportunities}\n"
        f"[bold]Contracts:[/bold] {m.active_contracts} active   "
        f"[bold]Licenses:[/bold] {m.active_licenses} active\n"
        f"[bold]Tasks:[/bold] {m.completed_tasks}/{m.total_tasks}   "
        f"[bold]Commissions:[/bold] ${m.total_commissions:,.2f}",
        title=ranked.agent.full_name or ranked.agent.id
    ))

    table = Table(title="Compared to Team")
    table.add_column("Metric")
    table.add_column("Agent", justify="right", style="bold")
    table.add_column("Team Avg", justify="right")
    table.add_column("Diff", justify="right")

    for comparison in compare_to_team(m, result.team_averages):
        style = "green" if comparison.above_average else "red"
        table.add_row(
            METRIC_LABELS[comparison.metric],
            str(comparison.value),
            str(comparison.team_average),
            f"[{style}]{comparison.difference:+d}[/{style}]",
        )

    console.print(table)


@cli.command()
@as_of_option
@data_option
def team(as_of: Optional[datetime], data_path: Optional[str]):
    """Show team averages across every agent."""
    manager = get_config()
    config = manager.config
    store = get_store(data_path, manager)

    scored = score_agents(
        **store.snapshot.scoring_collections,
        as_of=as_of,
        weights=config.weights,
        engagement_window_days=config.engagement_window_days,
    )
    averages = team_averages(scored)
    if not averages:
        console.print("[yellow]No agents to average.[/yellow]")
        return

    console.print(f"[bold]{len(scored)}[/bold] agents")
    _print_team_averages(averages)


@cli.command()
@click.option("--category", "-c", type=click.Choice([c.value for c in LeaderboardCategory]),
              default="overall", help="Leaderboard category")
@click.option("--limit", "-n", default=10, help="Number of agents to show")
@click.option("--agent-id", help="Highlight this agent's standing")
@click.option("--record", is_flag=True, help="Store current ranks for next period's movement")
@data_option
def categories(category: str, limit: int, agent_id: Optional[str], record: bool, data_path: Optional[str]):
    """Display a category leaderboard with rank movement."""
    store = get_store(data_path, get_config())
    snapshot = store.snapshot
    selected = LeaderboardCategory(category)

    entries = category_leaderboard(
        snapshot.agents,
        snapshot.agent_points,
        snapshot.commissions,
        snapshot.clients,
        snapshot.licenses,
        selected,
    )

    if not entries:
        console.print("[yellow]No agents found.[/yellow]")
        return

    table = Table(title=CATEGORY_LABELS[selected])
    table.add_column("Rank", justify="right")
    table.add_column("Agent", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Change", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("Streak", justify="right")

    for entry in entries[:limit]:
        style = TREND_STYLES[entry.trend]
        marker = "*" if entry.agent.id == agent_id else ""
        table.add_row(
            str(entry.rank),
            f"{marker}{entry.agent.full_name or entry.agent.id}",
            f"{round(entry.scores[selected]):,}",
            f"[{style}]{entry.change:+d}[/{style}]" if entry.change else f"[{style}]-[/{style}]",
            str(entry.level),
            f"{entry.streak}d",
        )

    console.print(table)

    if record:
        updated = record_ranks(entries, snapshot.agent_points, selected)
        store.save_agent_points(updated)
        console.print(f"[green]✓ Recorded {selected.value} ranks for {len(entries)} agents[/green]")


@cli.command()
@click.option("--limit", "-n", default=10, help="Number of agents to show")
@data_option
def onboarding(limit: int, data_path: Optional[str]):
    """Display the onboarding leaderboard."""
    store = get_store(data_path, get_config())
    snapshot = store.snapshot

    entries = onboarding_leaderboard(snapshot.agents, snapshot.badges, snapshot.checklist_items, limit)
    if not entries:
        console.print("[yellow]No agents found.[/yellow]")
        return

    table = Table(title="Onboarding Leaderboard")
    table.add_column("Rank", justify="right")
    table.add_column("Agent", style="cyan")
    table.add_column("Progress", justify="right")
    table.add_column("Badges", justify="right")
    table.add_column("Score", justify="right", style="bold")

    for entry in entries:
        table.add_row(
            str(entry.rank),
            entry.agent.full_name or entry.agent.id,
            f"{entry.progress_percent}%",
            str(entry.badge_count),
            f"{entry.total_score:,.0f}",
        )

    console.print(table)


@cli.command()
@click.option("--limit", "-n", default=10, help="Number of agents to show")
@data_option
def training(limit: int, data_path: Optional[str]):
    """Display the training leaderboard."""
    store = get_store(data_path, get_config())
    snapshot = store.snapshot

    entries = training_leaderboard(
        snapshot.agents, snapshot.training_sessions, snapshot.achievements, snapshot.agent_points, limit
    )
    if not entries:
        console.print("[yellow]No agents found.[/yellow]")
        return

    table = Table(title="Training Leaderboard")
    table.add_column("Rank", justify="right")
    table.add_column("Agent", style="cyan")
    table.add_column("Points", justify="right", style="bold")
    table.add_column("Modules", justify="right")
    table.add_column("Avg Score", justify="right")
    table.add_column("Achievements", justify="right")

    for entry in entries:
        table.add_row(
            str(entry.rank),
            entry.agent.full_name or entry.agent.id,
            f"{entry.total_points:,.0f}",
            str(entry.completed_modules),
            f"{entry.average_score}%",
            str(entry.achievements),
        )

    console.print(table)


@cli.command()
@click.option("--path", "-p", type=click.Path(), default="./leaderboard_report.json", help="Output file path")
@click.option("--status", "-s", default="all", help="Onboarding status to include, or 'all'")
@as_of_option
@data_option
def report(path: str, status: str, as_of: Optional[datetime], data_path: Optional[str]):
    """Export a JSON report with every metric's leaderboard."""
    manager = get_config()
    config = manager.config
    store = get_store(data_path, manager)

    scored = score_agents(
        **store.snapshot.scoring_collections,
        as_of=as_of,
        weights=config.weights,
        engagement_window_days=config.engagement_window_days,
    )
    data = generate_leaderboard_report(scored, status, config.display_limit)

    with open(path, 'w') as f:
        json.dump(data, f, indent=2)

    console.print(f"[green]✓ Report for {len(scored)} agents written to {path}[/green]")


# ============================================================================
# CONFIG
# ============================================================================

@cli.group()
def config():
    """View and change leaderboard settings."""
    pass


@config.command("show")
def config_show():
    """Show current settings."""
    manager = get_config()
    c = manager.config

    weights = "\n".join(
        f"  {name}: {value:.2f}" for name, value in c.weights.to_dict().items()
    )
    console.print(Panel.fit(
        f"[bold]Sort metric:[/bold] {c.sort_metric}\n"
        f"[bold]Sort direction:[/bold] {c.sort_direction}\n"
        f"[bold]Status filter:[/bold] {c.status_filter}\n"
        f"[bold]Display limit:[/bold] {c.display_limit}\n"
        f"[bold]Engagement window:[/bold] {c.engagement_window_days} days\n"
        f"[bold]Data path:[/bold] {c.data_path or 'default'}\n\n"
        f"[bold]Weights:[/bold]\n{weights}\n\n"
        f"[dim]File: {manager.config_path}[/dim]",
        title="Leaderboard Config"
    ))


@config.command("set")
@click.option("--metric", type=click.Choice([m.value for m in MetricKey]), help="Default sort metric")
@click.option("--direction", type=click.Choice([d.value for d in SortDirection]), help="Default sort direction")
@click.option("--status", help="Default onboarding status filter")
@click.option("--limit", type=int, help="Default number of agents shown")
@click.option("--window", type=int, help="Engagement window in days")
@click.option("--data", "data_path", help="Default snapshot path")
@click.option("--weights", "weights_json", help='Weights as JSON, e.g. \'{"licenses": 0.2, ...}\'')
def config_set(metric: Optional[str], direction: Optional[str], status: Optional[str],
               limit: Optional[int], window: Optional[int], data_path: Optional[str],
               weights_json: Optional[str]):
    """Change default settings."""
    manager = get_config()
    changes = {
        "sort_metric": metric,
        "sort_direction": direction,
        "status_filter": status,
        "display_limit": limit,
        "engagement_window_days": window,
        "data_path": data_path,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    if weights_json:
        try:
            changes["weights"] = ScoreWeights.from_dict(json.loads(weights_json))
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Weights are not valid JSON: {e}")
        except LeaderboardError as e:
            raise click.ClickException(str(e))
        except (AttributeError, TypeError, ValueError) as e:
            raise click.ClickException(f"Weights must be a JSON object of numbers: {e}")

    if not changes:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    manager.update(**changes)
    console.print(f"[green]✓ Updated {', '.join(changes)}[/green]")


@config.command("reset")
def config_reset():
    """Restore default settings."""
    manager = get_config()
    manager.reset()
    console.print("[green]✓ Settings reset to defaults[/green]")


def _print_team_averages(averages):
    table = Table(title="Team Averages")
    table.add_column("Metric")
    table.add_column("Average", justify="right", style="bold")
    for metric in MetricKey:
        table.add_row(METRIC_LABELS[metric], f"{averages.get(metric, 0)}%")
    console.print(table)


if __name__ == "__main__":
    cli()
