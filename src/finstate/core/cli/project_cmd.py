"""finstate project — print a multi-year cash-flow projection."""

from __future__ import annotations

import json

import click

from finstate.core.exceptions import FinStateError


@click.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--horizon", type=click.IntRange(min=1), default=None, help="Years to project after this one.")
@click.option("--json", "as_json", is_flag=True, help="Emit the series as JSON.")
@click.pass_obj
def project(config, snapshot: str, horizon: int | None, as_json: bool) -> None:
    """Project cash flow year by year from a YAML/JSON snapshot.

    The snapshot holds monthly_income, monthly_budget_expenses, settings,
    liabilities, life_events and goals (and optionally today).
    """
    from finstate.core.cli.common import format_money, load_document
    from finstate.financial.calculators import ProjectionEngine, summarize
    from finstate.financial.models import to_date

    try:
        data = load_document(snapshot)
        engine = ProjectionEngine.from_config(config)
        if horizon is not None:
            engine.horizon_years = horizon
        series = engine.project(
            monthly_income=float(data.get("monthly_income") or 0),
            monthly_budget_expenses=float(data.get("monthly_budget_expenses") or 0),
            life_events=data.get("life_events") or [],
            goals=data.get("goals") or [],
            liabilities=data.get("liabilities") or [],
            settings=data.get("settings") or {},
            today=to_date(data.get("today")),
        )
    except (FinStateError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    summary = summarize(series)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "series": [record.to_dict() for record in series],
                    "summary": {
                        "averageNetCashFlow": summary.average_net_cash_flow,
                        "lowestYear": summary.lowest.year if summary.lowest else None,
                        "highestYear": summary.highest.year if summary.highest else None,
                    },
                },
                indent=2,
            )
        )
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title="Cash-flow projection")
    for column in ("Year", "Income", "Expenses", "Budget", "Debt", "Life events", "Goals", "Net", "Events"):
        table.add_column(column, justify="left" if column == "Events" else "right")
    for r in series:
        net_style = "green" if r.net_cash_flow >= 0 else "red"
        table.add_row(
            str(r.year),
            f"{r.total_income:,}",
            f"{r.total_expenses:,}",
            f"{r.base_expenses:,}",
            f"{r.debt_payments:,}",
            f"{r.life_event_expenses:,}",
            f"{r.goal_expenses:,}",
            f"[{net_style}]{r.net_cash_flow:,}[/{net_style}]",
            ", ".join(r.event_names),
        )

    console = Console()
    console.print(table)
    console.print(f"Average net cash flow: {format_money(summary.average_net_cash_flow)}/yr")
    if summary.lowest and summary.highest:
        console.print(f"Lowest year: {summary.lowest.year} ({format_money(summary.lowest.net_cash_flow)})")
        console.print(f"Highest year: {summary.highest.year} ({format_money(summary.highest.net_cash_flow)})")
