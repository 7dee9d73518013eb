"""finstate reconcile — rebuild holdings from the lot ledger in a store file."""

from __future__ import annotations

import json

import click

from finstate.core.exceptions import FinStateError


@click.command()
@click.argument("store_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", default=None, help='Account id to reconcile ("" for unassigned).')
@click.option("--ticker", default=None, help="Reconcile a single ticker (within --account).")
@click.option("--json", "as_json", is_flag=True, help="Emit results as JSON.")
@click.pass_obj
def reconcile(config, store_file: str, account: str | None, ticker: str | None, as_json: bool) -> None:
    """Reconcile holdings in a JSON store file against its transactions.

    With --ticker, reconciles that pair; with only --account, every ticker in
    the account; otherwise every pair in the store.
    """
    from finstate.core.store import JsonFileEntityStore
    from finstate.core.utils.async_helpers import run_async_safely
    from finstate.financial.ledger import HoldingsReconciler

    store = JsonFileEntityStore(store_file)
    reconciler = HoldingsReconciler.from_config(store, config)

    async def _run():
        if ticker:
            return [await reconciler.reconcile_pair(ticker, account)]
        if account is not None:
            return await reconciler.reconcile_account(account)
        return await reconciler.reconcile_all()

    try:
        results = run_async_safely(_run())
    except FinStateError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "ticker": r.ticker,
                        "accountId": r.account_id,
                        "status": r.status.value,
                        "quantity": r.quantity,
                        "costBasis": r.cost_basis,
                        "previousQuantity": r.previous_quantity,
                    }
                    for r in results
                ],
                indent=2,
            )
        )
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title="Holdings reconciliation")
    for column in ("Ticker", "Account", "Status", "Quantity", "Cost basis"):
        table.add_column(column)
    for r in results:
        table.add_row(
            r.ticker,
            r.account_id or "unassigned",
            r.status.value,
            f"{r.quantity:.8g}",
            f"{r.cost_basis:,.2f}",
        )
    Console().print(table)

    written = sum(1 for r in results if r.wrote)
    click.echo(f"{len(results)} pairs checked, {written} holdings written.")
