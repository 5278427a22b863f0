#!filepath: position_escrow/cli.py
from typing import Optional

import typer
from rich import print
from rich.table import Table

from position_escrow import __version__
from position_escrow.chain import account_address
from position_escrow.config.app_config import AppConfig
from position_escrow.deployer import predict_address
from position_escrow.escrow import derive_salt
from position_escrow.utils.errors import UserInputError
from position_escrow.utils.logger import init_logging

app = typer.Typer(help="Position escrow factory CLI")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def salt(factory: str, account: str):
    """
    Salt the factory uses for ACCOUNT (labels or 0x addresses).
    """
    try:
        value = derive_salt(account_address(factory), account_address(account))
    except UserInputError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)
    print(f"0x{value.hex()}")


@app.command()
def predict(factory: str, account: str):
    """
    Escrow address ACCOUNT gets from FACTORY, deployed or not.
    """
    try:
        factory_address = account_address(factory)
        value = derive_salt(factory_address, account_address(account))
    except UserInputError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)
    print(predict_address(factory_address, value))


@app.command()
def simulate(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config path"),
    fee_bps: Optional[int] = typer.Option(None, "--fee-bps", help="override factory.fee_bps"),
    reward: Optional[int] = typer.Option(None, "--reward", help="override simulation.reward"),
    claim_only: bool = typer.Option(False, "--claim-only", help="claim without exiting"),
):
    """
    Run signal → create → claim/exit for every configured account on an
    in-memory host and print the split.
    """
    from position_escrow.workflows.lifecycle import run_lifecycle

    cfg = AppConfig.load(config)

    overrides = {}
    if fee_bps is not None:
        overrides["factory"] = {**cfg.factory.model_dump(), "fee_bps": fee_bps}
    if reward is not None or claim_only:
        sim = cfg.simulation.model_dump()
        if reward is not None:
            sim["reward"] = reward
        if claim_only:
            sim["exit"] = False
        overrides["simulation"] = sim
    if overrides:
        cfg = AppConfig(**{**cfg.model_dump(), **overrides})

    init_logging(cfg.log)

    print(f"[green]Simulating {len(cfg.simulation.accounts)} escrow(s), fee_bps={cfg.factory.fee_bps}[/green]")
    report = run_lifecycle(cfg)

    table = Table(title=f"factory {report.factory}")
    for col in ("account", "escrow", "token", "reward", "fee", "payout", "exited"):
        table.add_column(col)
    for row in report.accounts:
        table.add_row(
            row.account, row.escrow, str(row.token_id),
            str(row.reward), str(row.fee), str(row.payout), str(row.exited),
        )
    print(table)
    print(f"[blue]protocol fees withdrawn: {report.withdrawn}[/blue]")


if __name__ == "__main__":
    app()

# python -m position_escrow.cli simulate --fee-bps 490
