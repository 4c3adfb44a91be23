"""Command line entry points for debtpath."""

from __future__ import annotations

import click

from .config import BaseConfig
from .logging_config import setup_logging
from .services.debts import (
    SIMULATION_MONTH_CAP,
    STRATEGY_LABELS,
    AccountDebt,
    PaymentStrategy,
    PayoffStrategy,
    compare_strategies,
    plan_payments,
    recommend_payment_strategy,
    simulate_strategy,
)
from .services.projection import NEVER_PAYS_OFF_MONTHS, ProjectionType, project_payoff
from .services.scenarios import compare_payment_scenarios
from .services.solver import minimum_payment, payment_for_term


def _parse_account(value: str) -> AccountDebt:
    """Parse ``id:balance:apr:minimum[:priority]`` into an account."""

    parts = value.split(":")
    if len(parts) not in (4, 5):
        raise click.BadParameter(f"expected id:balance:apr:minimum[:priority], got {value!r}")
    account_id, balance, apr, minimum, *priority = parts
    try:
        return AccountDebt(
            account_id=account_id,
            balance=float(balance),
            annual_rate=float(apr),
            minimum_payment=float(minimum),
            payoff_priority=int(priority[0]) if priority else None,
        )
    except ValueError as exc:
        raise click.BadParameter(f"non-numeric value in {value!r}") from exc


def _months_label(months: int) -> str:
    return "never" if months == NEVER_PAYS_OFF_MONTHS else f"{months} months"


@click.group()
@click.option("--log", "enable_log", is_flag=True, default=False, help="Write logs to DATA_DIR/logs")
@click.pass_context
def cli(ctx: click.Context, enable_log: bool) -> None:
    """Debt payoff projections and payment strategies."""

    config = BaseConfig()
    if enable_log:
        setup_logging(config)
    ctx.obj = config


@cli.command("project")
@click.argument("balance", type=float)
@click.argument("apr", type=float)
@click.option("--payment", type=float, default=None, help="Monthly payment (default: card minimum)")
@click.pass_obj
def project_command(config: BaseConfig, balance: float, apr: float, payment: float | None) -> None:
    """Project when BALANCE at APR is paid off."""

    projection_type = ProjectionType.CURRENT_PAYMENT
    if payment is None:
        payment = minimum_payment(
            balance,
            percentage_rate=config.MIN_PAYMENT_PERCENT,
            minimum_floor=config.MIN_PAYMENT_FLOOR,
            apr=apr,
        )
        projection_type = ProjectionType.MINIMUM_ONLY

    projection = project_payoff(balance, apr, payment, projection_type)
    click.echo(f"Payment: {projection.monthly_payment:.2f} ({projection.projection_type.value})")
    if not projection.pays_off:
        click.echo("This payment never pays the balance off.")
        return
    click.echo(f"Months to payoff: {projection.months_to_payoff}")
    click.echo(f"Payoff date: {projection.projected_payoff_date.isoformat()}")
    click.echo(f"Total interest: {projection.total_interest_projected:.2f}")
    click.echo(f"Total paid: {projection.total_payments_projected:.2f}")


@cli.command("payment")
@click.argument("balance", type=float)
@click.argument("apr", type=float)
@click.argument("months", type=int)
def payment_command(balance: float, apr: float, months: int) -> None:
    """Payment needed to clear BALANCE at APR within MONTHS."""

    click.echo(f"{payment_for_term(balance, apr, months):.2f}")


@cli.command("compare")
@click.argument("balance", type=float)
@click.argument("apr", type=float)
@click.argument("current", type=float)
@click.argument("alternative", type=float)
def compare_command(balance: float, apr: float, current: float, alternative: float) -> None:
    """Compare paying CURRENT against ALTERNATIVE each month."""

    comparison = compare_payment_scenarios(balance, apr, current, alternative)
    click.echo(f"Current: {_months_label(comparison.current.months_to_payoff)}")
    click.echo(f"Alternative: {_months_label(comparison.alternative.months_to_payoff)}")
    click.echo(f"Months saved: {comparison.months_saved}")
    click.echo(f"Interest saved: {comparison.interest_saved:.2f}")
    click.echo(f"Extra per month: {comparison.additional_monthly_payment:.2f}")


@cli.command("strategies")
@click.option("--budget", type=float, required=True, help="Total monthly budget for all accounts")
@click.option(
    "--account",
    "raw_accounts",
    multiple=True,
    required=True,
    help="Account as id:balance:apr:minimum[:priority] (repeatable)",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in PayoffStrategy]),
    default=None,
    help="Simulate a single strategy instead of comparing both",
)
def strategies_command(budget: float, raw_accounts: tuple[str, ...], strategy: str | None) -> None:
    """Simulate avalanche and snowball payoff across several accounts."""

    accounts = [_parse_account(value) for value in raw_accounts]

    if strategy is not None:
        result = simulate_strategy(accounts, budget, strategy)
        click.echo(f"{strategy}: {result.total_interest:.2f} interest, {result.months_to_payoff} months")
        if not result.converged:
            click.echo(f"Budget does not clear every balance within {SIMULATION_MONTH_CAP} months.")
        return

    comparison = compare_strategies(accounts, budget)
    for name, result in (("avalanche", comparison.avalanche), ("snowball", comparison.snowball)):
        click.echo(f"{name}: {result.total_interest:.2f} interest, {result.months_to_payoff} months")
    click.echo(f"Interest difference: {comparison.interest_difference:.2f}")
    click.echo(f"Recommended: {comparison.recommended.value}")


@cli.command("plan")
@click.option("--surplus", type=float, required=True, help="Money available beyond the minimums")
@click.option(
    "--account",
    "raw_accounts",
    multiple=True,
    required=True,
    help="Account as id:balance:apr:minimum[:priority] (repeatable)",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in PaymentStrategy]),
    default=None,
    help="Strategy to plan with (default: the recommended one)",
)
def plan_command(surplus: float, raw_accounts: tuple[str, ...], strategy: str | None) -> None:
    """Split one month's SURPLUS across accounts on top of their minimums."""

    accounts = [_parse_account(value) for value in raw_accounts]

    if strategy is None:
        recommendation = recommend_payment_strategy(accounts, surplus)
        click.echo(f"Recommended: {STRATEGY_LABELS[recommendation.strategy]}")
        click.echo(f"  {recommendation.reason}")
        strategy = recommendation.strategy.value

    plan = plan_payments(accounts, strategy, surplus)
    click.echo(f"Strategy: {STRATEGY_LABELS[plan.strategy]}")
    for allocation in plan.allocations:
        marker = " *" if allocation.is_target else ""
        click.echo(
            f"{allocation.account_id}: {allocation.total_payment:.2f} "
            f"(minimum {allocation.minimum_payment:.2f}, extra {allocation.extra_payment:.2f}){marker}"
        )
    click.echo(f"Surplus allocated: {plan.surplus_allocated:.2f}")
    if plan.target_account_id is not None:
        months = plan.projected_payoff_months
        click.echo(
            f"{plan.target_account_id} paid off in: "
            + (f"{months} months" if months is not None else "more than 360 months")
        )


def main() -> None:  # pragma: no cover - console script
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
