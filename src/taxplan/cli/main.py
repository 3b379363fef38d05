"""CLI entry point for taxplan."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

import click
import numpy as np

from taxplan.analytics.tax_curve import tax_curve
from taxplan.config.defaults import default_scenario
from taxplan.config.schema import FILING_STATUSES
from taxplan.core.engine import calculate
from taxplan.io.serialize import dump_result, load_scenario
from taxplan.taxes.rules import available_tax_years, load_rule_table
from taxplan.utils.exceptions import TaxplanError


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group()
@click.version_option(package_name="taxplan")
def cli() -> None:
    """taxplan: tax-year liability and withholding planner."""


@cli.command(name="calculate")
@click.option(
    "--scenario",
    "scenario_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to scenario JSON. Uses defaults if not provided.",
)
@click.option("--year", "tax_year", default=2026, type=int, help="Tax year.")
@click.option(
    "--as-of",
    "as_of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Date for past-due flags (YYYY-MM-DD). Defaults to today.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to write results JSON.",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv).")
def calculate_cmd(
    scenario_path: Path | None,
    tax_year: int,
    as_of: datetime | None,
    output_path: Path | None,
    verbose: int,
) -> None:
    """Calculate tax liability, withholding gap, and quarterly payments."""
    _configure_logging(verbose)
    try:
        if scenario_path is not None:
            profile, income, deductions, credits, pay_stub = load_scenario(
                scenario_path.read_text()
            )
        else:
            profile, income, deductions, credits, pay_stub = default_scenario()

        as_of_date = as_of.date() if as_of is not None else date.today()
        result = calculate(
            profile, income, deductions, credits, pay_stub, tax_year=tax_year, as_of=as_of_date
        )
    except TaxplanError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Tax year {result.tax_year} ({profile.filing_status})")
    click.echo(f"  AGI:                ${result.agi:,.0f}")
    click.echo(f"  Taxable income:     ${result.taxable_income:,.0f}")
    click.echo(f"  Federal income tax: ${result.federal_tax:,.0f}")
    click.echo(f"  SE tax:             ${result.se_tax.total:,.0f}")
    click.echo(f"  Credits:            ${result.total_credits:,.0f}")
    click.echo(f"  Total liability:    ${result.total_tax_liability:,.0f}")
    click.echo(
        f"  Marginal rate: {result.marginal_rate:.0%}   "
        f"Effective rate: {result.effective_rate:.1%}"
    )
    click.echo(f"\nProjected withholding: ${result.projected_annual_withholding:,.0f}")
    click.echo(f"Withholding gap: ${result.withholding_gap:,.0f}")
    click.echo(f"W-4: {result.recommendation.explanation}")

    click.echo("\nQuarterly estimated payments:")
    for payment in result.quarterly_schedule:
        flag = " (past)" if payment.is_past else ""
        click.echo(
            f"  {payment.quarter} due {payment.due_date.isoformat()}: "
            f"${payment.amount:,.0f}{flag}"
        )

    if result.bonus is not None:
        click.echo(f"\nBonus: {result.bonus.explanation}")
    if result.two_earner is not None:
        click.echo(f"\nTwo earners: {result.two_earner.explanation}")

    if output_path is not None:
        output_path.write_text(dump_result(result))
        click.echo(f"\nResults written to {output_path}")


@cli.command()
@click.option("--year", "tax_year", default=2026, type=int, help="Tax year.")
@click.option(
    "--status",
    "filing_status",
    type=click.Choice(FILING_STATUSES),
    default="single",
    help="Filing status.",
)
def brackets(tax_year: int, filing_status: str) -> None:
    """Print the bracket table and a sample tax curve."""
    try:
        rules = load_rule_table(tax_year)
    except TaxplanError as exc:
        years = ", ".join(str(y) for y in available_tax_years())
        raise click.ClickException(f"{exc} (available: {years})") from exc

    click.echo(f"Tax year {tax_year} brackets ({filing_status}):")
    lower = 0.0
    for bracket in rules.brackets(filing_status):  # type: ignore[arg-type]
        upper = "and up" if bracket.upper_bound is None else f"${bracket.upper_bound:,.0f}"
        click.echo(f"  {bracket.rate:>5.0%}  ${lower:,.0f} - {upper}")
        lower = bracket.ceiling

    deduction = rules.standard_deduction_for(filing_status)  # type: ignore[arg-type]
    click.echo(f"Standard deduction: ${deduction:,.0f}")

    curve = tax_curve(
        rules,
        filing_status,  # type: ignore[arg-type]
        np.array([25_000, 50_000, 100_000, 200_000, 400_000, 800_000], dtype=float),
    )
    click.echo("\nAGI          Tax        Marginal  Effective")
    for agi, tax, marginal, effective in zip(
        curve.income, curve.tax, curve.marginal_rate, curve.effective_rate, strict=True
    ):
        click.echo(f"  ${agi:>9,.0f}  ${tax:>9,.0f}  {marginal:>6.0%}  {effective:>8.1%}")


if __name__ == "__main__":
    cli()
