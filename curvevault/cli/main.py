"""
curvevault CLI - Command Line Interface for the vault simulator

Main entry point for all CLI commands.
"""

from dataclasses import dataclass

import click

from curvevault.utils.logger import setup_logging, get_logger

logger = get_logger("cli")

# Deterministic participants of the simulations
PARTICIPANTS = ("admin", "curator", "bidder", "alice", "bob")

# Simulation vault: 1M tokens at 0.0001 each (valuation 100), 10 in the secondary reserve
SIM_INITIAL_SUPPLY = 10**6 * 10**18
SIM_INITIAL_PRICE = 10**14
SIM_SECONDARY_RESERVE = 10 * 10**18
SIM_FUNDING = 1_000 * 10**18


def format_units(amount: int, decimals: int = 18, places: int = 6) -> str:
    """Render a base-unit amount as a decimal string."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    frac_str = str(frac).rjust(decimals, "0")[:places]
    return f"{sign}{whole}.{frac_str}"


@dataclass
class Simulation:
    """Everything a scripted scenario acts on."""
    chain: object
    protocol: object
    vault: object
    accounts: dict
    nft: bytes


def build_simulation(cfg) -> Simulation:
    """
    Create a chain, a protocol admin and one funded vault.

    Accounts are derived from fixed labels so every run is identical.
    """
    from curvevault.core.protocol import ProtocolAdmin
    from curvevault.core.state import Chain
    from curvevault.core.vault import VaultParams
    from curvevault.crypto import address_from_label

    accounts = {label: address_from_label(label) for label in PARTICIPANTS}
    nft = address_from_label("simulated-nft")

    chain = Chain(timestamp=1_700_000_000)
    for label in PARTICIPANTS:
        chain.mint(accounts[label], SIM_FUNDING)
    chain.custody.mint_erc721(nft, 1, accounts["curator"])

    protocol = ProtocolAdmin(chain, admin=accounts["admin"], config=cfg)
    params = VaultParams(
        asset_address=nft,
        asset_id=1,
        curator=accounts["curator"],
        name="Simulated Vault",
        symbol="SIMV",
        initial_token_supply=SIM_INITIAL_SUPPLY,
        initial_token_price=SIM_INITIAL_PRICE,
        min_buyout_time=chain.timestamp,
    )
    vault = protocol.create_vault(accounts["curator"], SIM_SECONDARY_RESERVE, params)
    return Simulation(chain=chain, protocol=protocol, vault=vault, accounts=accounts, nft=nft)


def _echo_vault(vault) -> None:
    click.echo(f"    status={vault.current_status.name} supply={format_units(vault.total_supply)}")
    click.echo(
        f"    valuation={format_units(vault.current_valuation())} "
        f"primary={format_units(vault.primary_reserve_balance)} "
        f"secondary={format_units(vault.secondary_reserve_balance)} "
        f"ratio={vault.secondary_reserve_ratio}"
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="dotenv file with CURVEVAULT_* overrides")
@click.option("--log-file", is_flag=True, help="Also write curvevault.log under the configured log_dir")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file, log_file):
    """curvevault - Dual bonding curve vault simulator"""
    import logging
    from curvevault.core.config import load_config

    cfg = load_config(env_file)
    level = logging.DEBUG if debug else logging.WARNING
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


# =============================================================================
# Quote Commands
# =============================================================================


@cli.command("quote-buy")
@click.option("--supply", required=True, type=int, help="Current token supply (base units)")
@click.option("--reserve", required=True, type=int, help="Current reserve balance (base units)")
@click.option("--ratio", required=True, type=int, help="Reserve ratio (parts per million)")
@click.option("--amount", required=True, type=int, help="Reserve currency deposited")
def quote_buy(supply, reserve, ratio, amount):
    """Tokens minted by a deposit on a single curve"""
    from curvevault.core.curve import purchase_return, spot_price
    from curvevault.core.errors import CurveError

    try:
        tokens = purchase_return(supply, reserve, ratio, amount)
        price_before = spot_price(supply, reserve, ratio, 10**18)
        price_after = spot_price(supply + tokens, reserve + amount, ratio, 10**18)
    except CurveError as e:
        raise click.BadParameter(str(e))

    click.echo(f"Tokens out: {tokens}")
    click.echo(f"  Price before: {format_units(price_before)}")
    click.echo(f"  Price after:  {format_units(price_after)}")


@cli.command("quote-sell")
@click.option("--supply", required=True, type=int, help="Current token supply (base units)")
@click.option("--reserve", required=True, type=int, help="Current reserve balance (base units)")
@click.option("--ratio", required=True, type=int, help="Reserve ratio (parts per million)")
@click.option("--tokens", required=True, type=int, help="Tokens burned")
def quote_sell(supply, reserve, ratio, tokens):
    """Reserve currency released by burning tokens on a single curve"""
    from curvevault.core.curve import sale_return
    from curvevault.core.errors import CurveError

    try:
        amount = sale_return(supply, reserve, ratio, tokens)
    except CurveError as e:
        raise click.BadParameter(str(e))

    click.echo(f"Amount out: {amount}")
    click.echo(f"  Reserve left: {reserve - amount}")


# =============================================================================
# Simulation Command
# =============================================================================


def _run_trading(sim: Simulation) -> None:
    vault, chain, acc = sim.vault, sim.chain, sim.accounts

    click.echo("📉 Curator sells 20% of the supply on the secondary curve...")
    out = vault.sell(acc["curator"], SIM_INITIAL_SUPPLY // 5, 0, acc["curator"])
    click.echo(f"  ✓ Received {format_units(out)}")
    _echo_vault(vault)

    chain.advance(12)
    click.echo("📈 Alice buys 20 across the curve boundary...")
    tokens = vault.buy(acc["alice"], 20 * 10**18, 0, acc["alice"])
    click.echo(f"  ✓ Minted {format_units(tokens)} tokens")
    _echo_vault(vault)

    chain.advance(12)
    click.echo("📉 Alice sells everything back...")
    out = vault.sell(acc["alice"], vault.balance_of(acc["alice"]), 0, acc["alice"])
    click.echo(f"  ✓ Received {format_units(out)}")
    _echo_vault(vault)


def _start_buyout(sim: Simulation) -> None:
    vault, acc = sim.vault, sim.accounts
    needed = vault.current_valuation() - vault.curve_state().primary_surplus - vault.secondary_reserve_balance
    click.echo(f"🏷️  Bidder starts a buyout with {format_units(needed)}...")
    valuation = vault.initiate_buyout(acc["bidder"], needed)
    click.echo(f"  ✓ Bid valuation {format_units(valuation)}")
    click.echo(f"  ✓ Rejection at {format_units(vault.buyout_rejection_valuation)}")


def _run_rejection(sim: Simulation) -> None:
    from curvevault.core.vault import VaultStatus

    vault, chain, acc = sim.vault, sim.chain, sim.accounts
    _start_buyout(sim)

    chain.advance(60)
    click.echo("📈 Alice buys 10 to push the valuation up...")
    vault.buy(acc["alice"], 10 * 10**18, 0, acc["alice"])
    _echo_vault(vault)

    for _ in range(sim.protocol.config.twav_size * 2):
        if vault.status != VaultStatus.BUYOUT:
            break
        chain.advance(60)
        vault.update_twav(acc["bob"])
        click.echo(f"  ⏱  TWAV {format_units(vault.twav.trailing_average())} at t={chain.timestamp}")

    if vault.status == VaultStatus.BUYOUT:
        click.echo("  ✗ Buyout survived")
        return

    click.echo("  ✓ Buyout rejected")
    refund = vault.withdraw_unsettled_bids(acc["bidder"], acc["bidder"])
    click.echo(f"  ✓ Bidder withdrew unsettled bid of {format_units(refund)}")


def _run_redemption(sim: Simulation) -> None:
    vault, chain, acc = sim.vault, sim.chain, sim.accounts
    _start_buyout(sim)

    chain.advance(sim.protocol.config.buyout_duration)
    click.echo(f"⌛ Deadline passed, status {vault.current_status.name}")

    vault.withdraw_erc721(acc["bidder"], sim.nft, 1, acc["bidder"])
    click.echo("  ✓ Bidder withdrew the asset")

    paid = vault.redeem(acc["curator"], acc["curator"])
    click.echo(f"  ✓ Curator redeemed tokens for {format_units(paid)}")
    fee = vault.redeem_curator_fee(acc["curator"], acc["curator"])
    click.echo(f"  ✓ Curator fee {format_units(fee)}")


SCENARIOS = {
    "trading": _run_trading,
    "rejection": _run_rejection,
    "redemption": _run_redemption,
}


@cli.command("simulate")
@click.option("--scenario", default="trading", type=click.Choice(sorted(SCENARIOS)), help="Scenario to run")
@click.pass_context
def simulate(ctx, scenario):
    """Run a scripted vault lifecycle"""
    from curvevault.core.errors import VaultError

    click.echo("=" * 60)
    click.echo(f"  CURVEVAULT - {scenario.upper()} SIMULATION")
    click.echo("=" * 60)
    click.echo()

    sim = build_simulation(ctx.obj["config"])
    click.echo("📦 Vault created")
    _echo_vault(sim.vault)
    click.echo()

    try:
        SCENARIOS[scenario](sim)
    except VaultError as e:
        logger.error(f"Scenario {scenario} failed: {e}")
        raise click.ClickException(f"{type(e).__name__}: {e}")

    click.echo()
    click.echo("📊 Final Statistics:")
    for key, value in sim.vault.stats().items():
        click.echo(f"  {key}: {value}")
    click.echo(f"  protocol: {sim.protocol.stats()}")
    click.echo()
    click.echo("✅ Simulation complete!")


# =============================================================================
# Stats Command
# =============================================================================


@cli.command("stats")
@click.pass_context
def stats(ctx):
    """Show protocol configuration"""
    from dataclasses import asdict

    click.echo("curvevault Protocol Configuration")
    click.echo("-" * 40)
    for key, value in asdict(ctx.obj["config"]).items():
        click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    cli()
