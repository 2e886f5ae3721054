from __future__ import annotations

import json
from typing import Any, Optional, Sequence

import httpx
import typer

from shipping_rate_client.carriers import create_ups_carrier
from shipping_rate_client.cli.demo import DEMO_CONFIG, SAMPLE_REQUEST, demo_transport
from shipping_rate_client.core.config import get_settings
from shipping_rate_client.core.errors import CarrierError, ConfigError
from shipping_rate_client.core.http import create_http_client
from shipping_rate_client.core.logging import configure_logging, set_level
from shipping_rate_client.models import NormalizedRate

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = configure_logging(logger_name=__name__)


def _fmt_days(days: Optional[int]) -> str:
    if days is None:
        return "days=n/a"
    return f"days={days}"


def _echo_rates(rates: Sequence[NormalizedRate], format: str) -> None:
    if format == "json":
        typer.echo(json.dumps([rate.model_dump() for rate in rates], indent=2))
        return
    if not rates:
        typer.echo("No rates returned.")
        return
    for rate in rates:
        code = f"[{rate.service_code}]" if rate.service_code else ""
        typer.echo(
            f"  {rate.service_name:24} {code:5} {rate.amount:>10.2f} {rate.currency} "
            f"{_fmt_days(rate.estimated_days)}"
        )


def _fail(exc: CarrierError) -> None:
    typer.echo(f"error [{exc.kind.value}]: {exc.message}", err=True)
    raise typer.Exit(code=1)


def _fail_network(exc: httpx.HTTPError) -> None:
    typer.echo(f"error [network]: {type(exc).__name__}: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def rates(
    from_country: str = typer.Option(..., help="Origin country code, e.g. US"),
    from_postal: str = typer.Option(..., help="Origin postal code"),
    to_country: str = typer.Option(..., help="Destination country code"),
    to_postal: str = typer.Option(..., help="Destination postal code"),
    weight: float = typer.Option(..., help="Package weight"),
    weight_unit: str = typer.Option("lb", help="lb or kg"),
    length: Optional[float] = typer.Option(None, help="Package length"),
    width: Optional[float] = typer.Option(None, help="Package width"),
    height: Optional[float] = typer.Option(None, help="Package height"),
    dim_unit: str = typer.Option("in", help="in or cm"),
    service: Optional[str] = typer.Option(None, help="Service level, e.g. Ground"),
    format: str = typer.Option("table", help="table or json"),
) -> None:
    """Quote UPS rates for a single package."""
    try:
        settings = get_settings()
    except ConfigError as exc:
        typer.echo(f"configuration error: {exc}", err=True)
        raise typer.Exit(code=2)
    set_level(settings.log_level)

    package: dict[str, Any] = {"weight": {"value": weight, "unit": weight_unit}}
    if length is not None or width is not None or height is not None:
        package["dimensions"] = {
            "length": length,
            "width": width,
            "height": height,
            "unit": dim_unit,
        }
    request: dict[str, Any] = {
        "from": {"country": from_country, "postalCode": from_postal},
        "to": {"country": to_country, "postalCode": to_postal},
        "package": package,
    }
    if service:
        request["serviceLevel"] = service

    logger.debug("Quoting %s %s -> %s %s", from_country, from_postal, to_country, to_postal)
    with create_ups_carrier(settings.ups) as carrier:
        try:
            quotes = carrier.get_rates(request)
        except CarrierError as exc:
            _fail(exc)
            return
        except httpx.HTTPError as exc:
            _fail_network(exc)
            return
    _echo_rates(quotes, format)


@app.command()
def demo(format: str = typer.Option("table", help="table or json")) -> None:
    """Run the token + rating flow against a stubbed UPS; no credentials needed."""
    client = create_http_client(base_url=DEMO_CONFIG.base_url, transport=demo_transport())
    with client:
        carrier = create_ups_carrier(DEMO_CONFIG, client=client)
        try:
            quotes = carrier.get_rates(SAMPLE_REQUEST)
        except CarrierError as exc:
            _fail(exc)
            return
        except httpx.HTTPError as exc:
            _fail_network(exc)
            return
    _echo_rates(quotes, format)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
