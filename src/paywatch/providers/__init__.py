"""
Payment Provider Parsers

One parser per payment provider, all sharing the line-scanning contract in
``base``. Parsers are looked up by short name:

- rakuten: 楽天ペイ (points / Rakuten Cash split)
- ana: ANA Pay
- vpoint: VポイントPay (points split)
- jal: JAL Pay
"""

from typing import Any

from .ana import ANAPayParser
from .base import ProviderParser
from .jal import JALPayParser
from .rakuten import RakutenPayParser
from .vpoint import VpointPayParser

PROVIDERS: dict[str, type[ProviderParser]] = {
    RakutenPayParser.name: RakutenPayParser,
    ANAPayParser.name: ANAPayParser,
    VpointPayParser.name: VpointPayParser,
    JALPayParser.name: JALPayParser,
}


def get_provider(name: str, **kwargs: Any) -> ProviderParser:
    """
    Create the parser registered under ``name``.

    Raises:
        KeyError: If no provider has that name
    """
    try:
        parser_class = PROVIDERS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown provider '{name}'. Known providers: {', '.join(PROVIDERS)}") from None
    return parser_class(**kwargs)


__all__ = [
    "PROVIDERS",
    "ANAPayParser",
    "JALPayParser",
    "ProviderParser",
    "RakutenPayParser",
    "VpointPayParser",
    "get_provider",
]
