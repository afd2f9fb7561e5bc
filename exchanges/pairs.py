"""
Lookup from canonical pairs to an exchange's own pair tokens.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from exchanges.errors import PairUnsupportedError
from exchanges.schemas import Pair


class PairRegistry:
    """Pure, total mapping from `Pair` to token; unknown pairs resolve to None."""

    def __init__(self, exchange: str, tokens: Mapping[Pair, str]) -> None:
        self.exchange = exchange
        self._tokens: Dict[Pair, str] = dict(tokens)
        self._pairs: Dict[str, Pair] = {token: pair for pair, token in self._tokens.items()}

    def resolve(self, pair: Pair) -> Optional[str]:
        return self._tokens.get(pair)

    def require(self, pair: Pair) -> str:
        token = self.resolve(pair)
        if token is None:
            raise PairUnsupportedError(pair, self.exchange)
        return token

    def pair_for(self, token: str) -> Optional[Pair]:
        return self._pairs.get(token)

    def supported_pairs(self) -> List[Pair]:
        return [pair for pair in Pair if pair in self._tokens]

    def __contains__(self, pair: object) -> bool:
        return pair in self._tokens
