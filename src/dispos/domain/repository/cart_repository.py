"""Abstract repository for the register's Cart."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dispos.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> Cart:
        """Return the current cart (an empty one if nothing is stored)."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the cart."""
