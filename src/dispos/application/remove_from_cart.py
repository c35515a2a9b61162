"""Application service: Remove from Cart use case."""

from __future__ import annotations

from dispos.domain.repository.cart_repository import CartRepository


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, product_id: str) -> None:
        cart = self._cart_repo.load()
        cart.remove_item(product_id)
        self._cart_repo.save(cart)
