# storefront/cart.py
from typing import Any, Dict, List, Optional

from .models import CartLine, Product

# Flat promotional discount shown in the cart summary
SAVINGS_RATE = 0.1


class PersistedStateCorrupt(Exception):
    """A stored cart snapshot is not JSON or does not have the cart shape."""


class Cart:
    """
    Product id -> CartLine, in first-insertion order. Every line holds a
    quantity of at least 1.
    """

    def __init__(self, lines: Optional[List[CartLine]] = None):
        self._lines: Dict[int, CartLine] = {}
        for line in lines or []:
            if line.quantity >= 1:
                self._lines[line.product_id] = line

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    def __iter__(self):
        return iter(self._lines.values())

    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def get(self, product_id: int) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def quantities(self) -> Dict[int, int]:
        return {pid: line.quantity for pid, line in self._lines.items()}

    def add(self, product: Product) -> CartLine:
        line = self._lines.get(product.id)
        if line is not None:
            line.quantity += 1
            return line
        line = CartLine(product=product, quantity=1)
        self._lines[product.id] = line
        return line

    def remove(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        line = self._lines.get(product_id)
        if line is not None:
            line.quantity = quantity

    def clear(self) -> None:
        self._lines.clear()

    @property
    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_price(self) -> float:
        return sum(line.subtotal for line in self._lines.values())

    @property
    def total_savings(self) -> float:
        return sum(line.subtotal * SAVINGS_RATE for line in self._lines.values())

    @property
    def final_total(self) -> float:
        return self.total_price - self.total_savings

    def snapshot(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self._lines.values()]

    @classmethod
    def from_snapshot(cls, data: Any) -> "Cart":
        """
        Rebuild a cart from `snapshot()` output. A mapping of id -> line is
        accepted too; anything else raises PersistedStateCorrupt.
        """
        if isinstance(data, dict):
            data = list(data.values())
        if not isinstance(data, list):
            raise PersistedStateCorrupt(
                f"Cart snapshot must be a list, got {type(data).__name__}"
            )

        lines: List[CartLine] = []
        for entry in data:
            if not isinstance(entry, dict):
                raise PersistedStateCorrupt(f"Cart line is not an object: {entry!r}")
            try:
                line = CartLine.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise PersistedStateCorrupt(f"Invalid cart line {entry!r}: {e}") from e
            if line.quantity < 1:
                raise PersistedStateCorrupt(
                    f"Cart line {line.product_id} has quantity {line.quantity}"
                )
            if any(existing.product_id == line.product_id for existing in lines):
                raise PersistedStateCorrupt(
                    f"Cart line {line.product_id} appears more than once"
                )
            lines.append(line)
        return cls(lines)
