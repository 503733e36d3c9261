# storefront/models.py
from dataclasses import dataclass, field
from typing import Any, Dict

ALL = "all"
FASHION = "fashion"
MENS_CLOTHING = "men's clothing"
WOMENS_CLOTHING = "women's clothing"
ELECTRONICS = "electronics"
JEWELERY = "jewelery"

KNOWN_CATEGORIES = (MENS_CLOTHING, WOMENS_CLOTHING, ELECTRONICS, JEWELERY)
FASHION_CATEGORIES = (MENS_CLOTHING, WOMENS_CLOTHING)


@dataclass(frozen=True)
class Rating:
    rate: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class Product:
    """
    A catalog entry as written by ingestion. Immutable for the lifetime of
    a session; `image` is the local path (/images/product_<id><ext>).
    """
    id: int
    title: str
    price: float
    description: str = ""
    category: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        rating = data.get("rating") or {}
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            price=float(data.get("price", 0)),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or ""),
            image=str(data.get("image") or ""),
            rating=Rating(
                rate=float(rating.get("rate", 0)),
                count=int(rating.get("count", 0)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "rating": {"rate": self.rating.rate, "count": self.rating.count},
        }


@dataclass
class CartLine:
    product: Product
    quantity: int = 1

    @property
    def product_id(self) -> int:
        return self.product.id

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        # Persisted shape: product fields flattened next to the quantity
        out = self.product.to_dict()
        out["quantity"] = self.quantity
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(product=Product.from_dict(data), quantity=int(data["quantity"]))
