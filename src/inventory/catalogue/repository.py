"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from inventory.catalogue.product import Product
from inventory.domain import inventory


@inventory.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku).all().first

    def find_by_barcode(self, barcode: str) -> Product | None:
        return self._dao.query.filter(barcode=barcode).all().first

    def catalog(self) -> list[Product]:
        """All products, alphabetically."""
        return self._dao.query.order_by("name").limit(None).all().items

    def stocked_at(self, location_id) -> list[Product]:
        """Products holding stock at the given location."""
        return [product for product in self.catalog() if product.allocation_at(location_id)]

    def find(self, product_id) -> Product | None:
        """Return the product with this id, or None."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            return None
