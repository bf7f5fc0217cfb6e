import logging
from typing import List, Union

from . import errors, schemas
from .entities import Category, Product
from .repository import CategoryRepository, ProductRepository
from .utils import round_amount

logger = logging.getLogger(__name__)


class CatalogStore:
    """Products and categories: lookups for shoppers, mutators for admins."""

    def __init__(self, products: ProductRepository, categories: CategoryRepository):
        self.products = products
        self.categories = categories

    # -------------------- products --------------------

    def list_products(self) -> List[Product]:
        return self.products.list()

    def get_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise errors.NotFound(f"product {product_id} not found")
        return product

    def list_products_by_category(self, category_id: int) -> List[Product]:
        return self.products.list_by_category(category_id)

    def search_products(self, text: str) -> List[Product]:
        text = (text or "").strip()
        if not text:
            return []
        return self.products.search(text)

    def create_product(self, product: schemas.ProductCreate) -> Product:
        fields = product.model_dump()
        self._require_category(fields["category_id"])
        fields["price"] = round_amount(fields["price"])
        created = self.products.add(fields)
        logger.info("product %s created in category %s", created.id, created.category_id)
        return created

    def update_product(self, product_id: int, changes: schemas.ProductUpdate) -> Product:
        # only the fields the client sent
        fields = changes.model_dump(exclude_unset=True)
        if self.products.get(product_id) is None:
            raise errors.NotFound(f"product {product_id} not found")
        if "category_id" in fields:
            self._require_category(fields["category_id"])
        if "price" in fields:
            fields["price"] = round_amount(fields["price"])
        updated = self.products.update(product_id, fields)
        if updated is None:
            raise errors.NotFound(f"product {product_id} not found")
        logger.info("product %s updated: %s", product_id, sorted(fields))
        return updated

    def delete_product(self, product_id: int) -> None:
        if not self.products.delete(product_id):
            raise errors.NotFound(f"product {product_id} not found")
        logger.info("product %s deleted", product_id)

    # -------------------- categories --------------------

    def list_categories(self) -> List[Category]:
        return self.categories.list()

    def get_category(self, ref: Union[int, str]) -> Category:
        """Look a category up by numeric id, or by slug otherwise."""
        # str.isdigit() alone also accepts digits int() rejects, such as "²"
        if isinstance(ref, int) or (ref.isascii() and ref.isdigit()):
            category = self.categories.get(int(ref))
        else:
            category = self.categories.get_by_slug(ref)
        if category is None:
            raise errors.NotFound(f"category {ref} not found")
        return category

    def create_category(self, category: schemas.CategoryCreate) -> Category:
        created = self.categories.add(category.model_dump())
        logger.info("category %s (%s) created", created.id, created.slug)
        return created

    def delete_category(self, category_id: int) -> None:
        # Restrict: products must be moved or deleted first
        if self.categories.get(category_id) is None:
            raise errors.NotFound(f"category {category_id} not found")
        if self.products.list_by_category(category_id):
            raise errors.Conflict(f"category {category_id} still has products")
        self.categories.delete(category_id)
        logger.info("category %s deleted", category_id)

    def _require_category(self, category_id: int) -> None:
        if self.categories.get(category_id) is None:
            raise errors.ValidationFailed(f"category {category_id} does not exist")
