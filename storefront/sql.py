"""SQLAlchemy-backed repositories.

Each call opens its own session and hands back plain entities, so nothing
returned here is attached to a session.
"""
from datetime import timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from . import errors, models
from .entities import Category, Order, OrderDetail, OrderItem, OrderStatus, Product, User
from .repository import CategoryRepository, OrderRepository, ProductRepository, UserRepository


def _user(row: models.User) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        is_admin=bool(row.is_admin),
    )


def _category(row: models.Category) -> Category:
    return Category(id=row.id, name=row.name, slug=row.slug)


def _product(row: models.Product) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        short_description=row.short_description,
        price=row.price,
        image_url=row.image_url,
        category_id=row.category_id,
        rating=row.rating,
        in_stock=bool(row.in_stock),
        is_new=bool(row.is_new),
        is_sale=bool(row.is_sale),
        brand=row.brand,
    )


def _order(row: models.Order) -> Order:
    created_at = row.created_at
    # SQLite drops the offset; timestamps are always stored in UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Order(
        id=row.id,
        user_id=row.user_id,
        status=OrderStatus(row.status),
        total=row.total,
        created_at=created_at,
    )


def _order_item(row: models.OrderItem) -> OrderItem:
    return OrderItem(id=row.id, order_id=row.order_id, product_id=row.product_id, quantity=row.quantity, price=row.price)


class _SqlRepository:
    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions

    @staticmethod
    def _commit(db: Session, error: errors.StorefrontError):
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise error from e


class SqlUserRepository(_SqlRepository, UserRepository):
    def get(self, user_id):
        with self._sessions() as db:
            row = db.get(models.User, user_id)
            return _user(row) if row else None

    def get_by_username(self, username):
        with self._sessions() as db:
            row = db.query(models.User).filter(models.User.username == username).first()
            return _user(row) if row else None

    def add(self, fields):
        with self._sessions() as db:
            row = models.User(**fields)
            db.add(row)
            self._commit(db, errors.Conflict(f"username {fields['username']!r} already exists"))
            return _user(row)


class SqlCategoryRepository(_SqlRepository, CategoryRepository):
    def list(self):
        with self._sessions() as db:
            return [_category(r) for r in db.query(models.Category).order_by(models.Category.id).all()]

    def get(self, category_id):
        with self._sessions() as db:
            row = db.get(models.Category, category_id)
            return _category(row) if row else None

    def get_by_slug(self, slug):
        with self._sessions() as db:
            row = db.query(models.Category).filter(models.Category.slug == slug).first()
            return _category(row) if row else None

    def add(self, fields):
        with self._sessions() as db:
            row = models.Category(**fields)
            db.add(row)
            self._commit(db, errors.Conflict(f"category slug {fields['slug']!r} already exists"))
            return _category(row)

    def delete(self, category_id):
        with self._sessions() as db:
            row = db.get(models.Category, category_id)
            if not row:
                return False
            db.delete(row)
            self._commit(db, errors.Conflict(f"category {category_id} still has products"))
            return True


class SqlProductRepository(_SqlRepository, ProductRepository):
    def list(self):
        with self._sessions() as db:
            return [_product(r) for r in db.query(models.Product).order_by(models.Product.id).all()]

    def get(self, product_id):
        with self._sessions() as db:
            row = db.get(models.Product, product_id)
            return _product(row) if row else None

    def list_by_category(self, category_id):
        with self._sessions() as db:
            rows = (
                db.query(models.Product)
                .filter(models.Product.category_id == category_id)
                .order_by(models.Product.id)
                .all()
            )
            return [_product(r) for r in rows]

    def search(self, text):
        # Parameterized LIKE; autoescape keeps % and _ in the text literal
        columns = (models.Product.name, models.Product.description, models.Product.brand)
        with self._sessions() as db:
            rows = (
                db.query(models.Product)
                .filter(or_(*(c.icontains(text, autoescape=True) for c in columns)))
                .order_by(models.Product.id)
                .all()
            )
            return [_product(r) for r in rows]

    def add(self, fields):
        with self._sessions() as db:
            row = models.Product(**fields)
            db.add(row)
            self._commit(db, errors.ValidationFailed("foreign key violation: category does not exist"))
            return _product(row)

    def update(self, product_id, changes):
        with self._sessions() as db:
            row = db.get(models.Product, product_id)
            if not row:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            self._commit(db, errors.ValidationFailed("foreign key violation: category does not exist"))
            return _product(row)

    def delete(self, product_id):
        with self._sessions() as db:
            row = db.get(models.Product, product_id)
            if not row:
                return False
            db.delete(row)
            db.commit()
            return True


class SqlOrderRepository(_SqlRepository, OrderRepository):
    def add(self, user_id, status, total, created_at, items):
        with self._sessions() as db:
            row = models.Order(user_id=user_id, status=OrderStatus(status).value, total=total, created_at=created_at)
            row.items = [
                models.OrderItem(product_id=i["product_id"], quantity=i["quantity"], price=i["price"])
                for i in items
            ]
            # order and items go out in one transaction
            db.add(row)
            self._commit(db, errors.ValidationFailed("integrity error"))
            return _order(row)

    def get(self, order_id):
        with self._sessions() as db:
            row = (
                db.query(models.Order)
                .options(selectinload(models.Order.items))
                .filter(models.Order.id == order_id)
                .first()
            )
            if not row:
                return None
            return OrderDetail(order=_order(row), items=[_order_item(i) for i in row.items])

    def list_for_user(self, user_id):
        with self._sessions() as db:
            rows = db.query(models.Order).filter(models.Order.user_id == user_id).order_by(models.Order.id).all()
            return [_order(r) for r in rows]

    def list_all(self):
        with self._sessions() as db:
            return [_order(r) for r in db.query(models.Order).order_by(models.Order.id).all()]

    def set_status(self, order_id, status):
        with self._sessions() as db:
            row = db.get(models.Order, order_id)
            if not row:
                return None
            row.status = OrderStatus(status).value
            db.commit()
            return _order(row)
