import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import jwt
from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import config, errors, schemas
from .auth import bearer_token, create_access_token, decode_access_token
from .entities import User
from .services import Services, build_services
from .utils import sanitize_input

logger = logging.getLogger(__name__)

# Most specific first: InvalidProductReference is a ValidationFailed
STATUS_CODES = [
    (errors.ValidationFailed, 400),
    (errors.Unauthorized, 401),
    (errors.Forbidden, 403),
    (errors.NotFound, 404),
    (errors.Conflict, 409),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = config.get_state()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.state.services = build_services(settings)
    logger.info("storefront started with %s storage", settings.storage)
    try:
        yield
    finally:
        app.state.services.close()


app = FastAPI(title="Storefront API", lifespan=lifespan)


# Dependency to get the services built at startup

def get_services(request: Request) -> Services:
    return request.app.state.services


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
) -> User:
    token = bearer_token(authorization)
    if token is None:
        raise errors.Unauthorized("not authenticated")
    try:
        user_id = int(decode_access_token(token)["sub"])
    except (jwt.PyJWTError, ValueError):
        raise errors.Unauthorized("invalid token") from None
    try:
        return services.identity.get_user(user_id)
    except errors.NotFound:
        raise errors.Unauthorized("invalid token") from None


def require_admin(user: User = Depends(get_current_user), services: Services = Depends(get_services)) -> User:
    if not services.identity.is_admin(user):
        raise errors.Forbidden("admin privilege required")
    return user


@app.exception_handler(errors.StorefrontError)
async def storefront_error_handler(request: Request, exc: errors.StorefrontError):
    status_code = next((code for kind, code in STATUS_CODES if isinstance(exc, kind)), 500)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def _token_for(user: User) -> schemas.TokenRead:
    return schemas.TokenRead(
        access_token=create_access_token(user.id, user.role),
        user=schemas.UserRead.model_validate(user),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


# -------------------- Auth --------------------

@app.post("/api/register", response_model=schemas.TokenRead, status_code=201)
async def register(user: schemas.UserCreate, services: Services = Depends(get_services)):
    created = services.identity.create_user(user)
    return _token_for(created)


@app.post("/api/login", response_model=schemas.TokenRead)
async def login(payload: schemas.LoginRequest, services: Services = Depends(get_services)):
    user = services.identity.authenticate(payload.username, payload.password)
    return _token_for(user)


@app.get("/api/user", response_model=schemas.UserRead)
async def current_user(user: User = Depends(get_current_user)):
    return user


# -------------------- Catalog --------------------

@app.get("/api/products", response_model=List[schemas.ProductRead])
async def list_products(services: Services = Depends(get_services)):
    return services.catalog.list_products()


# Registered before /api/products/{product_id} so "search" is not taken for an id
@app.get("/api/products/search", response_model=List[schemas.ProductRead])
async def search_products(q: str = Query(..., min_length=1, max_length=100), services: Services = Depends(get_services)):
    return services.catalog.search_products(sanitize_input(q))


@app.get("/api/products/{product_id}", response_model=schemas.ProductRead)
async def get_product(product_id: int, services: Services = Depends(get_services)):
    return services.catalog.get_product(product_id)


@app.get("/api/categories", response_model=List[schemas.CategoryRead])
async def list_categories(services: Services = Depends(get_services)):
    return services.catalog.list_categories()


@app.get("/api/categories/{ref}", response_model=schemas.CategoryRead)
async def get_category(ref: str, services: Services = Depends(get_services)):
    """Accepts a numeric id or a slug."""
    return services.catalog.get_category(ref)


@app.get("/api/categories/{category_id}/products", response_model=List[schemas.ProductRead])
async def list_category_products(category_id: int, services: Services = Depends(get_services)):
    return services.catalog.list_products_by_category(category_id)


# -------------------- Orders --------------------

@app.post("/api/orders", response_model=schemas.OrderRead, status_code=201)
async def place_order(
    payload: schemas.OrderCreate,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return services.orders.place_order(user.id, payload.items)


@app.get("/api/orders/{order_id}", response_model=schemas.OrderDetailRead)
async def get_order(order_id: int, user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    detail = services.orders.get_order(order_id)
    # Authorization: only the order owner or an admin
    if detail.order.user_id != user.id and not services.identity.is_admin(user):
        raise errors.Forbidden("forbidden")
    return detail


@app.get("/api/user/orders", response_model=List[schemas.OrderRead])
async def my_orders(user: User = Depends(get_current_user), services: Services = Depends(get_services)):
    return services.orders.get_orders_for_user(user.id)


# -------------------- Admin --------------------

@app.post("/api/admin/products", response_model=schemas.ProductRead, status_code=201, dependencies=[Depends(require_admin)])
async def admin_create_product(product: schemas.ProductCreate, services: Services = Depends(get_services)):
    return services.catalog.create_product(product)


@app.patch("/api/admin/products/{product_id}", response_model=schemas.ProductRead, dependencies=[Depends(require_admin)])
async def admin_update_product(product_id: int, changes: schemas.ProductUpdate, services: Services = Depends(get_services)):
    return services.catalog.update_product(product_id, changes)


@app.delete("/api/admin/products/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
async def admin_delete_product(product_id: int, services: Services = Depends(get_services)):
    services.catalog.delete_product(product_id)
    return Response(status_code=204)


@app.post("/api/admin/categories", response_model=schemas.CategoryRead, status_code=201, dependencies=[Depends(require_admin)])
async def admin_create_category(category: schemas.CategoryCreate, services: Services = Depends(get_services)):
    return services.catalog.create_category(category)


@app.delete("/api/admin/categories/{category_id}", status_code=204, dependencies=[Depends(require_admin)])
async def admin_delete_category(category_id: int, services: Services = Depends(get_services)):
    services.catalog.delete_category(category_id)
    return Response(status_code=204)


@app.get("/api/admin/orders", response_model=List[schemas.OrderRead], dependencies=[Depends(require_admin)])
async def admin_list_orders(services: Services = Depends(get_services)):
    return services.orders.get_all_orders()


@app.patch("/api/admin/orders/{order_id}/status", response_model=schemas.OrderRead, dependencies=[Depends(require_admin)])
async def admin_update_order_status(order_id: int, payload: schemas.OrderStatusUpdate, services: Services = Depends(get_services)):
    return services.orders.update_order_status(order_id, payload.status)
