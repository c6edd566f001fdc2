from fastapi import FastAPI
from src.products.controller import router as products_router
from src.users.controller import router as users_router
from src.orders.controller import router as orders_router
from src.dashboard.controller import router as dashboard_router


def register_routes(app: FastAPI):
    app.include_router(products_router)
    app.include_router(users_router)
    app.include_router(orders_router)
    app.include_router(dashboard_router)
