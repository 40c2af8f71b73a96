from fastapi import APIRouter

from wms.api.routes import auth, locations, products, stocks, transactions


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(locations.router, prefix="/locations", tags=["Locations"])
api_router.include_router(stocks.router, prefix="/stocks", tags=["Stocks"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
