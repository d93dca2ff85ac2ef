import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sale_engine.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Sale Engine API",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import routers after app creation to avoid circular imports
from sale_engine.api import products, sales

# Routers - all already have /api prefix
app.include_router(sales.router)
app.include_router(products.router)


@app.get("/")
def root():
    return {"status": "ok", "service": "sale-engine"}


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "env": settings.ENV
    }
