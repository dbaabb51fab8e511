from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.config import get_settings
from app.routers import auth, products, comments, attributes, cart
from app.utils.errors import register_exception_handlers

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

app = FastAPI(title="Storefront API")


@app.on_event("startup")
def on_startup():
    # Ensure all DB tables exist after all models are imported
    from app.models.base import Base, admin_engine  # DDL needs the elevated tier
    import app.models.product  # register Product/ProductVariant/VariantAttribute models
    import app.models.attribute  # register AttributeType/AttributeValue models
    import app.models.cart  # register CartItem model
    import app.models.comment  # register Comment model
    try:
        Base.metadata.create_all(bind=admin_engine)
    except Exception as e:
        logging.error(f"Startup table creation failed: {e}")


# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(comments.router, prefix="/api/products/{productId}/comments", tags=["comments"])
app.include_router(attributes.router, prefix="/api/attributes", tags=["attributes"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
