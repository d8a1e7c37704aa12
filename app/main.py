import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import settings
from app.db.session import create_db_and_tables

# Import models to ensure they are registered with SQLModel metadata
from app.models import (  # noqa: F401
    Author,
    Blog,
    BlogLike,
    Comment,
    CommentLike,
    ContactMessage,
    NewsletterSubscriber,
    Product,
    User,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="API for the Yatra travel blog"
)

@app.get("/")
def read_root():
    return {"message": "Welcome to Yatra API. Visit /docs for Swagger UI."}

from app.routers import admin, auth, blogs, comments, contact, cron, interactions, newsletter, products, users

app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
app.include_router(blogs.router, prefix="/api/v1/blogs", tags=["blogs"])
app.include_router(comments.router, prefix="/api/v1/comments", tags=["comments"])
app.include_router(interactions.router, prefix="/api/v1/interactions", tags=["interactions"])
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(newsletter.router, prefix="/api/v1/newsletter", tags=["newsletter"])
app.include_router(contact.router, prefix="/api/v1/contact", tags=["contact"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])
app.include_router(cron.router, prefix="/api/cron", tags=["cron"])

# Add CORS
from fastapi.middleware.cors import CORSMiddleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.SITE_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
