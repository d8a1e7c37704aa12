# Import all models to register them with SQLModel
from app.models.user import User, UserRole, UserRead
from app.models.author import Author
from app.models.blog import Blog, BlogStatus
from app.models.comment import Comment
from app.models.like import BlogLike, CommentLike
from app.models.product import Product
from app.models.newsletter import NewsletterSubscriber
from app.models.contact import ContactMessage

__all__ = [
    "User",
    "UserRole",
    "UserRead",
    "Author",
    "Blog",
    "BlogStatus",
    "Comment",
    "BlogLike",
    "CommentLike",
    "Product",
    "NewsletterSubscriber",
    "ContactMessage",
]
