# Routes package
from .auth import router as auth_router
from .rewrite import router as rewrite_router
from .humanize import router as humanize_router
from .documents import router as documents_router
from .payments import router as payments_router
from .contact import router as contact_router
