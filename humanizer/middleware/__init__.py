# Middleware package
from .auth import get_current_user, get_optional_user, get_supabase_client
