from .evaluate import router as evaluate_router
from .documents import router as documents_router
from .tournaments import router as tournaments_router

routers = [evaluate_router, documents_router, tournaments_router]
