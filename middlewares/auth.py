from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from jose import JWTError
from fastapi import status
from loguru import logger
from services.auth import bearer_scheme, get_uid_from_token


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach the caller's uid to ``request.state.user``.

    Requests without credentials go through as anonymous: the evaluator answers
    them with an ``unauthenticated`` decision.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.user = None
        # Bypass identity resolution for specific routes
        if request.url.path in ["/health", "/docs", "/openapi.json"] or request.method == "OPTIONS":
            return await call_next(request)

        credentials = await bearer_scheme(request)
        if credentials is not None:
            try:
                request.state.user = get_uid_from_token(credentials.credentials)
            except JWTError:
                logger.debug(f"Rejected bearer token on {request.url.path}")
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Could not validate credentials"},
                )
        response = await call_next(request)
        return response
