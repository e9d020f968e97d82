import contextlib

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import CORS_ORIGINS
from core.logging_config import setup_logging
from middlewares.auth import AuthMiddleware
from routes import routers
from services.database import close_db_connection, create_indexes, initialize_db_connection

app = FastAPI(title="BoardBrawl document guard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],  # This allows all methods, including OPTIONS
    allow_headers=["*"],
)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Initialize the database connection
    initialize_db_connection()
    await create_indexes()
    yield
    close_db_connection()


app.router.lifespan_context = lifespan
app.add_middleware(AuthMiddleware)

# Include the routers
for router in routers:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
