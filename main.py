"""
This application serves the user group administration API of the case
management platform.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src import exceptions, routers
from src.authentication import authenticate_user
from src.bugsnag_config import configure_bugsnag, get_bugsnag_middleware, notify, setup_bugsnag_logging
from src.config.logging_config import setup_logging

# Load environment variables and set up logging
load_dotenv()
setup_logging()

app_version = os.environ.get("RELEASE_VERSION", "dev")
app_env = os.environ.get("ENVIRONMENT", "development")
logging.info(f"Starting application - version: {app_version}, environment: {app_env}")

configure_bugsnag()
setup_bugsnag_logging()

app = FastAPI(
    debug=False,
    title="User Groups API",
    version="1.0.0",
    summary="Create, modify, delete and list user groups and the roles they hold on operations.",
    openapi_tags=[
        {"name": "user groups", "description": "CRUD operations on user groups."},
        {"name": "operations", "description": "User groups attached to operations."},
    ],
    docs_url="/",
    redoc_url=None,
)


@app.exception_handler(exceptions.DatabaseError)
async def database_exception_handler(request: Request, exc: exceptions.DatabaseError):
    logging.error(f"Database error: {exc.detail}", exc_info=exc.__cause__)
    notify(exc, request)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    notify(exc, request)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*", "access_token", "Content-Type"],
)

for router in routers.ALL:
    app.include_router(router=router, dependencies=[Depends(authenticate_user)])


@app.get("/_health", include_in_schema=False)
async def health_check():
    """Health check endpoint that also shows the current environment and version."""
    return {"status": "ok", "environment": app_env, "version": app_version}


# Wrap the ASGI app last so that Bugsnag sees errors from every layer
asgi_app = get_bugsnag_middleware(app)
