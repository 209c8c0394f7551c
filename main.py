import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mcp.server.fastmcp import FastMCP
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from storefront import config
from storefront.errors import StoreError
from storefront.mcp_handlers import register_mcp
from storefront.routes import register_api_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)

# =====================================================
# 1) FastAPI app
# =====================================================
app = FastAPI(title="storefront")

app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET,
    max_age=config.SESSION_MAX_AGE,
    same_site="none" if config.HTTPS_ONLY else "lax",
    https_only=config.HTTPS_ONLY,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CLIENT_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration:.0f}ms)")
    return response


# =====================================================
# 2) Error responses
# =====================================================
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
    return JSONResponse({"error": "Invalid request data", "details": details}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# =====================================================
# 3) MCP Server
# =====================================================
mcp = FastMCP(
    name="storefront-mcp",
    sse_path="/sse",
    message_path="/messages/"
)

register_mcp(mcp)


@app.get("/mcp")
async def mcp_info_handler():
    """MCP server info"""
    return {
        "name": "storefront-mcp",
        "version": "1.0.0",
        "protocols": ["sse"],
        "endpoints": {
            "sse": f"{config.BASE_URL}/mcp/sse",
            "messages": f"{config.BASE_URL}/mcp/messages/"
        }
    }


app.mount("/mcp", mcp.sse_app())

# =====================================================
# 4) API routes
# =====================================================
register_api_routes(app)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn, os
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
