from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from .config import get_settings
from .log import setup_logging, get_logger
from .store.db import init_db
from .providers import ProviderAdapter, ProviderNotConfigured, get_provider
from .pipeline.scan import scan_repositories
from .schemas.badge import ScanRequest
from contextlib import asynccontextmanager

settings = get_settings()
setup_logging()
logger = get_logger("api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(lifespan=lifespan)

def _provider_or_404(provider: str) -> ProviderAdapter:
    try:
        return get_provider(provider, settings)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown provider {provider}")

@app.get("/{provider}/authorize")
def authorize(provider: str):
    adapter = _provider_or_404(provider)
    try:
        url = adapter.build_authorization_redirect()
    except ProviderNotConfigured as e:
        logger.error(str(e))
        return PlainTextResponse(str(e), status_code=500)
    return RedirectResponse(url)

@app.get("/{provider}/callback")
def callback(provider: str, code: str):
    adapter = _provider_or_404(provider)

    # 1. Code -> token
    token = adapter.exchange_code_for_token(code)
    if not token.ok:
        return JSONResponse({"errors": token.errors}, status_code=400)

    # 2. Who is this
    user = adapter.fetch_authenticated_user(token.result)
    if not user.ok:
        return JSONResponse({"errors": user.errors}, status_code=400)

    # 3. What can be scanned
    repos = adapter.fetch_user_repositories(token.result)
    if not repos.ok:
        return JSONResponse({"errors": repos.errors}, status_code=400)

    logger.info(f"{adapter.display_name} user {user.result.login} has {len(repos.result)} public repositories")
    return {
        "user": user.result.model_dump(),
        "repositories": [r.model_dump() for r in repos.result],
    }

@app.post("/{provider}/scan")
def scan(provider: str, request: ScanRequest):
    _provider_or_404(provider)
    results = scan_repositories(
        provider,
        request.user_id,
        request.name,
        request.email,
        request.repository_ids,
    )
    return {"results": results}
