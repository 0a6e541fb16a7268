import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from app.config.openapi import API_TITLE, install_openapi
from app.config.settings import settings
from app.db.sqlite import init_db
from app.domain.auth_domain import auth_domain
from app.routes import auth, usuarios, autores, livros, emprestimos

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    admin = auth_domain.ensure_admin()
    if admin:
        logger.info("Administrador inicial '%s' criado", admin["usuario"])
    yield


app = FastAPI(
    title=API_TITLE,
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

# CORS (restrinja em PROD)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


def _campo(loc) -> str:
    partes = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(partes) or "requisicao"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Falhas de validação viram HTTP 400 com uma mensagem por campo.
    """
    mensagens = {}
    for err in exc.errors():
        msg = err.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        mensagens.setdefault(_campo(err.get("loc", ())), msg)
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": 400, "erro": "Requisição inválida", "mensagens": mensagens},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": 500, "erro": "Erro interno do servidor"},
    )


# Healthcheck simples
@app.get("/health", tags=["health"])
def health():
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}


# Rotas
app.include_router(auth.router)
app.include_router(usuarios.router)
app.include_router(autores.router)
app.include_router(livros.router)
app.include_router(emprestimos.router)

install_openapi(app)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
