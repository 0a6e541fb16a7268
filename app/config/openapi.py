"""
Configuração do OpenAPI (Swagger) para documentação da API.

Monta os metadados exibidos em /docs e /redoc: título, versão, descrição,
contato, licença, servidores e o esquema de segurança 'bearerAuth'.
"""

from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from app.config.security import BEARER_DESCRIPTION, BEARER_SCHEME_NAME
from app.config.settings import settings

API_TITLE = "Sistema Biblioteca API"

API_DESCRIPTION = """
# Sistema de Gerenciamento de Biblioteca

API RESTful para gerenciamento completo de biblioteca, incluindo:

## Recursos Disponíveis

### 🔐 Autenticação
- Registro de novos usuários
- Login e autenticação JWT
- Controle de acesso baseado em perfis (USER/ADMIN)

### 👥 Usuários
- Gerenciamento de usuários
- Controle de perfis e permissões
- Ativação/desativação de contas

### 📚 Livros
- Cadastro, consulta, atualização e exclusão de livros
- Busca por título, autor e ISBN
- Controle de disponibilidade

### ✍️ Autores
- Gerenciamento completo de autores
- Informações biográficas
- Relacionamento com livros

### 📖 Empréstimos
- Controle de empréstimos de livros
- Gestão de devoluções
- Histórico de empréstimos

## Autenticação

Esta API usa autenticação JWT (JSON Web Token). Para acessar endpoints protegidos:

1. **Registre-se** usando `/api/auth/register` ou faça **login** com `/api/auth/login`
2. Copie o **token** recebido na resposta
3. Clique no botão **"Authorize" 🔓** no topo desta página
4. Cole o token no campo que aparecerá (sem adicionar "Bearer")
5. Agora você pode testar os endpoints protegidos!

### Perfis de Acesso
- **USER**: Acesso básico (consultas e empréstimos)
- **ADMIN**: Acesso total (gerenciamento completo do sistema)

## Tecnologias
- FastAPI
- JWT (PyJWT) + bcrypt
- Python 3.10+
- SQLite
- OpenAPI 3.1 (Swagger UI / ReDoc)

## Como Usar
1. Registre-se ou faça login
2. Copie o token JWT
3. Clique em "Authorize" e cole o token
4. Explore os endpoints disponíveis
5. Clique em "Try it out" para testar
6. Preencha os parâmetros necessários
7. Clique em "Execute"

## Códigos de Status
- `200`: Sucesso
- `201`: Criado
- `204`: Sucesso (sem conteúdo)
- `400`: Requisição inválida
- `401`: Não autenticado
- `403`: Sem permissão
- `404`: Recurso não encontrado
- `500`: Erro interno do servidor
"""

API_CONTACT = {
    "name": "Sistema Biblioteca - Suporte",
    "email": "suporte@biblioteca.com",
    "url": "https://github.com/DjalmaDeveloper/bibliotecadjr",
}

API_LICENSE = {
    "name": "MIT License",
    "url": "https://opensource.org/licenses/MIT",
}


def api_servers() -> List[Dict[str, str]]:
    """Servidores disponíveis: produção primeiro, depois o local."""
    return [
        {"url": settings.PROD_SERVER_URL, "description": "Servidor de Produção (Render)"},
        {"url": f"http://localhost:{settings.SERVER_PORT}", "description": "Servidor Local (Desenvolvimento)"},
    ]


def bearer_security_scheme() -> Dict[str, Any]:
    return {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": BEARER_DESCRIPTION,
    }


def build_openapi(app: FastAPI) -> Dict[str, Any]:
    """
    Gera (uma única vez) o schema OpenAPI da aplicação.

    - 'app': Aplicação com as rotas já registradas
    - return: Schema OpenAPI (dict), cacheado em 'app.openapi_schema'
    """
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=API_TITLE,
        version=settings.APP_VERSION,
        description=API_DESCRIPTION,
        routes=app.routes,
        servers=api_servers(),
        contact=API_CONTACT,
        license_info=API_LICENSE,
    )
    components = schema.setdefault("components", {})
    components["securitySchemes"] = {BEARER_SCHEME_NAME: bearer_security_scheme()}

    app.openapi_schema = schema
    return schema


def install_openapi(app: FastAPI) -> None:
    app.openapi = lambda: build_openapi(app)
