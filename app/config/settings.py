from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações da aplicação carregadas via variáveis de ambiente (.env).

    - 'APP_NAME': Nome do serviço
    - 'APP_VERSION': Versão exibida na documentação
    - 'SERVER_PORT': Porta do servidor local (uvicorn e lista de servidores do Swagger)
    - 'PROD_SERVER_URL': URL pública do servidor de produção
    - 'DEBUG': Ativa modo de desenvolvimento (reload)
    - 'LOG_LEVEL': Nível de log (DEBUG, INFO, WARNING...)

    - 'SECRET_KEY': Chave secreta para assinar JWT
    - 'ALGORITHM': Algoritmo de assinatura JWT (ex.: HS256)
    - 'ACCESS_TOKEN_EXPIRE_MINUTES': Minutos até expiração do token
    - 'BCRYPT_ROUNDS': Custo do bcrypt

    - 'DB_PATH': Caminho do arquivo SQLite

    - 'ADMIN_USUARIO' / 'ADMIN_SENHA' / 'ADMIN_EMAIL': Administrador criado na
      inicialização (apenas se 'ADMIN_SENHA' estiver definida)

    - 'PRAZO_EMPRESTIMO_DIAS': Prazo padrão de devolução
    - 'MAX_PRAZO_EMPRESTIMO_DIAS': Prazo máximo que pode ser solicitado
    - 'MAX_EMPRESTIMOS_ATIVOS': Empréstimos em aberto por usuário
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "Sistema Biblioteca API"
    APP_VERSION: str = "1.0.0"
    SERVER_PORT: int = 8080
    PROD_SERVER_URL: str = "https://sistema-biblioteca-api.onrender.com"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = Field(..., min_length=16)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)

    DB_PATH: str = "biblioteca.db"

    ADMIN_USUARIO: str = "admin"
    ADMIN_SENHA: Optional[str] = None
    ADMIN_EMAIL: str = "admin@biblioteca.com"

    PRAZO_EMPRESTIMO_DIAS: int = Field(14, ge=1)
    MAX_PRAZO_EMPRESTIMO_DIAS: int = Field(60, ge=1)
    MAX_EMPRESTIMOS_ATIVOS: int = Field(5, ge=1)


settings = Settings()
